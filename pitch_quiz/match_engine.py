import math
import random
from typing import Optional

from .core.events import DisplayEvents
from .core.scheduler import IScheduler, ScheduledCall
from .core.config import validate_match_settings
from .note_utils import NoteMapper, pitch_class_index
from .logger import get_logger
from .note_types import Detection, MatchState, NoteName

# Get logger for this module
logger = get_logger(__name__)

NO_VALUE = "-"


def format_detection_text(frequency: Optional[float], note: Optional[NoteName]) -> str:
    """Render a detection for display, e.g. 'Detected: 392.00 Hz (G4)'."""
    pitch_display = f"{frequency:.2f} Hz" if frequency is not None else NO_VALUE
    note_display = str(note) if note is not None else NO_VALUE
    return f"Detected: {pitch_display} ({note_display})"


class MatchEngine:
    """Compares detected notes against a random target pitch class.

    Holds the target and the cooldown flag. After a correct match, detections
    are ignored for ``cooldown_seconds`` and then a new target is picked.
    All state changes go through the transition methods below, which must be
    called from a single (display) thread.
    """

    DEFAULT_CONFIDENCE_THRESHOLD = 0.95
    DEFAULT_COOLDOWN_SECONDS = 1.2

    def __init__(
        self,
        mapper: NoteMapper,
        scheduler: IScheduler,
        events: Optional[DisplayEvents] = None,
        confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
        cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS,
        avoid_repeat: bool = False,
        rng: Optional[random.Random] = None,
    ) -> None:
        """Initialize the engine and pick the first target.

        Args:
            mapper: Note mapper bound to the live notation settings
            scheduler: Timer source for the end of the cooldown
            events: Display event sink; listeners should already be connected
            confidence_threshold: Detections below this confidence count as no note
            cooldown_seconds: How long detections are ignored after a match
            avoid_repeat: If True, never pick the previous target twice in a row
            rng: Random source, injectable for tests

        Raises:
            ConfigError: If a setting has the wrong type or is out of range
        """
        validate_match_settings(confidence_threshold, cooldown_seconds, avoid_repeat)

        self.mapper = mapper
        self.events = events if events is not None else DisplayEvents()
        self.confidence_threshold = confidence_threshold
        self.cooldown_seconds = cooldown_seconds
        self.avoid_repeat = avoid_repeat
        self._scheduler = scheduler
        self._rng = rng if rng is not None else random.Random()

        self.current_target: Optional[str] = None
        self.awaiting_next = False
        self._cooldown_call: Optional[ScheduledCall] = None

        # In-memory session counters, never persisted
        self.matches = 0
        self.attempts = 0

        self.select_new_target()

    @property
    def state(self) -> MatchState:
        return MatchState.COOLDOWN if self.awaiting_next else MatchState.LISTENING

    def select_new_target(self) -> str:
        """Pick a new random target from the active vocabulary and reset the display."""
        self._cancel_cooldown()

        vocabulary = self.mapper.vocabulary()
        candidates = vocabulary
        if self.avoid_repeat and self.current_target is not None and len(vocabulary) > 1:
            previous = pitch_class_index(self.current_target)
            candidates = [
                letter for letter in vocabulary if pitch_class_index(letter) != previous
            ]

        old_target = self.current_target
        self.current_target = self._rng.choice(candidates)
        self.awaiting_next = False

        logger.debug(
            "New target note: %s (was: %s) from %d candidates",
            self.current_target,
            old_target,
            len(candidates),
        )

        self.events.emit_target_changed(self.current_target)
        self.events.emit_detection_updated("")
        self.events.emit_result_changed(None)
        return self.current_target

    def on_config_changed(self) -> str:
        """Re-pick immediately after a notation or accidental toggle.

        Re-selection is unconditional, including during a cooldown (whose
        pending timer is cancelled first).
        """
        logger.info("Notation settings changed, picking a new target")
        return self.select_new_target()

    def on_detection(self, detection: Detection) -> None:
        """Gate a raw estimator result on confidence, map it, and evaluate it."""
        frequency = detection.frequency
        # NaN, infinite, zero and negative pitches are shown as "-", never raw
        usable = frequency is not None and math.isfinite(frequency) and frequency > 0
        if not usable or detection.confidence < self.confidence_threshold:
            self.on_note(None)
            return
        self.on_note(self.mapper.frequency_to_note(frequency), frequency)

    def on_note(self, note: Optional[NoteName], frequency: Optional[float] = None) -> None:
        """Evaluate a mapped note (None for no usable note) against the target."""
        if self.awaiting_next:
            # Cooldown: ignore silently, no display update
            return

        text = format_detection_text(frequency, note)
        if note is None:
            self.events.emit_detection_updated(text)
            self.events.emit_result_changed(None)
            return

        self.attempts += 1
        played = self.mapper.extract_letter(note)
        if played == self.current_target:
            self.matches += 1
            logger.info(
                "NOTE MATCHED! '%s' matches target '%s' (%d/%d)",
                note,
                self.current_target,
                self.matches,
                self.attempts,
            )
            self.events.emit_detection_updated(text)
            self.events.emit_result_changed(True)
            self._start_cooldown()
        else:
            logger.debug(
                "Matching - Target: '%s' vs Played: '%s' -> NO MATCH",
                self.current_target,
                note,
            )
            self.events.emit_detection_updated(text)
            self.events.emit_result_changed(False)

    def close(self) -> None:
        """Release the pending cooldown timer, if any."""
        self._cancel_cooldown()

    def _start_cooldown(self) -> None:
        self.awaiting_next = True
        self._cooldown_call = self._scheduler.call_later(
            self.cooldown_seconds, self._on_cooldown_elapsed
        )

    def _on_cooldown_elapsed(self) -> None:
        self._cooldown_call = None
        self.select_new_target()

    def _cancel_cooldown(self) -> None:
        if self._cooldown_call is not None:
            self._cooldown_call.cancel()
            self._cooldown_call = None
