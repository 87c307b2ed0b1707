"""Practice session wiring the audio side to the display side."""

from __future__ import annotations
import queue
import random
import time
from typing import Callable, Optional

import numpy as np

from .logger import get_logger
from .errors import MicrophoneError
from .note_types import Detection
from .note_utils import NoteMapper
from .match_engine import MatchEngine
from .audio.frame_buffer import FrameBuffer
from .core.config import validate_frame_length
from .core.events import DisplayEvents
from .core.interfaces import IAudioInput, IPitchEstimator, IPresentation
from .core.scheduler import QueueScheduler

logger = get_logger(__name__)


class PracticeSession:
    """One ear-training session: microphone in, display events out.

    The audio callback only cuts chunks into frames and puts them on
    ``channel``. Everything else (pitch estimation, note mapping, matching,
    cooldown timers) happens on the thread that calls
    :meth:`process_pending` or :meth:`run`.
    """

    def __init__(
        self,
        audio_input: IAudioInput,
        presentation: IPresentation,
        estimator: Optional[IPitchEstimator] = None,
        frame_length: int = FrameBuffer.DEFAULT_FRAME_LENGTH,
        confidence_threshold: float = MatchEngine.DEFAULT_CONFIDENCE_THRESHOLD,
        cooldown_seconds: float = MatchEngine.DEFAULT_COOLDOWN_SECONDS,
        avoid_repeat: bool = False,
        rng: Optional[random.Random] = None,
    ) -> None:
        """Initialize the session and pick the first target.

        Args:
            audio_input: Source of mono sample chunks
            presentation: Receives display events and owns the notation settings
            estimator: Pitch estimator, or None for the aubio default
            frame_length: Samples per analysis frame
            confidence_threshold: Minimum estimator confidence to score a note
            cooldown_seconds: Pause after a correct match
            avoid_repeat: Never pick the same target twice in a row
            rng: Random source for target selection

        Raises:
            ConfigError: If a frame or match setting is invalid
        """
        self.audio_input = audio_input
        self.presentation = presentation
        self.channel: queue.Queue = queue.Queue()
        self.scheduler = QueueScheduler(self.channel)
        validate_frame_length(frame_length)
        self.buffer = FrameBuffer(frame_length)

        if estimator is None:
            # Imported lazily so sessions with an injected estimator do not need aubio
            from .audio.pitch_estimator import AubioPitchEstimator

            estimator = AubioPitchEstimator(
                frame_length=frame_length, sample_rate=audio_input.sample_rate
            )
        self.estimator = estimator

        self.events = DisplayEvents()
        self.events.connect(presentation)
        presentation.on_config_changed(self.notation_changed)
        self.engine = MatchEngine(
            mapper=NoteMapper(presentation.notation_config),
            scheduler=self.scheduler,
            events=self.events,
            confidence_threshold=confidence_threshold,
            cooldown_seconds=cooldown_seconds,
            avoid_repeat=avoid_repeat,
            rng=rng,
        )

        self.running = False

    def __enter__(self) -> "PracticeSession":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    def start(self) -> None:
        """Start audio capture.

        Raises:
            MicrophoneError: Reported once to the presentation, then re-raised.
                The session never starts and is not retried.
        """
        if self.running:
            logger.warning("Session already running")
            return
        try:
            self.audio_input.start(self._on_audio_chunk)
        except MicrophoneError as e:
            logger.error(f"Could not start audio input: {e}")
            self.presentation.show_error(str(e))
            self.stop()
            raise
        self.running = True
        logger.info("Practice session started")

    def stop(self) -> None:
        """Release the audio stream and every pending timer."""
        self.audio_input.stop()
        self.scheduler.cancel_all()
        self.engine.close()
        self.buffer.reset()
        if self.running:
            logger.info(
                "Session stopped. Score: %d/%d", self.engine.matches, self.engine.attempts
            )
        self.running = False

    def notation_changed(self) -> None:
        """Call after the presentation changed a notation toggle."""
        self.engine.on_config_changed()

    def _on_audio_chunk(self, chunk: np.ndarray) -> None:
        """Audio thread: frame the chunk and hand frames to the display side."""
        for frame in self.buffer.push(chunk):
            self.channel.put_nowait(frame)

    def process_pending(self) -> int:
        """Handle everything currently queued without blocking.

        Returns:
            Number of queued items handled
        """
        handled = 0
        while True:
            try:
                item = self.channel.get_nowait()
            except queue.Empty:
                return handled
            self._dispatch(item)
            handled += 1

    def run(
        self,
        duration: Optional[float] = None,
        should_continue: Optional[Callable[[], bool]] = None,
        poll_interval: float = 0.05,
    ) -> None:
        """Block, handling queued items until the duration elapses or ``should_continue`` is False."""
        end_time = time.monotonic() + duration if duration is not None else None
        while self.running:
            if end_time is not None and time.monotonic() >= end_time:
                break
            if should_continue is not None and not should_continue():
                break
            try:
                item = self.channel.get(timeout=poll_interval)
            except queue.Empty:
                if not self.audio_input.is_running() and self.channel.empty():
                    logger.info("Audio input finished")
                    break
                continue
            self._dispatch(item)

    def _dispatch(self, item) -> None:
        if callable(item):
            item()
        else:
            self._handle_frame(item)

    def _handle_frame(self, frame: np.ndarray) -> None:
        try:
            detection = self.estimator.estimate(frame, self.audio_input.sample_rate)
        except (ValueError, RuntimeError) as e:
            logger.error(f"Pitch estimation failed, treating frame as silent: {e}")
            detection = Detection(frequency=None, confidence=0.0)
        self.engine.on_detection(detection)
