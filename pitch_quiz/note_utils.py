"""Utility functions for mapping frequencies to note names."""

import math
import re
from typing import Callable, List, Optional, Tuple, Union

import numpy as np

from .logger import get_logger
from .note_types import NotationConfig, NotationScheme, NoteName

# Get logger for this module
logger = get_logger(__name__)

A4_FREQUENCY = 440.0
A4_MIDI = 69

# (western, alternative) letter for each pitch class, starting at C
NOTE_SET: Tuple[Tuple[str, str], ...] = (
    ("C", "C"),
    ("C#", "Cis"),
    ("D", "D"),
    ("D#", "Dis"),
    ("E", "E"),
    ("F", "F"),
    ("F#", "Fis"),
    ("G", "G"),
    ("G#", "Gis"),
    ("A", "A"),
    ("A#", "Ais"),
    ("B", "H"),  # Western B is German H
)

NATURAL_INDICES = (0, 2, 4, 5, 7, 9, 11)

# Octave suffix, including negative octaves such as 'C-1'
OCTAVE_PATTERN = re.compile(r"-?[0-9]+$")


def _column(scheme: NotationScheme) -> int:
    return 1 if scheme is NotationScheme.ALTERNATIVE else 0


def letters_for(scheme: NotationScheme) -> List[str]:
    """All 12 pitch class letters under ``scheme``, in chromatic order from C."""
    column = _column(scheme)
    return [entry[column] for entry in NOTE_SET]


def pitch_class_index(letter: str) -> Optional[int]:
    """Return the chromatic index (C=0) of a letter in either scheme, or None."""
    for index, entry in enumerate(NOTE_SET):
        if letter in entry:
            return index
    return None


def is_accidental(letter: str) -> bool:
    """True if ``letter`` names a sharp pitch class in either scheme."""
    index = pitch_class_index(letter)
    return index is not None and index not in NATURAL_INDICES


def frequency_to_note(
    hz: Optional[float], config: NotationConfig
) -> Optional[NoteName]:
    """Convert a frequency to a note name under the given notation.

    Args:
        hz: Frequency in Hz, or None
        config: Active notation settings

    Returns:
        The nearest note, or None if the frequency is absent, non-positive,
        not finite, or an accidental while accidentals are excluded.

    Note:
        Accidentals are discarded when excluded, never rounded to the
        nearest natural.
    """
    if hz is None or not math.isfinite(hz) or hz <= 0:
        return None

    # Calculate half steps from A4 (A4 is 69 in MIDI)
    semitones = 12 * np.log2(hz / A4_FREQUENCY)
    midi_number = int(round(A4_MIDI + semitones))

    note_idx = (midi_number + 1200) % 12
    octave = (midi_number // 12) - 1

    letter = NOTE_SET[note_idx][_column(config.scheme)]
    if not config.include_accidentals and is_accidental(letter):
        return None

    return NoteName(letter=letter, octave=octave)


def enumerate_vocabulary(config: NotationConfig) -> List[str]:
    """Return the ordered pitch class letters currently available as targets.

    The 7 naturals when accidentals are excluded, otherwise all 12. Letters
    use the same alphabet as :func:`frequency_to_note`.
    """
    letters = letters_for(config.scheme)
    if config.include_accidentals:
        return letters
    return [letter for letter in letters if not is_accidental(letter)]


def extract_letter(note: Union[NoteName, str]) -> str:
    """Strip the octave from a note, e.g. 'C#4' -> 'C#', 'Fis-1' -> 'Fis'."""
    if isinstance(note, NoteName):
        return note.letter
    return OCTAVE_PATTERN.sub("", str(note).strip())


class NoteMapper:
    """Frequency to note mapping bound to a live notation config accessor.

    The accessor is called on every operation so that configuration changes
    take effect on the next detection.
    """

    def __init__(self, config_provider: Callable[[], NotationConfig]) -> None:
        self._config_provider = config_provider

    @property
    def config(self) -> NotationConfig:
        return self._config_provider()

    def frequency_to_note(self, hz: Optional[float]) -> Optional[NoteName]:
        note = frequency_to_note(hz, self.config)
        logger.debug("Mapped %s Hz -> %s", hz, note)
        return note

    def vocabulary(self) -> List[str]:
        return enumerate_vocabulary(self.config)

    @staticmethod
    def extract_letter(note: Union[NoteName, str]) -> str:
        return extract_letter(note)
