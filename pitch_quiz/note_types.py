"""Type definitions for the Pitch Quiz project."""

from enum import Enum
from typing import Optional
from dataclasses import dataclass


class NotationScheme(Enum):
    """Letter-naming convention applied to the 12 pitch classes."""

    WESTERN = "western"  # C, C#, ..., A#, B
    ALTERNATIVE = "alternative"  # German: C, Cis, ..., Ais, H


class MatchState(Enum):
    """States of the note matching engine."""

    LISTENING = "listening"
    COOLDOWN = "cooldown"


@dataclass
class NotationConfig:
    """User-selectable notation settings, read on every mapping call."""

    include_accidentals: bool = False
    scheme: NotationScheme = NotationScheme.WESTERN

    @property
    def use_alternative_notation(self) -> bool:
        return self.scheme is NotationScheme.ALTERNATIVE


@dataclass(frozen=True)
class NoteName:
    """A pitch class letter plus its octave in scientific pitch notation."""

    letter: str  # e.g. 'C#', 'Fis', 'H'
    octave: int  # A4 = 440 Hz, middle C is C4

    def __str__(self):
        return f"{self.letter}{self.octave}"


@dataclass
class Detection:
    """One pitch estimate for one analysis frame."""

    frequency: Optional[float]  # Hz, None when no pitch was found
    confidence: float  # Estimator confidence (0-1)
