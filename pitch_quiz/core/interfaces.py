"""Defines the collaborator interfaces for the Pitch Quiz pipeline."""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Callable, Optional

import numpy as np

from ..note_types import Detection, NotationConfig


class IAudioInput(ABC):
    """Interface for audio input handlers."""

    @abstractmethod
    def start(self, callback: Callable[[np.ndarray], None]) -> None:
        """Start capturing audio, delivering mono sample chunks to ``callback``.

        Raises:
            MicrophoneError: If the input cannot be opened
        """
        pass

    @abstractmethod
    def stop(self) -> None:
        """Stop capturing audio."""
        pass

    @abstractmethod
    def is_running(self) -> bool:
        """Check if audio is running."""
        pass

    @property
    @abstractmethod
    def sample_rate(self) -> int:
        """The sample rate of the audio stream."""
        pass


class IPitchEstimator(ABC):
    """Interface for pitch detection algorithms."""

    @abstractmethod
    def estimate(self, frame: np.ndarray, sample_rate: int) -> Detection:
        """Estimate frequency and confidence for one analysis frame."""
        pass


class IPresentation(ABC):
    """Interface for whatever renders the quiz and owns the notation settings."""

    @abstractmethod
    def notation_config(self) -> NotationConfig:
        """Return the current notation settings."""
        pass

    @abstractmethod
    def target_changed(self, letter: str) -> None:
        """Show a new target pitch class."""
        pass

    @abstractmethod
    def detection_updated(self, text: str) -> None:
        """Show the latest detection text (empty string clears it)."""
        pass

    @abstractmethod
    def result_changed(self, matched: Optional[bool]) -> None:
        """Show match (True), mismatch (False), or no result (None)."""
        pass

    @abstractmethod
    def show_error(self, message: str) -> None:
        """Show a persistent, session-ending error message."""
        pass

    @abstractmethod
    def on_config_changed(self, callback: Callable[[], None]) -> None:
        """Register a callback run whenever a notation toggle changes."""
        pass
