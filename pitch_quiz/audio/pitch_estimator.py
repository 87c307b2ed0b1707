"""Pitch estimation for fixed-length analysis frames."""

from __future__ import annotations
from typing import ClassVar, Optional

import aubio
import numpy as np

from ..logger import get_logger
from ..note_types import Detection
from ..core.interfaces import IPitchEstimator

logger = get_logger(__name__)


class AubioPitchEstimator(IPitchEstimator):
    """Wraps an ``aubio.pitch`` detector as ``(frame, sample_rate) -> Detection``.

    Window and hop are both the frame length, so every frame is analysed
    independently of the ones before it.
    """

    DEFAULT_METHOD: ClassVar[str] = "yin"
    DEFAULT_TOLERANCE: ClassVar[float] = 0.8

    def __init__(
        self,
        frame_length: int = 2048,
        sample_rate: int = 44100,
        method: str = DEFAULT_METHOD,
        tolerance: float = DEFAULT_TOLERANCE,
    ) -> None:
        """Initialize the estimator.

        Args:
            frame_length: Samples per analysis frame
            sample_rate: Initial sample rate in Hz
            method: aubio pitch method (e.g. 'yin', 'yinfft')
            tolerance: aubio pitch detection tolerance (0.0 to 1.0)
        """
        self._frame_length = frame_length
        self._method = method
        self._tolerance = tolerance
        self._sample_rate: Optional[int] = None
        self._detector = None
        self._configure(sample_rate)

    def _configure(self, sample_rate: int) -> None:
        if sample_rate <= 0:
            raise ValueError("Sample rate must be positive")
        self._sample_rate = int(sample_rate)
        self._detector = aubio.pitch(
            self._method, self._frame_length, self._frame_length, self._sample_rate
        )
        self._detector.set_unit("Hz")
        self._detector.set_tolerance(self._tolerance)
        logger.info(
            f"Pitch estimator initialized: method={self._method}, "
            f"frame_length={self._frame_length}, sample_rate={self._sample_rate}"
        )

    @property
    def sample_rate(self) -> Optional[int]:
        return self._sample_rate

    def estimate(self, frame: np.ndarray, sample_rate: int) -> Detection:
        """Estimate the pitch of one frame.

        Args:
            frame: Exactly ``frame_length`` samples
            sample_rate: Sample rate of the frame in Hz

        Returns:
            Detection with frequency None when aubio finds no pitch
        """
        if sample_rate != self._sample_rate:
            logger.info(
                f"Updating pitch estimator sample rate from {self._sample_rate} to {sample_rate} Hz"
            )
            self._configure(sample_rate)

        if frame.dtype != np.float32:
            frame = frame.astype(np.float32)

        pitch = float(self._detector(frame)[0])
        confidence = float(self._detector.get_confidence())
        return Detection(
            frequency=pitch if pitch > 0 else None,
            confidence=max(0.0, min(1.0, confidence)),
        )
