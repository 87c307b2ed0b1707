"""Fixed-size frame accumulation for variably-sized audio callbacks."""

from __future__ import annotations
from typing import Iterator, Optional

import numpy as np

from ..logger import get_logger

logger = get_logger(__name__)


class FrameBuffer:
    """Accumulates incoming audio chunks into fixed-length analysis frames.

    Samples are never dropped or duplicated: whatever does not fill a whole
    frame is kept for the next :meth:`push`.
    """

    DEFAULT_FRAME_LENGTH = 2048

    def __init__(self, frame_length: int = DEFAULT_FRAME_LENGTH) -> None:
        """Initialize the buffer.

        Args:
            frame_length: Number of samples per emitted frame

        Raises:
            ValueError: If frame_length is not positive
        """
        if frame_length <= 0:
            raise ValueError("frame_length must be positive")
        self._frame_length = int(frame_length)
        self._pending = np.zeros(0, dtype=np.float32)

    @property
    def frame_length(self) -> int:
        return self._frame_length

    @property
    def pending(self) -> int:
        """Number of leftover samples waiting for the next frame."""
        return int(self._pending.size)

    def push(self, chunk: Optional[np.ndarray]) -> Iterator[np.ndarray]:
        """Append a chunk and return an iterator over every complete frame.

        The chunk is buffered immediately; frames are cut lazily as the
        iterator is consumed, so an unconsumed iterator loses nothing.

        Args:
            chunk: Audio samples (1-D, or frames x channels), or None

        Returns:
            Iterator of float32 arrays of exactly ``frame_length`` samples,
            oldest first
        """
        if chunk is not None:
            self._append(chunk)
        return self._drain()

    def _append(self, chunk) -> None:
        samples = np.asarray(chunk, dtype=np.float32)
        if samples.ndim > 1:
            # Extract mono audio data (take first channel if multi-channel)
            samples = samples[:, 0]
        if samples.size:
            self._pending = np.concatenate((self._pending, samples.ravel()))

    def _drain(self) -> Iterator[np.ndarray]:
        while self._pending.size >= self._frame_length:
            frame = self._pending[: self._frame_length].copy()
            self._pending = self._pending[self._frame_length :]
            yield frame

    def reset(self) -> None:
        """Discard leftover samples."""
        if self._pending.size:
            logger.debug(f"Discarding {self._pending.size} buffered samples")
        self._pending = np.zeros(0, dtype=np.float32)
