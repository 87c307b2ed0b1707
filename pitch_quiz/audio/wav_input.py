"""WAV file replay as an audio input, for running without a microphone."""

from __future__ import annotations
import threading
import time
from typing import Callable, List, Optional

import numpy as np
import soundfile as sf

from ..logger import get_logger
from ..errors import MicrophoneError
from ..core.interfaces import IAudioInput

logger = get_logger(__name__)


class WavFileInput(IAudioInput):
    """Provides audio by replaying a WAV file in variably-sized blocks.

    Useful without a microphone. Blocks cycle through ``block_sizes`` so the
    downstream framing sees uneven chunks, like a real audio callback.
    """

    def __init__(
        self,
        file_path: str,
        block_sizes: Optional[List[int]] = None,
        loop: bool = False,
        gain: float = 1.0,
        realtime: bool = True,
    ) -> None:
        """Initialize the WAV input.

        Raises:
            MicrophoneError: If the file cannot be opened
        """
        self._file_path = file_path
        self._block_sizes = block_sizes or [128, 480, 1024]
        self._loop = loop
        self._gain = gain
        self._realtime = realtime
        self._callback: Optional[Callable[[np.ndarray], None]] = None
        self._running = False
        self._thread: Optional[threading.Thread] = None

        try:
            info = sf.info(self._file_path)
        except (RuntimeError, OSError) as e:
            raise MicrophoneError(f"Cannot open audio file {file_path}: {e}") from e
        self._sample_rate = int(info.samplerate)

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    def is_running(self) -> bool:
        return self._running

    def start(self, callback: Callable[[np.ndarray], None]) -> None:
        if self._running:
            return
        self._callback = callback
        self._running = True
        self._thread = threading.Thread(target=self._stream_data, daemon=True)
        self._thread.start()
        logger.info(f"Replaying {self._file_path} at {self._sample_rate} Hz")

    def stop(self) -> None:
        self._running = False
        if self._thread and self._thread is not threading.current_thread():
            self._thread.join()
        self._thread = None

    def wait(self, timeout: Optional[float] = None) -> None:
        """Block until a non-looping replay has delivered the whole file."""
        if self._thread:
            self._thread.join(timeout)

    def _stream_data(self) -> None:
        block_index = 0
        try:
            with sf.SoundFile(self._file_path) as f:
                while self._running:
                    size = self._block_sizes[block_index % len(self._block_sizes)]
                    block_index += 1
                    data = f.read(size, dtype="float32", always_2d=True)
                    if len(data) == 0:
                        if self._loop:
                            f.seek(0)
                            continue
                        break

                    chunk = data[:, 0]
                    if self._gain != 1.0:
                        chunk = chunk * self._gain

                    if self._callback:
                        self._callback(chunk)

                    if self._realtime:
                        # Simulate real-time playback speed
                        time.sleep(len(chunk) / self._sample_rate)
        except (RuntimeError, OSError) as e:
            logger.error(f"Error streaming WAV file: {e}")
        finally:
            self._running = False
