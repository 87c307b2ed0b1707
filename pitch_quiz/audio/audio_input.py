"""Live microphone input through sounddevice."""

from __future__ import annotations
from typing import Callable, ClassVar, List, Optional

import numpy as np
import sounddevice as sd

from ..logger import get_logger
from ..errors import MicrophoneError
from ..core.interfaces import IAudioInput

logger = get_logger(__name__)


class SoundDeviceInput(IAudioInput):
    """Audio input handler using the sounddevice library.

    The stream's blocksize is left to the host (0), so callbacks deliver
    variably-sized chunks; framing happens downstream.
    """

    SAMPLE_RATE: ClassVar[int] = 44100  # Hz
    CHANNELS: ClassVar[int] = 1  # Mono audio
    FALLBACK_RATES: ClassVar[List[int]] = [44100, 48000, 22050, 16000]

    def __init__(
        self,
        device_id: Optional[int] = None,
        sample_rate: Optional[int] = None,
        channels: Optional[int] = None,
        blocksize: int = 0,
    ) -> None:
        """Initialize the audio input handler.

        Args:
            device_id: Audio input device ID, or None for the default input
            sample_rate: Preferred sample rate in Hz, or None for default (44100)
            channels: Number of channels to open, or None for default (1)
            blocksize: Frames per callback, 0 lets the host choose
        """
        self._device_id = device_id
        self._sample_rate = sample_rate or self.SAMPLE_RATE
        self._channels = channels or self.CHANNELS
        self._blocksize = blocksize

        self._stream: Optional[sd.InputStream] = None
        self._callback: Optional[Callable[[np.ndarray], None]] = None
        self._running = False

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    def is_running(self) -> bool:
        return self._running

    def _candidate_rates(self) -> List[int]:
        rates = [self._sample_rate]
        rates.extend(rate for rate in self.FALLBACK_RATES if rate != self._sample_rate)
        return rates

    def _negotiate_sample_rate(self) -> int:
        """Find a sample rate the input device accepts.

        Raises:
            MicrophoneError: If no device is available or no rate is accepted
        """
        try:
            device = sd.query_devices(self._device_id, "input")
        except (sd.PortAudioError, ValueError) as e:
            raise MicrophoneError(f"No usable audio input device: {e}") from e
        logger.info(f"Using audio input device: {device['name']}")

        errors = []
        for rate in self._candidate_rates():
            try:
                sd.check_input_settings(
                    device=self._device_id, channels=self._channels, samplerate=rate
                )
                return rate
            except (sd.PortAudioError, ValueError) as e:
                logger.warning(f"Sample rate {rate} Hz not supported: {e}")
                errors.append(str(e))

        raise MicrophoneError(
            "Could not open audio input with any supported sample rate: "
            + "; ".join(errors)
        )

    def _audio_callback(
        self,
        indata: np.ndarray,
        _frames: int,
        _time_info,
        status: sd.CallbackFlags,
    ) -> None:
        """Runs on the PortAudio thread; must stay fast and non-blocking."""
        if status:
            logger.warning(f"Audio callback status: {status}")

        if self._callback:
            # Extract mono audio data (take first channel if multi-channel)
            audio_data = indata[:, 0] if indata.ndim > 1 else indata
            self._callback(audio_data.copy())

    def start(self, callback: Callable[[np.ndarray], None]) -> None:
        """Open the input stream and deliver chunks to ``callback``.

        Raises:
            MicrophoneError: If the device is missing, access is denied, or
                the stream cannot be opened. Not retried.
        """
        if self._running:
            logger.warning("Audio input already running")
            return

        self._callback = callback
        self._sample_rate = self._negotiate_sample_rate()

        try:
            self._stream = sd.InputStream(
                device=self._device_id,
                samplerate=self._sample_rate,
                blocksize=self._blocksize,
                channels=self._channels,
                dtype="float32",
                callback=self._audio_callback,
            )
            self._stream.start()
        except sd.PortAudioError as e:
            self._close_stream()
            raise MicrophoneError(f"Microphone access denied or error: {e}") from e

        self._running = True
        logger.info(f"Audio input started with sample rate {self._sample_rate} Hz")

    def stop(self) -> None:
        """Stop capturing audio."""
        if not self._running:
            return
        self._close_stream()
        self._running = False
        logger.info("Audio input stopped")

    def _close_stream(self) -> None:
        if self._stream is None:
            return
        try:
            self._stream.stop()
            self._stream.close()
        except sd.PortAudioError as e:
            logger.error(f"Error stopping audio input: {e}")
        self._stream = None
