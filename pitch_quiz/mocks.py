"""Stand-ins for the audio and timing collaborators, used by unit tests."""

from typing import Callable, List, Optional

import numpy as np

from .core.interfaces import IAudioInput, IPitchEstimator
from .core.scheduler import IScheduler, ScheduledCall
from .note_types import Detection
from .ui import BasePresentation


class MockAudioInput(IAudioInput):
    """Audio input whose chunks are fed manually with :meth:`feed`."""

    def __init__(self, sample_rate: int = 44100, fail_with: Optional[Exception] = None):
        self._sample_rate = sample_rate
        self._fail_with = fail_with
        self.callback: Optional[Callable[[np.ndarray], None]] = None
        self.running = False
        self.stop_calls = 0

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    def start(self, callback):
        if self._fail_with is not None:
            raise self._fail_with
        self.callback = callback
        self.running = True

    def stop(self):
        self.stop_calls += 1
        self.running = False

    def is_running(self) -> bool:
        return self.running

    def feed(self, chunk) -> None:
        """Deliver a chunk as if it came from the audio thread."""
        if self.callback:
            self.callback(np.asarray(chunk, dtype=np.float32))


class MockPitchEstimator(IPitchEstimator):
    """Reads the answer out of the frame: first sample is Hz, second is confidence."""

    def __init__(self):
        self.frames: List[np.ndarray] = []

    def estimate(self, frame: np.ndarray, sample_rate: int) -> Detection:
        self.frames.append(frame)
        frequency = float(frame[0])
        return Detection(
            frequency=frequency if frequency > 0 else None,
            confidence=float(frame[1]),
        )


class _ManualCall(ScheduledCall):
    def __init__(self, delay: float, callback: Callable[[], None]):
        self.delay = delay
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler(IScheduler):
    """Scheduler whose timers only fire when the test calls :meth:`fire_pending`."""

    def __init__(self):
        self.calls: List[_ManualCall] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        call = _ManualCall(delay, callback)
        self.calls.append(call)
        return call

    def cancel_all(self) -> None:
        for call in self.pending:
            call.cancel()

    @property
    def pending(self) -> List[_ManualCall]:
        return [c for c in self.calls if not c.cancelled and not c.fired]

    def fire_pending(self) -> int:
        """Run every pending call, as if its delay elapsed."""
        due = self.pending
        for call in due:
            call.fired = True
            call.callback()
        return len(due)


class RecordingPresentation(BasePresentation):
    """Presentation that records every display event in order."""

    def __init__(self, config=None):
        super().__init__(config)
        self.log: List[tuple] = []

    def target_changed(self, letter: str) -> None:
        super().target_changed(letter)
        self.log.append(("target", letter))

    def detection_updated(self, text: str) -> None:
        super().detection_updated(text)
        self.log.append(("detection", text))

    def result_changed(self, matched) -> None:
        super().result_changed(matched)
        self.log.append(("result", matched))

    def show_error(self, message: str) -> None:
        super().show_error(message)
        self.log.append(("error", message))

    def of(self, kind: str) -> List:
        return [value for k, value in self.log if k == kind]

