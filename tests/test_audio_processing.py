import random

import numpy as np
import pytest
import soundfile as sf

from pitch_quiz.audio.pitch_estimator import AubioPitchEstimator
from pitch_quiz.audio.wav_input import WavFileInput
from pitch_quiz.errors import MicrophoneError
from pitch_quiz.mocks import RecordingPresentation
from pitch_quiz.note_types import NotationConfig
from pitch_quiz.session import PracticeSession

SAMPLE_RATE = 44100


def sine(frequency, seconds, sample_rate=SAMPLE_RATE, amplitude=0.5):
    t = np.arange(int(seconds * sample_rate)) / sample_rate
    return (amplitude * np.sin(2 * np.pi * frequency * t)).astype(np.float32)


@pytest.mark.parametrize("frequency", [196.0, 261.63, 440.0])
def test_estimator_finds_pure_tones(frequency):
    estimator = AubioPitchEstimator(frame_length=2048, sample_rate=SAMPLE_RATE)
    detection = estimator.estimate(sine(frequency, 2048 / SAMPLE_RATE), SAMPLE_RATE)
    assert detection.frequency == pytest.approx(frequency, rel=0.01)
    assert detection.confidence > 0.95


def test_estimator_reports_silence_as_absent_or_unconfident():
    estimator = AubioPitchEstimator(frame_length=2048, sample_rate=SAMPLE_RATE)
    detection = estimator.estimate(np.zeros(2048, dtype=np.float32), SAMPLE_RATE)
    assert detection.frequency is None or detection.confidence < 0.95


def test_estimator_follows_sample_rate_changes():
    estimator = AubioPitchEstimator(frame_length=2048, sample_rate=SAMPLE_RATE)
    detection = estimator.estimate(sine(440.0, 2048 / 48000, sample_rate=48000), 48000)
    assert estimator.sample_rate == 48000
    assert detection.frequency == pytest.approx(440.0, rel=0.01)


def test_wav_replay_through_session(tmp_path):
    wav_path = tmp_path / "a4.wav"
    sf.write(str(wav_path), sine(440.0, 0.5), SAMPLE_RATE)

    audio = WavFileInput(str(wav_path), realtime=False)
    ui = RecordingPresentation(NotationConfig(include_accidentals=True))
    session = PracticeSession(audio, ui, cooldown_seconds=5.0, rng=random.Random(1))
    session.engine.current_target = "A"

    session.start()
    try:
        audio.wait(timeout=5)
        session.process_pending()
    finally:
        session.stop()

    assert ui.of("result")[-1] is True
    assert "(A4)" in ui.detection_text
    assert session.engine.matches == 1


def test_missing_wav_file_is_a_microphone_error(tmp_path):
    with pytest.raises(MicrophoneError):
        WavFileInput(str(tmp_path / "missing.wav"))
