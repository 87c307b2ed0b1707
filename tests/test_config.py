import json

import pytest

from pitch_quiz.core.config import (
    ConfigManager,
    validate_frame_length,
    validate_match_settings,
)
from pitch_quiz.errors import ConfigError
from pitch_quiz.note_types import NotationScheme


def test_defaults_are_written_on_first_use(tmp_path):
    manager = ConfigManager(str(tmp_path))

    for name in ("audio_input", "notation", "match_engine"):
        assert (tmp_path / f"{name}.json").exists()
    engine = manager.get_config("match_engine")
    assert engine["confidence_threshold"] == 0.95
    assert engine["cooldown_seconds"] == 1.2
    assert manager.get_config("audio_input")["frame_length"] == 2048


def test_saved_values_are_loaded_and_missing_keys_filled(tmp_path):
    (tmp_path / "match_engine.json").write_text(json.dumps({"cooldown_seconds": 0.2}))

    engine = ConfigManager(str(tmp_path)).get_config("match_engine")

    assert engine["cooldown_seconds"] == 0.2
    assert engine["confidence_threshold"] == 0.95


def test_corrupt_file_falls_back_to_defaults(tmp_path):
    (tmp_path / "notation.json").write_text("{not json")
    manager = ConfigManager(str(tmp_path))
    assert manager.get_config("notation")["include_accidentals"] is False


def test_update_persists(tmp_path):
    manager = ConfigManager(str(tmp_path))
    assert manager.update_config("notation", {"use_alternative_notation": True})

    reloaded = ConfigManager(str(tmp_path))
    assert reloaded.notation_config().scheme is NotationScheme.ALTERNATIVE


def test_reset_restores_defaults(tmp_path):
    manager = ConfigManager(str(tmp_path))
    manager.update_config("match_engine", {"avoid_repeat": True})
    manager.reset_config("match_engine")
    assert manager.get_config("match_engine")["avoid_repeat"] is False


def test_unknown_names_and_keys_raise(tmp_path):
    manager = ConfigManager(str(tmp_path))
    with pytest.raises(ConfigError):
        manager.get_config("scores")
    with pytest.raises(ConfigError):
        manager.update_config("notation", {"use_flats": True})
    with pytest.raises(ConfigError):
        manager.reset_config("scores")


def test_get_config_returns_a_copy(tmp_path):
    manager = ConfigManager(str(tmp_path))
    manager.get_config("notation")["include_accidentals"] = True
    assert manager.notation_config().include_accidentals is False


@pytest.mark.parametrize(
    "threshold, cooldown", [(-0.1, 1.0), (1.1, 1.0), (0.9, -0.5)]
)
def test_validate_match_settings_rejects_out_of_range(threshold, cooldown):
    with pytest.raises(ConfigError):
        validate_match_settings(threshold, cooldown)


@pytest.mark.parametrize(
    "threshold, cooldown, avoid_repeat",
    [("0.9", 1.0, False), (0.9, "1.2", False), (True, 1.0, False), (0.9, 1.0, "yes")],
)
def test_validate_match_settings_rejects_wrong_types(threshold, cooldown, avoid_repeat):
    with pytest.raises(ConfigError):
        validate_match_settings(threshold, cooldown, avoid_repeat)


@pytest.mark.parametrize("frame_length", [0, -2048, 2048.0, "2048", True])
def test_validate_frame_length_rejects_bad_values(frame_length):
    with pytest.raises(ConfigError):
        validate_frame_length(frame_length)


def test_validate_frame_length_accepts_positive_int():
    validate_frame_length(2048)


def test_non_boolean_notation_toggle_raises(tmp_path):
    (tmp_path / "notation.json").write_text(json.dumps({"include_accidentals": "false"}))
    manager = ConfigManager(str(tmp_path))
    with pytest.raises(ConfigError):
        manager.notation_config()
