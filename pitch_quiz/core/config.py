"""Configuration management for Pitch Quiz components."""

from typing import Dict, Any, Optional
import json
import os
from pathlib import Path

from ..logger import get_logger
from ..errors import ConfigError
from ..note_types import NotationConfig, NotationScheme

logger = get_logger(__name__)

DEFAULT_CONFIGS: Dict[str, Dict[str, Any]] = {
    "audio_input": {
        "device_id": None,
        "sample_rate": 44100,
        "frame_length": 2048,
        "channels": 1,
    },
    "notation": {
        "include_accidentals": False,
        "use_alternative_notation": False,
    },
    "match_engine": {
        "confidence_threshold": 0.95,
        "cooldown_seconds": 1.2,
        "avoid_repeat": False,
    },
}


class ConfigManager:
    """Configuration manager for Pitch Quiz components."""

    def __init__(self, config_dir: Optional[str] = None):
        """Initialize the configuration manager.

        Args:
            config_dir: Directory to store configuration files, or None to use default
        """
        if config_dir is None:
            # Use ~/.config/pitch_quiz by default
            home = os.path.expanduser("~")
            config_dir = os.path.join(home, ".config", "pitch_quiz")

        self.config_dir = Path(config_dir)
        self.config_dir.mkdir(parents=True, exist_ok=True)

        self.default_configs = {
            name: values.copy() for name, values in DEFAULT_CONFIGS.items()
        }

        # Load existing configurations or create default ones
        self.configs: Dict[str, Dict[str, Any]] = {}
        for config_name, default_config in self.default_configs.items():
            self.configs[config_name] = self.load_config(config_name, default_config)

    def load_config(self, name: str, default_config: Dict[str, Any]) -> Dict[str, Any]:
        """Load configuration from file or create default.

        Args:
            name: Configuration name
            default_config: Default configuration to use if file doesn't exist

        Returns:
            Configuration dictionary
        """
        config_file = self.config_dir / f"{name}.json"

        if not config_file.exists():
            config = default_config.copy()
            self.save_config(name, config)
            return config

        try:
            with open(config_file, "r") as f:
                config = json.load(f)
            logger.info(f"Loaded configuration from {config_file}")
        except (OSError, ValueError) as e:
            logger.error(f"Error loading configuration from {config_file}: {e}")
            return default_config.copy()

        if not isinstance(config, dict):
            logger.error(f"Ignoring malformed configuration in {config_file}")
            return default_config.copy()

        # Ensure all default keys are present
        for key, value in default_config.items():
            config.setdefault(key, value)
        return config

    def save_config(self, name: str, config: Dict[str, Any]) -> bool:
        """Save configuration to file.

        Args:
            name: Configuration name
            config: Configuration dictionary

        Returns:
            True if saved successfully, False otherwise
        """
        config_file = self.config_dir / f"{name}.json"

        try:
            with open(config_file, "w") as f:
                json.dump(config, f, indent=2)
            logger.info(f"Saved configuration to {config_file}")
            return True
        except OSError as e:
            logger.error(f"Error saving configuration to {config_file}: {e}")
            return False

    def get_config(self, name: str) -> Dict[str, Any]:
        """Get configuration by name.

        Raises:
            ConfigError: If the configuration name is unknown
        """
        if name not in self.configs:
            raise ConfigError(f"Unknown configuration: {name}")
        return self.configs[name].copy()

    def update_config(self, name: str, updates: Dict[str, Any]) -> bool:
        """Update configuration and save to file.

        Args:
            name: Configuration name
            updates: Dictionary of updates to apply

        Returns:
            True if updated and saved successfully, False otherwise

        Raises:
            ConfigError: If the configuration name or a key is unknown
        """
        if name not in self.configs:
            raise ConfigError(f"Unknown configuration: {name}")

        unknown = set(updates) - set(self.default_configs[name])
        if unknown:
            raise ConfigError(
                f"Unknown keys for configuration '{name}': {', '.join(sorted(unknown))}"
            )

        self.configs[name].update(updates)
        return self.save_config(name, self.configs[name])

    def reset_config(self, name: str) -> bool:
        """Reset configuration to default.

        Raises:
            ConfigError: If the configuration name is unknown
        """
        if name not in self.default_configs:
            raise ConfigError(f"Unknown configuration: {name}")

        self.configs[name] = self.default_configs[name].copy()
        return self.save_config(name, self.configs[name])

    def notation_config(self) -> NotationConfig:
        """Build a NotationConfig from the 'notation' section.

        Raises:
            ConfigError: If a toggle is not a boolean
        """
        notation = self.configs["notation"]
        _require_bool("include_accidentals", notation["include_accidentals"])
        _require_bool("use_alternative_notation", notation["use_alternative_notation"])
        return NotationConfig(
            include_accidentals=notation["include_accidentals"],
            scheme=(
                NotationScheme.ALTERNATIVE
                if notation["use_alternative_notation"]
                else NotationScheme.WESTERN
            ),
        )


def _require_number(name: str, value: Any) -> None:
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{name} must be a number, got {value!r}")


def _require_bool(name: str, value: Any) -> None:
    if not isinstance(value, bool):
        raise ConfigError(f"{name} must be true or false, got {value!r}")


def validate_frame_length(frame_length: Any) -> None:
    """Check the analysis frame length.

    Raises:
        ConfigError: If it is not a positive integer
    """
    if isinstance(frame_length, bool) or not isinstance(frame_length, int):
        raise ConfigError(f"frame_length must be an integer, got {frame_length!r}")
    if frame_length <= 0:
        raise ConfigError("frame_length must be positive")


def validate_match_settings(
    confidence_threshold: float, cooldown_seconds: float, avoid_repeat: bool = False
) -> None:
    """Check the tunable match engine constants.

    Raises:
        ConfigError: If a value has the wrong type or is out of range
    """
    _require_number("confidence_threshold", confidence_threshold)
    _require_number("cooldown_seconds", cooldown_seconds)
    _require_bool("avoid_repeat", avoid_repeat)
    if not 0.0 <= confidence_threshold <= 1.0:
        raise ConfigError("confidence_threshold must be between 0.0 and 1.0")
    if cooldown_seconds < 0:
        raise ConfigError("cooldown_seconds must not be negative")
