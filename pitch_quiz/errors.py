"""Exception types for Pitch Quiz."""


class PitchQuizError(Exception):
    """Base class for all Pitch Quiz errors."""


class MicrophoneError(PitchQuizError):
    """Audio input could not be opened (no device, permission denied, driver error).

    This is terminal for a session: it is reported once and never retried.
    """


class ConfigError(PitchQuizError):
    """Unknown configuration section or invalid configuration value."""
