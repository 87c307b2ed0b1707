"""Core components for the Pitch Quiz application."""

# Import interfaces for easier access
from .interfaces import (
    IAudioInput,
    IPitchEstimator,
    IPresentation,
)

__all__ = ["IAudioInput", "IPitchEstimator", "IPresentation"]
