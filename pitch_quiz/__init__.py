"""Pitch Quiz: real-time ear training from microphone input."""

__version__ = "0.1.0"
