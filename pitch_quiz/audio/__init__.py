"""Audio side of the pipeline: capture, framing and pitch estimation."""

from .frame_buffer import FrameBuffer

__all__ = ["FrameBuffer"]
