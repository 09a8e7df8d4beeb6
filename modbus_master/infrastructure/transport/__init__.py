"""Transport layer implementations."""

from .frame_register_reader import FrameRegisterReader

__all__ = ["FrameRegisterReader"]
