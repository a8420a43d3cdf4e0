"""Image frames and synchronized multi-camera frame sets."""

from .visual_frame import VisualFrame
from .visual_nframe import VisualNFrame

__all__ = ["VisualFrame", "VisualNFrame"]
