"""Query pipeline stages."""

from ..attrib.capabilities import Direction
from .stream import GroupedStream, Projection, Stream

__all__ = ["Direction", "GroupedStream", "Projection", "Stream"]
