"""Activity sources for the exporter."""

from .api import ApiSource
from .archive import ArchiveSource

__all__ = ["ApiSource", "ArchiveSource"]
