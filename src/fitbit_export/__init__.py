"""
Fitbit TCX Exporter
-------------------
Downloads the TCX track of every GPS activity from the Fitbit API
or from a Takeout archive.
"""

from .base import (
    Activity,
    ActivitySource,
    ConfigError,
    ExportSummary,
    FitbitExportError,
    InvalidDateFormat,
    ReadArchiveError,
    RequestError,
)
from .client import FitbitClient
from .config import ExportConfig, build_config
from .downloader import TcxDownloader
from .exporter import export_activities
from .sources import ApiSource, ArchiveSource

__all__ = [
    "Activity",
    "ActivitySource",
    "ApiSource",
    "ArchiveSource",
    "ConfigError",
    "ExportConfig",
    "ExportSummary",
    "FitbitClient",
    "FitbitExportError",
    "InvalidDateFormat",
    "ReadArchiveError",
    "RequestError",
    "TcxDownloader",
    "build_config",
    "export_activities",
]
