"""
Base classes for the Fitbit exporter.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional


class FitbitExportError(Exception):
    """Base exception for exporter errors."""

    pass


class RequestError(FitbitExportError):
    """A Fitbit request returned a non-success HTTP status."""

    def __init__(
        self,
        message: str,
        status: int,
        status_text: str = "",
        body: str = "",
        url: Optional[str] = None,
    ):
        super().__init__(f"{message} (HTTP {status} {status_text})".rstrip())
        self.status = status
        self.status_text = status_text
        self.body = body
        self.url = url


class ReadArchiveError(FitbitExportError):
    """The Takeout archive directory or one of its files could not be read."""

    pass


class InvalidDateFormat(FitbitExportError, ValueError):
    """An archive timestamp does not match MM/DD/YY HH:MM:SS."""

    def __init__(self, value: Any):
        super().__init__(f"Invalid date format: {value!r}")
        self.value = value


class ConfigError(FitbitExportError, ValueError):
    """Missing or invalid exporter configuration."""

    pass


@dataclass
class Activity:
    """A GPS activity ready for download."""

    id: str
    name: str
    start_date_time: str
    tcx_link: str

    @property
    def filename(self) -> str:
        """Generate the target filename for this activity."""
        return f"activity-{self.start_date_time}-{self.id}.tcx"


@dataclass
class ExportSummary:
    """Counters for a single export run."""

    total_records: int = 0
    gps_activities: int = 0
    downloaded: int = 0
    skipped: int = 0


class ActivitySource(ABC):
    """Abstract base class for activity sources."""

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Return source identifier (e.g., 'api', 'archive')."""
        pass

    @abstractmethod
    def fetch_records(self) -> List[Dict[str, Any]]:
        """
        Fetch every raw activity record for this run.

        Returns:
            Raw records in the order the source produced them.
        """
        pass

    @abstractmethod
    def select_gps_activities(self, records: List[Dict[str, Any]]) -> List[Activity]:
        """
        Keep records with GPS data and normalize them.

        Args:
            records: Raw records returned by fetch_records().

        Returns:
            Normalized activities, in input order.
        """
        pass
