"""
Takeout archive source.
Reads exercise*.json files exported from a Fitbit account.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..base import Activity, ActivitySource, ReadArchiveError
from ..config import ARCHIVE_FILE_PREFIX, ARCHIVE_FILE_SUFFIX, ARCHIVE_TCX_URL_TEMPLATE
from ..filters import select_archive_gps_activities


class ArchiveSource(ActivitySource):
    """Source reading activity records from a local Takeout directory."""

    def __init__(
        self,
        archive_dir: Path,
        tcx_url_template: str = ARCHIVE_TCX_URL_TEMPLATE,
        logger: Optional[logging.Logger] = None,
    ):
        self.archive_dir = Path(archive_dir)
        self.tcx_url_template = tcx_url_template
        self.logger = logger or logging.getLogger(__name__)

    @property
    def source_name(self) -> str:
        return "archive"

    def list_archive_files(self) -> List[Path]:
        """Return exercise*.json files in the archive directory, sorted by name."""
        try:
            entries = list(self.archive_dir.iterdir())
        except OSError as e:
            raise ReadArchiveError(
                f"Could not read archive directory {self.archive_dir}: {e}"
            ) from e

        return sorted(
            path
            for path in entries
            if path.name.startswith(ARCHIVE_FILE_PREFIX)
            and path.name.endswith(ARCHIVE_FILE_SUFFIX)
            and path.is_file()
        )

    def fetch_records(self) -> List[Dict[str, Any]]:
        """
        Concatenate the JSON arrays of every archive file.

        Files holding valid JSON that is not an array are skipped with a warning.

        Raises:
            ReadArchiveError: If the directory or a file cannot be read or parsed.
        """
        records: List[Dict[str, Any]] = []

        for path in self.list_archive_files():
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
                raise ReadArchiveError(f"Could not read archive file {path}: {e}") from e

            if not isinstance(data, list):
                self.logger.warning(
                    f"⚠️ Archive file is not a JSON array, skipping: file={path.name}"
                )
                continue

            records.extend(data)
            self.logger.debug(f"Read archive file: file={path.name} count={len(data)}")

        return records

    def select_gps_activities(self, records: List[Dict[str, Any]]) -> List[Activity]:
        return select_archive_gps_activities(records, self.tcx_url_template)
