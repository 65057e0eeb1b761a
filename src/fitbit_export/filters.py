"""
GPS activity filters
--------------------
Pure functions turning raw Fitbit records into normalized Activity objects.
"""
import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List

from .base import Activity, InvalidDateFormat
from .config import ARCHIVE_TCX_URL_TEMPLATE

ARCHIVE_DATE_PATTERN = re.compile(
    r"^(\d{2})/(\d{2})/(\d{2}) (\d{2}):(\d{2}):(\d{2})$"
)
# Two-digit years below this belong to the 2000s
CENTURY_PIVOT = 50

logger = logging.getLogger(__name__)


def parse_archive_datetime(value: str) -> datetime:
    """
    Parse a Takeout timestamp such as "01/15/24 08:30:00".

    Returns a naive datetime in local time.

    Raises:
        InvalidDateFormat: If the value does not match MM/DD/YY HH:MM:SS
            or does not form a valid date.
    """
    match = ARCHIVE_DATE_PATTERN.match(value) if isinstance(value, str) else None
    if not match:
        raise InvalidDateFormat(value)

    month, day, year, hour, minute, second = (int(part) for part in match.groups())
    year += 2000 if year < CENTURY_PIVOT else 1900

    try:
        return datetime(year, month, day, hour, minute, second)
    except ValueError as e:
        raise InvalidDateFormat(value) from e


def parse_api_datetime(value: str) -> datetime:
    """Parse an ISO-8601 API timestamp (with or without offset)."""
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def format_start_time(value: datetime) -> str:
    """Normalize a datetime to ISO-8601 UTC with milliseconds, e.g. 2024-01-15T08:30:00.000Z."""
    # Naive values are local time
    utc = value.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def has_gps_track(record: Dict[str, Any]) -> bool:
    """True if an API record has a TCX link and a GPS tracker feature."""
    if not record.get("tcxLink"):
        return False
    features = (record.get("source") or {}).get("trackerFeatures") or []
    return "GPS" in features


def iter_record_objects(records: List[Any]) -> Iterator[Dict[str, Any]]:
    """Yield the JSON objects of a record list, skipping other elements with a warning."""
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            logger.warning(
                f"⚠️ Skipping activity record that is not an object: index={index} value={record!r}"
            )
            continue
        yield record


def select_api_gps_activities(records: List[Dict[str, Any]]) -> List[Activity]:
    """Keep API records with GPS data and normalize them."""
    return [
        Activity(
            id=str(record["logId"]),
            name=record.get("name", ""),
            start_date_time=format_start_time(parse_api_datetime(record["startTime"])),
            tcx_link=record["tcxLink"],
        )
        for record in iter_record_objects(records)
        if has_gps_track(record)
    ]


def select_archive_gps_activities(
    records: List[Dict[str, Any]],
    tcx_url_template: str = ARCHIVE_TCX_URL_TEMPLATE,
) -> List[Activity]:
    """
    Keep Takeout records flagged with hasGps and normalize them.

    Args:
        records: Raw records from exercise*.json files.
        tcx_url_template: Download URL template with an {id} placeholder.

    Raises:
        InvalidDateFormat: If a kept record has a malformed startTime.
    """
    activities = []
    for record in iter_record_objects(records):
        if record.get("hasGps") is not True:
            continue
        activity_id = str(record["logId"])
        activities.append(
            Activity(
                id=activity_id,
                name=record.get("name", ""),
                start_date_time=format_start_time(
                    parse_archive_datetime(record.get("startTime"))
                ),
                tcx_link=tcx_url_template.format(id=activity_id),
            )
        )
    return activities
