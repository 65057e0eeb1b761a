"""
Export orchestration: fetch → filter → download each.
"""
import logging
from pathlib import Path
from typing import Optional

from .base import ActivitySource, ExportSummary
from .downloader import TcxDownloader


def ensure_download_dir(download_dir: Path, logger: Optional[logging.Logger] = None) -> bool:
    """Create the download directory if needed. Returns True if it was created."""
    logger = logger or logging.getLogger(__name__)
    download_dir = Path(download_dir)

    if download_dir.is_dir():
        logger.info(f"Download directory already exists: {download_dir}")
        return False

    download_dir.mkdir(parents=True, exist_ok=True)
    logger.info(f"📁 Created download directory: {download_dir}")
    return True


def export_activities(
    source: ActivitySource,
    downloader: TcxDownloader,
    logger: Optional[logging.Logger] = None,
) -> ExportSummary:
    """
    Download the TCX file of every GPS activity produced by a source.

    Downloads run one at a time, in source order. Any error aborts the run.

    Args:
        source: Where activity records come from.
        downloader: Writes the files into its download directory.
        logger: Logger for progress messages.

    Returns:
        Counters for the run.
    """
    logger = logger or logging.getLogger(__name__)
    summary = ExportSummary()

    ensure_download_dir(downloader.download_dir, logger)

    logger.info(f"Fetching activities from Fitbit: source={source.source_name}")
    records = source.fetch_records()
    summary.total_records = len(records)
    logger.info(f"Fetched activities from Fitbit: count={summary.total_records}")

    activities = source.select_gps_activities(records)
    summary.gps_activities = len(activities)
    logger.info(
        f"Found activities with GPS data. Starting downloads: count={summary.gps_activities}"
    )

    for index, activity in enumerate(activities, start=1):
        logger.info(
            f"⏳ Downloading workout: progress={index}/{summary.gps_activities} "
            f"id={activity.id} name={activity.name!r} start={activity.start_date_time}"
        )
        if downloader.download(activity):
            summary.downloaded += 1
        else:
            summary.skipped += 1

    logger.info(
        f"🎉 All workouts downloaded: count={summary.gps_activities} "
        f"downloaded={summary.downloaded} skipped={summary.skipped}"
    )
    return summary
