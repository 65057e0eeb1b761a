"""
TCX Downloader
--------------
Writes one TCX file per activity, skipping files already downloaded.
"""
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from .base import Activity
from .client import FitbitClient

CHUNK_SIZE = 64 * 1024
PARTIAL_SUFFIX = ".part"


def target_filename(activity: Activity) -> str:
    """Deterministic filename for an activity: activity-<start>-<id>.tcx"""
    return activity.filename


class TcxDownloader:
    """Downloads activity TCX files into a directory."""

    def __init__(
        self,
        client: FitbitClient,
        download_dir: Path,
        logger: Optional[logging.Logger] = None,
    ):
        self.client = client
        self.download_dir = Path(download_dir)
        self.logger = logger or logging.getLogger(__name__)

    def target_path(self, activity: Activity) -> Path:
        return self.download_dir / target_filename(activity)

    def is_downloaded(self, activity: Activity) -> bool:
        """True if the target exists with nonzero size. Empty files don't count."""
        path = self.target_path(activity)
        return path.is_file() and path.stat().st_size > 0

    def download(self, activity: Activity) -> bool:
        """
        Ensure the activity's TCX file exists locally.

        Args:
            activity: Normalized activity to download.

        Returns:
            True if the file was downloaded, False if it was already present.

        Raises:
            RequestError: If Fitbit answers with a non-success status.
        """
        filename = target_filename(activity)

        if self.is_downloaded(activity):
            self.logger.info(f"Activity already downloaded, skipping: {filename}")
            return False

        target = self.target_path(activity)

        with self.client.get(activity.tcx_link, stream=True) as response:
            # One temp file per download so concurrent runs never share it
            fd, partial_name = tempfile.mkstemp(
                dir=self.download_dir, prefix=target.name + ".", suffix=PARTIAL_SUFFIX
            )
            partial = Path(partial_name)
            try:
                with os.fdopen(fd, "wb") as f:
                    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                        if chunk:
                            f.write(chunk)
                # Overwrites an existing empty target
                os.replace(partial, target)
            except BaseException:
                partial.unlink(missing_ok=True)
                raise

        self.logger.info(f"✅ Activity downloaded: {filename}")
        return True
