#!/usr/bin/env python3
"""
Fitbit Exporter Entry Point
---------------------------
Download TCX files of GPS activities from Fitbit.

Usage:
    # From the Fitbit API, activities after a date
    python -m fitbit_export api --after-date 2024-01-01 --download-dir ./activities

    # From a Takeout archive (Global Export Data directory)
    python -m fitbit_export archive --archive-dir "./Takeout/Fitbit/Global Export Data"

The bearer token is read from FITBIT_BEARER_TOKEN (environment or .env file).
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .base import ActivitySource
from .client import FitbitClient
from .config import SOURCES, ExportConfig, build_config, load_env, load_settings
from .downloader import TcxDownloader
from .exporter import export_activities
from .sources import ApiSource, ArchiveSource
from .utils import LOG_LEVELS, setup_logging


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="fitbit-export",
        description="Download TCX files of Fitbit activities that have GPS data.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "source",
        choices=SOURCES,
        help="Where to read activities from: the Fitbit API or a Takeout archive",
    )
    parser.add_argument(
        "-o", "--download-dir",
        type=Path,
        help="Directory to save TCX files (env: ACTIVITIES_DOWNLOAD_DIR, default: activities)",
    )
    parser.add_argument(
        "--after-date",
        help="Fetch API activities after this date, YYYY-MM-DD (env: AFTER_DATE)",
    )
    parser.add_argument(
        "--archive-dir",
        type=Path,
        help="Takeout directory holding exercise*.json files (env: ARCHIVE_DIR)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="HTTP timeout in seconds (env: FITBIT_REQUEST_TIMEOUT, default: none)",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Optional YAML settings file",
    )
    parser.add_argument(
        "-e", "--env",
        type=Path,
        default=Path(".env"),
        help="Path to the .env file",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default="INFO",
        help="Logging level",
    )
    return parser.parse_args(argv)


def build_source(config: ExportConfig, client: FitbitClient) -> ActivitySource:
    """Get the activity source selected by the configuration."""
    if config.source == "api":
        return ApiSource(client, config.after_date)
    elif config.source == "archive":
        return ArchiveSource(config.archive_dir)
    else:
        raise ValueError(f"Unknown source: {config.source}")


def run(config: ExportConfig) -> int:
    """Run one export with a validated configuration. Returns the exit code."""
    client = FitbitClient(config.bearer_token, timeout=config.request_timeout)
    try:
        source = build_source(config, client)
        downloader = TcxDownloader(client, config.download_dir)
        export_activities(source, downloader)
    finally:
        client.close()
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    try:
        args = parse_args(argv)
        setup_logging(args.log_level)
        load_env(args.env)

        config = build_config(
            overrides={
                "source": args.source,
                "download_dir": args.download_dir,
                "after_date": args.after_date,
                "archive_dir": args.archive_dir,
                "request_timeout": args.timeout,
            },
            settings=load_settings(args.config),
        )
        return run(config)

    except KeyboardInterrupt:
        logging.info("Script interrupted by user")
        return 130
    except Exception as e:
        logging.error(f"Export failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
