"""
Fitbit Exporter Utilities
-------------------------
Logging setup shared by the entry point.
"""
import logging

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def setup_logging(level: str = "INFO") -> None:
    """Configure logging format and level."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
    # urllib3 logs every connection at DEBUG
    logging.getLogger("urllib3").setLevel(max(logging.INFO, logging.root.level))
