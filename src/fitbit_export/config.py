"""
Fitbit Exporter Configuration
-----------------------------
Endpoints, request headers and the run configuration.
Values come from CLI flags, environment variables (.env) and an optional settings.yaml.
"""
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import load_dotenv

from .base import ConfigError

FITBIT_API_BASE = "https://api.fitbit.com/1/user/-"
FITBIT_WEB_API_BASE = "https://web-api.fitbit.com/1.1/user/-"
ACTIVITIES_LIST_URL = f"{FITBIT_API_BASE}/activities/list.json"
ARCHIVE_TCX_URL_TEMPLATE = FITBIT_WEB_API_BASE + "/activities/{id}.tcx"

PAGE_SIZE = 100  # Max allowed by Fitbit API
ARCHIVE_FILE_PREFIX = "exercise"
ARCHIVE_FILE_SUFFIX = ".json"

DEFAULT_DOWNLOAD_DIR = "activities"
SOURCES = ["api", "archive"]

REQUEST_HEADERS = {
    "User-Agent": "Mozilla/5.0 (X11; Linux x86_64; rv:126.0) Gecko/20100101 Firefox/126.0",
    "Accept": "text/plain, */*; q=0.01",
    "Accept-Language": "en-US,en;q=0.5",
    "Content-Type": "application/x-www-form-urlencoded; charset=UTF-8",
    "Sec-Fetch-Dest": "empty",
    "Sec-Fetch-Mode": "cors",
    "Sec-Fetch-Site": "same-site",
    "Priority": "u=1",
    "Referer": "https://www.fitbit.com/",
}

# Environment variable for each ExportConfig field
ENV_VARS = {
    "bearer_token": "FITBIT_BEARER_TOKEN",
    "download_dir": "ACTIVITIES_DOWNLOAD_DIR",
    "after_date": "AFTER_DATE",
    "archive_dir": "ARCHIVE_DIR",
    "request_timeout": "FITBIT_REQUEST_TIMEOUT",
}


@dataclass
class ExportConfig:
    """Settings for one export run."""

    bearer_token: Optional[str] = None
    download_dir: Path = Path(DEFAULT_DOWNLOAD_DIR)
    source: Optional[str] = None
    after_date: Optional[str] = None
    archive_dir: Optional[Path] = None
    request_timeout: Optional[float] = None

    def validate(self) -> "ExportConfig":
        """Raise ConfigError listing every missing or invalid field."""
        problems = []
        if not self.bearer_token:
            problems.append(f"bearer_token ({ENV_VARS['bearer_token']})")
        if self.source not in SOURCES:
            problems.append(f"source must be one of {SOURCES}, got {self.source!r}")
        if self.source == "api" and not self.after_date:
            problems.append(f"after_date ({ENV_VARS['after_date']})")
        if self.source == "archive" and not self.archive_dir:
            problems.append(f"archive_dir ({ENV_VARS['archive_dir']})")
        if self.request_timeout is not None and self.request_timeout <= 0:
            problems.append("request_timeout must be positive")

        if problems:
            raise ConfigError(f"Invalid configuration: {', '.join(problems)}")
        return self


def load_env(dotenv_path: Path) -> None:
    """Load environment variables from .env file."""
    if dotenv_path.exists():
        load_dotenv(dotenv_path)
        logging.debug(f"Loaded .env from {dotenv_path}")
    else:
        logging.debug(f".env file not found at {dotenv_path}")


def load_settings(settings_path: Optional[Path]) -> Dict[str, Any]:
    """Load the optional YAML settings file."""
    if settings_path is None:
        return {}
    try:
        with open(settings_path, "r", encoding="utf-8") as f:
            settings = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not load settings from {settings_path}: {e}") from e

    if not isinstance(settings, dict):
        raise ConfigError(f"Settings file {settings_path} must contain a mapping")

    known = {f.name for f in fields(ExportConfig)}
    unknown = sorted(set(settings) - known)
    if unknown:
        logging.warning(f"Ignoring unknown settings in {settings_path}: {unknown}")
    return {k: v for k, v in settings.items() if k in known}


def build_config(
    overrides: Optional[Mapping[str, Any]] = None,
    settings: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ExportConfig:
    """
    Merge configuration layers into a validated ExportConfig.

    Precedence: overrides (CLI) > environment > settings (YAML) > defaults.

    Args:
        overrides: Values from the command line; None entries are ignored.
        settings: Values from the YAML settings file.
        environ: Environment mapping (defaults to os.environ).

    Returns:
        The validated configuration.
    """
    environ = os.environ if environ is None else environ
    values: Dict[str, Any] = dict(settings or {})

    for field_name, env_var in ENV_VARS.items():
        if environ.get(env_var):
            values[field_name] = environ[env_var]

    for key, value in (overrides or {}).items():
        if value is not None:
            values[key] = value

    if values.get("download_dir") is not None:
        values["download_dir"] = Path(values["download_dir"])
    if values.get("archive_dir") is not None:
        values["archive_dir"] = Path(values["archive_dir"])
    if values.get("after_date") is not None:
        values["after_date"] = str(values["after_date"])
    if values.get("request_timeout") is not None:
        try:
            values["request_timeout"] = float(values["request_timeout"])
        except (TypeError, ValueError) as e:
            raise ConfigError(
                f"request_timeout must be a number, got {values['request_timeout']!r}"
            ) from e

    return ExportConfig(**values).validate()
