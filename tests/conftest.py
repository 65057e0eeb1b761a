import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from fitbit_export.base import Activity


@pytest.fixture
def make_response():
    """Build a fake requests.Response."""

    def _make(status=200, json_data=None, chunks=None, reason="OK", text=""):
        response = MagicMock()
        response.ok = 200 <= status < 400
        response.status_code = status
        response.reason = reason
        response.text = text
        response.json.return_value = json_data
        response.iter_content.return_value = list(chunks or [])
        response.__enter__.return_value = response
        response.__exit__.return_value = False
        return response

    return _make


@pytest.fixture
def mock_client(make_response):
    """FitbitClient stand-in whose get() returns one TCX body."""
    client = MagicMock()
    client.get.return_value = make_response(chunks=[b"<TrainingCenterDatabase>", b"</TrainingCenterDatabase>"])
    return client


@pytest.fixture
def activity():
    return Activity(
        id="123456789",
        name="Run",
        start_date_time="2024-01-15T08:30:00.000Z",
        tcx_link="https://api.fitbit.com/1/user/-/activities/123456789.tcx",
    )


@pytest.fixture
def write_json():
    def _write(path: Path, payload) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    return _write
