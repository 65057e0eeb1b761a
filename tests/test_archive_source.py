import logging
from pathlib import Path

import pytest

from fitbit_export.base import ReadArchiveError
from fitbit_export.sources import ArchiveSource


def _record(log_id, has_gps=True):
    return {"logId": log_id, "name": "Run", "startTime": "01/15/24 08:30:00", "hasGps": has_gps}


def test_fetch_records_concatenates_exercise_files(tmp_path: Path, write_json):
    write_json(tmp_path / "exercise-100.json", [_record(3)])
    write_json(tmp_path / "exercise-0.json", [_record(1), _record(2, has_gps=False)])
    write_json(tmp_path / "sleep-0.json", [_record(99)])
    write_json(tmp_path / "exercise-0.json.bak", [_record(98)])

    records = ArchiveSource(tmp_path).fetch_records()

    assert [r["logId"] for r in records] == [1, 2, 3]


def test_non_array_file_is_skipped_with_warning(tmp_path: Path, write_json, caplog):
    write_json(tmp_path / "exercise-0.json", {"logId": 1})
    write_json(tmp_path / "exercise-1.json", [_record(2)])

    with caplog.at_level(logging.WARNING):
        records = ArchiveSource(tmp_path).fetch_records()

    assert [r["logId"] for r in records] == [2]
    assert "exercise-0.json" in caplog.text
    assert any(r.levelno == logging.WARNING for r in caplog.records)


def test_invalid_json_is_fatal(tmp_path: Path, write_json):
    (tmp_path / "exercise-0.json").write_text("[{not json", encoding="utf-8")
    write_json(tmp_path / "exercise-1.json", [_record(2)])

    with pytest.raises(ReadArchiveError):
        ArchiveSource(tmp_path).fetch_records()


def test_missing_directory_is_fatal(tmp_path: Path):
    with pytest.raises(ReadArchiveError):
        ArchiveSource(tmp_path / "missing").fetch_records()


def test_empty_directory(tmp_path: Path):
    assert ArchiveSource(tmp_path).fetch_records() == []


def test_select_gps_activities_builds_web_api_link(tmp_path: Path):
    activities = ArchiveSource(tmp_path).select_gps_activities([_record(7), _record(8, has_gps=False)])

    assert len(activities) == 1
    assert activities[0].tcx_link == "https://web-api.fitbit.com/1.1/user/-/activities/7.tcx"
