from pathlib import Path
from unittest.mock import MagicMock

import pytest

from fitbit_export.base import Activity, RequestError
from fitbit_export.downloader import TcxDownloader, target_filename

BODY = b"<TrainingCenterDatabase></TrainingCenterDatabase>"


def test_target_filename_is_deterministic(activity):
    same = Activity(
        id=activity.id,
        name="Renamed",
        start_date_time=activity.start_date_time,
        tcx_link="https://other.test/x.tcx",
    )
    assert target_filename(activity) == "activity-2024-01-15T08:30:00.000Z-123456789.tcx"
    assert target_filename(same) == target_filename(activity)


def test_download_streams_body_to_target(tmp_path: Path, mock_client, activity):
    downloader = TcxDownloader(mock_client, tmp_path)

    assert downloader.download(activity) is True

    target = tmp_path / target_filename(activity)
    assert target.read_bytes() == BODY
    assert list(tmp_path.glob("*.part")) == []
    mock_client.get.assert_called_once_with(activity.tcx_link, stream=True)


def test_second_download_makes_no_request(tmp_path: Path, mock_client, activity):
    downloader = TcxDownloader(mock_client, tmp_path)

    downloader.download(activity)
    assert downloader.download(activity) is False

    assert mock_client.get.call_count == 1


def test_empty_file_is_downloaded_again(tmp_path: Path, mock_client, activity):
    target = tmp_path / target_filename(activity)
    target.touch()

    assert TcxDownloader(mock_client, tmp_path).download(activity) is True
    assert target.read_bytes() == BODY


def test_request_error_propagates_without_file(tmp_path: Path, activity):
    client = MagicMock()
    client.get.side_effect = RequestError("Fitbit request failed", status=404, status_text="Not Found")

    with pytest.raises(RequestError):
        TcxDownloader(client, tmp_path).download(activity)

    assert list(tmp_path.iterdir()) == []


def test_stream_failure_removes_partial_file(tmp_path: Path, make_response, activity):
    def broken_stream(chunk_size):
        yield b"<TrainingCenter"
        raise ConnectionError("connection reset")

    response = make_response()
    response.iter_content.side_effect = broken_stream
    client = MagicMock()
    client.get.return_value = response

    with pytest.raises(ConnectionError):
        TcxDownloader(client, tmp_path).download(activity)

    assert list(tmp_path.iterdir()) == []


def test_concurrent_run_skips_completed_file(tmp_path: Path, make_response, activity):
    # Two runs against the same directory: the second finds the finished file
    first_client = MagicMock()
    first_client.get.return_value = make_response(chunks=[BODY])
    second_client = MagicMock()

    TcxDownloader(first_client, tmp_path).download(activity)
    skipped = TcxDownloader(second_client, tmp_path).download(activity)

    assert skipped is False
    second_client.get.assert_not_called()


def test_interleaved_downloads_leave_a_complete_file(tmp_path: Path, make_response, activity):
    # A second run downloads the same activity while the first is mid-stream
    first_body = [b"A" * 100000, b"A" * 100000]
    second_body = [b"B" * 50]
    second_client = MagicMock()
    second_client.get.return_value = make_response(chunks=second_body)
    second = TcxDownloader(second_client, tmp_path)

    def first_stream(chunk_size):
        yield first_body[0]
        assert second.download(activity) is True
        yield first_body[1]

    first_response = make_response()
    first_response.iter_content.side_effect = first_stream
    first_client = MagicMock()
    first_client.get.return_value = first_response

    assert TcxDownloader(first_client, tmp_path).download(activity) is True

    target = tmp_path / target_filename(activity)
    assert target.read_bytes() == b"".join(first_body)
    assert list(tmp_path.glob("*.part")) == []
