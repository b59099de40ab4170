import pytest
import requests

from conftest import raw_frame
from shooting_report import data_loader
from shooting_report.data_loader import ShootingDataRepository
from shooting_report.errors import SourceUnavailable


class FakeResponse:
    def __init__(self, text, status_code=200):
        self.text = text
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


def test_load_local_csv_keeps_text_and_strips_header(tmp_path):
    path = tmp_path / "shootings.csv"
    path.write_text(" OCCUR_DATE ,BORO,STATISTICAL_MURDER_FLAG\n01/02/2020,BRONX,true\n")
    df = ShootingDataRepository(source=str(path)).load()

    assert list(df.columns) == ["OCCUR_DATE", "BORO", "STATISTICAL_MURDER_FLAG"]
    assert df.iloc[0].tolist() == ["01/02/2020", "BRONX", "true"]


def test_load_is_cached_until_forced(sample_csv):
    repo = ShootingDataRepository(source=str(sample_csv))
    first = repo.load()

    assert repo.load() is first
    assert repo.refresh() is not first


def test_missing_file_is_source_unavailable(tmp_path):
    repo = ShootingDataRepository(source=str(tmp_path / "absent.csv"))
    with pytest.raises(SourceUnavailable):
        repo.load()


def test_empty_file_is_source_unavailable(tmp_path):
    path = tmp_path / "empty.csv"
    path.write_text("")
    with pytest.raises(SourceUnavailable):
        ShootingDataRepository(source=str(path)).load()


def test_download_writes_local_copy(monkeypatch, tmp_path):
    csv_text = raw_frame([{"date": "01/02/2020", "region": "BRONX", "murder": "true"}]).to_csv(index=False)
    calls = []

    def fake_get(url, timeout):
        calls.append((url, timeout))
        return FakeResponse(csv_text)

    monkeypatch.setattr(data_loader.requests, "get", fake_get)
    local_copy = tmp_path / "data" / "shootings.csv"
    repo = ShootingDataRepository(
        source="https://example.org/shootings.csv", local_copy=str(local_copy), timeout_seconds=5
    )
    df = repo.load()

    assert calls == [("https://example.org/shootings.csv", 5)]
    assert len(df) == 1
    assert local_copy.read_text() == csv_text

    # A second repository reads the saved copy instead of downloading again.
    ShootingDataRepository(source="https://example.org/shootings.csv", local_copy=str(local_copy)).load()
    assert len(calls) == 1


def test_http_error_is_source_unavailable(monkeypatch):
    monkeypatch.setattr(data_loader.requests, "get", lambda url, timeout: FakeResponse("", status_code=503))
    with pytest.raises(SourceUnavailable):
        ShootingDataRepository(source="https://example.org/shootings.csv").load()


def test_connection_error_is_source_unavailable(monkeypatch):
    def fail(url, timeout):
        raise requests.ConnectionError("unreachable")

    monkeypatch.setattr(data_loader.requests, "get", fail)
    with pytest.raises(SourceUnavailable) as excinfo:
        ShootingDataRepository(source="https://example.org/shootings.csv").load()
    assert isinstance(excinfo.value.__cause__, requests.ConnectionError)


def test_failed_local_copy_write_keeps_download(monkeypatch, tmp_path):
    csv_text = raw_frame([{"date": "01/02/2020", "region": "BRONX", "murder": "true"}]).to_csv(index=False)
    monkeypatch.setattr(data_loader.requests, "get", lambda url, timeout: FakeResponse(csv_text))
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")

    repo = ShootingDataRepository(
        source="https://example.org/shootings.csv", local_copy=str(blocker / "shootings.csv")
    )
    df = repo.load()

    assert len(df) == 1
    assert not (blocker / "shootings.csv").exists()
