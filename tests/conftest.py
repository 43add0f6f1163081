import pytest

import storage.json_store as json_store
from config.settings import settings
from storage.json_store import JsonDocumentStore
from tests.workbooks import write_xlsx


@pytest.fixture
def store(tmp_path, monkeypatch):
    s = JsonDocumentStore(tmp_path / "data")
    monkeypatch.setattr(json_store, "_store", s)
    monkeypatch.setattr(settings, "DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path / "uploads"))
    return s


@pytest.fixture
def xlsx(tmp_path):
    def make(rows, name="report.xlsx"):
        return write_xlsx(tmp_path / name, rows)
    return make
