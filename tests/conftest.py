from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from core import storage


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    return tmp_path / "storage" / "locations.json"


@pytest.fixture
def json_store(data_file: Path) -> Iterator[storage.JsonFileStore]:
    storage.close_store()
    store = storage.init_store(data_file)
    yield store
    storage.close_store()


@pytest.fixture
def make_client(monkeypatch: pytest.MonkeyPatch, data_file: Path):
    """
    Build a TestClient for a fresh app. Keyword arguments become environment variables.
    """
    clients: list[TestClient] = []

    def _make(**env: str) -> TestClient:
        monkeypatch.setenv("DATA_FILE", str(data_file))
        for name in ("AUTH_DISABLED", "JWT_SECRET", "JWT_ALG", "BASE_PATH"):
            monkeypatch.delenv(name, raising=False)
        for name, value in env.items():
            monkeypatch.setenv(name, value)

        from main import create_app

        client = TestClient(create_app())
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client) -> TestClient:
    return make_client(AUTH_DISABLED="true")
