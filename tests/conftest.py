from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from tilesync.main import create_app
from tilesync.settings import Settings


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """Hermetic settings: no .env, no real static dir."""

    return Settings(static_dir=tmp_path / "static")


@pytest.fixture()
def app(settings: Settings) -> FastAPI:
    return create_app(settings)


@pytest.fixture()
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    # Using the context manager keeps one event loop for REST calls and WebSockets.
    with TestClient(app) as c:
        yield c
