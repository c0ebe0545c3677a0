import os

os.environ.setdefault("LOG_JSON", "false")

import pytest
from fastapi.testclient import TestClient

from filedrop.core.settings import Settings
from filedrop.main import create_app


@pytest.fixture
def anyio_backend():
    # Dwing anyio om alleen asyncio te gebruiken (geen Trio nodig)
    return "asyncio"


@pytest.fixture
def uploads_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def settings(uploads_dir) -> Settings:
    return Settings(
        UPLOADS_DIR=uploads_dir,
        MAX_UPLOAD_BYTES=1024 * 1024,
        UPLOAD_TIMEOUT_SECONDS=5,
        LOG_JSON=False,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
