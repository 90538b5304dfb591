from __future__ import annotations

from io import BytesIO

import pytest
from PIL import Image
from fastapi.testclient import TestClient

from tablemate.api.dependencies import get_analysis_client, get_storage
from tablemate.api.main import app
from tablemate.services.repository import InMemoryStorage


@pytest.fixture(scope="session")
def oversized_png():
    """A small PNG whose declared size exceeds Pillow's pixel limit."""
    buf = BytesIO()
    Image.new("1", (20000, 20000)).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def analysis_client():
    """No external model by default; tests opt into a stub."""
    return None


@pytest.fixture
def client(storage, analysis_client):
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_analysis_client] = lambda: analysis_client
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()
