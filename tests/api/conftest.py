"""
Fixtures for HTTP tests.

The app runs on a container built from test settings with fake model
providers; the lifespan creates the tables. Background pipeline runs
live on the TestClient's event loop, so tests drain them through the
client portal.
"""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from spacerag.api.deps.container import build_container
from spacerag.api.main import create_app
from spacerag.boundary.storage import LocalBlobStorage

from tests.conftest import make_settings
from tests.fakes import FakeChatModel, FakeEmbeddings, no_sleep
from tests.factories import USER_ID


@pytest.fixture
def api_chat_model() -> FakeChatModel:
    return FakeChatModel()


@pytest.fixture
def api_container(tmp_path: Path, api_chat_model: FakeChatModel):
    return build_container(
        make_settings(tmp_path),
        embeddings=FakeEmbeddings(),
        chat_model=api_chat_model,
        storage=LocalBlobStorage(tmp_path / "blobs"),
        sleep=no_sleep,
    )


@pytest.fixture
def client(api_container):
    with TestClient(create_app(container=api_container), headers={"X-User-Id": USER_ID}) as client:
        yield client
        client.portal.call(api_container.aclose)


@pytest.fixture
def drain(client, api_container):
    """Wait for background pipeline runs started by earlier requests."""

    def _drain() -> None:
        client.portal.call(api_container.runner.drain)

    return _drain
