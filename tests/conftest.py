import pytest
from fastapi.testclient import TestClient

from app.catalog.ajax import create_nonce
from app.catalog.policy import Actor, CapabilityPolicy
from app.catalog.service import CatalogService
from app.config import Settings
from app.main import create_app
from app.storage import InMemoryRepository


EDITOR_HEADERS = {"X-User-Id": "7", "X-User-Role": "editor"}
AUTHOR_HEADERS = {"X-User-Id": "8", "X-User-Role": "author"}
SUBSCRIBER_HEADERS = {"X-User-Id": "9", "X-User-Role": "subscriber"}


@pytest.fixture
def repository():
    return InMemoryRepository()


@pytest.fixture
def service(repository):
    return CatalogService(repository, CapabilityPolicy())


@pytest.fixture
def editor():
    return Actor(user_id=7, role="editor")


@pytest.fixture
def client(repository):
    app = create_app(repository=repository, settings=Settings(seed_file=None))
    return TestClient(app)


@pytest.fixture
def nonce():
    return create_nonce()


class BrokenRepository(InMemoryRepository):
    """Repository whose listing fails as if storage were offline."""

    def list(self, kind, order_by="created_desc"):
        raise RuntimeError("storage offline")


@pytest.fixture
def broken_repository():
    return BrokenRepository()
