import os
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any, Optional

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT_DIR))

TEST_DB_PATH = ROOT_DIR / "test_sitegen.db"
EDITOR_TOKEN = "test-editor-token"

# Settings are read at import time, so the test database must be chosen first.
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["EDITOR_TOKEN"] = EDITOR_TOKEN
if TEST_DB_PATH.exists():
    TEST_DB_PATH.unlink()

from alembic import command  # noqa: E402
from alembic.config import Config  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from sitegen.db.base import Base, SessionLocal, engine  # noqa: E402
from sitegen.db.deps import get_session  # noqa: E402
from sitegen.main import app  # noqa: E402
from sitegen.services.content_store import get_content_store  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def apply_migrations():
    alembic_cfg = Config(str(ROOT_DIR / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(ROOT_DIR / "alembic"))
    command.upgrade(alembic_cfg, "head")
    yield
    engine.dispose()
    if TEST_DB_PATH.exists():
        TEST_DB_PATH.unlink()


@pytest.fixture(autouse=True)
def clean_tables():
    yield
    with engine.begin() as connection:
        for table in reversed(Base.metadata.sorted_tables):
            connection.execute(table.delete())


@pytest.fixture()
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


class FakeContentStore:
    """In-memory ContentStore. ``*_links`` map a location id to item ids in link order."""

    def __init__(self) -> None:
        self.products: dict[str, dict] = {}
        self.promotions: dict[str, dict] = {}
        self.articles: dict[str, dict] = {}
        self.product_links: dict[str, list[str]] = {}
        self.promotion_links: dict[str, list[str]] = {}
        self.article_links: dict[str, list[str]] = {}
        self.calls: list[tuple[str, Any]] = []
        self.failing: set[str] = set()

    def _call(self, name: str, arg: Any) -> None:
        self.calls.append((name, arg))
        if name in self.failing:
            raise RuntimeError(f"{name} unavailable")

    @staticmethod
    def _pick(records: dict[str, dict], ids: Sequence[str]) -> list[dict]:
        wanted = {value.lower() for value in ids}
        return [record for key, record in records.items() if key.lower() in wanted]

    async def products_by_ids(self, ids: Sequence[str]) -> list[dict]:
        self._call("products_by_ids", list(ids))
        return self._pick(self.products, ids)

    async def products_for_location(self, location_id: str) -> list[dict]:
        self._call("products_for_location", location_id)
        return [self.products[item_id] for item_id in self.product_links.get(location_id, [])]

    async def promotion_by_id(self, promotion_id: str) -> Optional[dict]:
        self._call("promotion_by_id", promotion_id)
        return self.promotions.get(promotion_id)

    async def promotions_for_location(self, location_id: str) -> list[dict]:
        self._call("promotions_for_location", location_id)
        return [self.promotions[item_id] for item_id in self.promotion_links.get(location_id, [])]

    async def articles_by_ids(self, ids: Sequence[str]) -> list[dict]:
        self._call("articles_by_ids", list(ids))
        return self._pick(self.articles, ids)

    async def articles_for_location(self, location_id: str) -> list[dict]:
        self._call("articles_for_location", location_id)
        return [self.articles[item_id] for item_id in self.article_links.get(location_id, [])]


@pytest.fixture()
def fake_store() -> FakeContentStore:
    return FakeContentStore()


@pytest.fixture()
def editor_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {EDITOR_TOKEN}"}


@pytest.fixture()
def override_dependencies(db_session):
    def get_session_override():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_session] = get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def api_client(override_dependencies):
    return TestClient(app)


@pytest.fixture()
def override_content_store(fake_store):
    app.dependency_overrides[get_content_store] = lambda: fake_store
    try:
        yield fake_store
    finally:
        app.dependency_overrides.pop(get_content_store, None)
