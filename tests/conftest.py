import pytest
from fastapi.testclient import TestClient

from storefront.config import Settings
from storefront.main import create_app
from storefront.services import inventory_service, product_service

SECRET = "test-webhook-secret"


def _matches(row: dict, query: dict | None) -> bool:
    for key, expected in (query or {}).items():
        if key.startswith("$"):
            continue
        if isinstance(expected, dict):
            if "$in" in expected and row.get(key) not in expected["$in"]:
                return False
            continue
        if row.get(key) != expected:
            return False
    return True


class FakeResult:
    def __init__(self, deleted_count=0, modified_count=0, upserted_id=None):
        self.deleted_count = deleted_count
        self.modified_count = modified_count
        self.upserted_id = upserted_id


class FakeCursor:
    def __init__(self, rows, error=None):
        self.rows = rows
        self.error = error
        self._skip = 0
        self._limit = 0

    def sort(self, *args, **kwargs):
        return self

    def skip(self, n):
        self._skip = n
        return self

    def limit(self, n):
        self._limit = n
        return self

    async def to_list(self, length=None):
        if self.error:
            raise self.error
        rows = self.rows[self._skip:]
        if self._limit:
            rows = rows[:self._limit]
        return [dict(r) for r in rows]


class FakeCollection:
    """Just enough of a motor collection for the services under test."""

    def __init__(self, rows=None, error=None):
        self.rows = [dict(r) for r in rows or []]
        self.error = error
        self.queries = []
        self.updates = []

    def _check(self):
        if self.error:
            raise self.error

    def find(self, query=None, projection=None):
        self.queries.append(query)
        return FakeCursor([r for r in self.rows if _matches(r, query)], self.error)

    async def find_one(self, query=None, projection=None):
        self._check()
        self.queries.append(query)
        for row in self.rows:
            if _matches(row, query):
                return dict(row)
        return None

    async def count_documents(self, query):
        self._check()
        return len([r for r in self.rows if _matches(r, query)])

    async def insert_one(self, doc):
        self._check()
        self.rows.append(dict(doc))
        return FakeResult()

    async def update_one(self, query, update, upsert=False):
        self._check()
        self.updates.append((query, update, upsert))
        for row in self.rows:
            if _matches(row, query):
                row.update(update.get("$set", {}))
                return FakeResult(modified_count=1)
        if upsert:
            self.rows.append({**query, **update.get("$set", {})})
        return FakeResult()

    async def delete_one(self, query):
        self._check()
        for i, row in enumerate(self.rows):
            if _matches(row, query):
                del self.rows[i]
                return FakeResult(deleted_count=1)
        return FakeResult()

    async def delete_many(self, query):
        self._check()
        keep = [r for r in self.rows if not _matches(r, query)]
        deleted = len(self.rows) - len(keep)
        self.rows = keep
        return FakeResult(deleted_count=deleted)


class FakeDB:
    def __init__(self, products=None, warehouse_products=None, warehouses=None):
        self.products = FakeCollection(products)
        self.warehouse_products = FakeCollection(warehouse_products)
        self.warehouses = FakeCollection(warehouses)


class RecordingForwarder:
    def __init__(self):
        self.calls = []

    async def trigger(self, event_type, record, old_record=None):
        self.calls.append((event_type, record, old_record))
        return {"success": True, "data": {"revalidated": True}}


@pytest.fixture
def fake_db(monkeypatch):
    db = FakeDB()
    monkeypatch.setattr(product_service, "db", db)
    monkeypatch.setattr(inventory_service, "db", db)
    return db


@pytest.fixture
def settings():
    return Settings(REVALIDATE_WEBHOOK_SECRET=SECRET, SITE_URL="http://storefront.test", PUBLIC_HOST=None)


@pytest.fixture
def app(settings, fake_db):
    app = create_app(settings)
    app.state.forwarder = RecordingForwarder()
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


def sample_row(**overrides):
    row = {
        "id": "p-1",
        "name": "Oslo Sofa",
        "slug": "oslo-sofa",
        "category": "Sofas",
        "price": 500,
        "description": "Three seater",
        "in_stock": True,
    }
    row.update(overrides)
    return row
