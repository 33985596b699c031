"""
Pytest configuration and shared fixtures

mongomock provides an in-memory collection; AsyncCollection gives it the
awaitable surface motor exposes so steps run unchanged against it.
"""

from unittest.mock import AsyncMock, MagicMock

import mongomock
import pytest


SCENARIO_BOOKS = [
    {"title": "A", "author": "Ann", "genre": "Fiction", "price": 10,
     "published_year": 1999, "in_stock": True},
    {"title": "B", "author": "Bob", "genre": "Fiction", "price": 20,
     "published_year": 2011, "in_stock": True},
    {"title": "C", "author": "Cy", "genre": "Nonfiction", "price": 15,
     "published_year": 2015, "in_stock": False},
]


class AsyncCursor:
    """Cursor with motor's awaitable to_list"""

    def __init__(self, documents):
        self._documents = list(documents)

    async def to_list(self, length=None):
        if length is None:
            return list(self._documents)
        return self._documents[:length]


class ExplainDatabase:
    """mongomock has no explain command; answer with executionStats from a count"""

    def __init__(self, collection):
        self._collection = collection
        self.commands = []

    async def command(self, command):
        self.commands.append(command)
        explained = command["explain"]
        returned = self._collection.count_documents(explained["filter"])
        return {
            "queryPlanner": {"namespace": f"test.{explained['find']}"},
            "executionStats": {"executionSuccess": True, "nReturned": returned},
        }


class AsyncCollection:
    """Awaitable facade over a mongomock collection, shaped like motor's"""

    def __init__(self, collection):
        self._collection = collection
        self.database = ExplainDatabase(collection)

    @property
    def name(self):
        return self._collection.name

    def find(self, *args, **kwargs):
        return AsyncCursor(self._collection.find(*args, **kwargs))

    def aggregate(self, pipeline, **kwargs):
        return AsyncCursor(self._collection.aggregate(pipeline, **kwargs))

    async def update_one(self, filter, update, **kwargs):
        return self._collection.update_one(filter, update, **kwargs)

    async def delete_one(self, filter, **kwargs):
        return self._collection.delete_one(filter, **kwargs)

    async def create_index(self, keys, **kwargs):
        return self._collection.create_index(keys, **kwargs)


class FakeClient:
    """Stand-in for AsyncIOMotorClient that counts close() calls"""

    def __init__(self, uri, collection, ping_error=None, **options):
        self.uri = uri
        self.options = options
        self.close_calls = 0
        self.admin = MagicMock()
        self.admin.command = AsyncMock(side_effect=ping_error)
        self._collections = {"books": collection}

    def __getitem__(self, db_name):
        return self._collections

    def close(self):
        self.close_calls += 1


@pytest.fixture
def mongo_collection():
    """Raw mongomock collection, for seeding and inspecting"""
    return mongomock.MongoClient()["plp_bookstore"]["books"]


@pytest.fixture
def books(mongo_collection):
    return AsyncCollection(mongo_collection)


@pytest.fixture
def seeded_books(mongo_collection, books):
    mongo_collection.insert_many([dict(doc) for doc in SCENARIO_BOOKS])
    return books


@pytest.fixture
def client_factory(books):
    """Factory for FakeClient; created clients are kept on .created"""
    created = []

    def factory(uri, **options):
        client = FakeClient(uri, books, **options)
        created.append(client)
        return client

    factory.created = created
    return factory


@pytest.fixture
def failing_client_factory(books):
    """Factory whose clients fail the connection ping"""
    from pymongo.errors import ServerSelectionTimeoutError

    created = []

    def factory(uri, **options):
        client = FakeClient(uri, books, ping_error=ServerSelectionTimeoutError("no servers"), **options)
        created.append(client)
        return client

    factory.created = created
    return factory
