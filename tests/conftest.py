"""Shared fixtures."""

from typing import List, Optional

import pytest


@pytest.fixture
def anyio_backend():
    return "asyncio"


class FakeCollection:
    """In-memory collection handle recording every call."""

    def __init__(self, docs: Optional[List[dict]] = None):
        self.docs = list(docs or [])
        self.inserted: List[dict] = []
        self.find_calls: List[Optional[dict]] = []

    async def find(self, filter=None):
        self.find_calls.append(filter)
        return self.docs

    async def insert(self, doc):
        self.inserted.append(doc)
        return {**doc, "_id": f"id-{len(self.inserted)}"}


class FakeStore:
    def __init__(self):
        self.collections = {}
        self.closed = False

    def collection(self, name):
        return self.collections.setdefault(name, FakeCollection())

    def close(self):
        self.closed = True


@pytest.fixture
def fake_collection():
    return FakeCollection()


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def make_collection():
    return FakeCollection
