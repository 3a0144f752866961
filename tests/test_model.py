"""Unit tests for bound models and the client registry."""

import pytest

from py_docmodel.document.client import Client
from py_docmodel.document.errors import SchemaError, ValidationError
from py_docmodel.document.model import define_model
from py_docmodel.storage.errors import StoreError


def test_model_call_returns_same_document():
    File = define_model("File", {"fileUuid": str})
    doc = {"fileUuid": "1234"}
    assert File(doc) is doc


def test_model_call_raises_validation_error():
    File = define_model("File", {"fileUuid": str})
    with pytest.raises(ValidationError, match="File.fileUuid"):
        File({"fileUuid": 1234})


def test_define_model_raises_schema_error_synchronously():
    with pytest.raises(SchemaError):
        define_model("Bad", {"bad": [int, str]})


@pytest.mark.anyio
async def test_insert_forwards_valid_document_once(fake_collection):
    File = define_model("File", {"fileUuid": str}, fake_collection)
    stored = await File.insert({"fileUuid": "1234"})
    assert fake_collection.inserted == [{"fileUuid": "1234"}]
    assert stored == {"fileUuid": "1234", "_id": "id-1"}


@pytest.mark.anyio
async def test_insert_invalid_document_never_reaches_store(fake_collection):
    File = define_model("File", {"fileUuid": str}, fake_collection)
    with pytest.raises(ValidationError):
        await File.insert({"fileUuid": None})
    assert fake_collection.inserted == []


@pytest.mark.anyio
async def test_find_returns_raw_documents(make_collection):
    docs = [{"n": 1, "_id": "a"}, {"n": 2, "_id": "b"}]
    col = make_collection(docs)
    Thing = define_model("Thing", {"n": int}, col)
    found = await Thing.find({"n": {"$gt": 0}})
    assert found == docs
    assert col.find_calls == [{"n": {"$gt": 0}}]


@pytest.mark.anyio
async def test_find_fails_on_any_malformed_document(make_collection):
    col = make_collection([{"n": 1}, {"n": "two"}])
    Thing = define_model("Thing", {"n": int}, col)
    with pytest.raises(ValidationError, match="Thing.n"):
        await Thing.find()


@pytest.mark.anyio
async def test_store_errors_pass_through(make_collection):
    class BrokenCollection(make_collection):
        async def insert(self, doc):
            raise StoreError("disk full")

    Thing = define_model("Thing", {"n": int}, BrokenCollection())
    with pytest.raises(StoreError, match="disk full"):
        await Thing.insert({"n": 1})


@pytest.mark.anyio
async def test_store_errors_pass_through_find(make_collection):
    error = StoreError("read failed")

    class BrokenCollection(make_collection):
        async def find(self, filter=None):
            raise error

    Thing = define_model("Thing", {"n": int}, BrokenCollection())
    with pytest.raises(StoreError) as exc:
        await Thing.find()
    assert exc.value is error


@pytest.mark.anyio
async def test_unbound_model_cannot_reach_store():
    Thing = define_model("Thing", {"n": int})
    with pytest.raises(RuntimeError, match="not bound"):
        await Thing.find()


def test_bind_shares_compiled_schema(fake_collection):
    Thing = define_model("Thing", {"n": int})
    bound = Thing.bind(fake_collection)
    assert bound is not Thing
    assert bound.schema is Thing.schema
    assert bound.collection is fake_collection
    assert Thing.collection is None


@pytest.mark.anyio
async def test_client_binds_models_on_connect(fake_store):
    client = Client()
    client.model("File", {"fileUuid": str})
    db = await client.connect(fake_store)

    File = db.col("File")
    await File.insert(File({"fileUuid": "1234"}))
    assert fake_store.collections["File"].inserted == [{"fileUuid": "1234"}]

    with pytest.raises(KeyError):
        db.col("Missing")

    db.close()
    assert fake_store.closed


def test_client_rejects_duplicate_model_names():
    client = Client()
    client.model("File", {"fileUuid": str})
    with pytest.raises(SchemaError, match="already defined"):
        client.model("File", {"other": int})
