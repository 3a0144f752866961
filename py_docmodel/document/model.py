import logging

from typing import Any, List, Optional, Protocol

from .rules import DEFAULT_RULES, PrimitiveRules
from .schema import Schema

_LOGGER = logging.getLogger(__name__)


class CollectionHandle(Protocol):
    async def find(self, filter: Optional[dict] = None) -> List[dict]: ...

    async def insert(self, doc: dict) -> dict: ...


class Model:
    """
    A named, compiled schema, optionally bound to a collection.

    Calling the model validates a document and hands it back unchanged.
    find() and insert() validate on the way out of and into the collection.
    """

    def __init__(self, schema: Schema, collection: Optional[CollectionHandle] = None):
        self.schema = schema
        self.collection = collection

    @property
    def name(self) -> str:
        return self.schema.name

    def __call__(self, doc: Any) -> Any:
        self.schema.validate(doc)
        return doc

    def bind(self, collection: CollectionHandle) -> "Model":
        return Model(self.schema, collection)

    def _col(self) -> CollectionHandle:
        if self.collection is None:
            raise RuntimeError(f"Model {self.name} is not bound to a collection")
        return self.collection

    async def find(self, filter: Optional[dict] = None) -> List[dict]:
        docs = await self._col().find(filter)
        for doc in docs:
            self.schema.validate(doc)
        return docs

    async def insert(self, doc: dict) -> dict:
        self.schema.validate(doc)
        stored = await self._col().insert(doc)
        _LOGGER.debug("Inserted document into %s: %r", self.name, stored)
        return stored

    def __repr__(self):
        state = "bound" if self.collection is not None else "unbound"
        return f"<Model {self.name} ({state})>"


def define_model(name: str, fields: dict, collection: Optional[CollectionHandle] = None,
                 rules: PrimitiveRules = DEFAULT_RULES) -> Model:
    """
    Compile a schema description into a Model.

    :param name: model name, also the root of every error path
    :param fields: the schema description
    :param collection: optional collection handle for find/insert
    :raises SchemaError: if the description is malformed
    """
    model = Model(Schema(fields, name, rules), collection)
    _LOGGER.info("Defined model %s", name)
    return model
