import asyncio
import logging

from pathlib import Path
from typing import Any, Dict, Union

from ..config import StoreConfig
from .errors import SchemaError
from .model import Model, define_model
from .rules import DEFAULT_RULES, PrimitiveRules
from .store import DocumentStore

_LOGGER = logging.getLogger(__name__)


class ConnectedClient:
    def __init__(self, store: Any, models: Dict[str, Model]):
        self.store = store
        self.models = models

    def col(self, name: str) -> Model:
        return self.models[name]

    def close(self):
        self.store.close()


class Client:
    """
    Registry of named models.

    Models are compiled when registered and bound to their collections on
    connect():

        client = Client()
        client.model("File", {"fileUuid": str})
        db = await client.connect("./db")
        await db.col("File").insert({"fileUuid": "1234"})
    """

    def __init__(self, rules: PrimitiveRules = DEFAULT_RULES):
        self.rules = rules
        self.models: Dict[str, Model] = {}

    def model(self, name: str, fields: dict) -> Model:
        if name in self.models:
            raise SchemaError(f"SchemaError for {name}: Model is already defined.", name)
        self.models[name] = define_model(name, fields, rules=self.rules)
        return self.models[name]

    async def connect(self, target: Union[StoreConfig, str, Path, Any, None] = None) -> ConnectedClient:
        """
        :param target: a StoreConfig or data directory for the embedded store,
            or any object exposing collection(name) and close(). When omitted
            the embedded store is configured from the environment.
        """
        if target is None:
            target = StoreConfig.from_env()
        if isinstance(target, (StoreConfig, str, Path)):
            store = await asyncio.to_thread(DocumentStore, target)
        else:
            store = target
        bound = {name: model.bind(store.collection(name)) for name, model in self.models.items()}
        _LOGGER.info("Connected with %d models: %s", len(bound), ", ".join(bound))
        return ConnectedClient(store, bound)
