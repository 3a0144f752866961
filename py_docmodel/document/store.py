import logging

from pathlib import Path
from typing import Dict, Union

from ..config import StoreConfig
from ..storage.lsm import LSMEngine
from .collection import Collection

_LOGGER = logging.getLogger(__name__)


class DocumentStore:
    def __init__(self, config: Union[StoreConfig, str, Path]):
        self.config = StoreConfig.coerce(config)
        self.engine = LSMEngine(self.config)
        self.collections: Dict[str, Collection] = {}
        _LOGGER.info("Opened document store at %s", self.config.data_dir)


    def collection(self, name: str) -> Collection:
        if not name or ":" in name:
            raise ValueError(f"Invalid collection name {name!r}")
        if name not in self.collections:
            self.collections[name] = Collection(self.engine, name)
        return self.collections[name]


    def compact(self):
        self.engine.compact()


    def close(self):
        self.engine.close()
        _LOGGER.info("Closed document store at %s", self.config.data_dir)
