import asyncio
import operator
import uuid

from typing import List, Optional

from ..storage import codec
from ..storage.errors import StoreError
from ..storage.lsm import LSMEngine

_OPERATORS = {
    "$eq": operator.eq,
    "$gt": operator.gt,
    "$gte": operator.ge,
    "$lt": operator.lt,
    "$lte": operator.le,
}


class Collection:
    def __init__(self, engine: LSMEngine, name: str):
        self.engine = engine
        self.name = name
        self.prefix = f"{name}:"

    def _k(self, doc_id: str) -> str:
        return self.prefix + doc_id

    def _insert(self, doc: dict) -> dict:
        stored = dict(doc)
        doc_id = stored.setdefault("_id", uuid.uuid4().hex)
        if not self.engine.put_if_absent(self._k(str(doc_id)), codec.dumps(stored)):
            raise StoreError(f"Duplicate _id {doc_id!r} in {self.name}")
        return stored

    def _find(self, filter: Optional[dict]) -> List[dict]:
        results = []
        for _, raw in self.engine.scan(self.prefix):
            doc = codec.loads(raw)
            if self._matches(doc, filter):
                results.append(doc)
        return results

    async def insert(self, doc: dict) -> dict:
        """
        Store a document and return the stored form, including its _id.

        :param doc: the document to insert; it is not modified
        """
        return await asyncio.to_thread(self._insert, doc)

    async def find(self, filter: Optional[dict] = None) -> List[dict]:
        return await asyncio.to_thread(self._find, filter)

    async def get(self, doc_id: str) -> Optional[dict]:
        raw = await asyncio.to_thread(self.engine.get, self._k(doc_id))
        return codec.loads(raw) if raw is not None else None

    def _matches(self, doc, filter):
        if filter is None:
            return True

        for field, cond in filter.items():
            val = doc.get(field)
            if isinstance(cond, dict):
                for op, cmp_val in cond.items():
                    if op not in _OPERATORS:
                        raise StoreError(f"Unknown filter operator {op!r} on {field}")
                    if val is None and op != "$eq":
                        return False
                    try:
                        if not _OPERATORS[op](val, cmp_val):
                            return False
                    except TypeError:
                        # values of different types never match
                        return False
            else:
                if val != cond:
                    return False
        return True
