import datetime
import json

from typing import Any

from .errors import StoreError


def _default(obj: Any):
    if isinstance(obj, datetime.datetime):
        return {"$datetime": obj.isoformat()}
    if isinstance(obj, datetime.date):
        return {"$date": obj.isoformat()}
    raise TypeError(f"Object of type {type(obj).__name__} is not storable")


def _object_hook(obj: dict):
    if len(obj) == 1:
        if "$datetime" in obj:
            return datetime.datetime.fromisoformat(obj["$datetime"])
        if "$date" in obj:
            return datetime.date.fromisoformat(obj["$date"])
    return obj


def dumps(doc: Any) -> str:
    try:
        return json.dumps(doc, default=_default)
    except (TypeError, ValueError) as e:
        raise StoreError(f"Cannot encode document: {e}") from e


def loads(raw: str) -> Any:
    try:
        return json.loads(raw, object_hook=_object_hook)
    except ValueError as e:
        raise StoreError(f"Cannot decode stored document: {e}") from e
