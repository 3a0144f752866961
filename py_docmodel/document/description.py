import datetime
import json

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

from .errors import SchemaError
from .rules import PrimitiveKind

OPTION_PREFIX = "_"

MARKERS = {
    bool: PrimitiveKind.BOOLEAN,
    datetime.date: PrimitiveKind.DATE,
    datetime.datetime: PrimitiveKind.DATE,
    int: PrimitiveKind.NUMBER,
    float: PrimitiveKind.NUMBER,
    str: PrimitiveKind.TEXT,
}


@dataclass(frozen=True)
class SchemaOptions:
    exclusive: bool = False


@dataclass(frozen=True)
class Primitive:
    kind: PrimitiveKind

    def describe(self) -> str:
        return self.kind.value


@dataclass(frozen=True)
class ArrayOf:
    element: "Node"

    def describe(self) -> str:
        return f"array of [{self.element.describe()}]"


@dataclass(frozen=True)
class ObjectOf:
    fields: Mapping[str, "Node"]
    options: SchemaOptions = field(default_factory=SchemaOptions)

    def describe(self) -> str:
        return "object"


Node = Union[Primitive, ArrayOf, ObjectOf]


def join_path(*parts: str) -> str:
    return ".".join(parts)


def serialize(desc: Any) -> str:
    """Render a raw description for error messages; markers show by name."""
    try:
        return json.dumps(desc, indent=2, default=_marker_name)
    except (TypeError, ValueError):
        return repr(desc)


def _marker_name(obj: Any) -> str:
    if isinstance(obj, PrimitiveKind):
        return obj.value
    if isinstance(obj, type):
        return obj.__name__
    return repr(obj)


def primitive_kind(desc: Any) -> Optional[PrimitiveKind]:
    if isinstance(desc, PrimitiveKind):
        return desc
    if isinstance(desc, type):
        return MARKERS.get(desc)
    return None


def parse(desc: Any, path: str) -> Node:
    """
    Turn a raw description into a Node.

    :param desc: a marker, a single-element list/tuple, or a dict
    :param path: dotted identifier used in error messages
    """
    if isinstance(desc, (list, tuple)):
        if len(desc) != 1:
            raise SchemaError(
                f"SchemaError for {path}: Array schema to have exactly one element, "
                f"got {serialize(list(desc))}",
                path,
                serialize(list(desc)),
            )
        return ArrayOf(parse(desc[0], path))

    kind = primitive_kind(desc)
    if kind is not None:
        return Primitive(kind)

    if isinstance(desc, dict):
        return parse_nested(desc, path)

    raise SchemaError(
        f"SchemaError for {path}: Schema {serialize(desc)} is not a valid description.",
        path,
        serialize(desc),
    )


def parse_nested(schema: dict, path: str) -> ObjectOf:
    fields = {}
    for key, desc in schema.items():
        if not isinstance(key, str):
            raise SchemaError(
                f"SchemaError for {path}: Field name {key!r} must be a string.", path, repr(key)
            )
        if key.startswith(OPTION_PREFIX):
            continue
        fields[key] = parse(desc, join_path(path, key))

    options = SchemaOptions(exclusive=bool(schema.get(OPTION_PREFIX + "exclusive", False)))
    return ObjectOf(MappingProxyType(fields), options)
