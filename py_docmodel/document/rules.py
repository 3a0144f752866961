import datetime
import numbers

from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, Optional

Predicate = Callable[[Any], bool]


class PrimitiveKind(Enum):
    BOOLEAN = "Boolean"
    DATE = "Date"
    NUMBER = "Number"
    TEXT = "String"

    @property
    def natural_predicate(self) -> Predicate:
        return _NATURAL_PREDICATES[self]


def is_boolean(val: Any) -> bool:
    return isinstance(val, bool)


def is_date(val: Any) -> bool:
    # datetime.datetime is a subclass of datetime.date
    return isinstance(val, datetime.date)


def is_number(val: Any) -> bool:
    return isinstance(val, numbers.Real) and not isinstance(val, bool)


def is_text(val: Any) -> bool:
    return isinstance(val, str)


_NATURAL_PREDICATES: Dict[PrimitiveKind, Predicate] = {
    PrimitiveKind.BOOLEAN: is_boolean,
    PrimitiveKind.DATE: is_date,
    PrimitiveKind.NUMBER: is_number,
    PrimitiveKind.TEXT: is_text,
}


class PrimitiveRules:
    """
    Mapping of primitive kind -> predicate.

    Rules are registered while the object is being set up, then the object is
    sealed and only ever read. The compiler takes one of these explicitly.
    """

    def __init__(self):
        self._rules: Dict[PrimitiveKind, Predicate] = {}
        self._sealed = False

    @classmethod
    def seeded(cls) -> "PrimitiveRules":
        rules = cls()
        for kind in PrimitiveKind:
            rules.register(kind, kind.natural_predicate)
        return rules.seal()

    def register(self, kind: PrimitiveKind, predicate: Predicate):
        if self._sealed:
            raise RuntimeError(f"Cannot register {kind.value}: primitive rules are sealed")
        if kind in self._rules:
            raise RuntimeError(f"Primitive rule for {kind.value} is already registered")
        self._rules[kind] = predicate

    def seal(self) -> "PrimitiveRules":
        self._rules = MappingProxyType(dict(self._rules))
        self._sealed = True
        return self

    @property
    def sealed(self) -> bool:
        return self._sealed

    def lookup(self, kind: PrimitiveKind) -> Optional[Predicate]:
        return self._rules.get(kind)


DEFAULT_RULES = PrimitiveRules.seeded()
