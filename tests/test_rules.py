"""Unit tests for the primitive rule registry."""

import datetime

import pytest

from py_docmodel.document.rules import DEFAULT_RULES, PrimitiveKind, PrimitiveRules


@pytest.mark.parametrize(
    "kind, accepted, rejected",
    [
        (PrimitiveKind.BOOLEAN, [True, False], [0, 1, "true", None]),
        (PrimitiveKind.DATE, [datetime.date(2020, 1, 1), datetime.datetime(2020, 1, 1, 12)],
         ["2020-01-01", 1577836800, None]),
        (PrimitiveKind.NUMBER, [42, 0, -1.5, float("inf")], ["42", True, None, [1]]),
        (PrimitiveKind.TEXT, ["", "abc"], [b"abc", 1, None]),
    ],
)
def test_default_rules_use_natural_predicates(kind, accepted, rejected):
    predicate = DEFAULT_RULES.lookup(kind)
    assert predicate is not None
    assert all(predicate(v) for v in accepted)
    assert not any(predicate(v) for v in rejected)


def test_default_rules_cover_every_kind_and_are_sealed():
    assert DEFAULT_RULES.sealed
    for kind in PrimitiveKind:
        assert DEFAULT_RULES.lookup(kind) is kind.natural_predicate


def test_sealed_registry_rejects_registration():
    with pytest.raises(RuntimeError, match="sealed"):
        DEFAULT_RULES.register(PrimitiveKind.TEXT, lambda v: True)


def test_duplicate_registration_rejected():
    rules = PrimitiveRules()
    rules.register(PrimitiveKind.TEXT, str.isidentifier)
    with pytest.raises(RuntimeError, match="already registered"):
        rules.register(PrimitiveKind.TEXT, str.isidentifier)


def test_lookup_of_unregistered_kind_is_none():
    rules = PrimitiveRules().seal()
    assert rules.lookup(PrimitiveKind.NUMBER) is None
