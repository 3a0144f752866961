import logging

from collections.abc import Mapping
from typing import Any, Callable, Dict

from .description import ArrayOf, Node, ObjectOf, Primitive, join_path, parse_nested
from .errors import SchemaError, ValidationError
from .rules import DEFAULT_RULES, PrimitiveRules

_LOGGER = logging.getLogger(__name__)

Validator = Callable[[Any], None]


def compile_node(node: Node, path: str, rules: PrimitiveRules = DEFAULT_RULES) -> Validator:
    if isinstance(node, ArrayOf):
        return _compile_array(node, path, rules)
    if isinstance(node, Primitive):
        return _compile_primitive(node, path, rules)
    if isinstance(node, ObjectOf):
        return compile_nested(node, path, rules)
    raise SchemaError(f"SchemaError for {path}: Schema {node!r} is not a valid description.", path, repr(node))


def _compile_array(node: ArrayOf, path: str, rules: PrimitiveRules) -> Validator:
    element_validator = compile_node(node.element, path, rules)
    expected = node.describe()
    err = f"ValidationError for {path}: Expected {expected}"

    def validate_array(val):
        if not isinstance(val, (list, tuple)):
            raise ValidationError(err, path, expected)
        for item in val:
            element_validator(item)

    return validate_array


def _compile_primitive(node: Primitive, path: str, rules: PrimitiveRules) -> Validator:
    predicate = rules.lookup(node.kind)
    if predicate is None:
        raise SchemaError(
            f"SchemaError for {path}: No primitive rule registered for {node.kind.value}.",
            path,
            node.kind.value,
        )
    expected = node.describe()
    err = f"ValidationError for {path}: Expected {expected}"

    def validate_primitive(val):
        if not predicate(val):
            raise ValidationError(err, path, expected)

    return validate_primitive


def compile_nested(node: ObjectOf, path: str, rules: PrimitiveRules = DEFAULT_RULES) -> Validator:
    _LOGGER.debug("Generating model for %s", path)

    field_validators: Dict[str, Validator] = {
        key: compile_node(desc, join_path(path, key), rules)
        for key, desc in node.fields.items()
    }
    declared = frozenset(field_validators)
    not_object = f"ValidationError for {path}: Expected object"

    def validate_fields(obj):
        for key, func in field_validators.items():
            func(obj.get(key))

    if node.options.exclusive:
        def validate_exclusive(obj):
            if not isinstance(obj, Mapping):
                raise ValidationError(not_object, path, "object")
            extra = [k for k in obj if k not in declared]
            if extra:
                raise ValidationError(
                    f"ValidationError for {path}: Found extra keys [{','.join(map(str, extra))}]. "
                    "Reason: Exclusive flag set to true in schema options.",
                    path,
                    extra_keys=extra,
                )
            validate_fields(obj)

        return validate_exclusive

    def validate_object(obj):
        if not isinstance(obj, Mapping):
            raise ValidationError(not_object, path, "object")
        validate_fields(obj)

    return validate_object


def compile_description(schema: Any, name: str, rules: PrimitiveRules = DEFAULT_RULES) -> Validator:
    """Parse and compile a top-level schema description in one step."""
    if not isinstance(schema, dict):
        raise SchemaError(
            f"SchemaError for {name}: Top-level schema must be a dict, got {type(schema).__name__}.",
            name,
            repr(schema),
        )
    return compile_nested(parse_nested(schema, name), name, rules)


class Schema:
    def __init__(self, fields: dict, name: str, rules: PrimitiveRules = DEFAULT_RULES):
        """
        fields example:
        {
            "name": str,
            "tags": [str],
            "address": {"_exclusive": True, "city": str, "zip": int},
        }

        The description is compiled here, once; validate() only runs the
        resulting closures.
        """
        self.fields = fields
        self.name = name
        self._validator = compile_description(fields, name, rules)

    def validate(self, doc: Any):
        self._validator(doc)

    def __repr__(self):
        return f"<Schema {self.name}>"
