"""
Keyword constraints read from schema tags.

Which keywords apply depends on the structural type of the property node, so
these setters run after the field's type has been reflected. Bounds that do not
parse are left unset, other values fall back to zero or False. Nothing raises.
"""

from __future__ import annotations

import math

from .schema_ast import Type
from .tags import FieldAnnotation, SchemaTag

# Formats accepted from the ``format=`` keyword, RFC draft-wright-json-schema-validation-00, section 7.3
STRING_FORMATS = frozenset({"date-time", "email", "hostname", "ipv4", "ipv6", "uri"})

_TRUE_VALUES = frozenset({"1", "t", "T", "TRUE", "true", "True"})


def parse_int(value: str) -> int | None:
    try:
        return int(value)
    except ValueError:
        return None


def parse_number(value: str) -> int | float | None:
    """Parse an int or a finite float. Returns None when neither parses."""
    try:
        return int(value)
    except ValueError:
        pass
    try:
        number = float(value)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def parse_bool(value: str) -> bool:
    return value in _TRUE_VALUES


def apply_field_keywords(node: Type, annotation: FieldAnnotation) -> None:
    """Overlay the description and tag keywords of a field onto its property node."""
    if annotation.description:
        node.description = annotation.description

    tag = annotation.schema_tag
    generic_keywords(node, tag)
    if node.type == "string":
        string_keywords(node, tag)
    elif node.type in ("number", "integer"):
        numeric_keywords(node, tag)
    elif node.type == "array":
        array_keywords(node, tag)


def generic_keywords(node: Type, tag: SchemaTag) -> None:
    for name, value in tag.keywords():
        if name == "title":
            node.title = value
        elif name == "description":
            node.description = value


def string_keywords(node: Type, tag: SchemaTag) -> None:
    for name, value in tag.keywords():
        if name == "minLength":
            node.min_length = parse_int(value)
        elif name == "maxLength":
            node.max_length = parse_int(value)
        elif name == "pattern":
            node.pattern = value
        elif name == "format":
            if value in STRING_FORMATS:
                node.format = value
        elif name == "default":
            node.default = value
        elif name == "example":
            node.examples.append(value)


def numeric_keywords(node: Type, tag: SchemaTag) -> None:
    for name, value in tag.keywords():
        number = parse_number(value)
        if name == "multipleOf":
            # draft-04 requires a multipleOf greater than 0
            node.multiple_of = number if number is not None and number > 0 else None
        elif name == "minimum":
            node.minimum = number
        elif name == "maximum":
            node.maximum = number
        elif name == "exclusiveMaximum":
            node.exclusive_maximum = parse_bool(value)
        elif name == "exclusiveMinimum":
            node.exclusive_minimum = parse_bool(value)
        elif name == "default":
            node.default = 0 if number is None else number
        elif name == "example":
            if number is not None:
                node.examples.append(number)


def array_keywords(node: Type, tag: SchemaTag) -> None:
    defaults: list[str] = []
    for name, value in tag.keywords():
        if name == "minItems":
            node.min_items = parse_int(value)
        elif name == "maxItems":
            node.max_items = parse_int(value)
        elif name == "uniqueItems":
            node.unique_items = True
        elif name == "default":
            defaults.append(value)
    # uniqueItems needs no value
    if tag.has_flag("uniqueItems"):
        node.unique_items = True
    if defaults:
        node.default = defaults
