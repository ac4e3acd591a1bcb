"""
AST (Abstract Syntax Tree) node definitions for JSON Schema.

A reflected schema is a tree of ``Type`` nodes plus a flat map of named
definitions. ``to_dict`` renders the tree to plain JSON-compatible values;
turning that into text is left to ``json``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any

# RFC draft-wright-json-schema-00, section 6
VERSION = "http://json-schema.org/draft-04/schema#"

DEFINITIONS_PREFIX = "#/definitions/"

# Attributes whose keyword is not the camelCase of the attribute name
_KEYWORD_OVERRIDES = {
    "version": "$schema",
    "ref": "$ref",
    "not_": "not",
}


def _keyword(attribute: str) -> str:
    if attribute in _KEYWORD_OVERRIDES:
        return _KEYWORD_OVERRIDES[attribute]
    head, *rest = attribute.split("_")
    return head + "".join(word.capitalize() for word in rest)


def _json_value(value: Any) -> Any:
    """Convert registered enum members and containers to plain JSON values."""
    if isinstance(value, Enum):
        return _json_value(value.value)
    if isinstance(value, (list, tuple)):
        return [_json_value(v) for v in value]
    if isinstance(value, dict):
        return {str(k): _json_value(v) for k, v in value.items()}
    return value


@dataclass
class Type:
    """A single JSON Schema fragment.

    Attributes left at their defaults are omitted from ``to_dict``. Numeric
    bounds use ``None`` for "unset" so that an explicit ``0`` is kept.
    """

    # RFC draft-wright-json-schema-00
    version: str = ""  # section 6.1
    ref: str = ""  # section 7

    # RFC draft-wright-json-schema-validation-00, section 5
    multiple_of: int | float | None = None
    maximum: int | float | None = None
    exclusive_maximum: bool = False
    minimum: int | float | None = None
    exclusive_minimum: bool = False
    max_length: int | None = None
    min_length: int | None = None
    pattern: str = ""
    additional_items: Type | None = None
    items: Type | None = None
    max_items: int | None = None
    min_items: int | None = None
    unique_items: bool = False
    max_properties: int | None = None
    min_properties: int | None = None
    required: list[str] = field(default_factory=list)
    # None is omitted, an empty dict is rendered as {}
    properties: dict[str, Type] | None = None
    pattern_properties: dict[str, Type] = field(default_factory=dict)
    # bool or a schema for the values; False is rendered
    additional_properties: bool | Type | None = None
    dependencies: dict[str, Type] = field(default_factory=dict)
    enum: list[Any] = field(default_factory=list)
    type: str = ""
    all_of: list[Type] = field(default_factory=list)
    any_of: list[Type] = field(default_factory=list)
    one_of: list[Type] = field(default_factory=list)
    not_: Type | None = None
    definitions: dict[str, Type] = field(default_factory=dict)

    # RFC draft-wright-json-schema-validation-00, section 6, 7
    title: str = ""
    description: str = ""
    default: Any = None
    format: str = ""
    examples: list[Any] = field(default_factory=list)

    # RFC draft-wright-json-schema-hyperschema-00, section 4
    media: Type | None = None
    binary_encoding: str = ""

    def add_required(self, name: str) -> None:
        if name not in self.required:
            self.required.append(name)

    def to_dict(self) -> dict[str, Any]:
        """Render the node as a JSON-compatible dict, omitting empty keywords."""
        out: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            keyword = _keyword(f.name)

            if f.name == "properties":
                if value is not None:
                    out[keyword] = {name: prop.to_dict() for name, prop in value.items()}
                continue
            if f.name == "additional_properties":
                if isinstance(value, Type):
                    out[keyword] = value.to_dict()
                elif value is not None:
                    out[keyword] = value
                continue
            if f.name == "default":
                if value is not None:
                    out[keyword] = _json_value(value)
                continue

            if value is None or value is False or value == "":
                continue
            if isinstance(value, (list, dict)) and not value:
                continue

            if isinstance(value, Type):
                out[keyword] = value.to_dict()
            elif isinstance(value, dict):
                out[keyword] = {name: node.to_dict() for name, node in value.items()}
            elif isinstance(value, list) and value and isinstance(value[0], Type):
                out[keyword] = [node.to_dict() for node in value]
            else:
                out[keyword] = _json_value(value)
        return out


# Named schema fragments, referenced through "#/definitions/<name>"
Definitions = dict[str, Type]


def ref_to(name: str) -> Type:
    """Build a reference node pointing at a named definition."""
    return Type(version=VERSION, ref=DEFINITIONS_PREFIX + name)


@dataclass
class Schema:
    """The reflected document: a root node plus the definitions it refers to."""

    root: Type = field(default_factory=Type)
    definitions: Definitions = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        out = self.root.to_dict()
        if self.definitions:
            out["definitions"] = {name: self.definitions[name].to_dict() for name in sorted(self.definitions)}
        return out

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)
