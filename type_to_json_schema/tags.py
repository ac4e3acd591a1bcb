"""
Field tag parsing.

Dataclass fields describe their serialized form through ``field(metadata=...)``
entries, using the same tag grammar as Go struct tags::

    @dataclass
    class User:
        name: str = schema_field(json="name", jsonschema="required,minLength=1")
        nickname: str = schema_field(json="nickname,omitempty", default="")

Two namespaces are read per field. The serialization tag (``json``, falling back
to ``yaml``) gives the property name and the ``omitempty``/``inline`` options.
The schema tag (``jsonschema``) carries the ``required`` flag and ``key=value``
keyword constraints. ``resolve_field_annotation`` folds both into a
``FieldAnnotation`` once per field.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

JSON_TAG = "json"
YAML_TAG = "yaml"
SCHEMA_TAG = "jsonschema"
DESCRIPTION_TAG = "jsonschema_description"
EMBEDDED = "embedded"

# Tag value that drops a field from the schema
IGNORE = "-"


@dataclass(frozen=True)
class JsonTag:
    """Parsed serialization tag: ``name,option,option``."""

    name: str = ""
    options: tuple[str, ...] = ()

    @classmethod
    def parse(cls, text: str) -> JsonTag:
        name, *options = text.split(",")
        return cls(name=name, options=tuple(options))

    @property
    def ignored(self) -> bool:
        return self.name == IGNORE

    @property
    def omitempty(self) -> bool:
        return "omitempty" in self.options

    @property
    def inline(self) -> bool:
        return "inline" in self.options


@dataclass(frozen=True)
class SchemaTag:
    """Parsed schema tag: a comma separated list of flags and ``key=value`` pairs.

    Values cannot contain ``,`` or ``=``; an item that does not split into
    exactly one key and one value is treated as a bare flag.
    """

    items: tuple[str, ...] = ()

    @classmethod
    def parse(cls, text: str) -> SchemaTag:
        if not text:
            return cls()
        return cls(items=tuple(text.split(",")))

    @property
    def ignored(self) -> bool:
        return bool(self.items) and self.items[0] == IGNORE

    @property
    def required(self) -> bool:
        return self.has_flag("required")

    def has_flag(self, name: str) -> bool:
        return name in self.items

    def keywords(self) -> Iterator[tuple[str, str]]:
        """Yield ``(key, value)`` pairs in tag order."""
        for item in self.items:
            parts = item.split("=")
            if len(parts) == 2:
                yield parts[0], parts[1]


@dataclass(frozen=True)
class FieldAnnotation:
    """How a single dataclass field appears in its owner's schema.

    An empty ``name`` means the field has no property of its own: it is either
    ignored or, when ``flatten`` is set, its type's fields are spliced into the
    owner.
    """

    name: str = ""
    required: bool = False
    inline: bool = False
    ignored: bool = False
    flatten: bool = False
    schema_tag: SchemaTag = SchemaTag()
    description: str = ""


_IGNORED = FieldAnnotation(ignored=True)


def is_embedded(f: dataclasses.Field) -> bool:
    return bool(f.metadata.get(EMBEDDED, False))


def resolve_field_annotation(f: dataclasses.Field, required_from_schema_tags: bool = False) -> FieldAnnotation:
    """Resolve the name, required and inline flags of a dataclass field."""
    metadata = f.metadata
    tagged = JSON_TAG in metadata
    json_tag = JsonTag.parse(metadata[JSON_TAG] if tagged else metadata.get(YAML_TAG, ""))
    schema_tag = SchemaTag.parse(metadata.get(SCHEMA_TAG, ""))

    if json_tag.ignored or schema_tag.ignored:
        return _IGNORED

    embedded = is_embedded(f)
    # Private attributes are not serialized unless embedded
    if not embedded and f.name.startswith("_"):
        return _IGNORED

    # An embedded field without an explicit tag is inherited by its owner
    if embedded and not tagged:
        return FieldAnnotation(inline=json_tag.inline, flatten=True)

    if required_from_schema_tags:
        required = schema_tag.required
    else:
        required = not json_tag.omitempty

    return FieldAnnotation(
        name=json_tag.name or f.name,
        required=required,
        inline=json_tag.inline,
        schema_tag=schema_tag,
        description=metadata.get(DESCRIPTION_TAG, ""),
    )


def schema_field(
    *,
    json: str | None = None,
    yaml: str | None = None,
    jsonschema: str | None = None,
    description: str | None = None,
    embedded: bool = False,
    metadata: dict[str, Any] | None = None,
    **kwargs: Any,
) -> Any:
    """``dataclasses.field`` with the tag metadata filled in.

    Any other keyword (``default``, ``default_factory``, ``repr``...) is passed
    through to ``dataclasses.field``.
    """
    meta = dict(metadata or {})
    if json is not None:
        meta[JSON_TAG] = json
    if yaml is not None:
        meta[YAML_TAG] = yaml
    if jsonschema is not None:
        meta[SCHEMA_TAG] = jsonschema
    if description is not None:
        meta[DESCRIPTION_TAG] = description
    if embedded:
        meta[EMBEDDED] = True
    return dataclasses.field(metadata=meta, **kwargs)
