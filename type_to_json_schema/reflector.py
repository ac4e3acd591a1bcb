"""
Reflection of Python types into JSON Schema.

If ``json`` tags are present in a dataclass field's metadata they are used to
infer property names and whether a property is required (``omitempty`` makes it
optional).

The ``Reflector`` holds the options and registrations; each ``reflect`` call
walks the type graph with a fresh ``_TypeWalker`` that owns the definitions
collected along the way.
"""

from __future__ import annotations

import copy
import dataclasses
import logging
import typing
from collections.abc import Callable, Iterable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, NewType

from .errors import (
    DiscriminatorRegistrationError,
    EnumRegistrationError,
    RecursiveTypeError,
    UnsupportedTypeError,
)
from .introspection import FORMAT_TYPES, TypeKind, definition_name, describe, is_proto_enum
from .keywords import apply_field_keywords
from .loader import load_type, type_path
from .registry import DiscriminatorType, EnumType, implements, is_interface
from .schema_ast import VERSION, Definitions, Schema, Type, ref_to
from .tags import resolve_field_annotation

logger = logging.getLogger(__name__)

# Returns a schema for the types it knows about and None for the rest
TypeMapper = Callable[[Any], "Type | None"]

_SCALAR_TYPES = {
    TypeKind.INTEGER: "integer",
    TypeKind.NUMBER: "number",
    TypeKind.BOOLEAN: "boolean",
    TypeKind.STRING: "string",
}


def _type_label(tp: Any) -> str:
    return getattr(tp, "__qualname__", None) or repr(tp)


def _runtime_type(tp: Any) -> Any:
    """The class instances of ``tp`` actually have at runtime."""
    while isinstance(tp, NewType):
        tp = tp.__supertype__
    return tp


@dataclass
class Reflector:
    """Options and registrations for reflecting types into schemas.

    Registrations must be complete before the first ``reflect`` call. A
    reflector can then be shared by any number of calls.
    """

    # Set additionalProperties to true on every record schema. Unknown keys
    # will then pass validation (and be dropped on decoding).
    allow_additional_properties: bool = False

    # Require fields tagged ``jsonschema:"required"`` instead of every field
    # that is not ``omitempty``.
    required_from_schema_tags: bool = False

    # Put the root record's properties on the root schema itself instead of
    # referencing a definition.
    expanded_root: bool = False

    # Records rendered as open objects without looking at their fields
    ignored_types: list[Any] = field(default_factory=list)

    # Consulted for every type before the built-in rules
    type_mapper: TypeMapper | None = None

    enum_types: list[EnumType] = field(default_factory=list)
    discriminated_types: list[DiscriminatorType] = field(default_factory=list)

    def reflect(self, tp: Any) -> Schema:
        """Reflect a type expression into a schema document."""
        return _TypeWalker(self).reflect_root(tp)

    def register_enum(self, enum_type: Any, values: Iterable[Any]) -> None:
        """Restrict every occurrence of ``enum_type`` to ``values``.

        Raises:
            EnumRegistrationError: if a value is not exactly of ``enum_type``.
        """
        values = list(values)
        expected = _runtime_type(enum_type)
        for value in values:
            if type(value) is not expected:
                raise EnumRegistrationError(f"value ({value!r}) is not {_type_label(enum_type)} type")

        self.enum_types.append(EnumType(type=enum_type, values=values))

    def register_discriminator(self, base_type: type, discriminator_field: str, variants: Mapping[str, type]) -> None:
        """Render ``base_type`` as a union of ``variants`` told apart by ``discriminator_field``.

        Raises:
            DiscriminatorRegistrationError: if ``base_type`` is not a protocol or
                abstract class, or a variant does not implement it.
        """
        if not is_interface(base_type):
            raise DiscriminatorRegistrationError(f"base type {_type_label(base_type)} should be an interface")

        for variant in variants.values():
            if not implements(variant, base_type):
                raise DiscriminatorRegistrationError(f"type {_type_label(variant)} should implement {_type_label(base_type)}")

        self.discriminated_types.append(
            DiscriminatorType(
                base_type=base_type,
                discriminator_field=discriminator_field,
                variants=dict(variants),
            )
        )

    def get_enum(self, tp: Any) -> EnumType | None:
        for enum_type in self.enum_types:
            if enum_type.type is tp:
                return enum_type
        return None

    def get_discriminator(self, tp: Any) -> DiscriminatorType | None:
        for discriminator in self.discriminated_types:
            if discriminator.base_type is tp:
                return discriminator
        return None

    def is_ignored(self, tp: Any) -> bool:
        return any(tp is ignored for ignored in self.ignored_types)

    @staticmethod
    def from_dict(d: dict) -> Reflector:
        """Create a reflector from a dictionary.

        Types are given as ``"package.module:QualName"`` strings. Enum values
        are converted by calling the enum type on each raw value.
        """
        reflector = Reflector()
        for k, v in d.items():
            if k == "ignored_types":
                reflector.ignored_types = [load_type(t) if isinstance(t, str) else t for t in v]
            elif k == "type_mapper":
                reflector.type_mapper = load_type(v) if isinstance(v, str) else v
            elif k == "enums":
                for entry in v:
                    enum_type = load_type(entry["type"])
                    try:
                        values = [enum_type(value) for value in entry.get("values", [])]
                    except (TypeError, ValueError) as e:
                        raise EnumRegistrationError(f"invalid value for {entry['type']}: {e}") from e
                    reflector.register_enum(enum_type, values)
            elif k == "discriminators":
                for entry in v:
                    reflector.register_discriminator(
                        load_type(entry["base"]),
                        entry["field"],
                        {key: load_type(path) for key, path in entry.get("variants", {}).items()},
                    )
            elif k in ("allow_additional_properties", "required_from_schema_tags", "expanded_root"):
                setattr(reflector, k, bool(v))
        return reflector

    def to_dict(self) -> dict:
        """Convert the reflector to a dictionary."""
        return {
            "allow_additional_properties": self.allow_additional_properties,
            "required_from_schema_tags": self.required_from_schema_tags,
            "expanded_root": self.expanded_root,
            "ignored_types": [type_path(t) for t in self.ignored_types],
            "type_mapper": type_path(self.type_mapper) if self.type_mapper is not None else None,
            "enums": [
                {
                    "type": type_path(e.type),
                    "values": [getattr(value, "value", value) for value in e.values],
                }
                for e in self.enum_types
            ],
            "discriminators": [
                {
                    "base": type_path(d.base_type),
                    "field": d.discriminator_field,
                    "variants": {key: type_path(t) for key, t in d.variants.items()},
                }
                for d in self.discriminated_types
            ],
        }


def reflect(tp: Any) -> Schema:
    """Reflect a type expression with the default options."""
    return Reflector().reflect(tp)


def _empty_object(additional_properties: bool) -> Type:
    return Type(type="object", properties={}, additional_properties=additional_properties)


def _const_string(value: str) -> Type:
    return Type(type="string", default=value, enum=[value])


class _TypeWalker:
    """One reflection pass. Collects definitions as named types are completed."""

    def __init__(self, reflector: Reflector):
        self.reflector = reflector
        self.definitions: Definitions = {}
        # Records whose fields are being walked
        self._in_progress: set[Any] = set()

    def reflect_root(self, tp: Any) -> Schema:
        r = self.reflector
        if r.expanded_root:
            info = describe(tp)
            while info.kind in (TypeKind.OPTIONAL, TypeKind.ALIAS):
                info = describe(info.element)
            if info.kind is TypeKind.RECORD:
                root = Type(
                    version=VERSION,
                    type="object",
                    properties={},
                    additional_properties=r.allow_additional_properties,
                )
                self.reflect_struct_fields(root, info.type)
                self.definitions.pop(definition_name(info.type), None)
                return Schema(root=root, definitions=self.definitions)
            logger.debug("expanded root requested for non-record type %s, referencing it instead", _type_label(tp))

        return Schema(root=self.reflect_type(tp), definitions=self.definitions)

    def reflect_type(self, tp: Any) -> Type:
        r = self.reflector

        # Already added to definitions?
        name = definition_name(tp)
        if name and name in self.definitions:
            return ref_to(name)

        # Decoders accept these enums either by name or by number
        if is_proto_enum(tp):
            return Type(one_of=[Type(type="string"), Type(type="integer")])

        enum_type = r.get_enum(tp)
        if enum_type is not None:
            return Type(
                enum=list(enum_type.values),
                default=enum_type.values[0] if enum_type.values else None,
            )

        if r.type_mapper is not None:
            mapped = r.type_mapper(tp)
            if mapped is not None and mapped != Type():
                logger.debug("type mapper handled %s", _type_label(tp))
                return copy.deepcopy(mapped)

        if isinstance(tp, type) and tp in FORMAT_TYPES:
            return Type(type="string", format=FORMAT_TYPES[tp])

        info = describe(tp)
        kind = info.kind

        if kind is TypeKind.RECORD:
            return self.reflect_struct(tp)

        if kind is TypeKind.MAP:
            return Type(type="object", additional_properties=self.reflect_type(info.element))

        if kind is TypeKind.BYTES:
            return Type(type="string", media=Type(binary_encoding="base64"))

        if kind in (TypeKind.SEQUENCE, TypeKind.ARRAY):
            node = Type(type="array", items=self.reflect_type(info.element))
            if kind is TypeKind.ARRAY:
                node.min_items = info.length
                node.max_items = info.length
            return node

        if kind is TypeKind.INTERFACE:
            return self.reflect_interface(tp)

        if kind in _SCALAR_TYPES:
            return Type(type=_SCALAR_TYPES[kind])

        # Nullability is not represented: T | None is reflected as T
        if kind in (TypeKind.OPTIONAL, TypeKind.ALIAS):
            return self.reflect_type(info.element)

        raise UnsupportedTypeError(f"unsupported type {_type_label(tp)}")

    def reflect_struct(self, tp: Any) -> Type:
        """Reflect a record to an object schema, registered under its name when it has one."""
        ignored = self.reflector.is_ignored(tp)
        node = _empty_object(self.reflector.allow_additional_properties or ignored)
        if ignored:
            logger.debug("%s is ignored, rendering an open object", _type_label(tp))
        else:
            self.reflect_struct_fields(node, tp)

        name = definition_name(tp)
        if not name:
            return node
        return self._add_definition(name, node)

    def reflect_interface(self, tp: Any) -> Type:
        discriminator = self.reflector.get_discriminator(tp)
        if discriminator is not None:
            branches = []
            for key, variant in discriminator.variants.items():
                branch = self.reflect_discriminated_struct(variant, discriminator.discriminator_field, key)
                branch.title = key
                branches.append(branch)
            branches.sort(key=lambda branch: branch.ref)
            logger.debug("%s reflected as a union of %d variants", _type_label(tp), len(branches))
            # A discriminated union never accepts unknown keys
            schema = Type(one_of=branches, additional_properties=False)
        else:
            schema = Type(type="object", additional_properties=True)

        name = definition_name(tp)
        if not name:
            return schema
        return self._add_definition(name, schema)

    def reflect_discriminated_struct(self, tp: type, discriminator_field: str, key: str) -> Type:
        # The same record may be a variant of several unions
        name = f"{tp.__name__}@{discriminator_field}:{key}"

        ignored = self.reflector.is_ignored(tp)
        node = _empty_object(self.reflector.allow_additional_properties or ignored)
        node.properties[discriminator_field] = _const_string(key)
        node.add_required(discriminator_field)
        if not ignored:
            self.reflect_struct_fields(node, tp)

        return self._add_definition(name, node)

    def reflect_struct_fields(self, node: Type, tp: Any) -> None:
        """Add the properties of record ``tp`` to ``node``.

        Embedded fields without a tag are flattened into ``node``; inline fields
        are added to ``allOf``. Types that are not records add nothing.
        """
        info = describe(tp)
        while info.kind in (TypeKind.OPTIONAL, TypeKind.ALIAS):
            info = describe(info.element)
        if info.kind is not TypeKind.RECORD:
            return

        record = info.type
        try:
            hints = typing.get_type_hints(record, include_extras=True)
        except NameError as e:
            raise UnsupportedTypeError(f"cannot resolve field types of {_type_label(record)}: {e}") from e

        with self._visiting(record):
            for f in dataclasses.fields(record):
                annotation = resolve_field_annotation(f, self.reflector.required_from_schema_tags)
                if annotation.ignored:
                    continue

                field_type = hints.get(f.name, f.type)

                if annotation.inline:
                    node.all_of.append(self.reflect_type(field_type))
                    continue

                if annotation.flatten:
                    self.reflect_struct_fields(node, field_type)
                    continue

                prop = self.reflect_type(field_type)
                apply_field_keywords(prop, annotation)
                node.properties[annotation.name] = prop
                if annotation.required:
                    node.add_required(annotation.name)

        # A single inlined schema is the record's own union
        if len(node.all_of) == 1 and not node.one_of:
            node.one_of = node.all_of
            node.all_of = []

    @contextmanager
    def _visiting(self, record: Any) -> Iterator[None]:
        if record in self._in_progress:
            raise RecursiveTypeError(f"type {_type_label(record)} refers to itself, recursive types are not supported")
        self._in_progress.add(record)
        try:
            yield
        finally:
            self._in_progress.discard(record)

    def _add_definition(self, name: str, node: Type) -> Type:
        logger.debug("adding definition %s", name)
        self.definitions[name] = node
        return ref_to(name)
