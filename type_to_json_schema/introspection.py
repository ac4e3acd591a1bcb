"""
Structural description of Python type expressions.

``describe`` sorts a type expression into one of a closed set of kinds. The
reflector switches on that kind and never inspects ``typing`` internals itself.
"""

from __future__ import annotations

import dataclasses
import types
import typing
from collections.abc import Mapping, Sequence, Set
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from ipaddress import IPv4Address, IPv6Address
from typing import Annotated, Any, NewType, Protocol, Union, runtime_checkable
from urllib.parse import ParseResult, SplitResult

from .registry import is_interface, is_protocol


class TypeKind(str, Enum):
    RECORD = "record"
    MAP = "map"
    SEQUENCE = "sequence"
    ARRAY = "array"  # fixed length
    BYTES = "bytes"
    INTERFACE = "interface"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    STRING = "string"
    OPTIONAL = "optional"  # T | None
    ALIAS = "alias"  # NewType, Annotated, type statement
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class TypeInfo:
    kind: TypeKind
    type: Any
    # Element type of sequences, value type of maps, target of optionals and aliases
    element: Any = None
    length: int | None = None


# Types rendered as formatted strings, RFC draft-wright-json-schema-validation-00, section 7.3
FORMAT_TYPES: dict[type, str] = {
    datetime: "date-time",  # section 7.3.1
    ParseResult: "uri",  # section 7.3.6
    SplitResult: "uri",
    # TODO: emit "ipv6" for IPv6Address once consumers accept it, section 7.3.5
    IPv4Address: "ipv4",  # section 7.3.4
    IPv6Address: "ipv4",
}


@runtime_checkable
class ProtoEnum(Protocol):
    """Enums whose JSON encoding may be either the member name or its number."""

    def enum_descriptor(self) -> Any: ...


def is_proto_enum(tp: Any) -> bool:
    return isinstance(tp, type) and not is_protocol(tp) and issubclass(tp, ProtoEnum)


def definition_name(tp: Any) -> str:
    """Declared name of a class, or "" for typing constructs and local classes."""
    # Any is a class since Python 3.11
    if tp is Any or tp is object or not isinstance(tp, type):
        return ""
    if "<locals>" in tp.__qualname__:
        return ""
    return tp.__name__


def _describe_generic(tp: Any, origin: Any, args: tuple[Any, ...]) -> TypeInfo:
    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return TypeInfo(TypeKind.SEQUENCE, tp, element=args[0])
        if not args:
            return TypeInfo(TypeKind.ARRAY, tp, element=Any, length=0)
        if all(arg == args[0] for arg in args):
            return TypeInfo(TypeKind.ARRAY, tp, element=args[0], length=len(args))
        return TypeInfo(TypeKind.UNSUPPORTED, tp)

    if isinstance(origin, type):
        if issubclass(origin, Mapping):
            value = args[1] if len(args) == 2 else Any
            return TypeInfo(TypeKind.MAP, tp, element=value)
        if issubclass(origin, (Sequence, Set)):
            return TypeInfo(TypeKind.SEQUENCE, tp, element=args[0] if args else Any)

    return TypeInfo(TypeKind.UNSUPPORTED, tp)


def describe(tp: Any) -> TypeInfo:
    """Classify a type expression."""
    origin = typing.get_origin(tp)
    args = typing.get_args(tp)

    if origin is Annotated:
        return TypeInfo(TypeKind.ALIAS, tp, element=args[0])
    if isinstance(tp, NewType):
        return TypeInfo(TypeKind.ALIAS, tp, element=tp.__supertype__)
    if isinstance(tp, typing.TypeAliasType):
        return TypeInfo(TypeKind.ALIAS, tp, element=tp.__value__)

    if origin is Union or origin is types.UnionType:
        members = [arg for arg in args if arg is not type(None)]
        if len(members) == 1 and len(members) < len(args):
            return TypeInfo(TypeKind.OPTIONAL, tp, element=members[0])
        return TypeInfo(TypeKind.UNSUPPORTED, tp)

    # The empty interface: anything goes
    if tp is Any or tp is object:
        return TypeInfo(TypeKind.INTERFACE, tp)

    if origin is not None:
        return _describe_generic(tp, origin, args)

    if not isinstance(tp, type):
        return TypeInfo(TypeKind.UNSUPPORTED, tp)

    if dataclasses.is_dataclass(tp):
        return TypeInfo(TypeKind.RECORD, tp)
    if issubclass(tp, (bytes, bytearray)):
        return TypeInfo(TypeKind.BYTES, tp)
    if issubclass(tp, bool):
        return TypeInfo(TypeKind.BOOLEAN, tp)
    if issubclass(tp, int):
        return TypeInfo(TypeKind.INTEGER, tp)
    if issubclass(tp, (float, Decimal)):
        return TypeInfo(TypeKind.NUMBER, tp)
    if issubclass(tp, str):
        return TypeInfo(TypeKind.STRING, tp)
    if issubclass(tp, Mapping):
        return TypeInfo(TypeKind.MAP, tp, element=Any)
    if issubclass(tp, (Sequence, Set)):
        return TypeInfo(TypeKind.SEQUENCE, tp, element=Any)
    if is_interface(tp):
        return TypeInfo(TypeKind.INTERFACE, tp)
    return TypeInfo(TypeKind.UNSUPPORTED, tp)
