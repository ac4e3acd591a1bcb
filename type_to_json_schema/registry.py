"""
Registrations consulted during reflection.

Enum registrations pin a type to a fixed list of literal values. Discriminator
registrations map the literal values of one property to the concrete classes
implementing an interface type.
"""

from __future__ import annotations

import dataclasses
import inspect
from abc import ABCMeta
from dataclasses import dataclass, field
from typing import Any, Generic, Protocol


@dataclass
class EnumType:
    type: Any
    values: list[Any] = field(default_factory=list)


@dataclass
class DiscriminatorType:
    base_type: type
    discriminator_field: str
    variants: dict[str, type] = field(default_factory=dict)


def is_protocol(tp: Any) -> bool:
    """True for classes declared with ``typing.Protocol`` (not their implementations)."""
    return isinstance(tp, type) and bool(getattr(tp, "_is_protocol", False))


def is_interface(tp: Any) -> bool:
    """True for capability types: protocols and abstract base classes that are not dataclasses."""
    if not isinstance(tp, type) or dataclasses.is_dataclass(tp):
        return False
    return is_protocol(tp) or isinstance(tp, ABCMeta)


def protocol_members(proto: type) -> set[str]:
    """Public attribute and method names a protocol requires."""
    members: set[str] = set()
    for klass in proto.__mro__:
        if klass in (object, Protocol, Generic) or not getattr(klass, "_is_protocol", False):
            continue
        for name in [*vars(klass), *inspect.get_annotations(klass)]:
            if not name.startswith("_"):
                members.add(name)
    return members


def _has_member(tp: type, name: str) -> bool:
    if hasattr(tp, name):
        return True
    # Dataclass fields without defaults only exist as annotations
    return any(name in inspect.get_annotations(klass) for klass in tp.__mro__)


def implements(tp: Any, interface: type) -> bool:
    """Whether ``tp`` satisfies ``interface``.

    Abstract base classes use ``issubclass`` (so virtual subclasses count).
    Protocols are checked structurally unless ``tp`` subclasses them directly.
    """
    if not isinstance(tp, type):
        return False
    if is_protocol(interface):
        if interface in tp.__mro__:
            return True
        return all(_has_member(tp, name) for name in protocol_members(interface))
    return issubclass(tp, interface)
