"""Type to JSON Schema

Reflects Python dataclasses and type annotations into JSON Schema documents,
with shared definitions, tag driven constraints, registered enums and
discriminated unions.
"""

__version__ = "1.0.0"

from .errors import (
    DiscriminatorRegistrationError,
    EnumRegistrationError,
    RecursiveTypeError,
    ReflectionError,
    RegistrationError,
    TypeLoadError,
    UnsupportedTypeError,
)
from .introspection import ProtoEnum
from .reflector import Reflector, reflect
from .schema_ast import VERSION, Definitions, Schema, Type
from .tags import schema_field

__all__ = [
    "Reflector",
    "reflect",
    "schema_field",
    "ProtoEnum",
    "Schema",
    "Type",
    "Definitions",
    "VERSION",
    "ReflectionError",
    "RegistrationError",
    "EnumRegistrationError",
    "DiscriminatorRegistrationError",
    "UnsupportedTypeError",
    "RecursiveTypeError",
    "TypeLoadError",
]
