"""
Exceptions raised while registering or reflecting types.
"""


class ReflectionError(Exception):
    """Base class for all errors raised by this package."""


class RegistrationError(ReflectionError):
    """A registration call was rejected. The registry is left unchanged."""


class EnumRegistrationError(RegistrationError):
    pass


class DiscriminatorRegistrationError(RegistrationError):
    pass


class UnsupportedTypeError(ReflectionError, TypeError):
    """The type expression has no JSON Schema rendering. Aborts the whole reflection."""


class RecursiveTypeError(UnsupportedTypeError):
    """A named type refers back to itself before its definition is complete."""


class TypeLoadError(ReflectionError, ImportError):
    pass
