"""
Schema AST (Abstract Syntax Tree) module.

Contains the JSON Schema node model produced by the reflector.
"""

from __future__ import annotations

from .nodes import DEFINITIONS_PREFIX, VERSION, Definitions, Schema, Type, ref_to

__all__ = [
    "Type",
    "Schema",
    "Definitions",
    "VERSION",
    "DEFINITIONS_PREFIX",
    "ref_to",
]
