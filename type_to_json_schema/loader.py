"""
Resolution of types from ``"package.module:QualName"`` strings.
"""

from __future__ import annotations

import importlib
from typing import Any

from .errors import TypeLoadError


def load_type(path: str) -> Any:
    """Import ``module:Qual.Name`` (or ``module.Name``) and return the object it names."""
    module_name, sep, qualname = path.partition(":")
    if not sep:
        module_name, _, qualname = path.rpartition(".")
    if not module_name or not qualname:
        raise TypeLoadError(f"expected 'module:QualName', got {path!r}")

    try:
        obj = importlib.import_module(module_name)
    except ImportError as e:
        raise TypeLoadError(f"cannot import module {module_name!r}: {e}") from e

    for part in qualname.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise TypeLoadError(f"module {module_name!r} has no attribute {qualname!r}") from e
    return obj


def type_path(obj: Any) -> str:
    """Inverse of ``load_type``."""
    return f"{obj.__module__}:{obj.__qualname__}"
