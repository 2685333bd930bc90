"""Resolve "package.module:attr" references to objects."""

import importlib
from typing import Any


def load_object(spec: str) -> Any:
    """Import and return the object named by spec.

    Args:
        spec: "package.module:attr" or "package.module.attr". Nested
            attributes are allowed after the colon ("mod:Class.factory").

    Returns:
        The referenced object.

    Raises:
        ValueError: If spec is empty or has no attribute part.
        ImportError: If the module cannot be imported.
        AttributeError: If the attribute does not exist.
    """
    spec = (spec or "").strip()
    if not spec:
        raise ValueError("Empty object reference")

    if ":" in spec:
        module_name, _, attr_path = spec.partition(":")
    else:
        module_name, _, attr_path = spec.rpartition(".")
    if not module_name or not attr_path:
        raise ValueError(f"Object reference must look like 'package.module:attr', got {spec!r}")

    obj: Any = importlib.import_module(module_name)
    for part in attr_path.split("."):
        obj = getattr(obj, part)
    return obj


def build_object(spec: str) -> Any:
    """Load spec and, if it is callable, call it with no arguments."""
    obj = load_object(spec)
    return obj() if callable(obj) else obj
