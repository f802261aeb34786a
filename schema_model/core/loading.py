"""
Dotted-path object loading.

Dependencies: importlib (stdlib)
System role: Resolves configured class names (schemas, cursors, storage types)
"""

import importlib
from typing import Any


def load_object(path: str) -> Any:
    """
    Import an object from a dotted path.

    Accepts ``"package.module:Attr"`` (attribute chain after the colon may be
    dotted) or ``"package.module.Attr"``.

    Args:
        path: Import path of the object

    Returns:
        The resolved object

    Raises:
        ImportError: If the module or attribute cannot be resolved
    """
    if not path or not isinstance(path, str):
        raise ImportError(f"Invalid import path: {path!r}")

    if ":" in path:
        module_name, _, attr_path = path.partition(":")
    else:
        module_name, _, attr_path = path.rpartition(".")

    if not module_name or not attr_path:
        raise ImportError(f"Import path must name a module and an attribute: {path!r}")

    module = importlib.import_module(module_name)

    obj: Any = module
    for attr in attr_path.split("."):
        try:
            obj = getattr(obj, attr)
        except AttributeError as e:
            raise ImportError(f"{module_name!r} has no attribute {attr_path!r}") from e
    return obj
