"""Helpers for importing suite and factory files by path."""

import importlib
import importlib.util
import sys
from pathlib import Path
from types import ModuleType
from typing import Any


def module_name_for(path: Path, root: Path, strip_suffix: str = "") -> str:
    """Derive a dotted name from a file's path relative to ``root``.

    ``models/user_suite.py`` under ``root`` becomes ``models.user_suite``;
    with ``strip_suffix="_factory"``, ``users/admin_factory.py`` becomes
    ``users.admin``.
    """
    parts = list(path.relative_to(root).with_suffix("").parts)
    if strip_suffix and parts[-1].endswith(strip_suffix) and parts[-1] != strip_suffix:
        parts[-1] = parts[-1][: -len(strip_suffix)]
    return ".".join(parts)


def load_module(path: Path, module_name: str) -> ModuleType:
    """Import a Python file under the given module name.

    The module is registered in ``sys.modules`` while it executes so that
    dataclasses and other introspecting decorators can find it. A failed
    import leaves no entry behind.
    """
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot create an import spec for {path}")

    module = importlib.util.module_from_spec(spec)
    previous = sys.modules.get(module_name)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        if previous is not None:
            sys.modules[module_name] = previous
        else:
            sys.modules.pop(module_name, None)
        raise
    return module


def classes_defined_in(module: ModuleType) -> list[type]:
    """Return the classes whose definition lives in ``module``, in source order."""
    return [
        value
        for value in vars(module).values()
        if isinstance(value, type) and value.__module__ == module.__name__
    ]


def resolve_object(path: str) -> Any:
    """Import an object from ``"package.module:attr"`` or ``"package.module.attr"``."""
    if ":" in path:
        module_name, _, attr_path = path.partition(":")
    else:
        module_name, _, attr_path = path.rpartition(".")
    if not module_name or not attr_path:
        raise ValueError(f"Not an import path: {path!r}")

    obj: Any = importlib.import_module(module_name)
    for attr in attr_path.split("."):
        obj = getattr(obj, attr)
    return obj
