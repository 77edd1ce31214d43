from __future__ import annotations

import importlib
from typing import Any


def load_symbol(dotted: str) -> Any:
    """
    Load a class or function from a dotted path.
    Supports both "package.module:ClassName" and "package.module.ClassName".
    """
    if ":" in dotted:
        module_name, symbol_name = dotted.split(":", 1)
    else:
        module_name, _, symbol_name = dotted.rpartition(".")
    if not module_name or not symbol_name:
        raise ValueError(f"Not a dotted path: {dotted!r}")

    module = importlib.import_module(module_name)
    try:
        return getattr(module, symbol_name)
    except AttributeError:
        raise ImportError(f"{module_name} has no attribute {symbol_name!r}") from None
