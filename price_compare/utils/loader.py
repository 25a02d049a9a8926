from __future__ import annotations

import importlib
from typing import Any, Optional, Type


def load_symbol(dotted: str, *, expected: Optional[Type[Any]] = None) -> Any:
    """
    Load a class or function from a dotted path.
    Supports both "package.module:ClassName" and "package.module.ClassName".
    When ``expected`` is given the symbol must be a subclass of it.
    """
    if ":" in dotted:
        module_name, symbol_name = dotted.split(":", 1)
    elif "." in dotted:
        module_name, symbol_name = dotted.rsplit(".", 1)
    else:
        raise ImportError(f"Not a dotted path: {dotted!r}")

    module = importlib.import_module(module_name)
    try:
        symbol = getattr(module, symbol_name)
    except AttributeError as exc:
        raise ImportError(f"{module_name} has no attribute {symbol_name!r}") from exc

    if expected is not None and not (isinstance(symbol, type) and issubclass(symbol, expected)):
        raise TypeError(f"{dotted} is not a {expected.__name__}")
    return symbol
