from __future__ import annotations

import numpy as np
from rich.console import Console
from rich.text import Text
from typing_extensions import Any

from ndformat.flavors import Flavor, render

_console: Console | None = None


def getconsole() -> Console:
    """Get the current console."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def setconsole(console: Console) -> None:
    """Set the current console."""
    global _console
    _console = console


def as_text(obj: Any, flavor: Flavor | str = Flavor.PLAIN, spec: str = "") -> Text | Any:
    """Rendered arrays become plain rich Text so brackets are not read as markup."""
    if isinstance(obj, np.ndarray):
        return Text(render(obj, flavor, spec))
    return obj


def safe_print(*objs: Any, flavor: Flavor | str = Flavor.PLAIN, spec: str = "", **kwargs: Any) -> None:
    kwargs.setdefault("soft_wrap", True)
    kwargs.setdefault("highlight", False)
    getconsole().print(*(as_text(obj, flavor, spec) for obj in objs), **kwargs)
