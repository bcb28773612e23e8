import os

import numpy as np

from ndformat.flavors import (
    Flavor,
    UnsupportedFlavorError,
    format_binary,
    format_debug,
    format_display,
    format_lower_exp,
    format_lower_hex,
    format_upper_exp,
    render,
    write_array,
)
from ndformat.ndarray import ndarray
from ndformat.truncation import PRINT_ELEMENTS_LIMIT
from ndformat.view import ArrayView, Layout, RankKind, View

__all__ = [
    "PRINT_ELEMENTS_LIMIT",
    "ArrayView",
    "Flavor",
    "Layout",
    "RankKind",
    "UnsupportedFlavorError",
    "View",
    "display",
    "format_binary",
    "format_debug",
    "format_display",
    "format_lower_exp",
    "format_lower_hex",
    "format_upper_exp",
    "ndarray",
    "render",
    "write_array",
]


def display(
    obj,
    max_length=50,
    max_string=100,
    indent_guides=False,
    overflow="ellipsis",
):
    """Short text of ``obj``: arrays go through the renderer, anything else through rich's pretty printer."""
    if isinstance(obj, np.ndarray):
        return render(obj)
    if os.getenv("NO_RICH"):
        return repr(obj)[:max_string]
    from io import StringIO

    from rich.console import Console
    from rich.pretty import Pretty
    strio = StringIO()
    c = Console(record=True, soft_wrap=True, file=strio)
    c.print(
        Pretty(
            obj,
            max_length=max_length,
            max_string=max_string,
            indent_guides=indent_guides,
            overflow=overflow,
        ),
    )
    return c.export_text(styles=False).strip()[:max_string]
