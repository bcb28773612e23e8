from __future__ import annotations

from typing_extensions import Any, Callable, Protocol, TypeAlias, runtime_checkable

from ndformat.truncation import ElementIndex, to_be_printed
from ndformat.view import View


@runtime_checkable
class Sink(Protocol):
    """Anything that accepts text fragments, e.g. ``io.StringIO`` or ``sys.stdout``."""
    def write(self, s: str, /) -> Any: ...


ElementFormatter: TypeAlias = Callable[[Any, Sink], None]


def format_1d_array(view: View, sink: Sink, fmt: ElementFormatter, limit: int) -> None:
    if view.ndim != 1:
        msg = f"Expected a view of rank 1, got rank {view.ndim}"
        raise ValueError(msg)
    cells = to_be_printed(view.shape[0], limit)
    last = len(cells) - 1

    sink.write("[")
    for j, cell in enumerate(cells):
        if isinstance(cell, ElementIndex):
            fmt(view.get((cell.position,)), sink)
            if j != last:
                sink.write(", ")
        else:
            sink.write("..., ")
    sink.write("]")


def format_array(view: View, sink: Sink, fmt: ElementFormatter, limit: int) -> None:
    """Write the bracketed text of ``view`` to ``sink``, truncating every axis longer than ``2 * limit``.

    Any exception raised by ``fmt`` or ``sink.write`` aborts the whole render.
    Fragments already written stay in the sink.

    Example:
        >>> import io, numpy as np
        >>> from ndformat.view import ArrayView
        >>> out = io.StringIO()
        >>> format_array(ArrayView(np.ones((2, 0))), out, lambda x, s: s.write(str(x)), 3)
        >>> out.getvalue()
        '[[]]'
    """
    shape = view.shape
    # Any zero-length axis gives the same empty representation, e.g. [[]] for 2-d.
    if any(n == 0 for n in shape):
        sink.write("[" * view.ndim + "]" * view.ndim)
        return
    if view.ndim == 0:
        fmt(view.get(()), sink)
        return
    if view.ndim == 1:
        format_1d_array(view, sink, fmt, limit)
        return

    view = view.into_dyn()
    cells = to_be_printed(shape[0], limit)
    last = len(cells) - 1

    sink.write("[")
    for j, cell in enumerate(cells):
        if isinstance(cell, ElementIndex):
            format_array(view.index_axis(0, cell.position), sink, fmt, limit)
            if j != last:
                sink.write(",\n ")
        else:
            sink.write("...,\n ")
    sink.write("]")
