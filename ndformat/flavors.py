"""Output flavors of the array renderer.

Every flavor renders the same bracketed body and differs only in how a single element is
turned into text. The element spec is applied to each element with :func:`format`, so
``render(a, Flavor.LOWER_EXP, ".2")`` formats every element with ``".2e"``.

Flavor      | type char | element capability
----------- | --------- | ------------------
PLAIN       |           | any
DEBUG       | ``?``     | any, plus a ``shape=..., strides=..., layout=...`` suffix
LOWER_EXP   | ``e``     | numeric
UPPER_EXP   | ``E``     | numeric
LOWER_HEX   | ``x``     | integer
BINARY      | ``b``     | integer
"""
from __future__ import annotations

from enum import Enum
from io import StringIO

import numpy as np
from typing_extensions import Any, Callable, Dict, Tuple

from ndformat.render import ElementFormatter, Sink, format_array
from ndformat.truncation import PRINT_ELEMENTS_LIMIT
from ndformat.utils.custom_logger import get_logger
from ndformat.view import View, as_view

logger = get_logger(__name__)


class UnsupportedFlavorError(TypeError):
    """The element type of an array cannot be rendered in the requested flavor."""


class Flavor(str, Enum):
    PLAIN = "plain"
    DEBUG = "debug"
    LOWER_EXP = "lower_exp"
    UPPER_EXP = "upper_exp"
    LOWER_HEX = "lower_hex"
    BINARY = "binary"

    @property
    def type_char(self) -> str:
        return _TYPE_CHARS[self]

    @property
    def dtype_kinds(self) -> str | None:
        """numpy dtype kinds whose elements support this flavor, None for all."""
        return _DTYPE_KINDS.get(self)


_TYPE_CHARS: Dict[Flavor, str] = {
    Flavor.PLAIN: "",
    Flavor.DEBUG: "?",
    Flavor.LOWER_EXP: "e",
    Flavor.UPPER_EXP: "E",
    Flavor.LOWER_HEX: "x",
    Flavor.BINARY: "b",
}
_BY_TYPE_CHAR: Dict[str, Flavor] = {c: f for f, c in _TYPE_CHARS.items() if c}

# Object arrays are let through; their elements decide at format time.
_DTYPE_KINDS: Dict[Flavor, str] = {
    Flavor.LOWER_EXP: "biufcO",
    Flavor.UPPER_EXP: "biufcO",
    Flavor.LOWER_HEX: "biuO",
    Flavor.BINARY: "biuO",
}


def flavor_for_spec(spec: str) -> Tuple[Flavor, str]:
    """Split a ``__format__`` spec into a flavor and the spec applied to each element.

    >>> flavor_for_spec("#010b")
    (<Flavor.BINARY: 'binary'>, '#010')
    >>> flavor_for_spec(".2f")
    (<Flavor.PLAIN: 'plain'>, '.2f')
    """
    if spec and spec[-1] in _BY_TYPE_CHAR:
        return _BY_TYPE_CHAR[spec[-1]], spec[:-1]
    return Flavor.PLAIN, spec


def element_formatter(spec: str = "") -> ElementFormatter:
    if not spec:
        # format() converts numpy scalars to Python ones; str keeps their short form.
        def fmt(value: Any, sink: Sink) -> None:
            sink.write(str(value))
    else:
        def fmt(value: Any, sink: Sink) -> None:
            sink.write(format(value, spec))

    return fmt


def _debug_text(value: Any) -> str:
    if isinstance(value, np.str_ | np.bytes_):
        return repr(value.item())
    if isinstance(value, np.generic):
        return str(value)
    return repr(value)


def debug_element_formatter(spec: str = "") -> ElementFormatter:
    if spec:
        return element_formatter(spec)

    def fmt(value: Any, sink: Sink) -> None:
        sink.write(_debug_text(value))

    return fmt


def check_supports(view: View, flavor: Flavor) -> None:
    kinds = flavor.dtype_kinds
    dtype = getattr(view, "dtype", None)
    if kinds is None or dtype is None:
        return
    if np.dtype(dtype).kind not in kinds:
        msg = f"Elements of dtype {dtype} do not support {flavor.value} formatting"
        raise UnsupportedFlavorError(msg)


def write_metadata(view: View, sink: Sink) -> None:
    """Append the shape, strides, layout and rank kind of ``view`` after its body."""
    sink.write(f" shape={list(view.shape)}, strides={list(view.strides)}, layout={view.layout()!r}")
    if view.rank_kind.is_fixed:
        sink.write(f", const ndim={view.rank_kind.ndim}")
    else:
        sink.write(f", dynamic ndim={view.ndim}")


def _format_body(flavor: Flavor, array: Any, sink: Sink, fmt: ElementFormatter) -> View:
    view = as_view(array)
    check_supports(view, flavor)
    logger.debug("Rendering %s flavor, shape %s, %s", flavor.value, view.shape, view.rank_kind)
    format_array(view, sink, fmt, PRINT_ELEMENTS_LIMIT)
    return view


def format_display(array: Any, sink: Sink, spec: str = "") -> None:
    _format_body(Flavor.PLAIN, array, sink, element_formatter(spec))


def format_debug(array: Any, sink: Sink, spec: str = "") -> None:
    view = _format_body(Flavor.DEBUG, array, sink, debug_element_formatter(spec))
    write_metadata(view, sink)


def format_lower_exp(array: Any, sink: Sink, spec: str = "") -> None:
    _format_body(Flavor.LOWER_EXP, array, sink, element_formatter(spec + "e"))


def format_upper_exp(array: Any, sink: Sink, spec: str = "") -> None:
    _format_body(Flavor.UPPER_EXP, array, sink, element_formatter(spec + "E"))


def format_lower_hex(array: Any, sink: Sink, spec: str = "") -> None:
    _format_body(Flavor.LOWER_HEX, array, sink, element_formatter(spec + "x"))


def format_binary(array: Any, sink: Sink, spec: str = "") -> None:
    _format_body(Flavor.BINARY, array, sink, element_formatter(spec + "b"))


ADAPTERS: Dict[Flavor, Callable[[Any, Sink, str], None]] = {
    Flavor.PLAIN: format_display,
    Flavor.DEBUG: format_debug,
    Flavor.LOWER_EXP: format_lower_exp,
    Flavor.UPPER_EXP: format_upper_exp,
    Flavor.LOWER_HEX: format_lower_hex,
    Flavor.BINARY: format_binary,
}


def write_array(array: Any, sink: Sink, flavor: Flavor | str = Flavor.PLAIN, spec: str = "") -> None:
    ADAPTERS[Flavor(flavor)](array, sink, spec)


def render(array: Any, flavor: Flavor | str = Flavor.PLAIN, spec: str = "") -> str:
    """Render ``array`` to a string.

    Example:
        >>> render(np.ones(11, dtype=int))
        '[1, 1, 1, ..., 1, 1, 1]'
        >>> render(np.arange(4).reshape(2, 2), Flavor.LOWER_HEX, "#")
        '[[0x0, 0x1],\\n [0x2, 0x3]]'
    """
    buffer = StringIO()
    write_array(array, buffer, flavor, spec)
    return buffer.getvalue()
