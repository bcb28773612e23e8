from __future__ import annotations

from dataclasses import dataclass

from typing_extensions import Final, TypeAlias

PRINT_ELEMENTS_LIMIT: Final[int] = 3


@dataclass(frozen=True)
class ElementIndex:
    """Position along an axis that should be printed."""
    position: int


class _Ellipsis:
    __slots__ = ()

    def __repr__(self) -> str:
        return "ELLIPSIS"


ELLIPSIS: Final = _Ellipsis()

PrintableCell: TypeAlias = ElementIndex | _Ellipsis


def to_be_printed(length: int, limit: int) -> list[PrintableCell]:
    """Return which indexes of an axis should be printed.

    If the axis is longer than ``2 * limit``, a single ``ELLIPSIS`` is inserted
    where indexes are being omitted.

    Example:
        >>> to_be_printed(3, 3)
        [ElementIndex(position=0), ElementIndex(position=1), ElementIndex(position=2)]
        >>> [c.position if isinstance(c, ElementIndex) else "..." for c in to_be_printed(8, 2)]
        [0, 1, '...', 6, 7]
    """
    if length <= 2 * limit:
        return [ElementIndex(i) for i in range(length)]
    cells: list[PrintableCell] = [ElementIndex(i) for i in range(limit)]
    cells.append(ELLIPSIS)
    cells.extend(ElementIndex(i) for i in range(length - limit, length))
    return cells
