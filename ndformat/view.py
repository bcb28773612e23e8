from __future__ import annotations

from dataclasses import dataclass
from enum import IntFlag

import numpy as np
import numpy.typing as npt
from typing_extensions import Any, Protocol, Tuple, runtime_checkable


class Layout(IntFlag):
    """Memory layout classification of a view.

    The repr lists the set flags by letter followed by the raw value, e.g. ``Cc (0x5)``.
    """
    CORDER = 0x1
    FORDER = 0x2
    CPREFER = 0x4
    FPREFER = 0x8

    @classmethod
    def c(cls) -> Layout:
        return cls.CORDER | cls.CPREFER

    @classmethod
    def f(cls) -> Layout:
        return cls.FORDER | cls.FPREFER

    @classmethod
    def one_dimensional(cls) -> Layout:
        return cls.c() | cls.f()

    @classmethod
    def none(cls) -> Layout:
        return cls(0)

    def __repr__(self) -> str:
        letters = "".join(letter for flag, letter in _LAYOUT_LETTERS if self & flag)
        return f"{letters or 'Custom'} ({int(self):#x})"

    __str__ = __repr__


_LAYOUT_LETTERS = (
    (Layout.CORDER, "C"),
    (Layout.FORDER, "F"),
    (Layout.CPREFER, "c"),
    (Layout.FPREFER, "f"),
)


@dataclass(frozen=True)
class RankKind:
    """Whether the rank of a view was fixed when its type was declared or is only known at runtime."""
    ndim: int | None = None

    @classmethod
    def fixed(cls, ndim: int) -> RankKind:
        return cls(ndim)

    @classmethod
    def dynamic(cls) -> RankKind:
        return cls(None)

    @property
    def is_fixed(self) -> bool:
        return self.ndim is not None


@runtime_checkable
class View(Protocol):
    """Read-only n-dimensional view consumed by the renderers."""
    rank_kind: RankKind

    @property
    def shape(self) -> Tuple[int, ...]: ...
    @property
    def strides(self) -> Tuple[int, ...]: ...
    @property
    def ndim(self) -> int: ...
    def layout(self) -> Layout: ...
    def get(self, index: Tuple[int, ...]) -> Any: ...
    def index_axis(self, axis: int, index: int) -> View: ...
    def into_dyn(self) -> View: ...


class ArrayView:
    """View over a numpy array.

    Strides are reported in elements, not bytes. The wrapped array is never written to.
    """

    __slots__ = ("_array", "rank_kind")

    def __init__(self, array: npt.ArrayLike, rank_kind: RankKind | None = None) -> None:
        self._array = np.asarray(array)
        self.rank_kind = rank_kind if rank_kind is not None else RankKind.dynamic()

    @property
    def shape(self) -> Tuple[int, ...]:
        return tuple(int(n) for n in self._array.shape)

    @property
    def ndim(self) -> int:
        return self._array.ndim

    @property
    def dtype(self) -> np.dtype:
        return self._array.dtype

    @property
    def strides(self) -> Tuple[int, ...]:
        itemsize = self._array.itemsize
        if not itemsize:
            return (0,) * self.ndim
        return tuple(int(s) // itemsize for s in self._array.strides)

    def layout(self) -> Layout:
        flags = self._array.flags
        # numpy flags every empty array as both orders; only one long axis makes that true.
        if flags.c_contiguous and flags.f_contiguous and sum(n > 1 for n in self.shape) <= 1:
            return Layout.one_dimensional()
        if flags.c_contiguous:
            return Layout.c()
        if flags.f_contiguous:
            return Layout.f()
        shape, strides = self.shape, self.strides
        if self.ndim > 1:
            if strides[-1] == 1 and shape[-1] > 1:
                return Layout.CPREFER
            if strides[0] == 1 and shape[0] > 1:
                return Layout.FPREFER
        return Layout.none()

    def get(self, index: Tuple[int, ...]) -> Any:
        return self._array[index]

    def index_axis(self, axis: int, index: int) -> ArrayView:
        if not 0 <= axis < self.ndim:
            msg = f"Axis {axis} is out of bounds for a view of rank {self.ndim}"
            raise IndexError(msg)
        sub = self._array[(slice(None),) * axis + (index,)]
        kind = RankKind.fixed(self.ndim - 1) if self.rank_kind.is_fixed else RankKind.dynamic()
        return ArrayView(sub, kind)

    def into_dyn(self) -> ArrayView:
        return ArrayView(self._array, RankKind.dynamic())

    def __repr__(self) -> str:
        return f"ArrayView(shape={list(self.shape)}, dtype={self.dtype}, rank_kind={self.rank_kind})"


def rank_kind_of(array: np.ndarray) -> RankKind:
    """Fixed when the array's class declares a shape whose rank matches the array, dynamic otherwise."""
    declared = getattr(type(array), "_shape", None)
    if isinstance(declared, tuple) and Ellipsis not in declared and len(declared) == array.ndim:
        return RankKind.fixed(len(declared))
    return RankKind.dynamic()


def as_view(obj: Any) -> View:
    if isinstance(obj, ArrayView):
        return obj
    if isinstance(obj, np.ndarray):
        return ArrayView(obj, rank_kind_of(obj))
    if isinstance(obj, View):
        return obj
    return ArrayView(np.asarray(obj))
