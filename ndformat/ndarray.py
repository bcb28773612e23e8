from __future__ import annotations

import types
from functools import lru_cache

import numpy as np
import numpy.typing as npt
from typing_extensions import (
    Any,
    ClassVar,
    Generic,
    Tuple,
    TypeVar,
    TypeVarTuple,
    Unpack,
)

from ndformat.flavors import Flavor, flavor_for_spec, render

Ts = TypeVarTuple("Ts")
DT = TypeVar("DT")

Dim = int | types.EllipsisType


def _is_wildcard(p: Any) -> bool:
    return p is Any or (isinstance(p, str) and p == "*")


def _parse_dim(s: Any) -> Dim:
    if s is Ellipsis:
        return Ellipsis
    if isinstance(s, int):
        return s
    if _is_wildcard(s) or isinstance(s, TypeVar):
        return -1
    if isinstance(s, str):
        if s.isnumeric():
            return int(s)
        if "=" in s:
            s = s.split("=")[1]
            if s.isnumeric():
                return int(s)
    msg = f"Invalid shape parameter: {s}"
    raise ValueError(msg)


def _parse_dtype(dtype: Any) -> np.dtype | None:
    if _is_wildcard(dtype):
        return None
    if dtype is int:
        return np.dtype(np.int64)
    if dtype is float:
        return np.dtype(np.float64)
    return np.dtype(dtype)


def shape_and_dtype(params: Any) -> Tuple[Tuple[Dim, ...] | None, np.dtype | None]:
    """Split ``ndarray[...]`` subscript params into a declared shape and dtype.

    The last param is the dtype unless it is itself a dimension (an int, ``"*"`` or ``...``).
    ``-1`` marks a wildcard dimension and ``...`` any number of dimensions.
    """
    if not isinstance(params, tuple):
        params = (params,)
    if len(params) == 1 and (params[0] is None or _is_wildcard(params[0])):
        return None, None
    *dims, last = params
    if isinstance(last, int | str) or last is Ellipsis:
        dims.append(last)
        dtype = None
    else:
        dtype = _parse_dtype(last)
    shape = tuple(_parse_dim(s) for s in dims)
    return shape or None, dtype


def _matches(declared: Tuple[Dim, ...], actual: Tuple[int, ...]) -> bool:
    def same(d: Dim, n: int) -> bool:
        return d == -1 or d == n

    if Ellipsis in declared:
        cut = declared.index(Ellipsis)
        head, tail = declared[:cut], declared[cut + 1:]
        if len(head) + len(tail) > len(actual):
            return False
        return all(map(same, head, actual[:len(head)])) and all(
            map(same, tail, actual[len(actual) - len(tail):]),
        )
    return len(declared) == len(actual) and all(map(same, declared, actual))


class ndarray(np.ndarray, Generic[Unpack[Ts], DT]):  # noqa: N801
    """A numpy array whose class can declare a shape and dtype, printed through ndformat.

    Pass the shape as class args and optionally the data type as the last arg:
    ``ndarray[3, 3, float]``. Wildcards ``"*"`` and ``...`` are accepted.

    A class that declares a shape without ``...`` has a fixed rank, which the debug
    representation reports as ``const ndim``. Undeclared or partially declared arrays
    report ``dynamic ndim``.

    ### Examples
    ```python
    rotation = ndarray[3, 3, float](np.eye(3))
    str(rotation)           # '[[1.0, 0.0, 0.0],\\n [0.0, 1.0, 0.0],\\n [0.0, 0.0, 1.0]]'
    f"{ndarray([10, 11]):#x}"  # '[0xa, 0xb]'
    ```
    """

    _shape: ClassVar[Tuple[Dim, ...] | None] = None
    _dtype: ClassVar[np.dtype | None] = None

    def __new__(cls, data: npt.ArrayLike | None = None, dtype: npt.DTypeLike | None = None) -> ndarray:
        dtype = dtype if dtype is not None else cls._dtype
        if data is None:
            if cls._shape is None or Ellipsis in cls._shape or -1 in cls._shape:
                msg = f"{cls.__name__} has no fixed shape, data must be given"
                raise ValueError(msg)
            return np.zeros(cls._shape, dtype=dtype).view(cls)
        array = np.asarray(data, dtype=dtype)
        if cls._shape is not None and not _matches(cls._shape, array.shape):
            msg = f"Data of shape {array.shape} does not match declared shape {cls._shape}"
            raise ValueError(msg)
        return array.view(cls)

    def __init__(self, *args, **kwargs):
        pass

    def __class_getitem__(cls, params: Any = None) -> type[ndarray]:
        if not isinstance(params, tuple):
            params = (params,)
        return _typed_subclass(cls, params)

    def __str__(self) -> str:
        return render(self, Flavor.PLAIN)

    def __repr__(self) -> str:
        return render(self, Flavor.DEBUG)

    def __format__(self, spec: str) -> str:
        flavor, element_spec = flavor_for_spec(spec)
        return render(self, flavor, element_spec)


@lru_cache(maxsize=None)
def _typed_subclass(cls: type[ndarray], params: Tuple[Any, ...]) -> type[ndarray]:
    shape, dtype = shape_and_dtype(params)
    name = f"{cls.__name__}[{', '.join(map(_param_name, params))}]"
    namespace = {"_shape": shape, "_dtype": dtype}
    new_cls = types.new_class(name, (cls,), {}, lambda ns: ns.update(namespace))
    new_cls.__module__ = cls.__module__
    return new_cls


def _param_name(p: Any) -> str:
    if p is Ellipsis:
        return "..."
    return getattr(p, "__name__", repr(p) if isinstance(p, str) else str(p))
