from io import StringIO

import numpy as np
import pytest

from ndformat.flavors import element_formatter
from ndformat.render import format_1d_array, format_array
from ndformat.truncation import PRINT_ELEMENTS_LIMIT
from ndformat.view import ArrayView

K = PRINT_ELEMENTS_LIMIT


def fmt_str(array) -> str:
    out = StringIO()
    format_array(ArrayView(array), out, element_formatter(), K)
    return out.getvalue()


class FailingSink(StringIO):
    """Accepts ``budget`` writes, then refuses."""

    def __init__(self, budget: int):
        super().__init__()
        self.budget = budget

    def write(self, s):
        if self.budget == 0:
            raise OSError("sink closed")
        self.budget -= 1
        return super().write(s)


def test_dim_1_single():
    assert fmt_str(np.array([1])) == "[1]"


def test_dim_1_pair():
    assert fmt_str(np.array([1, 1])) == "[1, 1]"


def test_dim_1_overflow():
    a = np.ones(11, dtype=int)
    assert fmt_str(a) == "[1, 1, 1, ..., 1, 1, 1]"


def test_dim_1_exactly_twice_the_limit():
    assert fmt_str(np.arange(2 * K)) == "[0, 1, 2, 3, 4, 5]"


def test_dim_1_just_over_the_limit():
    assert fmt_str(np.arange(2 * K + 1)) == "[0, 1, 2, ..., 4, 5, 6]"


def test_dim_0():
    element = 12
    assert fmt_str(np.array(element)) == f"{element}"


def test_empty_arrays():
    assert fmt_str(np.array([[], []], dtype=np.uint32)) == "[[]]"


@pytest.mark.parametrize(
    ("shape", "expected"),
    [
        ((0,), "[]"),
        ((2, 0), "[[]]"),
        ((3, 0, 4), "[[[]]]"),
        ((0, 100, 100), "[[[]]]"),
        ((5, 4, 3, 0), "[[[[]]]]"),
    ],
)
def test_zero_length_axes(shape, expected):
    assert fmt_str(np.zeros(shape, dtype=np.float32)) == expected


def test_zero_length_axes_never_format_elements():
    def explode(value, sink):
        raise AssertionError("formatter called")

    out = StringIO()
    format_array(ArrayView(np.zeros((3, 0, 4))), out, explode, K)
    assert out.getvalue() == "[[[]]]"


def test_dim_2_last_axis_overflow():
    a = np.ones((3, 9), dtype=int)
    row = "[1, 1, 1, ..., 1, 1, 1]"
    assert fmt_str(a) == "[" + ",\n ".join([row] * 3) + "]"


def test_dim_2_non_last_axis_overflow():
    a = np.arange(33).reshape(11, 3)
    rows = [f"[{3 * i}, {3 * i + 1}, {3 * i + 2}]" for i in (0, 1, 2)]
    rows.append("...")
    rows += [f"[{3 * i}, {3 * i + 1}, {3 * i + 2}]" for i in (8, 9, 10)]
    assert fmt_str(a) == "[" + ",\n ".join(rows) + "]"


def test_dim_2_multi_directional_overflow():
    overflow = 5
    n = 2 * K + overflow
    a = np.arange(n * n).reshape(n, n)
    kept = [*range(K), *range(n - K, n)]

    def row(i):
        head = ", ".join(str(a[i, j]) for j in kept[:K])
        tail = ", ".join(str(a[i, j]) for j in kept[K:])
        return f"[{head}, ..., {tail}]"

    expected = "[" + ",\n ".join([*map(row, kept[:K]), "...", *map(row, kept[K:])]) + "]"
    assert fmt_str(a) == expected


def test_dim_3_separator_does_not_grow_with_depth():
    a = np.arange(8).reshape(2, 2, 2)
    assert fmt_str(a) == "[[[0, 1],\n [2, 3]],\n [[4, 5],\n [6, 7]]]"


def test_dim_4_truncates_every_axis():
    a = np.zeros((7, 1, 1, 7), dtype=int)
    out = fmt_str(a)
    assert out.count("...,\n ") == 1
    assert out.count("..., ") == 6
    assert out.startswith("[[[[0, 0, 0, ..., 0, 0, 0]]],\n [[[0")


def test_non_contiguous_view():
    a = np.arange(12).reshape(3, 4)[:, ::2]
    assert fmt_str(a) == "[[0, 2],\n [4, 6],\n [8, 10]]"


def test_deterministic():
    a = np.random.default_rng(0).normal(size=(9, 2, 8))
    assert fmt_str(a) == fmt_str(a)


def test_1d_renderer_requires_rank_1():
    with pytest.raises(ValueError, match="rank 1"):
        format_1d_array(ArrayView(np.ones((2, 2))), StringIO(), element_formatter(), K)


def test_sink_failure_aborts_and_keeps_written_fragments():
    sink = FailingSink(budget=3)
    with pytest.raises(OSError, match="sink closed"):
        format_array(ArrayView(np.array([1, 2, 3])), sink, element_formatter(), K)
    assert sink.getvalue() == "[1, "


def test_formatter_failure_aborts_the_whole_render():
    seen = []

    def fmt(value, sink):
        seen.append(int(value))
        if value == 2:
            raise ValueError("cannot format 2")
        sink.write(str(value))

    out = StringIO()
    with pytest.raises(ValueError, match="cannot format 2"):
        format_array(ArrayView(np.arange(6).reshape(3, 2)), out, fmt, K)
    assert seen == [0, 1, 2]
    assert out.getvalue() == "[[0, 1],\n ["
