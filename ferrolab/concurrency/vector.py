"""Vector arithmetic helpers."""

from __future__ import annotations

import operator
from collections.abc import Sequence


def dot_product(a: Sequence, b: Sequence):
    """Return the dot product of two sequences of equal length."""
    if len(a) != len(b):
        raise ValueError("Dot product error: a.len != b.len")
    return sum(map(operator.mul, a, b))