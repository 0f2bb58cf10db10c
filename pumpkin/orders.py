"""Insertion orders for filling a patch.

Cells are addressed either as ``(x, y)`` or as a flat index ``y * N + x``.
"""

from __future__ import annotations

import numpy as np


def index_to_cell(idx: int, size: int) -> tuple[int, int]:
    return idx % size, idx // size


def row_major_order(size: int) -> list[tuple[int, int]]:
    return [index_to_cell(i, size) for i in range(size * size)]


def random_order(
    size: int, seed: int | None = None
) -> list[tuple[int, int]]:
    """Every cell once, in a random order. Deterministic for a given seed."""
    rng = np.random.default_rng(seed)
    perm = rng.permutation(size * size)
    return [index_to_cell(i, size) for i in perm.tolist()]
