"""Precomputed square adjacency and bitmaps for one grid size.

``Patch.insert`` spends nearly all of its time asking two questions about a
square: "which squares one cell larger contain its top-left cell?" and
"is it fully planted?". Both answers depend only on the grid size, so
they are computed once here and shared read-only by every ``Patch`` of
that size.

Storage is flat and keyed by the perfect-hash square index (see
``types.py``), never by a dict:

  * ``offsets`` / ``edges`` — CSR adjacency. The next-larger squares of
    square ``i`` are ``edges[offsets[i]:offsets[i + 1]]``, in the same
    x-outer / y-inner order as ``Square.next_larger``. The search order of
    ``Patch.insert`` depends on it.
  * ``smaller_idx`` — the four next-smaller square indices, or ``None`` for
    unit squares.
  * ``bitmaps`` — the square's cell bitset as a Python int.

Indices that decode to squares hanging off the grid keep empty adjacency and
a zero bitmap; the search never reaches them.

Table size is O(N³) entries and O(N⁵) bitmap bits, which is fine for the
grid sizes the engine is used with (N up to roughly 100).
"""

from __future__ import annotations

import logging
import time

from .types import Square, block_bitmap

logger = logging.getLogger(__name__)

# Identities are stored as uint32 (y * N + x + 1 <= N * N).
MAX_GRID_SIZE = 65535


class LookupTable:
    def __init__(self, size: int) -> None:
        if size < 1 or size > MAX_GRID_SIZE:
            raise ValueError(
                f"Grid size must be in [1, {MAX_GRID_SIZE}], got {size}"
            )
        start = time.perf_counter()

        self.size = size
        area = size * size
        count = area * size

        offsets = [0] * (count + 1)
        larger: list[int] = []
        smaller: list[tuple[int, int, int, int] | None] = [None] * count
        bitmaps = [0] * count

        for s in range(1, size + 1):
            block = block_bitmap(s, size)
            base = (s - 1) * area
            for y in range(size):
                for x in range(size):
                    idx = base + y * size + x
                    if x + s <= size and y + s <= size:
                        sq = Square(x, y, s)
                        for nb in sq.next_larger(size):
                            assert nb.contains(x, y)
                            larger.append(nb.index(size))
                        sub = sq.next_smaller()
                        if sub is not None:
                            smaller[idx] = (
                                sub[0].index(size),
                                sub[1].index(size),
                                sub[2].index(size),
                                sub[3].index(size),
                            )
                        bitmaps[idx] = block << (y * size + x)
                    offsets[idx + 1] = len(larger)

        self.offsets = offsets
        self.edges = larger
        self.smaller_idx = smaller
        self.bitmaps = bitmaps

        logger.debug(
            "Built lookup table for %dx%d grid: %d squares, %d edges in %.3fs",
            size,
            size,
            count,
            len(larger),
            time.perf_counter() - start,
        )

    @classmethod
    def build(cls, size: int) -> LookupTable:
        return cls(size)

    @property
    def square_count(self) -> int:
        """Size of the square index space (N³)."""
        return len(self.bitmaps)

    def larger(self, idx: int) -> list[int]:
        return self.edges[self.offsets[idx] : self.offsets[idx + 1]]

    def smaller(self, idx: int) -> tuple[int, int, int, int] | None:
        return self.smaller_idx[idx]

    def bitmap(self, idx: int) -> int:
        return self.bitmaps[idx]

    def larger_squares(self, square: Square) -> list[Square]:
        return [
            Square.from_index(i, self.size)
            for i in self.larger(square.index(self.size))
        ]

    def smaller_squares(
        self, square: Square
    ) -> list[Square] | None:
        sub = self.smaller(square.index(self.size))
        if sub is None:
            return None
        return [Square.from_index(i, self.size) for i in sub]

    def __repr__(self) -> str:
        return f"LookupTable(size={self.size})"
