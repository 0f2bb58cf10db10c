"""Pumpkin patch: incremental square merging on an N×N grid.

Cells are planted one at a time with ``Patch.insert``. After each planting,
the largest fully planted square that contains the new cell (and passes
``check_boundary``) becomes one region: every cell in it is tagged with the
square's identity, ``y * N + x + 1`` of its anchor.

State per patch:

  * ``_occupied`` — Python int bitset, bit ``y * N + x`` set iff planted.
  * ``_ids`` — uint32 array, row-major, 0 for empty cells.
  * ``_ids_t`` — the same identities column-major, so east/west edge scans
    are contiguous slices just like north/south ones.

The ``LookupTable`` is shared read-only between patches of the same size.

**Merge search.** A depth-first walk over squares, starting at the unit
square of the new cell and following ``LookupTable.larger`` edges. An edge
leads to every larger square containing the smaller one's top-left cell, a
superset of the squares containing the whole smaller one. Only fully
planted squares are expanded: a full square of side k around the new cell
has a full side-(k - 1) sub-square around that cell with an edge to it, so
every such square is still reached. A full square replaces the current best
only when it covers the new cell, is strictly larger and passes
``check_boundary``. The visited set is a bytearray indexed by square
index.

**Boundary check.** A full square can still be the wrong thing to record if
it cuts through an existing region: some region would end up with cells on
both sides of the new square's edge. That shows up as an inside cell and its
outside neighbour across an edge carrying the same non-zero identity, and
such squares are rejected.
"""

from __future__ import annotations

import logging

import numpy as np

from .lookup import LookupTable
from .render import render_text
from .types import Square, anchor_of, identity_of

logger = logging.getLogger(__name__)


def _edge_shared(inside: np.ndarray, outside: np.ndarray) -> bool:
    """True if any outside cell has an identity equal to its inside pair."""
    return bool(np.any((outside != 0) & (inside == outside)))


class Patch:
    def __init__(
        self,
        size: int,
        lookup_table: LookupTable,
        trace_boundaries: bool = False,
    ) -> None:
        if lookup_table.size != size:
            raise ValueError(
                f"Lookup table built for size {lookup_table.size}, "
                f"patch size is {size}"
            )
        self.size = size
        self.lookup_table = lookup_table
        self.trace_boundaries = trace_boundaries
        self._occupied = 0
        self._ids = np.zeros(size * size, dtype=np.uint32)
        self._ids_t = np.zeros(size * size, dtype=np.uint32)

    @classmethod
    def with_new_table(
        cls, size: int, trace_boundaries: bool = False
    ) -> Patch:
        """Patch with a private lookup table."""
        return cls(size, LookupTable.build(size), trace_boundaries)

    def _offset(self, x: int, y: int) -> int:
        if not (0 <= x < self.size and 0 <= y < self.size):
            raise ValueError(
                f"Cell ({x}, {y}) outside {self.size}x{self.size} grid"
            )
        return int(y * self.size + x)

    # --- queries ---

    def get(self, x: int, y: int) -> int | None:
        """Identity of the region containing (x, y), None if unplanted."""
        ident = int(self._ids[self._offset(x, y)])
        return ident or None

    def contains(self, x: int, y: int) -> bool:
        return (self._occupied >> self._offset(x, y)) & 1 == 1

    def planted_count(self) -> int:
        return bin(self._occupied).count("1")

    def is_full(self) -> bool:
        return self._occupied == (1 << (self.size * self.size)) - 1

    def ids_grid(self) -> np.ndarray:
        """Read-only N×N view of the identities, indexed ``[y, x]``."""
        view = self._ids.reshape(self.size, self.size).view()
        view.flags.writeable = False
        return view

    def regions(self) -> dict[int, Square]:
        """Every recorded region, keyed by identity."""
        idents, counts = np.unique(self._ids, return_counts=True)
        result: dict[int, Square] = {}
        for ident, count in zip(idents.tolist(), counts.tolist()):
            if ident == 0:
                continue
            x, y = anchor_of(ident, self.size)
            side = int(round(count**0.5))
            result[ident] = Square(x, y, side)
        return result

    def clone(self) -> Patch:
        """Independent copy of the mutable state; the table stays shared."""
        other = Patch(self.size, self.lookup_table, self.trace_boundaries)
        other._occupied = self._occupied
        other._ids = self._ids.copy()
        other._ids_t = self._ids_t.copy()
        return other

    # --- merge ---

    def check_boundary(self, sq: Square) -> bool:
        """False if ``sq`` would split an existing region across an edge."""
        n = self.size
        s = sq.size
        ids = self._ids
        ids_t = self._ids_t
        trace = self.trace_boundaries and logger.isEnabledFor(logging.DEBUG)
        if trace:
            logger.debug("Checking boundary for %s", sq)

        edges = []
        # north is +y
        if sq.y + s < n:
            inside = (sq.y + s - 1) * n + sq.x
            outside = (sq.y + s) * n + sq.x
            edges.append(("north", ids, inside, outside))
        # south is -y
        if sq.y > 0:
            inside = sq.y * n + sq.x
            outside = (sq.y - 1) * n + sq.x
            edges.append(("south", ids, inside, outside))
        # east is +x, scanned down a column of the transposed ids
        if sq.x + s < n:
            inside = (sq.x + s - 1) * n + sq.y
            outside = (sq.x + s) * n + sq.y
            edges.append(("east", ids_t, inside, outside))
        # west is -x
        if sq.x > 0:
            inside = sq.x * n + sq.y
            outside = (sq.x - 1) * n + sq.y
            edges.append(("west", ids_t, inside, outside))

        for name, arr, inside, outside in edges:
            a = arr[inside : inside + s]
            b = arr[outside : outside + s]
            if trace:
                logger.debug(
                    "%s inside: %s, outside: %s",
                    name.upper(),
                    a.tolist(),
                    b.tolist(),
                )
            if _edge_shared(a, b):
                return False
        return True

    def insert(self, x: int, y: int) -> Square:
        """Plant (x, y) and record the largest legal square containing it.

        Raises ValueError if the cell is out of range or already planted.
        """
        offset = self._offset(x, y)
        if (self._occupied >> offset) & 1:
            raise ValueError(f"Cell ({x}, {y}) is already planted")
        self._occupied |= 1 << offset
        occupied = self._occupied

        n = self.size
        area = n * n
        table = self.lookup_table
        edges = table.edges
        offsets = table.offsets
        bitmaps = table.bitmaps

        start = offset  # unit square index == cell offset
        visited = bytearray(table.square_count)
        visited[start] = 1
        stack = [start]
        largest = Square.from_index(start, n)

        while stack:
            idx = stack.pop()
            bm = bitmaps[idx]
            if bm & occupied != bm:
                continue

            for nb in edges[offsets[idx] : offsets[idx + 1]]:
                if not visited[nb]:
                    visited[nb] = 1
                    stack.append(nb)

            # Edges only guarantee the top-left cell is shared, so later
            # squares need not cover the new cell.
            if idx // area + 1 > largest.size and (bm >> offset) & 1:
                sq = Square.from_index(idx, n)
                if self.check_boundary(sq):
                    largest = sq

        self._fill(largest)
        logger.debug("Insert (%d, %d) -> %s", x, y, largest)
        return largest

    def _fill(self, sq: Square) -> None:
        ident = identity_of(sq, self.size)
        grid = self._ids.reshape(self.size, self.size)
        grid_t = self._ids_t.reshape(self.size, self.size)
        grid[sq.y : sq.y + sq.size, sq.x : sq.x + sq.size] = ident
        grid_t[sq.x : sq.x + sq.size, sq.y : sq.y + sq.size] = ident

    def __str__(self) -> str:
        return render_text(self)

    def __repr__(self) -> str:
        return f"Patch(size={self.size}, planted={self.planted_count()})"
