"""Value types shared by the lookup table, the patch and the drivers.

``Square`` is the unit of work for the whole engine: the merge search walks
an implicit graph whose nodes are squares and whose edges are the
"next larger square" relation. Every square in an N×N grid has a dense
perfect-hash index

    index = x + y * N + (size - 1) * N * N

which keys the flat arrays in ``lookup.py`` and the visited bitset used by
``Patch.insert``.

Coordinates follow the patch convention: ``x`` grows east, ``y`` grows
north, and cell ``(x, y)`` lives at bit / array offset ``y * N + x``.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Square:
    x: int
    y: int
    size: int = 1

    def contains(self, cx: int, cy: int) -> bool:
        return (
            self.x <= cx < self.x + self.size
            and self.y <= cy < self.y + self.size
        )

    def fits(self, grid_size: int) -> bool:
        """True if the square lies entirely inside an N×N grid."""
        return (
            self.size >= 1
            and self.x >= 0
            and self.y >= 0
            and self.x + self.size <= grid_size
            and self.y + self.size <= grid_size
        )

    def index(self, grid_size: int) -> int:
        return (
            self.x
            + self.y * grid_size
            + (self.size - 1) * grid_size * grid_size
        )

    @staticmethod
    def from_index(idx: int, grid_size: int) -> Square:
        """Invert ``index``.

        Raises ValueError if idx is outside ``[0, grid_size ** 3)``.
        """
        area = grid_size * grid_size
        if not 0 <= idx < area * grid_size:
            raise ValueError(
                f"Square index {idx} out of range for grid size {grid_size}"
            )
        size_m1, rem = divmod(idx, area)
        y, x = divmod(rem, grid_size)
        return Square(x, y, size_m1 + 1)

    def bitmap(self, grid_size: int) -> int:
        """Bitset of the covered cells, bit ``cy * N + cx``."""
        return block_bitmap(self.size, grid_size) << (
            self.y * grid_size + self.x
        )

    def next_larger(self, grid_size: int) -> list[Square]:
        """All squares one cell larger that contain this one's top-left cell.

        Squares containing the whole of this one are a subset. There are at
        most ``(size + 1) ** 2`` of them; all have a top-left
        corner less than or equal to this square's in both axes.
        """
        if self.size >= grid_size:
            return []
        min_x = max(0, self.x - self.size)
        max_x = min(self.x, grid_size - self.size - 1)
        min_y = max(0, self.y - self.size)
        max_y = min(self.y, grid_size - self.size - 1)

        new_size = self.size + 1
        squares = []
        for nx in range(min_x, max_x + 1):
            for ny in range(min_y, max_y + 1):
                squares.append(Square(nx, ny, new_size))
        return squares

    def next_smaller(
        self,
    ) -> tuple[Square, Square, Square, Square] | None:
        """The four squares one cell smaller touching the top-left corner."""
        if self.size == 1:
            return None
        s = self.size - 1
        return (
            Square(self.x, self.y, s),
            Square(self.x + 1, self.y, s),
            Square(self.x, self.y + 1, s),
            Square(self.x + 1, self.y + 1, s),
        )

    def cells(self) -> list[tuple[int, int]]:
        """Covered cells in row-major order."""
        return [
            (cx, cy)
            for cy in range(self.y, self.y + self.size)
            for cx in range(self.x, self.x + self.size)
        ]


def block_bitmap(size: int, grid_size: int) -> int:
    """Bitmap of a ``size``-square anchored at the origin.

    One ``size``-bit row mask repeated every ``grid_size`` bits.
    """
    row = (1 << size) - 1
    stamp = 0
    for r in range(size):
        stamp |= 1 << (r * grid_size)
    return stamp * row


def identity_of(square: Square, grid_size: int) -> int:
    """Region identity of a square: its anchor offset plus one (0 is empty)."""
    return square.y * grid_size + square.x + 1


def anchor_of(identity: int, grid_size: int) -> tuple[int, int]:
    """Inverse of ``identity_of`` for the anchor coordinates."""
    y, x = divmod(identity - 1, grid_size)
    return x, y


@dataclass
class BenchmarkParams:
    sizes: list[int]
    samples: int = 5
    seed: int | None = None

    @staticmethod
    def from_dict(d: dict) -> BenchmarkParams:
        return BenchmarkParams(
            sizes=list(d["sizes"]),
            samples=d.get("samples", 5),
            seed=d.get("seed"),
        )

    def to_dict(self) -> dict:
        d: dict = {"sizes": self.sizes, "samples": self.samples}
        if self.seed is not None:
            d["seed"] = self.seed
        return d


@dataclass
class BenchmarkResult:
    size: int
    samples: int
    table_seconds: float
    fill_seconds: list[float] = field(default_factory=list)

    @property
    def mean_fill_seconds(self) -> float:
        if not self.fill_seconds:
            return 0.0
        return sum(self.fill_seconds) / len(self.fill_seconds)

    @property
    def mean_insert_seconds(self) -> float:
        return self.mean_fill_seconds / (self.size * self.size)

    def to_dict(self) -> dict:
        return {
            "size": self.size,
            "samples": self.samples,
            "table_seconds": self.table_seconds,
            "mean_fill_seconds": self.mean_fill_seconds,
            "mean_insert_seconds": self.mean_insert_seconds,
        }
