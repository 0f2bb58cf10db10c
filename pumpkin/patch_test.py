"""Tests for Patch: merge search, boundary check and queries."""

import logging

import numpy as np
import pytest

from pumpkin.lookup import LookupTable
from pumpkin.orders import random_order, row_major_order
from pumpkin.patch import Patch
from pumpkin.types import Square, identity_of


def _assert_consistent(patch):
    """Identities partition the planted cells into recorded squares."""
    n = patch.size
    grid = patch.ids_grid()
    # ids_transposed holds the same data column-major
    assert np.array_equal(patch._ids_t.reshape(n, n).T, grid)

    for y in range(n):
        for x in range(n):
            assert (grid[y, x] != 0) == patch.contains(x, y)

    covered = 0
    for ident, sq in patch.regions().items():
        assert identity_of(sq, n) == ident
        assert sq.fits(n)
        for cx, cy in sq.cells():
            assert grid[cy, cx] == ident, (sq, cx, cy)
        assert int(np.count_nonzero(grid == ident)) == sq.size**2
        covered += sq.size**2
    assert covered == patch.planted_count()


# --- known traces ---


def test_merge_2x2():
    patch = Patch.with_new_table(2)
    for x, y in [(0, 0), (0, 1), (1, 0)]:
        sq = patch.insert(x, y)
        assert sq == Square(x, y, 1)

    # the last one merges with the first three
    assert patch.insert(1, 1) == Square(0, 0, 2)
    assert all(patch.get(x, y) == 1 for x in range(2) for y in range(2))


def test_merge_3x3():
    # # # 0
    # # # #
    # 0 # #
    order = [
        (2, 2),
        (2, 1),
        (1, 2),
        (1, 1),
        (1, 0),
        (0, 1),
        (0, 0),
        (2, 0),
        (0, 2),
    ]
    expected = [
        (2, 2, 1),
        (2, 1, 1),
        (1, 2, 1),
        (1, 1, 2),
        (1, 0, 1),
        (0, 1, 1),
        (0, 0, 1),
        (2, 0, 1),
        (0, 0, 3),
    ]
    patch = Patch.with_new_table(3)
    for (x, y), (ex, ey, es) in zip(order, expected):
        sq = patch.insert(x, y)
        assert (sq.x, sq.y, sq.size) == (ex, ey, es), (x, y)
        _assert_consistent(patch)


def test_size_one_grid():
    patch = Patch.with_new_table(1)
    assert patch.insert(0, 0) == Square(0, 0, 1)
    assert patch.get(0, 0) == 1
    assert patch.is_full()


# --- full fills ---


@pytest.mark.parametrize("size", range(1, 11))
def test_fill_merges_whole_grid(size):
    """Filling any grid in any order ends with one full-grid square."""
    table = LookupTable.build(size)
    for seed in range(3):
        patch = Patch(size, table)
        order = random_order(size, seed=seed)
        for x, y in order[:-1]:
            patch.insert(x, y)
        last = patch.insert(*order[-1])
        assert last == Square(0, 0, size)
        assert patch.is_full()
        assert patch.regions() == {1: Square(0, 0, size)}


def test_row_major_fill():
    patch = Patch.with_new_table(4)
    results = [patch.insert(x, y) for x, y in row_major_order(4)]
    assert results[-1] == Square(0, 0, 4)
    # (1, 1) completes the first 2x2 block
    assert results[5] == Square(0, 0, 2)


@pytest.mark.parametrize("seed", [0, 1, 2, 3])
def test_identity_consistency_after_every_insert(seed):
    size = 7
    patch = Patch.with_new_table(size)
    for x, y in random_order(size, seed=seed):
        sq = patch.insert(x, y)
        assert sq.contains(x, y)
        assert patch.get(x, y) == identity_of(sq, size)
        _assert_consistent(patch)


@pytest.mark.parametrize("size", [5, 7, 9])
def test_new_cell_always_gets_identity(size):
    """The recorded square covers the cell just planted, for many orders."""
    table = LookupTable.build(size)
    for seed in range(20):
        patch = Patch(size, table)
        for x, y in random_order(size, seed=seed):
            sq = patch.insert(x, y)
            assert sq.contains(x, y), (seed, (x, y), sq)
            assert patch.get(x, y) is not None, (seed, (x, y), sq)


def test_reachable_region_missing_new_cell_not_chosen():
    """(3, 3) reaches region (0, 0, 3) via full (2, 2, 2) but lies outside it."""
    patch = Patch.with_new_table(5)
    for x, y in row_major_order(3):
        patch.insert(x, y)
    region = identity_of(Square(0, 0, 3), 5)
    assert patch.get(2, 2) == region

    assert patch.insert(3, 2) == Square(3, 2, 1)
    assert patch.insert(2, 3) == Square(2, 3, 1)
    sq = patch.insert(3, 3)
    assert sq == Square(3, 3, 1)
    assert patch.get(3, 3) == identity_of(sq, 5)
    assert patch.regions()[region] == Square(0, 0, 3)
    _assert_consistent(patch)


def test_result_is_largest_full_square():
    """No strictly larger full square containing the cell passes the check."""
    size = 6
    patch = Patch.with_new_table(size)
    for x, y in random_order(size, seed=11):
        sq = patch.insert(x, y)
        for s in range(sq.size + 1, size + 1):
            for ny in range(max(0, y - s + 1), min(y, size - s) + 1):
                for nx in range(max(0, x - s + 1), min(x, size - s) + 1):
                    big = Square(nx, ny, s)
                    full = all(
                        patch.contains(cx, cy) for cx, cy in big.cells()
                    )
                    assert not full or not patch.check_boundary(big), big


# --- preconditions ---


def test_double_planting_rejected():
    patch = Patch.with_new_table(3)
    patch.insert(1, 1)
    before = patch.ids_grid().copy()
    with pytest.raises(ValueError, match="already planted"):
        patch.insert(1, 1)
    assert np.array_equal(patch.ids_grid(), before)
    assert patch.planted_count() == 1


def test_out_of_range_rejected():
    patch = Patch.with_new_table(3)
    with pytest.raises(ValueError):
        patch.insert(3, 0)
    with pytest.raises(ValueError):
        patch.insert(0, -1)
    with pytest.raises(ValueError):
        patch.get(5, 5)
    with pytest.raises(ValueError):
        patch.contains(-1, 0)


def test_mismatched_table_rejected():
    with pytest.raises(ValueError, match="Lookup table"):
        Patch(4, LookupTable.build(3))


# --- queries ---


def test_reads_are_idempotent():
    patch = Patch.with_new_table(4)
    for x, y in [(0, 0), (1, 0), (0, 1), (3, 3)]:
        patch.insert(x, y)
    snapshot = [
        (patch.get(x, y), patch.contains(x, y))
        for y in range(4)
        for x in range(4)
    ]
    for _ in range(3):
        again = [
            (patch.get(x, y), patch.contains(x, y))
            for y in range(4)
            for x in range(4)
        ]
        assert again == snapshot
    assert patch.get(2, 2) is None
    assert not patch.contains(2, 2)
    assert patch.get(3, 3) == identity_of(Square(3, 3, 1), 4)


def test_ids_grid_is_read_only():
    patch = Patch.with_new_table(2)
    patch.insert(0, 0)
    grid = patch.ids_grid()
    with pytest.raises(ValueError):
        grid[0, 0] = 7


def test_shared_table_independent_patches():
    table = LookupTable.build(3)
    a = Patch(3, table)
    b = Patch(3, table)
    a.insert(0, 0)
    assert a.contains(0, 0)
    assert not b.contains(0, 0)
    assert a.lookup_table is b.lookup_table


def test_clone_shares_table_not_state():
    patch = Patch.with_new_table(3)
    patch.insert(0, 0)
    copy = patch.clone()
    copy.insert(1, 1)
    assert copy.lookup_table is patch.lookup_table
    assert copy.contains(1, 1)
    assert not patch.contains(1, 1)
    assert patch.planted_count() == 1
    assert copy.planted_count() == 2


# --- boundary check ---


class TestCheckBoundary:
    """One existing 2x2 region at (1, 1) in a 4x4 grid (identity 6)."""

    def _patch(self):
        patch = Patch.with_new_table(4)
        patch._fill(Square(1, 1, 2))
        return patch

    def test_region_itself_passes(self):
        assert self._patch().check_boundary(Square(1, 1, 2))

    def test_whole_grid_passes(self):
        assert self._patch().check_boundary(Square(0, 0, 4))

    def test_rejects_across_north_edge(self):
        assert not self._patch().check_boundary(Square(0, 0, 2))

    def test_rejects_across_south_edge(self):
        assert not self._patch().check_boundary(Square(1, 2, 2))

    def test_rejects_across_east_edge(self):
        assert not self._patch().check_boundary(Square(0, 1, 2))

    def test_rejects_across_west_edge(self):
        assert not self._patch().check_boundary(Square(2, 1, 2))

    def test_disjoint_square_passes(self):
        assert self._patch().check_boundary(Square(3, 3, 1))
        assert self._patch().check_boundary(Square(0, 3, 1))

    def test_abutting_regions(self):
        """Two same-size regions side by side; straddling them is rejected."""
        patch = Patch.with_new_table(4)
        patch._fill(Square(0, 0, 2))
        patch._fill(Square(2, 0, 2))
        assert not patch.check_boundary(Square(1, 0, 2))
        assert patch.check_boundary(Square(0, 0, 2))
        assert patch.check_boundary(Square(2, 0, 2))
        assert patch.check_boundary(Square(0, 0, 4))

    def test_empty_outside_cells_ignored(self):
        patch = Patch.with_new_table(3)
        assert patch.check_boundary(Square(0, 0, 2))
        assert patch.check_boundary(Square(1, 1, 1))


def test_trace_boundaries_logs(caplog):
    caplog.set_level(logging.DEBUG, logger="pumpkin.patch")
    patch = Patch.with_new_table(2, trace_boundaries=True)
    for x, y in row_major_order(2):
        patch.insert(x, y)
    assert "Checking boundary for Square(x=0, y=0, size=2)" in caplog.text


def test_no_boundary_trace_by_default(caplog):
    caplog.set_level(logging.DEBUG, logger="pumpkin.patch")
    patch = Patch.with_new_table(2)
    for x, y in row_major_order(2):
        patch.insert(x, y)
    assert "Checking boundary" not in caplog.text
    assert "Insert (1, 1) -> Square(x=0, y=0, size=2)" in caplog.text


def test_str_renders_identities():
    patch = Patch.with_new_table(2)
    patch.insert(0, 0)
    assert str(patch) == "  0   0 \n  1   0 \n"
    assert repr(patch) == "Patch(size=2, planted=1)"
