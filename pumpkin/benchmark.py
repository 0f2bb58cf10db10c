"""Time full random fills of patches.

For each grid size one ``LookupTable`` is built (timed separately) and then
shared by ``samples`` fresh patches, each filled along its own random order.
Orders are drawn up front from one seeded generator so the timed loop only
measures ``Patch.insert``.
"""

from __future__ import annotations

import logging
import time

import numpy as np

from .lookup import LookupTable
from .orders import index_to_cell
from .patch import Patch
from .types import BenchmarkParams, BenchmarkResult

logger = logging.getLogger(__name__)


def fill_patch(patch: Patch, order: list[tuple[int, int]]) -> None:
    """Insert every cell of ``order``; the last insert must merge the grid."""
    last = None
    for x, y in order:
        last = patch.insert(x, y)
    assert last is not None and last.size == patch.size, last


def run_benchmark(params: BenchmarkParams) -> list[BenchmarkResult]:
    rng = np.random.default_rng(params.seed)
    results = []
    for size in params.sizes:
        start = time.perf_counter()
        table = LookupTable.build(size)
        table_seconds = time.perf_counter() - start

        orders = [
            [
                index_to_cell(i, size)
                for i in rng.permutation(size * size).tolist()
            ]
            for _ in range(params.samples)
        ]

        result = BenchmarkResult(
            size=size, samples=params.samples, table_seconds=table_seconds
        )
        for order in orders:
            patch = Patch(size, table)
            start = time.perf_counter()
            fill_patch(patch, order)
            result.fill_seconds.append(time.perf_counter() - start)

        logger.debug(
            "Size %d: table %.3fs, mean fill %.4fs",
            size,
            table_seconds,
            result.mean_fill_seconds,
        )
        results.append(result)
    return results
