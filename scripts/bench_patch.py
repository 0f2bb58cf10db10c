#!/usr/bin/env python3
"""Benchmark full random fills of pumpkin patches.

Usage (from the repo root):
    python scripts/bench_patch.py                    # sizes 10..50, 5 samples
    python scripts/bench_patch.py -s 10 20 -n 3      # chosen sizes and samples
    python scripts/bench_patch.py --seed 1 --json    # machine-readable output
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Add repo root to path
SCRIPT_DIR = Path(__file__).resolve().parent
ROOT_DIR = SCRIPT_DIR.parent
sys.path.insert(0, str(ROOT_DIR))

from pumpkin.benchmark import run_benchmark  # noqa: E402
from pumpkin.types import BenchmarkParams  # noqa: E402


def main():
    parser = argparse.ArgumentParser(
        description="Benchmark pumpkin patch merging"
    )
    parser.add_argument(
        "-s",
        "--sizes",
        type=int,
        nargs="+",
        default=[10, 20, 30, 40, 50],
        help="Grid sizes to benchmark (default: 10 20 30 40 50)",
    )
    parser.add_argument(
        "-n",
        "--samples",
        type=int,
        default=5,
        help="Random fills per size (default: 5)",
    )
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument(
        "--json", action="store_true", help="Print results as JSON"
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    params = BenchmarkParams(
        sizes=args.sizes, samples=args.samples, seed=args.seed
    )
    results = run_benchmark(params)

    if args.json:
        print(json.dumps([r.to_dict() for r in results], indent=2))
        return

    for r in results:
        print(
            f"Size {r.size}x{r.size} - table: {r.table_seconds * 1000:.1f} ms"
            f" - fill: {r.mean_fill_seconds * 1000:.1f} ms"
            f" - per insert: {r.mean_insert_seconds * 1e6:.1f} us"
        )


if __name__ == "__main__":
    main()
