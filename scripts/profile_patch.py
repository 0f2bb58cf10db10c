#!/usr/bin/env python3
"""Profile lookup table construction and patch fills.

Usage (from the repo root):
    python scripts/profile_patch.py profile -s 30           # cProfile top 30
    python scripts/profile_patch.py profile -s 30 -o out.prof
    python scripts/profile_patch.py table -s 10 20 40       # table build timing
"""

import argparse
import cProfile
import pstats
import statistics
import sys
import time
from pathlib import Path

# Add repo root to path
SCRIPT_DIR = Path(__file__).resolve().parent
ROOT_DIR = SCRIPT_DIR.parent
sys.path.insert(0, str(ROOT_DIR))

from pumpkin.benchmark import fill_patch  # noqa: E402
from pumpkin.lookup import LookupTable  # noqa: E402
from pumpkin.orders import random_order  # noqa: E402
from pumpkin.patch import Patch  # noqa: E402


def cmd_profile(args):
    """Run cProfile over random fills of one grid size."""
    top_n = args.top or 30
    table = LookupTable.build(args.size)
    orders = [
        random_order(args.size, seed=args.seed + i)
        for i in range(args.samples)
    ]

    profiler = cProfile.Profile()
    print(f"Profiling: {args.samples} fills of {args.size}x{args.size}...")
    for order in orders:
        patch = Patch(args.size, table)
        profiler.enable()
        fill_patch(patch, order)
        profiler.disable()

    print(f"\n{'=' * 70}")
    print(f"Top {top_n} functions by cumulative time")
    print(f"{'=' * 70}\n")

    stats = pstats.Stats(profiler)
    stats.sort_stats("cumulative")
    stats.print_stats(top_n)

    if args.output:
        profiler.dump_stats(args.output)
        print(f"\nProfile data written to {args.output}")
        print("Visualize with: snakeviz " + args.output)


def cmd_table(args):
    """Time lookup table construction for several sizes."""
    iterations = args.iterations or 3
    print(f"{'Size':<8} {'Build (ms)':>12} {'Squares':>10} {'Edges':>10}")
    print("-" * 43)
    for size in args.sizes:
        times = []
        table = None
        for _ in range(iterations):
            start = time.perf_counter()
            table = LookupTable.build(size)
            times.append((time.perf_counter() - start) * 1000)
        assert table is not None
        print(
            f"{size:<8} {statistics.median(times):>12.1f}"
            f" {table.square_count:>10} {len(table.edges):>10}"
        )
    print(f"\n({iterations} iterations each, median reported)")


def main():
    parser = argparse.ArgumentParser(
        description="Profile pumpkin patch performance"
    )
    sub = parser.add_subparsers(dest="command")

    p_profile = sub.add_parser("profile", help="cProfile random fills")
    p_profile.add_argument("-s", "--size", type=int, default=30)
    p_profile.add_argument("-n", "--samples", type=int, default=3)
    p_profile.add_argument("--seed", type=int, default=0)
    p_profile.add_argument(
        "--top", type=int, help="Number of top functions to show (default: 30)"
    )
    p_profile.add_argument(
        "--output", "-o", help="Write cProfile binary data to file"
    )

    p_table = sub.add_parser("table", help="Time lookup table builds")
    p_table.add_argument(
        "-s", "--sizes", type=int, nargs="+", default=[10, 20, 30]
    )
    p_table.add_argument(
        "--iterations",
        type=int,
        help="Builds per size (default: 3)",
    )

    args = parser.parse_args()

    if args.command == "profile":
        cmd_profile(args)
    elif args.command == "table":
        cmd_table(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
