#!/usr/bin/env python3
"""Step through a random fill of a pumpkin patch, one insert per keypress.

Usage (from the repo root):
    python scripts/interactive.py                 # 20x20 grid
    python scripts/interactive.py -s 8 --seed 3   # 8x8 grid, fixed order
    python scripts/interactive.py -s 8 --no-wait  # print every step at once
    python scripts/interactive.py -s 8 -v         # include boundary traces
    python scripts/interactive.py --png out.png   # save the final patch
"""

import argparse
import logging
import sys
import time
from pathlib import Path

# Add repo root to path
SCRIPT_DIR = Path(__file__).resolve().parent
ROOT_DIR = SCRIPT_DIR.parent
sys.path.insert(0, str(ROOT_DIR))

from pumpkin.lookup import LookupTable  # noqa: E402
from pumpkin.orders import random_order  # noqa: E402
from pumpkin.patch import Patch  # noqa: E402
from pumpkin.render import save_png  # noqa: E402


def main():
    parser = argparse.ArgumentParser(
        description="Interactively fill a pumpkin patch"
    )
    parser.add_argument(
        "-s", "--size", type=int, default=20, help="Grid size (default: 20)"
    )
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument(
        "--no-wait",
        action="store_true",
        help="Don't wait for Enter between inserts",
    )
    parser.add_argument(
        "--png", type=str, default=None, help="Save the final patch as PNG"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log boundary checks at DEBUG level",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s - %(levelname)s - %(message)s",
    )

    start = time.perf_counter()
    table = LookupTable.build(args.size)
    elapsed_ms = (time.perf_counter() - start) * 1000
    print(f"Built lookup table in {elapsed_ms:.1f} ms")

    patch = Patch(args.size, table, trace_boundaries=args.verbose)
    order = random_order(args.size, seed=args.seed)
    for i, (x, y) in enumerate(order):
        sq = patch.insert(x, y)
        print(f"Insert: {i + 1} / {(x, y)} | {sq}")
        print(patch, end="")
        if not args.no_wait:
            input()

    if args.png:
        save_png(patch, args.png)
        print(f"Saved {args.png}")


if __name__ == "__main__":
    main()
