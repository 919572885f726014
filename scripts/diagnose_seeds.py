#!/usr/bin/env python3
"""Dungeon structural diagnostics for specific seeds.

Usage:
  python scripts/diagnose_seeds.py 292372 730727
  python scripts/diagnose_seeds.py --chunk 0 0 --world-seed 7

Without ``--chunk`` each argument is generated as a standalone grid. With it,
the arguments are ignored and one chunk of the given world is diagnosed.
If no seeds are provided, a default list is used.
Exits with non-zero status if structural issues are detected.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from collections import Counter
from typing import List

# Ensure project root on path if executed directly
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from catacomb.chunk_store import ChunkStore  # noqa: E402 import after path fix
from catacomb.dungeon.config import DungeonConfig  # noqa: E402 import after path fix
from catacomb.dungeon.pipeline import DungeonGenerator  # noqa: E402 import after path fix
from catacomb.dungeon.validator import find_violations  # noqa: E402 import after path fix

DEFAULT_SEEDS = [292372, 730727]


def report(label, grid, rooms, attempts) -> dict:
    violations = find_violations(grid)
    return {
        "target": label,
        "rooms": rooms,
        "attempts": attempts,
        "issues": dict(Counter(v.kind for v in violations)),
        "violations": [v.to_dict() for v in violations[:20]],
        "ok": not violations,
    }


def run_for_seed(seed: int, size: int = 32) -> dict:
    result = DungeonGenerator(DungeonConfig(size=size, seed=seed)).generate()
    return report(f"seed:{seed}", result.grid, len(result.rooms), result.attempt)


def run_for_chunk(world_seed: int, cx: int, cy: int, size: int = 32) -> dict:
    store = ChunkStore(DungeonConfig(size=size), seed=world_seed)
    chunk = store.ensure_chunk(cx, cy)
    return report(f"chunk:{world_seed}:{cx},{cy}", chunk.grid, len(chunk.rooms), chunk.metrics.get("attempts"))


def main(argv: List[str]) -> int:
    parser = argparse.ArgumentParser(description="Print JSON violation reports for seeds")
    parser.add_argument("seeds", nargs="*", type=int)
    parser.add_argument("--size", type=int, default=32)
    parser.add_argument("--chunk", nargs=2, type=int, metavar=("CX", "CY"))
    parser.add_argument("--world-seed", type=int, default=0)
    args = parser.parse_args(argv)
    if args.chunk:
        results = [run_for_chunk(args.world_seed, args.chunk[0], args.chunk[1], args.size)]
    else:
        results = [run_for_seed(s, args.size) for s in (args.seeds or DEFAULT_SEEDS)]
    print(json.dumps({"results": results}, indent=2))
    # Non-zero exit if any failure
    if not all(r["ok"] for r in results):
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
