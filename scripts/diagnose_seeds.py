#!/usr/bin/env python3
"""Terrain structural diagnostics for specific seeds.

Usage:
  python scripts/diagnose_seeds.py alpha beta 1234
  python scripts/diagnose_seeds.py --archetype hive --size 60x40 seed-a seed-b

If no seeds are provided as CLI args, a default list is used.
Exits with non-zero status if structural issues are detected.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from typing import List

# Ensure project root on path if executed directly
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from burrow.terrain import RetryLimitExceeded, generate, get_archetype  # noqa: E402 import after path fix
from burrow.terrain.checks import analyze  # noqa: E402 import after path fix

DEFAULT_SEEDS = ["292372", "730727", "cavern", "burrow"]


def run_for_seed(seed: str, archetype: str, width: int, height: int) -> dict:
    try:
        terrain = generate(width, height, seed, get_archetype(archetype))
    except RetryLimitExceeded as exc:
        return {"seed": seed, "issues": {"retry_limit": exc.attempts}, "last_reason": exc.last_reason, "ok": False}
    res = analyze(terrain)
    issues = {
        "open_borders": len(res["open_borders"]),
        "disconnected_regions": res["disconnected_regions"],
        "lakes_out_of_bounds": len(res["lakes_out_of_bounds"]),
        "exposed_empty": len(res["exposed_empty"]),
        "spawn_exit_too_close": int(res["spawn_exit_too_close"]),
    }
    return {"seed": seed, "attempts": terrain.attempts, "issues": issues, "ok": res["ok"]}


def main(argv: List[str]) -> int:
    parser = argparse.ArgumentParser(description="Check generated terrain invariants for a list of seeds")
    parser.add_argument("seeds", nargs="*")
    parser.add_argument("--archetype", default="cavern")
    parser.add_argument("--size", default="80x50", help="WIDTHxHEIGHT (default: 80x50)")
    args = parser.parse_args(argv)
    width, height = (int(v) for v in args.size.lower().split("x", 1))

    seeds = args.seeds or DEFAULT_SEEDS
    results = [run_for_seed(s, args.archetype, width, height) for s in seeds]
    print(json.dumps({"archetype": args.archetype, "results": results}, indent=2))
    # Non-zero exit if any failure
    if not all(r["ok"] for r in results):
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
