#!/usr/bin/env python3
"""Real-time check of the delayed drive timing contract.

Unit tests drive cars on a fake scheduler.  This script waits on the
real event loop instead, so it can exercise slower, more realistic
speed/distance ratios without slowing the test suite down.

Usage
-----
    python scripts/timing_probe.py --speed 1000 --legs 1 2 3
    python scripts/timing_probe.py --speed 900 --legs 1 --runs 3 --max-overage-ms 50
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from carledger import CarLedgerError, LedgerConfig, create, travel_time_ms  # noqa: E402

_LOG = logging.getLogger("carledger.timing_probe")


@dataclass
class ProbeRun:
    distance: float
    expected_ms: float
    actual_ms: float

    @property
    def overage_ms(self) -> float:
        return self.actual_ms - self.expected_ms


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Measure how late delayed drives arrive on the real clock.",
    )
    parser.add_argument(
        "--speed",
        type=float,
        default=1000.0,
        help="Speed passed to delayed_drive().",
    )
    parser.add_argument(
        "--legs",
        type=float,
        nargs="+",
        default=[1.0, 2.0, 3.0],
        help="Leg distances passed to delayed_drive().",
    )
    parser.add_argument(
        "--runs",
        type=int,
        default=5,
        help="Number of sequential drives to measure.",
    )
    parser.add_argument(
        "--max-overage-ms",
        type=float,
        default=25.0,
        help="Lateness past the expected wait tolerated before reporting failure.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logs.",
    )
    return parser.parse_args()


async def _probe(speed: float, legs: list[float], runs: int) -> list[ProbeRun]:
    loop = asyncio.get_running_loop()
    config = LedgerConfig.from_env()
    car = create("probe", "probe", config=config)
    expected_ms = travel_time_ms(sum(legs), speed, ms_per_unit=config.wait_scale_ms)

    results: list[ProbeRun] = []
    for attempt in range(1, runs + 1):
        start = loop.time()
        distance = await car.delayed_drive(speed, *legs)
        actual_ms = (loop.time() - start) * 1000
        _LOG.debug("run=%d distance=%s actual_ms=%.3f", attempt, distance, actual_ms)
        results.append(ProbeRun(distance=distance, expected_ms=expected_ms, actual_ms=actual_ms))
    return results


def _print_summary(results: list[ProbeRun], max_overage_ms: float) -> None:
    print("[probe] Summary")
    print(f"[probe]   expected_ms   : {results[0].expected_ms:.3f}")
    for index, run in enumerate(results, start=1):
        print(f"[probe]   run {index:<3}       : actual={run.actual_ms:.3f} overage={run.overage_ms:.3f}")
    worst = max(run.overage_ms for run in results)
    print(f"[probe]   worst_overage : {worst:.3f} (limit {max_overage_ms:.3f})")


def _main() -> int:
    args = _parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if args.runs < 1:
        print("[probe] --runs must be at least 1", file=sys.stderr)
        return 2

    try:
        results = asyncio.run(_probe(args.speed, args.legs, args.runs))
    except CarLedgerError as exc:
        print(f"[probe] Invalid drive: {exc}", file=sys.stderr)
        return 2

    _print_summary(results, args.max_overage_ms)

    early = [run for run in results if run.overage_ms < -1e-6]
    late = [run for run in results if run.overage_ms > args.max_overage_ms]
    if early:
        print(f"[probe] {len(early)} run(s) arrived before the expected wait", file=sys.stderr)
    if late:
        print(f"[probe] {len(late)} run(s) exceeded the tolerated overage", file=sys.stderr)
    return 1 if early or late else 0


if __name__ == "__main__":
    raise SystemExit(_main())
