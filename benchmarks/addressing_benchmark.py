#!/usr/bin/env python3
"""
Addressing and growth micro benchmark for coretensor.

Times element copies, zero-copy views, unit reads by full index and
amortized appends on a tensor of configurable shape, and compares each
against the equivalent plain NumPy operation where one exists.
"""

from __future__ import annotations

import argparse
import math
import sys
import time
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional

import numpy as np

from coretensor import Tensor, TensorIndex


@dataclass
class BenchmarkResult:
    case: str
    min_s: float
    mean_s: float
    iterations: int
    ops_per_s: Optional[float]


def bench(fn: Callable[[], Any], *, iterations: int, warmup: int) -> List[float]:
    timings = []
    for step in range(iterations + warmup):
        start = time.perf_counter()
        fn()
        elapsed = time.perf_counter() - start
        if step >= warmup:
            timings.append(elapsed)
    return timings


def _summarize(case: str, timings: List[float], ops: int) -> BenchmarkResult:
    min_s = min(timings)
    mean_s = sum(timings) / len(timings)
    return BenchmarkResult(
        case=case,
        min_s=min_s,
        mean_s=mean_s,
        iterations=len(timings),
        ops_per_s=ops / min_s if min_s > 0 else None,
    )


def run_cases(dims: List[int], *, iterations: int, warmup: int, seed: int) -> List[BenchmarkResult]:
    rng = np.random.default_rng(seed)
    tensor = Tensor.increasing_from(dims)
    array = np.arange(int(np.prod(dims))).reshape(dims)
    leading = dims[0]
    coords = [tuple(int(rng.integers(0, d)) for d in dims) for _ in range(256)]
    indices = [TensorIndex(c) for c in coords]

    def element_copies():
        for i in range(leading):
            tensor[i]

    def views():
        for i in range(leading):
            tensor.view(i).units

    def numpy_rows():
        for i in range(leading):
            array[i].copy()

    def unit_reads():
        for index in indices:
            tensor.unit(index)

    def numpy_unit_reads():
        for c in coords:
            array[c]

    element = tensor[0]

    def appends():
        grown = Tensor.from_element_shape(dims[1:], dtype=tensor.dtype)
        for _ in range(leading):
            grown.append(element)

    cases = [
        ("element", element_copies, leading),
        ("view", views, leading),
        ("numpy-row", numpy_rows, leading),
        ("unit", unit_reads, len(indices)),
        ("numpy-unit", numpy_unit_reads, len(coords)),
        ("append", appends, leading),
    ]
    return [
        _summarize(name, bench(fn, iterations=iterations, warmup=warmup), ops)
        for name, fn, ops in cases
    ]


def format_results(results: Iterable[BenchmarkResult]) -> str:
    header = f"{'case':<12} {'min (ms)':>12} {'mean (ms)':>12} {'iters':>8} {'ops/s':>14}"
    rows = [header]
    for result in results:
        ops_per_s = result.ops_per_s or math.nan
        rows.append(
            f"{result.case:<12} {result.min_s * 1e3:12.3f} {result.mean_s * 1e3:12.3f} "
            f"{result.iterations:8d} {ops_per_s:14.1f}"
        )
    return "\n".join(rows)


def parse_args(argv: Optional[Iterable[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Benchmark coretensor element access, views and appends."
    )
    parser.add_argument(
        "--shape",
        type=int,
        nargs="+",
        default=[256, 32, 16],
        help="Tensor shape to benchmark (default: 256 32 16).",
    )
    parser.add_argument(
        "--iterations", type=int, default=20, help="Timed iterations per case (default: 20)."
    )
    parser.add_argument(
        "--warmup", type=int, default=3, help="Warmup iterations to discard (default: 3)."
    )
    parser.add_argument(
        "--seed", type=int, default=2024, help="Random seed for unit coordinates (default: 2024)."
    )
    return parser.parse_args(argv)


def main(argv: Optional[Iterable[str]] = None) -> int:
    args = parse_args(argv)
    if any(d <= 0 for d in args.shape):
        print("All dimensions must be positive.", file=sys.stderr)
        return 1
    results = run_cases(args.shape, iterations=args.iterations, warmup=args.warmup, seed=args.seed)
    print(format_results(results))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
