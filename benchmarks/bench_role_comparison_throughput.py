"""Benchmark: role comparison throughput.

Compares joined roles pairwise, which exercises mutual domination over
their members and the permission-set ordering underneath.
"""
from __future__ import annotations

import json
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rbac_algebra.permissions.permissible import NamedOperation
from rbac_algebra.roles.role import Role

_ITERATIONS: int = 2_000
_OPERATION_COUNT: int = 12


def _make_roles() -> list[Role]:
    operations = [NamedOperation(f"op-{i}") for i in range(_OPERATION_COUNT)]
    singles = [Role.for_operations(op) for op in operations]
    return [
        Role.join(singles[:4]),
        Role.join(singles[2:8]),
        Role.join(singles),
        Role.for_operations(*operations[:6]),
    ]


def bench_role_comparison_throughput() -> dict[str, object]:
    """Benchmark pairwise try_compare_to over a fixed set of roles.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms.
    """
    roles = _make_roles()
    pairs = [(left, right) for left in roles for right in roles]

    start = time.perf_counter()
    for _ in range(_ITERATIONS):
        for left, right in pairs:
            left.try_compare_to(right)
    total = time.perf_counter() - start

    comparisons = _ITERATIONS * len(pairs)
    result: dict[str, object] = {
        "operation": "role_comparison_throughput",
        "iterations": comparisons,
        "total_seconds": round(total, 4),
        "ops_per_second": round(comparisons / total, 1),
        "avg_latency_ms": round(total / comparisons * 1000, 6),
    }
    print(
        f"[bench_role_comparison_throughput] {result['operation']}: "
        f"{result['ops_per_second']:,.0f} ops/sec"
    )
    return result


def run_benchmark() -> dict[str, object]:
    """Entry point returning the benchmark result dict."""
    return bench_role_comparison_throughput()


if __name__ == "__main__":
    result = run_benchmark()
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)
    output_path = results_dir / "role_comparison_baseline.json"
    with open(output_path, "w", encoding="utf-8") as fh:
        json.dump(result, fh, indent=2)
    print(f"Results saved to {output_path}")
