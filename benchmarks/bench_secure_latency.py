"""Benchmark: secure() latency against a resource-scoped role, per-call p50/p99.

Measures the per-call latency of secure() for an operation deep in a
resource hierarchy, where every check walks the parent chain.
"""
from __future__ import annotations

import json
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rbac_algebra.evaluation.source import PermissionSource, secure
from rbac_algebra.permissions.permissible import NamedOperation
from rbac_algebra.resources.resource import ResourceNode, ResourceOperation
from rbac_algebra.roles.role import ResourceRole, Role

_WARMUP: int = 100
_ITERATIONS: int = 5_000
_DEPTH: int = 8  # Typical nesting of a document tree.


def _build_source() -> tuple[PermissionSource, ResourceOperation]:
    """Build a joined role and a request at the bottom of the tree."""
    read = NamedOperation("read")
    write = NamedOperation("write")
    root = ResourceNode("tenants")
    leaf = root
    for level in range(_DEPTH):
        leaf = leaf.child(f"level-{level}")
    role = Role.join(
        ResourceRole(ResourceNode("archive"), read),
        ResourceRole(root, read, write),
    )
    return PermissionSource.from_role(role), ResourceOperation(leaf, write)


def bench_secure_latency() -> dict[str, object]:
    """Benchmark secure() per-call latency.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms, p50_latency_ms, p99_latency_ms.
    """
    source, target = _build_source()

    # Warmup.
    for _ in range(_WARMUP):
        secure(target, lambda: None, source)

    latencies_ms: list[float] = []
    for _ in range(_ITERATIONS):
        t0 = time.perf_counter()
        secure(target, lambda: None, source)
        latencies_ms.append((time.perf_counter() - t0) * 1000)

    sorted_lats = sorted(latencies_ms)
    n = len(sorted_lats)
    total = sum(latencies_ms) / 1000

    result: dict[str, object] = {
        "operation": "secure_latency",
        "iterations": _ITERATIONS,
        "total_seconds": round(total, 4),
        "ops_per_second": round(_ITERATIONS / total, 1),
        "avg_latency_ms": round(sum(latencies_ms) / n, 4),
        "p50_latency_ms": round(sorted_lats[n // 2], 4),
        "p99_latency_ms": round(sorted_lats[min(int(n * 0.99), n - 1)], 4),
    }
    print(
        f"[bench_secure_latency] {result['operation']}: "
        f"p99={result['p99_latency_ms']:.4f}ms  "
        f"mean={result['avg_latency_ms']:.4f}ms"
    )
    return result


def run_benchmark() -> dict[str, object]:
    """Entry point returning the benchmark result dict."""
    return bench_secure_latency()


if __name__ == "__main__":
    result = run_benchmark()
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)
    output_path = results_dir / "secure_latency_baseline.json"
    with open(output_path, "w", encoding="utf-8") as fh:
        json.dump(result, fh, indent=2)
    print(f"Results saved to {output_path}")
