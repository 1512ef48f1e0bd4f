"""
Benchmarks for incmerkle.

Run with: python -m incmerkle.utils.benchmark
"""

import time
import statistics
from typing import Callable, List
from dataclasses import dataclass

from incmerkle.crypto import sha256, keccak256, double_sha256, get_hasher
from incmerkle.core.tree import MerkleTree
from incmerkle.utils.logger import get_logger

logger = get_logger("benchmark")


# =============================================================================
# Benchmark Framework
# =============================================================================


@dataclass
class BenchmarkResult:
    """Result of a benchmark run."""
    name: str
    iterations: int
    total_time_ms: float
    avg_time_ms: float
    min_time_ms: float
    max_time_ms: float
    ops_per_sec: float

    def __str__(self) -> str:
        return (
            f"{self.name}: {self.ops_per_sec:.0f} ops/s "
            f"(avg={self.avg_time_ms:.3f}ms, min={self.min_time_ms:.3f}ms, max={self.max_time_ms:.3f}ms)"
        )


def benchmark(
    name: str,
    func: Callable,
    iterations: int = 1000,
    warmup: int = 100,
) -> BenchmarkResult:
    """
    Run a benchmark.

    Args:
        name: Benchmark name
        func: Function to benchmark (no args)
        iterations: Number of iterations
        warmup: Warmup iterations

    Returns:
        BenchmarkResult
    """
    if iterations < 1:
        raise ValueError(f"iterations must be >= 1, got {iterations}")

    for _ in range(warmup):
        func()

    times = []
    for _ in range(iterations):
        start = time.perf_counter()
        func()
        end = time.perf_counter()
        times.append((end - start) * 1000)  # ms

    total = sum(times)
    avg = statistics.mean(times)

    result = BenchmarkResult(
        name=name,
        iterations=iterations,
        total_time_ms=total,
        avg_time_ms=avg,
        min_time_ms=min(times),
        max_time_ms=max(times),
        ops_per_sec=1000 / avg if avg > 0 else float("inf"),
    )
    logger.debug(str(result))
    return result


# =============================================================================
# Hash Benchmarks
# =============================================================================


def benchmark_hashing(iterations: int = 10000) -> List[BenchmarkResult]:
    """Benchmark hash functions on a node-sized input."""
    data = b"x" * 64  # two concatenated 32-byte children

    return [
        benchmark("SHA-256 (64 bytes)", lambda: sha256(data), iterations=iterations),
        benchmark("SHA-256d (64 bytes)", lambda: double_sha256(data), iterations=iterations),
        benchmark("Keccak-256 (64 bytes)", lambda: keccak256(data), iterations=iterations),
    ]


# =============================================================================
# Tree Benchmarks
# =============================================================================


def benchmark_tree(count: int = 1024, hash_algorithm: str = "sha256") -> List[BenchmarkResult]:
    """
    Benchmark tree construction and insertion.

    The sequential run starts at height 0 so that it includes every growth
    step needed to hold ``count`` items.
    """
    hasher = get_hasher(hash_algorithm)
    results = []

    results.append(benchmark(
        "Tree Build (height 10)",
        lambda: MerkleTree(10, hasher),
        iterations=10,
        warmup=1,
    ))

    tree = MerkleTree(10, hasher)
    counter = iter(range(tree.leaf_count))
    results.append(benchmark(
        "Insert (no growth)",
        lambda: tree.insert(next(counter).to_bytes(8, "big")),
        iterations=tree.leaf_count // 2,
        warmup=0,
    ))

    def fill_from_empty():
        grown = MerkleTree(0, hasher)
        for i in range(count):
            grown.insert(i.to_bytes(8, "big"))
        return grown

    results.append(benchmark(
        f"Sequential Insert with growth ({count} items)",
        fill_from_empty,
        iterations=5,
        warmup=1,
    ))

    return results


# =============================================================================
# Main
# =============================================================================


def run_all_benchmarks(count: int = 1024) -> None:
    """Run all benchmarks and print results."""
    print("=" * 60)
    print("incmerkle Performance Benchmarks")
    print("=" * 60)

    sections = [
        ("Hashing", benchmark_hashing),
        ("Merkle Tree", lambda: benchmark_tree(count)),
    ]

    for section_name, bench_func in sections:
        print(f"\n{section_name}")
        print("-" * 40)
        results = bench_func()
        for r in results:
            print(f"  {r}")

    print("\n" + "=" * 60)


if __name__ == "__main__":
    run_all_benchmarks()
