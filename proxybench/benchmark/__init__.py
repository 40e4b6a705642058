"""Benchmark orchestration."""

from proxybench.benchmark.engine import BenchmarkEngine, BenchmarkState, derive_processing_times

__all__ = ["BenchmarkEngine", "BenchmarkState", "derive_processing_times"]
