"""Timing and rebalancing-cost profiling for tree engine operations."""

import time
import functools
from typing import Dict, Callable, Optional
from dataclasses import dataclass
from collections import defaultdict


@dataclass
class OperationMetrics:
    """Timing and structural cost of one engine operation on one tree kind."""
    call_count: int = 0
    total_time: float = 0.0
    structural_ops: int = 0
    restructuring_calls: int = 0

    def add_call(self, elapsed: float, structural_ops: int) -> None:
        self.call_count += 1
        self.total_time += elapsed
        self.structural_ops += structural_ops
        if structural_ops:
            self.restructuring_calls += 1

    @property
    def avg_time(self) -> float:
        return self.total_time / self.call_count if self.call_count > 0 else 0

    @property
    def structural_per_call(self) -> float:
        """Average number of rotations, splits, merges and borrows per call."""
        return self.structural_ops / self.call_count if self.call_count > 0 else 0


class PerformanceTracker:
    """
    Process-wide collector of engine operation costs.

    Disabled by default; benchmarks switch it on around the code they measure.
    Measurements are keyed by "<tree kind>.<operation>".
    """

    _instance = None

    @classmethod
    def get_instance(cls) -> 'PerformanceTracker':
        if cls._instance is None:
            cls._instance = PerformanceTracker()
        return cls._instance

    def __init__(self):
        self.metrics: Dict[str, OperationMetrics] = defaultdict(OperationMetrics)
        self.enabled = False

    def add_call(self, name: str, elapsed: float, structural_ops: int = 0) -> None:
        if self.enabled:
            self.metrics[name].add_call(elapsed, structural_ops)

    def reset(self) -> None:
        self.metrics.clear()

    def enable(self) -> None:
        self.enabled = True

    def disable(self) -> None:
        self.enabled = False

    def report(self, sort_by: str = 'total_time') -> str:
        """Render the collected metrics as a fixed-width table."""
        if not self.metrics:
            return "No performance data collected."

        lines = ["Performance Metrics:"]
        lines.append("-" * 80)
        lines.append(f"{'Operation':<24} {'Calls':>8} {'Total (s)':>12} {'Avg (µs)':>10} "
                     f"{'Struct ops':>11} {'Per call':>9}")
        lines.append("-" * 80)

        sorted_items = sorted(
            self.metrics.items(),
            key=lambda x: getattr(x[1], sort_by),
            reverse=True
        )
        for name, metrics in sorted_items:
            lines.append(f"{name:<24} {metrics.call_count:>8} {metrics.total_time:>12.6f} "
                         f"{metrics.avg_time * 1e6:>10.2f} {metrics.structural_ops:>11} "
                         f"{metrics.structural_per_call:>9.3f}")
        return "\n".join(lines)


def _structural_since(log, start: int) -> int:
    return sum(1 for op in log.since(start) if op.kind.is_structural)


def track_performance(method: Optional[Callable] = None, *,
                      tag: Optional[str] = None) -> Callable:
    """
    Decorator timing an engine method and counting the structural log
    entries it appended.

    The measurement name is `tag` if given, else "<kind>.<method name>".
    Supports both @track_performance and @track_performance(tag="name").
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(self, *args, **kwargs):
            tracker = PerformanceTracker.get_instance()
            if not tracker.enabled:
                return func(self, *args, **kwargs)

            name = tag if tag is not None else f"{self.kind.value}.{func.__name__}"
            log = self.log
            start_len = len(log)
            start_time = time.perf_counter()
            result = func(self, *args, **kwargs)
            elapsed = time.perf_counter() - start_time
            tracker.add_call(name, elapsed, _structural_since(log, start_len))
            return result
        return wrapper

    if method is None:
        return decorator
    return decorator(method)
