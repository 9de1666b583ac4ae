import time
from typing import List, Optional


class BenchmarkTimer:
    """Context manager timing one run. A block that raises records nothing."""

    def __init__(self):
        self.start_time: Optional[float] = None
        self.times: List[float] = []

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.times.append(time.perf_counter() - self.start_time)
        return False

    @property
    def elapsed(self) -> float:
        """Return the most recent completed elapsed time"""
        if self.times:
            return self.times[-1]
        return 0.0
