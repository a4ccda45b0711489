"""
AverageTracker - Mean megapixel count across a whole batch.
"""

import threading


class AverageTracker:
    """
    Sum/count accumulator of megapixel counts.

    Accumulation is thread-safe and order-independent. The mean is only
    readable after finalize(), once every image has been accumulated.
    """

    def __init__(self):
        self.total = 0.0
        self.count = 0
        self._final = False
        self._lock = threading.Lock()

    def accumulate(self, megapixels: float) -> None:
        with self._lock:
            if self._final:
                raise RuntimeError("AverageTracker already finalized")
            self.total += megapixels
            self.count += 1

    def finalize(self) -> float:
        """Freeze the tracker and return the mean."""
        with self._lock:
            self._final = True
        return self.mean

    @property
    def is_final(self) -> bool:
        return self._final

    @property
    def mean(self) -> float:
        if not self._final:
            raise RuntimeError("Mean is not available before finalize()")
        if self.count == 0:
            return 0.0
        return self.total / self.count
