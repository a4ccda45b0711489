"""
BuildStats - Statistics for a gallery build.
"""

import time
from dataclasses import dataclass, field


@dataclass
class BuildStats:
    """
    Statistics for a gallery build.

    Attributes:
        total_to_process: Source images found
        extracted: Images whose properties were read
        processed: Images with all derivatives generated
        bytes_generated: Total bytes of derivatives written
        start_time: Start timestamp
    """
    total_to_process: int = 0
    extracted: int = 0
    processed: int = 0
    bytes_generated: int = 0
    start_time: float = field(default_factory=time.time)

    @property
    def elapsed_seconds(self) -> float:
        """Elapsed time in seconds."""
        return time.time() - self.start_time

    @property
    def rate_per_second(self) -> float:
        """Processing rate in images per second."""
        if self.elapsed_seconds > 0:
            return self.processed / self.elapsed_seconds
        return 0.0

    @property
    def rate_per_minute(self) -> float:
        """Processing rate in images per minute."""
        return self.rate_per_second * 60

    @property
    def estimated_remaining_seconds(self) -> float:
        """Estimated time remaining in seconds."""
        if self.rate_per_second > 0:
            return self.remaining_count / self.rate_per_second
        return 0.0

    @property
    def remaining_count(self) -> int:
        """Remaining to process."""
        return self.total_to_process - self.processed
