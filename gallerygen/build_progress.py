"""
BuildProgress - Tracks and displays gallery build progress.
"""

import logging
from typing import Optional

from .build_stats import BuildStats
from .gallery_entry import GalleryEntry


class BuildProgress:
    """
    Tracks and displays build progress with optional per-file output.
    """

    def __init__(
        self,
        show_files: bool = False,
        log_interval: int = 25,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize progress tracker.

        Args:
            show_files: If True, print each file as it's processed
            log_interval: Log summary progress every N images (when not show_files)
            logger: Optional logger instance
        """
        self.show_files = show_files
        self.log_interval = log_interval
        self.logger = logger or logging.getLogger(__name__)
        self.last_logged = 0

    def on_file_processed(self, entry: GalleryEntry, bytes_written: Optional[int] = None) -> None:
        """Called when all derivatives of an image are written."""
        if self.show_files:
            size_str = self._format_bytes(bytes_written) if bytes_written else "unknown"
            print(f"  [OK] {entry.source} -> {entry.format_status()} [{size_str}]")

    def on_progress_update(self, stats: BuildStats) -> None:
        """
        Called after each image to report overall progress.

        Args:
            stats: Current build statistics
        """
        done = stats.processed

        if not self.show_files and done - self.last_logged >= self.log_interval:
            self.last_logged = done
            eta_minutes = stats.estimated_remaining_seconds / 60
            self.logger.info(
                f"Progress: {done}/{stats.total_to_process} images "
                f"({stats.rate_per_minute:.1f}/min, ~{eta_minutes:.0f}m remaining)"
            )

    @staticmethod
    def _format_bytes(bytes_val: Optional[int]) -> str:
        """Format bytes as human-readable string."""
        if bytes_val is None:
            return "unknown"
        for unit in ['B', 'KB', 'MB', 'GB']:
            if bytes_val < 1024:
                return f"{bytes_val:.1f} {unit}"
            bytes_val /= 1024
        return f"{bytes_val:.1f} TB"
