"""
Reporter - Prints a human-readable summary of a gallery build.
"""

import sys
from typing import Optional, TextIO

from .build_stats import BuildStats
from .manifest import GalleryManifest


class Reporter:
    """
    Prints build summaries.
    """

    def __init__(self, output: Optional[TextIO] = None):
        """
        Initialize reporter.

        Args:
            output: Output stream (default: stdout)
        """
        self.output = output or sys.stdout

    def _print(self, text: str = "") -> None:
        """Print to output stream."""
        print(text, file=self.output)

    def _format_bytes(self, bytes_val: float) -> str:
        """Format bytes as human-readable string."""
        for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
            if bytes_val < 1024:
                return f"{bytes_val:.1f} {unit}"
            bytes_val /= 1024
        return f"{bytes_val:.1f} PB"

    def _format_duration(self, seconds: float) -> str:
        """Format duration as human-readable string."""
        if seconds < 60:
            return f"{seconds:.1f} seconds"
        elif seconds < 3600:
            return f"{seconds / 60:.1f} minutes"
        else:
            return f"{seconds / 3600:.1f} hours"

    def report_summary(self, manifest: GalleryManifest, stats: Optional[BuildStats] = None) -> None:
        """Print a summary of the generated gallery."""
        self._print("=" * 60)
        self._print("GALLERY SUMMARY")
        self._print("=" * 60)
        if manifest.name:
            self._print(f"  Name:        {manifest.name}")
        self._print(f"  Images:      {manifest.total_images}")
        self._print(f"  Dated:       {manifest.dated_images}")
        self._print(f"  Originals:   {manifest.total_originals}")
        self._print(f"  Download:    {manifest.download or 'none'}")
        self._print(f"  Thumbnails:  {manifest.thumb[0]}x{manifest.thumb[1]}")
        if stats is not None:
            self._print(f"  Extracted:   {stats.extracted}/{stats.total_to_process}")
            self._print(f"  Processed:   {stats.processed}")
            self._print(f"  Generated:   {self._format_bytes(stats.bytes_generated)}")
            self._print(f"  Time:        {self._format_duration(stats.elapsed_seconds)}")
            self._print(f"  Rate:        {stats.rate_per_minute:.1f}/min")
        self._print("=" * 60)
