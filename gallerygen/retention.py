"""
RetentionPolicy - Decides which original files are kept for download.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from .gallery_entry import GalleryEntry


@dataclass(frozen=True)
class RetentionFlags:
    """
    Global switches consulted by the retention decision.

    Attributes:
        slim: Never keep originals
        keep_originals: Keep every original
        auto_panorama: Keep originals that look like uncropped panoramas
        panorama_threshold: Minimum width/height ratio of a panorama
    """
    slim: bool = False
    keep_originals: bool = False
    auto_panorama: bool = True
    panorama_threshold: float = 2.0


class RetentionPolicy:
    """
    Decides per image whether the original copy survives.

    Decisions depend only on the entry and the batch mean, so they never
    affect each other.
    """

    def __init__(
        self,
        flags: Optional[RetentionFlags] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.flags = flags or RetentionFlags()
        self.logger = logger or logging.getLogger(__name__)

    def should_keep_original(self, entry: GalleryEntry, mean: float) -> bool:
        """
        Decide whether the original of an entry is kept.

        Args:
            entry: Entry with its original copy generated
            mean: Mean megapixel count of the whole batch
        """
        if self.flags.slim:
            return False
        if self.flags.keep_originals:
            return True
        if self.flags.auto_panorama:
            return self.is_panorama(entry, mean)
        return False

    def is_panorama(self, entry: GalleryEntry, mean: float) -> bool:
        """Wide, above-average and not cropped from its reported source size."""
        if entry.file is None or entry.file.height == 0:
            return False

        mp = entry.file.megapixels
        source_x = entry.properties.get_int('PixelXDimension')
        source_y = entry.properties.get_int('PixelYDimension')
        source_mp = (source_x * source_y / 1e6) if source_x and source_y else 0.0
        ratio = entry.file.width / entry.file.height

        keep = (
            mp >= source_mp
            and mp > mean
            and ratio >= self.flags.panorama_threshold
        )
        if keep:
            self.logger.debug(
                f"Panorama: {entry.name} ({mp:.1f} MP, ratio {ratio:.2f}, mean {mean:.1f} MP)"
            )
        return keep

    def discard(self, entry: GalleryEntry, output_root: str) -> GalleryEntry:
        """Delete the original copy and drop it from the entry."""
        if entry.file is None:
            return entry
        path = os.path.join(output_root, entry.file.path)
        if os.path.exists(path):
            os.remove(path)
            self.logger.debug(f"Removed original: {entry.file.path}")
        return entry.without_file()
