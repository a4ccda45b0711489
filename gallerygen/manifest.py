"""
GalleryManifest - The data.json document consumed by the gallery viewer.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from .errors import ManifestWriteError
from .gallery_entry import GalleryEntry


@dataclass(frozen=True)
class GalleryManifest:
    """
    Complete gallery manifest.

    Attributes:
        blur: Size of the blurred placeholder canvas
        thumb: Thumbnail bound
        entries: Ordered gallery entries
        name: Optional album name
        download: Optional file name of the download archive
        index: Optional URL of the viewer's back/index link
    """
    blur: Tuple[int, int]
    thumb: Tuple[int, int]
    entries: Tuple[GalleryEntry, ...] = field(default_factory=tuple)
    name: Optional[str] = None
    download: Optional[str] = None
    index: Optional[str] = None

    @property
    def total_images(self) -> int:
        return len(self.entries)

    @property
    def total_originals(self) -> int:
        """Entries that kept their original file."""
        return sum(1 for e in self.entries if e.file is not None)

    @property
    def dated_images(self) -> int:
        return sum(1 for e in self.entries if e.date is not None)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization, omitting unset fields."""
        data = {}
        if self.name is not None:
            data['name'] = self.name
        if self.download is not None:
            data['download'] = self.download
        if self.index is not None:
            data['index'] = self.index
        data['blur'] = list(self.blur)
        data['thumb'] = list(self.thumb)
        data['data'] = [e.to_dict() for e in self.entries]
        return data

    def save(self, filepath: str, logger: Optional[logging.Logger] = None) -> None:
        """
        Save manifest to a JSON file.

        The document is written next to the target and renamed over it.

        Raises:
            ManifestWriteError: If the file cannot be written
        """
        logger = logger or logging.getLogger(__name__)
        path = Path(filepath)
        tmp_path = path.with_name(path.name + '.tmp')

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError) as e:
            if tmp_path.exists():
                tmp_path.unlink()
            raise ManifestWriteError(f"cannot write manifest: {e}", path=filepath) from e

        size_kb = path.stat().st_size / 1024
        logger.info(f"Manifest saved: {filepath} ({self.total_images} images, {size_kb:.1f} KB)")
