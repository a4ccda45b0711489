"""
GalleryEntry - Record for a single image and its derivatives.
"""

from dataclasses import dataclass, replace
from typing import List, Optional

from .properties import Properties


@dataclass(frozen=True)
class Derivative:
    """
    A generated image artifact.

    Attributes:
        kind: 'original', 'full', 'thumb' or 'blur'
        path: Path relative to the output root (always '/'-separated)
        width: Actual output width
        height: Actual output height
    """
    kind: str
    path: str
    width: int
    height: int

    @property
    def size(self) -> List[int]:
        return [self.width, self.height]

    @property
    def megapixels(self) -> float:
        return self.width * self.height / 1e6

    def to_pair(self) -> list:
        """Manifest form: [path, [w, h]]."""
        return [self.path, self.size]


@dataclass(frozen=True)
class Derivatives:
    """The derivatives generated for one source image."""
    original: Derivative
    full: Derivative
    thumb: Derivative
    blur: Derivative


@dataclass
class GalleryEntry:
    """
    Record for a single source image as it moves through the pipeline.

    Attributes:
        index: Discovery order of the source file
        source: Path of the source file
        name: Resolved output base name
        properties: Extracted source properties
        stamp: Sort timestamp (real epoch or synthetic)
        date: Raw capture date, only for real timestamps
        img: Full-size derivative
        thumb: Thumbnail derivative
        blur: Blurred placeholder derivative
        file: Kept original copy, if any
    """
    index: int
    source: str
    name: str
    properties: Properties
    stamp: int = 0
    date: Optional[str] = None
    img: Optional[Derivative] = None
    thumb: Optional[Derivative] = None
    blur: Optional[Derivative] = None
    file: Optional[Derivative] = None

    def with_derivatives(self, derivatives: Derivatives) -> 'GalleryEntry':
        return replace(
            self,
            img=derivatives.full,
            thumb=derivatives.thumb,
            blur=derivatives.blur,
            file=derivatives.original,
        )

    def without_file(self) -> 'GalleryEntry':
        return replace(self, file=None)

    @property
    def megapixels(self) -> float:
        """Megapixels of the original copy (source dimensions before generation)."""
        if self.file is not None:
            return self.file.megapixels
        return self.properties.megapixels

    def to_dict(self) -> dict:
        """Manifest projection carrying only the defined fields."""
        data = {}
        if self.img is not None:
            data['img'] = self.img.to_pair()
        if self.thumb is not None:
            data['thumb'] = self.thumb.to_pair()
        if self.file is not None:
            data['file'] = self.file.to_pair()
        if self.blur is not None:
            data['blur'] = self.blur.path
        if self.date is not None:
            data['date'] = self.date
        data['stamp'] = self.stamp
        return data

    def format_status(self) -> str:
        """
        Format a human-readable status line.

        Returns:
            Status string like "IMG_001 - 1600x1200, original 12.2 MP"
        """
        parts = [self.name]
        if self.img is not None:
            parts.append(f"{self.img.width}x{self.img.height}")
        status = ' - '.join(parts)
        if self.file is not None:
            status += f", original {self.file.megapixels:.1f} MP"
        return status
