"""
Configuration for a gallery build.
"""

import os
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

Size = Tuple[int, int]

GEOMETRY_PATTERN = re.compile(r'^\s*(\d+)\s*[xX]\s*(\d+)\s*$')
DEFAULT_MAX_IMAGE_PIXELS = 1_000_000_000


def parse_geometry(value: str) -> Size:
    """
    Parse a "WxH" geometry string.

    Raises:
        ValueError: If the string is not two positive integers joined by 'x'
    """
    match = GEOMETRY_PATTERN.match(value)
    if not match:
        raise ValueError(f"Invalid geometry '{value}' (expected WxH)")
    width, height = int(match.group(1)), int(match.group(2))
    if width <= 0 or height <= 0:
        raise ValueError(f"Invalid geometry '{value}' (dimensions must be positive)")
    return width, height


def format_geometry(size: Size) -> str:
    return f"{size[0]}x{size[1]}"


@dataclass
class SizePolicy:
    """
    Size and encoding policy for derivatives.

    Attributes:
        min_thumb: Box the thumbnail fill-resize must cover
        max_thumb: Exact thumbnail output box
        max_full: Bounding box for the full-size image
        blur_size: Canvas size of the blurred placeholder
        quality: JPEG quality for re-encoded output (0-100)
        auto_orient: Apply EXIF orientation before resizing
        keep_unmodified: Always copy originals verbatim
        srgb: Convert embedded color profiles to sRGB
    """
    min_thumb: Size = (150, 112)
    max_thumb: Size = (267, 200)
    max_full: Size = (1600, 1200)
    blur_size: Size = (500, 500)
    quality: int = 90
    auto_orient: bool = True
    keep_unmodified: bool = False
    srgb: bool = True

    @property
    def blur_radius(self) -> float:
        """Gaussian radius: 10% of the average minimum thumbnail dimension."""
        return 0.1 * (self.min_thumb[0] + self.min_thumb[1]) / 2

    @property
    def thumb_fill(self) -> Size:
        """Box the fill-resize must cover so the crop box fits inside it."""
        return (
            max(self.min_thumb[0], self.max_thumb[0]),
            max(self.min_thumb[1], self.max_thumb[1]),
        )

    def validate(self) -> List[str]:
        """Return a list of configuration problems (empty when valid)."""
        errors = []
        if not 0 <= self.quality <= 100:
            errors.append(f"Quality must be between 0 and 100 (got {self.quality})")
        for label, size in (
            ('min-thumb', self.min_thumb),
            ('max-thumb', self.max_thumb),
            ('max-full', self.max_full),
            ('blur', self.blur_size),
        ):
            if size[0] <= 0 or size[1] <= 0:
                errors.append(f"Size {label} must be positive (got {format_geometry(size)})")
        return errors


@dataclass
class GalleryConfig:
    """
    Complete configuration for one gallery build.

    Attributes:
        input_dir: Directory holding the source images
        output_dir: Root of the generated gallery
        name: Optional album name
        index_url: Optional URL for the viewer's back/index link
        sizes: Derivative size policy
        time_sort: Order entries by timestamp
        auto_panorama: Keep originals of wide, uncropped, above-average images
        panorama_threshold: Minimum width/height ratio of a panorama
        slim: Omit originals and the download archive
        keep_originals: Keep every original
        download: Produce the bulk download archive
        workers: Size of the worker pool
        max_image_pixels: Largest source Pillow may decode (None: no limit)
    """
    input_dir: str
    output_dir: str
    name: Optional[str] = None
    index_url: Optional[str] = None
    sizes: SizePolicy = field(default_factory=SizePolicy)
    time_sort: bool = True
    auto_panorama: bool = True
    panorama_threshold: float = 2.0
    slim: bool = False
    keep_originals: bool = False
    download: bool = True
    workers: int = field(default_factory=lambda: os.cpu_count() or 1)
    max_image_pixels: Optional[int] = DEFAULT_MAX_IMAGE_PIXELS

    MANIFEST_FILENAME = 'data.json'

    @property
    def manifest_path(self) -> str:
        return os.path.join(self.output_dir, self.MANIFEST_FILENAME)

    def validate(self) -> List[str]:
        """Return a list of configuration problems (empty when valid)."""
        errors = []
        if not os.path.isdir(self.input_dir):
            errors.append(f"Input directory not found: {self.input_dir}")
        elif os.path.abspath(self.input_dir) == os.path.abspath(self.output_dir):
            errors.append("Output directory must differ from the input directory")
        if self.workers < 1:
            errors.append(f"Workers must be at least 1 (got {self.workers})")
        if self.panorama_threshold <= 0:
            errors.append(f"Panorama threshold must be positive (got {self.panorama_threshold})")
        if self.max_image_pixels is not None and self.max_image_pixels < 1:
            errors.append(f"Pixel limit must be positive (got {self.max_image_pixels})")
        errors.extend(self.sizes.validate())
        return errors
