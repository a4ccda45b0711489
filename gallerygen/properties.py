"""
PropertyExtractor - Reads dimensions, format and EXIF tags from a source image.
"""

import logging
from dataclasses import dataclass, field
from fractions import Fraction
from typing import Dict, Optional

from PIL import ExifTags, Image, TiffImagePlugin

from .errors import ExtractionError

EXIF_IFD_POINTER = 0x8769

# Pillow names these ExifImageWidth/ExifImageHeight
TAG_NAME_OVERRIDES = {
    0xA002: 'PixelXDimension',
    0xA003: 'PixelYDimension',
}


@dataclass(frozen=True)
class Properties:
    """
    Flat metadata of a source image.

    Attributes:
        width: Pixel width as stored in the file
        height: Pixel height as stored in the file
        format: Pillow format name (e.g., 'JPEG', 'PNG')
        exif: EXIF tag name -> string value
    """
    width: int
    height: int
    format: str
    exif: Dict[str, str] = field(default_factory=dict)

    def get(self, key: str) -> Optional[str]:
        """Look up any property by name; missing keys return None."""
        if key == 'width':
            return str(self.width)
        if key == 'height':
            return str(self.height)
        if key == 'format':
            return self.format
        return self.exif.get(key)

    def get_int(self, key: str) -> Optional[int]:
        """Look up a property as an integer; non-numeric values return None."""
        value = self.get(key)
        if value is None:
            return None
        try:
            return int(float(value))
        except ValueError:
            return None

    @property
    def orientation(self) -> int:
        return self.get_int('Orientation') or 1

    @property
    def megapixels(self) -> float:
        return self.width * self.height / 1e6


class PropertyExtractor:
    """
    Extracts Properties from image files using Pillow.
    """

    SCALAR_TYPES = (str, bytes, int, float, Fraction, TiffImagePlugin.IFDRational)

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def extract(self, path: str) -> Properties:
        """
        Read the properties of one image file.

        Raises:
            ExtractionError: If the file is missing, unsupported or corrupt
        """
        try:
            with Image.open(path) as img:
                width, height = img.size
                image_format = img.format or 'UNKNOWN'
                exif = self._read_exif(img)
        except Exception as e:
            raise ExtractionError(f"cannot read image properties: {e}", path=path) from e

        self.logger.debug(
            f"Properties: {path} {width}x{height} {image_format} ({len(exif)} EXIF tags)"
        )
        return Properties(width=width, height=height, format=image_format, exif=exif)

    def _read_exif(self, img: Image.Image) -> Dict[str, str]:
        """Merge IFD0 and the Exif sub-IFD into a name -> string mapping."""
        raw = img.getexif()
        tags = dict(raw)
        tags.update(raw.get_ifd(EXIF_IFD_POINTER))

        exif = {}
        for tag, value in tags.items():
            name = TAG_NAME_OVERRIDES.get(tag) or ExifTags.TAGS.get(tag)
            if name is None or not isinstance(value, self.SCALAR_TYPES):
                continue
            text = self._to_text(value)
            if text:
                exif[name] = text
        return exif

    @staticmethod
    def _to_text(value) -> str:
        if isinstance(value, bytes):
            value = value.decode('utf-8', 'ignore')
        elif isinstance(value, (Fraction, TiffImagePlugin.IFDRational)):
            value = float(value)
            if value.is_integer():
                value = int(value)
        return str(value).strip('\x00 \t\r\n')
