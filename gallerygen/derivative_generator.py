"""
DerivativeGenerator - Handles original copies, resizing, cropping and blurring.
"""

import io
import logging
import math
import os
import shutil
from typing import Optional

from PIL import Image, ImageCms, ImageFilter, ImageOps

from .config import Size, SizePolicy
from .errors import TransformError
from .gallery_entry import Derivative, Derivatives
from .properties import Properties

OUTPUT_DIRS = {
    'original': 'files',
    'full': 'imgs',
    'thumb': 'thumbs',
    'blur': 'blurs',
}

CANONICAL_FORMAT = 'JPEG'
CANONICAL_EXT = '.jpg'


class DerivativeGenerator:
    """
    Generates gallery derivatives from source images using Pillow.

    The original copy is produced first; full-size and thumbnail images are
    derived from it, and the blurred placeholder from the thumbnail.
    """

    SRGB_PROFILE = ImageCms.createProfile('sRGB')

    def __init__(
        self,
        policy: Optional[SizePolicy] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize derivative generator.

        Args:
            policy: Size and encoding policy (default: SizePolicy())
            logger: Optional logger instance
        """
        self.policy = policy or SizePolicy()
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def relative_path(kind: str, name: str, ext: str = CANONICAL_EXT) -> str:
        return f"{OUTPUT_DIRS[kind]}/{name}{ext}"

    @staticmethod
    def prepare_output(output_root: str) -> None:
        """Create the derivative directories under the output root."""
        for subdir in OUTPUT_DIRS.values():
            os.makedirs(os.path.join(output_root, subdir), exist_ok=True)

    def generate(
        self,
        source: str,
        properties: Properties,
        name: str,
        output_root: str
    ) -> Derivatives:
        """
        Generate every derivative of one source image.

        Args:
            source: Path of the source image
            properties: Properties extracted from the source
            name: Resolved output base name
            output_root: Root of the gallery output tree

        Returns:
            Derivatives with their actual output dimensions

        Raises:
            TransformError: If any derivative cannot be produced
        """
        try:
            original = self.copy_original(source, properties, name, output_root)
            original_path = os.path.join(output_root, original.path)

            full = self.make_full(original_path, name, output_root)
            thumb = self.make_thumb(original_path, name, output_root)
            blur = self.make_blur(os.path.join(output_root, thumb.path), name, output_root)
        except TransformError:
            raise
        except Exception as e:
            self.logger.error(f"Error generating derivatives for {source}: {e}")
            raise TransformError(f"cannot generate derivatives: {e}", path=source) from e

        self.logger.debug(
            f"Generated: {name} full={full.width}x{full.height} "
            f"thumb={thumb.width}x{thumb.height} original={original.width}x{original.height}"
        )
        return Derivatives(original=original, full=full, thumb=thumb, blur=blur)

    def needs_reencode(self, properties: Properties) -> bool:
        """True when the original cannot be copied byte-for-byte."""
        if self.policy.keep_unmodified:
            return False
        if properties.format != CANONICAL_FORMAT:
            return True
        return self.policy.auto_orient and properties.orientation != 1

    def copy_original(
        self,
        source: str,
        properties: Properties,
        name: str,
        output_root: str
    ) -> Derivative:
        """Copy the source verbatim, or re-encode it when required."""
        if not self.needs_reencode(properties):
            ext = os.path.splitext(source)[1].lower() or CANONICAL_EXT
            rel_path = self.relative_path('original', name, ext)
            shutil.copy2(source, os.path.join(output_root, rel_path))
            return Derivative('original', rel_path, properties.width, properties.height)

        rel_path = self.relative_path('original', name)
        with Image.open(source) as img:
            if self.policy.auto_orient:
                img = ImageOps.exif_transpose(img)
            extra = {}
            if img.info.get('exif'):
                extra['exif'] = img.info['exif']
            if img.mode == 'CMYK':
                # The CMYK profile cannot describe the RGB output
                if self.policy.srgb:
                    img = self._to_srgb(img)
            elif img.info.get('icc_profile'):
                extra['icc_profile'] = img.info['icc_profile']
            img = self._convert_color_mode(img)
            self._save(img, os.path.join(output_root, rel_path), **extra)
            width, height = img.size
        self.logger.debug(f"Re-encoded original: {source} -> {rel_path}")
        return Derivative('original', rel_path, width, height)

    def make_full(self, path: str, name: str, output_root: str) -> Derivative:
        """Aspect-preserving resize within max_full, never upscaling."""
        rel_path = self.relative_path('full', name)
        img = self._open_for_resize(path)
        img.thumbnail(self.policy.max_full, Image.Resampling.LANCZOS)
        self._save(img, os.path.join(output_root, rel_path))
        return Derivative('full', rel_path, *img.size)

    def make_thumb(self, path: str, name: str, output_root: str) -> Derivative:
        """Fill-resize to cover the thumbnail box, then center-crop to max_thumb."""
        rel_path = self.relative_path('thumb', name)
        img = self._open_for_resize(path)
        img = self._fill(img, self.policy.thumb_fill)
        img = self._center_crop(img, self.policy.max_thumb)
        self._save(img, os.path.join(output_root, rel_path))
        return Derivative('thumb', rel_path, *img.size)

    def make_blur(self, thumb_path: str, name: str, output_root: str) -> Derivative:
        """Scale the thumbnail to the blur canvas and apply a mirrored Gaussian blur."""
        rel_path = self.relative_path('blur', name)
        with Image.open(thumb_path) as thumb:
            img = self._convert_color_mode(thumb)
            img = img.resize(self.policy.blur_size, Image.Resampling.BILINEAR)
        img = self._mirror_blur(img, self.policy.blur_radius)
        self._save(img, os.path.join(output_root, rel_path))
        return Derivative('blur', rel_path, *img.size)

    def _open_for_resize(self, path: str) -> Image.Image:
        with Image.open(path) as source:
            img = source
            if self.policy.auto_orient:
                img = ImageOps.exif_transpose(img)
            if self.policy.srgb:
                img = self._to_srgb(img)
            img = self._convert_color_mode(img)
            if img is source:
                img = source.copy()
        return img

    @staticmethod
    def _fill(img: Image.Image, box: Size) -> Image.Image:
        """Resize preserving aspect so that both sides cover the box."""
        width, height = img.size
        scale = max(box[0] / width, box[1] / height)
        target = (
            max(box[0], math.ceil(width * scale)),
            max(box[1], math.ceil(height * scale)),
        )
        return img.resize(target, Image.Resampling.LANCZOS)

    @staticmethod
    def _center_crop(img: Image.Image, box: Size) -> Image.Image:
        width, height = img.size
        left = (width - box[0]) // 2
        top = (height - box[1]) // 2
        return img.crop((left, top, left + box[0], top + box[1]))

    @staticmethod
    def _mirror_blur(img: Image.Image, radius: float) -> Image.Image:
        """Gaussian blur with mirrored borders instead of clamped edges."""
        width, height = img.size
        pad_x = min(width, math.ceil(radius * 3))
        pad_y = min(height, math.ceil(radius * 3))

        mirrored = ImageOps.mirror(img)
        flipped = ImageOps.flip(img)
        both = ImageOps.flip(mirrored)

        tiled = Image.new(img.mode, (width * 3, height * 3))
        for row, tiles in enumerate((
            (both, flipped, both),
            (mirrored, img, mirrored),
            (both, flipped, both),
        )):
            for col, tile in enumerate(tiles):
                tiled.paste(tile, (col * width, row * height))

        padded = tiled.crop((width - pad_x, height - pad_y, 2 * width + pad_x, 2 * height + pad_y))
        blurred = padded.filter(ImageFilter.GaussianBlur(radius))
        return blurred.crop((pad_x, pad_y, pad_x + width, pad_y + height))

    def _to_srgb(self, img: Image.Image) -> Image.Image:
        """Convert an embedded ICC profile to sRGB."""
        icc = img.info.get('icc_profile')
        if not icc or img.mode not in ('RGB', 'RGBA', 'CMYK'):
            return img
        source_profile = ImageCms.ImageCmsProfile(io.BytesIO(icc))
        output_mode = 'RGBA' if img.mode == 'RGBA' else 'RGB'
        return ImageCms.profileToProfile(img, source_profile, self.SRGB_PROFILE, outputMode=output_mode)

    def _convert_color_mode(self, img: Image.Image) -> Image.Image:
        """Convert image to RGB, flattening transparency onto white."""
        if img.mode in ('RGBA', 'LA'):
            background = Image.new('RGB', img.size, (255, 255, 255))
            if img.mode == 'LA':
                img = img.convert('RGBA')
            background.paste(img, mask=img.split()[-1])
            return background
        elif img.mode == 'P':
            img = img.convert('RGBA')
            background = Image.new('RGB', img.size, (255, 255, 255))
            background.paste(img, mask=img.split()[-1])
            return background
        elif img.mode != 'RGB':
            return img.convert('RGB')
        return img

    def _save(self, img: Image.Image, path: str, **extra) -> None:
        img.save(path, format=CANONICAL_FORMAT, quality=self.policy.quality, optimize=True, **extra)

