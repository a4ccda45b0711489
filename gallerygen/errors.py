"""
Errors raised while building a gallery.

Every error is fatal to the run: the CLI reports a single line naming the
offending file and exits non-zero without writing a manifest.
"""

from typing import Optional


class GalleryError(Exception):
    """Base exception for gallery build errors."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path

    def __str__(self) -> str:
        message = super().__str__()
        if self.path:
            return f"{self.path}: {message}"
        return message


class EmptyInputError(GalleryError):
    """Raised when the input directory holds no supported images."""


class ExtractionError(GalleryError):
    """Raised when a source file cannot be read or parsed."""


class TransformError(GalleryError):
    """Raised when a derivative cannot be generated."""


class NamingExhaustion(GalleryError):
    """Raised when no free output name can be found."""


class ArchiveError(GalleryError):
    """Raised when the download archive cannot be written."""


class ManifestWriteError(GalleryError):
    """Raised when the manifest cannot be written."""
