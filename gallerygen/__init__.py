"""
Static photo gallery generator.

Two-pass operation:
    1. Generate pass: extract properties, resolve names and dates, and write
       full-size, thumbnail and blurred derivatives for every image
    2. Assemble pass: order entries, decide which originals to keep, package
       the download archive and write data.json
"""

__version__ = "1.0.0"

from .errors import (
    GalleryError,
    EmptyInputError,
    ExtractionError,
    TransformError,
    NamingExhaustion,
    ArchiveError,
    ManifestWriteError,
)
from .config import GalleryConfig, SizePolicy, parse_geometry
from .properties import Properties, PropertyExtractor
from .name_resolver import NameResolver, resolve_name, sanitize_name
from .gallery_entry import Derivative, Derivatives, GalleryEntry
from .derivative_generator import DerivativeGenerator
from .date_resolver import DateResolver, resolve_date, parse_exif_date
from .average_tracker import AverageTracker
from .retention import RetentionFlags, RetentionPolicy
from .archive import ArchivePackager
from .manifest import GalleryManifest
from .assembler import GalleryAssembler
from .build_stats import BuildStats
from .build_progress import BuildProgress
from .builder import GalleryBuilder
from .reporter import Reporter

__all__ = [
    "GalleryError",
    "EmptyInputError",
    "ExtractionError",
    "TransformError",
    "NamingExhaustion",
    "ArchiveError",
    "ManifestWriteError",
    "GalleryConfig",
    "SizePolicy",
    "parse_geometry",
    "Properties",
    "PropertyExtractor",
    "NameResolver",
    "resolve_name",
    "sanitize_name",
    "Derivative",
    "Derivatives",
    "GalleryEntry",
    "DerivativeGenerator",
    "DateResolver",
    "resolve_date",
    "parse_exif_date",
    "AverageTracker",
    "RetentionFlags",
    "RetentionPolicy",
    "ArchivePackager",
    "GalleryManifest",
    "GalleryAssembler",
    "BuildStats",
    "BuildProgress",
    "GalleryBuilder",
    "Reporter",
]
