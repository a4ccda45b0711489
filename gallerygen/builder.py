"""
GalleryBuilder - Builds a gallery from a directory of source images.
"""

import logging
import os
import warnings
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Iterable, List, Optional, TypeVar

from PIL import Image

from .assembler import GalleryAssembler
from .average_tracker import AverageTracker
from .build_progress import BuildProgress
from .build_stats import BuildStats
from .config import GalleryConfig
from .date_resolver import DateResolver
from .derivative_generator import DerivativeGenerator
from .errors import EmptyInputError
from .gallery_entry import GalleryEntry
from .manifest import GalleryManifest
from .name_resolver import NameResolver
from .properties import Properties, PropertyExtractor

T = TypeVar('T')
R = TypeVar('R')


class GalleryBuilder:
    """
    Builds a gallery in two passes separated by a barrier.

    Pass 1 runs per image on a bounded worker pool: property extraction,
    then (serialized, in discovery order) name and date resolution, then
    derivative generation feeding the megapixel average. Pass 2 starts only
    when every image is done: ordering, retention, archive and manifest.
    The first failure aborts the run before any manifest is written.
    """

    SUPPORTED_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.tif', '.tiff'}

    def __init__(
        self,
        config: GalleryConfig,
        extractor: Optional[PropertyExtractor] = None,
        generator: Optional[DerivativeGenerator] = None,
        assembler: Optional[GalleryAssembler] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize builder.

        Args:
            config: Gallery configuration
            extractor: Property extractor (default: Pillow-based)
            generator: Derivative generator (default: from config.sizes)
            assembler: Gallery assembler (default: from config)
            logger: Optional logger instance
        """
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.extractor = extractor or PropertyExtractor(logger=self.logger)
        self.generator = generator or DerivativeGenerator(config.sizes, logger=self.logger)
        self.assembler = assembler or GalleryAssembler(config, logger=self.logger)
        self.stats = BuildStats()

    def discover(self) -> List[str]:
        """List supported source images, sorted by file name."""
        sources = []
        with os.scandir(self.config.input_dir) as it:
            for item in it:
                ext = os.path.splitext(item.name)[1].lower()
                if item.is_file() and ext in self.SUPPORTED_EXTENSIONS:
                    sources.append(item.path)
        return sorted(sources, key=os.path.basename)

    def build(self, progress: Optional[BuildProgress] = None) -> GalleryManifest:
        """
        Build the gallery.

        Returns:
            The saved GalleryManifest

        Raises:
            GalleryError: On the first failure of any stage
        """
        sources = self.discover()
        if not sources:
            raise EmptyInputError("no supported images found", path=self.config.input_dir)

        self.stats = BuildStats(total_to_process=len(sources))
        self._apply_pixel_limit()
        output_root = self.config.output_dir
        os.makedirs(output_root, exist_ok=True)
        self.generator.prepare_output(output_root)

        self.logger.info(
            f"Starting build: {len(sources)} images with {self.config.workers} workers"
        )

        properties = self._map(self.extractor.extract, sources)
        self.stats.extracted = len(properties)
        entries = self._resolve(sources, properties)

        tracker = AverageTracker()
        generated = []
        for entry in self._map_unordered(self._generate, entries):
            tracker.accumulate(entry.megapixels)
            generated.append(entry)
            self.stats.processed += 1
            written = self._bytes_written(entry)
            self.stats.bytes_generated += written
            if progress:
                progress.on_file_processed(entry, written)
                progress.on_progress_update(self.stats)

        mean = tracker.finalize()
        self.logger.info(
            f"Generation complete: {tracker.count} images, mean {mean:.2f} MP "
            f"({self.stats.elapsed_seconds:.1f}s)"
        )

        return self.assembler.assemble(generated, mean)

    def _apply_pixel_limit(self) -> None:
        """Set Pillow's decompression bomb limit to the configured size."""
        Image.MAX_IMAGE_PIXELS = self.config.max_image_pixels
        warnings.simplefilter('ignore', Image.DecompressionBombWarning)

    def _resolve(self, sources: List[str], properties: List[Properties]) -> List[GalleryEntry]:
        """Assign names and timestamps in discovery order."""
        names = NameResolver(self.config.output_dir)
        dates = DateResolver()
        entries = []
        for index, (source, props) in enumerate(zip(sources, properties)):
            name = names.resolve(os.path.basename(source))
            stamp, date = dates.resolve(props)
            entries.append(GalleryEntry(
                index=index,
                source=source,
                name=name,
                properties=props,
                stamp=stamp,
                date=date,
            ))
            self.logger.debug(f"Resolved: {source} -> {name} (stamp {stamp})")
        return entries

    def _generate(self, entry: GalleryEntry) -> GalleryEntry:
        derivatives = self.generator.generate(
            entry.source, entry.properties, entry.name, self.config.output_dir
        )
        return entry.with_derivatives(derivatives)

    def _bytes_written(self, entry: GalleryEntry) -> int:
        total = 0
        for derivative in (entry.img, entry.thumb, entry.blur, entry.file):
            if derivative is not None:
                path = os.path.join(self.config.output_dir, derivative.path)
                if os.path.exists(path):
                    total += os.path.getsize(path)
        return total

    def _map(self, fn: Callable[[T], R], items: List[T]) -> List[R]:
        """Run fn over items on the pool, returning results in item order."""
        results: List[Optional[R]] = [None] * len(items)
        indexed = list(enumerate(items))
        for index, result in self._map_unordered(lambda pair: (pair[0], fn(pair[1])), indexed):
            results[index] = result
        return results

    def _map_unordered(self, fn: Callable[[T], R], items: List[T]) -> Iterable[R]:
        """Run fn over items on the pool, yielding results as they complete."""
        with ThreadPoolExecutor(max_workers=self.config.workers) as executor:
            futures = [executor.submit(fn, item) for item in items]
            try:
                for future in as_completed(futures):
                    yield future.result()
            except BaseException:
                for future in futures:
                    future.cancel()
                raise
