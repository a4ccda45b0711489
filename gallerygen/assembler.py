"""
GalleryAssembler - Orders entries, applies retention and writes the manifest.
"""

import logging
import os
from typing import List, Optional, Sequence

from .archive import ArchivePackager
from .config import GalleryConfig
from .gallery_entry import GalleryEntry
from .manifest import GalleryManifest
from .name_resolver import sanitize_name
from .retention import RetentionFlags, RetentionPolicy


class GalleryAssembler:
    """
    Second pass of a gallery build.

    Runs only once every image has been generated and the batch mean is
    final. Steps, in order: sort, retention decisions, archive packaging,
    removal of discarded originals, manifest write.
    """

    def __init__(
        self,
        config: GalleryConfig,
        retention: Optional[RetentionPolicy] = None,
        packager: Optional[ArchivePackager] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.retention = retention or RetentionPolicy(
            RetentionFlags(
                slim=config.slim,
                keep_originals=config.keep_originals,
                auto_panorama=config.auto_panorama,
                panorama_threshold=config.panorama_threshold,
            ),
            logger=self.logger,
        )
        self.packager = packager or ArchivePackager(logger=self.logger)

    @staticmethod
    def order(entries: Sequence[GalleryEntry]) -> List[GalleryEntry]:
        """Stable ascending sort by stamp; ties keep discovery order."""
        by_discovery = sorted(entries, key=lambda e: e.index)
        return sorted(by_discovery, key=lambda e: e.stamp)

    @property
    def archive_name(self) -> str:
        base = self.config.name or os.path.basename(os.path.normpath(self.config.output_dir))
        return sanitize_name(base + '.zip') + '.zip'

    @property
    def wants_download(self) -> bool:
        return self.config.download and not self.config.slim

    def assemble(self, entries: Sequence[GalleryEntry], mean: float) -> GalleryManifest:
        """
        Build and save the manifest for a fully generated batch.

        Args:
            entries: Generated entries, in any order
            mean: Final mean megapixel count of the batch

        Returns:
            The saved GalleryManifest
        """
        output_root = self.config.output_dir

        if self.config.time_sort:
            ordered = self.order(entries)
        else:
            ordered = sorted(entries, key=lambda e: e.index)

        keep = [self.retention.should_keep_original(e, mean) for e in ordered]
        self.logger.info(
            f"Retention: keeping {sum(keep)} of {len(ordered)} originals "
            f"(mean {mean:.2f} MP)"
        )

        download = None
        if self.wants_download:
            originals = [
                os.path.join(output_root, e.file.path)
                for e in ordered if e.file is not None
            ]
            if originals:
                self.packager.package(os.path.join(output_root, self.archive_name), originals)
                download = self.archive_name

        final = [
            entry if kept else self.retention.discard(entry, output_root)
            for entry, kept in zip(ordered, keep)
        ]

        manifest = GalleryManifest(
            blur=self.config.sizes.blur_size,
            thumb=self.config.sizes.max_thumb,
            entries=tuple(final),
            name=self.config.name,
            download=download,
            index=self.config.index_url,
        )
        manifest.save(self.config.manifest_path, logger=self.logger)
        return manifest
