"""
ArchivePackager - Packs original files into the bulk-download zip.
"""

import logging
import os
import zipfile
from typing import List, Optional

from .errors import ArchiveError


class ArchivePackager:
    """
    Writes a single zip archive from an ordered list of files.

    Members are stored under their base names. The archive is written to a
    temporary file and renamed into place, so a failed run never leaves a
    truncated archive behind.
    """

    def __init__(self, compresslevel: int = 9, logger: Optional[logging.Logger] = None):
        self.compresslevel = compresslevel
        self.logger = logger or logging.getLogger(__name__)

    def package(self, output_path: str, files: List[str]) -> str:
        """
        Create the archive.

        Args:
            output_path: Path of the archive to write
            files: Files to include, in order

        Returns:
            The archive path

        Raises:
            ArchiveError: If any file cannot be read or the archive written
        """
        tmp_path = output_path + '.tmp'
        try:
            with zipfile.ZipFile(
                tmp_path, 'w',
                compression=zipfile.ZIP_DEFLATED,
                compresslevel=self.compresslevel
            ) as archive:
                for path in files:
                    archive.write(path, arcname=os.path.basename(path))
            os.replace(tmp_path, output_path)
        except (OSError, zipfile.BadZipFile) as e:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise ArchiveError(f"cannot write archive: {e}", path=output_path) from e

        size_mb = os.path.getsize(output_path) / (1024 * 1024)
        self.logger.info(f"Archive saved: {output_path} ({len(files)} files, {size_mb:.1f} MB)")
        return output_path
