"""
NameResolver - Derives filesystem-safe, collision-free output names.
"""

import os
import re
import threading
from typing import Callable, Optional, Set

from .errors import NamingExhaustion

UNSAFE_CHARS = re.compile(r'\W', re.ASCII)
EDGE_UNSAFE_CHARS = re.compile(r'^\W+|\W+$', re.ASCII)
FALLBACK_NAME = 'image'
MAX_SUFFIX = 1_000_000


def sanitize_name(filename: str) -> str:
    """
    Replace every non-word character of the file stem with '_'.

    Leading and trailing runs of non-word characters are dropped, so
    'a!.jpg' becomes 'a' while '_a.jpg' stays '_a'.
    """
    stem = os.path.splitext(os.path.basename(filename))[0]
    stem = EDGE_UNSAFE_CHARS.sub('', stem)
    return UNSAFE_CHARS.sub('_', stem) or FALLBACK_NAME


def resolve_name(
    filename: str,
    existing_names: Set[str],
    exists: Optional[Callable[[str], bool]] = None
) -> str:
    """
    Resolve a free base name for a source file.

    Args:
        filename: Source file name
        existing_names: Names already taken in this batch
        exists: Optional check for names already present on disk

    Returns:
        The sanitized name, or the sanitized name with the first free
        '_N' suffix
    """
    root = sanitize_name(filename)

    def taken(candidate: str) -> bool:
        return candidate in existing_names or (exists is not None and exists(candidate))

    if not taken(root):
        return root

    for n in range(MAX_SUFFIX):
        candidate = f"{root}_{n}"
        if not taken(candidate):
            return candidate

    raise NamingExhaustion(f"no free name after {MAX_SUFFIX} attempts", path=filename)


class NameResolver:
    """
    Owns the set of names used in one gallery build.

    A name is free when no earlier image in the batch took it and no full-size
    image with that name already exists under the output root.
    """

    def __init__(self, output_root: Optional[str] = None, output_ext: str = '.jpg'):
        self.output_root = output_root
        self.output_ext = output_ext
        self.names: Set[str] = set()
        self._lock = threading.Lock()

    def _exists_on_disk(self, name: str) -> bool:
        return os.path.exists(os.path.join(self.output_root, 'imgs', name + self.output_ext))

    def resolve(self, filename: str) -> str:
        """Resolve and record the name for a source file."""
        exists = self._exists_on_disk if self.output_root else None
        with self._lock:
            name = resolve_name(filename, self.names, exists)
            self.names.add(name)
        return name
