"""
DateResolver - Resolves a sortable timestamp for each image.
"""

import calendar
import threading
import time
from typing import Optional, Tuple

from .properties import Properties

EXIF_DATE_FORMAT = '%Y:%m:%d %H:%M:%S'
EXIF_DATE_LENGTH = 19


def parse_exif_date(value: Optional[str]) -> Optional[int]:
    """
    Parse an EXIF 'YYYY:MM:DD HH:MM:SS' date as UTC epoch seconds.

    Sub-second and zone suffixes are ignored. Returns None for missing or
    unparsable values such as '0000:00:00 00:00:00'.
    """
    if not value:
        return None
    try:
        parsed = time.strptime(value.strip()[:EXIF_DATE_LENGTH], EXIF_DATE_FORMAT)
    except ValueError:
        return None
    return calendar.timegm(parsed)


def resolve_date(
    properties: Properties,
    previous_stamp: int
) -> Tuple[int, Optional[str], int]:
    """
    Resolve the timestamp of one image.

    Returns:
        Tuple of (stamp, display_date, previous_stamp for the next image).
        Undated images get previous_stamp + 1 and no display date.
    """
    raw = properties.get('DateTimeOriginal')
    stamp = parse_exif_date(raw)
    if stamp is not None:
        return stamp, raw, previous_stamp

    synthetic = previous_stamp + 1
    return synthetic, None, synthetic


class DateResolver:
    """Owns the synthetic timestamp counter of one gallery build."""

    def __init__(self, start: int = 0):
        self.previous_stamp = start
        self._lock = threading.Lock()

    def resolve(self, properties: Properties) -> Tuple[int, Optional[str]]:
        with self._lock:
            stamp, display, self.previous_stamp = resolve_date(properties, self.previous_stamp)
        return stamp, display
