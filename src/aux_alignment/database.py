"""
In-memory store of alignment sync points.

Entries are kept in the order they were recorded; the alignment engine numbers
hull vertices after this order.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Tuple
import logging

from .coordinates import GeographicPosition
from .vectors import DirectionVector

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalibrationEntry:
    """
    A sync point: a known celestial position and the direction the mount
    reported while pointing at it.

    Attributes:
        ra: Right ascension in hours.
        dec: Declination in degrees.
        julian_date: Time of the observation.
        telescope_direction: Apparent direction cosine reported by the mount.
    """

    ra: float
    dec: float
    julian_date: float
    telescope_direction: DirectionVector = field(compare=False)


class InMemoryDatabase:
    """Ordered, append-only collection of sync points plus the site location."""

    def __init__(self, reference_position: Optional[GeographicPosition] = None):
        self._entries: List[CalibrationEntry] = []
        self._reference_position = reference_position

    @property
    def entries(self) -> Tuple[CalibrationEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(tuple(self._entries))

    def add_entry(self, entry: CalibrationEntry) -> None:
        # Keep a private copy of the direction so callers cannot mutate it
        stored = CalibrationEntry(
            entry.ra, entry.dec, entry.julian_date, entry.telescope_direction.copy()
        )
        self._entries.append(stored)
        logger.debug(
            "Sync point %d: RA %.5f Dec %.5f JD %.6f",
            len(self._entries),
            entry.ra,
            entry.dec,
            entry.julian_date,
        )

    def remove_last(self) -> Optional[CalibrationEntry]:
        if not self._entries:
            return None
        return self._entries.pop()

    def clear(self) -> None:
        self._entries = []

    def check_for_duplicate_sync_point(
        self, candidate: CalibrationEntry, tolerance: float = 0.1
    ) -> bool:
        """True if an entry with RA and Dec both within tolerance already exists."""
        for entry in self._entries:
            if (
                abs(entry.ra - candidate.ra) < tolerance
                and abs(entry.dec - candidate.dec) < tolerance
            ):
                return True
        return False

    def set_reference_position(self, position: Optional[GeographicPosition]) -> None:
        self._reference_position = position

    def get_reference_position(self) -> Optional[GeographicPosition]:
        return self._reference_position
