"""
Coordinate conversions for the alignment engine.

Equatorial <-> horizontal conversion is done with ephem, using an Observer
set up the same way for every call: refraction disabled and the equinox of
date (JNow) as epoch. Times are Julian dates.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Tuple
import math
import ephem

from .vectors import (
    DirectionVector,
    vector_from_altaz,
    vector_from_radec,
    vector_to_altaz,
    vector_to_radec,
)

# ephem counts days from 1899 Dec 31 12:00 UT (the Dublin Julian Day)
DUBLIN_JD_OFFSET = 2415020.0


class MountAlignment(Enum):
    """Approximate alignment of the mount's primary axis."""

    ZENITH = "zenith"
    NORTH_CELESTIAL_POLE = "north_celestial_pole"
    SOUTH_CELESTIAL_POLE = "south_celestial_pole"


@dataclass(frozen=True)
class GeographicPosition:
    """Observatory location. Degrees (east and north positive), meters."""

    latitude: float
    longitude: float
    elevation: float = 0.0


def current_julian_date() -> float:
    return ephem.julian_date(ephem.now())


def make_observer(position: GeographicPosition, julian_date: float) -> ephem.Observer:
    """Builds an ephem Observer for the given place and time."""
    observer = ephem.Observer()
    observer.lat = str(position.latitude)
    observer.lon = str(position.longitude)
    observer.elevation = float(position.elevation)
    observer.pressure = 0
    observer.date = ephem.Date(julian_date - DUBLIN_JD_OFFSET)
    # Ensure we use JNow (Equinox of Date)
    observer.epoch = observer.date
    return observer


def equatorial_to_horizontal(
    ra_hours: float, dec_deg: float, position: GeographicPosition, julian_date: float
) -> Tuple[float, float]:
    """Converts RA/Dec (JNow) to Azimuth and Altitude in degrees."""
    observer = make_observer(position, julian_date)

    body = ephem.FixedBody()
    body._ra = math.radians(ra_hours * 15.0)
    body._dec = math.radians(dec_deg)
    body._epoch = observer.date
    body.compute(observer)

    return math.degrees(float(body.az)) % 360.0, math.degrees(float(body.alt))


def horizontal_to_equatorial(
    az_deg: float, alt_deg: float, position: GeographicPosition, julian_date: float
) -> Tuple[float, float]:
    """Converts Azimuth/Altitude to RA (hours) and Dec (degrees), JNow."""
    observer = make_observer(position, julian_date)
    ra_rad, dec_rad = observer.radec_of(math.radians(az_deg), math.radians(alt_deg))
    return (math.degrees(float(ra_rad)) / 15.0) % 24.0, math.degrees(float(dec_rad))


def actual_direction(
    ra_hours: float,
    dec_deg: float,
    hint: MountAlignment,
    position: GeographicPosition,
    julian_date: float,
) -> DirectionVector:
    """
    Direction cosine of a celestial position in the mount's working frame.

    Alt-az mounts work in the horizontal frame, polar aligned mounts directly
    in the equatorial frame (time and place are then irrelevant).
    """
    if hint is MountAlignment.ZENITH:
        az, alt = equatorial_to_horizontal(ra_hours, dec_deg, position, julian_date)
        return vector_from_altaz(az, alt)
    return vector_from_radec(ra_hours, dec_deg)


def celestial_from_direction(
    vector: DirectionVector,
    hint: MountAlignment,
    position: GeographicPosition,
    julian_date: float,
) -> Tuple[float, float]:
    """Inverse of actual_direction: RA (hours) and Dec (degrees)."""
    if hint is MountAlignment.ZENITH:
        az, alt = vector_to_altaz(vector)
        return horizontal_to_equatorial(az, alt, position, julian_date)
    return vector_to_radec(vector)
