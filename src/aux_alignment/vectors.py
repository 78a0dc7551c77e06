"""
Telescope Direction Vectors

Direction cosines on the unit sphere and their conversions to and from
equatorial (RA/Dec) and horizontal (Az/Alt) coordinates.
"""

import math
import numpy as np


class DirectionVector:
    """
    A 3D direction vector (direction cosine) in either the actual or the
    apparent frame.

    Supports the algebra the alignment engine needs: cross and dot products,
    scaling, difference, length and in-place normalisation.
    """

    __slots__ = ("x", "y", "z")

    def __init__(self, x=0.0, y=0.0, z=0.0):
        self.x = float(x)
        self.y = float(y)
        self.z = float(z)

    @classmethod
    def from_array(cls, values):
        x, y, z = (float(v) for v in values)
        return cls(x, y, z)

    def to_array(self):
        return np.array([self.x, self.y, self.z])

    def __array__(self, dtype=None, copy=None):
        return np.array([self.x, self.y, self.z], dtype=dtype)

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z

    def __len__(self):
        return 3

    def __getitem__(self, index):
        return (self.x, self.y, self.z)[index]

    def __repr__(self):
        return f"DirectionVector({self.x!r}, {self.y!r}, {self.z!r})"

    def __eq__(self, other):
        if not isinstance(other, DirectionVector):
            return NotImplemented
        return (self.x, self.y, self.z) == (other.x, other.y, other.z)

    __hash__ = None

    def __add__(self, other):
        return DirectionVector(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other):
        return DirectionVector(self.x - other.x, self.y - other.y, self.z - other.z)

    def __neg__(self):
        return DirectionVector(-self.x, -self.y, -self.z)

    def __mul__(self, scale):
        return DirectionVector(self.x * scale, self.y * scale, self.z * scale)

    __rmul__ = __mul__

    def cross(self, other):
        """Cross product self x other."""
        return DirectionVector(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def dot(self, other):
        return self.x * other.x + self.y * other.y + self.z * other.z

    def length(self):
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def normalize(self):
        """Scales the vector to unit length in place. Zero vectors are left alone."""
        norm = self.length()
        if norm == 0.0:
            return
        self.x /= norm
        self.y /= norm
        self.z /= norm

    def normalized(self):
        """Returns a unit-length copy."""
        v = DirectionVector(self.x, self.y, self.z)
        v.normalize()
        return v

    def copy(self):
        return DirectionVector(self.x, self.y, self.z)


def angular_distance(v1, v2):
    """Angle between two direction vectors in degrees."""
    # atan2 keeps precision for nearly parallel vectors, unlike acos
    return math.degrees(math.atan2(v1.cross(v2).length(), v1.dot(v2)))


def vector_from_radec(ra_hours, dec_deg):
    """Converts RA/Dec to a 3D unit vector."""
    ra_rad = math.radians(ra_hours * 15.0)
    dec_rad = math.radians(dec_deg)
    return DirectionVector(
        math.cos(dec_rad) * math.cos(ra_rad),
        math.cos(dec_rad) * math.sin(ra_rad),
        math.sin(dec_rad),
    )


def vector_from_altaz(az_deg, alt_deg):
    """Converts Alt/Az to a 3D unit vector."""
    az_rad = math.radians(az_deg)
    alt_rad = math.radians(alt_deg)
    return DirectionVector(
        math.cos(alt_rad) * math.cos(az_rad),
        math.cos(alt_rad) * math.sin(az_rad),
        math.sin(alt_rad),
    )


def _unit_components(vec):
    norm = vec.length()
    if norm < 1e-9:
        return None
    return vec.x / norm, vec.y / norm, vec.z / norm


def vector_to_radec(vec):
    """Converts a 3D unit vector to RA (hours) and Dec (degrees)."""
    unit = _unit_components(vec)
    if unit is None:
        return 0.0, 0.0
    vx, vy, vz = unit

    dec_rad = math.asin(max(-1.0, min(1.0, vz)))
    ra_rad = math.atan2(vy, vx)

    dec_deg = math.degrees(dec_rad)
    ra_hours = math.degrees(ra_rad) / 15.0
    return ra_hours % 24.0, dec_deg


def vector_to_altaz(vec):
    """Converts a 3D unit vector to Azimuth and Altitude (degrees)."""
    unit = _unit_components(vec)
    if unit is None:
        return 0.0, 0.0
    vx, vy, vz = unit

    alt_rad = math.asin(max(-1.0, min(1.0, vz)))
    az_rad = math.atan2(vy, vx)

    alt_deg = math.degrees(alt_rad)
    az_deg = math.degrees(az_rad)
    return az_deg % 360.0, alt_deg
