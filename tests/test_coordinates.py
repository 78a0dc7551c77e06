import math
import unittest
from aux_alignment.coordinates import (
    MountAlignment,
    actual_direction,
    celestial_from_direction,
    equatorial_to_horizontal,
    horizontal_to_equatorial,
    make_observer,
)
from aux_alignment.vectors import angular_distance, vector_from_altaz, vector_from_radec

from base_test import JD, SITE


class TestCoordinates(unittest.TestCase):
    """
    Verification of the ephem based equatorial/horizontal conversions.
    """

    def test_horizontal_roundtrip(self):
        for az, alt in [(10.0, 30.0), (135.0, 55.0), (250.0, 15.0), (330.0, 80.0)]:
            ra, dec = horizontal_to_equatorial(az, alt, SITE, JD)
            az2, alt2 = equatorial_to_horizontal(ra, dec, SITE, JD)
            err = angular_distance(vector_from_altaz(az, alt), vector_from_altaz(az2, alt2))
            self.assertLess(err, 1e-3)

    def test_zenith_star(self):
        """
        Description:
            A star with RA equal to local sidereal time and Dec equal to the
            site latitude culminates at the zenith.

        Expected Results:
            - Computed altitude is 90 degrees within aberration/nutation.
        """
        observer = make_observer(SITE, JD)
        lst_hours = math.degrees(float(observer.sidereal_time())) / 15.0
        _, alt = equatorial_to_horizontal(lst_hours, SITE.latitude, SITE, JD)
        self.assertAlmostEqual(alt, 90.0, delta=0.05)

    def test_time_moves_sky(self):
        v1 = vector_from_altaz(*equatorial_to_horizontal(6.0, 20.0, SITE, JD))
        v2 = vector_from_altaz(*equatorial_to_horizontal(6.0, 20.0, SITE, JD + 0.25))
        self.assertGreater(angular_distance(v1, v2), 1.0)

    def test_polar_frame_ignores_time(self):
        for hint in (MountAlignment.NORTH_CELESTIAL_POLE, MountAlignment.SOUTH_CELESTIAL_POLE):
            v1 = actual_direction(4.0, 30.0, hint, SITE, JD)
            v2 = actual_direction(4.0, 30.0, hint, SITE, JD + 0.3)
            self.assertEqual(v1, v2)
            self.assertEqual(v1, vector_from_radec(4.0, 30.0))

    def test_zenith_frame_roundtrip(self):
        v = actual_direction(7.5, 45.0, MountAlignment.ZENITH, SITE, JD)
        ra, dec = celestial_from_direction(v, MountAlignment.ZENITH, SITE, JD)
        err = angular_distance(vector_from_radec(ra, dec), vector_from_radec(7.5, 45.0))
        self.assertLess(err, 1e-3)


if __name__ == "__main__":
    unittest.main()
