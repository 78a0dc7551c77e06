import os
import tempfile
import unittest
import yaml
from aux_alignment.config import (
    DEFAULT_CONFIG,
    load_config,
    load_sync_points,
    mount_alignment_hint,
    observer_position,
    singularity_tolerance,
)
from aux_alignment.basis import DEFAULT_SINGULARITY_TOLERANCE
from aux_alignment.coordinates import GeographicPosition, MountAlignment
from aux_alignment.vectors import vector_from_altaz


class TestConfig(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmp.cleanup()

    def write(self, name, data):
        path = os.path.join(self.tmp.name, name)
        with open(path, "w") as f:
            yaml.safe_dump(data, f)
        return path

    def test_missing_file_gives_defaults(self):
        config = load_config(os.path.join(self.tmp.name, "missing.yaml"))
        self.assertEqual(config, DEFAULT_CONFIG)
        self.assertIsNot(config["observer"], DEFAULT_CONFIG["observer"])

    def test_partial_override(self):
        path = self.write(
            "config.yaml",
            {"observer": {"latitude": -33.9}, "alignment": {"approximate_mount_alignment": "south_celestial_pole"}},
        )
        config = load_config(path)
        pos = observer_position(config)
        self.assertEqual(pos.latitude, -33.9)
        self.assertEqual(pos.longitude, DEFAULT_CONFIG["observer"]["longitude"])
        self.assertIs(mount_alignment_hint(config), MountAlignment.SOUTH_CELESTIAL_POLE)
        self.assertEqual(
            config["alignment"]["singularity_tolerance"],
            DEFAULT_CONFIG["alignment"]["singularity_tolerance"],
        )

    def test_broken_yaml_gives_defaults(self):
        path = os.path.join(self.tmp.name, "broken.yaml")
        with open(path, "w") as f:
            f.write("observer: [unclosed\n")
        with self.assertLogs("aux_alignment.config", level="ERROR"):
            config = load_config(path)
        self.assertEqual(config, DEFAULT_CONFIG)

    def test_null_section_keeps_defaults(self):
        path = self.write("config.yaml", {"alignment": None})
        with self.assertLogs("aux_alignment.config", level="ERROR"):
            config = load_config(path)
        self.assertEqual(config["alignment"], DEFAULT_CONFIG["alignment"])
        self.assertEqual(singularity_tolerance(config), DEFAULT_SINGULARITY_TOLERANCE)

    def test_unknown_hint_falls_back_to_zenith(self):
        config = {"alignment": {"approximate_mount_alignment": "equatorial"}}
        with self.assertLogs("aux_alignment.config", level="ERROR"):
            hint = mount_alignment_hint(config)
        self.assertIs(hint, MountAlignment.ZENITH)
        self.assertIs(
            mount_alignment_hint({"alignment": {"approximate_mount_alignment": "NORTH_CELESTIAL_POLE"}}),
            MountAlignment.NORTH_CELESTIAL_POLE,
        )

    def test_singularity_tolerance(self):
        self.assertEqual(singularity_tolerance({"alignment": {"singularity_tolerance": "1e-8"}}), 1e-8)
        for bad in (None, "tiny", 0.0, -1.0):
            with self.assertLogs("aux_alignment.config", level="ERROR"):
                value = singularity_tolerance({"alignment": {"singularity_tolerance": bad}})
            self.assertEqual(value, DEFAULT_SINGULARITY_TOLERANCE)

    def test_load_sync_points(self):
        path = self.write(
            "sync.yaml",
            {
                "reference_position": {"latitude": 10.0, "longitude": 20.0, "elevation": 5.0},
                "sync_points": [
                    {"ra": 1.0, "dec": 2.0, "julian_date": 2460000.5, "direction": [0.0, 0.0, 2.0]},
                    {"ra": 3.0, "dec": 4.0, "julian_date": 2460000.6, "az": 90.0, "alt": 30.0},
                ],
            },
        )
        db = load_sync_points(path)
        self.assertEqual(db.get_reference_position(), GeographicPosition(10.0, 20.0, 5.0))
        entries = db.entries
        self.assertEqual(len(entries), 2)
        self.assertAlmostEqual(entries[0].telescope_direction.z, 1.0)
        expected = vector_from_altaz(90.0, 30.0)
        for a, b in zip(entries[1].telescope_direction, expected):
            self.assertAlmostEqual(a, b)
        self.assertEqual(entries[1].julian_date, 2460000.6)

    def test_sync_points_without_position(self):
        path = self.write("sync.yaml", {"sync_points": []})
        db = load_sync_points(path)
        self.assertIsNone(db.get_reference_position())
        self.assertEqual(len(db), 0)


if __name__ == "__main__":
    unittest.main()
