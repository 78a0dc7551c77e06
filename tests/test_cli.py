import contextlib
import io
import os
import tempfile
import unittest
import yaml
from aux_alignment.cli import main
from aux_alignment.vectors import vector_from_radec

from base_test import JD, NORTHERN_POINTS, rotate, rotation_matrix


class TestCommandLine(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        R = rotation_matrix(0.4, -0.6, 1.5)
        self.sync_path = self.write_sync(
            [
                {
                    "ra": ra,
                    "dec": dec,
                    "julian_date": JD,
                    "direction": list(rotate(R, vector_from_radec(ra, dec))),
                }
                for ra, dec in NORTHERN_POINTS
            ]
        )

    def tearDown(self):
        self.tmp.cleanup()

    def write_sync(self, points, name="sync.yaml"):
        path = os.path.join(self.tmp.name, name)
        with open(path, "w") as f:
            yaml.safe_dump({"sync_points": points}, f)
        return path

    def run_cli(self, *argv):
        out = io.StringIO()
        err = io.StringIO()
        with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
            code = main(list(argv))
        return code, out.getvalue(), err.getvalue()

    def test_to_telescope(self):
        code, out, _ = self.run_cli(
            "-s", self.sync_path, "--hint", "north_celestial_pole", "to-telescope", "6.0", "45.0"
        )
        self.assertEqual(code, 0)
        values = [float(x) for x in out.splitlines()[0].split()]
        self.assertEqual(len(values), 3)
        self.assertAlmostEqual(sum(v * v for v in values), 1.0, places=6)
        self.assertIn("Alt", out)

    def test_to_celestial(self):
        code, out, _ = self.run_cli(
            "-s", self.sync_path, "--hint", "north_celestial_pole", "to-celestial", "0.2", "0.5", "0.8"
        )
        self.assertEqual(code, 0)
        self.assertTrue(out.startswith("RA "))

    def test_residuals(self):
        code, out, _ = self.run_cli(
            "-s", self.sync_path, "--hint", "north_celestial_pole", "residuals"
        )
        self.assertEqual(code, 0)
        lines = out.splitlines()
        self.assertEqual(len(lines), len(NORTHERN_POINTS) + 1)
        self.assertTrue(lines[-1].startswith("RMS"))

    def write_config(self, data):
        path = os.path.join(self.tmp.name, "config.yaml")
        with open(path, "w") as f:
            yaml.safe_dump(data, f)
        return path

    def test_null_alignment_section(self):
        config = self.write_config({"alignment": None})
        with self.assertLogs("aux_alignment.config", level="ERROR"):
            code, out, _ = self.run_cli(
                "-c", config, "-s", self.sync_path, "--hint", "north_celestial_pole", "residuals"
            )
        self.assertEqual(code, 0)
        self.assertTrue(out.splitlines()[-1].startswith("RMS"))

    def test_unknown_hint_in_config(self):
        config = self.write_config({"alignment": {"approximate_mount_alignment": "equatorial"}})
        with self.assertLogs("aux_alignment.config", level="ERROR") as logs:
            code, _, _ = self.run_cli("-c", config, "-s", self.sync_path, "residuals")
        self.assertEqual(code, 0)
        self.assertIn("equatorial", "\n".join(logs.output))

    def test_degenerate_sync_points(self):
        path = self.write_sync(
            [
                {"ra": ra, "dec": 0.0, "julian_date": JD, "direction": list(vector_from_radec(ra, 0.0))}
                for ra in (0.0, 4.0, 8.0)
            ],
            name="flat.yaml",
        )
        code, _, err = self.run_cli("-s", path, "--hint", "north_celestial_pole", "residuals")
        self.assertEqual(code, 1)
        self.assertIn("Error", err)


if __name__ == "__main__":
    unittest.main()
