import csv
import json
import tempfile
import unittest
from pathlib import Path

from commit_hours.exporters import export_data


class ExportersTest(unittest.TestCase):
    def setUp(self):
        self.histogram = list(range(24))
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.out = Path(self.tmp.name)

    def test_export_json(self):
        written = export_data(self.histogram, "json", self.out / "hours")
        self.assertEqual(self.out / "hours.json", written)
        data = json.loads(written.read_text(encoding="utf-8"))
        self.assertEqual(0, data["00"])
        self.assertEqual(23, data["23"])
        self.assertEqual(24, len(data))

    def test_export_csv(self):
        written = export_data(self.histogram, "csv", self.out / "hours.csv")
        self.assertEqual(self.out / "hours.csv", written)
        with open(written, encoding="utf-8", newline="") as f:
            rows = list(csv.DictReader(f))
        self.assertEqual(24, len(rows))
        self.assertEqual({"hour": "09", "commits": "9"}, rows[9])

    def test_export_unsupported(self):
        with self.assertRaises(ValueError):
            export_data(self.histogram, "xml", self.out / "hours")


if __name__ == "__main__":
    unittest.main()
