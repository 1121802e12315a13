import datetime as dt
import json
import tempfile
import unittest
from pathlib import Path

from drawengine.config import EntrantSourceSettings
from drawengine.entrants import (
    SAMPLE_ENTRANTS,
    CsvEntrantSource,
    FileEntrantSourceConfig,
    JsonFileEntrantSource,
    StaticEntrantSource,
    build_entrant_source,
)
from drawengine.types import Entrant


class EntrantSourceTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmpdir = tempfile.TemporaryDirectory()
        self.root = Path(self._tmpdir.name)

    def tearDown(self) -> None:
        self._tmpdir.cleanup()

    def test_sample_pool_matches_demo_entries(self) -> None:
        self.assertEqual(len(SAMPLE_ENTRANTS), 10)
        self.assertEqual(SAMPLE_ENTRANTS[0].name, "John Smith")
        self.assertEqual(SAMPLE_ENTRANTS[0].phone, "+6012345678")
        self.assertEqual(SAMPLE_ENTRANTS[9].phone, "+6012345687")
        self.assertEqual(SAMPLE_ENTRANTS[9].submission_date, dt.date(2024, 1, 24))

    def test_json_source_keeps_file_order(self) -> None:
        path = self.root / "entries.json"
        path.write_text(
            json.dumps(
                {
                    "entries": [
                        {"id": 7, "name": "Ana", "phone": "+601", "email": "a@x", "submission_date": "2024-03-01"},
                        {"id": "3", "name": " Ben ", "submission_date": "2024-03-02T10:00:00Z"},
                    ]
                }
            ),
            encoding="utf-8",
        )
        entrants = JsonFileEntrantSource(FileEntrantSourceConfig(path=str(path))).load_entrants()
        self.assertEqual([e.id for e in entrants], [7, 3])
        self.assertEqual(entrants[1].name, "Ben")
        self.assertEqual(entrants[1].submission_date, dt.date(2024, 3, 2))
        self.assertEqual(entrants[1].email, "")

    def test_csv_source_with_custom_columns(self) -> None:
        path = self.root / "wpforms.csv"
        path.write_text(
            "Entry ID,Full Name,Phone,Email,Date\n"
            "11,Cara,+6011,c@x,2024-01-05\n"
            "12,Dev,+6012,d@x,\n",
            encoding="utf-8",
        )
        config = FileEntrantSourceConfig(
            path=str(path),
            id_key="Entry ID",
            name_key="Full Name",
            phone_key="Phone",
            email_key="Email",
            date_key="Date",
        )
        entrants = CsvEntrantSource(config).load_entrants()
        self.assertEqual(
            entrants[0],
            Entrant(id=11, name="Cara", phone="+6011", email="c@x", submission_date=dt.date(2024, 1, 5)),
        )
        self.assertIsNone(entrants[1].submission_date)

    def test_malformed_records_raise_value_error(self) -> None:
        path = self.root / "bad.json"
        cases = [
            [{"name": "No id"}],
            [{"id": "abc", "name": "Bad id"}],
            [{"id": 1}],
            [{"id": 1, "name": "A", "submission_date": "yesterday"}],
            [{"id": 1, "name": "A"}, {"id": 1, "name": "B"}],
            {"rows": []},
        ]
        for payload in cases:
            path.write_text(json.dumps(payload), encoding="utf-8")
            with self.subTest(payload=payload):
                with self.assertRaises(ValueError):
                    JsonFileEntrantSource(FileEntrantSourceConfig(path=str(path))).load_entrants()

    def test_missing_file(self) -> None:
        source = JsonFileEntrantSource(FileEntrantSourceConfig(path=str(self.root / "nope.json")))
        with self.assertRaises(FileNotFoundError):
            source.load_entrants()

    def test_static_source_rejects_duplicates(self) -> None:
        with self.assertRaises(ValueError):
            StaticEntrantSource([Entrant(id=1, name="A"), Entrant(id=1, name="B")])

    def test_build_entrant_source_by_extension(self) -> None:
        self.assertEqual(
            list(build_entrant_source(EntrantSourceSettings()).load_entrants()), list(SAMPLE_ENTRANTS)
        )
        self.assertIsInstance(
            build_entrant_source(EntrantSourceSettings(path="x.csv")), CsvEntrantSource
        )
        self.assertIsInstance(
            build_entrant_source(EntrantSourceSettings(path="x.JSON")), JsonFileEntrantSource
        )
        with self.assertRaises(ValueError):
            build_entrant_source(EntrantSourceSettings(path="x.xlsx"))


if __name__ == "__main__":
    unittest.main()
