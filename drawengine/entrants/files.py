from __future__ import annotations

import csv
import json
import pathlib
from typing import Any, List, Sequence

from ..types import Entrant
from .base import EntrantSource, FileEntrantSourceConfig, ensure_unique_ids, parse_entrant


class JsonFileEntrantSource(EntrantSource):
    """Read entrants from a JSON array (or ``{"entries": [...]}``) file."""

    def __init__(self, config: FileEntrantSourceConfig) -> None:
        self._config = config

    def load_entrants(self) -> Sequence[Entrant]:
        path = pathlib.Path(self._config.path)
        if not path.exists():
            raise FileNotFoundError(f"Entrants file not found: {path}")
        with path.open("r", encoding="utf-8") as fh:
            payload = json.load(fh)
        return ensure_unique_ids(parse_entrant(record, self._config) for record in self._records(payload))

    @staticmethod
    def _records(payload: Any) -> List[Any]:
        if isinstance(payload, dict):
            payload = payload.get("entries")
        if not isinstance(payload, list):
            raise ValueError("Entrants JSON must be a list or an object with an 'entries' list")
        for record in payload:
            if not isinstance(record, dict):
                raise ValueError("Each entrant must be a JSON object")
        return payload


class CsvEntrantSource(EntrantSource):
    """Read entrants from a CSV export with a header row."""

    def __init__(self, config: FileEntrantSourceConfig) -> None:
        self._config = config

    def load_entrants(self) -> Sequence[Entrant]:
        path = pathlib.Path(self._config.path)
        if not path.exists():
            raise FileNotFoundError(f"Entrants file not found: {path}")
        with path.open("r", encoding="utf-8-sig", newline="") as fh:
            reader = csv.DictReader(fh)
            return ensure_unique_ids(parse_entrant(row, self._config) for row in reader)
