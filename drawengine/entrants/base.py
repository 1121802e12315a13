from __future__ import annotations

import abc
import datetime as dt
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from ..types import Entrant


@dataclass(frozen=True)
class FileEntrantSourceConfig:
    """Describes where an export lives and which columns hold each field."""

    path: str
    id_key: str = "id"
    name_key: str = "name"
    phone_key: str = "phone"
    email_key: str = "email"
    date_key: str = "submission_date"


class EntrantSource(abc.ABC):
    """Abstract entrant provider, read once when a draw session is built."""

    @abc.abstractmethod
    def load_entrants(self) -> Sequence[Entrant]:
        """Return the full entrant pool in display order.

        Implementations should raise `ValueError` when a record is malformed
        or two records share an id.
        """


class StaticEntrantSource(EntrantSource):
    def __init__(self, entrants: Iterable[Entrant]) -> None:
        self._entrants = ensure_unique_ids(entrants)

    def load_entrants(self) -> Sequence[Entrant]:
        return self._entrants


def ensure_unique_ids(entrants: Iterable[Entrant]) -> List[Entrant]:
    seen = set()
    result = []
    for entrant in entrants:
        if entrant.id in seen:
            raise ValueError(f"Duplicate entrant id: {entrant.id}")
        seen.add(entrant.id)
        result.append(entrant)
    return result


def parse_entrant(record: Mapping[str, Any], config: FileEntrantSourceConfig) -> Entrant:
    try:
        raw_id = record[config.id_key]
    except KeyError as exc:
        raise ValueError(f"Missing entrant id field: {config.id_key}") from exc
    try:
        entrant_id = int(str(raw_id).strip())
    except ValueError as exc:
        raise ValueError(f"Entrant id must be an integer, got {raw_id!r}") from exc

    name = str(record.get(config.name_key) or "").strip()
    if not name:
        raise ValueError(f"Entrant {entrant_id} is missing field: {config.name_key}")

    return Entrant(
        id=entrant_id,
        name=name,
        phone=str(record.get(config.phone_key) or "").strip(),
        email=str(record.get(config.email_key) or "").strip(),
        submission_date=_parse_date(record.get(config.date_key), entrant_id),
    )


def _parse_date(raw: Any, entrant_id: int) -> Optional[dt.date]:
    if raw is None or raw == "":
        return None
    if isinstance(raw, dt.datetime):
        return raw.date()
    if isinstance(raw, dt.date):
        return raw
    if isinstance(raw, str):
        try:
            return dt.datetime.fromisoformat(raw.strip().replace("Z", "+00:00")).date()
        except ValueError as exc:
            raise ValueError(f"Entrant {entrant_id} has invalid submission date {raw!r}") from exc
    raise ValueError(f"Entrant {entrant_id} has unrecognized submission date format")
