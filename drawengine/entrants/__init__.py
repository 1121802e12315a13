from __future__ import annotations

import pathlib

from ..config import EntrantSourceSettings
from .base import EntrantSource, FileEntrantSourceConfig, StaticEntrantSource
from .files import CsvEntrantSource, JsonFileEntrantSource
from .sample import SAMPLE_ENTRANTS


def build_entrant_source(settings: EntrantSourceSettings) -> EntrantSource:
    if not settings.path:
        return StaticEntrantSource(SAMPLE_ENTRANTS)
    config = FileEntrantSourceConfig(
        path=settings.path,
        id_key=settings.id_key,
        name_key=settings.name_key,
        phone_key=settings.phone_key,
        email_key=settings.email_key,
        date_key=settings.date_key,
    )
    suffix = pathlib.Path(settings.path).suffix.lower()
    if suffix == ".csv":
        return CsvEntrantSource(config)
    if suffix == ".json":
        return JsonFileEntrantSource(config)
    raise ValueError(f"Unsupported entrants file type: {suffix or settings.path}")


__all__ = [
    "CsvEntrantSource",
    "EntrantSource",
    "FileEntrantSourceConfig",
    "JsonFileEntrantSource",
    "SAMPLE_ENTRANTS",
    "StaticEntrantSource",
    "build_entrant_source",
]
