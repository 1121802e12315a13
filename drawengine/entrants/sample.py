"""Demo entrant pool used when no export file is configured."""

from __future__ import annotations

import datetime as dt

from ..types import Entrant

_SAMPLE_ROWS = [
    (1, "John Smith", "john"),
    (2, "Sarah Johnson", "sarah"),
    (3, "Michael Brown", "michael"),
    (4, "Emily Davis", "emily"),
    (5, "David Wilson", "david"),
    (6, "Lisa Anderson", "lisa"),
    (7, "Robert Taylor", "robert"),
    (8, "Jennifer Martinez", "jennifer"),
    (9, "William Garcia", "william"),
    (10, "Amanda Rodriguez", "amanda"),
]

SAMPLE_ENTRANTS = tuple(
    Entrant(
        id=entrant_id,
        name=name,
        phone=f"+60123456{77 + entrant_id}",
        email=f"{handle}@example.com",
        submission_date=dt.date(2024, 1, 14 + entrant_id),
    )
    for entrant_id, name, handle in _SAMPLE_ROWS
)
