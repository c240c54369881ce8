# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Roster loading and validation.

A roster file is a JSON array of player objects::

    [
      {
        "first_name": "Kyle",
        "last_name": "Schwarber",
        "LHP": {"avg": 0.214, "obp": 0.330, "slug": 0.446},
        "RHP": {"avg": 0.203, "obp": 0.348, "slug": 0.487}
      },
      ...
    ]
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from models import Player

logger = logging.getLogger(__name__)

_ROSTER_PATH = Path(__file__).resolve().parent / "data" / "sample_roster.json"

_PLAYERS = TypeAdapter(list[Player])


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class RosterError(Exception):
    """Raised when a roster payload cannot be loaded."""

    def __init__(self, message: str, field: str | None = None,
                 details: list[str] | None = None):
        self.field = field
        self.details = details or []
        super().__init__(message)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def parse_roster(payload: Any) -> list[Player]:
    """Validate decoded JSON into a list of players."""
    if not isinstance(payload, list):
        raise RosterError(
            f"Roster must be a JSON array of players, got {type(payload).__name__}",
        )
    try:
        players = _PLAYERS.validate_python(payload)
    except ValidationError as exc:
        errors = exc.errors()
        raise RosterError(
            f"Roster failed validation with {len(errors)} error(s)",
            details=[
                f"{'.'.join(str(p) for p in e.get('loc', ()))}: {e.get('msg', '?')}"
                for e in errors
            ],
        ) from exc

    for p in players:
        for hand, s in (("LHP", p.LHP), ("RHP", p.RHP)):
            if s.avg > s.obp:
                logger.warning(
                    "%s %s split has AVG %.3f above OBP %.3f; walks will never occur",
                    p.display_name, hand, s.avg, s.obp,
                )
    return players


def load_roster(path: Path | str | None = None) -> list[Player]:
    """Load a roster from a JSON file (defaults to the bundled sample)."""
    p = Path(path) if path is not None else _ROSTER_PATH
    if not p.exists():
        raise FileNotFoundError(f"Roster file not found: {p}")
    try:
        with open(p) as f:
            payload = json.load(f)
    except json.JSONDecodeError as exc:
        raise RosterError(f"Roster file {p} is not valid JSON: {exc}", field=str(p)) from exc
    players = parse_roster(payload)
    logger.info("Loaded %d players from %s", len(players), p)
    return players
