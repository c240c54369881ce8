# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Data models for the batting lineup search."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Outcome(str, Enum):
    """Result of a single plate appearance."""
    OUT = "out"
    WALK_HBP = "walk_hbp"
    SINGLE = "single"
    DOUBLE = "double"
    TRIPLE = "triple"
    HOME_RUN = "home_run"


HIT_OUTCOMES = frozenset({Outcome.SINGLE, Outcome.DOUBLE, Outcome.TRIPLE, Outcome.HOME_RUN})


class PitcherHand(str, Enum):
    LEFT = "left"
    RIGHT = "right"


# ---------------------------------------------------------------------------
# Roster data models
# ---------------------------------------------------------------------------

class Stats(BaseModel):
    """Batting line against one pitcher hand.

    AVG <= OBP is assumed by the outcome model but not enforced here.
    """
    model_config = ConfigDict(frozen=True)

    avg: float = Field(ge=0.0, le=1.0, description="Batting average")
    obp: float = Field(ge=0.0, le=1.0, description="On-base percentage")
    slug: float = Field(ge=0.0, le=1.0, description="Slugging percentage")


class Player(BaseModel):
    """A rostered hitter with left/right pitcher splits."""
    model_config = ConfigDict(frozen=True)

    first_name: str
    last_name: str
    LHP: Stats
    RHP: Stats

    def split(self, pitcher_hand: PitcherHand | str) -> Stats:
        """Stats against the given pitcher hand ("left" -> LHP, else RHP)."""
        if pitcher_hand == PitcherHand.LEFT:
            return self.LHP
        return self.RHP

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


# ---------------------------------------------------------------------------
# Output models
# ---------------------------------------------------------------------------

class RankedLineup(BaseModel):
    """One row of a top/bottom lineup ranking."""
    rank: int = Field(ge=1)
    short_hash: str
    mean_runs: float
    order: list[str] = Field(description="Last names in batting order")


class SimulationReport(BaseModel):
    """Final output of a lineup search run."""
    top: list[RankedLineup] = Field(default_factory=list)
    bottom: list[RankedLineup] = Field(default_factory=list)
    lineups_processed: int = 0
    games_per_lineup: int = 0
    elapsed_seconds: float = 0.0
