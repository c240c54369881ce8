# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Single-lineup game simulation engine.

Plays nine offensive innings for one ordered lineup. Each plate appearance
is resolved by the outcome model, then applied to the base/out state:
force-only advancement on walks, probabilistic extra bases for runners on
singles and doubles, and a fixed-rate double play on outs with a runner on
first.

The pitcher hand is mutable game state read by the outcome model; a
``PitcherPolicy`` decides it at game start and between innings.

All randomness is seeded for deterministic replay.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Callable, Sequence

from models import HIT_OUTCOMES, Outcome, PitcherHand, Player
from outcomes import (
    plate_appearance,
    prob_score_from_first_on_double,
    prob_score_from_second_on_single,
)


INNINGS_PER_GAME = 9
OUTS_PER_INNING = 3
LINEUP_SIZE = 9
DOUBLE_PLAY_RATE = 0.11

# (pitcher_hand, batter, rng) -> Outcome
OutcomeSource = Callable[[PitcherHand, Player, random.Random], Outcome]


# ---------------------------------------------------------------------------
# Field and game state
# ---------------------------------------------------------------------------

@dataclass
class Field:
    """Base occupancy for the current inning."""
    at_bat: Player | None = None
    first: Player | None = None
    second: Player | None = None
    third: Player | None = None

    def lob(self) -> int:
        """Number of occupied bases."""
        b = 0
        if self.first is not None:
            b += 1
        if self.second is not None:
            b += 1
        if self.third is not None:
            b += 1
        return b

    def clear(self) -> None:
        self.first = None
        self.second = None
        self.third = None


@dataclass
class Game:
    """Mutable state for one simulated game."""
    hits: int = 0
    runs: int = 0
    lob: int = 0
    pitcher_hand: PitcherHand = PitcherHand.RIGHT
    pitcher_changed: bool = False
    inning: int = 1
    outs: int = 0
    batter_index: int = 0
    game_over: bool = False
    inning_lob: list[int] = field(default_factory=list)
    # Declared last: the attribute name shadows dataclasses.field in the class body
    field: Field = field(default_factory=Field)

    def add_lob(self, lob: int) -> None:
        self.inning_lob.append(lob)
        self.lob += lob


# ---------------------------------------------------------------------------
# Pitcher hand policies
# ---------------------------------------------------------------------------

class PitcherPolicy:
    """Decides which pitcher hand the lineup faces.

    ``start_game`` runs once before the first pitch and defaults to a
    right-handed pitcher; ``between_innings`` runs before every inning after
    the first, with ``game.inning`` already set to the inning about to start.
    """

    def start_game(self, game: Game, rng: random.Random) -> None:
        game.pitcher_hand = PitcherHand.RIGHT

    def between_innings(self, game: Game, rng: random.Random) -> None:
        pass


class FixedHandPolicy(PitcherPolicy):
    """Face the same pitcher hand for the whole game."""

    def __init__(self, hand: PitcherHand | str = PitcherHand.RIGHT):
        self.hand = PitcherHand(hand)

    def start_game(self, game: Game, rng: random.Random) -> None:
        game.pitcher_hand = self.hand

    def __repr__(self) -> str:
        return f"FixedHandPolicy({self.hand.value})"


class BullpenPolicy(PitcherPolicy):
    """Random starter hand, replaced at most once by a reliever.

    From ``earliest_change_inning`` onward, each inning boundary replaces
    the starter with probability ``change_rate`` until a change happens.
    """

    def __init__(self, left_starter_rate: float = 0.28,
                 left_reliever_rate: float = 0.30,
                 earliest_change_inning: int = 6,
                 change_rate: float = 0.5):
        self.left_starter_rate = left_starter_rate
        self.left_reliever_rate = left_reliever_rate
        self.earliest_change_inning = earliest_change_inning
        self.change_rate = change_rate

    @staticmethod
    def _draw_hand(rng: random.Random, left_rate: float) -> PitcherHand:
        return PitcherHand.LEFT if rng.random() < left_rate else PitcherHand.RIGHT

    def start_game(self, game: Game, rng: random.Random) -> None:
        game.pitcher_hand = self._draw_hand(rng, self.left_starter_rate)
        game.pitcher_changed = False

    def between_innings(self, game: Game, rng: random.Random) -> None:
        if game.pitcher_changed or game.inning < self.earliest_change_inning:
            return
        if rng.random() < self.change_rate:
            game.pitcher_hand = self._draw_hand(rng, self.left_reliever_rate)
            game.pitcher_changed = True


# ---------------------------------------------------------------------------
# Simulation engine
# ---------------------------------------------------------------------------

class GameEngine:
    """Plays games for a 9-player lineup.

    Args:
        seed: Seed for the engine's private random stream. A random seed is
            chosen when omitted.
        pitcher_policy: Decides the pitcher hand; right-handed throughout by
            default.
        outcome_source: Resolves a plate appearance. Defaults to the split
            stats model; tests pass scripted sequences.
        double_play_rate: Chance an out with a runner on first (and fewer
            than two outs after it) becomes a double play.
    """

    def __init__(self, seed: int | None = None,
                 pitcher_policy: PitcherPolicy | None = None,
                 outcome_source: OutcomeSource | None = None,
                 double_play_rate: float = DOUBLE_PLAY_RATE):
        if seed is None:
            seed = random.randint(0, 2**31 - 1)
        self.seed = seed
        self.rng = random.Random(seed)
        self.pitcher_policy = pitcher_policy or FixedHandPolicy()
        self.outcome_source = outcome_source or plate_appearance
        self.double_play_rate = double_play_rate

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------

    def apply_outcome(self, game: Game, batter: Player, outcome: Outcome) -> None:
        """Apply one plate-appearance result to the game state."""
        f = game.field
        f.at_bat = batter

        if outcome == Outcome.OUT:
            game.outs += 1
            if f.first is not None and game.outs < 2:
                if self.rng.random() < self.double_play_rate:
                    game.outs += 1
                    f.first = None
            f.at_bat = None
            return

        if outcome in HIT_OUTCOMES:
            game.hits += 1

        if outcome == Outcome.WALK_HBP:
            # Force-only advancement; bases loaded forces in a run
            if f.first is not None:
                if f.second is not None:
                    if f.third is not None:
                        game.runs += 1
                    f.third = f.second
                f.second = f.first
            f.first = batter

        elif outcome == Outcome.SINGLE:
            slug = batter.split(game.pitcher_hand).slug
            if f.third is not None:
                f.third = None
                game.runs += 1
            if f.second is not None:
                if self.rng.random() < prob_score_from_second_on_single(slug):
                    game.runs += 1
                else:
                    f.third = f.second
                f.second = None
            if f.first is not None:
                f.second = f.first
            f.first = batter

        elif outcome == Outcome.DOUBLE:
            slug = batter.split(game.pitcher_hand).slug
            if f.third is not None:
                f.third = None
                game.runs += 1
            if f.second is not None:
                f.second = None
                game.runs += 1
            if f.first is not None:
                if self.rng.random() < prob_score_from_first_on_double(slug):
                    game.runs += 1
                else:
                    f.third = f.first
                f.first = None
            f.second = batter

        elif outcome == Outcome.TRIPLE:
            game.runs += f.lob()
            f.clear()
            f.third = batter

        elif outcome == Outcome.HOME_RUN:
            game.runs += f.lob() + 1
            f.clear()

        else:
            raise ValueError(f"Unknown plate appearance outcome: {outcome!r}")

        f.at_bat = None

    def _end_half_inning(self, game: Game) -> None:
        game.add_lob(game.field.lob())
        game.field.clear()
        game.outs = 0
        if game.inning >= INNINGS_PER_GAME:
            game.game_over = True
            return
        game.inning += 1
        self.pitcher_policy.between_innings(game, self.rng)

    # -------------------------------------------------------------------
    # Game flow
    # -------------------------------------------------------------------

    def new_game(self) -> Game:
        game = Game()
        self.pitcher_policy.start_game(game, self.rng)
        return game

    def step(self, game: Game, lineup: Sequence[Player]) -> Outcome:
        """Play one plate appearance; returns the outcome."""
        batter = lineup[game.batter_index]
        game.field.at_bat = batter
        outcome = self.outcome_source(game.pitcher_hand, batter, self.rng)
        self.apply_outcome(game, batter, outcome)
        game.batter_index = (game.batter_index + 1) % LINEUP_SIZE
        if game.outs >= OUTS_PER_INNING:
            self._end_half_inning(game)
        return outcome

    def play_game(self, lineup: Sequence[Player]) -> Game:
        """Play a full nine-inning game for *lineup* and return its final state."""
        if len(lineup) != LINEUP_SIZE:
            raise ValueError(f"Lineup must have {LINEUP_SIZE} players, got {len(lineup)}")
        game = self.new_game()
        while not game.game_over:
            self.step(game, lineup)
        return game
