# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Plate-appearance outcome model.

Samples the result of one plate appearance from a hitter's split stats:

1. Pick the split for the pitcher hand ("left" -> LHP, anything else -> RHP).
2. A uniform draw above OBP is an out, a draw between AVG and OBP is a
   walk / hit-by-pitch, and a draw at or below AVG is a hit.
3. The hit type comes from bases-per-hit (SLUG / AVG) mapped onto a
   single / double / triple / home run distribution with MLB-like bounds.

Also holds the baserunning advance probabilities used by the game engine.
"""

from __future__ import annotations

import random
from dataclasses import dataclass

from models import Outcome, PitcherHand, Player, Stats


# ---------------------------------------------------------------------------
# Hit-type model constants
# ---------------------------------------------------------------------------

BASES_PER_HIT_MIN = 1.10
BASES_PER_HIT_MAX = 2.10

TRIPLE_RATE = 0.015
TRIPLE_RATE_POWER = 0.02
TRIPLE_POWER_THRESHOLD = 1.70

DOUBLE_RATE_BASE = 0.19
DOUBLE_RATE_SLOPE = 0.20
DOUBLE_RATE_PIVOT = 1.55
DOUBLE_RATE_MIN = 0.12
DOUBLE_RATE_MAX = 0.26

HOME_RUN_RATE_MIN = 0.03
HOME_RUN_RATE_MAX = 0.12

SINGLE_RATE_FLOOR = 0.55

# Runner advancement: SLUG band mapped linearly onto a probability band
ADVANCE_SLUG_LOW = 0.350
ADVANCE_SLUG_HIGH = 0.600
ADVANCE_SLUG_DEFAULT = 0.400
SCORE_FROM_SECOND_ON_SINGLE = (0.38, 0.72)
SCORE_FROM_FIRST_ON_DOUBLE = (0.32, 0.62)


def _clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, v))


# ---------------------------------------------------------------------------
# Hit type distribution
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class HitTypeProbabilities:
    single: float
    double: float
    triple: float
    home_run: float

    def total(self) -> float:
        return self.single + self.double + self.triple + self.home_run


_ALL_SINGLES = HitTypeProbabilities(single=1.0, double=0.0, triple=0.0, home_run=0.0)


def hit_type_probabilities(avg: float, slug: float) -> HitTypeProbabilities:
    """Distribution of hit types for a hitter with the given AVG and SLUG.

    Non-positive AVG or SLUG means every hit is a single.
    """
    if avg <= 0 or slug <= 0:
        return _ALL_SINGLES

    # Average bases per hit, clamped so extreme inputs don't explode rates
    t = _clamp(slug / avg, BASES_PER_HIT_MIN, BASES_PER_HIT_MAX)

    p3 = TRIPLE_RATE_POWER if t > TRIPLE_POWER_THRESHOLD else TRIPLE_RATE
    p2 = _clamp(DOUBLE_RATE_BASE + DOUBLE_RATE_SLOPE * (t - DOUBLE_RATE_PIVOT),
                DOUBLE_RATE_MIN, DOUBLE_RATE_MAX)

    # 1B=1 TB, 2B=2, 3B=3, HR=4: total bases left over after singles,
    # doubles and triples sets a provisional HR rate.
    p_hr = _clamp((t - (1 + p2 + 2 * p3)) / 3.0, HOME_RUN_RATE_MIN, HOME_RUN_RATE_MAX)

    p_single = 1.0 - (p2 + p3 + p_hr)
    if p_single < SINGLE_RATE_FLOOR:
        # Restore the singles floor by taking from HR first, then doubles
        deficit = SINGLE_RATE_FLOOR - p_single

        hr_room = max(0.0, p_hr - HOME_RUN_RATE_MIN)
        take = min(deficit, hr_room)
        p_hr -= take
        deficit -= take

        if deficit > 0:
            double_room = max(0.0, p2 - DOUBLE_RATE_MIN)
            take = min(deficit, double_room)
            p2 -= take
            deficit -= take

        p_single = max(0.0, 1.0 - (p2 + p3 + p_hr))

    return HitTypeProbabilities(single=p_single, double=p2, triple=p3, home_run=p_hr)


def draw_hit_type(avg: float, slug: float, rng: random.Random) -> Outcome:
    """Sample a hit type by cumulative thresholds: single, double, triple, HR."""
    probs = hit_type_probabilities(avg, slug)
    r = rng.random()
    if r < probs.single:
        return Outcome.SINGLE
    r -= probs.single
    if r < probs.double:
        return Outcome.DOUBLE
    r -= probs.double
    if r < probs.triple:
        return Outcome.TRIPLE
    return Outcome.HOME_RUN


# ---------------------------------------------------------------------------
# Plate appearance
# ---------------------------------------------------------------------------

def on_base_probabilities(stats: Stats) -> tuple[float, float, float]:
    """Return (out, walk_hbp, hit) probabilities implied by a split.

    Assumes 0 <= AVG <= OBP <= 1.
    """
    p_out = 1.0 - stats.obp
    p_walk = stats.obp - stats.avg
    p_hit = stats.avg
    return p_out, p_walk, p_hit


def plate_appearance(pitcher_hand: PitcherHand | str, player: Player,
                     rng: random.Random) -> Outcome:
    """Sample the result of *player* batting against a pitcher of *pitcher_hand*."""
    s = player.split(pitcher_hand)

    r = rng.random()
    if r > s.obp:
        return Outcome.OUT
    if r > s.avg:
        return Outcome.WALK_HBP
    return draw_hit_type(s.avg, s.slug, rng)


# ---------------------------------------------------------------------------
# Baserunning
# ---------------------------------------------------------------------------

def _interpolate_by_slug(slug: float, band: tuple[float, float]) -> float:
    if slug <= 0:
        slug = ADVANCE_SLUG_DEFAULT
    lo, hi = band
    if slug <= ADVANCE_SLUG_LOW:
        return lo
    if slug >= ADVANCE_SLUG_HIGH:
        return hi
    frac = (slug - ADVANCE_SLUG_LOW) / (ADVANCE_SLUG_HIGH - ADVANCE_SLUG_LOW)
    return lo + frac * (hi - lo)


def prob_score_from_second_on_single(slug: float) -> float:
    """Chance a runner on second scores on the batter's single."""
    return _interpolate_by_slug(slug, SCORE_FROM_SECOND_ON_SINGLE)


def prob_score_from_first_on_double(slug: float) -> float:
    """Chance a runner on first scores on the batter's double."""
    return _interpolate_by_slug(slug, SCORE_FROM_FIRST_ON_DOUBLE)
