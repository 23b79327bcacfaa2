"""
Encounter balance math for Draw Steel.

Implements the encounter strength rules: party strength from hero level,
headcount and victories, difficulty classification of a monster group by
total encounter value (EV), the EV budget for each difficulty, and a
heuristic stat suggestion for homebrew monsters.

Every function here is pure. Out-of-table levels degrade to a per-hero
strength of 0 instead of raising.
"""

from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field

from ..models import Monster, PartyConfig, parse_level

logger = logging.getLogger("ds-encounter-builder.combat")


# =============================================================================
# Constants: Encounter Strength per Hero Level
# =============================================================================

class Difficulty(str, Enum):
    """Encounter difficulty tiers, easiest first."""
    TRIVIAL = "Trivial"
    EASY = "Easy"
    STANDARD = "Standard"
    HARD = "Hard"
    EXTREME = "Extreme"


# Encounter strength contributed by one hero of a given level (1-10).
BASE_ES_PER_LEVEL: dict[int, int] = {
    1:  6,
    2:  8,
    3:  10,
    4:  12,
    5:  14,
    6:  16,
    7:  18,
    8:  20,
    9:  22,
    10: 24,
}

# Upper bound reported for the open-ended Extreme budget.
EXTREME_EV_CEILING = 9999


# =============================================================================
# Constants: Role multipliers for stat suggestions
# =============================================================================

# hp: stamina multiplier (primary ranks override, descriptors scale by hp/10)
# ev: rough EV scale, informational only
ROLE_MULTIPLIERS: dict[str, dict[str, float]] = {
    "Minion":     {"hp": 4,   "ev": 0.25},
    "Standard":   {"hp": 10,  "ev": 1},
    "Elite":      {"hp": 20,  "ev": 2},
    "Solo":       {"hp": 40,  "ev": 4},
    "Leader":     {"hp": 15,  "ev": 1.5},
    "Artillery":  {"hp": 0.8, "ev": 1},
    "Controller": {"hp": 0.9, "ev": 1},
    "Brute":      {"hp": 1.2, "ev": 1},
    "Hexer":      {"hp": 0.8, "ev": 1},
    "Ambusher":   {"hp": 0.9, "ev": 1},
    "Defender":   {"hp": 1.3, "ev": 1},
    "Support":    {"hp": 1.0, "ev": 1},
    "Skirmisher": {"hp": 1.0, "ev": 1},
}

PRIMARY_RANKS: frozenset[str] = frozenset({"Minion", "Elite", "Solo"})

BASE_HP_MULTIPLIER = 10


# =============================================================================
# Pydantic Models
# =============================================================================

class BudgetRange(BaseModel):
    """Inclusive EV range for a difficulty tier."""

    model_config = ConfigDict(frozen=True)

    min: int = Field(description="Lowest total EV in the tier")
    max: int = Field(description="Highest total EV in the tier")

    def contains(self, total_ev: int) -> bool:
        return self.min <= total_ev <= self.max


class SuggestedStats(BaseModel):
    """Stat block numbers suggested for a level and role."""

    model_config = ConfigDict(populate_by_name=True)

    stamina: int
    stability: int
    free_strike: int = Field(alias="freeStrike")
    speed: int
    ev: int
    size: str


class EncounterSummary(BaseModel):
    """Balance summary for a group of monsters against a party."""
    party: PartyConfig
    party_strength: int = Field(ge=0, description="Party encounter strength")
    total_ev: int = Field(ge=0, description="Sum of monster encounter values")
    monster_count: int = Field(ge=0)
    difficulty: Difficulty
    budget: BudgetRange
    progress: float = Field(ge=0, le=1, description="Total EV relative to twice the party strength")


# =============================================================================
# Core Functions
# =============================================================================

def es_per_hero(level: int) -> int:
    """Encounter strength of one hero at ``level``; 0 outside the table."""
    return BASE_ES_PER_LEVEL.get(level, 0)


def party_strength(level: int, hero_count: int, victories: int = 0) -> int:
    """Calculate a party's encounter strength.

    Every two victories the heroes have earned count as one extra hero.

    Args:
        level: Hero level (1-10).
        hero_count: Number of heroes in the party.
        victories: Victories earned on average.

    Returns:
        Effective hero count times the per-hero strength for the level.
    """
    effective_hero_count = hero_count + victories // 2
    return effective_hero_count * es_per_hero(level)


def difficulty_tier(
    party_strength: int,
    total_monster_ev: int,
    hero_count: int,
    level: int,
) -> Difficulty:
    """Classify an encounter by its total EV.

    Thresholds, with ``unit`` the strength of one hero at ``level``:

    - Trivial: EV < strength - unit
    - Easy: EV < strength
    - Standard: EV <= strength + unit
    - Hard: EV <= strength + 3 * unit
    - Extreme: anything above

    ``hero_count`` is accepted for call-site symmetry with
    :func:`party_strength`; the thresholds do not depend on it.
    """
    unit = es_per_hero(level)

    if total_monster_ev < party_strength - unit:
        return Difficulty.TRIVIAL
    if total_monster_ev < party_strength:
        return Difficulty.EASY
    if total_monster_ev <= party_strength + unit:
        return Difficulty.STANDARD
    if total_monster_ev <= party_strength + 3 * unit:
        return Difficulty.HARD
    return Difficulty.EXTREME


def budget_range(tier: Difficulty | str, party_strength: int, level: int) -> BudgetRange:
    """Return the inclusive EV range that :func:`difficulty_tier` maps to ``tier``.

    Args:
        tier: Difficulty tier, as the enum or its display name.
        party_strength: Party encounter strength.
        level: Hero level (1-10).

    Returns:
        BudgetRange; Extreme is capped at ``EXTREME_EV_CEILING``.
        An unrecognized tier yields ``[0, 0]``.
    """
    unit = es_per_hero(level)
    try:
        tier = Difficulty(tier)
    except ValueError:
        logger.debug("Unknown difficulty tier %r, returning empty budget", tier)
        return BudgetRange(min=0, max=0)

    if tier is Difficulty.TRIVIAL:
        return BudgetRange(min=0, max=party_strength - unit - 1)
    if tier is Difficulty.EASY:
        return BudgetRange(min=party_strength - unit, max=party_strength - 1)
    if tier is Difficulty.STANDARD:
        return BudgetRange(min=party_strength, max=party_strength + unit)
    if tier is Difficulty.HARD:
        return BudgetRange(min=party_strength + unit + 1, max=party_strength + 3 * unit)
    return BudgetRange(min=party_strength + 3 * unit + 1, max=EXTREME_EV_CEILING)


def auto_calculate_stats(level: Any, role: str) -> SuggestedStats:
    """Suggest stats for a homebrew monster.

    The role string is split into tokens. Minion, Elite and Solo replace
    the base stamina multiplier; any other known token scales it by
    ``hp / 10``. EV starts at ``12 + (level - 1) * 4`` and is quartered
    (rounded up) for Minion, doubled for Elite and quadrupled for Solo.
    The EV checks are independent, so a role naming several ranks
    compounds them.

    Args:
        level: Monster level; non-numeric values fall back to 1.
        role: Role string, e.g. "Minion Artillery".

    Returns:
        SuggestedStats for the level and role.
    """
    lvl = parse_level(level)
    role = role or ""

    hp_multiplier: float = BASE_HP_MULTIPLIER
    for token in role.split(" "):
        multipliers = ROLE_MULTIPLIERS.get(token)
        if not multipliers:
            continue
        if token in PRIMARY_RANKS:
            hp_multiplier = multipliers["hp"]
        else:
            hp_multiplier *= multipliers["hp"] / BASE_HP_MULTIPLIER

    ev = 12 + (lvl - 1) * 4
    if "Minion" in role:
        ev = math.ceil(ev / 4)
    if "Elite" in role:
        ev = ev * 2
    if "Solo" in role:
        ev = ev * 4

    return SuggestedStats(
        stamina=math.floor(lvl * hp_multiplier) + 10,
        stability=lvl // 3,
        free_strike=lvl // 2 + 2,
        speed=6,
        ev=ev,
        size="1M",
    )


def total_encounter_value(monsters: Iterable[Monster]) -> int:
    """Sum the EV of a monster group; unparseable values count as 0."""
    return sum(max(parse_level(monster.ev, default=0), 0) for monster in monsters)


def summarize_encounter(monsters: list[Monster], party: PartyConfig) -> EncounterSummary:
    """Compute the full balance summary for an encounter.

    Args:
        monsters: Monsters in the encounter (duplicates count separately).
        party: Party configuration.

    Returns:
        EncounterSummary with strength, total EV, tier and budget.
    """
    strength = party_strength(party.level, party.count, party.victories)
    total_ev = total_encounter_value(monsters)
    tier = difficulty_tier(strength, total_ev, party.count, party.level)
    progress = min(total_ev / (strength * 2), 1.0) if strength > 0 else 0.0

    return EncounterSummary(
        party=party,
        party_strength=strength,
        total_ev=total_ev,
        monster_count=len(monsters),
        difficulty=tier,
        budget=budget_range(tier, strength, party.level),
        progress=progress,
    )
