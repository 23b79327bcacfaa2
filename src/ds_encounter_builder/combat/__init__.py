"""
Encounter balancing package for ds-encounter-builder.

Provides party encounter strength, difficulty classification, EV budget
ranges and stat suggestions for homebrew monsters.
"""

from .encounter_math import (
    BASE_ES_PER_LEVEL,
    EXTREME_EV_CEILING,
    ROLE_MULTIPLIERS,
    BudgetRange,
    Difficulty,
    EncounterSummary,
    SuggestedStats,
    auto_calculate_stats,
    budget_range,
    difficulty_tier,
    party_strength,
    summarize_encounter,
    total_encounter_value,
)

__all__ = [
    "BASE_ES_PER_LEVEL",
    "EXTREME_EV_CEILING",
    "ROLE_MULTIPLIERS",
    "BudgetRange",
    "Difficulty",
    "EncounterSummary",
    "SuggestedStats",
    "auto_calculate_stats",
    "budget_range",
    "difficulty_tier",
    "party_strength",
    "summarize_encounter",
    "total_encounter_value",
]
