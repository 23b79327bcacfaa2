"""
Draw Steel encounter builder - statblock catalog ingestion and encounter balancing.
"""

from .models import (
    Ability,
    CustomMonster,
    LibraryAbility,
    Monster,
    MonsterStats,
    PartyConfig,
    normalize_ev,
    parse_level,
)

try:
    from importlib.metadata import version as _get_version
    __version__ = _get_version("ds-encounter-builder")
except Exception:
    __version__ = "0.1.0"  # Fallback if metadata unavailable

__all__ = [
    "Ability",
    "CustomMonster",
    "LibraryAbility",
    "Monster",
    "MonsterStats",
    "PartyConfig",
    "normalize_ev",
    "parse_level",
]
