"""Catalog browsing: text search, role and level filters."""

from __future__ import annotations

from typing import Iterable

from ..models import Monster, parse_level


def filter_monsters(
    monsters: Iterable[Monster],
    search: str = "",
    role: str = "",
    level: str | int = "",
) -> list[Monster]:
    """Filter monsters the way the monster browser does.

    Args:
        monsters: Monsters to filter.
        search: Case-insensitive substring of the name or type.
        role: Substring of the role string (e.g. "Brute").
        level: Exact display level; empty matches every level.

    Returns:
        Matching monsters, in input order.
    """
    needle = search.lower()
    level_text = str(level) if level != "" else ""

    results = []
    for monster in monsters:
        if needle and needle not in monster.name.lower() and needle not in monster.type.lower():
            continue
        if role and role not in monster.role:
            continue
        if level_text and str(monster.level) != level_text:
            continue
        results.append(monster)
    return results


def role_options(monsters: Iterable[Monster]) -> list[str]:
    """Distinct role descriptors for the role filter.

    Uses the second token of a composite role ("Elite Brute" -> "Brute"),
    or the whole role when it has a single token.
    """
    options = set()
    for monster in monsters:
        tokens = monster.role.split(" ")
        options.add(tokens[1] if len(tokens) > 1 and tokens[1] else monster.role)
    return sorted(options)


def level_options(monsters: Iterable[Monster]) -> list[str]:
    """Distinct display levels, ordered numerically."""
    levels = {str(monster.level) for monster in monsters}
    return sorted(levels, key=lambda value: (parse_level(value, default=0), value))
