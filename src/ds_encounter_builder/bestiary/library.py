"""Flattened ability library built from the monster catalog."""

from __future__ import annotations

import logging
from typing import Iterable

from ..models import LibraryAbility, Monster

logger = logging.getLogger("ds-encounter-builder")


def build_ability_library(monsters: Iterable[Monster]) -> list[LibraryAbility]:
    """Collect every distinct ability across the catalog.

    Abilities are keyed by ``(name, type)``; the first monster in catalog
    order that has a given ability is recorded as its source. The result
    is sorted by ability name, ignoring case.

    Args:
        monsters: Catalog monsters, in catalog order.

    Returns:
        Library entries annotated with ``sourceMonster`` and ``sourceRole``.
    """
    seen: set[tuple[str, str]] = set()
    library: list[LibraryAbility] = []

    for monster in monsters:
        for ability in monster.abilities:
            key = (ability.name, ability.type)
            if key in seen:
                continue
            seen.add(key)
            library.append(
                LibraryAbility(
                    **ability.model_dump(),
                    source_monster=monster.name,
                    source_role=monster.role,
                )
            )

    logger.debug("Ability library holds %d abilities", len(library))
    return sorted(library, key=lambda entry: entry.name.casefold())


def search_abilities(
    library: list[LibraryAbility],
    query: str,
    limit: int = 20,
) -> list[LibraryAbility]:
    """Find library abilities whose name or type contains ``query``.

    An empty query returns nothing, matching the creator's search box.
    """
    if not query:
        return []
    needle = query.lower()
    matches = [
        entry for entry in library
        if needle in entry.name.lower() or needle in entry.type.lower()
    ]
    return matches[:limit]
