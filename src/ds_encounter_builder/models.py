"""
Data models for the Draw Steel encounter builder.

Catalog records (``Monster``, ``Ability``) are frozen value objects produced
by the statblock parser. ``CustomMonster`` is the mutable, user-owned copy
that lives in the custom monster store.
"""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from shortuuid import random


_DIGITS_RE = re.compile(r"(\d+)")
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def normalize_ev(value: Any) -> int:
    """Extract an encounter value from free text.

    Takes the first run of digits found anywhere in the text, so
    ``"Lvl 3 (12 EV)"`` yields ``3``. Empty values and text without
    digits normalize to ``0``.
    """
    if value is None or value == "":
        return 0
    match = _DIGITS_RE.search(str(value))
    return int(match.group(1)) if match else 0


def parse_level(value: Any, default: int = 1) -> int:
    """Parse a display level ("3", 3, "3rd") into an int.

    Mirrors a leading-integer parse: anything without a leading number,
    or a level of zero, falls back to ``default``.
    """
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value or default
    match = _LEADING_INT_RE.match(str(value)) if value is not None else None
    if not match:
        return default
    return int(match.group(1)) or default


class Ability(BaseModel):
    """A single monster ability or trait."""

    model_config = ConfigDict(frozen=True)

    icon: str = Field(default="", description="Optional category glyph")
    name: str = Field(description="Ability name")
    type: str = Field(default="", description="Action, Maneuver, Triggered, Trait, ...")
    keywords: list[str] = Field(default_factory=list, description="Keyword tags")
    distance: str = Field(default="", description="Range text, e.g. 'Melee 1'")
    target: str = Field(default="", description="Targeting text")
    description: str = Field(default="", description="Effect text, power roll tiers verbatim")


class MonsterStats(BaseModel):
    """Core numbers of a statblock, kept in display form."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    size: str | int = ""
    speed: str | int = ""
    stamina: str | int = ""
    stability: str | int = ""
    free_strike: str | int = Field(default="", alias="freeStrike")


class Monster(BaseModel):
    """A catalog monster produced by the statblock parser."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    type: str = ""
    level: str | int = ""
    role: str = ""
    ev: int = Field(default=0, ge=0, description="Encounter value")
    stats: MonsterStats = Field(default_factory=MonsterStats)
    abilities: list[Ability] = Field(default_factory=list)
    source_file: str = Field(default="", alias="sourceFile")
    format: str = Field(default="", description='"markdown" or "yaml"')

    def to_catalog_dict(self) -> dict[str, Any]:
        """Dump using the catalog's camelCase field names."""
        return self.model_dump(mode="json", by_alias=True)


class LibraryAbility(Ability):
    """An ability in the flattened ability library, with its origin."""

    source_monster: str = Field(default="", alias="sourceMonster")
    source_role: str = Field(default="", alias="sourceRole")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class CustomMonster(Monster):
    """A user-authored monster, editable and stored outside the catalog."""

    model_config = ConfigDict(frozen=False, populate_by_name=True)

    id: str = Field(default_factory=lambda: random(length=8))
    source: str = "custom"


class PartyConfig(BaseModel):
    """Hero party settings used for encounter balancing."""

    level: int = Field(default=1, ge=1, le=10, description="Average hero level")
    count: int = Field(default=4, ge=1, description="Number of heroes")
    victories: int = Field(default=0, ge=0, description="Victories earned on average")
