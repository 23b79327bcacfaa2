"""Parse structured ``ds-statblock`` fenced blocks.

Newer bestiary documents embed each monster as a YAML document inside a
``~~~ds-statblock`` fence. Each block is parsed independently so one bad
block does not cost the rest of the file.
"""

from __future__ import annotations

import logging
import re
from typing import Any

import yaml
from pydantic import ValidationError

from ..models import Ability, Monster, MonsterStats, normalize_ev

logger = logging.getLogger("ds-encounter-builder")

STATBLOCK_SENTINEL = "~~~ds-statblock"
STATBLOCK_RE = re.compile(r"~~~ds-statblock\s*([\s\S]*?)\s*~~~")

# Power roll tier keys and the roll bands they are printed with.
POWER_ROLL_TIERS: tuple[tuple[str, str], ...] = (
    ("tier1", "≤11"),
    ("tier2", "12-16"),
    ("tier3", "17+"),
)


class StatblockBlockError(Exception):
    """Raised when a single fenced statblock cannot be turned into a monster."""


def has_statblock(content: str) -> bool:
    """True when the document uses the structured-block format."""
    return STATBLOCK_SENTINEL in content


def _display(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _as_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return [str(item) for item in value]


def render_effect(effect: Any) -> str:
    """Render one entry of a feature's ``effects`` list as description text.

    Args:
        effect: A plain string, or a mapping with ``name``/``cost``/``effect``
            or ``roll`` plus ``tier1``..``tier3``.

    Returns:
        The rendered text, or an empty string for an unrecognized entry.
    """
    if isinstance(effect, str):
        return effect
    if not isinstance(effect, dict):
        return ""

    text = effect.get("effect")
    if effect.get("name") and text:
        return f"**{effect['name']}:** {text}"
    if effect.get("cost") and text:
        return f"**{effect['cost']}:** {text}"
    if text:
        return str(text)
    if effect.get("roll"):
        lines = [f"**{effect['roll']}**"]
        for key, band in POWER_ROLL_TIERS:
            if effect.get(key):
                lines.append(f"• **{band}:** {effect[key]}")
        return "\n".join(lines)
    return ""


def feature_to_ability(feature: dict[str, Any]) -> Ability:
    """Map one ``features`` entry to an Ability."""
    rendered = (render_effect(effect) for effect in feature.get("effects") or [])
    return Ability(
        icon=_display(feature.get("icon")),
        name=_display(feature.get("name")),
        type=_display(feature.get("ability_type") or feature.get("feature_type")),
        keywords=_as_list(feature.get("keywords")),
        distance=_display(feature.get("distance")),
        target=_display(feature.get("target")),
        description="\n\n".join(text for text in rendered if text),
    )


def block_to_monster(data: Any, source_file: str = "") -> Monster:
    """Convert a parsed statblock mapping to a Monster.

    Raises:
        StatblockBlockError: If the block is not a mapping, has no name,
            or any of its values has the wrong shape.
    """
    if not isinstance(data, dict):
        raise StatblockBlockError(f"Statblock must be a mapping, got {type(data).__name__}")
    if not data.get("name"):
        raise StatblockBlockError("Statblock has no name")

    features = data.get("features") or []
    if not isinstance(features, list):
        raise StatblockBlockError("'features' must be a list")

    try:
        abilities = [feature_to_ability(f) for f in features if isinstance(f, dict)]
        return Monster(
            name=str(data["name"]),
            type=", ".join(_as_list(data.get("ancestry"))),
            level=_display(data.get("level")),
            role=" ".join(_as_list(data.get("roles"))),
            ev=normalize_ev(data.get("ev")),
            stats=MonsterStats(
                size=_display(data.get("size")),
                speed=_display(data.get("speed")),
                stamina=_display(data.get("stamina")),
                stability=_display(data.get("stability")),
                free_strike=_display(data.get("free_strike")),
            ),
            abilities=abilities,
            source_file=source_file,
            format="yaml",
        )
    except (ValidationError, TypeError, ValueError, AttributeError) as e:
        raise StatblockBlockError(f"Invalid statblock '{data.get('name')}': {e}") from e


def parse_statblock_document(content: str, source_file: str = "") -> list[Monster]:
    """Parse every ``~~~ds-statblock`` block in a document.

    Malformed blocks are logged and skipped.

    Args:
        content: Full markdown text.
        source_file: Provenance recorded on each monster.

    Returns:
        Monsters in block order.
    """
    monsters: list[Monster] = []
    for match in STATBLOCK_RE.finditer(content):
        try:
            data = yaml.safe_load(match.group(1))
            monsters.append(block_to_monster(data, source_file))
        except yaml.YAMLError as e:
            logger.error("Invalid YAML in statblock in %s: %s", source_file, e)
        except StatblockBlockError as e:
            logger.error("Skipping statblock in %s: %s", source_file, e)
    return monsters
