"""Parse legacy table-format statblocks.

A legacy document holds one monster per ``######`` heading. Each section
carries a markdown stat table followed by blockquoted abilities:

    ###### Goblin Warrior

    | Goblin, Humanoid | - | Level 1 | Horde Harrier | EV 3 |
    |:-:|:-:|:-:|:-:|:-:|
    | **1S**<br/>Size | **6**<br/>Speed | **15**<br/>Stamina | **0**<br/>Stability | **1**<br/>Free Strike |

    > 🗡 **Spear Charge (Signature Ability)**
    >
    > | **Charge, Melee, Strike, Weapon** | **Main action** |
    > | --- | --: |
    > | **📏 Melee 1** | **🎯 One creature** |
    >
    > **Power Roll + 2:**
    > - **≤11:** 3 damage
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from ..models import Ability, Monster, MonsterStats, normalize_ev

logger = logging.getLogger("ds-encounter-builder")

SECTION_RE = re.compile(r"^###### ", re.MULTILINE)

# Category glyphs that may precede an ability name (optional VS16 suffix).
ABILITY_ICONS = ("🗡", "🏹", "⚔", "👤", "🔳", "❇", "🌀", "❗", "☠", "⭐")
_ICON_PATTERN = "(?:" + "|".join(re.escape(icon) for icon in ABILITY_ICONS) + ")️?"

ABILITY_HEADER_RE = re.compile(
    r"^>\s*(?P<icon>" + _ICON_PATTERN + r")?\s*"
    r"\*\*(?P<name>[^(*]+?)\s*(?:\((?P<type>[^)]+)\))?\s*\*\*"
)

DISTANCE_GLYPH = "📏"
TARGET_GLYPH = "🎯"
DISTANCE_TOKEN_RE = re.compile(r"Melee|Ranged|Burst")

MIN_TABLE_ROWS = 4


def split_table_row(line: str) -> list[str]:
    """Split a markdown table row into trimmed, non-empty cells."""
    return [cell.strip() for cell in line.split("|") if cell.strip()]


def clean_stat_cell(cell: str) -> str:
    """Drop the ``<br/>Label`` suffix and bold markers from a stat cell."""
    return cell.split("<br")[0].replace("**", "").strip()


def _is_distance_cell(cell: str) -> bool:
    return DISTANCE_GLYPH in cell or bool(DISTANCE_TOKEN_RE.search(cell))


@dataclass
class AbilityDraft:
    """An ability being assembled line by line."""
    name: str
    icon: str = ""
    type: str = ""
    keywords: list[str] = field(default_factory=list)
    distance: str = ""
    target: str = ""
    description_lines: list[str] = field(default_factory=list)

    def build(self) -> Ability:
        return Ability(
            icon=self.icon,
            name=self.name,
            type=self.type,
            keywords=list(self.keywords),
            distance=self.distance,
            target=self.target,
            description="\n".join(self.description_lines),
        )


@dataclass
class AbilityScanState:
    """State of the single pass over a section's lines.

    ``current`` is the ability being filled, ``in_table`` is set while
    consecutive nested table rows are being read. The first non-table
    blockquote line after them only clears it and is not kept as text.
    """
    current: AbilityDraft | None = None
    in_table: bool = False
    abilities: list[Ability] = field(default_factory=list)

    def flush(self) -> None:
        if self.current is not None:
            self.abilities.append(self.current.build())
        self.current = None

    def feed(self, line: str) -> None:
        """Consume one raw line of the section."""
        stripped = line.strip()
        if not stripped.startswith(">"):
            return

        header = parse_ability_header(stripped)
        if header is not None:
            self.flush()
            self.current = header
            self.in_table = False
            return

        if self.current is None:
            return

        content = re.sub(r"^>\s?", "", stripped).strip()
        if content.startswith("|"):
            self.in_table = True
            self._read_table_row(content)
            return

        if self.in_table:
            self.in_table = False
            return
        if content:
            self.current.description_lines.append(content)

    def _read_table_row(self, content: str) -> None:
        if "---" in content:
            return
        cells = [cell.replace("**", "").strip() for cell in split_table_row(content)]
        if not cells:
            return

        first = cells[0]
        second = cells[1] if len(cells) > 1 else ""
        if _is_distance_cell(first):
            self.current.distance = first.replace(DISTANCE_GLYPH, "").strip()
            if second:
                self.current.target = second.replace(TARGET_GLYPH, "").strip()
        elif not self.current.keywords:
            self.current.keywords = [kw.strip() for kw in first.split(",") if kw.strip()]


def parse_ability_header(line: str) -> AbilityDraft | None:
    """Return a fresh draft if ``line`` opens a new ability, else None.

    A bold label ending in a colon (``**Effect:**``, ``**Power Roll + 2:**``)
    belongs to the description and is not a header.
    """
    match = ABILITY_HEADER_RE.match(line)
    if not match:
        return None
    name = match.group("name").strip()
    if not name or name.endswith(":"):
        return None
    return AbilityDraft(
        name=name,
        icon=match.group("icon") or "",
        type=(match.group("type") or "").strip(),
    )


def scan_abilities(lines: list[str]) -> list[Ability]:
    """Extract abilities from the blockquote lines of one section."""
    state = AbilityScanState()
    for line in lines:
        state.feed(line)
    state.flush()
    return state.abilities


def parse_section(section: str, source_file: str = "") -> Monster | None:
    """Parse one ``######`` section; None if the stat table is incomplete."""
    lines = section.split("\n")
    name = lines[0].strip()

    table_lines = [line for line in lines if line.strip().startswith("|")]
    if len(table_lines) < MIN_TABLE_ROWS:
        logger.debug(
            "Skipping section %r in %s: %d table rows, need %d",
            name, source_file, len(table_lines), MIN_TABLE_ROWS,
        )
        return None

    header = split_table_row(table_lines[0])
    stat_row = split_table_row(table_lines[2])

    def cell(row: list[str], index: int) -> str:
        return row[index] if index < len(row) else ""

    stats = MonsterStats(
        size=clean_stat_cell(cell(stat_row, 0)),
        speed=clean_stat_cell(cell(stat_row, 1)),
        stamina=clean_stat_cell(cell(stat_row, 2)),
        stability=clean_stat_cell(cell(stat_row, 3)),
        free_strike=clean_stat_cell(cell(stat_row, 4)),
    )

    return Monster(
        name=name,
        type=cell(header, 0),
        level=cell(header, 2).replace("Level ", "", 1),
        role=cell(header, 3),
        ev=normalize_ev(cell(header, 4)),
        stats=stats,
        abilities=scan_abilities(lines),
        source_file=source_file,
        format="markdown",
    )


def parse_legacy_document(content: str, source_file: str = "") -> list[Monster]:
    """Parse every monster section of a legacy table-format document.

    Args:
        content: Full markdown text.
        source_file: Provenance recorded on each monster.

    Returns:
        Monsters in document order; incomplete sections are skipped.
    """
    monsters: list[Monster] = []
    for section in SECTION_RE.split(content)[1:]:
        monster = parse_section(section, source_file)
        if monster is not None:
            monsters.append(monster)
    return monsters
