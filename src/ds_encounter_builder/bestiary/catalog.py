"""
Monster catalog builder.

Walks a bestiary directory, parses every statblock document in whichever
format it uses, merges duplicates and writes the JSON catalog consumed by
the encounter builder and the ability library.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterator

from pydantic import ValidationError

from ..models import Monster
from .legacy import parse_legacy_document
from .statblock import has_statblock, parse_statblock_document

logger = logging.getLogger("ds-encounter-builder")

DOCUMENT_EXTENSION = ".md"
SKIP_PREFIX = "_"

# Higher rank wins when two documents define the same monster name.
FORMAT_PRECEDENCE: dict[str, int] = {
    "markdown": 0,
    "yaml": 1,
}


class StatblockParseError(Exception):
    """Raised when a bestiary document cannot be read."""


class CatalogError(Exception):
    """Raised when a catalog file is missing or malformed."""


def parse_document(content: str, source_file: str = "") -> list[Monster]:
    """Parse a bestiary document, choosing the format from its content."""
    if has_statblock(content):
        return parse_statblock_document(content, source_file)
    return parse_legacy_document(content, source_file)


def parse_monster_file(path: Path, relative_to: Path | None = None) -> list[Monster]:
    """Read and parse one bestiary document.

    Args:
        path: Markdown file to parse.
        relative_to: Base directory for the recorded ``sourceFile``.
            Defaults to the file's own directory.

    Returns:
        Monsters defined in the file (possibly none).

    Raises:
        StatblockParseError: If the file cannot be read.
    """
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise StatblockParseError(f"Cannot read {path}: {e}") from e

    base = Path(relative_to) if relative_to is not None else path.parent
    try:
        source_file = path.relative_to(base).as_posix()
    except ValueError:
        source_file = path.as_posix()

    return parse_document(content, source_file)


def iter_monster_files(root: Path) -> Iterator[Path]:
    """Yield bestiary documents under ``root`` in a stable order.

    Descends into every subdirectory. Files starting with an underscore
    (templates, drafts) are skipped.
    """
    for entry in sorted(Path(root).iterdir(), key=lambda p: p.name):
        if entry.is_dir():
            yield from iter_monster_files(entry)
        elif (
            entry.is_file()
            and entry.name.endswith(DOCUMENT_EXTENSION)
            and not entry.name.startswith(SKIP_PREFIX)
        ):
            yield entry


def scan_bestiary(root: Path, relative_to: Path | None = None) -> list[Monster]:
    """Parse every document under ``root`` without merging duplicates.

    A file that fails to parse is logged and contributes nothing.
    """
    root = Path(root)
    base = Path(relative_to) if relative_to is not None else root
    monsters: list[Monster] = []

    for path in iter_monster_files(root):
        try:
            found = parse_monster_file(path, relative_to=base)
        except Exception as e:
            logger.error("Error parsing %s: %s", path, e)
            continue
        logger.debug("Parsed %d monster(s) from %s", len(found), path)
        monsters.extend(found)

    return monsters


def deduplicate_monsters(monsters: list[Monster]) -> list[Monster]:
    """Keep one monster per name.

    The structured (yaml) version of a monster replaces a markdown one no
    matter which was parsed first; otherwise the first occurrence stays.
    Catalog order follows the first appearance of each name.
    """
    unique: dict[str, Monster] = {}
    for monster in monsters:
        existing = unique.get(monster.name)
        if existing is None:
            unique[monster.name] = monster
            continue
        if FORMAT_PRECEDENCE.get(monster.format, 0) > FORMAT_PRECEDENCE.get(existing.format, 0):
            unique[monster.name] = monster
    return list(unique.values())


def build_catalog(root: Path, relative_to: Path | None = None) -> list[Monster]:
    """Scan a bestiary and return the deduplicated catalog."""
    all_monsters = scan_bestiary(root, relative_to=relative_to)
    catalog = deduplicate_monsters(all_monsters)
    logger.info(
        "Found %d entries. Deduplicated to %d monsters.",
        len(all_monsters), len(catalog),
    )
    return catalog


def dump_catalog(monsters: list[Monster]) -> str:
    """Serialize monsters as the catalog JSON text."""
    data = [monster.to_catalog_dict() for monster in monsters]
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def write_catalog(monsters: list[Monster], output_path: Path) -> Path:
    """Write the catalog JSON, creating parent directories as needed."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(dump_catalog(monsters), encoding="utf-8")
    logger.info("Wrote %d monsters to %s", len(monsters), output_path)
    return output_path


def load_catalog(path: Path) -> list[Monster]:
    """Load a catalog written by :func:`write_catalog`.

    Raises:
        CatalogError: If the file is missing, is not JSON, is not an array,
            or holds records that do not validate.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise CatalogError(f"Catalog not found: {path}") from None
    except json.JSONDecodeError as e:
        raise CatalogError(f"Invalid JSON in catalog {path}: {e}") from None
    except OSError as e:
        raise CatalogError(f"Failed to read catalog {path}: {e}") from None

    if not isinstance(data, list):
        raise CatalogError(
            f"Catalog must be a JSON array, got {type(data).__name__}"
        )

    try:
        return [Monster.model_validate(item) for item in data]
    except ValidationError as e:
        raise CatalogError(f"Invalid monster record in catalog {path}: {e}") from None
