"""
Bestiary ingestion: statblock parsing, the monster catalog and the ability library.

Supports two source conventions:
- Legacy table format (``######`` sections, pipe tables, blockquoted abilities)
- Structured ``~~~ds-statblock`` YAML blocks
"""

from .browser import filter_monsters, level_options, role_options
from .catalog import (
    CatalogError,
    StatblockParseError,
    build_catalog,
    deduplicate_monsters,
    dump_catalog,
    iter_monster_files,
    load_catalog,
    parse_document,
    parse_monster_file,
    scan_bestiary,
    write_catalog,
)
from .legacy import AbilityScanState, parse_legacy_document
from .library import build_ability_library, search_abilities
from .statblock import parse_statblock_document, render_effect

__all__ = [
    "AbilityScanState",
    "CatalogError",
    "StatblockParseError",
    "build_ability_library",
    "build_catalog",
    "deduplicate_monsters",
    "dump_catalog",
    "filter_monsters",
    "iter_monster_files",
    "level_options",
    "load_catalog",
    "parse_document",
    "parse_legacy_document",
    "parse_monster_file",
    "parse_statblock_document",
    "render_effect",
    "role_options",
    "scan_bestiary",
    "search_abilities",
    "write_catalog",
]
