"""
Command line entry point for the encounter builder.

Usage:
    ds-encounter build --bestiary Bestiary/Monsters --output data/monsters.json
    ds-encounter encounter --level 3 --heroes 4 "Goblin Warrior" "Goblin Warrior"
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from .bestiary import (
    CatalogError,
    build_ability_library,
    build_catalog,
    load_catalog,
    search_abilities,
    write_catalog,
)
from .combat import auto_calculate_stats, summarize_encounter
from .config import Settings, load_settings
from .generation import GenerationError, generate_monster
from .models import Monster, PartyConfig
from .storage import CustomMonsterStore, JsonFileStore

logger = logging.getLogger("ds-encounter-builder")


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="ds-encounter",
        description="Build the Draw Steel monster catalog and balance encounters",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Parse the bestiary into the catalog
  ds-encounter build --bestiary Bestiary/Monsters

  # Rate an encounter for four level 3 heroes with 2 victories
  ds-encounter encounter --level 3 --heroes 4 --victories 2 "Orc" "Orc"

  # Suggested stats for a level 5 elite brute
  ds-encounter stats --level 5 --role "Elite Brute"
        """,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", help="Parse statblocks into the catalog")
    build.add_argument("--bestiary", type=Path, help="Bestiary root directory")
    build.add_argument("--output", type=Path, help="Catalog JSON path")

    abilities = subparsers.add_parser("abilities", help="List the ability library")
    abilities.add_argument("--catalog", type=Path, help="Catalog JSON path")
    abilities.add_argument("--search", default="", help="Filter by name or type")
    abilities.add_argument("--limit", type=int, default=20, help="Maximum results when searching")

    encounter = subparsers.add_parser("encounter", help="Rate an encounter")
    encounter.add_argument("monsters", nargs="+", help="Monster names (repeat for several copies)")
    encounter.add_argument("--level", type=int, default=1, help="Hero level (1-10)")
    encounter.add_argument("--heroes", type=int, default=4, help="Number of heroes")
    encounter.add_argument("--victories", type=int, default=0, help="Victories earned on average")
    encounter.add_argument("--catalog", type=Path, help="Catalog JSON path")

    stats = subparsers.add_parser("stats", help="Suggest stats for a level and role")
    stats.add_argument("--level", type=int, required=True)
    stats.add_argument("--role", required=True, help='Role string, e.g. "Minion Artillery"')

    generate = subparsers.add_parser("generate", help="Generate a custom monster with Gemini")
    generate.add_argument("prompt", help="Description of the monster")

    return parser


def _find_monsters(names: list[str], catalog: list[Monster]) -> list[Monster]:
    by_name = {monster.name.lower(): monster for monster in catalog}
    selected = []
    for name in names:
        monster = by_name.get(name.lower())
        if monster is None:
            raise CatalogError(f"Monster not found in catalog: {name}")
        selected.append(monster)
    return selected


def cmd_build(args: argparse.Namespace, settings: Settings) -> int:
    bestiary = args.bestiary or settings.bestiary_dir
    output = args.output or settings.catalog_path
    if not bestiary.is_dir():
        print(f"Bestiary directory not found: {bestiary}", file=sys.stderr)
        return 1

    print(f"Scanning for monsters in {bestiary}...")
    catalog = build_catalog(bestiary, relative_to=bestiary.parent)
    write_catalog(catalog, output)
    print(f"Wrote {len(catalog)} monsters to {output}")
    return 0


def cmd_abilities(args: argparse.Namespace, settings: Settings) -> int:
    library = build_ability_library(load_catalog(args.catalog or settings.catalog_path))
    entries = search_abilities(library, args.search, args.limit) if args.search else library
    for entry in entries:
        kind = f" [{entry.type}]" if entry.type else ""
        print(f"{entry.icon} {entry.name}{kind} - {entry.source_monster} ({entry.source_role})".strip())
    print(f"{len(entries)} of {len(library)} abilities")
    return 0


def cmd_encounter(args: argparse.Namespace, settings: Settings) -> int:
    catalog = load_catalog(args.catalog or settings.catalog_path)
    monsters = _find_monsters(args.monsters, catalog)
    party = PartyConfig(level=args.level, count=args.heroes, victories=args.victories)
    summary = summarize_encounter(monsters, party)

    print(f"Party Encounter Strength: {summary.party_strength}")
    print(f"Total EV: {summary.total_ev} ({summary.monster_count} monsters)")
    print(f"Difficulty: {summary.difficulty.value.upper()}")
    print(f"Budget: {summary.budget.min} - {summary.budget.max}")
    return 0


def cmd_stats(args: argparse.Namespace, settings: Settings) -> int:
    suggested = auto_calculate_stats(args.level, args.role)
    for key, value in suggested.model_dump(by_alias=True).items():
        print(f"{key}: {value}")
    return 0


def cmd_generate(args: argparse.Namespace, settings: Settings) -> int:
    monster = asyncio.run(
        generate_monster(settings.gemini_api_key, args.prompt, model=settings.gemini_model)
    )
    store = CustomMonsterStore(JsonFileStore(settings.custom_store_path))
    store.save(monster)
    print(f"Generated '{monster.name}' (id {monster.id}), saved to {settings.custom_store_path}")
    return 0


COMMANDS = {
    "build": cmd_build,
    "abilities": cmd_abilities,
    "encounter": cmd_encounter,
    "stats": cmd_stats,
    "generate": cmd_generate,
}


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the ``ds-encounter`` command."""
    args = build_parser().parse_args(argv)
    settings = load_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        return COMMANDS[args.command](args, settings)
    except (CatalogError, GenerationError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
