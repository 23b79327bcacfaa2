"""
Tests for the catalog builder: directory walking, format dispatch,
deduplication and catalog JSON I/O.
"""

import json
from pathlib import Path

import pytest

from ds_encounter_builder.bestiary.catalog import (
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
from ds_encounter_builder.models import Monster


class TestParseDocument:
    """Tests for format dispatch."""

    def test_statblock_document_uses_yaml_parser(self, statblock_orc):
        monsters = parse_document(statblock_orc)
        assert [m.format for m in monsters] == ["yaml"]

    def test_other_documents_use_legacy_parser(self, legacy_orc):
        monsters = parse_document(legacy_orc)
        assert [m.format for m in monsters] == ["markdown"]

    def test_sentinel_wins_even_with_legacy_sections(self, statblock_orc, legacy_orc):
        monsters = parse_document(legacy_orc + "\n" + statblock_orc)
        assert all(m.format == "yaml" for m in monsters)


class TestParseMonsterFile:
    """Tests for parse_monster_file()."""

    def test_source_file_relative_to_base(self, bestiary_dir):
        path = bestiary_dir / "Orcs" / "Orcs.md"
        monsters = parse_monster_file(path, relative_to=bestiary_dir.parent)
        assert monsters[0].source_file == "Monsters/Orcs/Orcs.md"

    def test_source_file_defaults_to_file_name(self, bestiary_dir):
        monsters = parse_monster_file(bestiary_dir / "Orcs" / "Orcs.md")
        assert monsters[0].source_file == "Orcs.md"

    def test_unreadable_file_raises(self, tmp_path):
        path = tmp_path / "Broken.md"
        path.write_bytes(b"\xff\xfe###### Bad\n\x80\x81")
        with pytest.raises(StatblockParseError):
            parse_monster_file(path)

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(StatblockParseError):
            parse_monster_file(tmp_path / "nope.md")


class TestScanBestiary:
    """Tests for iter_monster_files() and scan_bestiary()."""

    def test_walk_skips_underscore_and_non_markdown(self, bestiary_dir):
        names = [p.name for p in iter_monster_files(bestiary_dir)]
        assert names == ["Goblins.md", "Orc Warrior.md", "Orcs.md"]

    def test_underscore_directories_are_descended(self, bestiary_dir, legacy_orc):
        hidden = bestiary_dir / "_drafts"
        hidden.mkdir()
        (hidden / "Drafts.md").write_text(legacy_orc, encoding="utf-8")
        assert "Drafts.md" in [p.name for p in iter_monster_files(bestiary_dir)]

    def test_scan_keeps_duplicates(self, bestiary_dir):
        monsters = scan_bestiary(bestiary_dir)
        assert [(m.name, m.format) for m in monsters] == [
            ("Goblin Sniper", "markdown"),
            ("Orc Warrior", "yaml"),
            ("Orc Warrior", "markdown"),
        ]

    def test_unreadable_file_is_skipped(self, bestiary_dir, caplog):
        (bestiary_dir / "Orcs" / "Broken.md").write_bytes(b"\xff\xfe\x80 not utf-8")
        monsters = scan_bestiary(bestiary_dir)
        assert len(monsters) == 3
        assert "Broken.md" in caplog.text

    def test_empty_directory(self, tmp_path):
        assert scan_bestiary(tmp_path) == []


class TestDeduplicateMonsters:
    """Tests for deduplicate_monsters()."""

    def _pair(self):
        markdown = Monster(name="Orc Warrior", ev=12, format="markdown", source_file="Orcs.md")
        yaml_version = Monster(name="Orc Warrior", ev=12, format="yaml", source_file="Orc Warrior.md")
        return markdown, yaml_version

    def test_yaml_replaces_earlier_markdown(self):
        markdown, yaml_version = self._pair()
        assert deduplicate_monsters([markdown, yaml_version]) == [yaml_version]

    def test_yaml_kept_over_later_markdown(self):
        markdown, yaml_version = self._pair()
        assert deduplicate_monsters([yaml_version, markdown]) == [yaml_version]

    def test_first_occurrence_wins_within_format(self):
        first = Monster(name="Goblin", ev=3, format="markdown", source_file="a.md")
        second = Monster(name="Goblin", ev=4, format="markdown", source_file="b.md")
        assert deduplicate_monsters([first, second]) == [first]

    def test_names_are_unique_and_order_follows_first_appearance(self):
        monsters = [
            Monster(name="B", format="markdown"),
            Monster(name="A", format="markdown"),
            Monster(name="B", format="yaml"),
        ]
        result = deduplicate_monsters(monsters)
        assert [m.name for m in result] == ["B", "A"]
        assert result[0].format == "yaml"


class TestBuildCatalog:
    """Tests for build_catalog() and the catalog JSON round trip."""

    def test_build_catalog(self, bestiary_dir):
        catalog = build_catalog(bestiary_dir, relative_to=bestiary_dir.parent)
        assert [m.name for m in catalog] == ["Goblin Sniper", "Orc Warrior"]

        orc = catalog[1]
        assert orc.format == "yaml"
        assert orc.source_file == "Monsters/Orcs/Orc Warrior.md"

        goblin = catalog[0]
        assert goblin.ev == 3
        assert goblin.role == "Minion Artillery"
        assert goblin.abilities[0].icon == "🏹"
        assert goblin.abilities[0].distance == "Ranged 10"
        assert goblin.abilities[0].target == "One creature"
        assert goblin.abilities[0].keywords == []

    def test_write_and_load_round_trip(self, bestiary_dir, tmp_path):
        catalog = build_catalog(bestiary_dir)
        output = write_catalog(catalog, tmp_path / "data" / "monsters.json")

        assert output.exists()
        assert load_catalog(output) == catalog

    def test_catalog_json_shape(self, bestiary_dir, tmp_path):
        output = write_catalog(build_catalog(bestiary_dir), tmp_path / "monsters.json")
        text = output.read_text(encoding="utf-8")
        data = json.loads(text)

        assert isinstance(data, list)
        record = data[1]
        assert set(record) == {
            "name", "type", "level", "role", "ev", "stats",
            "abilities", "sourceFile", "format",
        }
        assert set(record["stats"]) == {"size", "speed", "stamina", "stability", "freeStrike"}
        assert record["ev"] == 12
        # Tier markers stay verbatim, not escaped.
        assert "• **≤11:** 5 damage" in text
        assert "**12-16:**" in text
        assert "**17+:**" in text

    def test_build_is_idempotent(self, bestiary_dir, tmp_path):
        first = write_catalog(build_catalog(bestiary_dir), tmp_path / "one.json")
        second = write_catalog(build_catalog(bestiary_dir), tmp_path / "two.json")
        assert first.read_bytes() == second.read_bytes()

    def test_dump_catalog_empty(self):
        assert dump_catalog([]) == "[]\n"


class TestLoadCatalog:
    """Tests for load_catalog() error handling."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogError, match="not found"):
            load_catalog(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(CatalogError, match="Invalid JSON"):
            load_catalog(path)

    def test_not_an_array(self, tmp_path):
        path = tmp_path / "obj.json"
        path.write_text('{"name": "Orc"}', encoding="utf-8")
        with pytest.raises(CatalogError, match="array"):
            load_catalog(path)

    def test_invalid_record(self, tmp_path):
        path = tmp_path / "records.json"
        path.write_text('[{"ev": 3}]', encoding="utf-8")
        with pytest.raises(CatalogError, match="Invalid monster record"):
            load_catalog(path)

    def test_accepts_path_string(self, tmp_path):
        path = Path(tmp_path) / "empty.json"
        path.write_text("[]", encoding="utf-8")
        assert load_catalog(str(path)) == []
