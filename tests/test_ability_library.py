"""
Tests for the flattened ability library.
"""

from ds_encounter_builder.bestiary.library import build_ability_library, search_abilities
from ds_encounter_builder.models import Ability, Monster


def _monster(name, role, *abilities):
    return Monster(name=name, role=role, abilities=list(abilities))


class TestBuildAbilityLibrary:
    """Tests for build_ability_library()."""

    def test_dedups_on_name_and_type(self):
        bite = Ability(name="Bite", type="Main action", description="first")
        bite_again = Ability(name="Bite", type="Main action", description="second")
        bite_maneuver = Ability(name="Bite", type="Maneuver")

        library = build_ability_library([
            _monster("Wolf", "Horde Harrier", bite),
            _monster("Dire Wolf", "Elite Brute", bite_again, bite_maneuver),
        ])

        assert [(e.name, e.type) for e in library] == [
            ("Bite", "Main action"),
            ("Bite", "Maneuver"),
        ]
        assert library[0].description == "first"

    def test_records_first_source_monster(self):
        shared = Ability(name="Pack Tactics", type="Trait")
        library = build_ability_library([
            _monster("Wolf", "Horde Harrier", shared),
            _monster("Dire Wolf", "Elite Brute", shared),
        ])
        assert len(library) == 1
        assert library[0].source_monster == "Wolf"
        assert library[0].source_role == "Horde Harrier"

    def test_sorted_case_insensitively(self):
        library = build_ability_library([
            _monster("M", "Solo",
                     Ability(name="charge"),
                     Ability(name="Bash"),
                     Ability(name="axe Swing")),
        ])
        assert [e.name for e in library] == ["axe Swing", "Bash", "charge"]

    def test_empty_catalog(self):
        assert build_ability_library([]) == []

    def test_dump_uses_camel_case_aliases(self):
        library = build_ability_library([_monster("Wolf", "Harrier", Ability(name="Bite"))])
        dumped = library[0].model_dump(by_alias=True)
        assert dumped["sourceMonster"] == "Wolf"
        assert dumped["sourceRole"] == "Harrier"

    def test_from_parsed_catalog(self, bestiary_dir):
        from ds_encounter_builder.bestiary.catalog import build_catalog

        library = build_ability_library(build_catalog(bestiary_dir))
        assert [e.name for e in library] == ["Bloodfire", "Cleave", "Shortbow"]
        assert {e.source_monster for e in library} == {"Orc Warrior", "Goblin Sniper"}


class TestSearchAbilities:
    """Tests for search_abilities()."""

    def _library(self):
        return build_ability_library([
            _monster("Orc", "Brute",
                     Ability(name="Cleave", type="Signature Ability"),
                     Ability(name="Roar", type="Maneuver"),
                     Ability(name="Bloodfire", type="Trait")),
        ])

    def test_matches_name_case_insensitively(self):
        assert [e.name for e in search_abilities(self._library(), "CLEA")] == ["Cleave"]

    def test_matches_type(self):
        assert [e.name for e in search_abilities(self._library(), "maneuver")] == ["Roar"]

    def test_empty_query_returns_nothing(self):
        assert search_abilities(self._library(), "") == []

    def test_limit(self):
        library = build_ability_library([
            _monster("Swarm", "Solo", *[Ability(name=f"Sting {i:02d}") for i in range(30)]),
        ])
        assert len(search_abilities(library, "sting")) == 20
        assert len(search_abilities(library, "sting", limit=5)) == 5
