"""
Pytest configuration and fixtures for ds-encounter-builder tests.
"""

import sys
from pathlib import Path

import pytest

# Add src directory to Python path to allow importing ds_encounter_builder
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))


LEGACY_ORC = """# Orcs

Orcs are fierce warriors.

###### Orc Warrior

| Humanoid, Orc | - | Level 3 | Platoon Brute | EV 12 |
|:-:|:-:|:-:|:-:|:-:|
| **1M**<br/>Size | **5**<br/>Speed | **40**<br/>Stamina | **2**<br/>Stability | **4**<br/>Free Strike |
| **-**<br/>Immunity | **-**<br/>Movement | - | **-**<br/>Captain | **-**<br/>Weakness |

> 🗡 **Cleave (Signature Ability)**
>
> | **Melee, Strike, Weapon** | **Main action** |
> | ------------------------- | --------------: |
> | **📏 Melee 1** | **🎯 Two creatures** |
>
> **Power Roll + 2:**
>
> - **≤11:** 5 damage
> - **12-16:** 8 damage
> - **17+:** 11 damage; push 2

> **Bloodfire**
>
> The orc gains 2 surges when it becomes winded.
"""


STATBLOCK_ORC = """# Orc Warrior

~~~ds-statblock
name: Orc Warrior
level: 3
roles:
  - Platoon
  - Brute
ancestry:
  - Humanoid
  - Orc
ev: "12"
stamina: 40
speed: 5
size: 1M
stability: 2
free_strike: 4
features:
  - type: feature
    feature_type: ability
    ability_type: Signature Ability
    name: Cleave
    icon: 🗡
    keywords:
      - Melee
      - Strike
      - Weapon
    distance: Melee 1
    target: Two creatures
    effects:
      - roll: Power Roll + 2
        tier1: 5 damage
        tier2: 8 damage
        tier3: 11 damage; push 2
      - name: Effect
        effect: The target is bleeding.
      - cost: 2 Malice
        effect: Cleave targets three creatures.
  - feature_type: trait
    name: Bloodfire
    effects:
      - effect: The orc gains 2 surges when it becomes winded.
~~~
"""


@pytest.fixture
def legacy_orc() -> str:
    return LEGACY_ORC


@pytest.fixture
def statblock_orc() -> str:
    return STATBLOCK_ORC


@pytest.fixture
def bestiary_dir(tmp_path: Path) -> Path:
    """A small bestiary tree mixing both formats and a skipped template."""
    root = tmp_path / "Monsters"
    (root / "Orcs").mkdir(parents=True)
    (root / "Goblins").mkdir()
    (root / "Orcs" / "Orc Warrior.md").write_text(STATBLOCK_ORC, encoding="utf-8")
    (root / "Orcs" / "Orcs.md").write_text(LEGACY_ORC, encoding="utf-8")
    (root / "Goblins" / "Goblins.md").write_text(
        """###### Goblin Sniper

| Goblin, Humanoid | - | Level 1 | Minion Artillery | EV 3 for four minions |
|:-:|:-:|:-:|:-:|:-:|
| **1S**<br/>Size | **6**<br/>Speed | **4**<br/>Stamina | **0**<br/>Stability | **1**<br/>Free Strike |
| - | - | - | - | - |

> 🏹 **Shortbow (Signature Ability)**
>
> | **Ranged, Strike, Weapon** | **Main action** |
> | --- | --: |
> | **📏 Ranged 10** | **🎯 One creature** |
""",
        encoding="utf-8",
    )
    (root / "Goblins" / "_template.md").write_text(
        "###### Template Monster\n\n| a | b | Level 1 | Solo | EV 99 |\n|-|\n| 1M | 5 | 1 | 0 | 1 |\n| - |\n",
        encoding="utf-8",
    )
    (root / "Goblins" / "notes.txt").write_text("###### Not A Monster\n", encoding="utf-8")
    return root
