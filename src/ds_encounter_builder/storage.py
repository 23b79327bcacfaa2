"""
Custom monster persistence behind an injected key-value store.

The store holds one JSON array of user-authored monsters under a fixed
key. Core logic only ever sees the ``KeyValueStore`` protocol, so the
same ``CustomMonsterStore`` runs against memory in tests and against a
JSON file from the CLI.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError
from shortuuid import random

from .combat.encounter_math import auto_calculate_stats
from .models import CustomMonster, Monster, MonsterStats

logger = logging.getLogger("ds-encounter-builder")

STORAGE_KEY = "draw_steel_custom_monsters"


class KeyValueStore(Protocol):
    """Minimal string key-value store (the shape of browser localStorage)."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryStore:
    """In-process store, mostly for tests."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore:
    """Store persisted as a single JSON object file.

    The file is created on first write and survives across runs until
    deleted.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Store file {self.path} must hold a JSON object")
        return data

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")

    def get(self, key: str) -> str | None:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)


class CustomMonsterStore:
    """Load, save and delete user-authored monsters by id."""

    def __init__(self, store: KeyValueStore, key: str = STORAGE_KEY) -> None:
        self.store = store
        self.key = key

    def load(self) -> list[CustomMonster]:
        """Return all stored monsters; unreadable data yields an empty list."""
        try:
            raw = self.store.get(self.key)
            if not raw:
                return []
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError(f"expected a JSON array, got {type(data).__name__}")
            return [CustomMonster.model_validate(item) for item in data]
        except (ValueError, ValidationError, OSError) as e:
            logger.error("Failed to load custom monsters: %s", e)
            return []

    def _persist(self, monsters: list[CustomMonster]) -> None:
        payload = [monster.model_dump(mode="json", by_alias=True) for monster in monsters]
        self.store.set(self.key, json.dumps(payload, ensure_ascii=False))

    def save(self, monster: CustomMonster) -> list[CustomMonster]:
        """Insert ``monster`` or replace the stored one with the same id.

        Returns:
            The updated list of custom monsters.
        """
        current = self.load()
        for index, existing in enumerate(current):
            if existing.id == monster.id:
                current[index] = monster
                break
        else:
            current.append(monster)

        self._persist(current)
        logger.info("Saved custom monster '%s' (%s)", monster.name, monster.id)
        return current

    def delete(self, monster_id: str) -> list[CustomMonster]:
        """Remove the monster with ``monster_id``; unknown ids are a no-op."""
        updated = [m for m in self.load() if m.id != monster_id]
        self._persist(updated)
        return updated

    def get(self, monster_id: str) -> CustomMonster | None:
        for monster in self.load():
            if monster.id == monster_id:
                return monster
        return None


def clone_monster(monster: Monster) -> CustomMonster:
    """Create an independent custom copy of a catalog or custom monster.

    The copy gets a fresh id, a ``" (Copy)"`` name suffix and is marked
    as custom. Nested abilities and stats are deep-copied.
    """
    data = monster.model_dump(exclude={"id", "source"})
    data["name"] = f"{monster.name} (Copy)"
    return CustomMonster(**data, id=random(length=8), source="custom")


def apply_suggested_stats(monster: CustomMonster) -> CustomMonster:
    """Return a copy of ``monster`` with EV and stats from the level/role heuristic.

    Stats are stored as display strings, the same shape the parser writes.
    """
    suggested = auto_calculate_stats(monster.level, monster.role)
    stats = MonsterStats(
        size=suggested.size,
        speed=str(suggested.speed),
        stamina=str(suggested.stamina),
        stability=str(suggested.stability),
        free_strike=str(suggested.free_strike),
    )
    return monster.model_copy(update={"ev": suggested.ev, "stats": stats}, deep=True)
