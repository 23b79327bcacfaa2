"""
Generate custom monsters with the Gemini text-generation API.

Sends the user's description together with a schema preamble, then
validates whatever comes back into a ``CustomMonster``, filling gaps with
the monster creator's defaults.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from ..models import Ability, CustomMonster, normalize_ev

logger = logging.getLogger("ds-encounter-builder")

GEMINI_API_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"
DEFAULT_MODEL = "gemini-3-pro-preview"

SYSTEM_PROMPT = """
You are an assistant for a TTRPG Encounter Builder. Your task is to generate a JSON object representing a monster based on a user's description.
The JSON object MUST strictly adhere to the following schema:

{
  "name": "String",
  "type": "String (e.g., Humanoid, Beast, Undead)",
  "level": Number (1-10),
  "role": "String (One of: Minion, Standard, Elite, Solo, Leader, Artillery, Controller, Brute, Hexer, Ambusher)",
  "ev": Number (Encounter Value, roughly Level * 3 for Standard, Level * 0.75 for Minion, Level * 6 for Elite, Level * 12 for Solo),
  "stats": {
    "size": "String (e.g., 1M, 1L, 2x2)",
    "speed": Number (e.g., 6),
    "stamina": Number (HP),
    "stability": Number (Reduction of forced movement),
    "freeStrike": Number (Damage)
  },
  "abilities": [
    {
      "name": "String",
      "icon": "String (Emoji)",
      "type": "String (Action, Maneuver, Triggered, Trait, Signature, Villain)",
      "keywords": ["String"],
      "distance": "String (e.g., Melee 1, Ranged 10)",
      "target": "String (e.g., One creature)",
      "description": "String (Supports **bold** for mechanics)"
    }
  ]
}

IMPORTANT:
- Return ONLY the JSON object. No markdown formatting, no code blocks.
- Ensure the "ev" and stats are balanced for the given level and role.
- **Power Roll Mechanics:** Most offensive abilities MUST use the "Power Roll" format.
  - Format: "**Power Roll + X**\\n• **≤11:** Tier 1 result\\n• **12-16:** Tier 2 result\\n• **17+:** Tier 3 result"
  - Example Description: "**Power Roll + 5**\\n• **≤11:** 6 damage; push 1\\n• **12-16:** 10 damage; push 3\\n• **17+:** 14 damage; push 5; target is prone"
- Be creative with abilities!
"""

# Starting point of a new monster in the creator.
DEFAULT_MONSTER: dict[str, Any] = {
    "name": "",
    "type": "Humanoid",
    "level": 1,
    "role": "Standard",
    "ev": 3,
    "stats": {
        "size": "1M",
        "speed": 6,
        "stamina": 10,
        "stability": 0,
        "freeStrike": 2,
    },
    "abilities": [],
}

_STAT_KEYS = ("size", "speed", "stamina", "stability", "freeStrike")


class GenerationError(Exception):
    """Raised when monster generation fails.

    The message is meant to be shown to the user as-is.
    """


def build_request_body(prompt: str) -> dict[str, Any]:
    """Build the generateContent payload for a user description."""
    return {
        "contents": [{
            "parts": [{"text": SYSTEM_PROMPT + "\n\nUser Description: " + prompt}],
        }],
        "generationConfig": {
            "responseMimeType": "application/json",
        },
    }


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return f"Failed to generate monster (HTTP {response.status_code})"


def extract_candidate_text(data: Any) -> str:
    """Pull the generated text out of a generateContent response.

    Raises:
        GenerationError: If the response has no candidate text.
    """
    try:
        return data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        raise GenerationError("Gemini response did not contain any generated text") from None


def _normalize_ability(raw: dict[str, Any]) -> Ability:
    keywords = raw.get("keywords") or []
    if isinstance(keywords, str):
        keywords = [kw.strip() for kw in keywords.split(",") if kw.strip()]
    elif not isinstance(keywords, list):
        keywords = [keywords]
    return Ability(
        icon=str(raw.get("icon") or ""),
        name=str(raw.get("name") or ""),
        type=str(raw.get("type") or ""),
        keywords=[str(kw) for kw in keywords],
        distance=str(raw.get("distance") or ""),
        target=str(raw.get("target") or ""),
        description=str(raw.get("description") or ""),
    )


def normalize_generated_monster(data: Any) -> CustomMonster:
    """Merge a generated monster object over the creator defaults.

    Unknown keys are ignored, missing keys take their default, ``ev`` is
    reduced to its first number, stats become display strings and
    abilities that are not objects are dropped.

    Args:
        data: Decoded JSON returned by the model.

    Returns:
        A new CustomMonster with a fresh id.

    Raises:
        GenerationError: If ``data`` is not an object or does not validate.
    """
    if not isinstance(data, dict):
        raise GenerationError(
            f"Gemini returned a {type(data).__name__}, expected a monster object"
        )

    merged = {key: data.get(key, default) for key, default in DEFAULT_MONSTER.items()}
    for key in ("name", "type", "role"):
        merged[key] = "" if merged[key] is None else str(merged[key])

    stats = dict(DEFAULT_MONSTER["stats"])
    raw_stats = data.get("stats")
    if isinstance(raw_stats, dict):
        for key in _STAT_KEYS:
            value = raw_stats.get(key)
            if value is None and key == "freeStrike":
                value = raw_stats.get("free_strike")
            if value is not None:
                stats[key] = value
    stats = {key: str(value) for key, value in stats.items()}
    merged["stats"] = stats

    merged["ev"] = normalize_ev(merged["ev"])
    if merged["level"] is None:
        merged["level"] = DEFAULT_MONSTER["level"]

    raw_abilities = merged["abilities"] if isinstance(merged["abilities"], list) else []
    merged["abilities"] = [_normalize_ability(a) for a in raw_abilities if isinstance(a, dict)]

    try:
        return CustomMonster.model_validate(merged)
    except ValidationError as e:
        raise GenerationError(f"Gemini returned a monster that does not match the schema: {e}") from None


async def generate_monster(
    api_key: str | None,
    prompt: str,
    model: str = DEFAULT_MODEL,
    timeout: float = 60.0,
) -> CustomMonster:
    """Generate a custom monster from a natural-language description.

    Args:
        api_key: Gemini API key.
        prompt: The user's description of the monster.
        model: Gemini model name.
        timeout: Request timeout in seconds.

    Returns:
        The normalized CustomMonster.

    Raises:
        GenerationError: On a missing key, HTTP or transport failure, or a
            response that is not a valid monster.
    """
    if not api_key:
        raise GenerationError("API Key is missing")

    api_url = f"{GEMINI_API_BASE_URL}/{model}:generateContent"

    try:
        async with httpx.AsyncClient() as client:
            response = await client.post(
                api_url,
                params={"key": api_key},
                json=build_request_body(prompt),
                timeout=timeout,
            )

            if response.status_code >= 400:
                raise GenerationError(_error_message(response))

            data = response.json()

    except httpx.TimeoutException:
        raise GenerationError("Gemini did not respond in time. Try again later.") from None
    except httpx.RequestError as e:
        raise GenerationError(f"Failed to connect to Gemini: {e}") from None
    except ValueError:
        raise GenerationError("Gemini returned a response that is not JSON") from None

    text = extract_candidate_text(data)

    try:
        generated = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        logger.error("Failed to parse Gemini response: %s", text)
        raise GenerationError("Gemini returned invalid JSON") from None

    monster = normalize_generated_monster(generated)
    logger.info("Generated monster '%s' (level %s %s)", monster.name, monster.level, monster.role)
    return monster
