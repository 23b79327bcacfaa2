"""
Custom monster generation through external text-generation APIs.

Currently supports:
- Google Gemini (generateContent with a JSON response)
"""

from .gemini import (
    DEFAULT_MODEL,
    SYSTEM_PROMPT,
    GenerationError,
    generate_monster,
    normalize_generated_monster,
)

__all__ = [
    "DEFAULT_MODEL",
    "SYSTEM_PROMPT",
    "GenerationError",
    "generate_monster",
    "normalize_generated_monster",
]
