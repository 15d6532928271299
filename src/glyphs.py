"""Shortcut icon glyph IDs → SF Symbol names.

The mapping lives in references/glyph_mappings.json and is loaded on first
use. Glyph IDs are 16-bit; anything outside that range is unknown.
"""

from __future__ import annotations

import json
from pathlib import Path

from paths import GLYPH_MAPPINGS_PATH

_GLYPH_MAP: dict[int, str] | None = None

MAX_GLYPH_ID = 0xFFFF


def _load_glyph_map(path: Path = GLYPH_MAPPINGS_PATH) -> dict[int, str]:
    """Load glyph map: {"59446": "keyboard.fill", ...} → {59446: "keyboard.fill"}."""
    if not path.exists():
        return {}
    with path.open() as f:
        data = json.load(f)
    mappings = data.get("mappings", {})
    return {int(k): v for k, v in mappings.items()}


def _get_glyph_map() -> dict[int, str]:
    global _GLYPH_MAP
    if _GLYPH_MAP is None:
        _GLYPH_MAP = _load_glyph_map()
    return _GLYPH_MAP


def symbol_for(glyph_id: int, default: str | None = None) -> str | None:
    """SF Symbol for a glyph ID, or default when unknown."""
    if isinstance(glyph_id, bool) or not isinstance(glyph_id, int):
        return default
    if not 0 <= glyph_id <= MAX_GLYPH_ID:
        return default
    return _get_glyph_map().get(glyph_id, default)
