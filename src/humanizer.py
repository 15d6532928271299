"""
Identifier humanizer.

Turns the last component of an unmapped action identifier into a readable
name by splitting it around known English word fragments:

    "recordaudio"            → "Record Audio"
    "deleteassignmentintent" → "Delete Assignment"

See a word not splitting correctly? Add it to COMMON_WORDS.
"""

from __future__ import annotations

import re

# App Intents framework appends this to third-party actions
INTENT_SUFFIX = "intent"

COMMON_WORDS: tuple[str, ...] = (
    "notification", "notifications",
    "assignment", "assignments",
    "clipboard",
    "calendar",
    "dictionary",
    "shortcut", "shortcuts",
    "document", "documents",
    "reminder", "reminders",
    "variable", "variables",
    "transcribe",
    "upcoming",
    "weather",
    "location",
    "workout",
    "podcast",
    "message", "messages",
    "contact", "contacts",
    "content", "contents",
    "folder", "folders",
    "extension",
    "sharing",
    "action",
    "output",
    "result",
    "script",
    "filter",
    "repeat",
    "health",
    "device",
    "toggle",
    "search",
    "update",
    "remove",
    "delete",
    "number",
    "audio",
    "video",
    "photo", "photos",
    "image", "images",
    "event", "events",
    "alert",
    "input",
    "music",
    "shell",
    "match",
    "start",
    "share",
    "notes", "note",
    "files", "file",
    "items", "item",
    "home",
    "list",
    "menu",
    "wait",
    "stop",
    "edit",
    "save",
    "find",
    "send",
    "play",
    "pause",
    "record",
    "get",
    "set",
    "add",
    "run",
    "open",
    "show",
    "text",
    "date",
    "time",
    "page",
    "web",
    "url",
    "app", "apps",
    "ssh",
    "if",
    "to",
    "the",
    "for",
    "and",
    "with",
    "from",
)


def _build_pattern(words: tuple[str, ...]) -> re.Pattern[str]:
    # Longest first, so "notifications" wins over "notification" and
    # "photo" is consumed before "to" can split it.
    ordered = sorted(set(words), key=lambda w: (-len(w), w))
    return re.compile("|".join(re.escape(w) for w in ordered), re.IGNORECASE)


_WORD_PATTERN = _build_pattern(COMMON_WORDS)


def humanize(last_component: str) -> str:
    """Split an identifier component into capitalized words."""
    result = last_component.lower()
    if result.endswith(INTENT_SUFFIX):
        result = result[: -len(INTENT_SUFFIX)]

    result = _WORD_PATTERN.sub(lambda m: f" {m.group(0)} ", result)

    words = [w for w in result.split() if w]
    return " ".join(w.capitalize() for w in words)
