"""
Subtitle extraction for workflow actions.

Given an action's identifier, its raw parameters and its control flow
mode, produce at most one short human-readable line describing what the
action does ("Body contains Notes", "Option A", "Delete · 42").

Strategies, first applicable wins:
  1. no parameters                      → None
  2. End markers                        → None
  3. menu items                         → WFMenuItemTitle verbatim
  4. If (conditional start)             → input name + condition phrase
  5. declared subtitle keys             → values joined with " · "
  6. fallback scan of remaining keys    → first direct string, then first
                                          extractable value

Nothing here raises on malformed parameters; missing or wrong-typed fields
simply yield None and let a later strategy try.
"""

from __future__ import annotations

import math
from typing import Any, Iterable

from action_catalog import (
    CF_CONDITIONAL,
    CF_MENU,
    CONDITION_PHRASES,
    CONDITION_VALUE_KEYS,
    DEFAULT_CONDITION,
    TECHNICAL_KEYS,
    condition_phrase,
    lookup_action,
    resolve_identifier,
)
from config import SummarizerConfig
from plist_value import PlistValue
from workflow_action import ControlFlowMode

# Inline variable placeholder inside WFTextTokenString text
OBJECT_REPLACEMENT = "\ufffc"
ELLIPSIS = "..."
SEPARATOR = " · "

MENU_ITEM_TITLE_KEY = "WFMenuItemTitle"
CONDITION_KEY = "WFCondition"
INPUT_NAME_PATH = ("WFInput", "Variable", "Value", "OutputName")


def _render_number(number: int | float) -> str:
    if isinstance(number, float) and number.is_integer():
        return str(int(number))
    return str(number)


class SubtitleExtractor:
    """Subtitle extraction bound to one configuration (truncation length)."""

    def __init__(self, config: SummarizerConfig | None = None):
        self.config = config or SummarizerConfig()

    @property
    def max_length(self) -> int | None:
        return self.config.max_subtitle_length

    # ------------------------------------------------------------------
    # Formatting
    # ------------------------------------------------------------------

    def format_subtitle(self, text: str) -> str | None:
        """Strip placeholders and whitespace; truncate if configured.

        Returns None when nothing readable is left.
        """
        cleaned = text.replace(OBJECT_REPLACEMENT, "").strip()
        if not cleaned:
            return None
        if self.max_length is not None and len(cleaned) > self.max_length:
            return cleaned[: self.max_length] + ELLIPSIS
        return cleaned

    # ------------------------------------------------------------------
    # Value extraction
    # ------------------------------------------------------------------

    def extract_value(self, parameters: PlistValue, keys: Iterable[str]) -> str | None:
        """First displayable value among keys, tried in order.

        Per key: a non-empty string, then a number that isn't 0 or 1 (those
        are almost always boolean flags), then a serialized text token
        ({"Value": {"string": ...}}).
        """
        for key in keys:
            value = parameters.get(key)

            text = value.as_str()
            if text:
                formatted = self.format_subtitle(text)
                if formatted is not None:
                    return formatted

            number = value.as_number()
            if number is not None and math.isfinite(number) and int(number) not in (0, 1):
                return _render_number(number)

            token = value.path("Value", "string").as_str()
            if token:
                formatted = self.format_subtitle(token)
                if formatted is not None:
                    return formatted
        return None

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------

    def _conditional(self, parameters: PlistValue) -> str:
        code = parameters.get(CONDITION_KEY).as_int()
        if code is None:
            code = DEFAULT_CONDITION

        phrase = condition_phrase(code, self.extract_value(parameters, CONDITION_VALUE_KEYS))
        if code not in CONDITION_PHRASES:
            return phrase

        input_name = parameters.path(*INPUT_NAME_PATH).as_str()
        if input_name:
            return f"{input_name} {phrase}"
        return phrase

    def _declared_keys(self, identifier: str, parameters: PlistValue) -> str | None:
        info = lookup_action(identifier)
        if info is None or not info.subtitle_keys:
            return None
        values = [self.extract_value(parameters, [key]) for key in info.subtitle_keys]
        values = [v for v in values if v is not None]
        if not values:
            return None
        return SEPARATOR.join(values)

    def _fallback(self, parameters: PlistValue) -> str | None:
        keys = sorted(k for k in parameters.keys() if k not in TECHNICAL_KEYS)

        # Direct strings read best
        for key in keys:
            text = parameters.get(key).as_str()
            if text:
                formatted = self.format_subtitle(text)
                if formatted is not None:
                    return formatted

        for key in keys:
            value = self.extract_value(parameters, [key])
            if value is not None:
                return value
        return None

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def extract(
        self,
        identifier: str,
        parameters: Any = None,
        control_flow_mode: ControlFlowMode | None = None,
    ) -> str | None:
        """Subtitle for one action, or None.

        Args:
            identifier: Action identifier (full or short form).
            parameters: WFWorkflowActionParameters, as a PlistValue or a
                plain dict. None means the action had no parameters.
            control_flow_mode: Start/Middle/End, or None.
        """
        if parameters is None:
            return None
        params = PlistValue.wrap(parameters)
        if params.as_mapping() is None:
            return None

        if control_flow_mode == ControlFlowMode.END:
            return None

        resolved = resolve_identifier(identifier)

        if control_flow_mode == ControlFlowMode.MIDDLE and resolved == CF_MENU:
            title = params.get(MENU_ITEM_TITLE_KEY).as_str()
            if title:
                return title

        if resolved == CF_CONDITIONAL and control_flow_mode == ControlFlowMode.START:
            return self._conditional(params)

        declared = self._declared_keys(identifier, params)
        if declared is not None:
            return declared

        return self._fallback(params)


_DEFAULT_EXTRACTOR = SubtitleExtractor()


def extract_subtitle(
    identifier: str,
    parameters: Any = None,
    control_flow_mode: ControlFlowMode | None = None,
    config: SummarizerConfig | None = None,
) -> str | None:
    """Module-level shortcut for SubtitleExtractor(config).extract(...)."""
    extractor = SubtitleExtractor(config) if config is not None else _DEFAULT_EXTRACTOR
    return extractor.extract(identifier, parameters, control_flow_mode)


def extract_value(
    parameters: Any, keys: Iterable[str], config: SummarizerConfig | None = None
) -> str | None:
    extractor = SubtitleExtractor(config) if config is not None else _DEFAULT_EXTRACTOR
    return extractor.extract_value(PlistValue.wrap(parameters), keys)
