"""
Workflow action model.

A WorkflowAction is one step of a decoded shortcut, ready for rendering.
Its display name and icon are derived on read from the identifier and
control flow mode; they never depend on the subtitle.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

from action_catalog import CONTROL_FLOW_LABELS, icon_for_pattern, lookup_action, resolve_identifier
from humanizer import humanize


class ControlFlowMode(IntEnum):
    """WFControlFlowMode values."""

    START = 0  # If, Repeat, Choose from Menu
    MIDDLE = 1  # Otherwise, Menu Item
    END = 2  # End If, End Repeat, End Menu

    @classmethod
    def from_raw(cls, value: Any) -> "ControlFlowMode | None":
        """Map a raw plist integer to a mode; anything unrecognized is None."""
        if isinstance(value, bool) or not isinstance(value, int):
            return None
        try:
            return cls(value)
        except ValueError:
            return None


def resolve_display_name(identifier: str, control_flow_mode: ControlFlowMode | None = None) -> str:
    """Human-readable name for an action.

    Control flow markers get their fixed labels first ("Otherwise",
    "End Menu", ...), then the metadata table, then the humanized last
    component of the identifier.
    """
    resolved = resolve_identifier(identifier)
    if control_flow_mode is not None:
        label = CONTROL_FLOW_LABELS.get((resolved, int(control_flow_mode)))
        if label is not None:
            return label

    info = lookup_action(identifier)
    if info is not None:
        return info.display_name

    last = identifier.split(".")[-1]
    return humanize(last) if last else identifier


def resolve_icon_name(identifier: str) -> str:
    """SF Symbol name for an action."""
    info = lookup_action(identifier)
    if info is not None:
        return info.icon_name
    return icon_for_pattern(identifier)


@dataclass(frozen=True)
class WorkflowAction:
    """A single action/step in a shortcut workflow."""

    identifier: str
    control_flow_mode: ControlFlowMode | None = None
    subtitle: str | None = None
    id: uuid.UUID = field(default_factory=uuid.uuid4, compare=False)

    @property
    def is_control_flow_marker(self) -> bool:
        """True for Otherwise / Menu Item / End markers."""
        return self.control_flow_mode in (ControlFlowMode.MIDDLE, ControlFlowMode.END)

    @property
    def display_name(self) -> str:
        return resolve_display_name(self.identifier, self.control_flow_mode)

    @property
    def icon_name(self) -> str:
        return resolve_icon_name(self.identifier)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "identifier": self.identifier,
            "control_flow_mode": (
                int(self.control_flow_mode) if self.control_flow_mode is not None else None
            ),
            "subtitle": self.subtitle,
            "display_name": self.display_name,
            "icon_name": self.icon_name,
        }
