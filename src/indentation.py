"""
Control flow indentation for rendering action lists.

Shortcuts store If/Menu/Repeat blocks as a flat list bracketed by
Start / Middle / End markers. Renderers indent the actions between the
markers; the markers themselves sit at their parent's level:

    If                      0
        Show Alert          1
    Otherwise               0
        Show Notification   1
    End If                  0

Unbalanced input never produces a negative level: surplus End markers
are absorbed at 0.
"""

from __future__ import annotations

from typing import Sequence

from workflow_action import ControlFlowMode, WorkflowAction


def _step(level: int, mode: ControlFlowMode | None) -> int:
    """Level after the action with the given mode has been passed."""
    if mode == ControlFlowMode.START:
        return level + 1
    if mode == ControlFlowMode.END:
        return max(0, level - 1)
    return level


def _own_level(level: int, mode: ControlFlowMode | None) -> int:
    """Level at which an action renders, given the level accumulated before it."""
    if mode in (ControlFlowMode.MIDDLE, ControlFlowMode.END):
        return max(0, level - 1)
    return level


def indent_level(actions: Sequence[WorkflowAction], index: int) -> int:
    """Nesting depth of actions[index].

    Raises:
        IndexError: if index is out of range.
    """
    if not 0 <= index < len(actions):
        raise IndexError(f"action index {index} out of range for {len(actions)} actions")

    level = 0
    for action in actions[:index]:
        level = _step(level, action.control_flow_mode)
    return _own_level(level, actions[index].control_flow_mode)


def indent_levels(actions: Sequence[WorkflowAction]) -> list[int]:
    """Nesting depth of every action, in one pass."""
    levels = []
    level = 0
    for action in actions:
        levels.append(_own_level(level, action.control_flow_mode))
        level = _step(level, action.control_flow_mode)
    return levels


def flow_rows(actions: Sequence[WorkflowAction]) -> list[dict]:
    """Action dicts with their indent level, for JSON renderers."""
    return [
        {**action.to_dict(), "indent_level": level}
        for action, level in zip(actions, indent_levels(actions))
    ]


def render_flow(actions: Sequence[WorkflowAction], indent: str = "    ") -> str:
    """Plain-text outline of a workflow, one action per line."""
    lines = []
    for action, level in zip(actions, indent_levels(actions)):
        line = f"{indent * level}{action.display_name}"
        if action.subtitle:
            line += f": {action.subtitle}"
        lines.append(line)
    return "\n".join(lines) + ("\n" if lines else "")
