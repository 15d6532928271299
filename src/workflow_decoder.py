"""
Plist action decoder: shortcut bytes → ordered WorkflowAction list.

Reads a shortcut document (binary or XML plist, as served by iCloud's
unsigned shortcut asset, or a JSON dump of the same shape) and produces
one record per entry of WFWorkflowActions:

    WFWorkflowActions: [
        {
            WFWorkflowActionIdentifier: "is.workflow.actions.conditional",
            WFWorkflowActionParameters: {
                WFControlFlowMode: 0,
                WFCondition: 4,
                ...
            }
        },
        ...
    ]

Entries are decoded leniently: an entry without an identifier is dropped,
an unknown WFControlFlowMode becomes None. Only an unreadable document or
a non-list WFWorkflowActions raises ParsingFailed.
"""

from __future__ import annotations

import json
import logging
import plistlib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from config import SummarizerConfig
from errors import ParsingFailed
from plist_value import PlistValue
from subtitles import SubtitleExtractor
from workflow_action import ControlFlowMode, WorkflowAction

ACTIONS_KEY = "WFWorkflowActions"
IDENTIFIER_KEY = "WFWorkflowActionIdentifier"
PARAMETERS_KEY = "WFWorkflowActionParameters"
CONTROL_FLOW_MODE_KEY = "WFControlFlowMode"

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawAction:
    """One WFWorkflowActions entry before subtitle extraction."""

    identifier: str
    parameters: PlistValue | None = None
    control_flow_mode: ControlFlowMode | None = None


def _load_document(raw: bytes) -> Any:
    """Parse plist bytes, falling back to JSON for plist-shaped dumps."""
    try:
        return plistlib.loads(raw)
    except Exception as e:  # plistlib raises assorted types on malformed input
        plist_error = e

    try:
        return json.loads(raw)
    except ValueError:
        raise ParsingFailed(f"Document is not a property list: {plist_error}") from plist_error


def parse_document(raw: bytes) -> dict[str, Any]:
    """Parse a shortcut document and check that its root is a mapping."""
    if not isinstance(raw, (bytes, bytearray)):
        raise ParsingFailed(f"Expected bytes, got {type(raw).__name__}")
    document = _load_document(bytes(raw))
    if not isinstance(document, dict):
        raise ParsingFailed(
            f"Expected a dictionary at the document root, got {type(document).__name__}"
        )
    return document


def _decode_entry(entry: Any) -> RawAction | None:
    node = PlistValue.wrap(entry)
    identifier = node.get(IDENTIFIER_KEY).as_str()
    if identifier is None:
        return None

    params_node = node.get(PARAMETERS_KEY)
    if params_node.as_mapping() is None:
        return RawAction(identifier=identifier)

    mode = ControlFlowMode.from_raw(params_node.get(CONTROL_FLOW_MODE_KEY).as_int())
    return RawAction(identifier=identifier, parameters=params_node, control_flow_mode=mode)


def actions_from_document(document: dict[str, Any]) -> list[RawAction]:
    """Decode the WFWorkflowActions array of an already-parsed document."""
    if ACTIONS_KEY not in document:
        return []
    entries = document[ACTIONS_KEY]
    if entries is None:
        return []
    if not isinstance(entries, list):
        raise ParsingFailed(
            f"{ACTIONS_KEY} is not a list of actions (got {type(entries).__name__})"
        )

    actions = []
    for i, entry in enumerate(entries):
        action = _decode_entry(entry)
        if action is None:
            log.debug("Skipping action %d: no %s", i, IDENTIFIER_KEY)
            continue
        actions.append(action)
    return actions


def decode_actions(raw: bytes) -> list[RawAction]:
    """Decode a shortcut document into its ordered raw actions.

    Raises:
        ParsingFailed: if raw is not a property list (or JSON), its root is not
            a dictionary, or WFWorkflowActions is present but not a list.
    """
    return actions_from_document(parse_document(raw))


def to_workflow_actions(
    raw_actions: list[RawAction], config: SummarizerConfig | None = None
) -> list[WorkflowAction]:
    """Attach subtitles and build the public WorkflowAction records."""
    extractor = SubtitleExtractor(config)
    return [
        WorkflowAction(
            identifier=action.identifier,
            control_flow_mode=action.control_flow_mode,
            subtitle=extractor.extract(
                action.identifier, action.parameters, action.control_flow_mode
            ),
        )
        for action in raw_actions
    ]


def decode_workflow(raw: bytes, config: SummarizerConfig | None = None) -> list[WorkflowAction]:
    """Full pipeline: shortcut bytes → WorkflowAction list."""
    return to_workflow_actions(decode_actions(raw), config)


def load_workflow_file(
    filepath: str | Path, config: SummarizerConfig | None = None
) -> list[WorkflowAction]:
    """Decode a .shortcut / .plist / .json file from disk."""
    with open(filepath, "rb") as f:
        return decode_workflow(f.read(), config)
