"""
Static lookup tables for Shortcuts actions.

  - ACTION_INFO:          identifier → display name, icon, subtitle keys
  - CONDITION_PHRASES:    WFCondition code → phrase template
  - CONTROL_FLOW_LABELS:  (identifier, mode) → If / Otherwise / End If ...
  - ICON_PATTERNS:        ordered substring → icon fallbacks

The tables are built once at import and exposed read-only. Icon names are
SF Symbol names, which is what Shortcuts renderers expect.

Found an action showing the wrong name or icon? Add it to ACTION_INFO.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

ACTION_PREFIX = "is.workflow.actions."

# Control flow identifiers
CF_CONDITIONAL = "is.workflow.actions.conditional"
CF_MENU = "is.workflow.actions.choosefrommenu"
CF_REPEAT_COUNT = "is.workflow.actions.repeat.count"
CF_REPEAT_EACH = "is.workflow.actions.repeat.each"


# Short spellings accepted wherever an identifier is expected
_ALIASES = {
    "conditional": CF_CONDITIONAL,
    "choosefrommenu": CF_MENU,
    "choose-from-menu": CF_MENU,
    "repeat.count": CF_REPEAT_COUNT,
    "repeat-count": CF_REPEAT_COUNT,
    "repeat.each": CF_REPEAT_EACH,
    "repeat-each": CF_REPEAT_EACH,
}

# Parameter keys that never make a useful subtitle
TECHNICAL_KEYS = frozenset(
    {
        "UUID",
        "GroupingIdentifier",
        "WFControlFlowMode",
        "WFSerializationType",
        "FollowUp",
    }
)

DEFAULT_ICON = "gearshape"
PLACEHOLDER = "%@"


@dataclass(frozen=True)
class ActionInfo:
    """Display info for one action identifier."""

    display_name: str
    icon_name: str
    subtitle_keys: tuple[str, ...] = ()


def _info(name: str, icon: str, *subtitle_keys: str) -> ActionInfo:
    return ActionInfo(name, icon, tuple(subtitle_keys))


# ============================================================
# Action Metadata Table
# ============================================================

ACTION_INFO: Mapping[str, ActionInfo] = MappingProxyType(
    {
        # Calendar
        "is.workflow.actions.getupcomingcalendarevents": _info("Get Upcoming Events", "calendar"),
        "is.workflow.actions.addcalendarevent": _info("Add Calendar Event", "calendar.badge.plus"),
        # Notes
        "is.workflow.actions.filter.notes": _info("Find Notes", "note.text"),
        "is.workflow.actions.createnote": _info("Create Note", "square.and.pencil"),
        "is.workflow.actions.shownote": _info("Show Note", "note.text"),
        "is.workflow.actions.appendnote": _info("Append to Note", "note.text.badge.plus"),
        # Control flow
        CF_CONDITIONAL: _info("If", "arrow.triangle.branch"),
        CF_MENU: _info("Menu", "list.bullet", "WFMenuPrompt"),
        CF_REPEAT_COUNT: _info("Repeat", "repeat", "WFRepeatCount"),
        CF_REPEAT_EACH: _info("Repeat with Each", "repeat"),
        # Alerts & UI
        "is.workflow.actions.alert": _info("Show Alert", "exclamationmark.bubble", "WFAlertActionTitle", "WFAlertActionMessage"),
        "is.workflow.actions.ask": _info("Ask for Input", "questionmark.bubble", "WFAskActionPrompt"),
        "is.workflow.actions.showresult": _info("Show Result", "text.bubble", "Text"),
        "is.workflow.actions.notification": _info("Show Notification", "bell", "WFNotificationActionTitle", "WFNotificationActionBody"),
        "is.workflow.actions.choosefromlist": _info("Choose from List", "list.bullet", "WFChooseFromListActionPrompt"),
        # Text
        "is.workflow.actions.gettext": _info("Text", "text.alignleft", "WFTextActionText"),
        "is.workflow.actions.text.combine": _info("Combine Text", "text.append"),
        "is.workflow.actions.text.split": _info("Split Text", "text.justify"),
        "is.workflow.actions.text.replace": _info("Replace Text", "text.badge.xmark", "WFReplaceTextFind", "WFReplaceTextReplace"),
        "is.workflow.actions.detect.text": _info("Get Text from Input", "text.viewfinder"),
        "is.workflow.actions.comment": _info("Comment", "text.quote", "WFCommentActionText"),
        # Variables
        "is.workflow.actions.setvariable": _info("Set Variable", "equal.square", "WFVariableName"),
        "is.workflow.actions.appendvariable": _info("Add to Variable", "equal.square", "WFVariableName"),
        "is.workflow.actions.getvariable": _info("Get Variable", "equal.square", "WFVariableName"),
        "is.workflow.actions.getvalueforkey": _info("Get Dictionary Value", "key", "WFDictionaryKey"),
        # Apps
        "is.workflow.actions.openapp": _info("Open App", "app", "WFAppName"),
        "is.workflow.actions.openurl": _info("Open URL", "link"),
        "is.workflow.actions.runworkflow": _info("Run Shortcut", "square.stack.3d.up", "WFWorkflowName"),
        # Files
        "is.workflow.actions.documentpicker.open": _info("Select File", "doc"),
        "is.workflow.actions.documentpicker.save": _info("Save File", "doc.badge.arrow.up"),
        "is.workflow.actions.file.getlink": _info("Get Link to File", "link"),
        # Clipboard
        "is.workflow.actions.getclipboard": _info("Get Clipboard", "clipboard"),
        "is.workflow.actions.setclipboard": _info("Copy to Clipboard", "doc.on.clipboard"),
        # Web
        "is.workflow.actions.getwebpagecontents": _info("Get Web Page Contents", "globe"),
        "is.workflow.actions.downloadurl": _info("Get Contents of URL", "arrow.down.circle", "WFURL", "WFHTTPMethod"),
        "is.workflow.actions.url": _info("URL", "link", "WFURLActionURL"),
        # Scripting
        "is.workflow.actions.runshellscript": _info("Run Shell Script", "terminal"),
        "is.workflow.actions.runsshscript": _info("Run Script over SSH", "terminal", "WFSSHHost"),
        "is.workflow.actions.delay": _info("Wait", "timer", "WFDelayTime"),
        "is.workflow.actions.number": _info("Number", "number", "WFNumberActionNumber"),
        # Content
        "is.workflow.actions.getitemname": _info("Get Name", "textformat"),
        "is.workflow.actions.getitemtype": _info("Get Type", "info.circle"),
        "is.workflow.actions.properties": _info("Get Details", "list.bullet.rectangle"),
        "is.workflow.actions.filter.images": _info("Find Photos", "photo"),
    }
)


# ============================================================
# Condition Phrase Table
# ============================================================

# WFCondition codes, discovered from live shortcut data:
#   0-5     text relations
#   100-101 existence checks
#   200-203 numeric comparisons
CONDITION_PHRASES: Mapping[int, str] = MappingProxyType(
    {
        0: "is %@",
        1: "is not %@",
        2: "contains %@",
        3: "does not contain %@",
        4: "begins with %@",
        5: "ends with %@",
        100: "has any value",
        101: "does not have any value",
        200: "is greater than %@",
        201: "is greater than or equal to %@",
        202: "is less than %@",
        203: "is less than or equal to %@",
    }
)

DEFAULT_CONDITION = 100

# Comparison operand keys, string operand first
CONDITION_VALUE_KEYS = ("WFConditionalActionString", "WFNumberValue")


def condition_phrase(code: int, value: str | None = None) -> str:
    """Render a condition code as a phrase, e.g. (2, "Notes") → "contains Notes"."""
    template = CONDITION_PHRASES.get(code)
    if template is None:
        return f"condition #{code}"
    if PLACEHOLDER in template:
        return template.replace(PLACEHOLDER, value if value is not None else "?")
    return template


# ============================================================
# Control flow labels
# ============================================================

# Keys are (identifier, ControlFlowMode value)
CONTROL_FLOW_LABELS: Mapping[tuple[str, int], str] = MappingProxyType(
    {
        (CF_CONDITIONAL, 0): "If",
        (CF_CONDITIONAL, 1): "Otherwise",
        (CF_CONDITIONAL, 2): "End If",
        (CF_MENU, 0): "Menu",
        (CF_MENU, 1): "Menu Item",
        (CF_MENU, 2): "End Menu",
        (CF_REPEAT_COUNT, 2): "End Repeat",
        (CF_REPEAT_EACH, 2): "End Repeat",
    }
)


# ============================================================
# Icon fallbacks
# ============================================================

# Evaluated top to bottom; several substrings can match one identifier,
# so the order is significant.
ICON_PATTERNS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("llm", "intelligence"), "sparkles"),
    (("delete",), "trash"),
    (("transcribe",), "waveform"),
    (("record",), "mic"),
    (("audio",), "waveform"),
    (("video",), "video"),
    (("camera",), "camera"),
    (("photo",), "photo"),
    (("image",), "photo"),
    (("calendar",), "calendar"),
    (("reminder",), "checklist"),
    (("note",), "note.text"),
    (("alert",), "exclamationmark.bubble"),
    (("notification",), "bell"),
    (("conditional",), "arrow.triangle.branch"),
    (("repeat",), "repeat"),
    (("text",), "text.alignleft"),
    (("app",), "app"),
    (("mail",), "envelope"),
    (("message",), "message"),
    (("web", "url"), "globe"),
    (("file", "document"), "doc"),
    (("folder",), "folder"),
    (("clipboard",), "clipboard"),
    (("share",), "square.and.arrow.up"),
    (("download",), "arrow.down.circle"),
    (("upload",), "arrow.up.circle"),
    (("location",), "location"),
    (("map",), "map"),
    (("weather",), "cloud.sun"),
    (("music",), "music.note"),
    (("play",), "play"),
    (("pause",), "pause"),
    (("stop",), "stop"),
    (("timer",), "timer"),
    (("alarm",), "alarm"),
    (("health",), "heart"),
    (("workout",), "figure.run"),
    (("home",), "house"),
    (("device",), "iphone"),
    (("bluetooth",), "bluetooth"),
    (("wifi",), "wifi"),
    (("brightness",), "sun.max"),
    (("volume",), "speaker.wave.2"),
    (("flashlight",), "flashlight.on.fill"),
    (("qr",), "qrcode"),
    (("scan",), "barcode.viewfinder"),
    (("translate",), "character.book.closed"),
    (("dictionary",), "character.book.closed"),
    (("calculate",), "function"),
    (("math",), "function"),
    (("script",), "terminal"),
    (("ssh",), "terminal"),
)


def icon_for_pattern(identifier: str) -> str:
    """First ICON_PATTERNS match for identifier, else DEFAULT_ICON."""
    for needles, icon in ICON_PATTERNS:
        if any(needle in identifier for needle in needles):
            return icon
    return DEFAULT_ICON


# ============================================================
# Identifier resolution
# ============================================================


def resolve_identifier(name: str) -> str:
    """
    Resolve an action name to its canonical identifier.

    Accepts:
      - Full identifier: "is.workflow.actions.gettext" → pass through
      - Third-party: "com.apple.mobilenotes.SharingExtension" → pass through
      - Short name: "conditional" → "is.workflow.actions.conditional"
      - Control flow aliases: "choose-from-menu", "repeat-each", ...
    """
    if name.startswith(ACTION_PREFIX):
        return name
    if name in _ALIASES:
        return _ALIASES[name]
    if name and "." not in name:
        return ACTION_PREFIX + name
    return name


def lookup_action(identifier: str) -> ActionInfo | None:
    return ACTION_INFO.get(resolve_identifier(identifier))
