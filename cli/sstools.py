#!/usr/bin/env python3
"""
Shortcut summarizer tools.

Usage:
    python cli/sstools.py fetch https://www.icloud.com/shortcuts/abc123 --pretty
    python cli/sstools.py fetch abc123 --actions
    python cli/sstools.py summarize my_shortcut.shortcut
    python cli/sstools.py summarize my_shortcut.shortcut --json --max-length 40
    python cli/sstools.py glyph 59446

Commands:
    fetch       Fetch shortcut metadata from iCloud and print it as JSON
    summarize   Print the action flow of a local .shortcut / plist / JSON file
    glyph       Look up the SF Symbol for an icon glyph ID

Options:
    --config PATH        Summarizer config (default: configs/summarizer.yaml)
    -v, --verbose        Debug logging on stderr

Progress messages go to stderr; results go to stdout.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

# Ensure src/ is importable
_SCRIPT_DIR = Path(__file__).resolve().parent
_SRC_DIR = _SCRIPT_DIR.parent / "src"
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))

from config import get_default_config, load_config  # noqa: E402
from errors import ShortcutError  # noqa: E402
from glyphs import symbol_for  # noqa: E402
from indentation import flow_rows, render_flow  # noqa: E402
from shortcut_service import ShortcutService, extract_shortcut_id  # noqa: E402
from workflow_decoder import load_workflow_file  # noqa: E402


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sstools",
        description="Inspect Apple Shortcuts: fetch metadata, summarize actions, look up glyphs",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Summarizer config YAML (default: configs/summarizer.yaml)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log requests and skipped entries")
    sub = parser.add_subparsers(dest="command", required=True)

    fetch = sub.add_parser("fetch", help="Fetch shortcut data from iCloud and output as JSON")
    fetch.add_argument(
        "shortcut",
        help="Shortcut URL or ID (e.g. https://www.icloud.com/shortcuts/abc123 or just abc123)",
    )
    fetch.add_argument("-p", "--pretty", action="store_true", help="Pretty print the JSON output")
    fetch.add_argument("-a", "--actions", action="store_true", help="Include workflow actions in output")

    summarize = sub.add_parser("summarize", help="Summarize a local shortcut file")
    summarize.add_argument("file", help="Path to a .shortcut, .plist or .json file")
    summarize.add_argument(
        "--max-length",
        type=int,
        default=None,
        help="Truncate subtitles to N characters (overrides config)",
    )
    summarize.add_argument("--json", action="store_true", help="Print actions as JSON rows")

    glyph = sub.add_parser("glyph", help="Look up the SF Symbol for a glyph ID")
    glyph.add_argument("glyph_id", type=int, help="Icon glyph ID, e.g. 59446")

    return parser


def _cmd_fetch(args, config) -> int:
    shortcut_id = extract_shortcut_id(args.shortcut)
    if not shortcut_id:
        print(f"Error: invalid shortcut URL or ID: {args.shortcut}", file=sys.stderr)
        return 1

    print(f"Fetching shortcut {shortcut_id}...", file=sys.stderr)
    service = ShortcutService(config)
    if args.actions:
        print("Fetching workflow actions...", file=sys.stderr)
    fetched = service.fetch_shortcut(args.shortcut, with_actions=args.actions)

    output = fetched.to_dict()
    if fetched.actions is not None:
        output["actions"] = flow_rows(fetched.actions)

    if args.pretty:
        print(json.dumps(output, indent=2, sort_keys=True, ensure_ascii=False))
    else:
        print(json.dumps(output, ensure_ascii=False))
    print("Done.", file=sys.stderr)
    return 0


def _cmd_summarize(args, config) -> int:
    path = Path(args.file)
    if not path.exists():
        print(f"Error: file not found: {path}", file=sys.stderr)
        return 1
    if args.max_length is not None:
        if args.max_length <= 0:
            print("Error: --max-length must be positive", file=sys.stderr)
            return 1
        config = config.with_max_length(args.max_length)

    actions = load_workflow_file(path, config)
    print(f"{path.name}: {len(actions)} actions", file=sys.stderr)

    if args.json:
        print(json.dumps(flow_rows(actions), indent=2, ensure_ascii=False))
    else:
        sys.stdout.write(render_flow(actions))
    return 0


def _cmd_glyph(args, _config) -> int:
    symbol = symbol_for(args.glyph_id)
    if symbol is None:
        print(f"Unknown glyph: {args.glyph_id}", file=sys.stderr)
        return 1
    print(symbol)
    return 0


_COMMANDS = {
    "fetch": _cmd_fetch,
    "summarize": _cmd_summarize,
    "glyph": _cmd_glyph,
}


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    try:
        config = load_config(args.config) if args.config else get_default_config()
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        return _COMMANDS[args.command](args, config)
    except ShortcutError as e:
        print(f"Error: {e}", file=sys.stderr)
        if e.recovery_suggestion:
            print(f"  {e.recovery_suggestion}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
