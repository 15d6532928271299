#!/usr/bin/env python3
"""
Shortcut summarizer web server: decoded action flows as JSON for renderers.

Start with:
    python cli/server.py
    # Then open http://localhost:8000/docs

Routes:
    GET  /health      → Health check
    POST /summarize   → Base64 .shortcut plist → actions with indent levels
    POST /fetch       → iCloud link → metadata (+ actions)
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import os
import sys
from pathlib import Path

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

# Ensure src/ is importable
_SCRIPT_DIR = Path(__file__).resolve().parent
_SRC_DIR = _SCRIPT_DIR.parent / "src"
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))

from config import SummarizerConfig, get_default_config  # noqa: E402
from errors import ShortcutError  # noqa: E402
from indentation import flow_rows  # noqa: E402
from shortcut_service import ShortcutService  # noqa: E402
from workflow_decoder import decode_workflow  # noqa: E402

app = FastAPI(title="Shortcut Summarizer", version="0.1.0")

# ── Request Models ─────────────────────────────────────────────────────


class SummarizeRequest(BaseModel):
    shortcut_base64: str  # Base64-encoded .shortcut plist
    max_subtitle_length: int | None = None


class FetchRequest(BaseModel):
    link: str  # iCloud share link or bare record ID
    with_actions: bool = True


# ── Dependencies ───────────────────────────────────────────────────────


def get_config() -> SummarizerConfig:
    return get_default_config()


def get_service(config: SummarizerConfig = Depends(get_config)) -> ShortcutService:
    return ShortcutService(config)


def _error(e: ShortcutError) -> JSONResponse:
    return JSONResponse(
        {
            "success": False,
            "error": e.description,
            "reason": e.failure_reason,
            "suggestion": e.recovery_suggestion,
        }
    )


# ── Routes ─────────────────────────────────────────────────────────────


@app.get("/health")
async def health():
    return {"status": "ok", "service": "shortcut-summarizer"}


@app.post("/summarize")
async def summarize(req: SummarizeRequest, config: SummarizerConfig = Depends(get_config)):
    """Decode an uploaded shortcut and return its actions in render order."""
    try:
        data = base64.b64decode(req.shortcut_base64, validate=True)
    except (binascii.Error, ValueError) as e:
        return JSONResponse({"success": False, "error": f"Invalid base64: {e}"})

    if req.max_subtitle_length is not None:
        if req.max_subtitle_length <= 0:
            return JSONResponse(
                {"success": False, "error": "max_subtitle_length must be positive"}
            )
        config = config.with_max_length(req.max_subtitle_length)

    try:
        actions = decode_workflow(data, config)
    except ShortcutError as e:
        return _error(e)
    return JSONResponse({"success": True, "actions": flow_rows(actions)})


@app.post("/fetch")
async def fetch(req: FetchRequest, service: ShortcutService = Depends(get_service)):
    """Fetch a shared shortcut from iCloud."""
    loop = asyncio.get_running_loop()
    try:
        fetched = await loop.run_in_executor(
            None, service.fetch_shortcut, req.link, req.with_actions
        )
    except ShortcutError as e:
        return _error(e)

    result = fetched.to_dict()
    if fetched.actions is not None:
        result["actions"] = flow_rows(fetched.actions)
    result["icon"] = fetched.data.icon
    return JSONResponse({"success": True, "shortcut": result})


# ── Startup ────────────────────────────────────────────────────────────

if __name__ == "__main__":
    import uvicorn

    port = int(os.environ.get("PORT", 8000))
    print(f"\n  Shortcut summarizer starting on http://localhost:{port}")
    print(f"  API docs at http://localhost:{port}/docs\n")
    uvicorn.run(app, host="0.0.0.0", port=port, log_level="info")
