"""Centralized path resolution for the shortcut summarizer.

All modules should import paths from here rather than computing them locally.
This module resolves paths relative to the project root (parent of src/).
"""

from __future__ import annotations

from pathlib import Path

# Project root: parent of the src/ directory
PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Data and reference directories
REFERENCES_DIR = PROJECT_ROOT / "references"
CONFIGS_DIR = PROJECT_ROOT / "configs"

# Key reference files
GLYPH_MAPPINGS_PATH = REFERENCES_DIR / "glyph_mappings.json"

# Configuration
SUMMARIZER_CONFIG_PATH = CONFIGS_DIR / "summarizer.yaml"
