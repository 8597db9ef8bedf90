"""
Centralized path helpers.
"""
from __future__ import annotations
from pathlib import Path

# This file lives at warband/core/paths.py
PACKAGE = Path(__file__).resolve().parents[1]
ASSETS = PACKAGE / "assets"
ITEMS = ASSETS / "items"
CATALOG = ITEMS / "catalog.json"
DEFAULT_SAVE_FILE = "savefile.dat"
