"""
Error classes for clearer exception sources.
"""
from __future__ import annotations
from enum import IntEnum

class WarbandError(Exception):
    pass

class DataLoadError(WarbandError):
    def __init__(self, path: str, detail: str):
        super().__init__(f"Failed to load {path}: {detail}")
        self.path = path
        self.detail = detail

class SaveFormatError(WarbandError):
    """Raised while decoding a save file that does not match the record layout."""

class SetupErrorCode(IntEnum):
    UNIT_COUNT = -1   # army size outside 1..5
    ITEM_COUNT = -2   # primary item missing
    WRONG_ITEM = -3   # unknown catalog entry
    SLOTS = -4        # slot budget exceeded

class SetupError(WarbandError):
    def __init__(self, code: SetupErrorCode, detail: str):
        super().__init__(f"Setup failed ({int(code)}): {detail}")
        self.code = code
        self.detail = detail
