"""Battle save files.

Fixed binary layout (little-endian, same as the C struct the format came from)::

    int32 count_team1, int32 count_team2, int32 active_team
    count_team1 + count_team2 records of:
        char name[101]; 3 pad bytes; int32 hp; int32 item1; int32 item2

Items are stored as catalog indices; -1 (or anything outside the catalog)
means "no item". There is no version field.
"""
from __future__ import annotations
import os
import struct
import tempfile
from pathlib import Path
from typing import List, Optional
from warband.core.errors import SaveFormatError
from warband.core.logging import logger
from warband.core.paths import DEFAULT_SAVE_FILE
from warband.battle.models import SavedBattle, Unit, MAX_NAME
from warband.battle.factory import MIN_ARMY, MAX_ARMY
from warband.data.items import item_index, item_or_none

SAVE_DIR_NAME = ".warband_saves"

HEADER = struct.Struct("<iii")
RECORD = struct.Struct(f"<{MAX_NAME + 1}s3xiii")

def _check_counts(n1: int, n2: int):
    for n in (n1, n2):
        if n < MIN_ARMY or n > MAX_ARMY:
            raise SaveFormatError(f"army size {n} outside {MIN_ARMY}..{MAX_ARMY}")

def _pack_unit(u: Unit) -> bytes:
    raw = u.name.encode("utf-8")[:MAX_NAME]
    return RECORD.pack(raw, int(u.hp), item_index(u.item1), item_index(u.item2))

def _unpack_unit(chunk: bytes) -> Unit:
    raw, hp, idx1, idx2 = RECORD.unpack(chunk)
    name = raw.split(b"\0", 1)[0].decode("utf-8", errors="ignore")
    if hp <= 0:
        raise SaveFormatError(f"unit '{name}' has no health left ({hp})")
    item1 = item_or_none(idx1)
    if item1 is None:
        raise SaveFormatError(f"unit '{name}' has no primary item (index {idx1})")
    return Unit(name=name, item1=item1, item2=item_or_none(idx2), hp=hp)

def encode_battle(saved: SavedBattle) -> bytes:
    n1, n2 = len(saved.army1), len(saved.army2)
    _check_counts(n1, n2)
    if saved.active_team not in (1, 2):
        raise SaveFormatError(f"active team {saved.active_team} is not 1 or 2")
    parts = [HEADER.pack(n1, n2, saved.active_team)]
    parts += [_pack_unit(u) for u in saved.army1]
    parts += [_pack_unit(u) for u in saved.army2]
    return b"".join(parts)

def decode_battle(data: bytes) -> SavedBattle:
    if len(data) < HEADER.size:
        raise SaveFormatError("short read in header")
    n1, n2, active = HEADER.unpack_from(data, 0)
    _check_counts(n1, n2)
    if active not in (1, 2):
        raise SaveFormatError(f"active team {active} is not 1 or 2")
    need = HEADER.size + (n1 + n2) * RECORD.size
    if len(data) < need:
        raise SaveFormatError(f"short read: {len(data)} of {need} bytes")
    units: List[Unit] = []
    off = HEADER.size
    for _ in range(n1 + n2):
        units.append(_unpack_unit(data[off:off + RECORD.size]))
        off += RECORD.size
    return SavedBattle(army1=units[:n1], army2=units[n1:], active_team=active)

def _save_dir() -> Path:
    home = Path(os.path.expanduser("~"))
    path = home / SAVE_DIR_NAME
    path.mkdir(parents=True, exist_ok=True)
    return path

def default_save_path(filename: str = DEFAULT_SAVE_FILE) -> Path:
    return _save_dir() / filename

def save_battle(saved: SavedBattle, path: Optional[Path] = None) -> Optional[Path]:
    """Write the save atomically (temp file + rename). Returns None on failure."""
    path = Path(path) if path else default_save_path()
    try:
        data = encode_battle(saved)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=path.name, suffix=".tmp", dir=str(path.parent))
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.replace(tmp, path)
        except OSError:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise
    except (SaveFormatError, OSError) as e:
        logger.error("BattleSaveFailed", file=str(path), error=str(e))
        return None
    logger.info("BattleSaved", file=str(path), army1=len(saved.army1), army2=len(saved.army2))
    return path

def load_battle(path: Optional[Path] = None) -> Optional[SavedBattle]:
    path = Path(path) if path else default_save_path()
    if not path.exists():
        logger.warn("BattleLoadFailed", file=str(path), error="missing")
        return None
    try:
        saved = decode_battle(path.read_bytes())
    except (SaveFormatError, OSError) as e:
        logger.error("BattleLoadFailed", file=str(path), error=str(e))
        return None
    logger.info("BattleLoaded", file=str(path), army1=len(saved.army1), army2=len(saved.army2))
    return saved

__all__ = ["SavedBattle","encode_battle","decode_battle","save_battle","load_battle","default_save_path","HEADER","RECORD"]
