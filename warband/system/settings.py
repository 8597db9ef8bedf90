from __future__ import annotations
import json, os
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Callable, List
from warband.core.logging import logger
from warband.core.paths import DEFAULT_SAVE_FILE

SETTINGS_FILENAME = ".warband_settings.json"

@dataclass
class SettingsData:
    log_level: str = "INFO"        # DEBUG / INFO / WARN / ERROR
    debug: bool = False            # Verbose battle/debug prints
    ai_delay: float = 0.3          # Seconds between computer moves (pacing only)
    max_rounds: int = 200          # AI battles; negative = unlimited
    move_then_attack: bool = True  # A unit may move and then attack in one turn
    save_file: str = DEFAULT_SAVE_FILE

    def normalize(self):
        if self.log_level not in {"DEBUG","INFO","WARN","ERROR"}:
            self.log_level = "INFO"
        try:
            self.ai_delay = max(0.0, float(self.ai_delay))
        except (TypeError, ValueError):
            self.ai_delay = 0.3
        try:
            self.max_rounds = int(self.max_rounds)
        except (TypeError, ValueError):
            self.max_rounds = 200
        self.debug = bool(self.debug)
        self.move_then_attack = bool(self.move_then_attack)
        if not isinstance(self.save_file, str) or not self.save_file.strip():
            self.save_file = DEFAULT_SAVE_FILE

class Settings:
    def __init__(self, data: SettingsData, path: Path):
        self.data = data
        self.path = path
        self._listeners: List[Callable[[SettingsData], None]] = []

    @classmethod
    def _resolve_path(cls) -> Path:
        home = Path(os.path.expanduser("~"))
        if home.is_dir() and os.access(home, os.W_OK):
            return home / SETTINGS_FILENAME
        return Path.cwd() / SETTINGS_FILENAME

    @classmethod
    def load(cls, path: Path | None = None) -> "Settings":
        path = path or cls._resolve_path()
        if path.exists():
            try:
                raw = json.loads(path.read_text(encoding="utf-8"))
                # Backfill missing fields (migration safe)
                field_names = {f.name for f in fields(SettingsData)}
                data = SettingsData(**{k: v for k, v in raw.items() if k in field_names})
                data.normalize()
                logger.debug("SettingsLoaded", path=str(path))
                return cls(data, path)
            except (OSError, ValueError, TypeError, AttributeError) as e:
                logger.warn("SettingsParseFailedUsingDefaults", path=str(path), error=str(e))
        data = SettingsData()
        data.normalize()
        return cls(data, path)

    def save(self):
        try:
            self.path.write_text(json.dumps(asdict(self.data), indent=2), encoding="utf-8")
            logger.debug("SettingsSaved", path=str(self.path))
        except OSError as e:
            logger.error("SettingsSaveFailed", error=str(e))

    def on_change(self, fn: Callable[[SettingsData], None]):
        self._listeners.append(fn)

    def update(self, **changes):
        for k, v in changes.items():
            if hasattr(self.data, k):
                setattr(self.data, k, v)
        self.data.normalize()
        self.save()
        self._notify()

    def _notify(self):
        for fn in self._listeners:
            fn(self.data)

    def apply_log_level(self):
        # If debug flag is off, quiet down INFO spam by raising threshold to WARN
        lvl: str = self.data.log_level
        if not self.data.debug and lvl in {"INFO","DEBUG"}:
            logger.set_level("WARN")
        else:
            logger.set_level(lvl)  # type: ignore[arg-type]
