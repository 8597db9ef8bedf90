"""
Key input abstraction for cross-platform arrow / WASD / Enter navigation,
plus the mapping from raw keys to the battle's abstract intents.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional
import sys
from warband.battle.turn import Intent

class Key(Enum):
    UP = auto()
    DOWN = auto()
    LEFT = auto()
    RIGHT = auto()
    ENTER = auto()
    ESC = auto()
    SAVE = auto()
    QUIT = auto()
    OTHER = auto()

@dataclass
class KeyEvent:
    key: Key
    raw: str | bytes | None = None

_CHAR_KEYS = {
    "w": Key.UP, "s": Key.DOWN, "a": Key.LEFT, "d": Key.RIGHT,
    "p": Key.SAVE, "q": Key.QUIT,
}

def key_for_char(ch: str) -> Key:
    if ch in ("\r", "\n"):
        return Key.ENTER
    if ch == "\x1b":
        return Key.ESC
    return _CHAR_KEYS.get(ch.lower(), Key.OTHER)

def _win_read() -> KeyEvent:
    import msvcrt
    ch = msvcrt.getch()
    # Arrow keys: first byte is 0xe0 or 0x00 then second is code
    if ch in (b"\x00", b"\xe0"):
        nxt = msvcrt.getch()
        mapping = {
            b"H": Key.UP,
            b"P": Key.DOWN,
            b"K": Key.LEFT,
            b"M": Key.RIGHT
        }
        return KeyEvent(mapping.get(nxt, Key.OTHER), ch + nxt)
    return KeyEvent(key_for_char(ch.decode("latin-1")), ch)

def _unix_read() -> KeyEvent:
    import termios, tty
    fd = sys.stdin.fileno()
    old = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        ch = sys.stdin.read(1)
        if ch == "\x1b":  # possible escape sequence
            seq = sys.stdin.read(1)
            if seq == "[":
                seq2 = sys.stdin.read(1)
                mapping = {
                    "A": Key.UP,
                    "B": Key.DOWN,
                    "C": Key.RIGHT,
                    "D": Key.LEFT
                }
                return KeyEvent(mapping.get(seq2, Key.OTHER), "\x1b[" + seq2)
            return KeyEvent(Key.ESC, ch)
        return KeyEvent(key_for_char(ch), ch)
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old)

def _line_read() -> KeyEvent:
    line = sys.stdin.readline()
    if not line:
        return KeyEvent(Key.QUIT, None)
    line = line.rstrip("\n")
    if line == "":
        return KeyEvent(Key.ENTER, line)
    if line.lower() == "esc":
        return KeyEvent(Key.ESC, line)
    return KeyEvent(key_for_char(line[0]), line)

def read_key() -> KeyEvent:
    if sys.platform.startswith("win"):
        return _win_read()
    if not sys.stdin.isatty():
        # piped input: one key per line
        return _line_read()
    return _unix_read()

_INTENTS = {
    Key.UP: Intent.UP,
    Key.DOWN: Intent.DOWN,
    Key.LEFT: Intent.LEFT,
    Key.RIGHT: Intent.RIGHT,
    Key.ENTER: Intent.CONFIRM,
    Key.ESC: Intent.CANCEL,
    Key.SAVE: Intent.SAVE,
    Key.QUIT: Intent.QUIT,
}

def to_intent(ev: KeyEvent) -> Optional[Intent]:
    return _INTENTS.get(ev.key)

def read_intent() -> Intent:
    """Block until a key that means something to the battle is pressed."""
    while True:
        intent = to_intent(read_key())
        if intent is not None:
            return intent
