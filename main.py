#!/usr/bin/env python3
"""
Warband - tactical grid battles

Thin wrapper around the menu-driven launcher in the warband package:
- Battle rules, turn state machine and computer opponent (warband.battle)
- Item catalog (warband.data)
- Save files and settings (warband.system)
- Terminal UI (warband.ui)

To run: python main.py
"""

from warband.cli import run

if __name__ == "__main__":
    run()
