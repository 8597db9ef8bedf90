"""Global team metadata: identifiers, colors & labels.

Provides:
  TEAMS: the two team tags
  TEAM_COLORS_HEX: mapping team -> hex color string (#RRGGBB)
  TEAM_GLYPHS: single character drawn for each team's units
"""
from __future__ import annotations
from typing import Dict, Literal, Tuple

Team = Literal[1, 2]
TEAMS: Tuple[Team, Team] = (1, 2)

TEAM_COLORS_HEX: Dict[int, str] = {
    1: "#3B82F6",  # blue army
    2: "#EF4444",  # red army
}

TEAM_GLYPHS: Dict[int, str] = {1: "A", 2: "B"}

def other_team(team: int) -> Team:
    return 2 if team == 1 else 1

def team_label(team: int) -> str:
    return f"Army {team}"
