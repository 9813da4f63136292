"""
Centralized configuration for Snake Teams.
"""

from __future__ import annotations

import os
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _parse_int(env_var: str, default: int) -> int:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _parse_float(env_var: str, default: float) -> float:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _parse_bool(env_var: str, default: bool) -> bool:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


def _parse_choice(env_var: str, default: str, choices: set[str]) -> str:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    value = raw.strip().lower()
    return value if value in choices else default


# Duty store: "sqlite" (DB_PATH) or "json" (DUTY_FILE)
DUTY_STORE_BACKEND = _parse_choice("DUTY_STORE_BACKEND", "sqlite", {"sqlite", "json"})
DB_PATH = os.getenv("DB_PATH", "snake_teams.db")
DUTY_FILE = os.getenv("DUTY_FILE", os.path.join(os.getcwd(), "duty.json"))

# Include per-team rating totals for rated and ranked rosters
SHOW_TOTALS = _parse_bool("SHOW_TOTALS", True)

SHUFFLER_SETTINGS: dict[str, Any] = {
    # Attempts made by "shuffle again" to find a composition not shown yet
    "new_composition_attempts": _parse_int("NEW_COMPOSITION_ATTEMPTS", 80),
    # Chance per attempt of block-shuffling the strength order
    "perturb_chance": _parse_float("PERTURB_CHANCE", 0.5),
    # Chance of shuffling tied ratings before a rated reshuffle
    "tie_shuffle_chance": _parse_float("TIE_SHUFFLE_CHANCE", 0.7),
}
