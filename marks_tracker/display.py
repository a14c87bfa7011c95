"""Presentation helpers. Classification lives in grading.py; nothing here feeds back into it."""
from typing import Optional

from . import config
from .grading import clamp_percentage, round_1dp_half_up


def format_percent(value: float, decimals: Optional[int] = None) -> str:
    if decimals is None:
        decimals = config.PERCENT_DECIMALS
    clamped = clamp_percentage(value)
    if decimals == 1:
        clamped = round_1dp_half_up(clamped)
    return f"{clamped:.{decimals}f}"


def letter_badge_variant(letter: str) -> str:
    # C and D share the outline tier on badges only
    if letter in ("A+", "A"):
        return "default"
    if letter in ("B+", "B"):
        return "secondary"
    if letter in ("C", "D"):
        return "outline"
    return "destructive"


BADGE_COLOURS = {
    "default": "#16a34a",
    "secondary": "#2563eb",
    "outline": "#f59e0b",
    "destructive": "#dc2626",
}

NINE_SCALE_COLOURS = {
    9: "#16a34a",
    8: "#22c55e",
    7: "#3b82f6",
    6: "#60a5fa",
    5: "#eab308",
    4: "#f97316",
    3: "#ea580c",
    2: "#ef4444",
    1: "#dc2626",
}


def nine_scale_colour(grade: int) -> str:
    return NINE_SCALE_COLOURS.get(min(grade, 9), "#6b7280")


def percent_colour(pct: float) -> str:
    if pct >= 90:
        return "#22c55e"
    if pct >= 80:
        return "#3b82f6"
    if pct >= 70:
        return "#eab308"
    if pct >= 60:
        return "#f97316"
    return "#ef4444"
