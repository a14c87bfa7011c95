from decimal import Decimal, ROUND_HALF_UP
from typing import List, Tuple

import numpy as np

# ------------------------
# Core logic
# ------------------------

LETTER_THRESHOLDS: List[Tuple[float, str]] = [
    (90, "A+"),
    (85, "A"),
    (80, "B+"),
    (70, "B"),
    (60, "C"),
    (50, "D"),
    (40, "E"),
]
LETTER_FLOOR = "F"
LETTER_NOT_AVAILABLE = "N/A"

# Bands 1-4 are 10/12/8/8 points wide, 5-9 are uniform 10-point bands
NINE_SCALE_THRESHOLDS: List[Tuple[float, int]] = [
    (91, 9),
    (81, 8),
    (71, 7),
    (61, 6),
    (51, 5),
    (41, 4),
    (33, 3),
    (21, 2),
    (11, 1),
]


def round_1dp_half_up(x: float) -> float:
    return float(Decimal(str(x)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def clamp_percentage(value: float) -> float:
    if value is None or np.isnan(value):
        return 0.0
    return float(np.clip(value, 0.0, 100.0))


def raw_percentage(marks: float, max_marks: float) -> float:
    """Unclamped marks * 100 / max; 0 when there is no maximum."""
    if max_marks is None or max_marks <= 0:
        return 0.0
    return marks * 100.0 / max_marks


def percentage(marks: float, max_marks: float) -> float:
    return clamp_percentage(raw_percentage(marks, max_marks))


def letter_grade_for_percentage(pct: float) -> str:
    for threshold, letter in LETTER_THRESHOLDS:
        if pct >= threshold:
            return letter
    return LETTER_FLOOR


def nine_scale_for_percentage(pct: float) -> int:
    for threshold, grade in NINE_SCALE_THRESHOLDS:
        if pct >= threshold:
            return grade
    return 0


def letter_grade(marks: float, max_marks: float) -> str:
    """
    Letter grade from raw marks. The ratio is not clamped, so corrupted
    marks above the maximum still land in the top bucket.
    """
    if max_marks is None or max_marks <= 0:
        return LETTER_NOT_AVAILABLE
    return letter_grade_for_percentage(raw_percentage(marks, max_marks))


def nine_scale_grade(marks: float, max_marks: float) -> int:
    if max_marks is None or max_marks <= 0:
        return 0
    return nine_scale_for_percentage(raw_percentage(marks, max_marks))
