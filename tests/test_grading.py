import math

import pytest

from marks_tracker.grading import (
    clamp_percentage,
    letter_grade,
    nine_scale_grade,
    percentage,
    round_1dp_half_up,
)


@pytest.mark.parametrize("marks, expected", [
    (100, "A+"),
    (90, "A+"),
    (89, "A"),
    (85, "A"),
    (80, "B+"),
    (79, "B"),
    (70, "B"),
    (60, "C"),
    (50, "D"),
    (40, "E"),
    (39, "F"),
    (0, "F"),
])
def test_letter_grade_boundaries(marks, expected):
    assert letter_grade(marks, 100) == expected


@pytest.mark.parametrize("marks", [0, 10, 500])
def test_letter_grade_without_maximum(marks):
    assert letter_grade(marks, 0) == "N/A"


def test_letter_grade_uses_ratio():
    # 27/30 = 90%
    assert letter_grade(27, 30) == "A+"
    # 44/80 = 55%
    assert letter_grade(44, 80) == "D"


def test_letter_grade_out_of_range_lands_in_top_bucket():
    assert letter_grade(150, 100) == "A+"
    assert letter_grade(-5, 100) == "F"


@pytest.mark.parametrize("marks, expected", [
    (100, 9),
    (91, 9),
    (90, 8),
    (81, 8),
    (71, 7),
    (61, 6),
    (51, 5),
    (41, 4),
    (40, 3),
    (33, 3),
    (32, 2),
    (21, 2),
    (20, 1),
    (11, 1),
    (10, 0),
    (0, 0),
])
def test_nine_scale_boundaries(marks, expected):
    assert nine_scale_grade(marks, 100) == expected


def test_nine_scale_without_maximum():
    assert nine_scale_grade(40, 0) == 0


def test_nine_scale_out_of_range():
    assert nine_scale_grade(200, 100) == 9


def test_percentage_is_clamped():
    assert percentage(150, 100) == 100.0
    assert percentage(-10, 100) == 0.0
    assert percentage(30, 60) == 50.0
    assert percentage(30, 0) == 0.0


def test_clamp_percentage_handles_nan():
    assert clamp_percentage(math.nan) == 0.0
    assert clamp_percentage(None) == 0.0


def test_round_1dp_half_up():
    assert round_1dp_half_up(66.65) == 66.7
    assert round_1dp_half_up(12.25) == 12.3
    assert round_1dp_half_up(12.24) == 12.2
