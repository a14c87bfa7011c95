import pytest

from marks_tracker.board_exam import (
    compute_board_exam,
    grade10_board_exam,
    grade10_core_total,
    grade12_board_exam,
)
from marks_tracker.errors import ValidationError


def _grade10(ai):
    return {"english": 80, "kannada": 75, "math": 40, "science": 60, "social": 50, "ai": ai}


def test_ai_replaces_weakest_core_subject():
    assert grade10_core_total(40, 60, 50, 70) == 180

    result = grade10_board_exam(_grade10(ai=70))
    assert result.board_exam_total == 335
    assert result.max_marks == 500
    assert result.percentage == 67.0


def test_ai_not_used_when_not_better():
    assert grade10_core_total(40, 60, 50, 30) == 150
    assert grade10_board_exam(_grade10(ai=30)).board_exam_total == 305


def test_tie_keeps_core_subject():
    assert grade10_core_total(40, 60, 50, 40) == 150


def test_missing_subjects_count_as_zero():
    result = grade10_board_exam({"english": 100, "kannada": 100})
    assert result.board_exam_total == 200
    assert result.percentage == 40.0


def test_grade12_plain_sum():
    marks = {"physics": 90, "chemistry": 80, "math": 70, "biology": 60, "english": 50, "pe": None}
    result = grade12_board_exam(marks)
    assert result.board_exam_total == 350
    assert result.max_marks == 500
    assert result.percentage == 70.0


def test_grade12_without_marks():
    result = grade12_board_exam({})
    assert result.max_marks == 0
    assert result.percentage == 0.0


def test_dispatch():
    assert compute_board_exam(10, _grade10(ai=70)).board_exam_total == 335
    assert compute_board_exam(12, {"english": 50}).max_marks == 100
    with pytest.raises(ValidationError):
        compute_board_exam(9, {"english": 50})
