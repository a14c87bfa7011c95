import dataclasses

import numpy as np
import pytest

from marks_tracker.entries import AcademicEntry, BoardExamResult, build_entry, latest
from marks_tracker.errors import ValidationError

GRADE5 = {"math": 50, "english": 45, "hindi": 30, "science": 60, "social": 40, "kannada": 55, "computer": 18}


def test_build_regular_entry():
    entry = build_entry(5, 1, GRADE5, timestamp=1)

    assert entry.term_total_marks == 298
    assert entry.term_max_marks == 6 * 60 + 20
    assert entry.term_percentage == pytest.approx(298 * 100 / 380)
    assert entry.grade_text == "B"
    assert entry.computer_max_marks == 20
    assert entry.ai_max_marks == 0
    assert entry.max_marks_per_subject == 60
    assert entry.subjects9["computer"] == 8
    assert entry.subjects9["hindi"] == 4
    assert entry.stream is None and entry.subgroup is None


def test_partial_marks_only_count_taken_subjects():
    entry = build_entry(3, 2, {"math": 50, "english": None}, timestamp=1)
    assert entry.subjects == {"math": 50}
    assert entry.term_max_marks == 50
    assert entry.term_percentage == 100.0
    assert entry.grade_text == "A+"


def test_entries_are_immutable():
    entry = build_entry(5, 1, GRADE5, timestamp=1)
    with pytest.raises(dataclasses.FrozenInstanceError):
        entry.term_total_marks = 0


def test_same_input_same_derived_fields():
    first = build_entry(5, 1, GRADE5)
    second = build_entry(5, 1, GRADE5)

    for name in ("term_total_marks", "term_max_marks", "term_percentage", "grade_text", "subjects9"):
        assert getattr(first, name) == getattr(second, name)
    assert dataclasses.replace(first, timestamp=0) == dataclasses.replace(second, timestamp=0)


def test_senior_entry_with_electives():
    marks = {"computer": 70, "economics": 60, "businessStudies": 65, "accountancy": 72,
             "english": 68, "pe": 80, "math": 40}
    entry = build_entry(11, 1, marks, stream="Commerce", subgroup="CEBA", timestamp=1)

    assert entry.term_max_marks == 7 * 80
    assert entry.term_total_marks == sum(marks.values())
    assert entry.stream == "Commerce"
    assert entry.section == "Commerce"


def test_commerce_accepts_math_elective():
    entry = build_entry(12, 1, {"statistics": 40, "math": 40}, stream="Commerce", subgroup="SEBA", timestamp=1)
    assert entry.term_max_marks == 160

    with pytest.raises(ValidationError) as exc:
        build_entry(12, 1, {"physics": 40, "statistics": 40}, stream="Science", subgroup="PCMB")
    assert exc.value.subject == "statistics"


def test_grade12_board_entry_uses_board_maxima():
    marks = {"physics": 95, "chemistry": 90, "math": 100, "psychology": 85, "english": 80}
    entry = build_entry(12, 8, marks, stream="Science", subgroup="PCM Psych", timestamp=1)
    assert entry.term_max_marks == 500
    assert entry.computer_max_marks == 100
    assert entry.max_marks_per_subject == 100


@pytest.mark.parametrize("grade", [0, 13, -2])
def test_rejects_grade_out_of_range(grade):
    with pytest.raises(ValidationError):
        build_entry(grade, 1, {"math": 1})


def test_senior_grades_need_stream_and_subgroup():
    with pytest.raises(ValidationError, match="Stream and subgroup"):
        build_entry(11, 1, {"english": 50})
    with pytest.raises(ValidationError, match="subgroup"):
        build_entry(11, 1, {"english": 50}, stream="Science")
    with pytest.raises(ValidationError, match="Unknown stream"):
        build_entry(11, 1, {"english": 50}, stream="Arts", subgroup="PCMB")
    with pytest.raises(ValidationError, match="Unknown subgroup"):
        build_entry(11, 1, {"english": 50}, stream="Science", subgroup="CEBA")


def test_rejects_subject_not_offered():
    with pytest.raises(ValidationError) as exc:
        build_entry(9, 1, {"computer": 10})
    assert exc.value.subject == "computer"


@pytest.mark.parametrize("mark", [-1, 61, 2.5, "40", True])
def test_rejects_marks_outside_bound(mark):
    with pytest.raises(ValidationError) as exc:
        build_entry(5, 1, {"math": mark})
    assert exc.value.subject == "math"
    assert exc.value.bound == 60


def test_accepts_numpy_integer_marks():
    entry = build_entry(5, 1, {"math": np.int64(30)}, timestamp=1)
    assert entry.subjects["math"] == 30
    assert type(entry.subjects["math"]) is int
    assert entry.to_dict()["subjects"] == {"math": 30}


def test_bound_is_inclusive():
    entry = build_entry(5, 1, {"math": 60, "computer": 20}, timestamp=1)
    assert entry.term_percentage == 100.0


def test_rejects_empty_marks():
    with pytest.raises(ValidationError):
        build_entry(5, 1, {"math": None})


def test_rejects_board_term_for_other_grades():
    with pytest.raises(ValidationError):
        build_entry(9, 8, {"math": 10})
    with pytest.raises(ValidationError):
        build_entry(5, 3, {"math": 10})


def test_dict_round_trip_keeps_frozen_fields():
    entry = build_entry(9, 2, {"math": 70, "ai": 45}, timestamp=123)
    data = entry.to_dict()

    assert data["aiMaxMarks"] == 50
    assert data["computerMaxMarks"] == 0
    assert data["gradeText"] == entry.grade_text
    assert AcademicEntry.from_dict(data) == entry


def test_board_exam_result_from_dict_derives_missing_percentage():
    result = BoardExamResult.from_dict({"boardExamTotal": 250, "maxMarks": 500})
    assert result.percentage == 50.0


def test_board_exam_result_from_dict_clamps_percentage():
    high = BoardExamResult.from_dict({"boardExamTotal": 250, "maxMarks": 500, "percentage": 150})
    low = BoardExamResult.from_dict({"boardExamTotal": 0, "maxMarks": 500, "percentage": -5})
    assert high.percentage == 100.0
    assert low.percentage == 0.0


def test_latest():
    old = build_entry(5, 1, {"math": 10}, timestamp=1)
    new = build_entry(5, 1, {"math": 20}, timestamp=2)
    assert latest([new, old]) is new
    assert latest([]) is None
