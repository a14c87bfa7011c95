"""
Board exam totals.

Grade 10: AI can stand in for the weakest of Math, Science and Social, but
only when it is strictly higher. The total always covers five subjects
(English, Kannada and the three best core subjects) at 100 marks each.

Grade 12: plain sum of the subjects taken, 100 marks each.

Marks are expected to be validated before they reach this module.
"""
from typing import Mapping, Optional

from .entries import BoardExamResult
from .errors import ValidationError
from .grading import percentage
from .max_marks import BOARD_EXAM_SUBJECT_MAX

GRADE10_CORE = ("math", "science", "social")
GRADE10_FIXED = ("english", "kannada")
GRADE10_SUBJECTS = GRADE10_FIXED + GRADE10_CORE + ("ai",)
GRADE10_MAX_MARKS = (len(GRADE10_FIXED) + len(GRADE10_CORE)) * BOARD_EXAM_SUBJECT_MAX


def grade10_core_total(math: int, science: int, social: int, ai: int) -> int:
    core_total = math + science + social
    min_core = min(math, science, social)

    if ai > min_core:
        return core_total - min_core + ai
    return core_total


def grade10_board_exam(marks: Mapping[str, Optional[int]]) -> BoardExamResult:
    m = {s: marks.get(s) or 0 for s in GRADE10_SUBJECTS}

    core_total = grade10_core_total(m["math"], m["science"], m["social"], m["ai"])
    total = m["english"] + m["kannada"] + core_total

    return BoardExamResult(
        board_exam_total=total,
        max_marks=GRADE10_MAX_MARKS,
        percentage=percentage(total, GRADE10_MAX_MARKS),
    )


def grade12_board_exam(marks: Mapping[str, Optional[int]]) -> BoardExamResult:
    taken = [mark for mark in marks.values() if mark is not None]
    total = sum(taken)
    max_marks = BOARD_EXAM_SUBJECT_MAX * len(taken)

    return BoardExamResult(
        board_exam_total=total,
        max_marks=max_marks,
        percentage=percentage(total, max_marks),
    )


def compute_board_exam(grade: int, marks: Mapping[str, Optional[int]]) -> BoardExamResult:
    if grade == 10:
        return grade10_board_exam(marks)
    if grade == 12:
        return grade12_board_exam(marks)
    raise ValidationError(f"Board exams are only recorded for grades 10 and 12 (got {grade}).")
