"""Marks tracking: max-marks policy, grading, board exams and aggregation."""

from .aggregation import (
    GradeAggregate,
    SubjectStat,
    grade_aggregates,
    subject_percentage,
    subject_statistics,
)
from .board_exam import compute_board_exam
from .entries import AcademicEntry, BoardExamResult, build_entry
from .errors import MarksTrackerError, PermissionDeniedError, ValidationError
from .grading import letter_grade, nine_scale_grade
from .max_marks import max_marks_for, term_max_marks

__all__ = [
    "AcademicEntry",
    "BoardExamResult",
    "GradeAggregate",
    "SubjectStat",
    "MarksTrackerError",
    "PermissionDeniedError",
    "ValidationError",
    "build_entry",
    "compute_board_exam",
    "grade_aggregates",
    "letter_grade",
    "max_marks_for",
    "nine_scale_grade",
    "subject_percentage",
    "subject_statistics",
    "term_max_marks",
]
