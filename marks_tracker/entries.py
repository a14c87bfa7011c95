import logging
import numbers
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from . import config
from .errors import ValidationError
from .grading import clamp_percentage, letter_grade, nine_scale_grade, percentage
from .max_marks import (
    BOARD_EXAM_GRADES,
    REGULAR,
    is_board_exam_term,
    max_marks_for,
    stored_max_marks,
    subject_max_marks,
    term_max_marks,
)
from .subjects import SENIOR_GRADE, STREAM_SUBJECTS, display_name, valid_subjects

logger = logging.getLogger(__name__)

MIN_GRADE = 1
MAX_GRADE = 12
REGULAR_TERMS = (1, 2)


@dataclass(frozen=True)
class AcademicEntry:
    """
    One submission for one (grade, term). The max-marks policy in force at
    creation is frozen alongside the derived totals so later policy changes
    do not alter how historical entries read.
    """
    grade: int
    term: int
    subjects: Dict[str, int]
    term_max_marks: int
    computer_max_marks: int
    ai_max_marks: int
    max_marks_per_subject: int
    term_total_marks: int
    term_percentage: float
    grade_text: str
    subjects9: Dict[str, int] = field(default_factory=dict)
    stream: Optional[str] = None
    subgroup: Optional[str] = None
    timestamp: int = 0

    @property
    def section(self) -> Optional[str]:
        return self.stream or self.subgroup

    def marks_for(self, subject: str) -> Optional[int]:
        return self.subjects.get(subject)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "grade": self.grade,
            "term": self.term,
            "stream": self.stream,
            "subgroup": self.subgroup,
            "subjects": dict(self.subjects),
            "subjects9": dict(self.subjects9),
            "termMaxMarks": self.term_max_marks,
            "computerMaxMarks": self.computer_max_marks,
            "aiMaxMarks": self.ai_max_marks,
            "maxMarksPerSubject": self.max_marks_per_subject,
            "termTotalMarks": self.term_total_marks,
            "termPercentage": self.term_percentage,
            "gradeText": self.grade_text,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AcademicEntry":
        subjects = {k: int(v) for k, v in (data.get("subjects") or {}).items() if v is not None}
        subjects9 = {k: int(v) for k, v in (data.get("subjects9") or {}).items() if v is not None}
        return cls(
            grade=int(data["grade"]),
            term=int(data["term"]),
            stream=data.get("stream") or None,
            subgroup=data.get("subgroup") or None,
            subjects=subjects,
            subjects9=subjects9,
            term_max_marks=int(data.get("termMaxMarks", 0)),
            computer_max_marks=int(data.get("computerMaxMarks", 0)),
            ai_max_marks=int(data.get("aiMaxMarks", 0)),
            max_marks_per_subject=int(data.get("maxMarksPerSubject", 0)),
            term_total_marks=int(data.get("termTotalMarks", 0)),
            term_percentage=float(data.get("termPercentage", 0)),
            grade_text=str(data.get("gradeText", "")),
            timestamp=int(data.get("timestamp", 0)),
        )


@dataclass(frozen=True)
class BoardExamResult:
    board_exam_total: int
    max_marks: int
    percentage: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "boardExamTotal": self.board_exam_total,
            "maxMarks": self.max_marks,
            "percentage": self.percentage,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BoardExamResult":
        total = int(data["boardExamTotal"])
        max_marks = int(data["maxMarks"])
        pct = data.get("percentage")
        return cls(
            board_exam_total=total,
            max_marks=max_marks,
            percentage=clamp_percentage(float(pct)) if pct is not None else percentage(total, max_marks),
        )


# ------------------------
# Validation
# ------------------------

def validate_context(grade: int,
                     stream: Optional[str] = None,
                     subgroup: Optional[str] = None) -> None:
    if isinstance(grade, bool) or not isinstance(grade, int) or not MIN_GRADE <= grade <= MAX_GRADE:
        raise ValidationError(f"Grade must be between {MIN_GRADE} and {MAX_GRADE} (got {grade!r}).")

    if grade >= SENIOR_GRADE:
        if not stream or not subgroup:
            raise ValidationError(f"Stream and subgroup are required for grade {grade}.")
        if stream not in STREAM_SUBJECTS:
            raise ValidationError(
                f"Unknown stream {stream!r}. Expected one of: {sorted(STREAM_SUBJECTS)}."
            )
        if subgroup not in STREAM_SUBJECTS[stream]:
            raise ValidationError(
                f"Unknown subgroup {subgroup!r} for stream {stream}. "
                f"Expected one of: {sorted(STREAM_SUBJECTS[stream])}."
            )


def validate_term(grade: int, term: int) -> None:
    if isinstance(term, bool) or not isinstance(term, int):
        raise ValidationError(f"Term must be an integer (got {term!r}).")
    if term in REGULAR_TERMS:
        return
    if grade in BOARD_EXAM_GRADES and term == config.BOARD_EXAM_TERM:
        return
    raise ValidationError(f"Term {term} is not valid for grade {grade}.")


def validate_marks(marks: Mapping[str, Optional[int]],
                   grade: int,
                   stream: Optional[str] = None,
                   subgroup: Optional[str] = None,
                   is_board_exam: bool = False) -> Dict[str, int]:
    """
    Check every mark against the subjects offered in the context and their
    maxima. Returns the marks with unset subjects dropped.
    """
    allowed = valid_subjects(grade, stream, subgroup)
    cleaned: Dict[str, int] = {}

    for subject, mark in marks.items():
        if mark is None:
            continue
        if subject not in allowed:
            raise ValidationError(
                f"{display_name(subject)} is not offered for grade {grade}"
                + (f" ({stream} / {subgroup})" if stream else "") + ".",
                subject=subject,
            )
        bound = subject_max_marks(subject, grade, is_board_exam)
        if isinstance(mark, bool) or not isinstance(mark, numbers.Integral) or not 0 <= mark <= bound:
            raise ValidationError(
                f"Please enter valid marks (0-{bound}) for {display_name(subject)}.",
                subject=subject,
                bound=bound,
            )
        cleaned[subject] = int(mark)

    if not cleaned:
        raise ValidationError("Please enter marks for at least one subject.")
    return cleaned


# ------------------------
# Builder
# ------------------------

def build_entry(grade: int,
                term: int,
                marks: Mapping[str, Optional[int]],
                stream: Optional[str] = None,
                subgroup: Optional[str] = None,
                timestamp: Optional[int] = None) -> AcademicEntry:
    """
    Validate a submission and derive the complete entry record.
    Raises ValidationError before anything is built.
    """
    validate_context(grade, stream, subgroup)
    validate_term(grade, term)
    if grade < SENIOR_GRADE:
        stream = subgroup = None

    is_board_exam = is_board_exam_term(grade, term)
    subjects = validate_marks(marks, grade, stream, subgroup, is_board_exam)

    max_total = term_max_marks(subjects, grade, is_board_exam)
    total = sum(subjects.values())
    computer_max, ai_max = stored_max_marks(grade, is_board_exam)
    logger.debug("Grade %s term %s: %s/%s marks", grade, term, total, max_total)

    subjects9 = {
        subject: nine_scale_grade(mark, subject_max_marks(subject, grade, is_board_exam))
        for subject, mark in subjects.items()
    }

    return AcademicEntry(
        grade=grade,
        term=term,
        stream=stream,
        subgroup=subgroup,
        subjects=subjects,
        subjects9=subjects9,
        term_max_marks=max_total,
        computer_max_marks=computer_max,
        ai_max_marks=ai_max,
        max_marks_per_subject=max_marks_for(grade, REGULAR, is_board_exam),
        term_total_marks=total,
        term_percentage=percentage(total, max_total),
        grade_text=letter_grade(total, max_total),
        timestamp=time.time_ns() if timestamp is None else timestamp,
    )


def latest(entries: List[AcademicEntry]) -> Optional[AcademicEntry]:
    if not entries:
        return None
    return max(entries, key=lambda e: e.timestamp)
