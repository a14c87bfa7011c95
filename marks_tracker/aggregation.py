import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

import numpy as np
import pandas as pd

from . import config
from .entries import AcademicEntry, latest
from .grading import clamp_percentage, nine_scale_grade, percentage
from .max_marks import expected_max_marks
from .subjects import display_name

logger = logging.getLogger(__name__)

TERM1 = 1
TERM2 = 2


@dataclass(frozen=True)
class SubjectStat:
    subject_name: str
    average: float
    highest: float
    lowest: float
    count: int


@dataclass(frozen=True)
class GradeAggregate:
    term1_percentage: Optional[float]
    term2_percentage: Optional[float]
    combined_overall_percentage: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "term1Percentage": self.term1_percentage,
            "term2Percentage": self.term2_percentage,
            "combinedOverallPercentage": self.combined_overall_percentage,
        }


@dataclass(frozen=True)
class EntrySummary:
    average_percentage: float
    highest_percentage: float
    lowest_percentage: float
    total_entries: int


@dataclass(frozen=True)
class SubjectGradeCard:
    subject_name: str
    grade: int
    marks: str
    grade_level: int
    section: str
    term: int
    timestamp: int


@dataclass(frozen=True)
class CombinedGradeEntries:
    term1: Optional[AcademicEntry]
    term2: Optional[AcademicEntry]
    combined_total: int
    combined_average: float


# ------------------------
# Per-subject maxima with fallback
# ------------------------

def _stored_subject_max(entry: AcademicEntry, subject: str) -> int:
    if subject == "computer":
        return entry.computer_max_marks
    if subject == "ai":
        return entry.ai_max_marks
    return entry.max_marks_per_subject


def subject_max_marks(entry: AcademicEntry, subject: str) -> int:
    """
    Maximum marks for one subject of a stored entry. Stored values that are
    0, equal to the whole-term maximum, or above the sanity limit were
    written wrongly and are replaced by the policy value for the entry's
    grade and term.
    """
    max_marks = _stored_subject_max(entry, subject)

    if (max_marks == 0
            or max_marks == entry.term_max_marks
            or max_marks > config.SUBJECT_MAX_SANITY_LIMIT):
        fallback = expected_max_marks(subject, entry.grade, entry.term)
        logger.debug(
            "Stored max %s for %s (grade %s, term %s) rejected, using %s",
            max_marks, subject, entry.grade, entry.term, fallback,
        )
        max_marks = fallback

    return max_marks


def subject_marks(entry: AcademicEntry, subject: str) -> Optional[Tuple[int, int]]:
    """(marks, max marks) for a subject, None when not taken or unscorable."""
    marks = entry.subjects.get(subject)
    if marks is None:
        return None
    max_marks = subject_max_marks(entry, subject)
    if max_marks <= 0:
        return None
    return marks, max_marks


def subject_percentage(entry: AcademicEntry, subject: str) -> float:
    marks = entry.subjects.get(subject)
    if marks is None:
        return 0.0
    return percentage(marks, subject_max_marks(entry, subject))


# ------------------------
# Filtering and ordering
# ------------------------

def filter_entries(entries: Iterable[AcademicEntry],
                   grade: Optional[int] = None,
                   term: Optional[int] = None,
                   section: Optional[str] = None) -> List[AcademicEntry]:
    out = []
    for entry in entries:
        if grade is not None and entry.grade != grade:
            continue
        if term is not None and entry.term != term:
            continue
        if section is not None and (entry.section or "") != section:
            continue
        out.append(entry)
    return out


SORT_FIELDS = {
    "grade": lambda e: e.grade,
    "term": lambda e: e.term,
    "termPercentage": lambda e: e.term_percentage,
    "timestamp": lambda e: e.timestamp,
}


def sort_entries(entries: Iterable[AcademicEntry],
                 field: str = "timestamp",
                 descending: bool = True) -> List[AcademicEntry]:
    if field not in SORT_FIELDS:
        raise ValueError(f"Cannot sort entries by {field!r}. Expected one of: {sorted(SORT_FIELDS)}.")
    return sorted(entries, key=SORT_FIELDS[field], reverse=descending)


# ------------------------
# Statistics
# ------------------------

def subject_statistics(entries: Iterable[AcademicEntry]) -> List[SubjectStat]:
    """Average / highest / lowest subject percentage, sorted by subject name."""
    rows = []
    for entry in entries:
        for subject, marks in entry.subjects.items():
            if marks is None:
                continue
            rows.append((subject, subject_percentage(entry, subject)))

    if not rows:
        return []

    df = pd.DataFrame(rows, columns=["subject", "percentage"])
    grouped = df.groupby("subject")["percentage"].agg(["mean", "max", "min", "count"])

    stats = [
        SubjectStat(
            subject_name=display_name(subject),
            average=clamp_percentage(row["mean"]),
            highest=clamp_percentage(row["max"]),
            lowest=clamp_percentage(row["min"]),
            count=int(row["count"]),
        )
        for subject, row in grouped.iterrows()
    ]
    stats.sort(key=lambda s: s.subject_name.casefold())
    return stats


def _term_mean(means: pd.Series, grade: int, term: int) -> Optional[float]:
    if (grade, term) not in means.index:
        return None
    return clamp_percentage(float(means[(grade, term)]))


def _combined(term1: Optional[float], term2: Optional[float]) -> float:
    present = [p for p in (term1, term2) if p is not None]
    if not present:
        return 0.0
    return clamp_percentage(float(np.mean(present)))


def grade_aggregates(entries: Iterable[AcademicEntry]) -> Dict[int, GradeAggregate]:
    """
    Term 1 / term 2 percentage per grade (mean of stored term percentages
    when several entries share a grade and term) and their combined mean.
    """
    df = pd.DataFrame(
        [(e.grade, e.term, e.term_percentage) for e in entries],
        columns=["grade", "term", "percentage"],
    )
    if df.empty:
        return {}

    means = df[df["term"].isin([TERM1, TERM2])].groupby(["grade", "term"])["percentage"].mean()

    aggregates: Dict[int, GradeAggregate] = {}
    for grade in sorted(df["grade"].unique()):
        t1 = _term_mean(means, grade, TERM1)
        t2 = _term_mean(means, grade, TERM2)
        aggregates[int(grade)] = GradeAggregate(
            term1_percentage=t1,
            term2_percentage=t2,
            combined_overall_percentage=_combined(t1, t2),
        )
    return aggregates


def entry_summary(entries: Iterable[AcademicEntry]) -> EntrySummary:
    pcts = np.array([e.term_percentage for e in entries], dtype=float)
    if pcts.size == 0:
        return EntrySummary(0.0, 0.0, 0.0, 0)

    return EntrySummary(
        average_percentage=clamp_percentage(float(pcts.mean())),
        highest_percentage=clamp_percentage(float(pcts.max())),
        lowest_percentage=clamp_percentage(float(pcts.min())),
        total_entries=int(pcts.size),
    )


def subject_grade_cards(entries: Iterable[AcademicEntry]) -> List[SubjectGradeCard]:
    """One 9-scale card per subject per entry, newest first."""
    cards = []
    for entry in entries:
        section = entry.section or "N/A"
        for subject in entry.subjects:
            pair = subject_marks(entry, subject)
            if pair is None:
                continue
            marks, max_marks = pair
            cards.append(SubjectGradeCard(
                subject_name=display_name(subject),
                grade=nine_scale_grade(marks, max_marks),
                marks=f"{marks}/{max_marks}",
                grade_level=entry.grade,
                section=section,
                term=entry.term,
                timestamp=entry.timestamp,
            ))

    cards.sort(key=lambda c: c.timestamp, reverse=True)
    return cards


def combined_entries_by_grade(entries: Iterable[AcademicEntry], grade: int) -> CombinedGradeEntries:
    """Latest term 1 and term 2 entries of a grade, with their combined figures."""
    of_grade = filter_entries(entries, grade=grade)
    term1 = latest(filter_entries(of_grade, term=TERM1))
    term2 = latest(filter_entries(of_grade, term=TERM2))

    present = [e for e in (term1, term2) if e is not None]
    return CombinedGradeEntries(
        term1=term1,
        term2=term2,
        combined_total=sum(e.term_total_marks for e in present),
        combined_average=_combined(
            term1.term_percentage if term1 else None,
            term2.term_percentage if term2 else None,
        ),
    )
