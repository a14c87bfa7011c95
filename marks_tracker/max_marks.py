import logging
from typing import Iterable, List, NamedTuple, Optional, Tuple

from . import config

logger = logging.getLogger(__name__)

REGULAR = "regular"
COMPUTER = "computer"
AI = "ai"

BOARD_EXAM_GRADES = (10, 12)
BOARD_EXAM_SUBJECT_MAX = 100


class MaxMarksConfig(NamedTuple):
    regular: int
    computer: int
    ai: int


# (lowest grade, highest grade, per-role maxima) for term entries
GRADE_BANDS: List[Tuple[int, int, MaxMarksConfig]] = [
    (1, 2, MaxMarksConfig(regular=30, computer=20, ai=0)),
    (3, 4, MaxMarksConfig(regular=50, computer=20, ai=0)),
    (5, 7, MaxMarksConfig(regular=60, computer=20, ai=0)),
    (8, 8, MaxMarksConfig(regular=80, computer=30, ai=0)),
    (9, 9, MaxMarksConfig(regular=80, computer=0, ai=50)),    # computer not offered
    (10, 10, MaxMarksConfig(regular=80, computer=0, ai=50)),
    (11, 12, MaxMarksConfig(regular=80, computer=80, ai=0)),
]

BOARD_EXAM_CONFIG = MaxMarksConfig(
    regular=BOARD_EXAM_SUBJECT_MAX,
    computer=BOARD_EXAM_SUBJECT_MAX,
    ai=BOARD_EXAM_SUBJECT_MAX,
)

# Grades outside 1-12 silently get this policy. Callers passing a bad grade
# are not told; kept as-is pending a product decision.
FALLBACK_CONFIG = MaxMarksConfig(regular=100, computer=100, ai=0)


def max_marks_config(grade: int, is_board_exam: bool = False) -> MaxMarksConfig:
    if is_board_exam and grade in BOARD_EXAM_GRADES:
        return BOARD_EXAM_CONFIG

    for low, high, cfg in GRADE_BANDS:
        if low <= grade <= high:
            return cfg

    logger.debug("No max-marks band for grade %r, using fallback policy", grade)
    return FALLBACK_CONFIG


def role_of(subject: str) -> str:
    if subject == "computer":
        return COMPUTER
    if subject == "ai":
        return AI
    return REGULAR


def max_marks_for(grade: int, role: str, is_board_exam: bool = False) -> int:
    cfg = max_marks_config(grade, is_board_exam)
    if role == COMPUTER:
        return cfg.computer
    if role == AI:
        return cfg.ai
    return cfg.regular


def subject_max_marks(subject: str, grade: int, is_board_exam: bool = False) -> int:
    return max_marks_for(grade, role_of(subject), is_board_exam)


def term_max_marks(subjects: Iterable[str], grade: int, is_board_exam: bool = False) -> int:
    return sum(subject_max_marks(s, grade, is_board_exam) for s in subjects)


def stored_max_marks(grade: int, is_board_exam: bool = False) -> Tuple[int, int]:
    """(computer, ai) maxima to freeze into a new entry."""
    cfg = max_marks_config(grade, is_board_exam)
    return cfg.computer, cfg.ai


def is_board_exam_term(grade: int, term: Optional[int]) -> bool:
    if term is None:
        return False
    return grade in BOARD_EXAM_GRADES and term >= config.BOARD_EXAM_TERM


def expected_max_marks(subject: str, grade: int, term: Optional[int]) -> int:
    """Policy maximum for a subject of an already-stored entry."""
    return subject_max_marks(subject, grade, is_board_exam_term(grade, term))
