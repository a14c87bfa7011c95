import logging
from typing import Any, Dict, List, Mapping, Optional

from .aggregation import (
    CombinedGradeEntries,
    GradeAggregate,
    SubjectStat,
    combined_entries_by_grade,
    filter_entries,
    grade_aggregates,
    subject_statistics,
)
from .board_exam import GRADE10_SUBJECTS, compute_board_exam
from .entries import (
    AcademicEntry,
    BoardExamResult,
    build_entry,
    validate_context,
    validate_marks,
)
from .errors import PermissionDeniedError, ValidationError
from .max_marks import BOARD_EXAM_GRADES
from .store import ADMIN, USER, EntryStore
from .subjects import display_name

logger = logging.getLogger(__name__)


class MarksService:
    """Per-caller operations over a store."""

    def __init__(self, store: EntryStore):
        self.store = store

    # ------------------------
    # Writes
    # ------------------------

    def submit_entry(self,
                     identity: str,
                     grade: int,
                     term: int,
                     marks: Mapping[str, Optional[int]],
                     stream: Optional[str] = None,
                     subgroup: Optional[str] = None) -> AcademicEntry:
        entry = build_entry(grade, term, marks, stream=stream, subgroup=subgroup)
        return self.store.append_entry(identity, entry)

    def submit_board_exam(self,
                          identity: str,
                          grade: int,
                          marks: Mapping[str, Optional[int]],
                          stream: Optional[str] = None,
                          subgroup: Optional[str] = None) -> BoardExamResult:
        if grade not in BOARD_EXAM_GRADES:
            raise ValidationError(f"Board exams are only recorded for grades 10 and 12 (got {grade}).")
        validate_context(grade, stream, subgroup)
        cleaned = validate_marks(marks, grade, stream, subgroup, is_board_exam=True)

        if grade == 10:
            missing = [s for s in GRADE10_SUBJECTS if s not in cleaned]
            if missing:
                names = ", ".join(display_name(s) for s in missing)
                raise ValidationError(f"Please fill in all subject marks (missing: {names}).",
                                      subject=missing[0])

        result = compute_board_exam(grade, cleaned)
        self.store.store_board_exam_result(identity, result)
        return result

    # ------------------------
    # Reads
    # ------------------------

    def entries(self, identity: str) -> List[AcademicEntry]:
        return self.store.fetch_entries(identity)

    def entries_for(self, identity: str, grade: int, term: Optional[int] = None) -> List[AcademicEntry]:
        return filter_entries(self.entries(identity), grade=grade, term=term)

    def board_exam_result(self, identity: str) -> Optional[BoardExamResult]:
        return self.store.fetch_board_exam_result(identity)

    def subject_statistics(self, identity: str) -> List[SubjectStat]:
        return subject_statistics(self.entries(identity))

    def grade_aggregates(self, identity: str) -> Dict[int, GradeAggregate]:
        return grade_aggregates(self.entries(identity))

    def combined_for_grade(self, identity: str, grade: int) -> CombinedGradeEntries:
        return combined_entries_by_grade(self.entries(identity), grade)

    # ------------------------
    # Roles, export and import
    # ------------------------

    def is_admin(self, identity: str) -> bool:
        return self.store.role_of(identity) == ADMIN

    def initialize_access(self, identity: str) -> str:
        """The first identity seen by an empty store becomes admin."""
        if not self.store.has_roles():
            self.store.assign_role(identity, ADMIN)
        elif self.store.role_of(identity) not in (ADMIN, USER):
            self.store.assign_role(identity, USER)
        return self.store.role_of(identity)

    def assign_role(self, caller: str, identity: str, role: str) -> None:
        if not self.is_admin(caller):
            raise PermissionDeniedError("Only administrators can assign roles.")
        self.store.assign_role(identity, role)

    def export_data(self) -> Dict[str, Any]:
        return self.store.export_data()

    def import_data(self, caller: str, data: Dict[str, Any]) -> int:
        if not self.is_admin(caller):
            logger.warning("Import rejected for non-admin %s", caller)
            raise PermissionDeniedError("Only administrators can import data.")
        try:
            count = self.store.import_data(data)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ValidationError(f"Import file is not in the expected format: {e}") from e
        logger.info("Imported %s entries", count)
        return count
