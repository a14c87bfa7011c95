import logging
import time
from dataclasses import replace
from typing import Any, Dict, List, Optional, Protocol

from .entries import AcademicEntry, BoardExamResult

logger = logging.getLogger(__name__)

ADMIN = "admin"
USER = "user"
GUEST = "guest"
ROLES = (ADMIN, USER, GUEST)


class EntryStore(Protocol):
    """Storage and identity operations the grading core depends on."""

    def fetch_entries(self, identity: str) -> List[AcademicEntry]:
        ...

    def append_entry(self, identity: str, entry: AcademicEntry) -> AcademicEntry:
        ...

    def fetch_board_exam_result(self, identity: str) -> Optional[BoardExamResult]:
        ...

    def store_board_exam_result(self, identity: str, result: BoardExamResult) -> None:
        ...

    def assign_role(self, identity: str, role: str) -> None:
        ...

    def role_of(self, identity: str) -> str:
        ...

    def has_roles(self) -> bool:
        ...

    def export_data(self) -> Dict[str, Any]:
        ...

    def import_data(self, data: Dict[str, Any]) -> int:
        ...


class InMemoryStore:
    """
    Process-local store keyed by identity. Entries are append-only, board
    exam results are overwritten.
    """

    def __init__(self, clock=time.time_ns):
        self._clock = clock
        self._entries: Dict[str, List[AcademicEntry]] = {}
        self._board_exams: Dict[str, BoardExamResult] = {}
        self._roles: Dict[str, str] = {}

    def fetch_entries(self, identity: str) -> List[AcademicEntry]:
        return list(self._entries.get(identity, []))

    def append_entry(self, identity: str, entry: AcademicEntry) -> AcademicEntry:
        stored = replace(entry, timestamp=self._clock())
        self._entries.setdefault(identity, []).append(stored)
        logger.info("Stored grade %s term %s entry for %s", stored.grade, stored.term, identity)
        return stored

    def fetch_board_exam_result(self, identity: str) -> Optional[BoardExamResult]:
        return self._board_exams.get(identity)

    def store_board_exam_result(self, identity: str, result: BoardExamResult) -> None:
        self._board_exams[identity] = result
        logger.info("Stored board exam result %s/%s for %s",
                    result.board_exam_total, result.max_marks, identity)

    def assign_role(self, identity: str, role: str) -> None:
        if role not in ROLES:
            raise ValueError(f"Unknown role {role!r}. Expected one of: {list(ROLES)}.")
        self._roles[identity] = role

    def role_of(self, identity: str) -> str:
        return self._roles.get(identity, GUEST)

    def has_roles(self) -> bool:
        return bool(self._roles)

    # ------------------------
    # Export / import
    # ------------------------

    def export_data(self) -> Dict[str, Any]:
        return {
            "academicEntries": {
                "academicEntries": [
                    [identity, [e.to_dict() for e in entries]]
                    for identity, entries in self._entries.items()
                ],
                "boardExamResults": [
                    [identity, result.to_dict()]
                    for identity, result in self._board_exams.items()
                ],
            }
        }

    def import_data(self, data: Dict[str, Any]) -> int:
        """Replace entries and board exam results of every identity in data."""
        section = data.get("academicEntries", {})
        if not isinstance(section, dict):
            raise TypeError(f"academicEntries must be an object, not {type(section).__name__}")
        entries = {
            identity: [AcademicEntry.from_dict(e) for e in rows]
            for identity, rows in section.get("academicEntries") or []
        }
        board_exams = {
            identity: BoardExamResult.from_dict(result)
            for identity, result in section.get("boardExamResults") or []
        }

        # parsed in full first so a bad record leaves the store untouched
        self._entries.update(entries)
        self._board_exams.update(board_exams)
        return sum(len(rows) for rows in entries.values())
