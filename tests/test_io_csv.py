import io
import json

import pandas as pd
import pytest

from marks_tracker.entries import build_entry
from marks_tracker.errors import ValidationError
from marks_tracker.io_csv import (
    board_exams_frame,
    entries_frame,
    from_json,
    parse_marks,
    read_csv_upload,
    to_csv,
    to_json,
    validate_marks_csv,
)
from marks_tracker.store import InMemoryStore
from marks_tracker.board_exam import grade10_board_exam


def _export():
    store = InMemoryStore(clock=lambda: 1_700_000_000_000_000_000)
    store.append_entry("alice", build_entry(11, 1, {"english": 60, "pe": 70}, stream="Science", subgroup="PCMB"))
    store.store_board_exam_result("alice", grade10_board_exam(
        {"english": 80, "kannada": 75, "math": 40, "science": 60, "social": 50, "ai": 70}
    ))
    return store.export_data()


def test_marks_sheet_upload():
    upload = io.StringIO("Subject , MARK\nMath,45\nbusiness studies,30\n,\nai,12\n")
    df = validate_marks_csv(read_csv_upload(upload))
    assert parse_marks(df) == {"math": 45, "businessStudies": 30, "ai": 12}


def test_marks_sheet_missing_columns():
    with pytest.raises(ValidationError, match="Missing columns"):
        validate_marks_csv(read_csv_upload(io.StringIO("Subject,Score\nMath,4\n")))


def test_marks_sheet_rejects_unknown_subject_and_fractions():
    with pytest.raises(ValidationError, match="Unknown subject"):
        parse_marks(pd.DataFrame({"Subject": ["Latin"], "Marks": [40]}))
    with pytest.raises(ValidationError, match="whole number"):
        parse_marks(pd.DataFrame({"Subject": ["Math"], "Marks": [40.5]}))


def test_json_round_trip_keeps_every_field():
    data = _export()
    restored = from_json(to_json(data))
    assert restored == data

    entry = restored["academicEntries"]["academicEntries"][0][1][0]
    for name in ("grade", "term", "stream", "subgroup", "subjects", "subjects9", "termMaxMarks",
                 "computerMaxMarks", "aiMaxMarks", "maxMarksPerSubject", "termTotalMarks",
                 "termPercentage", "gradeText", "timestamp"):
        assert name in entry


def test_json_digit_strings_become_integers():
    text = json.dumps({
        "academicEntries": {
            "academicEntries": [["alice", [{"grade": "5", "term": "1", "gradeText": "1",
                                            "subjects": {"math": "30"}}]]],
            "boardExamResults": [["alice", {"boardExamTotal": "335", "maxMarks": "500"}]],
        }
    })
    data = from_json(text)
    entry = data["academicEntries"]["academicEntries"][0][1][0]
    assert entry["grade"] == 5
    assert entry["subjects"] == {"math": 30}
    assert entry["gradeText"] == "1"
    assert data["academicEntries"]["boardExamResults"][0][1]["maxMarks"] == 500


def test_json_rejects_garbage():
    with pytest.raises(ValidationError):
        from_json("not json")
    with pytest.raises(ValidationError):
        from_json("[]")


def test_json_keeps_non_ascii_digit_strings():
    data = from_json('{"academicEntries": {"term": "\\u00b2", "grade": "\\u0663", "timestamp": "12"}}')
    assert data["academicEntries"] == {"term": "\u00b2", "grade": "\u0663", "timestamp": 12}


def test_entries_frame():
    df = entries_frame(_export())
    row = df.iloc[0]
    assert row["Date"] == "2023-11-14"
    assert row["Stream"] == "Science"
    assert row["English"] == 60
    assert row["PE"] == 70
    assert row["Math"] == ""
    assert row["Total"] == 130
    assert row["Percentage"] == "81.2%"


def test_csv_sections():
    text = to_csv(_export())
    assert text.startswith("Academic Entries\n")
    assert "Board Exam Results" in text
    assert "335,500,67.0%" in text
    assert board_exams_frame(_export()).shape == (1, 3)


def test_csv_without_board_exams():
    empty = InMemoryStore().export_data()
    assert "Board Exam Results" not in to_csv(empty)
