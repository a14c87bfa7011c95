import io
import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import pandas as pd

from .errors import ValidationError
from .subjects import SUBJECT_DISPLAY_NAMES, SUBJECT_KEYS, subject_key

# Values under these keys stay strings when digit strings are coerced back
TEXT_FIELDS = {"stream", "subgroup", "gradeText"}

# ------------------------
# Marks sheet upload (UI-side)
# ------------------------

def _normalise_cols(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    df.columns = [str(c).strip().lower() for c in df.columns]
    # allow singular "mark"
    if "mark" in df.columns and "marks" not in df.columns:
        df = df.rename(columns={"mark": "marks"})
    return df

def read_csv_upload(uploaded_file) -> pd.DataFrame:
    df = pd.read_csv(uploaded_file)
    return _normalise_cols(df)

def validate_marks_csv(df: pd.DataFrame) -> pd.DataFrame:
    required = {"subject", "marks"}
    missing = required - set(df.columns)
    if missing:
        raise ValidationError(f"Missing columns: {sorted(missing)}. Expected: Subject, Marks.")
    out = df[["subject", "marks"]].copy()
    out = out.rename(columns={"subject": "Subject", "marks": "Marks"})
    return out

def parse_marks(df: pd.DataFrame) -> Dict[str, int]:
    """Subject -> marks; blank rows are skipped, unknown subjects rejected."""
    marks = {}
    for _, row in df.iterrows():
        name = row.get("Subject")
        value = row.get("Marks")
        if pd.isna(name) or pd.isna(value):
            continue
        key = subject_key(name)
        if key is None:
            raise ValidationError(f"Unknown subject {name!r} in marks sheet.", subject=str(name))
        number = float(value)
        if not number.is_integer():
            raise ValidationError(f"Marks for {name} must be a whole number (got {value}).", subject=key)
        marks[key] = int(number)
    return marks


# ------------------------
# Export / import
# ------------------------

def to_json(data: Dict[str, Any]) -> str:
    return json.dumps(data, indent=2)

def _coerce_digits(obj: Dict[str, Any]) -> Dict[str, Any]:
    out = {}
    for key, value in obj.items():
        if key not in TEXT_FIELDS and isinstance(value, str) and value.isascii() and value.isdecimal():
            value = int(value)
        out[key] = value
    return out

def from_json(text: str) -> Dict[str, Any]:
    """
    Parse an export file. Integers written as digit strings by older
    exports are read back as integers.
    """
    try:
        data = json.loads(text, object_hook=_coerce_digits)
    except ValueError as e:
        raise ValidationError(f"Import file is not valid JSON: {e}") from e
    if not isinstance(data, dict) or "academicEntries" not in data:
        raise ValidationError("Import file has no academicEntries section.")
    return data

def _format_date(timestamp_ns: int) -> str:
    return datetime.fromtimestamp(timestamp_ns / 1e9, tz=timezone.utc).strftime("%Y-%m-%d")

def _fmt_optional(value: Optional[Any]) -> Any:
    return "" if value is None else value

def entries_frame(data: Dict[str, Any]) -> pd.DataFrame:
    """One row per exported entry, one column per subject."""
    rows = []
    for _identity, entries in data["academicEntries"]["academicEntries"]:
        for entry in entries:
            row = {
                "Date": _format_date(int(entry["timestamp"])),
                "Grade": entry["grade"],
                "Term": entry["term"],
                "Stream": _fmt_optional(entry.get("stream")),
                "Subgroup": _fmt_optional(entry.get("subgroup")),
            }
            subjects = entry.get("subjects") or {}
            for key in SUBJECT_KEYS:
                row[SUBJECT_DISPLAY_NAMES[key]] = _fmt_optional(subjects.get(key))
            row["Total"] = entry["termTotalMarks"]
            row["Max Marks"] = entry["termMaxMarks"]
            row["Percentage"] = f"{float(entry['termPercentage']):.1f}%"
            rows.append(row)

    columns = (["Date", "Grade", "Term", "Stream", "Subgroup"]
               + [SUBJECT_DISPLAY_NAMES[k] for k in SUBJECT_KEYS]
               + ["Total", "Max Marks", "Percentage"])
    return pd.DataFrame(rows, columns=columns)

def board_exams_frame(data: Dict[str, Any]) -> pd.DataFrame:
    rows = [
        {
            "Total": result["boardExamTotal"],
            "Max Marks": result["maxMarks"],
            "Percentage": f"{float(result['percentage']):.1f}%",
        }
        for _identity, result in data["academicEntries"]["boardExamResults"]
    ]
    return pd.DataFrame(rows, columns=["Total", "Max Marks", "Percentage"])

def to_csv(data: Dict[str, Any]) -> str:
    buf = io.StringIO()
    buf.write("Academic Entries\n")
    entries_frame(data).to_csv(buf, index=False)

    board = board_exams_frame(data)
    if not board.empty:
        buf.write("\nBoard Exam Results\n")
        board.to_csv(buf, index=False)
    return buf.getvalue()
