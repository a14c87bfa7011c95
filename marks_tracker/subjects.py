from typing import Dict, List, Optional

# ------------------------
# Subject catalogue
# ------------------------

SUBJECT_DISPLAY_NAMES: Dict[str, str] = {
    "math": "Math",
    "english": "English",
    "hindi": "Hindi",
    "evs": "EVS",
    "science": "Science",
    "social": "Social",
    "kannada": "Kannada",
    "computer": "Computer",
    "ai": "AI",
    "physics": "Physics",
    "chemistry": "Chemistry",
    "biology": "Biology",
    "economics": "Economics",
    "businessStudies": "Business Studies",
    "accountancy": "Accountancy",
    "statistics": "Statistics",
    "management": "Management",
    "psychology": "Psychology",
    "pe": "PE",
}

SUBJECT_KEYS: List[str] = list(SUBJECT_DISPLAY_NAMES)

_PRIMARY = ["math", "english", "hindi", "evs", "computer"]
_LOWER = ["math", "english", "hindi", "science", "social", "computer"]
_MIDDLE = ["math", "english", "hindi", "science", "social", "kannada", "computer"]
_SECONDARY = ["math", "english", "science", "social", "kannada", "ai"]

GRADE_SUBJECTS: Dict[int, List[str]] = {
    1: _PRIMARY,
    2: _PRIMARY,
    3: _LOWER,
    4: _LOWER,
    5: _MIDDLE,
    6: _MIDDLE,
    7: _MIDDLE,
    8: _MIDDLE,
    9: _SECONDARY,
    10: _SECONDARY,
}

# Grades 11-12: English is compulsory in every subgroup
STREAM_SUBJECTS: Dict[str, Dict[str, List[str]]] = {
    "Science": {
        "PCM Psych": ["physics", "chemistry", "math", "psychology", "english"],
        "PCMB": ["physics", "chemistry", "biology", "math", "english"],
        "PCMC": ["physics", "chemistry", "math", "computer", "english"],
    },
    "Commerce": {
        "CEBA": ["computer", "economics", "businessStudies", "accountancy", "english"],
        "SEBA": ["statistics", "economics", "businessStudies", "accountancy", "english"],
        "MSBA": ["management", "statistics", "businessStudies", "accountancy", "english"],
    },
}

# stream -> electives; None applies to every stream
ELECTIVES: Dict[Optional[str], List[str]] = {
    None: ["pe"],
    "Commerce": ["math"],
}

SENIOR_GRADE = 11


def display_name(subject: str) -> str:
    return SUBJECT_DISPLAY_NAMES.get(subject, subject)


def subject_key(name: str) -> Optional[str]:
    """Resolve a backend key or a display name (any case) to a subject key."""
    cleaned = str(name).strip()
    if cleaned in SUBJECT_DISPLAY_NAMES:
        return cleaned
    lowered = cleaned.lower()
    for key, label in SUBJECT_DISPLAY_NAMES.items():
        if lowered in (key.lower(), label.lower()):
            return key
    return None


def streams() -> List[str]:
    return list(STREAM_SUBJECTS)


def subgroups(stream: str) -> List[str]:
    return list(STREAM_SUBJECTS.get(stream, {}))


def electives_for(stream: Optional[str]) -> List[str]:
    electives = list(ELECTIVES[None])
    if stream:
        electives.extend(ELECTIVES.get(stream, []))
    return electives


def compulsory_subjects(grade: int,
                        stream: Optional[str] = None,
                        subgroup: Optional[str] = None) -> List[str]:
    """Base subject list for a grade, or for a stream/subgroup at grade 11+."""
    if grade >= SENIOR_GRADE:
        return list(STREAM_SUBJECTS.get(stream or "", {}).get(subgroup or "", []))
    return list(GRADE_SUBJECTS.get(grade, []))


def valid_subjects(grade: int,
                   stream: Optional[str] = None,
                   subgroup: Optional[str] = None) -> List[str]:
    """Compulsory subjects plus any electives the context allows."""
    subjects = compulsory_subjects(grade, stream, subgroup)
    if grade >= SENIOR_GRADE and subjects:
        for elective in electives_for(stream):
            if elective not in subjects:
                subjects.append(elective)
    return subjects
