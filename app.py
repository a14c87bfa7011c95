import logging

import numpy as np
import pandas as pd
import streamlit as st

from marks_tracker import config
from marks_tracker.aggregation import (
    entry_summary,
    filter_entries,
    sort_entries,
    subject_grade_cards,
    subject_statistics,
)
from marks_tracker.display import (
    BADGE_COLOURS,
    format_percent,
    letter_badge_variant,
    nine_scale_colour,
)
from marks_tracker.errors import MarksTrackerError
from marks_tracker.io_csv import (
    from_json,
    parse_marks,
    read_csv_upload,
    to_csv,
    to_json,
    validate_marks_csv,
)
from marks_tracker.max_marks import BOARD_EXAM_GRADES, is_board_exam_term, subject_max_marks, term_max_marks
from marks_tracker.service import MarksService
from marks_tracker.store import InMemoryStore
from marks_tracker.subjects import (
    SENIOR_GRADE,
    compulsory_subjects,
    display_name,
    electives_for,
    streams,
    subgroups,
)

logging.basicConfig(level=config.LOG_LEVEL)

# ------------------------
# Streamlit UI
# ------------------------

st.set_page_config(
    page_title="Marks Tracker | Percentages, Letter & 9-Scale Grades",
    page_icon="📘",
    layout="wide",
)

if "service" not in st.session_state:
    st.session_state["service"] = MarksService(InMemoryStore())

service: MarksService = st.session_state["service"]
identity = config.DEFAULT_IDENTITY
role = service.initialize_access(identity)

st.title("📘 Marks Tracker")
st.write(
    "Record your subject marks for each grade and term. Percentages, letter grades "
    "and 9-scale grades are worked out from the grade-wise maximum marks."
)

tab_add, tab_progress, tab_subjects, tab_nine, tab_data = st.tabs(
    ["Add marks", "Progress", "Subject analysis", "9-scale grades", "Data"]
)

# ------------------------
# Add marks
# ------------------------

with tab_add:
    st.subheader("1. Choose grade and term")

    c1, c2 = st.columns(2)
    with c1:
        grade = st.selectbox("Grade", list(range(1, 13)), format_func=lambda g: f"Grade {g}")
    term_options = {"Term 1": 1, "Term 2": 2}
    if grade in BOARD_EXAM_GRADES:
        term_options["Board Exam"] = config.BOARD_EXAM_TERM
    with c2:
        term_label = st.selectbox("Term", list(term_options))
    term = term_options[term_label]
    board_exam = is_board_exam_term(grade, term)

    stream = subgroup = None
    chosen_electives = []
    if grade >= SENIOR_GRADE:
        s1, s2 = st.columns(2)
        with s1:
            stream = st.selectbox("Stream", streams())
        with s2:
            subgroup = st.selectbox("Subgroup", subgroups(stream))
        st.caption("✓ English is compulsory for all streams in grades 11-12")
        chosen_electives = st.multiselect(
            "Optional elective subjects",
            electives_for(stream),
            format_func=display_name,
        )

    if grade == 10 and board_exam:
        st.info(
            "**Grade 10 Board Exam:** AI can substitute for the lowest of Math, Science or Social. "
            "If your AI mark is higher than your lowest core subject it replaces that subject. "
            "Totals are out of 500 (English, Kannada and the 3 best core subjects)."
        )

    active = compulsory_subjects(grade, stream, subgroup)
    active += [s for s in chosen_electives if s not in active]

    marks_csv = st.file_uploader("Optionally upload a marks sheet CSV (Subject, Marks)", type=["csv"])
    seed = {}
    if marks_csv is not None:
        try:
            seed = parse_marks(validate_marks_csv(read_csv_upload(marks_csv)))
        except MarksTrackerError as e:
            st.error(f"Marks CSV error: {e}")

    with st.form("marks_form"):
        st.subheader("2. Enter marks")
        st.caption(f"Total maximum marks: {term_max_marks(active, grade, board_exam)}")

        entered = {}
        cols = st.columns(3)
        for idx, subject in enumerate(active):
            bound = subject_max_marks(subject, grade, board_exam)
            with cols[idx % 3]:
                entered[subject] = st.number_input(
                    f"{display_name(subject)} (max {bound})",
                    min_value=0,
                    max_value=max(bound, 0),
                    value=int(min(seed.get(subject, 0), bound)),
                    step=1,
                    key=f"marks_{grade}_{subject}",
                )

        submitted = st.form_submit_button("Save entry", type="primary")

    if submitted:
        marks = {s: int(v) for s, v in entered.items()}
        try:
            if board_exam:
                result = service.submit_board_exam(identity, grade, marks, stream, subgroup)
                st.success(
                    f"Board Exam results saved! Total: {result.board_exam_total}/{result.max_marks}, "
                    f"Percentage: {format_percent(result.percentage)}%"
                )
            else:
                entry = service.submit_entry(identity, grade, term, marks, stream, subgroup)
                st.success(
                    f"Entry added! Term %: {format_percent(entry.term_percentage)}% ({entry.grade_text})"
                )
        except MarksTrackerError as e:
            st.error(str(e))

# ------------------------
# Progress
# ------------------------

entries = service.entries(identity)

with tab_progress:
    summary = entry_summary(entries)
    board = service.board_exam_result(identity)

    m1, m2, m3, m4 = st.columns(4)
    m1.metric("Average", f"{format_percent(summary.average_percentage)}%")
    m2.metric("Highest", f"{format_percent(summary.highest_percentage)}%")
    m3.metric("Lowest", f"{format_percent(summary.lowest_percentage)}%")
    m4.metric("Entries", summary.total_entries)

    if board is not None:
        st.metric("Board exam", f"{board.board_exam_total}/{board.max_marks}",
                  f"{format_percent(board.percentage)}%")

    if not entries:
        st.info("No entries yet. Add marks to start tracking your progress.")
    else:
        sort_field = st.selectbox("Sort by", ["timestamp", "grade", "term", "termPercentage"])
        descending = st.toggle("Descending", value=True)
        ordered = sort_entries(entries, sort_field, descending)

        table = pd.DataFrame([
            {
                "Grade": e.grade,
                "Term": e.term,
                "Section": e.section or "",
                "Total": f"{e.term_total_marks}/{e.term_max_marks}",
                "Percentage": float(format_percent(e.term_percentage)),
                "Letter": e.grade_text,
            }
            for e in ordered
        ])

        def _badge(letter):
            colour = BADGE_COLOURS[letter_badge_variant(letter)]
            return f"background-color: {colour}; color: white"

        st.dataframe(table.style.map(_badge, subset=["Letter"]), use_container_width=True)
        st.line_chart(table.set_index(np.arange(1, len(table) + 1))["Percentage"])

        st.subheader("Grade aggregates")
        aggregates = service.grade_aggregates(identity)
        st.dataframe(
            pd.DataFrame(
                [{"Grade": g, **a.to_dict()} for g, a in aggregates.items()]
            ).set_index("Grade"),
            use_container_width=True,
        )

# ------------------------
# Subject analysis / 9-scale
# ------------------------

def _filters(key):
    f1, f2, f3 = st.columns(3)
    grades = sorted({e.grade for e in entries})
    sections = sorted({e.section for e in entries if e.section})
    terms = sorted({e.term for e in entries})
    with f1:
        g = st.selectbox("Grade", ["All"] + grades, key=f"{key}_grade")
    with f2:
        s = st.selectbox("Section", ["All"] + sections, key=f"{key}_section")
    with f3:
        t = st.selectbox("Term", ["All"] + terms, key=f"{key}_term")
    return filter_entries(
        entries,
        grade=None if g == "All" else g,
        term=None if t == "All" else t,
        section=None if s == "All" else s,
    )

with tab_subjects:
    selected = _filters("subjects")
    stats = subject_statistics(selected)
    if not stats:
        st.info("Try adjusting your filter selections to see subject analysis.")
    else:
        st.dataframe(
            pd.DataFrame([
                {
                    "Subject": s.subject_name,
                    "Average %": format_percent(s.average),
                    "Highest %": format_percent(s.highest),
                    "Lowest %": format_percent(s.lowest),
                    "Entries": s.count,
                }
                for s in stats
            ]),
            use_container_width=True,
        )

with tab_nine:
    selected = _filters("nine")
    cards = subject_grade_cards(selected)
    if not cards:
        st.info("No subject marks to grade yet.")
    cols = st.columns(3)
    for idx, card in enumerate(cards):
        with cols[idx % 3]:
            st.markdown(
                f"<div style='padding:10px;border-radius:12px;margin-bottom:8px;"
                f"background:{nine_scale_colour(card.grade)};color:white'>"
                f"<b>{card.subject_name}</b> · Grade {card.grade_level} · Term {card.term}<br>"
                f"<span style='font-size:28px'>{card.grade}</span> &nbsp; {card.marks} · {card.section}"
                f"</div>",
                unsafe_allow_html=True,
            )

# ------------------------
# Export / import
# ------------------------

with tab_data:
    export = service.export_data()
    d1, d2 = st.columns(2)
    with d1:
        st.download_button("Download JSON", to_json(export), file_name="academic-data.json",
                           mime="application/json")
    with d2:
        st.download_button("Download CSV", to_csv(export), file_name="academic-data.csv",
                           mime="text/csv")

    st.subheader("Import")
    if role != "admin":
        st.warning("Only administrators can import data.")
    upload = st.file_uploader("Import a JSON export", type=["json"], key="import_json")
    if upload is not None and st.button("Import data"):
        try:
            count = service.import_data(identity, from_json(upload.getvalue().decode("utf-8")))
            st.success(f"Imported {count} entries.")
        except MarksTrackerError as e:
            st.error(str(e))
