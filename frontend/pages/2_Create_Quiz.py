"""
2_Create_Quiz.py — Three-step quiz builder: details → questions → review & save.

The in-progress quiz lives in st.session_state["draft"] as a QuizDraft, so
every edit goes through the same rules the API enforces on save. Opening the
page with ?quiz_id=... (or from the dashboard's Edit button) loads an
existing quiz for editing.
"""
import streamlit as st
from components.api_client import get_quiz, create_quiz, update_quiz, APIError
from quizcraft.services.quiz.builder import (
    QuizDraft,
    QuizValidationError,
    validate_quiz,
    MIN_OPTIONS,
    MAX_OPTIONS,
    MIN_TIMER_SECONDS,
)
from quizcraft.db.models.quiz import TIMER_PER_QUESTION, TIMER_PER_QUIZ

st.set_page_config(page_title="Create Quiz", page_icon="✏️", layout="wide")

# ── Auth guard ─────────────────────────────────────────────────────────────
if not st.session_state.get("access_token"):
    st.warning("Please sign in first.")
    st.page_link("pages/0_Login.py", label="👉 Go to Login")
    st.stop()

token = st.session_state["access_token"]

_TIMER_LABELS = {
    TIMER_PER_QUIZ:     "One timer for the whole quiz",
    TIMER_PER_QUESTION: "A timer for each question",
}
_STEPS = ["1 · Details", "2 · Questions", "3 · Review & save"]


# ── Draft state ───────────────────────────────────────────────────────────
def _load_draft() -> None:
    quiz_id = st.query_params.get("quiz_id") or st.session_state.get("editing_quiz_id")
    if quiz_id and st.session_state.get("editing_quiz_id") != quiz_id:
        st.session_state.pop("draft", None)
    if "draft" in st.session_state:
        return
    if quiz_id:
        try:
            doc = get_quiz(quiz_id, token)
        except APIError as e:
            st.error(str(e))
            st.stop()
        st.session_state["draft"] = QuizDraft.from_document(doc)
        st.session_state["editing_quiz_id"] = quiz_id
    else:
        st.session_state["draft"] = QuizDraft()
        st.session_state.pop("editing_quiz_id", None)
    st.session_state["builder_step"] = 0
    st.session_state["draft_rev"] = st.session_state.get("draft_rev", 0) + 1


def _key(name: str) -> str:
    # widget keys change with each structural edit so inputs re-read the draft
    return f"{name}-{st.session_state['draft_rev']}"


def _restructure() -> None:
    st.session_state["draft_rev"] += 1
    st.rerun()


def _go(step: int) -> None:
    st.session_state["builder_step"] = step
    st.rerun()


_load_draft()
draft: QuizDraft = st.session_state["draft"]
editing_id = st.session_state.get("editing_quiz_id")
step = st.session_state.get("builder_step", 0)

st.title("✏️ Edit Quiz" if editing_id else "✏️ Create Quiz")
st.progress((step + 1) / len(_STEPS), text=_STEPS[step])


# ── Step 1: details ───────────────────────────────────────────────────────
def _details_step() -> None:
    title = st.text_input("Title", value=draft.title, max_chars=255, key=_key("title"))
    description = st.text_area("Description (optional)", value=draft.description, key=_key("desc"))
    timer_type = st.radio(
        "Timer",
        options=list(_TIMER_LABELS),
        format_func=_TIMER_LABELS.get,
        index=list(_TIMER_LABELS).index(draft.timer_type),
        horizontal=True,
        key=_key("timer_type"),
    )
    timer = draft.timer
    if timer_type == TIMER_PER_QUIZ:
        timer = st.number_input(
            "Time limit (seconds)",
            min_value=MIN_TIMER_SECONDS,
            value=max(int(draft.timer), MIN_TIMER_SECONDS),
            step=10,
            key=_key("timer"),
        )
    else:
        st.caption("Each question gets its own time limit in the next step.")
    draft.set_details(title=title, description=description, timer_type=timer_type, timer=int(timer))

    if st.button("Next: questions →"):
        if not draft.title.strip():
            st.error("Give the quiz a title first.")
        else:
            _go(1)


# ── Step 2: questions ─────────────────────────────────────────────────────
def _question_editor(qi: int, question: dict) -> None:
    head, remove = st.columns([5, 1])
    head.markdown(f"#### Question {qi + 1}")
    if remove.button("Remove", key=_key(f"q{qi}-remove"), disabled=len(draft.questions) <= 1):
        draft.remove_question(qi)
        _restructure()

    draft.set_question_text(
        qi, st.text_input("Question text", value=question["text"], key=_key(f"q{qi}-text"))
    )

    cols = st.columns(2)
    allow_multiple = cols[0].toggle(
        "Allow multiple correct answers",
        value=question["allowMultiple"],
        key=_key(f"q{qi}-multi"),
    )
    if allow_multiple != question["allowMultiple"]:
        draft.set_allow_multiple(qi, allow_multiple)
        _restructure()
    if draft.timer_type == TIMER_PER_QUESTION:
        seconds = cols[1].number_input(
            "Seconds for this question",
            min_value=MIN_TIMER_SECONDS,
            value=max(int(question.get("timer") or draft.question_timer), MIN_TIMER_SECONDS),
            step=5,
            key=_key(f"q{qi}-timer"),
        )
        draft.set_question_timer(qi, int(seconds))

    options = question["options"]
    if not allow_multiple:
        correct = next(i for i, opt in enumerate(options) if opt["isCorrect"])
        chosen = st.radio(
            "Correct answer",
            options=range(len(options)),
            format_func=lambda i: f"Option {i + 1}",
            index=correct,
            horizontal=True,
            key=_key(f"q{qi}-correct"),
        )
        draft.set_correct(qi, chosen)

    for oi, opt in enumerate(options):
        c_text, c_mark, c_del = st.columns([6, 1, 1])
        draft.set_option_text(
            qi,
            oi,
            c_text.text_input(
                f"Option {oi + 1}",
                value=opt["text"],
                key=_key(f"q{qi}-o{oi}-text"),
            ),
        )
        if allow_multiple:
            draft.set_correct(
                qi,
                oi,
                c_mark.checkbox("Correct", value=opt["isCorrect"], key=_key(f"q{qi}-o{oi}-correct")),
            )
        if c_del.button("✕", key=_key(f"q{qi}-o{oi}-del"), disabled=len(options) <= MIN_OPTIONS):
            draft.remove_option(qi, oi)
            _restructure()

    if st.button("➕ Add option", key=_key(f"q{qi}-add"), disabled=len(options) >= MAX_OPTIONS):
        draft.add_option(qi)
        _restructure()


def _questions_step() -> None:
    for qi, question in enumerate(draft.questions):
        with st.container(border=True):
            _question_editor(qi, question)

    if st.button("➕ Add question"):
        draft.add_question()
        _restructure()

    back, forward = st.columns(2)
    if back.button("← Back"):
        _go(0)
    if forward.button("Next: review →"):
        _go(2)


# ── Step 3: review & save ─────────────────────────────────────────────────
def _review_step() -> None:
    doc = draft.to_document()
    st.subheader(doc["title"] or "Untitled quiz")
    if doc["description"]:
        st.write(doc["description"])
    if doc["timerType"] == TIMER_PER_QUIZ:
        st.caption(f"{len(doc['questions'])} questions · {doc['timer']} seconds in total")
    else:
        st.caption(f"{len(doc['questions'])} questions · timed per question")

    for n, q in enumerate(doc["questions"], start=1):
        kind = "multiple answers" if q["allowMultiple"] else "single answer"
        st.markdown(f"**{n}. {q['text'] or '(no text)'}** <small>({kind})</small>", unsafe_allow_html=True)
        for opt in q["options"]:
            st.markdown(f"- {'✅' if opt['isCorrect'] else '▫️'} {opt['text'] or '(empty)'}")

    try:
        validate_quiz(doc, min_timer=MIN_TIMER_SECONDS)
        problem = None
    except QuizValidationError as e:
        problem = str(e)
    if problem:
        st.warning(f"Fix before saving: {problem}")

    back, save = st.columns(2)
    if back.button("← Back to questions"):
        _go(1)
    if save.button("💾 Save quiz", disabled=problem is not None):
        try:
            if editing_id:
                saved = update_quiz(token, editing_id, doc)
            else:
                saved = create_quiz(token, doc)
        except APIError as e:
            st.error(str(e))
            return
        for k in ("draft", "editing_quiz_id", "builder_step"):
            st.session_state.pop(k, None)
        st.query_params.clear()
        st.success("Quiz saved. Share this link with participants:")
        st.code(saved["share_url"], language=None)
        st.page_link("pages/1_Dashboard.py", label="Go to Dashboard →")


[_details_step, _questions_step, _review_step][step]()
