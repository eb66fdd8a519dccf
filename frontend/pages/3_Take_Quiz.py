"""
3_Take_Quiz.py — Take a shared quiz: /Take_Quiz?quiz_id=...

No account needed: anonymous participants enter a name. The server owns the
clock; while the attempt is active the page re-polls it once a second and
renders whatever state comes back (countdown, frozen questions, the result
once the timer or the Submit button finishes the attempt).
"""
import streamlit as st
from streamlit_autorefresh import st_autorefresh
from components.api_client import (
    get_quiz,
    start_attempt,
    get_attempt,
    select_answer,
    next_question,
    submit_attempt,
    APIError,
)

st.set_page_config(page_title="Take Quiz", page_icon="📝", layout="centered")

st.markdown(
    """
    <style>
    .countdown {
        font-size: 2rem;
        font-weight: 700;
        color: #E6EAF2;
        text-align: right;
    }
    .countdown.low { color: #F26D6D; }
    .frozen-note { color: #A7B0C0; font-size: 0.8rem; }
    </style>
    """,
    unsafe_allow_html=True,
)

token = st.session_state.get("access_token")
user = st.session_state.get("user") or {}


def _fmt(seconds: int) -> str:
    minutes, secs = divmod(max(int(seconds), 0), 60)
    return f"{minutes:02d}:{secs:02d}"


# ── Which quiz? ───────────────────────────────────────────────────────────
quiz_id = st.query_params.get("quiz_id")
if not quiz_id and st.session_state.get("join_quiz_id"):
    # arriving from the login page's "Join a Quiz" tab
    quiz_id = st.session_state.pop("join_quiz_id")
    st.query_params["quiz_id"] = quiz_id
if not quiz_id:
    st.title("📝 Take a Quiz")
    link = st.text_input("Paste a quiz link or id")
    if link:
        st.query_params["quiz_id"] = link.rsplit("quiz_id=", 1)[-1].strip()
        st.rerun()
    st.stop()

attempt_key = f"attempt-{quiz_id}"


def _show_result(result_id: str) -> None:
    st.session_state["result_id"] = result_id
    st.session_state.pop(attempt_key, None)
    st.switch_page("pages/4_Result.py")


# ── Lobby: name + start ───────────────────────────────────────────────────
if attempt_key not in st.session_state:
    try:
        quiz = get_quiz(quiz_id, token)
    except APIError as e:
        st.error("This quiz could not be found." if e.status_code == 404 else str(e))
        st.stop()

    st.title(f"📝 {quiz['title']}")
    if quiz.get("description"):
        st.write(quiz["description"])
    if quiz["timerType"] == "perQuestion":
        st.caption(f"{quiz['question_count']} questions · each question has its own time limit")
    else:
        st.caption(f"{quiz['question_count']} questions · {_fmt(quiz['timer'])} for the whole quiz")
    if quiz.get("creator_name"):
        st.caption(f"by {quiz['creator_name']}")

    with st.form("start_form"):
        name = st.text_input(
            "Your name",
            value=user.get("display_name") or "",
            max_chars=100,
            placeholder="Shown to the quiz owner with your score",
        )
        started = st.form_submit_button("Start quiz")

    if started:
        if not name.strip() and not token:
            st.error("Please enter your name.")
            st.stop()
        try:
            attempt = start_attempt(quiz_id, name.strip() or None, token)
        except APIError as e:
            st.error(str(e))
            st.stop()
        st.session_state[attempt_key] = attempt["id"]
        st.rerun()
    st.stop()


# ── Active attempt ────────────────────────────────────────────────────────
attempt_id = st.session_state[attempt_key]


def _select(qi: int, oi: int, checked: bool) -> None:
    try:
        select_answer(attempt_id, qi, oi, checked)
    except APIError as e:
        st.session_state["take_error"] = str(e)


def _on_radio(qi: int, widget_key: str) -> None:
    choice = st.session_state.get(widget_key)
    if choice is not None:
        _select(qi, choice, True)


def _on_checkbox(qi: int, oi: int, widget_key: str) -> None:
    _select(qi, oi, bool(st.session_state.get(widget_key)))


try:
    attempt = get_attempt(attempt_id)
except APIError as e:
    st.error(str(e))
    if st.button("Start over"):
        st.session_state.pop(attempt_key, None)
        st.rerun()
    st.stop()

if attempt["status"] == "done" and attempt.get("result_id"):
    _show_result(attempt["result_id"])

if attempt["status"] == "error":
    st.error(attempt.get("error") or "Failed to submit quiz.")
    if st.button("Start over"):
        st.session_state.pop(attempt_key, None)
        st.rerun()
    st.stop()

if attempt["status"] != "active":
    st.info("Submitting…")
    st_autorefresh(interval=1000, key=f"tick-{attempt_id}")
    st.stop()

st_autorefresh(interval=1000, key=f"tick-{attempt_id}")

if "take_error" in st.session_state:
    st.warning(st.session_state.pop("take_error"))

per_question = attempt["timer_type"] == "perQuestion"
head, clock = st.columns([3, 1])
head.markdown(f"### {attempt['participant_name']}")
remaining = attempt["time_left"]
clock.markdown(
    f"<div class='countdown{' low' if remaining <= 10 else ''}'>⏱ {_fmt(remaining)}</div>",
    unsafe_allow_html=True,
)
# countdown is the full allowance of the running clock
st.progress(min(remaining / max(attempt["countdown"], 1), 1.0))

questions = attempt["questions"]
if per_question:
    current = attempt["current_question"]
    st.progress((current + 1) / len(questions), text=f"Question {current + 1} of {len(questions)}")
    visible = [questions[current]]
else:
    visible = questions

for q in visible:
    qi = q["index"]
    selected = attempt["answers"][qi]
    with st.container(border=True):
        st.markdown(f"**{qi + 1}. {q['text']}**")
        if q["allow_multiple"]:
            st.caption("Select all that apply")
            for oi, label in enumerate(q["options"]):
                widget_key = f"{attempt_id}-q{qi}-o{oi}"
                st.checkbox(
                    label,
                    value=oi in selected,
                    key=widget_key,
                    disabled=q["frozen"],
                    on_change=_on_checkbox,
                    args=(qi, oi, widget_key),
                )
        else:
            widget_key = f"{attempt_id}-q{qi}"
            st.radio(
                "Answer",
                options=range(len(q["options"])),
                format_func=lambda i, opts=q["options"]: opts[i],
                index=selected[0] if selected else None,
                key=widget_key,
                disabled=q["frozen"],
                label_visibility="collapsed",
                on_change=_on_radio,
                args=(qi, widget_key),
            )
        if q["frozen"]:
            st.markdown("<div class='frozen-note'>Time is up for this question.</div>", unsafe_allow_html=True)

left, right = st.columns(2)
last = not per_question or attempt["current_question"] == len(questions) - 1
if per_question and not last:
    if left.button("Next question →", use_container_width=True):
        try:
            next_question(attempt_id)
        except APIError as e:
            st.error(str(e))
        st.rerun()

if right.button("✅ Submit", type="primary", use_container_width=True):
    try:
        done = submit_attempt(attempt_id)
    except APIError as e:
        st.error(str(e))
    else:
        if done.get("result_id"):
            _show_result(done["result_id"])
    st.rerun()
