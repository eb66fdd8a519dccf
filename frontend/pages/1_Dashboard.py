"""1_Dashboard.py — Your quizzes: share links, edit, delete and review responses."""
import streamlit as st
from components.api_client import (
    list_quizzes,
    delete_quiz,
    quiz_results,
    quiz_results_csv,
    APIError,
)

st.set_page_config(page_title="Dashboard", page_icon="📋", layout="wide")

# ── Auth guard ─────────────────────────────────────────────────────────────
if not st.session_state.get("access_token"):
    st.warning("Please sign in first.")
    st.page_link("pages/0_Login.py", label="👉 Go to Login")
    st.stop()

token = st.session_state["access_token"]

st.markdown(
    """
    <style>
    .quiz-meta { color: #A7B0C0; font-size: 0.85rem; margin-top: -0.6rem; }
    .stat-num  { font-size: 1.6rem; font-weight: 700; color: #E6EAF2; }
    .stat-lbl  { font-size: 0.75rem; color: #A7B0C0; text-transform: uppercase; }
    </style>
    """,
    unsafe_allow_html=True,
)

# ── Header ────────────────────────────────────────────────────────────────
head, action = st.columns([4, 1])
head.title("📋 Dashboard")
if action.button("➕ New Quiz", use_container_width=True):
    st.session_state.pop("draft", None)
    st.session_state.pop("editing_quiz_id", None)
    st.switch_page("pages/2_Create_Quiz.py")

try:
    quizzes = list_quizzes(token)
except APIError as e:
    st.error(str(e))
    st.stop()

if not quizzes:
    st.info("You have not created any quizzes yet.", icon="🧠")
    st.stop()


def _timer_label(quiz: dict) -> str:
    if quiz["timerType"] == "perQuestion":
        return "timer per question"
    return f"{quiz['timer']} s for the whole quiz"


def _show_results(quiz: dict) -> None:
    try:
        data = quiz_results(token, quiz["id"])
    except APIError as e:
        st.error(str(e))
        return

    summary = data["summary"]
    c1, c2, c3 = st.columns(3)
    for col, value, label in (
        (c1, summary["count"], "responses"),
        (c2, "–" if summary["average_percentage"] is None else f"{summary['average_percentage']}%", "average"),
        (c3, "–" if summary["best_score"] is None else f"{summary['best_score']}/{quiz['question_count']}", "best score"),
    ):
        col.markdown(
            f"<div class='stat-num'>{value}</div><div class='stat-lbl'>{label}</div>",
            unsafe_allow_html=True,
        )

    if not data["results"]:
        st.caption("No responses yet. Share the link above to collect some.")
        return

    rows = [
        {
            "Participant": r["participant_name"],
            "Score":       f"{r['score']}/{r['total']}",
            "Percentage":  r["percentage"],
            "Submitted":   r["submitted_at"][:19].replace("T", " "),
            "Auto":        "⏱" if r["auto_submitted"] else "",
        }
        for r in data["results"]
    ]
    st.dataframe(rows, hide_index=True, use_container_width=True)

    try:
        csv_bytes = quiz_results_csv(token, quiz["id"])
    except APIError as e:
        st.error(str(e))
        return
    st.download_button(
        "⬇️ Download CSV",
        data=csv_bytes,
        file_name=f"{quiz['title'] or 'quiz'}-results.csv",
        mime="text/csv",
        key=f"csv-{quiz['id']}",
    )


# ── Quiz list ─────────────────────────────────────────────────────────────
for quiz in quizzes:
    with st.container(border=True):
        st.subheader(quiz["title"])
        st.markdown(
            f"<div class='quiz-meta'>{quiz['question_count']} questions · {_timer_label(quiz)}"
            f" · {quiz.get('result_count', 0)} responses</div>",
            unsafe_allow_html=True,
        )
        if quiz.get("description"):
            st.write(quiz["description"])

        st.caption("Share link")
        st.code(quiz["share_url"], language=None)

        b1, b2, b3 = st.columns(3)
        if b1.button("✏️ Edit", key=f"edit-{quiz['id']}", use_container_width=True):
            st.session_state.pop("draft", None)
            st.session_state["editing_quiz_id"] = quiz["id"]
            st.switch_page("pages/2_Create_Quiz.py")

        show = b2.toggle("Responses", key=f"show-{quiz['id']}")

        confirm_key = f"confirm-delete-{quiz['id']}"
        if b3.button("🗑️ Delete", key=f"delete-{quiz['id']}", use_container_width=True):
            st.session_state[confirm_key] = True

        if st.session_state.get(confirm_key):
            st.warning(f"Delete “{quiz['title']}”? Existing results are kept.")
            yes, no = st.columns(2)
            if yes.button("Yes, delete", key=f"yes-{quiz['id']}"):
                try:
                    delete_quiz(token, quiz["id"])
                except APIError as e:
                    st.error(str(e))
                else:
                    st.session_state.pop(confirm_key, None)
                    st.toast("Quiz deleted")
                    st.rerun()
            if no.button("Cancel", key=f"no-{quiz['id']}"):
                st.session_state.pop(confirm_key, None)
                st.rerun()

        if show:
            _show_results(quiz)
