"""4_Result.py — Score and answer review for one submitted attempt."""
import streamlit as st
from components.api_client import get_result, APIError

st.set_page_config(page_title="Your Result", page_icon="🏁", layout="centered")

st.markdown(
    """
    <style>
    .score-card {
        background: #111B2E;
        border: 1px solid #22304A;
        border-radius: 14px;
        padding: 1.6rem;
        text-align: center;
    }
    .score-big { font-size: 3rem; font-weight: 700; color: #E6EAF2; }
    .score-sub { color: #A7B0C0; }
    .retake a {
        display: inline-block;
        background: #6D5EF7;
        color: #E6EAF2 !important;
        border-radius: 8px;
        padding: 0.45rem 1.1rem;
        font-weight: 600;
        text-decoration: none;
    }
    </style>
    """,
    unsafe_allow_html=True,
)

result_id = st.query_params.get("result_id") or st.session_state.get("result_id")
if not result_id:
    st.info("Finish a quiz to see your result here.")
    st.page_link("pages/3_Take_Quiz.py", label="Take a quiz →")
    st.stop()
st.query_params["result_id"] = result_id

try:
    result = get_result(result_id)
except APIError as e:
    st.error("This result could not be found." if e.status_code == 404 else str(e))
    st.stop()

# ── Score ─────────────────────────────────────────────────────────────────
st.title(f"🏁 {result['quiz_title']}")
st.markdown(
    f"<div class='score-card'>"
    f"<div class='score-big'>{result['score']} / {result['total']}</div>"
    f"<div class='score-sub'>{result['percentage']}% · {result['participant_name']}</div>"
    f"</div>",
    unsafe_allow_html=True,
)
if result["auto_submitted"]:
    st.caption("⏱ Time ran out, so your answers were submitted automatically.")
if result["total"] and result["score"] == result["total"]:
    st.balloons()

# ── Review ────────────────────────────────────────────────────────────────
st.subheader("Review")
for row in result["review"]:
    icon = "✅" if row["is_correct"] else "❌"
    with st.expander(f"{icon} {row['index'] + 1}. {row['text']}", expanded=not row["is_correct"]):
        for oi, option in enumerate(row["options"]):
            marks = []
            if oi in row["correct"]:
                marks.append("correct")
            if oi in row["selected"]:
                marks.append("your answer")
            suffix = f" · *{', '.join(marks)}*" if marks else ""
            st.markdown(f"- {option}{suffix}")
        if not row["selected"]:
            st.caption("Not answered")

# ── Retake ────────────────────────────────────────────────────────────────
if result["quiz_id"]:
    st.markdown(
        f"<div class='retake'><a href='/Take_Quiz?quiz_id={result['quiz_id']}' target='_self'>"
        f"🔁 Retake quiz</a></div>",
        unsafe_allow_html=True,
    )
else:
    st.caption("This quiz has been deleted by its owner.")
