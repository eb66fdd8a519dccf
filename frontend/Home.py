"""
Home.py — Entry point of the QuizCraft Streamlit app.
Checks for a valid JWT; redirects to login if missing.
Shows a welcome dashboard with the main quiz actions when authenticated.
"""
import streamlit as st
from components.api_client import list_quizzes, APIError

st.set_page_config(
    page_title="QuizCraft",
    page_icon="🧠",
    layout="wide",
)

# ── Custom CSS (Calm palette) ──────────────────────────────────────────────
st.markdown(
    """
    <style>
    @import url('https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600;700&display=swap');

    html, body, [class*="css"] {
        font-family: 'Inter', system-ui, sans-serif;
        background-color: #0B1220;
        color: #E6EAF2;
    }
    .stApp { background-color: #0B1220; }

    .dash-card {
        background: #111B2E;
        border: 1px solid #22304A;
        border-radius: 12px;
        padding: 1.4rem 1.6rem;
    }
    .dash-card h3 { color: #E6EAF2; margin-bottom: 0.4rem; }
    .dash-card p  { color: #A7B0C0; margin: 0; font-size: 0.9rem; }

    .badge {
        display: inline-block;
        background: #6D5EF7;
        color: #E6EAF2;
        border-radius: 6px;
        padding: 0.15rem 0.6rem;
        font-size: 0.75rem;
        font-weight: 600;
        margin-left: 0.5rem;
    }
    div.stButton > button {
        background: #6D5EF7;
        color: #E6EAF2;
        border: none;
        border-radius: 8px;
        padding: 0.45rem 1.1rem;
        font-weight: 600;
        transition: background 0.2s;
    }
    div.stButton > button:hover { background: #5a4dd6; }
    </style>
    """,
    unsafe_allow_html=True,
)


# ── Auth guard ─────────────────────────────────────────────────────────────────
def _require_auth():
    if not st.session_state.get("access_token"):
        st.warning("Please sign in to manage your quizzes.")
        st.page_link("pages/0_Login.py", label="👉 Go to Login")
        st.page_link("pages/3_Take_Quiz.py", label="Have a quiz link? Take a quiz →")
        st.stop()


_require_auth()

user = st.session_state["user"]
display_name = user.get("display_name") or user["email"]

# ── Sidebar ────────────────────────────────────────────────────────────────────
with st.sidebar:
    st.markdown(
        f"<div style='color:#A7B0C0;font-size:0.8rem;margin-bottom:0.3rem'>Signed in as</div>"
        f"<div style='color:#E6EAF2;font-weight:600'>{display_name}</div>"
        f"<div style='color:#A7B0C0;font-size:0.75rem'>{user['email']}</div>",
        unsafe_allow_html=True,
    )
    st.divider()
    if st.button("Sign Out", key="sidebar-logout"):
        for k in ["access_token", "refresh_token", "user", "draft", "editing_quiz_id"]:
            st.session_state.pop(k, None)
        st.rerun()

# ── Dashboard header ──────────────────────────────────────────────────────────
st.markdown(f"## 👋 Welcome back, **{display_name}**")

try:
    quizzes = list_quizzes(st.session_state["access_token"])
except APIError as e:
    st.error(str(e))
    quizzes = []

responses = sum(q.get("result_count", 0) for q in quizzes)
st.markdown(
    f"<p style='color:#A7B0C0;margin-top:-0.5rem'>"
    f"You have <b>{len(quizzes)}</b> quizzes"
    f"<span class='badge'>{responses} responses</span></p>",
    unsafe_allow_html=True,
)
st.divider()

# ── Feature cards ─────────────────────────────────────────────────────────────
col1, col2, col3 = st.columns(3)

with col1:
    st.markdown(
        """
        <div class="dash-card">
          <h3>✏️ Create</h3>
          <p>Build a multiple-choice quiz with an optional timer.</p>
        </div>
        """,
        unsafe_allow_html=True,
    )
    if st.button("Create Quiz →", key="home-create"):
        st.session_state.pop("draft", None)
        st.session_state.pop("editing_quiz_id", None)
        st.switch_page("pages/2_Create_Quiz.py")

with col2:
    st.markdown(
        """
        <div class="dash-card">
          <h3>📋 Dashboard</h3>
          <p>Share your quizzes and review the responses.</p>
        </div>
        """,
        unsafe_allow_html=True,
    )
    st.page_link("pages/1_Dashboard.py", label="Open Dashboard →")

with col3:
    st.markdown(
        """
        <div class="dash-card">
          <h3>🏅 Profile</h3>
          <p>Your stats, badges and followers.</p>
        </div>
        """,
        unsafe_allow_html=True,
    )
    st.page_link("pages/5_Profile.py", label="View Profile →")
