"""
0_Login.py — Login & Register page.
This is page 0 in the Streamlit sidebar so it always appears first.
"""
import streamlit as st
from components.api_client import login, register, APIError

# ── Page config ───────────────────────────────────────────────────────────────
st.set_page_config(
    page_title="QuizCraft — Login",
    page_icon="🧠",
    layout="centered",
)

# ── Custom CSS (Calm palette) ──────────────────────────────────────────
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

    .auth-card {
        background: #111B2E;
        border: 1px solid #22304A;
        border-radius: 14px;
        padding: 2.5rem 2rem 2rem 2rem;
        max-width: 420px;
        margin: 3rem auto 0 auto;
    }
    .auth-title {
        font-size: 1.8rem;
        font-weight: 700;
        color: #E6EAF2;
        text-align: center;
        margin-bottom: 0.25rem;
    }
    .auth-sub {
        font-size: 0.9rem;
        color: #A7B0C0;
        text-align: center;
        margin-bottom: 1.8rem;
    }

    div[data-testid="stTextInput"] input {
        background: #0B1220 !important;
        border: 1px solid #22304A !important;
        border-radius: 8px !important;
        color: #E6EAF2 !important;
    }
    div[data-testid="stTextInput"] label { color: #A7B0C0 !important; }

    div.stButton > button {
        background: #6D5EF7;
        color: #E6EAF2;
        border: none;
        border-radius: 8px;
        padding: 0.55rem 1.2rem;
        font-weight: 600;
        width: 100%;
        transition: background 0.2s;
    }
    div.stButton > button:hover { background: #5a4dd6; }

    .stTabs [data-baseweb="tab"] {
        color: #A7B0C0;
        font-weight: 500;
    }
    .stTabs [aria-selected="true"] {
        color: #6D5EF7 !important;
        border-bottom: 2px solid #6D5EF7 !important;
    }
    </style>
    """,
    unsafe_allow_html=True,
)

# ── Redirect if already logged in ────────────────────────────────────────────
if st.session_state.get("access_token"):
    name = st.session_state["user"].get("display_name") or st.session_state["user"]["email"]
    st.success(f"Signed in as {name}.")
    st.page_link("pages/1_Dashboard.py", label="📋 Your quizzes →")
    st.page_link("pages/2_Create_Quiz.py", label="✏️ Create a quiz →")
    st.page_link("pages/5_Profile.py", label="🏅 Your profile →")
    st.stop()

# ── Auth card ─────────────────────────────────────────────────────────────────
st.markdown(
    '<div class="auth-card">'
    '<div class="auth-title">🧠 QuizCraft</div>'
    '<div class="auth-sub">Build quizzes, share a link, collect the results</div>',
    unsafe_allow_html=True,
)

tab_login, tab_register, tab_guest = st.tabs(["Sign In", "Create Account", "Join a Quiz"])

# ── LOGIN ─────────────────────────────────────────────────────────────────────
with tab_login:
    with st.form("login_form"):
        email = st.text_input("Email", placeholder="you@example.com")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign In")

    if submitted:
        if not email or not password:
            st.error("Please fill in both fields.")
        else:
            try:
                data = login(email.strip().lower(), password)
                st.session_state["access_token"] = data["access_token"]
                st.session_state["refresh_token"] = data["refresh_token"]
                st.session_state["user"] = data["user"]
                st.success(f"Welcome back, {data['user'].get('display_name') or data['user']['email']}!")
                st.rerun()
            except APIError as e:
                st.error(str(e))

# ── REGISTER ──────────────────────────────────────────────────────────────────
with tab_register:
    with st.form("register_form"):
        r_email = st.text_input("Email", placeholder="you@example.com", key="r_email")
        r_display_name = st.text_input("Display name (optional)", placeholder="Quiz Master", key="r_display_name")
        r_password = st.text_input("Password (min 8 chars)", type="password", key="r_pass")
        r_confirm = st.text_input("Confirm Password", type="password", key="r_confirm")
        r_submitted = st.form_submit_button("Create Account")

    if r_submitted:
        if not r_email or not r_password:
            st.error("Email and password are required.")
        elif r_password != r_confirm:
            st.error("Passwords do not match.")
        elif len(r_password) < 8:
            st.error("Password must be at least 8 characters.")
        else:
            try:
                data = register(
                    r_email.strip().lower(),
                    r_password,
                    r_display_name.strip() or None,
                )
                st.session_state["access_token"] = data["access_token"]
                st.session_state["refresh_token"] = data["refresh_token"]
                st.session_state["user"] = data["user"]
                st.success("Account created! Redirecting…")
                st.rerun()
            except APIError as e:
                st.error(str(e))

# ── GUEST ────────────────────────────────────────────────────────────────────
with tab_guest:
    st.caption("No account needed to take a quiz. Your name is shown to the quiz owner with your score.")
    with st.form("join_form"):
        link = st.text_input("Quiz link or id", placeholder="…/Take_Quiz?quiz_id=…")
        joined = st.form_submit_button("Open quiz")

    if joined:
        quiz_id = link.rsplit("quiz_id=", 1)[-1].strip()
        if not quiz_id:
            st.error("Paste the link you were sent.")
        else:
            st.session_state["join_quiz_id"] = quiz_id
            st.switch_page("pages/3_Take_Quiz.py")

st.markdown("</div>", unsafe_allow_html=True)
