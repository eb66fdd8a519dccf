"""
5_Profile.py — Public profile: /Profile?user_id=...

Without a user_id the signed-in user's own profile is shown, with an edit
form and their quiz history. Other visitors can follow or unfollow.
"""
import streamlit as st
from components.api_client import (
    get_profile,
    update_profile,
    follow,
    unfollow,
    user_quizzes,
    my_results,
    APIError,
)

st.set_page_config(page_title="Profile", page_icon="🏅", layout="wide")

st.markdown(
    """
    <style>
    .stat-num { font-size: 1.6rem; font-weight: 700; color: #E6EAF2; }
    .stat-lbl { font-size: 0.75rem; color: #A7B0C0; text-transform: uppercase; }
    .badge {
        display: inline-block;
        background: #6D5EF7;
        color: #E6EAF2;
        border-radius: 6px;
        padding: 0.15rem 0.6rem;
        font-size: 0.8rem;
        font-weight: 600;
        margin: 0 0.4rem 0.4rem 0;
    }
    </style>
    """,
    unsafe_allow_html=True,
)

token = st.session_state.get("access_token")
user_id = st.query_params.get("user_id")
if not user_id:
    if not token:
        st.warning("Please sign in to see your profile.")
        st.page_link("pages/0_Login.py", label="👉 Go to Login")
        st.stop()
    user_id = "me"

try:
    profile = get_profile(user_id, token)
except APIError as e:
    st.error("This user does not exist." if e.status_code == 404 else str(e))
    st.stop()

# ── Header ────────────────────────────────────────────────────────────────
pic, info, action = st.columns([1, 4, 1])
if profile.get("photo_url"):
    pic.image(profile["photo_url"], width=96)
else:
    pic.markdown("<div style='font-size:4rem'>👤</div>", unsafe_allow_html=True)
info.title(profile["display_name"])
if profile.get("bio"):
    info.write(profile["bio"])
info.caption(f"Member since {profile['created_at'][:10]}")

if token and not profile["is_own"]:
    label = "Unfollow" if profile["is_following"] else "Follow"
    if action.button(label, use_container_width=True):
        try:
            toggle = unfollow if profile["is_following"] else follow
            toggle(token, profile["id"])
        except APIError as e:
            st.error(str(e))
        st.rerun()

# ── Stats & badges ────────────────────────────────────────────────────────
stats = profile["stats"]
cols = st.columns(5)
for col, key, label in zip(
    cols,
    ("quizzes_created", "quizzes_taken", "total_score", "followers", "following"),
    ("quizzes created", "quizzes taken", "total score", "followers", "following"),
):
    col.markdown(
        f"<div class='stat-num'>{stats[key]}</div><div class='stat-lbl'>{label}</div>",
        unsafe_allow_html=True,
    )

if profile["badges"]:
    st.markdown(
        "".join(f"<span class='badge'>🏅 {b['label']}</span>" for b in profile["badges"]),
        unsafe_allow_html=True,
    )

st.caption("Share this profile")
st.code(profile["profile_url"], language=None)
st.divider()

# ── Quizzes ───────────────────────────────────────────────────────────────
try:
    quizzes = user_quizzes(profile["id"], token)
except APIError as e:
    st.error(str(e))
    quizzes = []

st.subheader("Quizzes")
if not quizzes:
    st.caption("No quizzes yet.")
for quiz in quizzes:
    st.markdown(
        f"**{quiz['title']}** · {quiz['question_count']} questions · "
        f"<a href='/Take_Quiz?quiz_id={quiz['id']}' target='_self'>take it</a>",
        unsafe_allow_html=True,
    )

if not profile["is_own"]:
    st.stop()

# ── Own profile: history + edit ───────────────────────────────────────────
st.divider()
history, edit = st.columns([3, 2])

with history:
    st.subheader("Your results")
    try:
        results = my_results(token)
    except APIError as e:
        st.error(str(e))
        results = []
    if not results:
        st.caption("You have not taken any quizzes yet.")
    for r in results:
        st.markdown(
            f"{r['quiz_title']} · **{r['score']}/{r['total']}** ({r['percentage']}%) · "
            f"<a href='/Result?result_id={r['id']}' target='_self'>review</a>",
            unsafe_allow_html=True,
        )

with edit:
    st.subheader("Edit profile")
    with st.form("profile_form"):
        display_name = st.text_input("Display name", value=profile["display_name"] or "", max_chars=100)
        photo_url = st.text_input("Photo URL", value=profile.get("photo_url") or "", max_chars=500)
        bio = st.text_area("Bio", value=profile.get("bio") or "", max_chars=2000)
        saved = st.form_submit_button("Save")

    if saved:
        try:
            updated = update_profile(
                token,
                {"display_name": display_name, "photo_url": photo_url, "bio": bio},
            )
        except APIError as e:
            st.error(str(e))
        else:
            st.session_state["user"]["display_name"] = updated["display_name"]
            st.toast("Profile updated")
            st.rerun()
