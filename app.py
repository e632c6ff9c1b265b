from __future__ import annotations

import streamlit as st

from db.engine import SessionLocal, init_db
from services.logging_config import configure_logging
from services.profile import get_or_create_profile
from ui.pages import pilotage, recommendations_admin, settings

st.set_page_config(page_title="SafeSpend", layout="wide")

configure_logging()
init_db()

PAGES = {
    "Pilotage": pilotage.render,
    "Recommendation Engine": recommendations_admin.render,
    "Settings": settings.render,
}


@st.cache_resource
def get_session():
    return SessionLocal()


def main():
    st.title("SafeSpend")
    session = get_session()
    profile = get_or_create_profile(session)

    st.caption(f"Monthly budget pilot for {profile.full_name}")
    st.sidebar.info("🔒 Personal-use mode (single-user, local data only)")

    page = st.sidebar.radio("Navigate", list(PAGES.keys()))
    PAGES[page](session)


if __name__ == "__main__":
    main()
