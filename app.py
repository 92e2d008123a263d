# app.py
from __future__ import annotations
import logging
from pathlib import Path
import sys

import streamlit as st

APP_DIR = Path(__file__).resolve().parent
if str(APP_DIR) not in sys.path:
    sys.path.insert(0, str(APP_DIR))

from core.settings import load_settings
from screens.curriculum.page import render as render_curriculum

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


def main():
    settings = load_settings()
    st.set_page_config(page_title=settings.app.name, page_icon="📚", layout="wide")
    render_curriculum()


if __name__ == "__main__":
    main()
