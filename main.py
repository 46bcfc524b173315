# main.py

#============================================================#
#                        Task-Progress                       #
#============================================================#
# Version     : V1.0.0                                       #
#------------------------------------------------------------#
# Purpose     : Streamlit view of resolved task progress     #
#               per project                                  #
#============================================================#

import streamlit as st
from sqlmodel import select

import db
from models.project import Project
from ui.progress_panel import render_progress_panel
from utils.logging_setup import setup_logging

st.set_page_config(page_title="Task Progress", layout="wide")


@st.cache_resource
def _init_once():
    setup_logging()
    db.init_db()
    return True


_init_once()

with db.get_session() as s:
    projects = s.exec(select(Project).order_by(Project.name)).all()

if not projects:
    st.info("No projects yet.")
else:
    project = st.sidebar.selectbox("Project", projects, format_func=lambda p: p.name)
    st.sidebar.caption(f"Progress mode: {project.progress_mode}")
    render_progress_panel(project.id)
