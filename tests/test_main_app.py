# tests/test_main_app.py
# Runs the Streamlit entry point headless against the in-memory database.
from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

import db
from utils import logging_setup

MAIN = str(Path(__file__).resolve().parents[1] / "main.py")


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr(logging_setup, "setup_logging", lambda *a, **kw: None)


def test_main_without_projects():
    at = AppTest.from_file(MAIN, default_timeout=30).run()
    assert not at.exception
    assert at.info[0].value == "No projects yet."


def test_main_renders_kpis_and_progress_bars(statuses):
    pid = db.create_project("Alpha")
    parent = db.add_or_update_task("Parent", project_id=pid, status_id=statuses["todo"])
    db.add_or_update_task("Done", project_id=pid, parent_task_id=parent, status_id=statuses["done"])
    db.add_or_update_task("Open", project_id=pid, parent_task_id=parent, status_id=statuses["todo"])

    at = AppTest.from_file(MAIN, default_timeout=30).run()
    assert not at.exception
    assert [m.label for m in at.metric] == ["Tasks", "Manual", "Overall % Complete"]
    assert [m.value for m in at.metric] == ["3", "0", "50.0%"]
    assert len(at.get("progress")) == 3


def test_panel_for_empty_project_shows_hint():
    db.create_project("Empty")
    at = AppTest.from_file(MAIN, default_timeout=30).run()
    assert not at.exception
    assert at.info[0].value == "Add tasks to this project to see their progress."
    assert len(at.metric) == 0
