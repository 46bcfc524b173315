# tests/test_report.py
import pytest

import db
from utils.report import REPORT_COLUMNS, progress_df_for_project, project_progress_summary


def test_empty_project_report():
    pid = db.create_project("Empty")
    df = progress_df_for_project(pid)
    assert df.empty
    assert list(df.columns) == REPORT_COLUMNS
    assert project_progress_summary(df) == {"items": 0, "done_items": 0, "manual_items": 0, "overall_pct": 0.0}


def test_project_report_rows_and_summary(statuses):
    pid = db.create_project("Report")
    other = db.create_project("Other")
    parent = db.add_or_update_task("Parent", project_id=pid, status_id=statuses["todo"])
    db.add_or_update_task("Done", project_id=pid, parent_task_id=parent, status_id=statuses["done"])
    db.add_or_update_task("Open", project_id=pid, parent_task_id=parent, status_id=statuses["todo"])
    gone = db.add_or_update_task("Gone", project_id=pid, parent_task_id=parent, status_id=statuses["todo"])
    db.archive_task(gone)
    manual = db.add_or_update_task("Manual", project_id=pid)
    db.set_task_progress(manual, 20)
    db.add_or_update_task("Elsewhere", project_id=other)

    df = progress_df_for_project(pid)
    assert list(df["name"]) == ["Parent", "Done", "Open", "Manual"]

    row = df.set_index("name").loc["Parent"]
    assert row["ratio"] == pytest.approx(50.0)
    assert (row["total_completed"], row["total_tasks"]) == (1, 2)
    assert not df.set_index("name").loc["Open", "has_progress_data"]

    assert project_progress_summary(df) == {
        "items": 4,
        "done_items": 1,
        "manual_items": 1,
        "overall_pct": 35.0,
    }
