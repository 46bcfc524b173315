# ui/progress_panel.py
import pandas as pd
import streamlit as st

from utils.progress import ProgressResult
from utils.report import progress_df_for_project, project_progress_summary

NO_DATA = "—"


def progress_label(result: ProgressResult) -> str:
    if result.is_manual:
        return f"{result.ratio:.0f}% (manual)"
    if not result.has_progress_data:
        # No subtasks: only a done task shows a figure
        return "100%" if result.ratio >= 100 else NO_DATA
    return f"{result.ratio:.0f}% ({result.total_completed}/{result.total_tasks})"


def render_progress_panel(project_id: int):
    st.subheader("Task Progress")
    df = progress_df_for_project(project_id)
    if df.empty:
        st.info("Add tasks to this project to see their progress.")
        return

    kpi = project_progress_summary(df)
    c1, c2, c3 = st.columns(3)
    with c1: st.metric("Tasks", kpi["items"])
    with c2: st.metric("Manual", kpi["manual_items"])
    with c3: st.metric("Overall % Complete", f"{kpi['overall_pct']}%")

    for row in df.itertuples(index=False):
        result = ProgressResult(row.ratio, row.total_completed, row.total_tasks, row.is_manual)
        indent = "" if pd.isna(row.parent_task_id) else "↳ "
        st.progress(int(result.ratio), text=f"{indent}{row.name} · {progress_label(result)}")
