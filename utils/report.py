# utils/report.py
import pandas as pd
from sqlmodel import select

from db import get_session
from models.task import Task
from utils.progress import ProgressResolver
from utils.progress_store import SqlProgressStore

REPORT_COLUMNS = ["id", "name", "parent_task_id", "ratio", "total_completed",
                  "total_tasks", "is_manual", "has_progress_data"]


def progress_df_for_project(project_id: int) -> pd.DataFrame:
    with get_session() as s:
        tasks = s.exec(
            select(Task)
            .where(Task.project_id == project_id, Task.archived == False)  # noqa: E712
            .order_by(Task.id)
        ).all()
        resolver = ProgressResolver(SqlProgressStore(s))
        rows = []
        for t in tasks:
            result = resolver.resolve(t.id)
            rows.append({
                "id": t.id,
                "name": t.name,
                "parent_task_id": t.parent_task_id,
                **result.to_dict(),
                "has_progress_data": result.has_progress_data,
            })
    return pd.DataFrame(rows, columns=REPORT_COLUMNS)


def project_progress_summary(df: pd.DataFrame) -> dict:
    """KPIs for a frame from ``progress_df_for_project``; overall % uses top-level tasks only."""
    if df.empty:
        return {"items": 0, "done_items": 0, "manual_items": 0, "overall_pct": 0.0}
    top = df[df["parent_task_id"].isna()]
    overall = round(float(top["ratio"].mean()), 1) if not top.empty else 0.0
    return {
        "items": len(df),
        "done_items": int(df["ratio"].ge(100).sum()),
        "manual_items": int(df["is_manual"].sum()),
        "overall_pct": overall,
    }
