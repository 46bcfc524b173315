# db.py

#============================================================#
#                        Task-Progress                       #
#============================================================#
# Version     : V1.0.0                                       #
#------------------------------------------------------------#
# Purpose     : Task completion ratios over a parent/subtask #
#               hierarchy with manual overrides, project     #
#               progress modes and ancestor rollup           #
#               (SQLite/Postgres powered)                    #
#============================================================#


from __future__ import annotations

import logging
import os
from typing import Optional, Dict

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel, Session, select

from models import StatusCategory, TaskStatus, Project, Task
from utils.progress import ProgressMode, ProgressResolver, ProgressResult
from utils.progress_store import SqlProgressStore
from utils.rollup import propagate_progress

logger = logging.getLogger(__name__)

# ---- Engine / Session ----
try:
    import streamlit as st
    _secrets = getattr(st, "secrets", {})
except Exception:
    _secrets = {}


def _setting(name: str, default: Optional[str] = None) -> Optional[str]:
    # st.secrets raises when no secrets.toml exists; fall through to the env.
    try:
        value = _secrets.get(name)
    except Exception:
        value = None
    return value or os.getenv(name) or default


DATABASE_URL = _setting("DATABASE_URL", "sqlite:///progress.db")

engine = create_engine(DATABASE_URL, pool_pre_ping=True, future=True)
SessionLocal = sessionmaker(bind=engine, class_=Session, autoflush=False, expire_on_commit=False)

DEFAULT_STATUS_CATEGORIES = (
    {"name": "To do", "is_todo": True},
    {"name": "Doing", "is_doing": True},
    {"name": "Done", "is_done": True},
)


class TaskNotFoundError(LookupError):
    pass


class ProjectNotFoundError(LookupError):
    pass


def get_session() -> Session:
    return SessionLocal()


def init_db():
    SQLModel.metadata.create_all(engine)
    with SessionLocal() as s:
        existing = set(s.exec(select(StatusCategory.name)).all())
        for cat in DEFAULT_STATUS_CATEGORIES:
            if cat["name"] not in existing:
                s.add(StatusCategory(**cat))
        s.commit()
    logger.info("Database initialized at %s", engine.url.render_as_string(hide_password=True))


def _get_task(s: Session, task_id: int) -> Task:
    t = s.get(Task, task_id)
    if not t:
        raise TaskNotFoundError(f"Task not found: {task_id}")
    return t


def _get_project(s: Session, project_id: int) -> Project:
    p = s.get(Project, project_id)
    if not p:
        raise ProjectNotFoundError(f"Project not found: {project_id}")
    return p


def _reset_parent_manual_progress(s: Session, parent_task_id: Optional[int]) -> None:
    """A task that gains a subtask stops using its manual value."""
    if parent_task_id is None:
        return
    parent = s.get(Task, parent_task_id)
    if parent and parent.manual_progress:
        parent.manual_progress = False
        logger.info("Reset manual progress on task %s after subtask was attached", parent_task_id)


# ---- helpers ----
def create_project(name: str, mode: ProgressMode = ProgressMode.DEFAULT) -> int:
    with SessionLocal() as s:
        p = Project(name=name.strip())
        _apply_mode(p, ProgressMode(mode))
        s.add(p)
        s.commit()
        return p.id


def create_status(name: str, category_name: str, project_id: Optional[int] = None,
                  sort_order: int = 0) -> int:
    with SessionLocal() as s:
        cat = s.exec(select(StatusCategory).where(StatusCategory.name == category_name)).first()
        if not cat:
            raise ValueError(f"Unknown status category: {category_name}")
        st_ = TaskStatus(name=name, category_id=cat.id, project_id=project_id, sort_order=sort_order)
        s.add(st_)
        s.commit()
        return st_.id


def add_or_update_task(name: str, project_id: Optional[int] = None, parent_task_id: Optional[int] = None,
                       status_id: Optional[int] = None, total_minutes: int = 0,
                       task_id: Optional[int] = None) -> int:
    with SessionLocal() as s:
        old_parent_id = None
        minutes_changed = False
        if task_id:
            t = _get_task(s, task_id)
            old_parent_id = t.parent_task_id
            parent_changed = old_parent_id != parent_task_id
            minutes_changed = t.total_minutes != total_minutes
            t.name, t.project_id, t.status_id = name, project_id, status_id
            t.parent_task_id, t.total_minutes = parent_task_id, total_minutes
        else:
            parent_changed = parent_task_id is not None
            t = Task(name=name, project_id=project_id, parent_task_id=parent_task_id,
                     status_id=status_id, total_minutes=total_minutes)
            s.add(t)
        if parent_changed:
            _reset_parent_manual_progress(s, parent_task_id)
        s.flush()
        propagate_progress(s, t.id, keep_manual=not (parent_changed or minutes_changed))
        if parent_changed and old_parent_id is not None:
            propagate_progress(s, old_parent_id, include_self=True, keep_manual=True)
        s.commit()
        return t.id


def set_task_status(task_id: int, status_id: Optional[int]) -> None:
    with SessionLocal() as s:
        t = _get_task(s, task_id)
        t.status_id = status_id
        s.flush()
        propagate_progress(s, task_id, keep_manual=True)
        s.commit()


def set_task_progress(task_id: int, value: int) -> Dict:
    """
    Store an operator-supplied progress value (0..100) on a task and
    recompute its ancestors. Returns the stored fields.
    """
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 100:
        raise ValueError(f"progress_value must be an integer between 0 and 100, got {value!r}")
    with SessionLocal() as s:
        t = _get_task(s, task_id)
        mode = ProgressMode.DEFAULT
        if t.project_id is not None:
            mode = ProgressMode(_get_project(s, t.project_id).progress_mode)
        t.manual_progress = True
        t.progress_value = value
        t.progress_mode = mode.value
        s.flush()
        propagate_progress(s, task_id)
        s.commit()
        logger.info("Task %s progress set to %s (mode=%s)", task_id, value, mode.value)
        return {"task_id": task_id, "progress_value": value, "progress_mode": mode.value}


def set_task_weight(task_id: int, weight: int) -> Dict:
    if isinstance(weight, bool) or not isinstance(weight, int) or weight < 0:
        raise ValueError(f"weight must be a non-negative integer, got {weight!r}")
    with SessionLocal() as s:
        t = _get_task(s, task_id)
        t.weight = weight
        t.progress_mode = ProgressMode.WEIGHTED.value
        s.flush()
        propagate_progress(s, task_id)
        s.commit()
        logger.info("Task %s weight set to %s", task_id, weight)
        return {"task_id": task_id, "weight": weight}


def archive_task(task_id: int, archived: bool = True) -> None:
    with SessionLocal() as s:
        t = _get_task(s, task_id)
        t.archived = archived
        s.flush()
        propagate_progress(s, task_id, keep_manual=True)
        s.commit()


def _apply_mode(p: Project, mode: ProgressMode) -> None:
    p.use_manual_progress = mode is ProgressMode.MANUAL
    p.use_weighted_progress = mode is ProgressMode.WEIGHTED
    p.use_time_progress = mode is ProgressMode.TIME


def set_project_progress_mode(project_id: int, mode: ProgressMode) -> bool:
    """
    Switch a project's progress mode. Values written under the old mode are
    cleared. Returns True if the mode changed.
    """
    mode = ProgressMode(mode)
    with SessionLocal() as s:
        p = _get_project(s, project_id)
        old_mode = ProgressMode(p.progress_mode)
        _apply_mode(p, mode)
        if old_mode is mode:
            s.commit()
            return False
        stale = s.exec(
            select(Task).where(Task.project_id == project_id, Task.progress_mode == old_mode.value)
        ).all()
        for t in stale:
            t.progress_value = None
            t.progress_mode = None
        s.commit()
        logger.info("Project %s progress mode %s -> %s; cleared %d task values",
                    project_id, old_mode.value, mode.value, len(stale))
        return True


def resolve_task_progress(task_id: int) -> ProgressResult:
    with SessionLocal() as s:
        return ProgressResolver(SqlProgressStore(s)).resolve(task_id)
