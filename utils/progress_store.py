# utils/progress_store.py
from typing import List

from sqlmodel import Session, select

from models.project import Project
from models.status_category import StatusCategory
from models.task import Task
from models.task_status import TaskStatus
from utils.progress import ManualFields, ProgressMode, ProgressStore, SubtaskProgress


class SqlProgressStore(ProgressStore):
    """ProgressStore over the ``tasks`` table; done-ness comes from the status category."""

    def __init__(self, session: Session):
        self._session = session

    def get_manual_fields(self, task_id) -> ManualFields:
        row = self._session.exec(
            select(Task.manual_progress, Task.progress_value).where(Task.id == task_id)
        ).first()
        if row is None:
            return ManualFields(False, None)
        manual_progress, progress_value = row
        return ManualFields(bool(manual_progress), progress_value)

    def is_done(self, task_id) -> bool:
        stmt = (
            select(Task.id)
            .join(TaskStatus, Task.status_id == TaskStatus.id)
            .join(StatusCategory, TaskStatus.category_id == StatusCategory.id)
            .where(Task.id == task_id, StatusCategory.is_done == True)  # noqa: E712
        )
        return self._session.exec(stmt).first() is not None

    def get_subtasks(self, task_id) -> List[SubtaskProgress]:
        stmt = (
            select(Task, StatusCategory.is_done)
            .outerjoin(TaskStatus, Task.status_id == TaskStatus.id)
            .outerjoin(StatusCategory, TaskStatus.category_id == StatusCategory.id)
            .where(Task.parent_task_id == task_id, Task.archived == False)  # noqa: E712
            .order_by(Task.id)
        )
        return [
            SubtaskProgress(
                id=t.id,
                is_done=bool(done),
                manual_progress=bool(t.manual_progress),
                progress_value=t.progress_value,
                weight=t.weight,
                total_minutes=t.total_minutes or 0,
            )
            for t, done in self._session.exec(stmt).all()
        ]

    def get_progress_mode(self, task_id) -> ProgressMode:
        project = self._session.exec(
            select(Project).join(Task, Task.project_id == Project.id).where(Task.id == task_id)
        ).first()
        if project is None:
            return ProgressMode.DEFAULT
        return ProgressMode(project.progress_mode)
