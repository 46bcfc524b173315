# models/task.py
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from models.project import Project
    from models.task_status import TaskStatus

class Task(SQLModel, table=True):
    __tablename__ = "tasks"
    __table_args__ = {"extend_existing": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: Optional[int] = Field(default=None, foreign_key="projects.id", index=True)
    parent_task_id: Optional[int] = Field(default=None, foreign_key="tasks.id", index=True)
    name: str
    status_id: Optional[int] = Field(default=None, foreign_key="task_statuses.id")
    archived: bool = Field(default=False)

    manual_progress: bool = Field(default=False)
    progress_value: Optional[int] = None  # 0..100
    weight: Optional[int] = None
    total_minutes: int = Field(default=0)
    progress_mode: Optional[str] = None  # mode the current value/weight was set under

    project: Optional["Project"] = Relationship(back_populates="tasks")
    status: Optional["TaskStatus"] = Relationship(back_populates="tasks")
