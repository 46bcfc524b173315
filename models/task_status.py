from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List, TYPE_CHECKING

if TYPE_CHECKING:
    from models.status_category import StatusCategory
    from models.task import Task

class TaskStatus(SQLModel, table=True):
    __tablename__ = "task_statuses"
    __table_args__ = {"extend_existing": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    project_id: Optional[int] = Field(default=None, foreign_key="projects.id")
    category_id: int = Field(foreign_key="sys_task_status_categories.id")
    sort_order: int = Field(default=0)

    category: "StatusCategory" = Relationship(back_populates="statuses")
    tasks: List["Task"] = Relationship(back_populates="status")
