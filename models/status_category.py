from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List, TYPE_CHECKING

if TYPE_CHECKING:
    from models.task_status import TaskStatus

class StatusCategory(SQLModel, table=True):
    __tablename__ = "sys_task_status_categories"
    __table_args__ = {"extend_existing": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, unique=True)
    is_todo: bool = Field(default=False)
    is_doing: bool = Field(default=False)
    is_done: bool = Field(default=False)

    statuses: List["TaskStatus"] = Relationship(back_populates="category")
