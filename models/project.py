# models/project.py
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List, TYPE_CHECKING

if TYPE_CHECKING:
    from models.task import Task

class Project(SQLModel, table=True):
    __tablename__ = "projects"
    __table_args__ = {"extend_existing": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    use_manual_progress: bool = Field(default=False)
    use_weighted_progress: bool = Field(default=False)
    use_time_progress: bool = Field(default=False)

    tasks: List["Task"] = Relationship(back_populates="project")

    @property
    def progress_mode(self) -> str:
        """First enabled flag wins: manual, then weighted, then time."""
        if self.use_manual_progress:
            return "manual"
        if self.use_weighted_progress:
            return "weighted"
        if self.use_time_progress:
            return "time"
        return "default"
