# models/__init__.py
from .status_category import StatusCategory
from .task_status import TaskStatus
from .project import Project
from .task import Task
