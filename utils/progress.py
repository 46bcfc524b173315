# utils/progress.py
"""Task completion ratio.

``ProgressResolver.resolve`` turns a task id into a ``ProgressResult``. It only
reads through a ``ProgressStore``, so it can run against the SQL adapter in
``utils.progress_store`` or against an in-memory stub in tests.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Callable, Dict, List, NamedTuple, Optional

logger = logging.getLogger(__name__)


class ProgressMode(str, Enum):
    DEFAULT = "default"
    MANUAL = "manual"
    WEIGHTED = "weighted"
    TIME = "time"


class ManualFields(NamedTuple):
    manual_progress: bool
    progress_value: Optional[int]


@dataclass(frozen=True)
class SubtaskProgress:
    id: int
    is_done: bool
    manual_progress: bool = False
    progress_value: Optional[int] = None
    weight: Optional[int] = None
    total_minutes: int = 0

    @property
    def contribution(self) -> float:
        """Own manual value when set, otherwise 100 for done and 0 for not done."""
        if self.manual_progress and self.progress_value is not None:
            return float(self.progress_value)
        return 100.0 if self.is_done else 0.0


@dataclass(frozen=True)
class ProgressResult:
    ratio: float
    total_completed: int
    total_tasks: int
    is_manual: bool

    @property
    def has_progress_data(self) -> bool:
        return self.is_manual or self.total_tasks > 0

    def to_dict(self) -> Dict:
        return asdict(self)


class ProgressStore(ABC):
    """Read access the resolver needs. ``get_subtasks`` excludes archived rows."""

    @abstractmethod
    def get_manual_fields(self, task_id) -> ManualFields:
        pass

    @abstractmethod
    def is_done(self, task_id) -> bool:
        pass

    @abstractmethod
    def get_subtasks(self, task_id) -> List[SubtaskProgress]:
        pass

    def get_progress_mode(self, task_id) -> ProgressMode:
        return ProgressMode.DEFAULT


def _bounded(ratio: float) -> float:
    return max(0.0, min(100.0, ratio))


def _mean(subtasks: List[SubtaskProgress]) -> float:
    return sum(s.contribution for s in subtasks) / len(subtasks)


def _weighted(subtasks: List[SubtaskProgress], key: Callable[[SubtaskProgress], int]) -> float:
    total = sum(key(s) for s in subtasks)
    if total == 0:
        return 0.0
    return sum(s.contribution * key(s) for s in subtasks) / total


_AGGREGATORS: Dict[ProgressMode, Callable[[List[SubtaskProgress]], float]] = {
    ProgressMode.MANUAL: _mean,
    ProgressMode.WEIGHTED: lambda subs: _weighted(subs, lambda s: 100 if s.weight is None else s.weight),
    ProgressMode.TIME: lambda subs: _weighted(subs, lambda s: s.total_minutes or 0),
}


class ProgressResolver:
    def __init__(self, store: ProgressStore):
        self._store = store

    def resolve(self, task_id) -> ProgressResult:
        """Compute the completion ratio of ``task_id``.

        An unknown id is not an error: it resolves to a zero ratio with no
        subtasks, the same shape as a not-done task without children.
        """
        manual = self._store.get_manual_fields(task_id)
        mode = self._store.get_progress_mode(task_id)
        if mode is ProgressMode.DEFAULT:
            result = self._resolve_default(task_id, manual)
        else:
            result = self._resolve_with_mode(task_id, manual, mode)
        logger.debug("Resolved progress for task %s (mode=%s): %s", task_id, mode.value, result)
        return result

    def _resolve_default(self, task_id, manual: ManualFields) -> ProgressResult:
        if manual.manual_progress and manual.progress_value is not None:
            return ProgressResult(float(manual.progress_value), 0, 0, True)

        parent_done = 1 if self._store.is_done(task_id) else 0
        subtasks = self._store.get_subtasks(task_id)
        subtasks_done = sum(1 for s in subtasks if s.is_done)

        # The task itself counts toward completed but not toward the total.
        total_completed = parent_done + subtasks_done
        total_tasks = len(subtasks)

        if total_tasks > 0:
            ratio = (total_completed / total_tasks) * 100
        else:
            ratio = float(parent_done * 100)
        return ProgressResult(_bounded(ratio), total_completed, total_tasks, False)

    def _resolve_with_mode(self, task_id, manual: ManualFields, mode: ProgressMode) -> ProgressResult:
        subtasks = self._store.get_subtasks(task_id)

        if not subtasks:
            # Manual values only stick on leaf tasks in these modes.
            if manual.manual_progress and manual.progress_value is not None:
                return ProgressResult(float(manual.progress_value), 0, 0, True)
            parent_done = 1 if self._store.is_done(task_id) else 0
            return ProgressResult(float(parent_done * 100), parent_done, 0, False)

        ratio = _AGGREGATORS[mode](subtasks)
        subtasks_done = sum(1 for s in subtasks if s.is_done)
        return ProgressResult(_bounded(ratio), subtasks_done, len(subtasks), False)


def resolve(store: ProgressStore, task_id) -> ProgressResult:
    return ProgressResolver(store).resolve(task_id)
