# utils/rollup.py
"""Keep the stored ``progress_value`` of parent tasks in step with their subtasks.

Structural writes (a new subtask, a changed value, weight or estimate) clear
the manual flag on ancestors. Status and archive changes leave a manual
ancestor alone.
"""
import logging
from typing import Dict, Iterator, List

from sqlmodel import Session, select

from models.task import Task
from utils.progress import ProgressResolver
from utils.progress_store import SqlProgressStore

logger = logging.getLogger(__name__)


def _parent_of(session: Session, task_id):
    return session.exec(select(Task.parent_task_id).where(Task.id == task_id)).first()


def iter_ancestors(session: Session, task_id) -> Iterator[int]:
    """Parent first, then upward. Stops on a cycle."""
    seen = {task_id}
    parent_id = _parent_of(session, task_id)
    while parent_id is not None and parent_id not in seen:
        yield parent_id
        seen.add(parent_id)
        parent_id = _parent_of(session, parent_id)


def _store_ratio(session: Session, resolver: ProgressResolver, task: Task) -> int:
    value = int(round(resolver.resolve(task.id).ratio))
    task.progress_value = value
    return value


def _recompute(session: Session, resolver: ProgressResolver, task: Task, keep_manual: bool) -> bool:
    if task.manual_progress:
        if keep_manual:
            return False
        task.manual_progress = False
        session.flush()
    value = _store_ratio(session, resolver, task)
    logger.debug("Rolled up task %s to %s", task.id, value)
    return True


def _has_subtasks(session: Session, task_id) -> bool:
    return session.exec(
        select(Task.id).where(Task.parent_task_id == task_id, Task.archived == False)  # noqa: E712
    ).first() is not None


def propagate_progress(session: Session, task_id, include_self: bool = False,
                       keep_manual: bool = False) -> List[int]:
    """Recompute every ancestor of ``task_id``. Caller commits.

    With ``include_self`` the task itself is recomputed first, if it still
    has subtasks. With ``keep_manual`` ancestors holding a manual value are
    left untouched; otherwise their manual flag is cleared.
    """
    resolver = ProgressResolver(SqlProgressStore(session))
    updated = []
    if include_self and _has_subtasks(session, task_id):
        if _recompute(session, resolver, session.get(Task, task_id), keep_manual):
            updated.append(task_id)
    for ancestor_id in list(iter_ancestors(session, task_id)):
        task = session.get(Task, ancestor_id)
        if task is None:
            break
        if _recompute(session, resolver, task, keep_manual):
            updated.append(ancestor_id)
    session.flush()
    return updated


def _depth(session: Session, task_id, cache: Dict[int, int]) -> int:
    if task_id not in cache:
        cache[task_id] = sum(1 for _ in iter_ancestors(session, task_id))
    return cache[task_id]


def recalculate_all_task_progress(session: Session) -> int:
    """Recompute stored progress for every task, deepest first. Caller commits.

    Any task with live subtasks, archived or not, loses its manual flag.
    Non-archived tasks without a manual value get a stored value, leaves
    included. Returns the number of tasks written.
    """
    parent_ids = set(session.exec(
        select(Task.parent_task_id)
        .where(Task.parent_task_id != None, Task.archived == False)  # noqa: E711,E712
        .distinct()
    ).all())
    if parent_ids:
        for parent in session.exec(select(Task).where(Task.id.in_(list(parent_ids)))).all():
            parent.manual_progress = False
        session.flush()

    tasks = session.exec(
        select(Task).where(Task.archived == False, Task.manual_progress == False)  # noqa: E712
    ).all()
    depths: Dict[int, int] = {}
    tasks = sorted(tasks, key=lambda t: _depth(session, t.id, depths), reverse=True)

    resolver = ProgressResolver(SqlProgressStore(session))
    for task in tasks:
        _store_ratio(session, resolver, task)
    session.flush()
    logger.info("Recalculated progress for %d tasks", len(tasks))
    return len(tasks)
