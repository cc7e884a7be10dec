"""In-memory task board driving the engine after every mutation."""
import math
import re
import threading
import uuid
from datetime import date
from typing import Callable, Dict, Iterable, List, Optional

import structlog

from .errors import CycleDetected, DependencyConflict, TaskNotFound, ValidationError
from .model import Dependency, ScheduleEntry, Task, apply_schedule
from .schedule import recompute, would_create_cycle

log = structlog.get_logger()

_UNSET = object()
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def _parse_int(value) -> int:
    """Leading integer of a number or string, 0 when there is none."""
    if isinstance(value, str):
        m = _LEADING_INT.match(value)
        return int(m.group(1)) if m else 0
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return 0


def _clean_title(title) -> str:
    if not isinstance(title, str) or not title.strip():
        raise ValidationError("Title is required", details={"title": title})
    return title.strip()


class TaskBoard:
    """Owns the task/edge collection and keeps derived fields current.

    Every mutation runs under one lock together with the recompute that
    follows it, so readers never see edges and schedule out of step.
    """

    def __init__(self, today: Optional[date] = None,
                 id_factory: Optional[Callable[[], str]] = None):
        self.tasks: Dict[str, Task] = {}
        self.edges: List[Dependency] = []
        self.schedule: Dict[str, ScheduleEntry] = {}
        self.stale = False
        self.today = today
        self._new_id = id_factory or (lambda: uuid.uuid4().hex)
        self._lock = threading.RLock()

    def get(self, task_id: str) -> Task:
        try:
            return self.tasks[task_id]
        except KeyError:
            raise TaskNotFound(task_id) from None

    def create_task(self, title: str, duration_days=None, due_date: Optional[date] = None) -> Task:
        title = _clean_title(title)
        duration = 1
        if isinstance(duration_days, (int, float)) and not isinstance(duration_days, bool):
            # inf and nan fall back to the default
            if isinstance(duration_days, int) or math.isfinite(duration_days):
                duration = max(1, math.floor(duration_days))
        with self._lock:
            task = Task(id=self._new_id(), title=title, duration_days=duration, due_date=due_date)
            self.tasks[task.id] = task
            log.info("task_created", task_id=task.id, title=title, duration_days=duration)
            self._recompute_quietly()
        return task

    def update_task(self, task_id: str, *, title=_UNSET, duration_days=_UNSET, due_date=_UNSET) -> Task:
        changes = {}
        if duration_days is not _UNSET:
            d = _parse_int(duration_days)
            if d < 1:
                raise ValidationError("durationDays must be a positive integer",
                                      details={"duration_days": duration_days})
            changes["duration_days"] = d
        if due_date is not _UNSET:
            changes["due_date"] = due_date or None
        if title is not _UNSET:
            changes["title"] = _clean_title(title)
        if not changes:
            raise ValidationError("No fields to update")
        with self._lock:
            task = self.get(task_id)
            for k, v in changes.items():
                setattr(task, k, v)
            log.info("task_updated", task_id=task_id, fields=sorted(changes))
            self.recompute()
        return task

    def delete_task(self, task_id: str) -> None:
        with self._lock:
            self.get(task_id)
            del self.tasks[task_id]
            self.edges = [e for e in self.edges if task_id not in (e.dependency_id, e.dependent_id)]
            self.schedule.pop(task_id, None)
            log.info("task_deleted", task_id=task_id)
            self._recompute_quietly()

    def set_dependencies(self, task_id: str, dependency_ids: Iterable[str]) -> Task:
        """Replace the dependencies of `task_id`, rejecting sets that would cycle."""
        if isinstance(dependency_ids, str):
            raise ValidationError("dependencyIds must be an array")
        wanted = [d for d in dict.fromkeys(dependency_ids) if d and d != task_id]
        with self._lock:
            task = self.get(task_id)
            for d in wanted:
                self.get(d)
            kept = [e for e in self.edges if e.dependent_id != task_id]
            proposed = [Dependency(d, task_id) for d in wanted]
            if would_create_cycle(list(self.tasks), kept, proposed):
                log.warning("dependency_conflict", task_id=task_id, dependency_ids=wanted)
                raise DependencyConflict(task_id, wanted)
            self.edges = kept + proposed
            log.info("dependencies_replaced", task_id=task_id, count=len(proposed))
            self.recompute()
        return task

    def dependencies_of(self, task_id: str) -> List[Task]:
        return [self.tasks[e.dependency_id] for e in self.edges
                if e.dependent_id == task_id and e.dependency_id in self.tasks]

    def dependents_of(self, task_id: str) -> List[Task]:
        return [self.tasks[e.dependent_id] for e in self.edges
                if e.dependency_id == task_id and e.dependent_id in self.tasks]

    def recompute(self) -> Dict[str, ScheduleEntry]:
        with self._lock:
            tasks = list(self.tasks.values())
            try:
                schedule = recompute(tasks, list(self.edges), today=self.today)
            except CycleDetected as e:
                self.schedule, self.stale = {}, True
                for t in tasks:
                    t.clear_schedule()
                log.error("recompute_failed", error=e.message, unordered=e.unordered)
                raise
            apply_schedule(tasks, schedule)
            self.schedule, self.stale = schedule, False
            log.info("schedule_recomputed", tasks=len(tasks), edges=len(self.edges),
                     critical=sum(e.critical_path for e in schedule.values()))
            return schedule

    def _recompute_quietly(self):
        try:
            self.recompute()
        except CycleDetected:
            log.warning("schedule_left_unknown", tasks=len(self.tasks))
