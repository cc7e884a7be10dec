from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, Iterator, Optional


@dataclass
class Task:
    id: str
    title: str
    duration_days: int = 1
    due_date: Optional[date] = None
    earliest_start: Optional[date] = None
    earliest_finish: Optional[date] = None
    latest_start: Optional[date] = None
    latest_finish: Optional[date] = None
    critical_path: bool = False

    @property
    def effective_duration(self) -> int:
        return max(1, int(self.duration_days or 1))

    def clear_schedule(self):
        self.earliest_start = self.earliest_finish = None
        self.latest_start = self.latest_finish = None
        self.critical_path = False


@dataclass(frozen=True)
class Dependency:
    """`dependent_id` cannot start before `dependency_id` finishes."""
    dependency_id: str
    dependent_id: str

    def __iter__(self) -> Iterator[str]:
        return iter((self.dependency_id, self.dependent_id))


@dataclass(frozen=True)
class ScheduleEntry:
    earliest_start: date
    earliest_finish: date
    latest_start: date
    latest_finish: date
    critical_path: bool
    # day offsets from the reference date
    es: int = 0
    ef: int = 0
    ls: int = 0
    lf: int = 0

    @property
    def slack(self) -> int:
        return self.ls - self.es


def apply_schedule(tasks: Iterable[Task], schedule: Dict[str, ScheduleEntry]):
    """Replace the derived fields of every task with its recompute result."""
    for t in tasks:
        entry = schedule.get(t.id)
        if entry is None:
            t.clear_schedule(); continue
        t.earliest_start, t.earliest_finish = entry.earliest_start, entry.earliest_finish
        t.latest_start, t.latest_finish = entry.latest_start, entry.latest_finish
        t.critical_path = entry.critical_path
