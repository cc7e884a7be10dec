from typing import Dict, Sequence

from .model import ScheduleEntry, Task


def compute_kpis(tasks: Sequence[Task], schedule: Dict[str, ScheduleEntry]):
    horizon = max((e.ef for e in schedule.values()), default=0)
    finish = max((e.earliest_finish for e in schedule.values()), default=None)
    late = [t.id for t in tasks
            if t.due_date and t.id in schedule and schedule[t.id].earliest_finish > t.due_date]
    return {
        'project_horizon_days': horizon,
        'project_finish': finish.isoformat() if finish else None,
        'critical_tasks': [tid for tid, e in schedule.items() if e.critical_path],
        'slack_days': {tid: e.slack for tid, e in schedule.items()},
        'late_tasks': late,
    }
