"""Scenario files: tasks by reference, dependency edges and later deletions."""
import json
import math
import re
from dataclasses import dataclass, field
from datetime import date, timedelta
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pandas as pd
import structlog

from .board import TaskBoard
from .errors import ScenarioError

log = structlog.get_logger()

_RELATIVE = re.compile(r'^([+\-])(\d+)d$', re.IGNORECASE)


@dataclass
class TaskSpec:
    ref: str
    title: str
    duration_days: Optional[float] = None
    due_date: object = None


@dataclass
class Scenario:
    tasks: List[TaskSpec]
    dependencies: List[Tuple[str, str]] = field(default_factory=list)
    deletions: List[str] = field(default_factory=list)


def parse_due_date(value, today: Optional[date] = None) -> Optional[date]:
    """`+Nd`/`-Nd` relative to today, or anything pandas reads as a date."""
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    if isinstance(value, date) and not isinstance(value, pd.Timestamp):
        return value if type(value) is date else value.date()
    s = str(value).strip()
    if not s: return None
    m = _RELATIVE.match(s)
    if m:
        n = int(m.group(2)) * (-1 if m.group(1) == '-' else 1)
        return (today or date.today()) + timedelta(days=n)
    ts = pd.to_datetime(s, errors='coerce')
    return None if pd.isna(ts) else ts.date()


def _duration(value):
    try:
        d = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(d) else d


def _require(df: pd.DataFrame, name: str, *columns: str):
    missing = set(columns) - set(df.columns)
    if missing:
        raise ScenarioError(f"{name} missing columns: {sorted(missing)}")


def _tasks_from_frame(tasks_df: pd.DataFrame) -> Tuple[List[TaskSpec], List[Tuple[str, str]]]:
    _require(tasks_df, 'Tasks table', 'Ref', 'Title')
    tasks, deps = [], []
    for _, row in tasks_df.iterrows():
        ref = str(row['Ref']).strip()
        tasks.append(TaskSpec(ref=ref, title=str(row['Title']).strip(),
                              duration_days=_duration(row.get('DurationDays')),
                              due_date=row.get('DueDate')))
        dep = row.get('DependsOn')
        if isinstance(dep, str) and dep.strip():
            deps += [(d.strip(), ref) for d in dep.split(',') if d.strip()]
    return tasks, deps


def load_excel(path) -> Scenario:
    xls = pd.read_excel(path, sheet_name=None)
    if 'Tasks' not in xls:
        raise ScenarioError(f"No 'Tasks' sheet in {path}")
    tasks, deps = _tasks_from_frame(xls['Tasks'])
    deps_df = xls.get('Dependencies')
    if deps_df is not None:
        _require(deps_df, 'Dependencies sheet', 'Dependency', 'Dependent')
        for _, r in deps_df.iterrows():
            deps.append((str(r['Dependency']).strip(), str(r['Dependent']).strip()))
    dels_df = xls.get('Deletions'); deletions = []
    if dels_df is not None:
        _require(dels_df, 'Deletions sheet', 'Ref')
        deletions = [str(r).strip() for r in dels_df['Ref'].dropna()]
    return Scenario(tasks=tasks, dependencies=deps, deletions=deletions)


def load_csv(path) -> Scenario:
    tasks, deps = _tasks_from_frame(pd.read_csv(path))
    return Scenario(tasks=tasks, dependencies=deps)


def load_json(path) -> Scenario:
    try:
        with open(path, encoding='utf-8') as f:
            raw = json.load(f)
        tasks = [TaskSpec(ref=t['ref'], title=t['title'], duration_days=_duration(t.get('durationDays')),
                          due_date=t.get('dueDate')) for t in raw['tasks']]
        deps = [(e['dependency'], e['dependent']) for e in raw.get('dependencies') or []]
    except (json.JSONDecodeError, KeyError, TypeError, AttributeError) as e:
        raise ScenarioError(f"Malformed scenario {path}: {e}") from e
    return Scenario(tasks=tasks, dependencies=deps, deletions=list(raw.get('deletions') or []))


def load_scenario(path) -> Scenario:
    p = Path(path)
    if not p.exists():
        raise ScenarioError(f"Scenario file not found: {p}")
    suffix = p.suffix.lower()
    if suffix in ('.xlsx', '.xls'): return load_excel(p)
    if suffix == '.csv': return load_csv(p)
    return load_json(p)


def standard_scenario() -> Scenario:
    return Scenario(
        tasks=[TaskSpec('A', 'A: Design', 3, '+10d'), TaskSpec('B', 'B: Backend', 5, '+15d'),
               TaskSpec('C', 'C: Frontend', 4, '+15d'), TaskSpec('D', 'D: Integration', 2, '+18d'),
               TaskSpec('E', 'E: QA', 3, '+21d')],
        dependencies=[('A', 'B'), ('A', 'C'), ('B', 'D'), ('C', 'D'), ('D', 'E')],
    )


def build_board(scenario: Scenario, today: Optional[date] = None) -> Tuple[TaskBoard, Dict[str, str]]:
    """Create a board holding the scenario's tasks and dependencies."""
    board = TaskBoard(today=today); refs = {}
    for t in scenario.tasks:
        task = board.create_task(t.title, t.duration_days, parse_due_date(t.due_date, today))
        refs[t.ref] = task.id
    grouped: Dict[str, List[str]] = {}
    for dep, dependent in scenario.dependencies:
        if dep not in refs or dependent not in refs:
            raise ScenarioError(f"Unknown task ref in dependency {dep} -> {dependent}")
        grouped.setdefault(refs[dependent], []).append(refs[dep])
    for dependent, deps in grouped.items():
        board.set_dependencies(dependent, deps)
    log.info("scenario_loaded", tasks=len(refs), dependencies=len(scenario.dependencies))
    return board, refs
