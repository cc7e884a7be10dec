"""Topological ordering, cycle checks and the two-pass CPM recompute."""
from collections import deque
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

import structlog

from .errors import CycleDetected
from .graph import Edge, Graph, build_graph
from .model import Dependency, ScheduleEntry, Task

log = structlog.get_logger()

TaskLike = Union[Task, str]
EdgeLike = Union[Dependency, Edge]


def _ids(tasks: Iterable[TaskLike]) -> List[str]:
    return [t if isinstance(t, str) else t.id for t in tasks]


def _pairs(edges: Iterable[EdgeLike]) -> List[Edge]:
    return [tuple(e) for e in edges]


def topo_order(g: Graph) -> List[str]:
    """Kahn's algorithm; zero in-degree nodes are seeded in task order."""
    indeg = {n: len(g.rev[n]) for n in g.nodes}
    q = deque(n for n in g.nodes if indeg[n] == 0); order = []
    while q:
        n = q.popleft(); order.append(n)
        for m in g.adj[n]:
            indeg[m] -= 1
            if indeg[m] == 0: q.append(m)
    if len(order) != len(g.nodes):
        done = set(order)
        raise CycleDetected([n for n in g.nodes if n not in done])
    return order


def topological_order(tasks: Iterable[TaskLike], edges: Iterable[EdgeLike]) -> List[str]:
    return topo_order(build_graph(_ids(tasks), _pairs(edges)))


def would_create_cycle(tasks: Iterable[TaskLike], committed: Iterable[EdgeLike],
                       proposed: Iterable[EdgeLike]) -> bool:
    """True when committing `proposed` on top of `committed` would close a cycle.

    Neither input is mutated; the proposal is only ever combined into a
    throwaway graph.
    """
    g = build_graph(_ids(tasks), _pairs(committed) + _pairs(proposed))
    try:
        topo_order(g)
    except CycleDetected as e:
        log.debug("proposal_would_cycle", unordered=e.unordered)
        return True
    return False


def forward_pass(g: Graph, order: Sequence[str], duration: Dict[str, int]) -> Tuple[Dict[str, int], Dict[str, int]]:
    es, ef = {}, {}
    for n in order:
        es[n] = max((ef[p] for p in g.rev[n]), default=0); ef[n] = es[n] + duration[n]
    return es, ef


def backward_pass(g: Graph, order: Sequence[str], duration: Dict[str, int],
                  horizon: int) -> Tuple[Dict[str, int], Dict[str, int]]:
    ls, lf = {}, {}
    for n in reversed(order):
        lf[n] = min((ls[c] for c in g.adj[n]), default=horizon); ls[n] = lf[n] - duration[n]
    return ls, lf


def critical_path(order: Sequence[str], es: Dict[str, int], ls: Dict[str, int]) -> List[str]:
    return [n for n in order if ls[n] - es[n] == 0]


def recompute(tasks: Sequence[Task], edges: Iterable[EdgeLike],
              today: Optional[date] = None) -> Dict[str, ScheduleEntry]:
    """Derive earliest/latest start and finish plus the critical flag for every task.

    Offsets are whole days from `today` (the current date unless given),
    captured once so every task shares one reference date. Raises
    CycleDetected before anything is computed when the graph has no order.
    """
    ref = today or date.today()
    g = build_graph(_ids(tasks), _pairs(edges)); order = topo_order(g)
    duration = {t.id: t.effective_duration for t in tasks}
    es, ef = forward_pass(g, order, duration)
    horizon = max(ef.values(), default=0)
    ls, lf = backward_pass(g, order, duration, horizon)

    def day(n):
        return ref + timedelta(days=n)

    schedule = {
        n: ScheduleEntry(earliest_start=day(es[n]), earliest_finish=day(ef[n]),
                         latest_start=day(ls[n]), latest_finish=day(lf[n]),
                         critical_path=ls[n] == es[n], es=es[n], ef=ef[n], ls=ls[n], lf=lf[n])
        for n in order
    }
    log.debug("schedule_computed", tasks=len(order), horizon=horizon,
              critical=critical_path(order, es, ls))
    return schedule
