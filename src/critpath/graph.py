"""Adjacency maps built fresh for every engine call."""
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

Edge = Tuple[str, str]


@dataclass
class Graph:
    nodes: List[str] = field(default_factory=list)
    # dependency -> dependents
    adj: Dict[str, List[str]] = field(default_factory=dict)
    # dependent -> dependencies
    rev: Dict[str, List[str]] = field(default_factory=dict)

    def __len__(self):
        return len(self.nodes)


def build_graph(task_ids: Iterable[str], edges: Iterable[Edge]) -> Graph:
    """Build forward/reverse adjacency restricted to known task ids.

    Edges touching an unknown id are dropped without error so that a
    recompute racing a task deletion still succeeds. Duplicate edges
    collapse into one; node order follows the order of `task_ids`.
    """
    nodes = list(dict.fromkeys(task_ids))
    g = Graph(nodes=nodes, adj={n: [] for n in nodes}, rev={n: [] for n in nodes})
    for dep, dependent in edges:
        if dep not in g.adj or dependent not in g.adj: continue
        if dependent in g.adj[dep]: continue
        g.adj[dep].append(dependent); g.rev[dependent].append(dep)
    return g
