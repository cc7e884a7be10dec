from datetime import date

import pytest

from critpath.data_loader import build_board, standard_scenario
from critpath.model import Dependency, Task

TODAY = date(2026, 1, 5)


@pytest.fixture
def five_tasks() -> list[Task]:
    """A(3d), B(5d), C(4d), D(2d), E(3d)."""
    return [Task("A", "Design", 3), Task("B", "Backend", 5), Task("C", "Frontend", 4),
            Task("D", "Integration", 2), Task("E", "QA", 3)]


@pytest.fixture
def five_edges() -> list[Dependency]:
    """A->B, A->C, B->D, C->D, D->E."""
    return [Dependency("A", "B"), Dependency("A", "C"), Dependency("B", "D"),
            Dependency("C", "D"), Dependency("D", "E")]


@pytest.fixture
def board_and_refs():
    return build_board(standard_scenario(), today=TODAY)
