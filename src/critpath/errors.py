"""Exceptions raised by the scheduling engine and the task board."""
from typing import Dict, List, Optional


class CritPathError(Exception):
    """Base exception for all critpath errors."""

    def __init__(self, message: str, *, details: Optional[Dict[str, object]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class CycleDetected(CritPathError):
    """Raised when the dependency graph has no topological order."""

    def __init__(self, unordered: List[str]) -> None:
        super().__init__(
            f"Cycle detected among {len(unordered)} task(s)",
            details={"unordered": list(unordered)},
        )
        self.unordered = list(unordered)


class DependencyConflict(CritPathError):
    """Raised when a proposed dependency set would break acyclicity."""

    def __init__(self, task_id: str, dependency_ids: List[str]) -> None:
        super().__init__(
            "Circular dependency detected",
            details={"task_id": task_id, "dependency_ids": list(dependency_ids)},
        )


class TaskNotFound(CritPathError):
    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task not found: {task_id}", details={"task_id": task_id})


class ValidationError(CritPathError):
    """Raised when a task mutation carries invalid values."""


class ScenarioError(CritPathError):
    """Raised when a scenario file cannot be read."""
