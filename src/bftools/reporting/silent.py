from __future__ import annotations

from typing import Any, List

from .base import Reporter, TaskStatus


class SilentReporter(Reporter):
    """Prints nothing; keeps error and warning lines for later inspection.

    Used for ``-r silent`` runs and inside batch worker processes.
    """

    def __init__(self) -> None:
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def start_task(
        self, task_id: str, name: str, total: int | None = None, **meta: Any
    ) -> None:
        return None

    def advance(self, task_id: str, step: int = 1, **meta: Any) -> None:
        return None

    def end_task(
        self,
        task_id: str,
        status: TaskStatus = TaskStatus.SUCCESS,
        **final_meta: Any,
    ) -> None:
        return None

    def status(self, message: str, **fields: Any) -> None:
        return None

    def error(self, message: str, **fields: Any) -> None:
        self.errors.append(message)

    def warning(self, message: str, **fields: Any) -> None:
        self.warnings.append(message)

    def section(self, title: str) -> None:
        return None
