from __future__ import annotations

import os
import time
from typing import Any, Dict, List
from .base import (
    Reporter,
    TaskStatus,
    TaskRecord,
    format_stats,
    get_verbosity,
)

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    Progress,
    SpinnerColumn,
    TextColumn,
    BarColumn,
    TimeElapsedColumn,
)

_STATUS_ICON = {
    TaskStatus.SUCCESS: "[green]✔[/]",
    TaskStatus.FAILED: "[red]✖[/]",
    TaskStatus.SKIPPED: "→",
}


class RichReporter(Reporter):
    supports_progress = True

    def __init__(self, console: Console | None = None):
        self.console = console or Console(
            stderr=True, highlight=False, soft_wrap=False
        )
        self._transient = os.getenv(
            "BFTOOLS_PROGRESS_TRANSIENT", "0"
        ).lower() in ("1", "true", "yes")
        self.progress: Progress | None = None
        self._tasks: Dict[str, TaskRecord] = {}
        self._progress_ids: Dict[str, Any] = {}
        self._deferred: List[str] = []

    def _ensure_progress(self) -> Progress:
        if self.progress is None:
            self.progress = Progress(
                SpinnerColumn(spinner_name="dots"),
                TextColumn("{task.description}", justify="left"),
                BarColumn(bar_width=None),
                TextColumn("{task.completed}/{task.total}"),
                TimeElapsedColumn(),
                transient=self._transient,
                console=self.console,
                expand=True,
            )
            self.progress.start()
        return self.progress

    def _completion_line(self, rec: TaskRecord) -> str:
        icon = _STATUS_ICON.get(rec.status, "")
        total_part = (
            f" {rec.completed}/{rec.total}" if rec.total is not None else ""
        )
        return (
            f"{icon} {escape(rec.name)}{total_part} ({rec.duration * 1000:.1f}ms)"
            f"{escape(format_stats(rec.meta))}"
        )

    def start_task(
        self, task_id: str, name: str, total: int | None = None, **meta: Any
    ) -> None:
        self._tasks[task_id] = TaskRecord(task_id, name, total, meta=meta)
        # Only counted tasks get a progress bar; stages are plain lines.
        if total is not None:
            progress = self._ensure_progress()
            self._progress_ids[task_id] = progress.add_task(name, total=total)

    def advance(self, task_id: str, step: int = 1, **meta: Any) -> None:
        rec = self._tasks.get(task_id)
        if not rec:
            return
        rec.completed += step
        rec.meta.update(meta)
        pid = self._progress_ids.get(task_id)
        if pid is not None and self.progress is not None:
            item = meta.get("current_item")
            desc = f"{rec.name} ↳ {item}" if item else rec.name
            self.progress.update(pid, completed=rec.completed, description=desc)

    def end_task(
        self,
        task_id: str,
        status: TaskStatus = TaskStatus.SUCCESS,
        **final_meta: Any,
    ) -> None:
        rec = self._tasks.pop(task_id, None)
        if not rec:
            return
        rec.status = status
        rec.end_time = time.perf_counter()
        rec.meta.update(final_meta)
        pid = self._progress_ids.pop(task_id, None)
        if pid is not None and self.progress is not None:
            self.progress.update(pid, completed=rec.total, description=rec.name)
        line = self._completion_line(rec)
        if self._transient and self.progress is not None:
            self._deferred.append(line)
        else:
            self.console.print(line)
        if not self._progress_ids and self.progress is not None:
            self.flush()

    def status(self, message: str, **fields: Any) -> None:
        self.console.print(f"[green]INFO[/]: {escape(message)}")

    def verbose(self, message: str, *, level: int = 1, **fields: Any) -> None:
        if get_verbosity() < level:
            return
        self.console.print(f"[cyan]VERB{level}[/]: {escape(message)}")

    def error(self, message: str, **fields: Any) -> None:
        self.console.print(f"[bold red]ERROR[/]: {escape(message)}")

    def warning(self, message: str, **fields: Any) -> None:
        self.console.print(f"[yellow]WARN[/]: {escape(message)}")

    def section(self, title: str) -> None:
        self.console.rule(title)

    def flush(self) -> None:
        if self.progress is not None:
            try:
                self.progress.stop()
            finally:
                self.progress = None
                self._progress_ids.clear()
                if self._deferred:
                    self.console.print("\n".join(self._deferred))
                    self._deferred.clear()
