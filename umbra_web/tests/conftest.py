from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List

import pytest

from umbra_web.services.scheduler import ScheduledTask, Scheduler


# -----------------------------
# Test doubles
# -----------------------------
@dataclass
class ManualTask(ScheduledTask):
    delay_seconds: float
    callback: Callable[[], None]
    cancelled: bool = False
    fired: bool = False

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        """Runs the callback even if cancelled, like a timer that lost the race."""
        self.fired = True
        self.callback()


@dataclass
class ManualScheduler(Scheduler):
    tasks: List[ManualTask] = field(default_factory=list)

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> ScheduledTask:
        task = ManualTask(delay_seconds, callback)
        self.tasks.append(task)
        return task

    def run_due(self) -> int:
        """Fires every outstanding (not cancelled, not fired) task."""
        due = [t for t in self.tasks if not t.cancelled and not t.fired]
        for t in due:
            t.fire()
        return len(due)


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()
