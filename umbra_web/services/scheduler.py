import threading
from dataclasses import dataclass
from typing import Callable


class ScheduledTask:
    """Handle returned by a Scheduler."""
    def cancel(self) -> None:
        raise NotImplementedError


class Scheduler:
    """Strategy interface."""
    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> ScheduledTask:
        raise NotImplementedError


@dataclass
class TimerTask(ScheduledTask):
    timer: threading.Timer

    def cancel(self) -> None:
        self.timer.cancel()


@dataclass(frozen=True)
class ThreadingTimerScheduler(Scheduler):
    daemon: bool = True

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> ScheduledTask:
        timer = threading.Timer(max(0.0, delay_seconds), callback)
        timer.daemon = self.daemon
        timer.start()
        return TimerTask(timer)
