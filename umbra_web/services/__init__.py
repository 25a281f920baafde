from .module_shell import ModuleShell
from .result_renderer import ResultView, filter_findings, render_result
from .scheduler import ScheduledTask, Scheduler, ThreadingTimerScheduler
from .workspace import Workspace

__all__ = [
    "ModuleShell",
    "ResultView",
    "filter_findings",
    "render_result",
    "ScheduledTask",
    "Scheduler",
    "ThreadingTimerScheduler",
    "Workspace",
]
