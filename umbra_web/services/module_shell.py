from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, FrozenSet, Optional, Tuple

from umbra_web.domain.models import AnalysisJob, AnalysisRequest, Artifact, JobStatus
from umbra_web.domain.modules import ModuleSpec
from umbra_web.fixtures.base import FixtureProvider
from umbra_web.services.scheduler import ScheduledTask, Scheduler

log = logging.getLogger(__name__)


@dataclass
class ModuleShell:
    """
    One module instance: input capture, mock dispatch and reset around a
    single AnalysisJob.

    Transitions:
        Idle     --dispatch(ready artifact)--> Pending
        Pending  --scheduled completion-->     Complete
        Complete --set_artifact-->             Idle
        any      --reset-->                    Idle

    Everything else is a no-op. The completion runs on the scheduler's
    thread, so state changes happen under the shell's own lock.

    Modules that keep history archive each finished job when a new artifact
    replaces it (the chat transcript). Findings of the current result can be
    marked as applied; any job transition clears the marks.
    """
    module: ModuleSpec
    fixtures: FixtureProvider
    scheduler: Scheduler
    latency_seconds: float
    clock: Callable[[], datetime] = datetime.now
    history_limit: int = 50

    _job: AnalysisJob = field(default_factory=AnalysisJob.idle, init=False)
    _artifact: Optional[Artifact] = field(default=None, init=False)
    _task: Optional[ScheduledTask] = field(default=None, init=False)
    _history: Tuple[AnalysisJob, ...] = field(default=(), init=False)
    _applied: FrozenSet[int] = field(default=frozenset(), init=False)
    _generation: int = field(default=0, init=False)
    _disposed: bool = field(default=False, init=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, init=False, repr=False)

    @property
    def module_id(self) -> str:
        return self.module.module_id

    @property
    def job(self) -> AnalysisJob:
        with self._lock:
            return self._job

    @property
    def artifact(self) -> Optional[Artifact]:
        with self._lock:
            return self._artifact

    def snapshot(self) -> Tuple[AnalysisJob, Optional[Artifact]]:
        with self._lock:
            return self._job, self._artifact

    def history(self) -> Tuple[AnalysisJob, ...]:
        """Finished jobs before the current one, oldest first."""
        with self._lock:
            return self._history

    def applied(self) -> FrozenSet[int]:
        with self._lock:
            return self._applied

    def can_dispatch(self) -> bool:
        with self._lock:
            return self._can_dispatch()

    def _can_dispatch(self) -> bool:
        return (
            not self._disposed
            and self._job.status is JobStatus.IDLE
            and self.module.is_ready(self._artifact)
        )

    def set_artifact(self, artifact: Optional[Artifact]) -> None:
        with self._lock:
            if self._disposed:
                return
            if self._job.status is JobStatus.PENDING:
                log.debug("[%s] input locked while pending; artifact ignored", self.module_id)
                return

            if self._job.status is JobStatus.COMPLETE and self.module.keeps_history:
                self._history = (self._history + (self._job,))[-self.history_limit:]

            self._artifact = artifact
            # a new input invalidates whatever was shown before
            self._job = AnalysisJob.idle()
            self._applied = frozenset()

    def dispatch(self) -> bool:
        with self._lock:
            if not self._can_dispatch():
                log.debug("[%s] dispatch ignored (status=%s)", self.module_id, self._job.status.value)
                return False

            request = AnalysisRequest(artifact=self._artifact, submitted_at=self.clock())
            self._job = AnalysisJob.pending(request)
            self._applied = frozenset()
            self._generation += 1
            generation = self._generation

            task = self.scheduler.call_later(
                self.latency_seconds,
                lambda: self._complete(generation),
            )
            # a scheduler may run the callback inline; keep the handle only while it is outstanding
            if self._job.status is JobStatus.PENDING:
                self._task = task

        log.info(
            "[%s] dispatched %r, completes in %.1fs",
            self.module_id,
            request.artifact.describe(),
            self.latency_seconds,
        )
        return True

    def submit(self, artifact: Optional[Artifact]) -> bool:
        with self._lock:
            if self._job.status is JobStatus.PENDING:
                return False
            self.set_artifact(artifact)
            return self.dispatch()

    def toggle_applied(self, index: int) -> bool:
        """
        Flip the applied mark of finding `index` in the current result.
        Only modules with toggle_findings and a Complete job qualify;
        returns False otherwise.
        """
        with self._lock:
            if not self.module.toggle_findings or self._job.status is not JobStatus.COMPLETE:
                return False
            if not 0 <= index < len(self._job.result.findings):
                return False
            self._applied = self._applied ^ {index}
            return True

    def reset(self) -> None:
        with self._lock:
            self._reset_locked()
        log.info("[%s] reset", self.module_id)

    def dispose(self) -> None:
        with self._lock:
            self._reset_locked()
            self._disposed = True
        log.debug("[%s] disposed", self.module_id)

    def _reset_locked(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None
        # any completion already in flight now carries a stale generation
        self._generation += 1
        self._job = AnalysisJob.idle()
        self._artifact = None
        self._history = ()
        self._applied = frozenset()

    def _complete(self, generation: int) -> None:
        with self._lock:
            if (
                self._disposed
                or generation != self._generation
                or self._job.status is not JobStatus.PENDING
            ):
                log.debug("[%s] stale completion discarded (generation %d)", self.module_id, generation)
                return

            result = self.fixtures.build(self._job.request)
            self._job = self._job.completed(result)
            self._applied = frozenset()
            self._task = None

        log.info(
            "[%s] complete: score=%s findings=%d",
            self.module_id,
            result.score,
            len(result.findings),
        )
