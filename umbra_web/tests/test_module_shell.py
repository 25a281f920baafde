from __future__ import annotations

from datetime import datetime

import pytest

from umbra_web.domain.models import (
    AnalysisJob,
    AnalysisRequest,
    AnalysisResult,
    Artifact,
    FileRef,
    Finding,
    JobStatus,
    Level,
)
from umbra_web.domain.modules import get_module
from umbra_web.fixtures import StaticFixtureProvider
from umbra_web.fixtures.documents import DocumentReviewFixtures
from umbra_web.services.module_shell import ModuleShell

FIXED_NOW = datetime(2024, 3, 1, 10, 30, 0)

CANNED = AnalysisResult(
    score=50,
    findings=(Finding(category="x", level=Level.LOW, title="t", description="d"),),
    recommendations=("r",),
)


# -----------------------------
# Helpers
# -----------------------------
def make_shell(scheduler, module_id: str = "revision", fixtures=None, latency: float = 4.0) -> ModuleShell:
    return ModuleShell(
        module=get_module(module_id),
        fixtures=fixtures or StaticFixtureProvider(CANNED),
        scheduler=scheduler,
        latency_seconds=latency,
        clock=lambda: FIXED_NOW,
    )


def pdf(name: str = "contrato.pdf") -> Artifact:
    return Artifact(files=(FileRef(name=name, size=2048),))


def make_request() -> AnalysisRequest:
    return AnalysisRequest(artifact=pdf(), submitted_at=FIXED_NOW)


def assert_idle(shell: ModuleShell) -> None:
    job = shell.job
    assert job.status is JobStatus.IDLE
    assert job.request is None
    assert job.result is None


# -----------------------------
# Scenarios
# -----------------------------
def test_empty_input_does_not_dispatch(scheduler):
    shell = make_shell(scheduler)

    assert shell.submit(Artifact()) is False

    assert_idle(shell)
    assert scheduler.tasks == []


def test_dispatch_without_any_artifact_is_noop(scheduler):
    shell = make_shell(scheduler)

    assert shell.dispatch() is False
    assert_idle(shell)


def test_document_review_goes_pending_then_complete(scheduler):
    shell = make_shell(scheduler, fixtures=DocumentReviewFixtures())

    assert shell.submit(pdf()) is True

    job = shell.job
    assert job.status is JobStatus.PENDING
    assert job.result is None
    assert job.request.submitted_at == FIXED_NOW
    assert job.request.artifact.files[0].name == "contrato.pdf"
    assert scheduler.tasks[0].delay_seconds == 4.0

    assert scheduler.run_due() == 1

    job = shell.job
    assert job.status is JobStatus.COMPLETE
    assert job.result.score == 78
    assert len(job.result.findings) == 4
    assert len(job.result.recommendations) == 5


def test_reset_while_pending_discards_late_completion(scheduler):
    shell = make_shell(scheduler)
    shell.submit(pdf())
    task = scheduler.tasks[0]

    shell.reset()

    assert_idle(shell)
    assert task.cancelled is True

    # the timer fires anyway
    task.fire()

    assert_idle(shell)
    assert shell.artifact is None


def test_second_dispatch_is_noop_and_only_one_completion_fires(scheduler):
    shell = make_shell(scheduler)
    shell.set_artifact(pdf())

    assert shell.dispatch() is True
    assert shell.dispatch() is False

    assert len(scheduler.tasks) == 1
    assert scheduler.run_due() == 1
    assert shell.job.status is JobStatus.COMPLETE


# -----------------------------
# Invariants
# -----------------------------
def test_result_present_only_when_complete(scheduler):
    shell = make_shell(scheduler)
    assert shell.job.result is None

    shell.submit(pdf())
    assert shell.job.status is JobStatus.PENDING
    assert shell.job.result is None

    scheduler.run_due()
    assert shell.job.status is JobStatus.COMPLETE
    assert shell.job.result is CANNED


@pytest.mark.parametrize("stage", ["idle", "pending", "complete"])
def test_reset_from_any_state_is_idempotent(scheduler, stage):
    shell = make_shell(scheduler)
    if stage in ("pending", "complete"):
        shell.submit(pdf())
    if stage == "complete":
        scheduler.run_due()

    shell.reset()
    assert_idle(shell)
    first = shell.snapshot()

    shell.reset()
    assert_idle(shell)
    assert shell.snapshot() == first


def test_set_artifact_clears_previous_result(scheduler):
    shell = make_shell(scheduler)
    shell.submit(pdf())
    scheduler.run_due()
    assert shell.job.status is JobStatus.COMPLETE

    shell.set_artifact(pdf("otro.docx"))

    assert_idle(shell)
    assert shell.artifact.files[0].name == "otro.docx"
    assert shell.can_dispatch() is True


def test_set_artifact_is_ignored_while_pending(scheduler):
    shell = make_shell(scheduler)
    shell.submit(pdf())

    shell.set_artifact(pdf("otro.docx"))

    assert shell.job.status is JobStatus.PENDING
    assert shell.artifact.files[0].name == "contrato.pdf"


def test_submit_while_pending_is_noop(scheduler):
    shell = make_shell(scheduler)
    shell.submit(pdf())

    assert shell.submit(pdf("otro.docx")) is False
    assert len(scheduler.tasks) == 1


def test_resubmit_after_complete_starts_a_new_job(scheduler):
    shell = make_shell(scheduler)
    shell.submit(pdf())
    scheduler.run_due()

    assert shell.submit(pdf("segundo.pdf")) is True
    assert shell.job.status is JobStatus.PENDING
    assert shell.job.request.artifact.files[0].name == "segundo.pdf"


def test_stale_completion_from_previous_job_is_discarded(scheduler):
    shell = make_shell(scheduler)
    shell.submit(pdf("primero.pdf"))
    first = scheduler.tasks[0]
    shell.reset()
    shell.submit(pdf("segundo.pdf"))

    first.fire()
    assert shell.job.status is JobStatus.PENDING

    scheduler.run_due()
    assert shell.job.status is JobStatus.COMPLETE
    assert shell.job.request.artifact.files[0].name == "segundo.pdf"


def test_dispose_cancels_and_blocks_further_use(scheduler):
    shell = make_shell(scheduler)
    shell.submit(pdf())
    task = scheduler.tasks[0]

    shell.dispose()
    task.fire()

    assert_idle(shell)
    assert task.cancelled is True
    assert shell.submit(pdf()) is False
    assert len(scheduler.tasks) == 1


def test_inline_scheduler_completes_without_deadlock():
    class InlineScheduler:
        def call_later(self, delay_seconds, callback):
            callback()
            return None

    shell = make_shell(InlineScheduler())

    assert shell.submit(pdf()) is True
    assert shell.job.status is JobStatus.COMPLETE


@pytest.mark.parametrize(
    "module_id, artifact, ready",
    [
        ("chat", Artifact(text="   "), False),
        ("chat", Artifact(text="tengo un contrato"), True),
        ("consultoria", Artifact(text="despido", fields={"specialty": ""}), False),
        ("consultoria", Artifact(text="", fields={"specialty": "laboral"}), False),
        ("consultoria", Artifact(text="despido", fields={"specialty": "laboral"}), True),
        ("due-diligence", Artifact(fields={"company_name": "  "}), False),
        ("due-diligence", Artifact(fields={"company_name": "Empresa ABC S.A."}), True),
        ("evaluacion", Artifact(fields={"company_name": "ACME", "investment_amount": "1000"}), False),
        ("evaluacion", Artifact(fields={
            "company_name": "ACME", "investment_amount": "1000", "time_horizon": "3-5"}), True),
        ("revision", Artifact(files=(FileRef(name=" "),)), False),
        ("extraccion", Artifact(files=(FileRef(name="a.pdf"), FileRef(name="b.pdf"))), True),
    ],
)
def test_dispatch_requires_module_specific_input(scheduler, module_id, artifact, ready):
    shell = make_shell(scheduler, module_id=module_id)

    assert shell.submit(artifact) is ready
    expected = JobStatus.PENDING if ready else JobStatus.IDLE
    assert shell.job.status is expected


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(status=JobStatus.IDLE, result=CANNED),
        dict(status=JobStatus.COMPLETE),
        dict(status=JobStatus.PENDING),
    ],
)
def test_job_rejects_inconsistent_state(kwargs):
    with pytest.raises(ValueError):
        AnalysisJob(**kwargs)


def test_result_values_are_read_only_and_hashable():
    raw = {"categories": {"legal": {"score": 85}}, "parties": ["A", "B"]}
    result = AnalysisResult(
        score=1,
        findings=[Finding(category="x", level=Level.LOW, title="t", description="d", details={"k": 1})],
        details=raw,
    )
    raw["categories"]["legal"]["score"] = 0

    assert result.details["categories"]["legal"]["score"] == 85
    assert result.details["parties"] == ("A", "B")
    assert isinstance(result.findings, tuple)
    with pytest.raises(TypeError):
        result.details["extra"] = 1
    with pytest.raises(TypeError):
        result.details["categories"]["legal"]["score"] = 0
    with pytest.raises(TypeError):
        result.findings[0].details["k"] = 2

    same = AnalysisResult(
        score=1,
        findings=(Finding(category="x", level=Level.LOW, title="t", description="d", details={"k": 1}),),
        details={"categories": {"legal": {"score": 85}}, "parties": ("A", "B")},
    )
    assert result == same
    assert hash(result) == hash(same)
    assert len({AnalysisJob.pending(make_request()).completed(result)}) == 1


def test_artifact_fields_are_read_only():
    fields = {"company_name": "ACME"}
    artifact = Artifact(fields=fields)
    fields["company_name"] = "Otra"

    assert artifact.value("company_name") == "ACME"
    assert artifact == Artifact(fields={"company_name": "ACME"})
    with pytest.raises(TypeError):
        artifact.fields["company_name"] = "Otra"
    assert hash(artifact) == hash(Artifact(fields={"company_name": "ACME"}))


def test_history_keeps_finished_exchanges_for_chat(scheduler):
    shell = make_shell(scheduler, module_id="chat", latency=2.0)

    shell.submit(Artifact(text="uno"))
    scheduler.run_due()
    shell.submit(Artifact(text="dos"))
    scheduler.run_due()
    shell.submit(Artifact(text="tres"))

    assert [j.request.artifact.text for j in shell.history()] == ["uno", "dos"]
    assert all(j.status is JobStatus.COMPLETE for j in shell.history())
    assert shell.job.status is JobStatus.PENDING

    shell.reset()
    assert shell.history() == ()


def test_history_is_bounded(scheduler):
    shell = make_shell(scheduler, module_id="chat")
    shell.history_limit = 3

    for n in range(5):
        shell.submit(Artifact(text=f"m{n}"))
        scheduler.run_due()
    shell.set_artifact(Artifact(text="fin"))

    assert [j.request.artifact.text for j in shell.history()] == ["m2", "m3", "m4"]


def test_modules_without_history_drop_finished_jobs(scheduler):
    shell = make_shell(scheduler)

    shell.submit(pdf())
    scheduler.run_due()
    shell.submit(pdf("otro.pdf"))

    assert shell.history() == ()


def test_applied_marks_follow_the_current_result(scheduler):
    shell = make_shell(scheduler, module_id="correccion")
    shell.submit(pdf())

    assert shell.toggle_applied(0) is False

    scheduler.run_due()
    assert shell.toggle_applied(0) is True
    assert shell.toggle_applied(1) is False        # CANNED has one finding
    assert shell.toggle_applied(-1) is False
    assert shell.applied() == frozenset({0})

    assert shell.toggle_applied(0) is True
    assert shell.applied() == frozenset()

    shell.toggle_applied(0)
    shell.set_artifact(pdf("otro.pdf"))
    assert shell.applied() == frozenset()


def test_applied_marks_only_for_modules_that_allow_them(scheduler):
    shell = make_shell(scheduler, module_id="revision")
    shell.submit(pdf())
    scheduler.run_due()

    assert shell.toggle_applied(0) is False
    assert shell.applied() == frozenset()
