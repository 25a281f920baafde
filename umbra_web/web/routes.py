## routes.py
from __future__ import annotations

import os
from dataclasses import fields, is_dataclass
from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional

from flask import Blueprint, abort, current_app, jsonify, redirect, render_template, request, session, url_for

from umbra_web.config import AppSettings
from umbra_web.domain.models import AnalysisJob, Artifact, FileRef, Finding, JobStatus, Level
from umbra_web.domain.modules import MODULES, ModuleSpec, get_module
from umbra_web.fixtures.advisory import CHAT_GREETING, SPECIALTIES
from umbra_web.fixtures.companies import TIME_HORIZONS
from umbra_web.repositories.workspace_repository import WorkspaceRepository
from umbra_web.services.module_shell import ModuleShell
from umbra_web.services.result_renderer import filter_findings, render_result

SESSION_KEY = "workspace_id"

LEVEL_LABELS = {
    "high": "Alto",
    "medium": "Medio",
    "low": "Bajo",
}


def _plain(obj: Any) -> Any:
    """dataclasses/enums/tuples -> JSON-friendly values."""
    if isinstance(obj, Enum):
        return obj.value
    if is_dataclass(obj):
        return {f.name: _plain(getattr(obj, f.name)) for f in fields(obj)}
    if isinstance(obj, Mapping):
        return {str(_plain(k)): _plain(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_plain(v) for v in obj]
    return obj


def _file_size(storage) -> int:
    # size from the upload stream without reading it
    stream = storage.stream
    try:
        pos = stream.tell()
        stream.seek(0, os.SEEK_END)
        size = stream.tell()
        stream.seek(pos)
        return size
    except (AttributeError, OSError):
        return storage.content_length or 0


def _artifact_from_request(module: ModuleSpec) -> Artifact:
    files = tuple(
        FileRef(name=f.filename.strip(), size=_file_size(f))
        for f in request.files.getlist("files")
        if (f.filename or "").strip()
    )
    if not module.multiple_files:
        files = files[:1]

    return Artifact(
        files=files,
        text=request.form.get("text") or "",
        fields={name: (request.form.get(name) or "").strip() for name in module.required_fields},
    )


def _safe_level(raw: Optional[str]) -> Optional[Level]:
    raw = (raw or "").strip().lower()
    try:
        return Level(raw) if raw and raw != "all" else None
    except ValueError:
        return None


def _exchange(job: AnalysisJob) -> dict:
    return {
        "message": job.request.artifact.text if job.request else "",
        "reply": job.result.summary if job.result else None,
    }


def _title_options(findings: Iterable[Finding]) -> List[str]:
    # unique titles, first-seen order
    return list(dict.fromkeys(f.title for f in findings))


def job_payload(shell: ModuleShell) -> dict:
    job, artifact = shell.snapshot()
    payload = {
        "module": shell.module_id,
        "status": job.status.value,
        "can_dispatch": job.status is JobStatus.IDLE and shell.module.is_ready(artifact),
        "artifact": _plain(artifact) if artifact is not None else None,
        "request": None,
        "result": None,
        "view": None,
    }

    if job.request is not None:
        payload["request"] = {
            "artifact": _plain(job.request.artifact),
            "submitted_at": job.request.submitted_at.isoformat(timespec="seconds"),
        }

    if job.result is not None:
        view = render_result(job.result)
        payload["result"] = _plain(job.result)
        payload["view"] = {
            "score_band": view.score_band,
            "level_counts": view.level_counts,
            "category_counts": view.category_counts,
            "total_findings": view.total_findings,
        }

    if shell.module.toggle_findings:
        payload["applied"] = sorted(shell.applied())
    if shell.module.keeps_history:
        payload["history"] = [_exchange(j) for j in shell.history()]

    return payload


def create_blueprint(workspaces: WorkspaceRepository, settings: AppSettings) -> Blueprint:
    bp = Blueprint("web", __name__)

    def current_workspace():
        ws = workspaces.get_or_create(session.get(SESSION_KEY))
        session[SESSION_KEY] = ws.workspace_id
        return ws

    def viewed_workspace():
        # reads never create state; an unknown session sees blank modules
        return workspaces.get(session.get(SESSION_KEY)) or workspaces.transient()

    def shell_or_404(module_id: str, create: bool = True) -> ModuleShell:
        if get_module(module_id) is None:
            abort(404)
        ws = current_workspace() if create else viewed_workspace()
        shell = ws.shell(module_id)
        if shell is None:
            abort(404)
        return shell

    def back_to(module_id: str):
        return redirect(url_for("web.module_page", module_id=module_id))

    @bp.get("/")
    def index():
        return redirect(url_for("web.module_page", module_id=settings.default_module))

    @bp.get("/modules/<module_id>")
    def module_page(module_id: str):
        shell = shell_or_404(module_id, create=False)
        job, artifact = shell.snapshot()

        level_filter = _safe_level(request.args.get("level"))
        title_filter = None
        if shell.module.title_filter:
            title_filter = (request.args.get("field") or "").strip() or None
            if title_filter == "all":
                title_filter = None

        view = None
        findings = []
        title_options = []
        if job.result is not None:
            view = render_result(job.result)
            kept = {id(f) for f in filter_findings(job.result, level=level_filter, title=title_filter)}
            # keep each finding's position in the result; applied marks refer to it
            findings = [(i, f) for i, f in enumerate(job.result.findings) if id(f) in kept]
            if shell.module.title_filter:
                title_options = _title_options(job.result.findings)

        return render_template(
            "module.html",
            modules=MODULES,
            module=shell.module,
            job=job,
            artifact=artifact,
            can_dispatch=job.status is JobStatus.IDLE and shell.module.is_ready(artifact),
            view=view,
            findings=findings,
            applied=shell.applied(),
            history=shell.history(),
            level_filter=level_filter.value if level_filter else "all",
            field_filter=title_filter or "all",
            title_options=title_options,
            level_labels=LEVEL_LABELS,
            specialties=SPECIALTIES,
            time_horizons=TIME_HORIZONS,
            chat_greeting=CHAT_GREETING,
        )

    @bp.post("/modules/<module_id>/artifact")
    def set_artifact(module_id: str):
        shell = shell_or_404(module_id)
        artifact = _artifact_from_request(shell.module)
        shell.set_artifact(artifact)
        current_app.logger.info("Artifact set for %s: %r", module_id, artifact.describe())
        return back_to(module_id)

    @bp.post("/modules/<module_id>/dispatch")
    def dispatch(module_id: str):
        shell = shell_or_404(module_id)
        if not shell.dispatch():
            current_app.logger.debug("Dispatch for %s ignored (status=%s)", module_id, shell.job.status.value)
        return back_to(module_id)

    @bp.post("/modules/<module_id>/submit")
    def submit(module_id: str):
        shell = shell_or_404(module_id)
        if not shell.submit(_artifact_from_request(shell.module)):
            current_app.logger.debug("Submit for %s ignored (status=%s)", module_id, shell.job.status.value)
        return back_to(module_id)

    @bp.post("/modules/<module_id>/findings/<int:index>/toggle")
    def toggle_finding(module_id: str, index: int):
        shell = shell_or_404(module_id)
        if not shell.toggle_applied(index):
            current_app.logger.debug("Toggle of finding %d for %s ignored", index, module_id)
        return back_to(module_id)

    @bp.post("/modules/<module_id>/reset")
    def reset(module_id: str):
        shell_or_404(module_id).reset()
        return back_to(module_id)

    @bp.get("/api/modules/<module_id>")
    def module_status(module_id: str):
        return jsonify(job_payload(shell_or_404(module_id, create=False)))

    @bp.post("/workspace/close")
    def close_workspace():
        workspace_id = session.pop(SESSION_KEY, None)
        if workspaces.discard(workspace_id):
            current_app.logger.info("Workspace %s closed", workspace_id)
        return redirect(url_for("web.index"))

    return bp
