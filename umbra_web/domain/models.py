######## models.py
########

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple


class JobStatus(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    COMPLETE = "complete"


class Level(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def freeze(value: Any) -> Any:
    """Read-only copy: mappings -> MappingProxyType, lists/tuples -> tuples, recursively."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(v) for v in value)
    return value


@dataclass(frozen=True)
class FileRef:
    name: str
    size: int = 0               # bytes; content is never read


@dataclass(frozen=True)
class Artifact:
    """
    What the user handed to a module: uploaded file metadata, a text field,
    and/or a few typed form fields. Which of these a module needs is decided
    by its ModuleSpec.
    """
    files: Tuple[FileRef, ...] = ()
    text: str = ""
    fields: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        object.__setattr__(self, "files", tuple(self.files))
        object.__setattr__(self, "fields", freeze(self.fields))

    def value(self, name: str) -> str:
        return (self.fields.get(name) or "").strip()

    def describe(self) -> str:
        if self.files:
            names = [f.name for f in self.files]
            return names[0] if len(names) == 1 else f"{len(names)} files"
        if self.text.strip():
            return self.text.strip()[:60]
        return ", ".join(f"{k}={v}" for k, v in self.fields.items() if v)


@dataclass(frozen=True)
class AnalysisRequest:
    artifact: Artifact
    submitted_at: datetime


@dataclass(frozen=True)
class Finding:
    category: str
    level: Level
    title: str
    description: str
    location: str = ""
    details: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        object.__setattr__(self, "details", freeze(self.details))


@dataclass(frozen=True)
class AnalysisResult:
    score: Optional[int] = None         # 0..100
    level: Optional[Level] = None       # categorical alternative to score
    findings: Tuple[Finding, ...] = ()
    recommendations: Tuple[str, ...] = ()
    summary: str = ""
    details: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        object.__setattr__(self, "findings", tuple(self.findings))
        object.__setattr__(self, "recommendations", tuple(self.recommendations))
        object.__setattr__(self, "details", freeze(self.details))


@dataclass(frozen=True)
class AnalysisJob:
    status: JobStatus
    request: Optional[AnalysisRequest] = None
    result: Optional[AnalysisResult] = None

    def __post_init__(self):
        if (self.result is not None) != (self.status is JobStatus.COMPLETE):
            raise ValueError(f"A {self.status.value} job cannot carry result={self.result!r}.")
        if (self.request is not None) == (self.status is JobStatus.IDLE):
            raise ValueError(f"A {self.status.value} job cannot carry request={self.request!r}.")

    @staticmethod
    def idle() -> "AnalysisJob":
        return AnalysisJob(status=JobStatus.IDLE)

    @staticmethod
    def pending(request: AnalysisRequest) -> "AnalysisJob":
        return AnalysisJob(status=JobStatus.PENDING, request=request)

    def completed(self, result: AnalysisResult) -> "AnalysisJob":
        return AnalysisJob(status=JobStatus.COMPLETE, request=self.request, result=result)
