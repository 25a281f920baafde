from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from umbra_web.domain.models import AnalysisResult, Finding, Level

LEVEL_ORDER = (Level.HIGH, Level.MEDIUM, Level.LOW)


@dataclass(frozen=True)
class ResultView:
    score: Optional[int]
    score_band: Optional[str]               # "good" | "fair" | "poor"
    level: Optional[Level]
    buckets: Tuple[Tuple[Level, Tuple[Finding, ...]], ...]
    level_counts: Dict[str, int]
    category_counts: Dict[str, int]
    total_findings: int
    recommendations: Tuple[str, ...]
    summary: str


def score_band(score: Optional[int]) -> Optional[str]:
    if score is None:
        return None
    if score >= 80:
        return "good"
    if score >= 60:
        return "fair"
    return "poor"


def render_result(result: AnalysisResult) -> ResultView:
    """
    Presentation grouping of a result. Pure: same input, same view.
    """
    buckets = tuple(
        (level, tuple(f for f in result.findings if f.level is level))
        for level in LEVEL_ORDER
    )

    category_counts: Dict[str, int] = {}
    for f in result.findings:
        category_counts[f.category] = category_counts.get(f.category, 0) + 1

    return ResultView(
        score=result.score,
        score_band=score_band(result.score),
        level=result.level,
        buckets=buckets,
        level_counts={level.value: len(items) for level, items in buckets},
        category_counts=category_counts,
        total_findings=len(result.findings),
        recommendations=tuple(result.recommendations),
        summary=result.summary,
    )


def filter_findings(
    result: AnalysisResult,
    level: Optional[Level] = None,
    category: Optional[str] = None,
    title: Optional[str] = None,
) -> Tuple[Finding, ...]:
    """None means "all" for any filter."""
    return tuple(
        f for f in result.findings
        if (level is None or f.level is level)
        and (category is None or f.category == category)
        and (title is None or f.title == title)
    )
