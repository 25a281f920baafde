from dataclasses import dataclass

from umbra_web.domain.models import AnalysisRequest, AnalysisResult, Level


class FixtureProvider:
    """Strategy interface: builds the canned result for one module."""
    def build(self, request: AnalysisRequest) -> AnalysisResult:
        raise NotImplementedError


@dataclass(frozen=True)
class StaticFixtureProvider(FixtureProvider):
    """Returns the same result for every request."""
    result: AnalysisResult

    def build(self, request: AnalysisRequest) -> AnalysisResult:
        return self.result


def level_from(raw: str) -> Level:
    return Level((raw or "").strip().lower())
