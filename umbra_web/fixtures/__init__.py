from typing import Dict

from .advisory import ChatFixtures, ConsultationFixtures
from .base import FixtureProvider, StaticFixtureProvider
from .companies import DueDiligenceFixtures, InvestorRiskFixtures
from .documents import (
    ContractCorrectionFixtures,
    DataExtractionFixtures,
    DocumentReviewFixtures,
    RiskClauseFixtures,
)


def default_fixture_providers() -> Dict[str, FixtureProvider]:
    return {
        "chat": ChatFixtures(),
        "consultoria": ConsultationFixtures(),
        "revision": DocumentReviewFixtures(),
        "correccion": ContractCorrectionFixtures(),
        "analisis": RiskClauseFixtures(),
        "due-diligence": DueDiligenceFixtures(),
        "extraccion": DataExtractionFixtures(),
        "evaluacion": InvestorRiskFixtures(),
    }


__all__ = [
    "FixtureProvider",
    "StaticFixtureProvider",
    "default_fixture_providers",
]
