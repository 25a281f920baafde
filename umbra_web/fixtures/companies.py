"""
Canned results for the company-level modules: due diligence and the
investor risk evaluation.
"""
from __future__ import annotations

import re

from umbra_web.domain.models import AnalysisRequest, AnalysisResult, Finding, Level
from umbra_web.fixtures.base import FixtureProvider, level_from

TIME_HORIZONS = {
    "1-2": "1-2 años",
    "3-5": "3-5 años",
    "5+": "Más de 5 años",
}

RISK_CATEGORY_LABELS = {
    "financial": "Financiero",
    "legal": "Legal",
    "operational": "Operacional",
    "market": "Mercado",
    "regulatory": "Regulatorio",
}


def _parse_amount(raw: str) -> int:
    # leading digits only: "1500000.75" -> 1500000
    m = re.match(r"\s*(\d+)", raw or "")
    return int(m.group(1)) if m else 0


class DueDiligenceFixtures(FixtureProvider):
    def build(self, request: AnalysisRequest) -> AnalysisResult:
        company_name = request.artifact.value("company_name")

        key_findings = [
            ("positive", "Legal", "Estructura Societaria Sólida",
             "La empresa mantiene una estructura societaria clara y bien documentada, con registros "
             "actualizados en el Registro de Comercio.",
             "medium"),
            ("negative", "Financial", "Endeudamiento Elevado",
             "La empresa presenta un ratio de endeudamiento del 78%, superior al promedio de la industria "
             "(45%). Esto podría indicar dificultades financieras futuras.",
             "high"),
            ("negative", "Regulatory", "Multas Ambientales Recientes",
             "Se identificaron 3 multas ambientales en los últimos 24 meses por un total de $2.5M, "
             "indicando posibles deficiencias en cumplimiento ambiental.",
             "high"),
            ("neutral", "Operational", "Certificaciones de Calidad",
             "La empresa cuenta con certificaciones ISO 9001 y ISO 14001 vigentes, demostrando compromiso "
             "con calidad y medio ambiente.",
             "medium"),
            ("negative", "Legal", "Litigios Pendientes",
             "Existen 2 litigios laborales pendientes por un monto total estimado de $800K, relacionados "
             "con despidos del año anterior.",
             "medium"),
            ("positive", "Financial", "Crecimiento de Ingresos Sostenido",
             "Los ingresos han crecido consistentemente un 12% anual en los últimos 3 años, mostrando una "
             "tendencia positiva del negocio.",
             "high"),
        ]

        return AnalysisResult(
            score=72,
            findings=tuple(
                Finding(
                    category=category,
                    level=level_from(impact),
                    title=title,
                    description=description,
                    details={"type": kind},
                )
                for kind, category, title, description, impact in key_findings
            ),
            recommendations=(
                "Solicitar plan de reducción de endeudamiento con cronograma específico",
                "Requerir garantías adicionales debido al alto nivel de endeudamiento",
                "Evaluar el impacto de las multas ambientales en la valoración",
                "Solicitar póliza de seguro que cubra los litigios laborales pendientes",
                "Considerar cláusulas de ajuste de precio basadas en resolución de litigios",
                "Implementar monitoreo trimestral de indicadores financieros clave",
            ),
            summary=f"Due diligence completado para {company_name}.",
            details={
                "company_name": company_name,
                "status": "completed",
                "categories": {
                    "legal": {"score": 85, "status": "pass", "issues": 2},
                    "financial": {"score": 68, "status": "warning", "issues": 4},
                    "operational": {"score": 78, "status": "pass", "issues": 3},
                    "regulatory": {"score": 58, "status": "warning", "issues": 6},
                },
            },
        )


class InvestorRiskFixtures(FixtureProvider):
    def build(self, request: AnalysisRequest) -> AnalysisResult:
        artifact = request.artifact
        company_name = artifact.value("company_name")
        amount = _parse_amount(artifact.value("investment_amount"))
        horizon = artifact.value("time_horizon")

        categories = {
            "financial": (72, "medium", [
                "Ratio de endeudamiento elevado (78%)",
                "Flujo de caja positivo pero variable",
                "Dependencia de pocos clientes grandes",
                "Márgenes de rentabilidad en declive",
            ]),
            "legal": (85, "low", [
                "Estructura legal sólida",
                "Cumplimiento regulatorio adecuado",
                "Pocos litigios pendientes",
                "Contratos bien estructurados",
            ]),
            "operational": (65, "medium", [
                "Dependencia de personal clave",
                "Sistemas tecnológicos obsoletos",
                "Procesos operativos eficientes",
                "Cadena de suministro vulnerable",
            ]),
            "market": (58, "high", [
                "Mercado altamente competitivo",
                "Cambios tecnológicos disruptivos",
                "Concentración de clientes",
                "Presión sobre precios",
            ]),
            "regulatory": (78, "low", [
                "Cumplimiento normativo actualizado",
                "Licencias y permisos vigentes",
                "Políticas de compliance implementadas",
                "Riesgo regulatorio bajo",
            ]),
        }

        key_risks = [
            {
                "title": "Concentración de Clientes",
                "description": "El 65% de los ingresos proviene de solo 3 clientes principales, creando "
                               "vulnerabilidad ante la pérdida de alguno de ellos.",
                "probability": 35,
                "impact": 85,
                "mitigation": "Diversificar base de clientes, desarrollar nuevos mercados, fortalecer "
                              "relaciones con clientes existentes.",
                "timeframe": "6-12 meses",
            },
            {
                "title": "Obsolescencia Tecnológica",
                "description": "Los sistemas tecnológicos actuales tienen más de 8 años y requieren "
                               "actualización para mantener competitividad.",
                "probability": 70,
                "impact": 60,
                "mitigation": "Plan de modernización tecnológica, inversión en I+D, capacitación del "
                              "personal técnico.",
                "timeframe": "12-24 meses",
            },
            {
                "title": "Dependencia de Personal Clave",
                "description": "La salida del CEO o CTO podría impactar significativamente las operaciones y "
                               "la estrategia de la empresa.",
                "probability": 25,
                "impact": 75,
                "mitigation": "Planes de sucesión, documentación de procesos críticos, retención de talento "
                              "clave.",
                "timeframe": "3-6 meses",
            },
            {
                "title": "Presión Competitiva",
                "description": "Nuevos competidores con tecnología superior están ganando participación de "
                               "mercado.",
                "probability": 80,
                "impact": 55,
                "mitigation": "Diferenciación de productos, mejora de la propuesta de valor, alianzas "
                              "estratégicas.",
                "timeframe": "6-18 meses",
            },
        ]

        conditions = (
            "Implementar plan de diversificación de clientes",
            "Establecer cronograma de modernización tecnológica",
            "Definir planes de sucesión para posiciones clave",
            "Monitoreo trimestral de indicadores financieros",
            "Cláusulas de protección en caso de pérdida de clientes principales",
        )
        reasoning = (
            "La empresa presenta fundamentos sólidos pero enfrenta riesgos significativos en el mercado y "
            "operaciones. Se recomienda proceder con cautela y condiciones específicas."
        )

        return AnalysisResult(
            score=68,
            level=Level.MEDIUM,
            findings=tuple(
                Finding(
                    category=key,
                    level=level_from(level),
                    title=RISK_CATEGORY_LABELS[key],
                    description="; ".join(factors),
                    details={"score": score, "factors": list(factors)},
                )
                for key, (score, level, factors) in categories.items()
            ),
            recommendations=conditions,
            summary=reasoning,
            details={
                "company_name": company_name,
                "investment_amount": amount,
                "time_horizon": horizon,
                "time_horizon_label": TIME_HORIZONS.get(horizon, horizon),
                "key_risks": key_risks,
                "investment_recommendation": {
                    "recommendation": "caution",
                    "confidence": 75,
                    "reasoning": reasoning,
                    "conditions": list(conditions),
                    "max_investment": amount * 0.6,
                },
            },
        )
