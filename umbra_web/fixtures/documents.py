"""
Canned results for the file-based modules: document review, contract
correction, risk clause analysis and bulk data extraction.
"""
from __future__ import annotations

from dataclasses import dataclass

from umbra_web.domain.models import AnalysisRequest, AnalysisResult, Finding, Level
from umbra_web.fixtures.base import FixtureProvider, level_from

# issue type -> severity
ISSUE_LEVELS = {
    "error": Level.HIGH,
    "warning": Level.MEDIUM,
    "info": Level.LOW,
}

CORRECTION_TYPE_LABELS = {
    "grammar": "Gramática y Estilo",
    "legal": "Legal",
    "risk": "Gestión de Riesgos",
    "structure": "Estructura",
}


class DocumentReviewFixtures(FixtureProvider):
    def build(self, request: AnalysisRequest) -> AnalysisResult:
        issues = [
            ("error", "Cláusula de Fuerza Mayor Incompleta",
             "La cláusula de fuerza mayor no incluye eventos de pandemia o crisis sanitarias, "
             "lo que podría generar disputas futuras.",
             "Sección 12.3"),
            ("warning", "Jurisdicción Ambigua",
             "La cláusula de jurisdicción podría interpretarse de manera ambigua. "
             "Se recomienda especificar claramente el tribunal competente.",
             "Sección 15.1"),
            ("warning", "Plazo de Prescripción",
             "No se especifica el plazo de prescripción para reclamos, lo que podría generar "
             "incertidumbre legal.",
             "Sección 8.4"),
            ("info", "Actualización de Normativa",
             "Considerar actualizar las referencias normativas a las versiones más recientes "
             "de las leyes citadas.",
             "Anexo A"),
        ]

        return AnalysisResult(
            score=78,
            findings=tuple(
                Finding(
                    category=kind,
                    level=ISSUE_LEVELS[kind],
                    title=title,
                    description=description,
                    location=location,
                )
                for kind, title, description, location in issues
            ),
            recommendations=(
                "Incluir cláusula específica sobre eventos de pandemia en fuerza mayor",
                "Definir claramente la jurisdicción y tribunal competente",
                "Agregar cláusula de prescripción con plazos específicos",
                "Actualizar referencias normativas a versiones vigentes",
                "Considerar agregar cláusula de mediación previa a litigio",
            ),
            summary=(
                "El documento presenta una estructura legal sólida con un puntaje de 78/100. "
                "Se identificaron 4 áreas de mejora, incluyendo 1 error crítico que requiere "
                "atención inmediata y 2 advertencias importantes. Las sugerencias de mejora se "
                "enfocan en fortalecer las cláusulas de fuerza mayor, jurisdicción y prescripción "
                "para reducir riesgos legales futuros."
            ),
        )


class ContractCorrectionFixtures(FixtureProvider):
    def build(self, request: AnalysisRequest) -> AnalysisResult:
        corrections = [
            {
                "id": "1",
                "type": "legal",
                "original": "El contratista será responsable de todos los daños",
                "corrected": "El contratista será responsable de todos los daños directos y previsibles, "
                             "excluyendo daños indirectos, lucro cesante y daño emergente no previsible",
                "explanation": "La responsabilidad ilimitada puede generar riesgos excesivos. Se recomienda "
                               "limitar la responsabilidad a daños directos y previsibles.",
                "severity": "high",
                "location": "Cláusula 8.2",
            },
            {
                "id": "2",
                "type": "risk",
                "original": "En caso de fuerza mayor, las partes quedarán liberadas de sus obligaciones",
                "corrected": "En caso de fuerza mayor, incluyendo pero no limitado a pandemias, desastres "
                             "naturales, actos de gobierno, las partes quedarán temporalmente liberadas de "
                             "sus obligaciones, debiendo notificar dentro de 48 horas",
                "explanation": "La definición de fuerza mayor debe ser específica e incluir eventos recientes "
                               "como pandemias. Además, debe establecer procedimientos de notificación.",
                "severity": "high",
                "location": "Cláusula 12.1",
            },
            {
                "id": "3",
                "type": "structure",
                "original": "Las disputas se resolverán en tribunales competentes",
                "corrected": "Las disputas se resolverán mediante arbitraje en el Centro de Arbitraje y "
                             "Mediación de Santiago, aplicando las reglas de arbitraje comercial "
                             "internacional, con sede en Santiago, Chile",
                "explanation": "La jurisdicción debe ser específica para evitar conflictos. El arbitraje "
                               "suele ser más eficiente para disputas comerciales.",
                "severity": "medium",
                "location": "Cláusula 15.3",
            },
            {
                "id": "4",
                "type": "grammar",
                "original": "El plazo para la entrega de los productos sera de 30 días",
                "corrected": "El plazo para la entrega de los productos será de treinta (30) días calendario",
                "explanation": "Corrección ortográfica (será) y especificación del tipo de días (calendario "
                               "vs hábiles). Los números importantes deben escribirse en letras y números.",
                "severity": "low",
                "location": "Cláusula 4.1",
            },
            {
                "id": "5",
                "type": "legal",
                "original": "La confidencialidad se mantendrá por tiempo indefinido",
                "corrected": "La confidencialidad se mantendrá por un período de cinco (5) años posterior a "
                             "la terminación del contrato, excepto para información que por su naturaleza "
                             "deba permanecer confidencial indefinidamente",
                "explanation": "Los períodos indefinidos pueden ser problemáticos. Se recomienda establecer "
                               "plazos específicos con excepciones claras.",
                "severity": "medium",
                "location": "Cláusula 9.4",
            },
        ]

        findings = tuple(
            Finding(
                category=c["type"],
                level=level_from(c["severity"]),
                title=CORRECTION_TYPE_LABELS[c["type"]],
                description=c["explanation"],
                location=c["location"],
                details={"id": c["id"], "original": c["original"], "corrected": c["corrected"]},
            )
            for c in corrections
        )

        return AnalysisResult(
            findings=findings,
            summary=f"Se propusieron {len(findings)} correcciones para {request.artifact.describe()}.",
        )


class RiskClauseFixtures(FixtureProvider):
    def build(self, request: AnalysisRequest) -> AnalysisResult:
        clauses = [
            {
                "clause": "El contratista asume toda responsabilidad por daños directos, indirectos, "
                          "consecuenciales y punitivos sin limitación alguna.",
                "level": "high",
                "type": "Responsabilidad Ilimitada",
                "description": "Esta cláusula establece una responsabilidad ilimitada que puede exponer a la "
                               "empresa a riesgos financieros desproporcionados.",
                "impact": "Exposición financiera ilimitada, posibles demandas millonarias, riesgo de quiebra "
                          "en casos extremos.",
                "mitigation": "Limitar la responsabilidad a un monto específico (ej: valor del contrato) y "
                              "excluir daños indirectos y consecuenciales.",
                "location": "Sección 8.2",
            },
            {
                "clause": "En caso de incumplimiento, el cliente podrá retener todos los pagos pendientes "
                          "indefinidamente.",
                "level": "high",
                "type": "Retención de Pagos",
                "description": "Permite la retención indefinida de pagos sin procedimiento claro, afectando "
                               "el flujo de caja.",
                "impact": "Problemas de liquidez, imposibilidad de cobrar por servicios prestados, disputas "
                          "prolongadas.",
                "mitigation": "Establecer procedimientos claros para retenciones, límites temporales y montos "
                              "máximos de retención.",
                "location": "Sección 5.4",
            },
            {
                "clause": "Las modificaciones al contrato podrán realizarse verbalmente por cualquier "
                          "representante del cliente.",
                "level": "medium",
                "type": "Modificaciones Informales",
                "description": "Permite modificaciones sin formalidades, generando incertidumbre sobre los "
                               "términos vigentes.",
                "impact": "Disputas sobre alcance del trabajo, cambios no documentados, dificultades "
                          "probatorias.",
                "mitigation": "Requerir modificaciones por escrito, firmadas por representantes autorizados "
                              "específicamente designados.",
                "location": "Sección 12.1",
            },
            {
                "clause": "La confidencialidad incluye toda información que el cliente considere confidencial.",
                "level": "medium",
                "type": "Confidencialidad Ambigua",
                "description": "Definición subjetiva de información confidencial que puede ser interpretada "
                               "ampliamente.",
                "impact": "Restricciones excesivas, dificultades para usar conocimientos generales, posibles "
                          "demandas.",
                "mitigation": "Definir específicamente qué constituye información confidencial y establecer "
                              "excepciones claras.",
                "location": "Sección 9.3",
            },
            {
                "clause": "El contrato se regirá por las leyes que el cliente determine apropiadas.",
                "level": "medium",
                "type": "Jurisdicción Incierta",
                "description": "No especifica claramente la jurisdicción aplicable, dejando la decisión al "
                               "cliente.",
                "impact": "Incertidumbre legal, posibles litigios en jurisdicciones desfavorables, costos "
                          "legales elevados.",
                "mitigation": "Especificar claramente la jurisdicción y las leyes aplicables, preferiblemente "
                              "en territorio conocido.",
                "location": "Sección 15.2",
            },
            {
                "clause": "Los plazos de entrega podrán ser modificados unilateralmente por el cliente con "
                          "24 horas de aviso.",
                "level": "low",
                "type": "Flexibilidad de Plazos",
                "description": "Permite cambios de cronograma con poco aviso, pero el impacto es manejable.",
                "impact": "Dificultades de planificación, posibles costos adicionales, necesidad de "
                          "flexibilidad operativa.",
                "mitigation": "Establecer límites a las modificaciones de plazos y compensación por cambios de "
                              "último momento.",
                "location": "Sección 4.3",
            },
        ]

        return AnalysisResult(
            findings=tuple(
                Finding(
                    category=c["type"],
                    level=level_from(c["level"]),
                    title=c["type"],
                    description=c["description"],
                    location=c["location"],
                    details={"clause": c["clause"], "impact": c["impact"], "mitigation": c["mitigation"]},
                )
                for c in clauses
            ),
            recommendations=tuple(c["mitigation"] for c in clauses),
        )


def confidence_level(confidence: int) -> Level:
    if confidence >= 95:
        return Level.HIGH
    if confidence >= 85:
        return Level.MEDIUM
    return Level.LOW


@dataclass(frozen=True)
class DataExtractionFixtures(FixtureProvider):
    source_name: str = "contrato_servicios.pdf"

    def build(self, request: AnalysisRequest) -> AnalysisResult:
        fields = [
            ("Nombre del Contrato", "Contrato de Prestación de Servicios Profesionales", 98, 1),
            ("Contratante", "EMPRESA TECNOLÓGICA CHILE S.A.", 95, 1),
            ("Contratista", "CONSULTORA LEGAL ASOCIADOS LTDA.", 97, 1),
            ("Fecha de Inicio", "01/03/2024", 99, 2),
            ("Fecha de Término", "31/12/2024", 99, 2),
            ("Valor del Contrato", "$45.000.000 CLP", 96, 3),
            ("Forma de Pago", "Mensual, dentro de los primeros 5 días de cada mes", 92, 3),
            ("Jurisdicción", "Tribunales de Santiago, Chile", 94, 8),
            ("Cláusula de Confidencialidad", "Vigente por 3 años posterior al término del contrato", 89, 6),
            ("Penalidades", "2% del valor mensual por cada día de atraso", 91, 4),
            ("Garantías", "Boleta de Garantía por $4.500.000 CLP", 93, 5),
            ("Renovación Automática",
             "Sí, por períodos de 1 año salvo aviso contrario con 60 días de anticipación", 87, 7),
        ]

        files = request.artifact.files
        label = f"{len(files)} documentos" if len(files) > 1 else (files[0].name if files else "")

        findings = tuple(
            Finding(
                category="field",
                level=confidence_level(confidence),
                title=name,
                description=value,
                location=f"{self.source_name} (p.{page})",
                details={"confidence": confidence, "source": self.source_name, "page": page},
            )
            for name, value, confidence, page in fields
        )
        mean_confidence = round(sum(f.details["confidence"] for f in findings) / len(findings))

        return AnalysisResult(
            score=mean_confidence,
            findings=findings,
            details={
                "file_name": label,
                "total_documents": len(files),
                "contract_types": {
                    "Servicios Profesionales": 3,
                    "Compraventa": 2,
                    "Arrendamiento": 1,
                    "Confidencialidad": 2,
                },
                "date_range": {"from": "01/01/2024", "to": "31/12/2025"},
                "total_value": 125000000,
                "parties": [
                    "EMPRESA TECNOLÓGICA CHILE S.A.",
                    "CONSULTORA LEGAL ASOCIADOS LTDA.",
                    "INMOBILIARIA DEL CENTRO S.A.",
                    "SERVICIOS INTEGRALES LTDA.",
                ],
            },
        )
