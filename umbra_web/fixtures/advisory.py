"""
Canned replies for the conversational modules (24/7 chat and specialised
consultation). Replies are picked by keyword; nothing is generated.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from umbra_web.domain.models import AnalysisRequest, AnalysisResult
from umbra_web.fixtures.base import FixtureProvider

CHAT_GREETING = (
    "¡Hola! Soy tu asistente legal de UMBRA. Estoy disponible 24/7 para ayudarte con consultas legales, "
    "análisis de contratos, interpretación de leyes y mucho más. ¿En qué puedo asistirte hoy?"
)

# (topic, keywords, reply) checked in order; first hit wins
CHAT_REPLIES: List[Tuple[str, Tuple[str, ...], str]] = [
    ("contractual", ("contrato", "contractual"),
     "Entiendo que necesitas ayuda con temas contractuales. Puedo asistirte con:\n\n"
     "• Análisis de cláusulas contractuales\n"
     "• Identificación de riesgos legales\n"
     "• Sugerencias de mejoras\n"
     "• Interpretación de términos legales\n\n"
     "¿Podrías compartir más detalles sobre el tipo de contrato o la cláusula específica que te preocupa?"),
    ("laboral", ("laboral", "trabajo", "empleado"),
     "Te puedo ayudar con derecho laboral. Mis especialidades incluyen:\n\n"
     "• Contratos de trabajo\n"
     "• Despidos y terminaciones\n"
     "• Derechos del trabajador\n"
     "• Políticas de empresa\n"
     "• Acoso laboral\n\n"
     "¿Qué situación laboral específica necesitas que analice?"),
    ("penal", ("penal", "delito", "criminal"),
     "En materia penal puedo orientarte sobre:\n\n"
     "• Tipos de delitos y sus consecuencias\n"
     "• Procedimientos penales\n"
     "• Derechos del imputado\n"
     "• Medidas cautelares\n"
     "• Recursos legales disponibles\n\n"
     "¿Qué aspecto del derecho penal te interesa conocer?"),
    ("civil", ("civil", "daños", "responsabilidad"),
     "En derecho civil puedo asistirte con:\n\n"
     "• Responsabilidad civil\n"
     "• Contratos civiles\n"
     "• Daños y perjuicios\n"
     "• Obligaciones y derechos\n"
     "• Prescripción de acciones\n\n"
     "¿Qué situación civil específica necesitas que revise?"),
]

CHAT_FALLBACK = (
    "Gracias por tu consulta. Como asistente legal especializado, puedo ayudarte con una amplia gama de "
    "temas legales incluyendo:\n\n"
    "• Derecho contractual\n"
    "• Derecho laboral\n"
    "• Derecho penal\n"
    "• Derecho civil\n"
    "• Derecho comercial\n"
    "• Compliance y regulaciones\n\n"
    "¿Podrías ser más específico sobre el tema legal que te interesa? Esto me permitirá brindarte una "
    "respuesta más precisa y útil."
)


def chat_reply(message: str) -> Tuple[str, str]:
    text = (message or "").lower()
    for topic, keywords, reply in CHAT_REPLIES:
        if any(k in text for k in keywords):
            return topic, reply
    return "general", CHAT_FALLBACK


class ChatFixtures(FixtureProvider):
    def build(self, request: AnalysisRequest) -> AnalysisResult:
        topic, reply = chat_reply(request.artifact.text)
        return AnalysisResult(
            summary=reply,
            details={"topic": topic, "message": request.artifact.text.strip()},
        )


@dataclass(frozen=True)
class Specialty:
    specialty_id: str
    name: str
    description: str
    areas: Tuple[str, ...]


SPECIALTIES: List[Specialty] = [
    Specialty("laboral", "Derecho Laboral",
              "Especialización en relaciones laborales, contratos de trabajo y derechos del trabajador",
              ("Contratos de trabajo", "Despidos", "Acoso laboral", "Negociación colectiva", "Seguridad social")),
    Specialty("corporativo", "Derecho Corporativo",
              "Asesoramiento en estructuras societarias, fusiones y adquisiciones",
              ("Constitución de sociedades", "Fusiones y adquisiciones", "Gobierno corporativo", "Compliance",
               "Contratos comerciales")),
    Specialty("penal", "Derecho Penal",
              "Defensa penal y asesoramiento en materia criminal",
              ("Delitos económicos", "Defensa penal", "Procedimientos penales", "Medidas cautelares", "Recursos")),
    Specialty("civil", "Derecho Civil",
              "Resolución de conflictos civiles y responsabilidad civil",
              ("Responsabilidad civil", "Contratos civiles", "Daños y perjuicios", "Familia", "Sucesiones")),
    Specialty("regulatorio", "Derecho Regulatorio",
              "Cumplimiento normativo y regulaciones sectoriales",
              ("Compliance", "Regulaciones financieras", "Protección de datos", "Competencia",
               "Regulaciones ambientales")),
    Specialty("financiero", "Derecho Financiero",
              "Asesoramiento en operaciones financieras y mercado de capitales",
              ("Mercado de capitales", "Banca", "Seguros", "Fondos de inversión", "Fintech")),
]

SPECIALTIES_BY_ID = {s.specialty_id: s for s in SPECIALTIES}

LABOUR_DISMISSAL = """**ANÁLISIS ESPECIALIZADO - DERECHO LABORAL**

**Situación:** Terminación de contrato laboral

**Marco Legal Aplicable:**
• Código del Trabajo, artículos 159-177
• Ley de Protección al Empleo
• Jurisprudencia de la Dirección del Trabajo

**Análisis:**
1. **Causales de Despido:** Verificar si existe causal justificada según Art. 160 del Código del Trabajo
2. **Procedimiento:** El despido debe seguir el debido proceso establecido
3. **Indemnizaciones:** Calcular indemnizaciones por años de servicio y sustitutiva del aviso previo

**Recomendaciones:**
• Documentar adecuadamente la causal de despido
• Respetar los plazos legales de investigación
• Considerar alternativas como finiquito consensuado
• Evaluar riesgos de demanda laboral

**Próximos Pasos:**
1. Revisar documentación laboral completa
2. Evaluar fortaleza de la causal
3. Calcular costos de indemnizaciones
4. Preparar carta de despido si procede"""

CORPORATE_MERGER = """**ANÁLISIS ESPECIALIZADO - DERECHO CORPORATIVO**

**Operación:** Fusión/Adquisición Empresarial

**Estructura Legal Recomendada:**
• Due Diligence integral
• Valoración de activos y pasivos
• Estructura de la transacción

**Aspectos Regulatorios:**
1. **Libre Competencia:** Evaluación ante FNE si supera umbrales
2. **Aspectos Tributarios:** Optimización fiscal de la operación
3. **Aspectos Laborales:** Continuidad de contratos de trabajo

**Documentación Requerida:**
• Carta de intención (LOI)
• Acuerdo de confidencialidad (NDA)
• Contrato de compraventa de acciones/activos
• Garantías y declaraciones

**Timeline Estimado:**
• Due Diligence: 4-6 semanas
• Negociación de términos: 2-3 semanas
• Cierre de la operación: 1-2 semanas

**Riesgos Identificados:**
• Pasivos contingentes no identificados
• Cambios regulatorios
• Integración post-cierre"""

CRIMINAL_DEFENCE = """**ANÁLISIS ESPECIALIZADO - DERECHO PENAL**

**Evaluación Preliminar del Caso**

**Tipificación Penal:**
• Análisis de los elementos del tipo penal
• Evaluación de circunstancias agravantes/atenuantes
• Posibles defensas aplicables

**Estrategia de Defensa:**
1. **Fase de Investigación:** Colaboración con Ministerio Público
2. **Medidas Cautelares:** Solicitud de medidas alternativas
3. **Preparación del Juicio:** Estrategia probatoria

**Derechos del Imputado:**
• Derecho a guardar silencio
• Derecho a defensa técnica
• Presunción de inocencia
• Derecho a ser informado de los cargos

**Recomendaciones Inmediatas:**
• No declarar sin presencia de abogado
• Preservar evidencia favorable
• Contactar testigos relevantes
• Evaluar salidas alternativas"""

GENERIC_TEMPLATE = """**ANÁLISIS ESPECIALIZADO - {name_upper}**

Basado en tu consulta y mi especialización en {name_lower}, he realizado un análisis preliminar considerando:

**Marco Legal Aplicable:**
• Normativa específica del área
• Jurisprudencia relevante
• Regulaciones sectoriales

**Análisis de la Situación:**
Tu consulta requiere una evaluación detallada de los aspectos legales involucrados. He identificado varios puntos clave que requieren atención especializada.

**Recomendaciones:**
1. Profundizar en el análisis de la documentación
2. Evaluar riesgos legales específicos
3. Considerar alternativas de solución
4. Preparar estrategia legal apropiada

**Próximos Pasos:**
• Revisión detallada de antecedentes
• Análisis de precedentes jurisprudenciales
• Evaluación de opciones estratégicas
• Preparación de documentación legal

Para un análisis más específico, por favor proporciona más detalles sobre tu situación particular."""


def specialised_reply(specialty: Specialty, query: str) -> str:
    q = (query or "").lower()

    if specialty.specialty_id == "laboral" and ("despido" in q or "terminación" in q):
        return LABOUR_DISMISSAL
    if specialty.specialty_id == "corporativo" and ("fusión" in q or "adquisición" in q):
        return CORPORATE_MERGER
    if specialty.specialty_id == "penal":
        return CRIMINAL_DEFENCE

    return GENERIC_TEMPLATE.format(name_upper=specialty.name.upper(), name_lower=specialty.name.lower())


def get_specialty(specialty_id: str) -> Optional[Specialty]:
    return SPECIALTIES_BY_ID.get((specialty_id or "").strip())


class ConsultationFixtures(FixtureProvider):
    def build(self, request: AnalysisRequest) -> AnalysisResult:
        artifact = request.artifact
        specialty = get_specialty(artifact.value("specialty"))
        if specialty is None:
            # unknown ids still get an answer, named after the raw value
            raw = artifact.value("specialty")
            specialty = Specialty(raw, raw, "", ())

        return AnalysisResult(
            summary=specialised_reply(specialty, artifact.text),
            details={
                "specialty": specialty.specialty_id,
                "specialty_name": specialty.name,
                "areas": list(specialty.areas),
            },
        )
