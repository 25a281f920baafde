from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from umbra_web.domain.models import Artifact

INPUT_FILE = "file"
INPUT_TEXT = "text"
INPUT_FORM = "form"


@dataclass(frozen=True)
class ModuleSpec:
    module_id: str
    name: str
    description: str
    input_kind: str                         # "file" | "text" | "form"
    default_latency_seconds: float
    required_fields: Tuple[str, ...] = ()
    needs_text: bool = False
    multiple_files: bool = False

    # presentation features
    keeps_history: bool = False             # finished exchanges stay visible (chat transcript)
    title_filter: bool = False              # findings can be narrowed by title
    toggle_findings: bool = False           # findings can be marked as applied

    def is_ready(self, artifact: Optional[Artifact]) -> bool:
        """
        Presence check only. Content is never validated.
        """
        if artifact is None:
            return False

        if self.input_kind == INPUT_FILE:
            return any((f.name or "").strip() for f in artifact.files)

        if self.needs_text and not artifact.text.strip():
            return False

        return all(artifact.value(name) for name in self.required_fields)


MODULES: List[ModuleSpec] = [
    ModuleSpec(
        module_id="chat",
        name="Chat Legal 24/7",
        description="Asistente legal inteligente disponible las 24 horas",
        input_kind=INPUT_TEXT,
        default_latency_seconds=2.0,
        needs_text=True,
        keeps_history=True,
    ),
    ModuleSpec(
        module_id="consultoria",
        name="Consultoría Especializada",
        description="Asesoramiento legal especializado por áreas",
        input_kind=INPUT_FORM,
        default_latency_seconds=3.0,
        required_fields=("specialty",),
        needs_text=True,
    ),
    ModuleSpec(
        module_id="revision",
        name="Revisión de Documentos",
        description="Análisis automático de documentos legales",
        input_kind=INPUT_FILE,
        default_latency_seconds=4.0,
    ),
    ModuleSpec(
        module_id="correccion",
        name="Corrección de Contratos",
        description="Automatización de correcciones contractuales",
        input_kind=INPUT_FILE,
        default_latency_seconds=3.5,
        toggle_findings=True,
    ),
    ModuleSpec(
        module_id="analisis",
        name="Análisis de Riesgos",
        description="Detección de cláusulas riesgosas",
        input_kind=INPUT_FILE,
        default_latency_seconds=4.0,
    ),
    ModuleSpec(
        module_id="due-diligence",
        name="Due Diligence",
        description="Due diligence automatizado con IA",
        input_kind=INPUT_FORM,
        default_latency_seconds=5.0,
        required_fields=("company_name",),
    ),
    ModuleSpec(
        module_id="extraccion",
        name="Extracción de Datos",
        description="Extracción masiva de datos legales",
        input_kind=INPUT_FILE,
        default_latency_seconds=4.5,
        multiple_files=True,
        title_filter=True,
    ),
    ModuleSpec(
        module_id="evaluacion",
        name="Evaluación de Riesgos",
        description="Evaluación de riesgos para inversionistas",
        input_kind=INPUT_FORM,
        default_latency_seconds=5.0,
        required_fields=("company_name", "investment_amount", "time_horizon"),
    ),
]

MODULES_BY_ID: Dict[str, ModuleSpec] = {m.module_id: m for m in MODULES}


def get_module(module_id: str) -> Optional[ModuleSpec]:
    return MODULES_BY_ID.get((module_id or "").strip())
