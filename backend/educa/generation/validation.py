from typing import Any, Dict, List

from .options import ResourceType

REQUIRED_FIELDS: Dict[ResourceType, tuple] = {
    ResourceType.EVALUACION: ("titulo", "texto", "preguntas"),
    ResourceType.COMPRENSION: ("titulo", "texto", "preguntas"),
    ResourceType.ESCRITURA: (
        "titulo", "descripcion", "instrucciones", "estructuraPropuesta", "conectores", "listaVerificacion",
    ),
    ResourceType.GRAMATICA: ("titulo", "instrucciones", "ejemplo", "items"),
    ResourceType.ORAL: (
        "titulo", "descripcion", "instruccionesDocente", "guionEstudiante",
        "preguntasOrientadoras", "criteriosEvaluacion",
    ),
    ResourceType.DRAG_AND_DROP: ("titulo", "actividades"),
    ResourceType.ICE_BREAKERS: ("titulo", "descripcion", "actividades", "objetivos", "variaciones"),
}


def missing_fields(resource_type: Any, resource: Dict[str, Any]) -> List[str]:
    """Required top-level keys absent from a generated resource (unknown types: none)."""
    rtype = ResourceType.parse(resource_type)
    if rtype is None:
        return []
    return [key for key in REQUIRED_FIELDS[rtype] if key not in resource]


def is_valid_exam_question(question: Any) -> bool:
    if not isinstance(question, dict):
        return False
    opciones = question.get("opciones")
    if not isinstance(question.get("pregunta"), str) or not isinstance(opciones, list) or len(opciones) < 2:
        return False
    return question.get("respuesta") in opciones


def valid_exam_questions(preguntas: Any) -> List[Dict[str, Any]]:
    if not isinstance(preguntas, list):
        return []
    return [q for q in preguntas if is_valid_exam_question(q)]
