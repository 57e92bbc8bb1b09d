"""
Resource PDF export.

Renders a stored resource as an A4 worksheet: title, one section per part of
the resource shape, a footer line and page numbers. Content is whatever the
model (or a user, after editing) left in the resource, so every accessor
tolerates missing keys and unexpected types.
"""

import json
import logging
from io import BytesIO
from typing import Any, Callable, Dict, List

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_LEFT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import ListFlowable, ListItem, Paragraph, Preformatted, SimpleDocTemplate, Spacer

from .generation.options import ResourceType

log = logging.getLogger(__name__)

FOOTER_TEXT = "Generado con Sistema de Recursos Educativos para 2° Grado"
PRIMARY = colors.HexColor("#2563eb")
MUTED = colors.HexColor("#4b5563")


# ─── Helpers ────────────────────────────────────────────────────────────────────

def _escape(value: Any) -> str:
    """Escape text so ReportLab's Paragraph markup parser treats it literally."""
    if value is None:
        return ""
    text = str(value)
    text = text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
    return text.replace("\n", "<br/>")


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def get_styles():
    styles = getSampleStyleSheet()
    styles.add(ParagraphStyle(
        name="ResourceTitle",
        parent=styles["Heading1"],
        fontSize=18,
        textColor=PRIMARY,
        alignment=TA_CENTER,
        spaceAfter=14,
        fontName="Helvetica-Bold",
    ))
    styles.add(ParagraphStyle(
        name="SectionHeader",
        parent=styles["Heading2"],
        fontSize=13,
        textColor=MUTED,
        spaceBefore=12,
        spaceAfter=6,
        fontName="Helvetica-Bold",
    ))
    styles.add(ParagraphStyle(
        name="SubHeader",
        parent=styles["Heading3"],
        fontSize=11,
        spaceBefore=6,
        spaceAfter=4,
        fontName="Helvetica-Bold",
    ))
    styles.add(ParagraphStyle(
        name="Body",
        parent=styles["Normal"],
        fontSize=11,
        leading=15,
        alignment=TA_LEFT,
        spaceAfter=6,
    ))
    styles.add(ParagraphStyle(
        name="Answer",
        parent=styles["Normal"],
        fontSize=10,
        leading=13,
        leftIndent=20,
        textColor=MUTED,
        spaceAfter=8,
    ))
    return styles


class _Story:
    def __init__(self, styles):
        self.styles = styles
        self.items: List[Any] = []

    def section(self, title: str) -> None:
        self.items.append(Paragraph(_escape(title), self.styles["SectionHeader"]))

    def sub(self, title: str) -> None:
        self.items.append(Paragraph(_escape(title), self.styles["SubHeader"]))

    def text(self, value: Any, style: str = "Body") -> None:
        if value not in (None, ""):
            self.items.append(Paragraph(_escape(value), self.styles[style]))

    def bold(self, value: Any) -> None:
        if value not in (None, ""):
            self.items.append(Paragraph(f"<b>{_escape(value)}</b>", self.styles["Body"]))

    def labeled(self, label: str, value: Any) -> None:
        if value not in (None, ""):
            self.items.append(Paragraph(f"<b>{_escape(label)}:</b> {_escape(value)}", self.styles["Body"]))

    def bullets(self, values: Any, *, numbered: bool = False) -> None:
        entries = [ListItem(Paragraph(_escape(v), self.styles["Body"])) for v in _as_list(values)]
        if entries:
            self.items.append(ListFlowable(entries, bulletType="1" if numbered else "bullet", leftIndent=14))


# ─── Per-type sections ──────────────────────────────────────────────────────────

def _comprension(story: _Story, c: Dict[str, Any]) -> None:
    story.text(c.get("texto"))
    story.section("Preguntas")
    for i, q in enumerate(_as_list(c.get("preguntas")), start=1):
        q = _as_dict(q)
        story.text(f"{i}. {q.get('pregunta', '')}")
        story.text(q.get("respuesta"), "Answer")
    vocabulario = _as_list(c.get("vocabulario"))
    if vocabulario:
        story.section("Vocabulario")
        for item in vocabulario:
            item = _as_dict(item)
            story.labeled(str(item.get("palabra", "")), item.get("definicion"))


def _evaluacion(story: _Story, c: Dict[str, Any]) -> None:
    story.text(c.get("texto"))
    story.section("Preguntas")
    for i, q in enumerate(_as_list(c.get("preguntas")), start=1):
        q = _as_dict(q)
        story.text(f"{i}. {q.get('pregunta', '')}")
        for letter, option in zip("abcdefgh", _as_list(q.get("opciones"))):
            story.text(f"{letter}) {option}", "Answer")


def _escritura(story: _Story, c: Dict[str, Any]) -> None:
    story.text(c.get("descripcion"))
    story.section("Instrucciones")
    story.text(c.get("instrucciones"))
    story.section("Estructura Propuesta")
    story.text(c.get("estructuraPropuesta"))
    if _as_list(c.get("conectores")):
        story.section("Conectores Útiles")
        story.bullets(c.get("conectores"))
    story.section("Lista de Verificación")
    story.bullets(c.get("listaVerificacion"), numbered=True)


def _gramatica(story: _Story, c: Dict[str, Any]) -> None:
    story.labeled("Instrucciones", c.get("instrucciones"))
    story.section("Ejemplo")
    story.text(c.get("ejemplo"))
    story.section("Ejercicios")
    for i, item in enumerate(_as_list(c.get("items")), start=1):
        item = _as_dict(item)
        story.text(f"{i}. {item.get('consigna', '')}")
        story.text(f"Respuesta: {item.get('respuesta', '')}", "Answer")


def _oral(story: _Story, c: Dict[str, Any]) -> None:
    story.text(c.get("descripcion"))
    story.section("Instrucciones para el Docente")
    story.text(c.get("instruccionesDocente"))
    story.section("Guion para Estudiantes")
    story.text(c.get("guionEstudiante"))
    story.section("Preguntas Orientadoras")
    story.bullets(c.get("preguntasOrientadoras"), numbered=True)
    story.section("Criterios de Evaluación")
    story.bullets(c.get("criteriosEvaluacion"))


def _drag_and_drop(story: _Story, c: Dict[str, Any]) -> None:
    for i, activity in enumerate(_as_list(c.get("actividades")), start=1):
        activity = _as_dict(activity)
        story.section(f"Actividad {i}")
        story.text(activity.get("enunciado"))
        story.labeled("Palabras", " · ".join(str(o) for o in _as_list(activity.get("opciones"))))
        story.text("Respuesta: " + " ".join(str(r) for r in _as_list(activity.get("respuesta"))), "Answer")


def _ice_breaker_content(story: _Story, specific: Dict[str, Any]) -> None:
    if specific.get("pistas"):
        story.sub("Pistas")
        story.bullets([_as_dict(p).get("pista", p) for p in _as_list(specific.get("pistas"))], numbered=True)
        story.labeled("Respuesta", specific.get("respuesta"))
    if specific.get("elementosClave") or specific.get("descripcion"):
        story.sub("Descripción para dibujar")
        story.text(specific.get("descripcion"))
        story.sub("Elementos clave")
        story.bullets(specific.get("elementosClave"))
    if specific.get("frases"):
        story.sub("Plantillas de frases")
        for frase in _as_list(specific.get("frases")):
            frase = _as_dict(frase)
            story.bold(frase.get("template"))
            story.labeled("Ejemplos", ", ".join(str(e) for e in _as_list(frase.get("ejemplos"))))


def _ice_breakers(story: _Story, c: Dict[str, Any]) -> None:
    story.labeled("Descripción", c.get("descripcion"))
    story.section("Objetivos")
    story.bullets(c.get("objetivos") or ["Desarrollo de habilidades comunicativas"])
    for i, activity in enumerate(_as_list(c.get("actividades")), start=1):
        activity = _as_dict(activity)
        story.section(f"Actividad {i}: {activity.get('nombre', '')}")
        story.labeled("Duración", f"{activity['duracionMinutos']} minutos" if activity.get("duracionMinutos") else None)
        story.labeled("Participantes", activity.get("participantes"))
        story.sub("Instrucciones para el Docente")
        story.text(activity.get("instrucciones"))
        story.sub("Desarrollo")
        story.text(activity.get("desarrollo"))
        if _as_list(activity.get("materiales")):
            story.sub("Materiales")
            story.bullets(activity.get("materiales"))
        _ice_breaker_content(story, _as_dict(activity.get("contenidoEspecifico")))
    if _as_list(c.get("variaciones")):
        story.section("Variaciones")
        story.bullets(c.get("variaciones"))


def _generic(story: _Story, c: Any) -> None:
    story.items.append(Preformatted(json.dumps(c, ensure_ascii=False, indent=2), story.styles["Code"]))


_SECTIONS: Dict[ResourceType, Callable[[_Story, Dict[str, Any]], None]] = {
    ResourceType.COMPRENSION: _comprension,
    ResourceType.ESCRITURA: _escritura,
    ResourceType.EVALUACION: _evaluacion,
    ResourceType.GRAMATICA: _gramatica,
    ResourceType.ORAL: _oral,
    ResourceType.DRAG_AND_DROP: _drag_and_drop,
    ResourceType.ICE_BREAKERS: _ice_breakers,
}


# ─── Entry point ────────────────────────────────────────────────────────────────

def _draw_footer(canvas, doc) -> None:
    canvas.saveState()
    canvas.setFont("Helvetica", 9)
    canvas.setFillColor(MUTED)
    canvas.drawCentredString(A4[0] / 2, 1.2 * cm, FOOTER_TEXT)
    canvas.drawCentredString(A4[0] / 2, 0.7 * cm, f"Página {doc.page}")
    canvas.restoreState()


def render_resource_pdf(tipo: str, titulo: str, contenido: Any) -> bytes:
    """Render a resource to PDF bytes."""
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=1 * cm,
        leftMargin=1 * cm,
        topMargin=1.5 * cm,
        bottomMargin=2 * cm,
        title=titulo,
    )
    story = _Story(get_styles())
    story.items.append(Paragraph(_escape(titulo), story.styles["ResourceTitle"]))
    story.items.append(Spacer(1, 0.2 * cm))

    rtype = ResourceType.parse(tipo)
    if rtype is not None and isinstance(contenido, dict):
        _SECTIONS[rtype](story, contenido)
    else:
        _generic(story, contenido)

    doc.build(story.items, onFirstPage=_draw_footer, onLaterPages=_draw_footer)
    log.debug("Rendered %s PDF for %r (%d bytes)", tipo, titulo, buffer.tell())
    return buffer.getvalue()
