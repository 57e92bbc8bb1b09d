import logging
import math
import uuid
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from ..db import get_db
from ..generation import GenerationRequest, ResourceGenerator, ResourceType, get_default_resource
from ..generation.validation import valid_exam_questions
from ..models import Exam, ExamResult
from .auth import CurrentUser, get_current_user
from .resources import get_generator

router = APIRouter(prefix="/api/exams", tags=["exams"])

logger = logging.getLogger(__name__)


class CreateExamRequest(BaseModel):
	titulo: Optional[str] = None
	tipoTexto: Optional[str] = None
	tema: Optional[str] = None
	longitud: Optional[Any] = None
	numLiteral: Optional[Any] = None


class Answer(BaseModel):
	preguntaIndex: int
	respuestaSeleccionada: Optional[str] = None


class SubmitExamRequest(BaseModel):
	studentName: str
	respuestas: List[Answer] = Field(default_factory=list)
	evalTime: Optional[float] = None


def round_half_up(value: float) -> int:
	return int(math.floor(value + 0.5))


def score_answers(preguntas: List[Dict[str, Any]], respuestas: List[Answer]) -> int:
	"""Grade on a 0-20 scale. An exam without questions scores 0.

	Each question counts once; when an index is answered more than once the
	last answer is the one graded.
	"""
	if not preguntas:
		return 0
	selected = {a.preguntaIndex: a.respuestaSeleccionada for a in respuestas}
	correct = sum(
		1
		for idx, choice in selected.items()
		if 0 <= idx < len(preguntas) and preguntas[idx].get("respuesta") == choice
	)
	return max(0, min(20, round_half_up(correct / len(preguntas) * 20)))


def serialize_exam(row: Exam) -> Dict[str, Any]:
	return {
		"id": row.id,
		"usuarioId": row.usuario_id,
		"slug": row.slug,
		"titulo": row.titulo,
		"texto": row.texto,
		"preguntas": row.preguntas,
		"createdAt": row.created_at.isoformat() if row.created_at else None,
		"updatedAt": row.updated_at.isoformat() if row.updated_at else None,
	}


def _owned_exam(db: Session, slug: str, user: CurrentUser, action: str) -> Exam:
	row = db.query(Exam).filter(Exam.slug == slug, Exam.usuario_id == user.id).first()
	if not row:
		raise HTTPException(status_code=404, detail=f"Examen no encontrado o no tienes permisos para {action}")
	return row


@router.post("")
async def create_exam(
	req: CreateExamRequest,
	user: CurrentUser = Depends(get_current_user),
	db: Session = Depends(get_db),
	generator: ResourceGenerator = Depends(get_generator),
):
	opciones = req.model_dump()
	result = await generator.generate_with_report(
		GenerationRequest(resource_type=ResourceType.EVALUACION.value, options=opciones)
	)
	resource = result.resource
	preguntas = valid_exam_questions(resource.get("preguntas"))
	if not preguntas:
		logger.warning("Generated exam had no usable questions; using the default set")
		resource = get_default_resource(ResourceType.EVALUACION.value, opciones)
		preguntas = resource["preguntas"]

	row = Exam(
		usuario_id=user.id,
		slug=uuid.uuid4().hex[:8],
		titulo=str(resource.get("titulo") or req.titulo or "Examen"),
		texto=str(resource.get("texto") or ""),
		preguntas=preguntas,
	)
	db.add(row)
	db.commit()
	db.refresh(row)
	return {"success": True, "data": serialize_exam(row)}


@router.get("")
async def list_exams(user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
	rows = (
		db.query(Exam)
		.filter(Exam.usuario_id == user.id)
		.order_by(Exam.created_at.desc())
		.all()
	)
	return {"success": True, "data": [serialize_exam(r) for r in rows]}


@router.get("/{slug}")
async def get_exam(slug: str, db: Session = Depends(get_db)):
	row = db.query(Exam).filter(Exam.slug == slug).first()
	if not row:
		raise HTTPException(status_code=404, detail="Examen no encontrado")
	return {"success": True, "data": serialize_exam(row)}


@router.post("/{slug}/submit")
async def submit_exam(slug: str, req: SubmitExamRequest, db: Session = Depends(get_db)):
	row = db.query(Exam).filter(Exam.slug == slug).first()
	if not row:
		raise HTTPException(status_code=404, detail="Examen no encontrado")
	preguntas = row.preguntas or []
	score = score_answers(preguntas, req.respuestas)
	db.add(ExamResult(
		student_name=req.studentName,
		respuestas=[a.model_dump() for a in req.respuestas],
		score=score,
		exam_slug=slug,
		eval_time=req.evalTime or 0,
	))
	db.commit()
	logger.info("Exam %s submitted by %s: %d/20", slug, req.studentName, score)
	return {"success": True, "data": {"score": score, "total": len(preguntas)}}


@router.get("/{slug}/results")
async def exam_results(slug: str, user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
	_owned_exam(db, slug, user, "verlo")
	rows = (
		db.query(ExamResult)
		.filter(ExamResult.exam_slug == slug)
		.order_by(ExamResult.created_at.desc())
		.all()
	)
	data = [
		{
			"studentName": r.student_name,
			"score": r.score,
			"evalTime": r.eval_time,
			"createdAt": r.created_at.isoformat() if r.created_at else None,
		}
		for r in rows
	]
	return {"success": True, "data": data}


@router.delete("/{slug}/results")
async def delete_exam_results(slug: str, user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
	_owned_exam(db, slug, user, "modificarlo")
	deleted = db.query(ExamResult).filter(ExamResult.exam_slug == slug).delete()
	db.commit()
	return {
		"success": True,
		"message": f"{deleted} resultados eliminados correctamente",
		"deletedCount": deleted,
	}


@router.delete("/{slug}")
async def delete_exam(slug: str, user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
	row = _owned_exam(db, slug, user, "eliminarlo")
	db.query(ExamResult).filter(ExamResult.exam_slug == slug).delete()
	db.delete(row)
	db.commit()
	return {"success": True, "message": "Examen eliminado correctamente"}
