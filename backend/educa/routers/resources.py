import logging
import re
from urllib.parse import quote
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from ..db import get_db
from ..generation import GenerationRequest, ResourceGenerator, ResourceType
from ..llm_client import ChatCompletionClient, LLMConfig
from ..models import Resource
from ..pdf_export import render_resource_pdf
from .auth import CurrentUser, get_current_user

router = APIRouter(prefix="/api/recursos", tags=["recursos"])

logger = logging.getLogger(__name__)


class CreateResourceRequest(BaseModel):
	tipo: str
	titulo: str
	opciones: Dict[str, Any] = Field(default_factory=dict)


class UpdateResourceRequest(BaseModel):
	titulo: Optional[str] = None
	contenido: Optional[Any] = None


async def get_generator():
	client = ChatCompletionClient(LLMConfig.from_settings())
	try:
		yield ResourceGenerator(client)
	finally:
		await client.aclose()


def serialize_resource(row: Resource) -> Dict[str, Any]:
	return {
		"id": row.id,
		"usuarioId": row.usuario_id,
		"tipo": row.tipo,
		"titulo": row.titulo,
		"contenido": row.contenido,
		"meta": row.meta or {},
		"tiempoGeneracionSegundos": row.tiempo_generacion_segundos,
		"createdAt": row.created_at.isoformat() if row.created_at else None,
		"updatedAt": row.updated_at.isoformat() if row.updated_at else None,
	}


def _owned_resource(db: Session, resource_id: int, user: CurrentUser) -> Resource:
	row = db.query(Resource).filter(Resource.id == resource_id, Resource.usuario_id == user.id).first()
	if not row:
		raise HTTPException(status_code=404, detail="Recurso no encontrado")
	return row


def pdf_filename(titulo: str) -> str:
	return re.sub(r"\s+", "_", titulo or "recurso") + ".pdf"


@router.get("")
async def list_resources(user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
	rows = (
		db.query(Resource)
		.filter(Resource.usuario_id == user.id)
		.order_by(Resource.created_at.desc(), Resource.id.desc())
		.all()
	)
	return {"success": True, "count": len(rows), "recursos": [serialize_resource(r) for r in rows]}


@router.get("/{resource_id}")
async def get_resource(resource_id: int, user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
	return {"success": True, "recurso": serialize_resource(_owned_resource(db, resource_id, user))}


@router.post("", status_code=201)
async def create_resource(
	req: CreateResourceRequest,
	user: CurrentUser = Depends(get_current_user),
	db: Session = Depends(get_db),
	generator: ResourceGenerator = Depends(get_generator),
):
	if ResourceType.parse(req.tipo) is None:
		raise HTTPException(status_code=400, detail=f"Tipo de recurso no válido: {req.tipo}")
	titulo = (req.titulo or "").strip()
	if not titulo:
		raise HTTPException(status_code=400, detail="El título es obligatorio")

	opciones = dict(req.opciones)
	# The title anchors the prompt; the form sends it outside the options
	if not opciones.get("title") and not opciones.get("titulo"):
		opciones["titulo"] = titulo

	result = await generator.generate_with_report(GenerationRequest(resource_type=req.tipo, options=opciones))
	if result.was_fallback:
		logger.warning("Stored default %s resource for user %s", req.tipo, user.id)

	row = Resource(
		usuario_id=user.id,
		tipo=req.tipo,
		titulo=titulo,
		contenido=result.resource,
		meta={"opciones": opciones, "wasFallback": result.was_fallback},
		tiempo_generacion_segundos=round(result.duration_seconds, 3),
	)
	db.add(row)
	db.commit()
	db.refresh(row)
	return {
		"success": True,
		"message": "Recurso generado y guardado correctamente",
		"recurso": serialize_resource(row),
	}


@router.put("/{resource_id}")
async def update_resource(
	resource_id: int,
	req: UpdateResourceRequest,
	user: CurrentUser = Depends(get_current_user),
	db: Session = Depends(get_db),
):
	row = _owned_resource(db, resource_id, user)
	if req.titulo:
		row.titulo = req.titulo
	if req.contenido:
		row.contenido = req.contenido
	db.commit()
	db.refresh(row)
	return {"success": True, "message": "Recurso actualizado correctamente", "recurso": serialize_resource(row)}


@router.delete("/{resource_id}")
async def delete_resource(resource_id: int, user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
	row = _owned_resource(db, resource_id, user)
	db.delete(row)
	db.commit()
	return {"success": True, "message": "Recurso eliminado correctamente"}


@router.get("/{resource_id}/pdf")
async def resource_pdf(resource_id: int, user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
	row = _owned_resource(db, resource_id, user)
	data = render_resource_pdf(row.tipo, row.titulo, row.contenido)
	name = pdf_filename(row.titulo)
	# Headers are latin-1; accented titles go in filename*
	ascii_name = name.encode("ascii", "ignore").decode() or "recurso.pdf"
	return Response(
		content=data,
		media_type="application/pdf",
		headers={"Content-Disposition": f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(name)}"},
	)
