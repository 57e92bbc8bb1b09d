from __future__ import annotations
import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Integer, Text, Float, Boolean, JSON, ForeignKey
from .db import Base


def _uuid() -> str:
	return str(uuid.uuid4())


class User(Base):
	__tablename__ = "usuarios"
	id = Column(Integer, primary_key=True, autoincrement=True)
	nombre = Column(String(128), nullable=False)
	email = Column(String(256), unique=True, index=True, nullable=False)
	password_hash = Column(String(256), nullable=False)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class AuthSession(Base):
	__tablename__ = "auth_sessions"
	# Session id is the token's jti
	session_id = Column(String(64), primary_key=True)
	user_id = Column(Integer, ForeignKey("usuarios.id", ondelete="CASCADE"), nullable=False, index=True)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	last_activity_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class RecoveryCode(Base):
	__tablename__ = "recovery_codes"
	id = Column(Integer, primary_key=True, autoincrement=True)
	email = Column(String(256), nullable=False, index=True)
	code = Column(String(6), nullable=False)
	expires_at = Column(DateTime, nullable=False)
	used = Column(Boolean, default=False, nullable=False)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class Resource(Base):
	__tablename__ = "recursos"
	id = Column(Integer, primary_key=True, autoincrement=True)
	usuario_id = Column(Integer, ForeignKey("usuarios.id", ondelete="CASCADE"), nullable=False, index=True)
	tipo = Column(String(32), nullable=False)
	titulo = Column(String(256), nullable=False)
	contenido = Column(JSON, nullable=False)
	# {"opciones": {...}, "wasFallback": bool}
	meta = Column(JSON, nullable=False, default=dict)
	tiempo_generacion_segundos = Column(Float, nullable=True)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class Exam(Base):
	__tablename__ = "exams"
	id = Column(String(36), primary_key=True, default=_uuid)
	usuario_id = Column(Integer, ForeignKey("usuarios.id", ondelete="CASCADE"), nullable=True, index=True)
	slug = Column(String(16), unique=True, index=True, nullable=False)
	titulo = Column(String(256), nullable=False)
	texto = Column(Text, nullable=False)
	# [{pregunta, opciones, respuesta}]
	preguntas = Column(JSON, nullable=False)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class ExamResult(Base):
	__tablename__ = "exam_results"
	id = Column(String(36), primary_key=True, default=_uuid)
	student_name = Column(String(128), nullable=False)
	# [{preguntaIndex, respuestaSeleccionada}]
	respuestas = Column(JSON, nullable=False)
	score = Column(Float, nullable=False)
	exam_slug = Column(String(16), nullable=False, index=True)
	# seconds
	eval_time = Column(Float, nullable=True)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
