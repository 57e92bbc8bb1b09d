import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends
from fastapi.security import OAuth2PasswordRequestForm, OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel
import logging

from ..settings import settings
from sqlalchemy.orm import Session
from ..db import get_db
from ..email_service import EmailDeliveryError, send_recovery_code
from ..models import User, AuthSession, RecoveryCode

router = APIRouter(prefix="/api/auth", tags=["auth"])

logger = logging.getLogger(__name__)
logging.getLogger('passlib').setLevel(logging.ERROR)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token")

RESET_REQUESTED_MESSAGE = "Si el correo está registrado, recibirás un código de recuperación"


class Token(BaseModel):
	access_token: str
	token_type: str = "bearer"


class CurrentUser(BaseModel):
	id: int
	email: str
	session_id: str


class RegisterRequest(BaseModel):
	nombre: str
	email: str
	password: str


class LoginRequest(BaseModel):
	email: str
	password: str


class PasswordResetRequest(BaseModel):
	email: str


class PasswordReset(BaseModel):
	email: str
	code: str
	newPassword: str


def hash_password(password: str) -> str:
	# bcrypt only looks at the first 72 bytes
	password_bytes = password.encode('utf-8')[:72]
	return pwd_context.hash(password_bytes.decode('utf-8', errors='ignore'))


def verify_password(plain_password: str, hashed_password: str) -> bool:
	password_bytes = plain_password.encode('utf-8')[:72]
	return pwd_context.verify(password_bytes.decode('utf-8', errors='ignore'), hashed_password)


def _public_user(user: User) -> dict:
	return {"id": user.id, "nombre": user.nombre, "email": user.email}


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
	user = db.query(User).filter(User.email == email.strip().lower()).first()
	if user and verify_password(password, user.password_hash):
		return user
	return None


def _resolve_expiry(expires_delta: Optional[timedelta]) -> datetime:
	delta = expires_delta
	if delta is None:
		minutes = settings.access_token_expire_minutes
		delta = timedelta(minutes=minutes) if minutes > 0 else timedelta(hours=1)
	return datetime.now(timezone.utc) + delta


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
	to_encode = data.copy()
	to_encode.update({"exp": _resolve_expiry(expires_delta)})
	return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def _open_session(db: Session, user: User) -> str:
	# Each token gets its own session id (jti) persisted server-side so logout can revoke it
	session_id = uuid.uuid4().hex
	db.add(AuthSession(session_id=session_id, user_id=user.id))
	db.commit()
	return create_access_token({"sub": str(user.id), "email": user.email, "jti": session_id})


def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> CurrentUser:
	credentials_exception = HTTPException(
		status_code=401,
		detail="No autorizado. Token inválido o expirado.",
		headers={"WWW-Authenticate": "Bearer"},
	)
	try:
		payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
		subject: str | None = payload.get("sub")
		jti: str | None = payload.get("jti")
		if subject is None or jti is None:
			raise credentials_exception
		user_id = int(subject)
	except (JWTError, ValueError):
		raise credentials_exception
	row = db.get(AuthSession, jti)
	if not row or row.user_id != user_id:
		raise credentials_exception
	row.last_activity_at = datetime.utcnow()
	db.commit()
	return CurrentUser(id=user_id, email=payload.get("email") or "", session_id=jti)


@router.post("/register", status_code=201)
async def register(req: RegisterRequest, db: Session = Depends(get_db)):
	nombre = (req.nombre or "").strip()
	email = (req.email or "").strip().lower()
	if not nombre:
		raise HTTPException(status_code=400, detail="El nombre es obligatorio")
	if not email or "@" not in email:
		raise HTTPException(status_code=400, detail="Debe proporcionar un email válido")
	if not req.password:
		raise HTTPException(status_code=400, detail="La contraseña es obligatoria")
	existing = db.query(User).filter(User.email == email).first()
	if existing:
		raise HTTPException(status_code=400, detail="El correo electrónico ya está registrado")
	user = User(nombre=nombre, email=email, password_hash=hash_password(req.password))
	db.add(user)
	db.commit()
	db.refresh(user)
	return {"success": True, "message": "Usuario registrado correctamente", "usuario": _public_user(user)}


@router.post("/login")
async def login(req: LoginRequest, db: Session = Depends(get_db)):
	user = authenticate_user(db, req.email, req.password)
	if not user:
		raise HTTPException(status_code=401, detail="Credenciales inválidas")
	token = _open_session(db, user)
	return {
		"success": True,
		"message": "Inicio de sesión exitoso",
		"token": token,
		"usuario": _public_user(user),
	}


@router.post("/token", response_model=Token)
async def token(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
	user = authenticate_user(db, form_data.username, form_data.password)
	if not user:
		raise HTTPException(status_code=401, detail="Credenciales inválidas")
	return Token(access_token=_open_session(db, user))


@router.post("/logout")
async def logout(user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
	row = db.get(AuthSession, user.session_id)
	if row:
		db.delete(row)
		db.commit()
	return {"success": True, "message": "Sesión cerrada correctamente"}


@router.get("/profile")
async def profile(user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
	row = db.get(User, user.id)
	if not row:
		raise HTTPException(status_code=404, detail="Usuario no encontrado")
	return {"success": True, "usuario": {**_public_user(row), "createdAt": row.created_at.isoformat()}}


@router.post("/request-password-reset")
async def request_password_reset(req: PasswordResetRequest, db: Session = Depends(get_db)):
	email = (req.email or "").strip().lower()
	user = db.query(User).filter(User.email == email).first()
	if not user:
		# Same answer whether or not the address exists
		return {"success": True, "message": RESET_REQUESTED_MESSAGE}

	db.query(RecoveryCode).filter(RecoveryCode.email == email, RecoveryCode.used.is_(False)).update({"used": True})
	code = f"{secrets.randbelow(900000) + 100000}"
	expires_at = datetime.utcnow() + timedelta(minutes=settings.recovery_code_ttl_minutes)
	row = RecoveryCode(email=email, code=code, expires_at=expires_at)
	db.add(row)
	db.commit()

	try:
		await send_recovery_code(email, code)
	except EmailDeliveryError as err:
		# The user never received this code
		row.used = True
		db.commit()
		raise HTTPException(status_code=500, detail=str(err))
	return {"success": True, "message": RESET_REQUESTED_MESSAGE}


@router.post("/reset-password")
async def reset_password(req: PasswordReset, db: Session = Depends(get_db)):
	email = (req.email or "").strip().lower()
	if not req.newPassword:
		raise HTTPException(status_code=400, detail="La contraseña es obligatoria")
	recovery = (
		db.query(RecoveryCode)
		.filter(
			RecoveryCode.email == email,
			RecoveryCode.code == req.code,
			RecoveryCode.used.is_(False),
			RecoveryCode.expires_at > datetime.utcnow(),
		)
		.first()
	)
	if not recovery:
		raise HTTPException(status_code=400, detail="Código inválido o expirado")
	user = db.query(User).filter(User.email == email).first()
	if not user:
		raise HTTPException(status_code=404, detail="Usuario no encontrado")
	user.password_hash = hash_password(req.newPassword)
	recovery.used = True
	db.commit()
	logger.info("Password reset for user %s", user.id)
	return {"success": True, "message": "Contraseña actualizada correctamente"}
