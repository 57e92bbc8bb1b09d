import asyncio
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .db import SessionLocal, init_db
from .cleanup import purge_stale_auth_data
from .settings import settings
from .routers import auth
from .routers import resources
from .routers import exams

logging.basicConfig(
	level=settings.log_level.upper(),
	format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("educa")

CLEANUP_INTERVAL_SECONDS = 24 * 60 * 60

app = FastAPI(title="Educa Recursos API")

_origins = ["http://localhost:5173"]
if settings.frontend_url:
	_origins.append(settings.frontend_url)

app.add_middleware(
	CORSMiddleware,
	allow_origins=_origins,
	allow_credentials=True,
	allow_methods=["*"],
	allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(resources.router)
app.include_router(exams.router)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
	return JSONResponse(
		status_code=exc.status_code,
		content={"success": False, "message": exc.detail},
		headers=getattr(exc, "headers", None),
	)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
	errors = [{"campo": ".".join(str(p) for p in e.get("loc", ())[1:]), "mensaje": e.get("msg")} for e in exc.errors()]
	return JSONResponse(status_code=400, content={"success": False, "errors": errors})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
	logger.exception("Unhandled error on %s %s", request.method, request.url.path)
	return JSONResponse(status_code=500, content={"success": False, "message": "Error del servidor"})


@app.get("/info")
def root():
	return {
		"status": "ok",
		"message": "API del Sistema de Recursos Educativos",
		"llm_configured": bool(settings.llm_api_key),
		"email_configured": bool(settings.brevo_api_key and settings.email_sender),
	}


def _run_cleanup() -> None:
	db = SessionLocal()
	try:
		removed = purge_stale_auth_data(db)
		logger.info("Cleanup removed %d stale auth rows", removed)
	except Exception:
		logger.exception("Auth data cleanup failed")
	finally:
		db.close()


async def _cleanup_watcher():
	# Startup already ran one pass; repeat daily
	while True:
		await asyncio.sleep(CLEANUP_INTERVAL_SECONDS)
		_run_cleanup()


@app.on_event("startup")
async def startup_event():
	init_db()
	_run_cleanup()
	asyncio.create_task(_cleanup_watcher())
	if not settings.llm_api_key:
		logger.warning("LLM_API_KEY is not set; every generation will return the default resource")


def run() -> None:
	import uvicorn
	uvicorn.run("educa.main:app", host="0.0.0.0", port=settings.port)
