import asyncio
import logging
import os
from contextlib import asynccontextmanager, suppress
from logging.handlers import RotatingFileHandler
from pathlib import Path

from fastapi import FastAPI
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from . import __version__
from .cleanup import purge_stale_entries
from .db import Base, SessionLocal, engine
from .errors import install_error_handlers
from .routers import health, questions, session, tts
from .settings import settings

BASE_DIR = Path(__file__).resolve().parents[2]
FRONTEND_DIR = BASE_DIR / "frontend"

logger = logging.getLogger("classtalk")


# --- Logging Setup ---
def setup_logging() -> None:
	logger.setLevel(settings.log_level.upper())
	if settings.log_dir and not any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
		os.makedirs(settings.log_dir, exist_ok=True)
		log_path = os.path.join(settings.log_dir, settings.log_file)
		file_handler = RotatingFileHandler(log_path, maxBytes=5_000_000, backupCount=3)
		file_handler.setFormatter(
			logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
		)
		logger.addHandler(file_handler)
	# Also configure root logger to see logs from uvicorn/httpx
	logging.basicConfig(level=settings.log_level.upper())


def _purge_once() -> None:
	try:
		with SessionLocal() as db:
			purge_stale_entries(db, settings.session_retention_days)
	except SQLAlchemyError:
		logger.exception("Session retention purge failed")


async def _cleanup_watcher() -> None:
	# Startup purge already ran; repeat daily
	while True:
		await asyncio.sleep(24 * 60 * 60)
		_purge_once()


# --- Lifecycle ---
@asynccontextmanager
async def lifespan(app: FastAPI):
	watcher = None
	if settings.kv_backend.strip().lower() == "sql":
		Base.metadata.create_all(bind=engine)
		if settings.session_retention_days > 0:
			_purge_once()
			watcher = asyncio.create_task(_cleanup_watcher())
	logger.info(
		"classtalk %s starting (kv_backend=%s, llm_configured=%s)",
		__version__, settings.kv_backend, bool(settings.openai_api_key),
	)
	yield
	if watcher is not None:
		watcher.cancel()
		with suppress(asyncio.CancelledError):
			await watcher


# --- App Factory ---
def create_app() -> FastAPI:
	setup_logging()
	app = FastAPI(title="Classroom Discussion Questions API", version=__version__, lifespan=lifespan)
	install_error_handlers(app)
	app.include_router(health.router)
	app.include_router(questions.router)
	app.include_router(session.router)
	app.include_router(tts.router)

	# Static frontend at /app (absolute path so cwd doesn't matter when launching)
	if FRONTEND_DIR.is_dir():
		app.mount("/app", StaticFiles(directory=FRONTEND_DIR, html=True), name="frontend")

		@app.get("/", include_in_schema=False)
		async def redirect_root_to_app():
			return RedirectResponse(url="/app")

	return app


app = create_app()
