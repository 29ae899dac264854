import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import get_settings, clear_settings_cache
from .database import init_engine, ensure_schema, dispose_engine
from .errors import RegistryError, SchemaInitError, StorageError
from .routers import users, views

# Configurar logging
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

# Cargar variables de entorno desde .env (solo en desarrollo local)
backend_dir = Path(__file__).parent.parent
env_path = backend_dir / ".env"
if load_dotenv(dotenv_path=env_path):
    logger.info(f"Variables de entorno cargadas desde: {env_path}")

clear_settings_cache()
logging.getLogger().setLevel(get_settings().log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Inicio: crea el pool y el esquema ANTES de aceptar conexiones.
    Apagado (SIGINT/SIGTERM vía uvicorn): cierra el pool.
    """
    settings = get_settings()
    init_engine(settings)
    try:
        ensure_schema()
    except SchemaInitError as e:
        logger.critical(f"❌ Error al crear tablas al iniciar: {e}")
        dispose_engine()
        raise

    app.state.started_at = time.monotonic()
    logger.info(f"🚀 {settings.app_name} listo ({settings.environment}), uploads en {settings.upload_dir}")
    try:
        yield
    finally:
        logger.info("Apagando servidor...")
        dispose_engine()


app = FastAPI(title="User Registry", version="0.3.0", lifespan=lifespan)


def _is_api(request: Request) -> bool:
    return request.url.path.startswith("/api/")


def _error_response(request: Request, status_code: int, error: str, message: str = ""):
    if _is_api(request):
        body = {"error": error}
        if message:
            body["message"] = message
        return JSONResponse(status_code=status_code, content=body)
    text = f"{error}: {message}" if message else error
    return PlainTextResponse(text, status_code=status_code)


@app.exception_handler(RegistryError)
async def registry_error_handler(request: Request, exc: RegistryError):
    if isinstance(exc, StorageError):
        logger.error(f"Error de almacenamiento en {request.method} {request.url.path}: {exc.message}")
    return _error_response(request, exc.status_code, exc.error, exc.message)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _error_response(request, exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in exc.errors())
    return _error_response(request, 400, "Validation Error", f"Invalid request: {fields}")


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"❌ Error no controlado en {request.method} {request.url.path}: {exc}", exc_info=exc)
    return _error_response(request, 500, "Internal Server Error", "An unexpected error occurred")


app.include_router(users.router, prefix="/api")
app.include_router(views.router)


@app.get("/health", tags=["health"])
async def health(request: Request):
    started_at = getattr(request.app.state, "started_at", time.monotonic())
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - started_at, 3),
        "environment": get_settings().environment,
    }


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "user_registry.main:app",
        host=settings.host,
        port=settings.port,
        timeout_graceful_shutdown=10,
    )
