# Configuración de base de datos usando SQLAlchemy.
#
# ESTRATEGIA DE BASE DE DATOS:
# - DESARROLLO LOCAL / TESTS: SQLite (sqlite:///./users.db) si DATABASE_URL no está configurada
# - PRODUCCIÓN: PostgreSQL vía DATABASE_URL
#
# El engine (y su pool de conexiones) se crea UNA vez al iniciar la app con
# init_engine() y se cierra con dispose_engine() al apagar.

import logging
import time
from typing import Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, declarative_base

from .config import Settings, get_settings
from .errors import SchemaInitError

logger = logging.getLogger(__name__)

engine: Optional[Engine] = None
# Las filas eliminadas conservan sus atributos después del commit
SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False)

Base = declarative_base()


def _engine_options(settings: Settings) -> dict:
    url = settings.database_url
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}

    connect_args = {"connect_timeout": settings.db_connect_timeout}
    if settings.database_ssl:
        connect_args["sslmode"] = "require"

    return {
        "pool_size": settings.db_pool_max,
        "max_overflow": 0,
        "pool_timeout": settings.db_connect_timeout,
        "pool_recycle": settings.db_idle_timeout,
        "pool_pre_ping": True,
        "connect_args": connect_args,
    }


def init_engine(settings: Optional[Settings] = None) -> Engine:
    """
    Crea el engine del proceso y lo enlaza a SessionLocal.
    Si ya existe uno, se cierra antes de reemplazarlo.
    """
    global engine
    settings = settings or get_settings()

    if engine is not None:
        engine.dispose()

    url = settings.database_url
    engine = create_engine(url, **_engine_options(settings))
    SessionLocal.configure(bind=engine)

    if url.startswith("sqlite"):
        logger.info("Usando SQLite local")
    else:
        logger.info(f"Usando base de datos externa ({engine.url.drivername}), pool máx. {settings.db_pool_max}")
    return engine


def dispose_engine() -> None:
    """Cierra todas las conexiones del pool."""
    global engine
    if engine is None:
        return
    engine.dispose()
    engine = None
    logger.info("Pool de conexiones cerrado")


def ensure_schema(retries: Optional[int] = None, delay: Optional[float] = None) -> None:
    """
    Crea la tabla users y su índice sobre email si no existen.

    Reintenta `retries` veces; si todos los intentos fallan lanza
    SchemaInitError, que al iniciar la app es fatal.
    """
    # Registrar los modelos en Base.metadata antes de create_all()
    from .models.user import User  # noqa: F401

    settings = get_settings()
    retries = retries if retries is not None else settings.db_init_retries
    delay = delay if delay is not None else settings.db_init_retry_delay

    if engine is None:
        init_engine(settings)

    last_error = None
    for attempt in range(1, retries + 1):
        try:
            Base.metadata.create_all(bind=engine)
            logger.info("✅ Tabla 'users' creada/verificada")
            return
        except SQLAlchemyError as e:
            last_error = e
            logger.warning(f"⚠️ Intento {attempt}/{retries} de crear el esquema falló: {e}")
            if attempt < retries:
                time.sleep(delay)

    raise SchemaInitError(f"Could not create the schema after {retries} attempts: {last_error}") from last_error


def check_connection() -> str:
    """Ejecuta una consulta trivial y devuelve la hora del servidor."""
    if engine is None:
        init_engine()
    with engine.connect() as conn:
        if engine.url.get_backend_name() == "sqlite":
            return str(conn.execute(text("SELECT CURRENT_TIMESTAMP")).scalar())
        return str(conn.execute(text("SELECT NOW()")).scalar())


def get_db():
    """
    Dependencia para inyectar la sesión de DB en los endpoints de FastAPI.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
