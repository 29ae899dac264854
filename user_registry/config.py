import os
from typing import List


DEFAULT_ALLOWED_MIME_TYPES = "image/jpeg,image/png,image/gif,image/webp"
DEFAULT_MAX_FILE_SIZE = 5 * 1024 * 1024


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name, "").strip()
    return int(value) if value else default


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name, "").strip()
    return float(value) if value else default


class Settings:
    """Configuración de la aplicación que lee variables de entorno dinámicamente."""

    @property
    def app_name(self) -> str:
        return "User Registry"

    @property
    def environment(self) -> str:
        env = os.getenv("ENV") or os.getenv("NODE_ENV") or "development"
        return env.lower()

    @property
    def database_url(self) -> str:
        return os.getenv("DATABASE_URL", "").strip() or "sqlite:///./users.db"

    @property
    def database_ssl(self) -> bool:
        return os.getenv("DATABASE_SSL", "false").lower() in ("1", "true", "yes")

    @property
    def db_pool_max(self) -> int:
        return _env_int("DB_POOL_MAX", 10)

    @property
    def db_idle_timeout(self) -> int:
        return _env_int("DB_IDLE_TIMEOUT", 30)

    @property
    def db_connect_timeout(self) -> int:
        return _env_int("DB_CONNECT_TIMEOUT", 2)

    @property
    def db_init_retries(self) -> int:
        return max(1, _env_int("DB_INIT_RETRIES", 5))

    @property
    def db_init_retry_delay(self) -> float:
        return _env_float("DB_INIT_RETRY_DELAY", 2.0)

    @property
    def upload_dir(self) -> str:
        # STORAGE_PATH es el nombre que usaban los despliegues anteriores
        return os.getenv("UPLOAD_DIR") or os.getenv("STORAGE_PATH") or "./uploads"

    @property
    def upload_field_name(self) -> str:
        return os.getenv("UPLOAD_FIELD_NAME", "photo")

    @property
    def allowed_mime_types(self) -> List[str]:
        raw = os.getenv("ALLOWED_MIME_TYPES", "") or DEFAULT_ALLOWED_MIME_TYPES
        return [t.strip().lower() for t in raw.split(",") if t.strip()]

    @property
    def max_file_size(self) -> int:
        return _env_int("MAX_FILE_SIZE", DEFAULT_MAX_FILE_SIZE)

    @property
    def host(self) -> str:
        return os.getenv("HOST", "0.0.0.0")

    @property
    def port(self) -> int:
        return _env_int("PORT", 3000)

    @property
    def log_level(self) -> str:
        return os.getenv("LOG_LEVEL", "INFO").upper()


# Instancia singleton de Settings (sin cache, lee valores dinámicamente)
_settings_instance = None


def get_settings() -> Settings:
    """Retorna la instancia de Settings. Lee variables de entorno dinámicamente."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance


def clear_settings_cache():
    """Limpia la instancia de settings (aunque no es necesario con propiedades dinámicas)."""
    global _settings_instance
    _settings_instance = None
