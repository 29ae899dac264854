"""
Almacenamiento local de las fotos subidas.

Los archivos viven en un único directorio (UPLOAD_DIR) y la tabla users
solo guarda el nombre con el que se almacenaron.
"""
import logging
import secrets
import time
from pathlib import Path

from ..config import get_settings
from ..errors import InvalidBlobName, StorageError
from ..utils import slugify, split_filename

logger = logging.getLogger(__name__)

# Intentos de generar un nombre libre antes de rendirse
PUT_ATTEMPTS = 3


def build_blob_name(original_filename: str) -> str:
    """
    Genera un nombre único para un archivo subido.

    Formato: <base-slug>-<timestamp ns>-<hex aleatorio><.ext>
    Ej: "Mi Foto.PNG" -> "mi-foto-1718900000123456789-9f2c4a1b.png"
    """
    base, ext = split_filename(original_filename)
    stem = slugify(base)[:60] or "file"
    return f"{stem}-{time.time_ns()}-{secrets.token_hex(4)}{ext}"


class BlobStore:
    """Almacén sobre un directorio. La raíz se crea en el primer uso."""

    def __init__(self, root):
        self.root = Path(root).resolve()

    def _ensure_root(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)

    def resolve(self, stored_name: str) -> Path:
        """
        Ruta absoluta de un archivo almacenado.

        Lanza InvalidBlobName para cualquier cosa que no sea un nombre de
        archivo simple dentro de la raíz.
        """
        if (
            not stored_name
            or stored_name in (".", "..")
            or "/" in stored_name
            or "\\" in stored_name
            or "\x00" in stored_name
            or ".." in stored_name
        ):
            raise InvalidBlobName(f"Invalid file name: {stored_name!r}")

        path = (self.root / stored_name).resolve()
        if path.parent != self.root:
            raise InvalidBlobName(f"Invalid file name: {stored_name!r}")
        return path

    def exists(self, stored_name: str) -> bool:
        try:
            return self.resolve(stored_name).is_file()
        except InvalidBlobName:
            return False

    def put(self, data: bytes, original_filename: str) -> str:
        """Escribe `data` con un nombre nuevo y devuelve ese nombre."""
        self._ensure_root()
        for _ in range(PUT_ATTEMPTS):
            stored_name = build_blob_name(original_filename)
            path = self.resolve(stored_name)
            try:
                # "xb" nunca sobrescribe un archivo existente
                f = open(path, "xb")
            except FileExistsError:
                logger.warning(f"⚠️ El nombre {stored_name} ya existe, se genera otro")
                continue
            except OSError as e:
                logger.error(f"Error creando {path}: {e}", exc_info=True)
                raise StorageError("Could not store uploaded file") from e

            try:
                with f:
                    f.write(data)
            except OSError as e:
                # Solo se borra el archivo que creó esta llamada
                path.unlink(missing_ok=True)
                logger.error(f"Error escribiendo {path}: {e}", exc_info=True)
                raise StorageError("Could not store uploaded file") from e

            logger.info(f"Archivo guardado: {stored_name} ({len(data)} bytes)")
            return stored_name

        raise StorageError("Could not store uploaded file")

    def remove(self, stored_name: str) -> None:
        """Elimina un archivo almacenado. Si no existe no es un error."""
        path = self.resolve(stored_name)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Could not delete {stored_name}") from e
        logger.info(f"Archivo eliminado: {stored_name}")


def get_blob_store() -> BlobStore:
    """Dependencia de FastAPI: BlobStore sobre el UPLOAD_DIR configurado."""
    return BlobStore(get_settings().upload_dir)
