"""
Operaciones CRUD de usuarios coordinando la tabla users y el BlobStore.

Regla principal: si un usuario tiene `photo`, ese archivo existe en el
BlobStore; las fotos que dejan de estar referenciadas se eliminan.
"""
import logging
from typing import List, Optional, Tuple

from fastapi import Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..errors import RegistryError, ValidationError
from ..models.user import User
from . import record_store
from .blob_store import BlobStore, get_blob_store
from .upload_intake import IncomingFile

logger = logging.getLogger(__name__)

MAX_FIELD_LENGTH = 100


def validate_fields(name: Optional[str], email: Optional[str]) -> Tuple[str, str]:
    """Devuelve (name, email) sin espacios o lanza ValidationError."""
    name = (name or "").strip()
    email = (email or "").strip()

    if not name or not email:
        raise ValidationError("Name and email are required")
    if len(name) > MAX_FIELD_LENGTH:
        raise ValidationError(f"Name must be at most {MAX_FIELD_LENGTH} characters")
    if len(email) > MAX_FIELD_LENGTH:
        raise ValidationError(f"Email must be at most {MAX_FIELD_LENGTH} characters")
    return name, email


class UserService:
    def __init__(self, db: Session, blobs: BlobStore):
        self.db = db
        self.blobs = blobs

    def _discard_blob(self, stored_name: Optional[str], reason: str) -> None:
        """Borra un archivo; si falla solo queda registrado en el log."""
        if not stored_name:
            return
        try:
            self.blobs.remove(stored_name)
        except (RegistryError, OSError) as e:
            logger.warning(f"⚠️ No se pudo eliminar {stored_name} ({reason}): {e}")

    def create_user(self, name: Optional[str], email: Optional[str], upload: Optional[IncomingFile] = None) -> User:
        name, email = validate_fields(name, email)

        photo = self.blobs.put(upload.data, upload.filename) if upload else None
        try:
            user = record_store.insert(self.db, name, email, photo)
        except RegistryError:
            self._discard_blob(photo, "insert failed")
            raise

        logger.info(f"Usuario creado: id={user.id}")
        return user

    def list_users(self) -> List[User]:
        return record_store.list_all(self.db)

    def get_user(self, user_id: int) -> User:
        return record_store.get_by_id(self.db, user_id)

    def update_user(self, user_id: int, name: Optional[str], email: Optional[str], upload: Optional[IncomingFile] = None) -> User:
        """
        Actualiza nombre/email y, si se envía, reemplaza la foto.

        La foto anterior solo se borra después de que el UPDATE se confirmó.
        Si el usuario no existe o el UPDATE falla, se borra la foto nueva.
        """
        name, email = validate_fields(name, email)

        if upload is None:
            user = record_store.update(self.db, user_id, name, email)
            logger.info(f"Usuario actualizado: id={user.id}")
            return user

        previous_photo = record_store.get_by_id(self.db, user_id).photo
        new_photo = self.blobs.put(upload.data, upload.filename)
        try:
            user = record_store.update(self.db, user_id, name, email, photo=new_photo)
        except RegistryError:
            self._discard_blob(new_photo, "update failed")
            raise

        if previous_photo and previous_photo != new_photo:
            self._discard_blob(previous_photo, "replaced")

        logger.info(f"Usuario actualizado: id={user.id}, nueva foto {new_photo}")
        return user

    def delete_user(self, user_id: int) -> User:
        user = record_store.delete(self.db, user_id)
        self._discard_blob(user.photo, "user deleted")
        logger.info(f"Usuario eliminado: id={user_id}")
        return user


def get_user_service(
    db: Session = Depends(get_db),
    blobs: BlobStore = Depends(get_blob_store),
) -> UserService:
    return UserService(db, blobs)
