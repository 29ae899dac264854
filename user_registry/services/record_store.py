"""
Consultas sobre la tabla users.

Todas las funciones reciben la sesión de la request. Los valores viajan
siempre como parámetros ligados del ORM, nunca interpolados en el SQL.
"""
import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import NotFoundError, StorageError
from ..models.user import User

logger = logging.getLogger(__name__)

# Marca "no se envió photo" para distinguirlo de photo=None (limpiar)
UNSET = object()


def _commit(db: Session, action: str, refresh: Optional[User] = None) -> None:
    """
    Confirma la transacción; los errores pasan a StorageError.

    `refresh` se recarga dentro de la misma transacción, así un fallo al
    recargar deshace también el cambio.
    """
    try:
        if refresh is not None:
            db.flush()
            db.refresh(refresh)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error de base de datos ({action}): {e}", exc_info=True)
        raise StorageError(f"Could not {action}") from e


def insert(db: Session, name: str, email: str, photo: Optional[str] = None) -> User:
    user = User(name=name, email=email, photo=photo)
    db.add(user)
    _commit(db, "create the user", refresh=user)
    return user


def list_all(db: Session) -> List[User]:
    try:
        return db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()
    except SQLAlchemyError as e:
        logger.error(f"Error listando usuarios: {e}", exc_info=True)
        raise StorageError("Could not list users") from e


def get_by_id(db: Session, user_id: int) -> User:
    try:
        user = db.query(User).filter(User.id == user_id).first()
    except SQLAlchemyError as e:
        logger.error(f"Error obteniendo usuario {user_id}: {e}", exc_info=True)
        raise StorageError("Could not load the user") from e
    if not user:
        raise NotFoundError(f"User {user_id} not found")
    return user


def update(db: Session, user_id: int, name: str, email: str, photo=UNSET) -> User:
    """Si `photo` no se envía, se conserva la referencia actual."""
    user = get_by_id(db, user_id)
    user.name = name
    user.email = email
    if photo is not UNSET:
        user.photo = photo
    db.add(user)
    _commit(db, "update the user", refresh=user)
    return user


def delete(db: Session, user_id: int) -> User:
    """Elimina el registro y lo devuelve para que el llamador limpie su foto."""
    user = get_by_id(db, user_id)
    db.delete(user)
    _commit(db, "delete the user")
    return user
