# Importar todos los modelos para que Base.metadata los registre
from .user import User

__all__ = [
    "User",
]
