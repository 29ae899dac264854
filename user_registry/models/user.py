from sqlalchemy import Column, Integer, String, DateTime, func

from ..database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    # No es único: solo se indexa para búsquedas
    email = Column(String(100), index=True, nullable=False)
    # Nombre del archivo dentro del directorio de uploads
    photo = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, name={self.name})>"
