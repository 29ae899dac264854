"""
Script para verificar la conexión a la base de datos configurada.
Ejecutar: python scripts/check_db.py
"""
import sys
from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError

from user_registry.config import get_settings
from user_registry.database import check_connection, dispose_engine

BACKEND_DIR = Path(__file__).resolve().parent.parent


def main() -> int:
    load_dotenv(dotenv_path=BACKEND_DIR / ".env")
    url = make_url(get_settings().database_url)
    print(f"🔌 Probando conexión a: {url.render_as_string(hide_password=True)}")

    try:
        server_time = check_connection()
    except SQLAlchemyError as e:
        print(f"❌ Conexión fallida: {e}")
        return 1
    finally:
        dispose_engine()

    print("✅ Conexión exitosa")
    print(f"   Hora del servidor: {server_time}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
