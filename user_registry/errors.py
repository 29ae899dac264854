"""
Excepciones del dominio del registro de usuarios.

Los handlers de `main.py` traducen cada una a su código HTTP:
ValidationError -> 400, NotFoundError -> 404, StorageError -> 500.
"""


class RegistryError(Exception):
    """Base de todos los errores del servicio."""

    status_code = 500
    error = "Internal Server Error"

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class ValidationError(RegistryError):
    status_code = 400
    error = "Validation Error"


class UploadRejected(ValidationError):
    """El archivo subido no tiene un tipo permitido o excede el tamaño máximo."""

    error = "Upload Rejected"


class InvalidBlobName(ValidationError):
    error = "Invalid File Name"


class NotFoundError(RegistryError):
    status_code = 404
    error = "Not Found"


class StorageError(RegistryError):
    """Fallo de base de datos o de disco. El mensaje es seguro para el cliente."""

    status_code = 500
    error = "Storage Error"


class SchemaInitError(RegistryError):
    """No se pudo crear el esquema al iniciar; el proceso no debe continuar."""
