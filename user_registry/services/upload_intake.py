"""
Validación de archivos subidos antes de guardarlos en el BlobStore.
"""
from dataclasses import dataclass
from typing import List, Optional

from fastapi import Request
from starlette.datastructures import FormData, UploadFile

from ..config import get_settings
from ..errors import UploadRejected, ValidationError


@dataclass
class IncomingFile:
    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


def extract_upload(form: FormData, field_name: str) -> Optional[UploadFile]:
    """
    Devuelve el único archivo enviado en `field_name`, o None.

    Más de un archivo en el campo, o archivos en otros campos, es un error
    de validación. Un input de archivo vacío (form sin archivo elegido) se
    trata como "sin archivo".
    """
    uploads = []
    for key, value in form.multi_items():
        if not isinstance(value, UploadFile):
            continue
        if not value.filename:
            continue
        if key != field_name:
            raise ValidationError(f"Unexpected file field '{key}'")
        uploads.append(value)

    if len(uploads) > 1:
        raise ValidationError(f"Only one file is allowed in '{field_name}'")
    return uploads[0] if uploads else None


async def read_validated(upload: UploadFile, allowed_types: List[str], max_size: int) -> IncomingFile:
    """
    Lee el archivo validando tipo MIME y tamaño.

    Nunca lee más de max_size + 1 bytes; si hay más, el archivo se rechaza.
    """
    content_type = (upload.content_type or "").split(";")[0].strip().lower()
    if content_type not in allowed_types:
        raise UploadRejected(
            f"File type '{content_type or 'unknown'}' is not allowed. Allowed: {', '.join(allowed_types)}"
        )

    data = await upload.read(max_size + 1)
    if len(data) > max_size:
        raise UploadRejected(f"File exceeds the maximum size of {max_size} bytes")

    return IncomingFile(filename=upload.filename, content_type=content_type, data=data)


@dataclass
class UserForm:
    name: Optional[str]
    email: Optional[str]
    upload: Optional[IncomingFile] = None


def _text_field(form: FormData, key: str) -> Optional[str]:
    value = form.get(key)
    return value if isinstance(value, str) else None


async def read_user_form(request: Request) -> UserForm:
    """
    Lee name, email y el archivo opcional de un form (multipart o urlencoded).

    El archivo se valida y se carga en memoria antes de cerrar el form, así
    nada llega al BlobStore sin pasar por read_validated().
    """
    settings = get_settings()
    async with request.form() as form:
        upload = extract_upload(form, settings.upload_field_name)
        incoming = None
        if upload is not None:
            incoming = await read_validated(upload, settings.allowed_mime_types, settings.max_file_size)
        return UserForm(
            name=_text_field(form, "name"),
            email=_text_field(form, "email"),
            upload=incoming,
        )
