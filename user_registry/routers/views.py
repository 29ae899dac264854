from pathlib import Path

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import FileResponse, RedirectResponse
from fastapi.concurrency import run_in_threadpool

from ..errors import NotFoundError
from ..services.blob_store import BlobStore, get_blob_store
from ..services.upload_intake import read_user_form
from ..services.user_service import UserService, get_user_service

VIEWS_DIR = Path(__file__).parent.parent / "views"

router = APIRouter(tags=["views"])


@router.get("/", include_in_schema=False)
def add_user_form():
    return FileResponse(VIEWS_DIR / "index.html", media_type="text/html")


@router.get("/users", include_in_schema=False)
def users_page():
    # Los datos se cargan en el navegador desde /api/users
    return FileResponse(VIEWS_DIR / "users.html", media_type="text/html")


@router.post("/add")
async def add_user(request: Request, service: UserService = Depends(get_user_service)):
    """
    Alta de usuario desde el formulario HTML (multipart/form-data).
    Redirige a /users si todo salió bien.
    """
    form = await read_user_form(request)
    await run_in_threadpool(service.create_user, form.name, form.email, form.upload)
    return RedirectResponse(url="/users", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/uploads/{filename}", tags=["static"])
def serve_upload(filename: str, blobs: BlobStore = Depends(get_blob_store)):
    if not blobs.exists(filename):
        raise NotFoundError("File not found")
    return FileResponse(blobs.resolve(filename))
