from typing import List

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool

from ..schemas.user_schema import UserMutationOut, UserOut
from ..services.upload_intake import read_user_form
from ..services.user_service import UserService, get_user_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=List[UserOut])
def list_users(service: UserService = Depends(get_user_service)):
    """
    Listado de usuarios, del más reciente al más antiguo.
    """
    return service.list_users()


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: int, service: UserService = Depends(get_user_service)):
    return service.get_user(user_id)


@router.put("/{user_id}", response_model=UserMutationOut)
async def update_user(user_id: int, request: Request, service: UserService = Depends(get_user_service)):
    """
    Actualizar nombre y email de un usuario (multipart/form-data).
    Si se envía una foto nueva, reemplaza a la anterior y ésta se elimina.
    """
    form = await read_user_form(request)
    user = await run_in_threadpool(service.update_user, user_id, form.name, form.email, form.upload)
    return UserMutationOut(message="User updated successfully", user=UserOut.model_validate(user))


@router.delete("/{user_id}", response_model=UserMutationOut)
def delete_user(user_id: int, service: UserService = Depends(get_user_service)):
    """
    Eliminar un usuario y su foto (si tiene).
    """
    user = service.delete_user(user_id)
    return UserMutationOut(message="User deleted successfully", user=UserOut.model_validate(user))
