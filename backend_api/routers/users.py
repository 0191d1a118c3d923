# backend_api/routers/users.py
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from backend_api.db import get_db
from backend_api.models.user import Role
from backend_api.policy import Identity, authorize
from backend_api.routers.paging import page_params, search_page_params
from backend_api.schemas import (
    MessageResponse,
    PageResponse,
    UserCreateRequest,
    UserResponse,
    UserUpdateRequest,
)
from backend_api.services.base import PageRequest
from backend_api.services.users import UserService

router = APIRouter(prefix="/users", tags=["Usuarios"])


@router.get("", response_model=PageResponse[UserResponse])
def list_users(
    paging: PageRequest = Depends(page_params),
    db: Session = Depends(get_db),
    _: Identity = Depends(authorize("users.list")),
):
    return UserService(db).list(paging)


@router.post("", response_model=UserResponse)
def create_user(
    payload: UserCreateRequest,
    db: Session = Depends(get_db),
    _: Identity = Depends(authorize("users.create")),
):
    return UserService(db).create(
        username=payload.username,
        email=payload.email,
        password=payload.password,
        first_name=payload.first_name,
        last_name=payload.last_name,
        role=payload.role,
        is_active=payload.is_active,
    )


# ================== Búsquedas ==================
# (van antes de /{user_id} para que no las capture esa ruta)

@router.get("/search", response_model=PageResponse[UserResponse])
def search_users(
    name: str = Query(..., min_length=1),
    paging: PageRequest = Depends(search_page_params),
    db: Session = Depends(get_db),
    _: Identity = Depends(authorize("users.search")),
):
    return UserService(db).search(name, paging)


@router.get("/role/{role}", response_model=List[UserResponse])
def users_by_role(
    role: Role,
    db: Session = Depends(get_db),
    _: Identity = Depends(authorize("users.by_role")),
):
    return UserService(db).list_active_by_role(role)


# ================== Usuario concreto ==================

@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    _: Identity = Depends(authorize("users.get")),
):
    return UserService(db).get(user_id)


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    payload: UserUpdateRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(authorize("users.update")),
):
    return UserService(db).update(user_id, payload, actor=identity)


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    _: Identity = Depends(authorize("users.delete")),
):
    UserService(db).delete(user_id)
    return {"message": "User deleted successfully"}


@router.put("/{user_id}/activate", response_model=UserResponse)
def activate_user(
    user_id: int,
    db: Session = Depends(get_db),
    _: Identity = Depends(authorize("users.activate")),
):
    return UserService(db).activate(user_id)


@router.put("/{user_id}/deactivate", response_model=UserResponse)
def deactivate_user(
    user_id: int,
    db: Session = Depends(get_db),
    _: Identity = Depends(authorize("users.deactivate")),
):
    return UserService(db).deactivate(user_id)
