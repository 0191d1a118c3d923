# backend_api/schemas.py
"""
Esquemas de entrada / salida de la API (Pydantic).

- Las claves JSON van en camelCase (`firstName`, `isPublished`, `createdAt`);
  en la entrada también se acepta snake_case.
- Ningún esquema de salida lleva el hash de la contraseña.
"""

from datetime import datetime
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from backend_api.models.user import Role

T = TypeVar("T")


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def _not_blank(value: Optional[str]) -> Optional[str]:
    if value is not None and not value.strip():
        raise ValueError("must not be blank")
    return value


# =========================== Usuarios ===========================

class UserSummary(ApiModel):
    """Autor embebido en posts y comentarios."""
    id: int
    username: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class UserResponse(ApiModel):
    id: int
    username: str
    email: EmailStr
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Role
    is_active: bool
    created_at: datetime
    updated_at: datetime


class SignupRequest(ApiModel):
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)
    first_name: Optional[str] = Field(None, max_length=50)
    last_name: Optional[str] = Field(None, max_length=50)

    _check_username = field_validator("username")(_not_blank)


class UserCreateRequest(SignupRequest):
    """Alta de usuarios por un administrador (puede fijar rol y estado)."""
    role: Role = Role.USER
    is_active: bool = True


class UserUpdateRequest(ApiModel):
    """
    Los campos ausentes conservan su valor actual.
    Nombre y apellidos admiten null para vaciarlos; en email, rol y estado null se ignora.
    """
    first_name: Optional[str] = Field(None, max_length=50)
    last_name: Optional[str] = Field(None, max_length=50)
    email: Optional[EmailStr] = None
    role: Optional[Role] = None
    is_active: Optional[bool] = None


# =========================== Auth ===========================

class LoginRequest(ApiModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class SignupResponse(ApiModel):
    message: str
    user: UserResponse


class TokenResponse(ApiModel):
    token: str
    type: str = "Bearer"
    user: UserResponse


# =========================== Posts ===========================

class PostRequest(ApiModel):
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1, max_length=5000)
    is_published: bool = False

    _check_text = field_validator("title", "content")(_not_blank)


class PostUpdateRequest(ApiModel):
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1, max_length=5000)
    # None: se mantiene el estado de publicación actual
    is_published: Optional[bool] = None

    _check_text = field_validator("title", "content")(_not_blank)


class PostResponse(ApiModel):
    id: int
    title: str
    content: str
    is_published: bool
    author: UserSummary
    created_at: datetime
    updated_at: datetime


# =========================== Comentarios ===========================

class CommentRequest(ApiModel):
    content: str = Field(..., min_length=1, max_length=1000)

    _check_content = field_validator("content")(_not_blank)


class CommentResponse(ApiModel):
    id: int
    content: str
    post_id: int
    author: UserSummary
    created_at: datetime
    updated_at: datetime


# =========================== Comunes ===========================

class PageResponse(ApiModel, Generic[T]):
    content: List[T]
    page: int
    size: int
    total_elements: int
    total_pages: int
    first: bool
    last: bool


class MessageResponse(ApiModel):
    message: str
