# backend_api/policy.py
"""
Política de autorización de la API.

Cada endpoint declara una acción (`"posts.update"`, `"users.list"`...) y la
tabla `POLICIES` dice qué nivel de acceso exige. La dependencia
`authorize(action)` se evalúa antes de llamar al servicio y devuelve la
identidad (`Identity`) que luego se pasa explícitamente a los servicios.

Orden de evaluación:
  1. token ausente / inválido / caducado          -> Unauthorized (401)
  2. ADMIN sin rol de administrador               -> Forbidden (403)
  3. OWNER_OR_ADMIN: el recurso no existe         -> NotFound (404)
                     no es el autor ni ADMIN      -> Forbidden (403)
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from backend_api.db import get_db
from backend_api.errors import Forbidden, InvalidInput, Unauthorized
from backend_api.models.user import Role, User
from backend_api.security import TokenError, token_service
from backend_api.services.comments import CommentService
from backend_api.services.posts import PostService
from backend_api.services.users import UserService

log = logging.getLogger("backend_api.policy")

bearer_scheme = HTTPBearer(auto_error=False)


class Access(str, Enum):
    PUBLIC = "public"
    AUTHENTICATED = "authenticated"
    OWNER_OR_ADMIN = "owner_or_admin"
    ADMIN = "admin"


@dataclass(frozen=True)
class Identity:
    user_id: int
    username: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    @classmethod
    def from_user(cls, user: User) -> "Identity":
        return cls(user_id=user.id, username=user.username, role=user.role)


@dataclass(frozen=True)
class Rule:
    access: Access
    # (db, id) -> username del dueño; lanza NotFound si no existe
    owner: Optional[Callable[[Session, int], str]] = None
    param: Optional[str] = None


def _user_owner(db: Session, user_id: int) -> str:
    return UserService(db).get(user_id).username


def _post_owner(db: Session, post_id: int) -> str:
    return PostService(db).owner_username(post_id)


def _comment_owner(db: Session, comment_id: int) -> str:
    return CommentService(db).owner_username(comment_id)


_PUBLIC = Rule(Access.PUBLIC)
_AUTHENTICATED = Rule(Access.AUTHENTICATED)
_ADMIN = Rule(Access.ADMIN)
_SELF_OR_ADMIN = Rule(Access.OWNER_OR_ADMIN, _user_owner, "user_id")
_POST_OWNER = Rule(Access.OWNER_OR_ADMIN, _post_owner, "post_id")
_COMMENT_OWNER = Rule(Access.OWNER_OR_ADMIN, _comment_owner, "comment_id")


POLICIES: Dict[str, Rule] = {
    # auth
    "auth.signup": _PUBLIC,
    "auth.signin": _PUBLIC,
    "auth.me": _AUTHENTICATED,

    # usuarios
    "users.list": _ADMIN,
    "users.create": _ADMIN,
    "users.search": _AUTHENTICATED,
    "users.by_role": _ADMIN,
    "users.get": _SELF_OR_ADMIN,
    "users.update": _SELF_OR_ADMIN,
    "users.delete": _SELF_OR_ADMIN,
    "users.activate": _ADMIN,
    "users.deactivate": _ADMIN,

    # posts
    "posts.list_published": _PUBLIC,
    "posts.list_all": _ADMIN,
    "posts.search": _PUBLIC,
    "posts.recent": _PUBLIC,
    "posts.mine": _AUTHENTICATED,
    "posts.get": _PUBLIC,
    "posts.create": _AUTHENTICATED,
    "posts.update": _POST_OWNER,
    "posts.delete": _POST_OWNER,
    "posts.publish": _POST_OWNER,
    "posts.unpublish": _POST_OWNER,

    # comentarios
    "comments.list": _ADMIN,
    "comments.search": _PUBLIC,
    "comments.recent": _PUBLIC,
    "comments.mine": _AUTHENTICATED,
    "comments.by_post": _PUBLIC,
    "comments.get": _PUBLIC,
    "comments.create": _AUTHENTICATED,
    "comments.update": _COMMENT_OWNER,
    "comments.delete": _COMMENT_OWNER,
}


def resolve_identity(db: Session, credentials: Optional[HTTPAuthorizationCredentials]) -> Identity:
    if credentials is None or not credentials.credentials:
        raise Unauthorized("Authentication required")
    try:
        username = token_service.parse_subject(credentials.credentials)
    except TokenError as exc:
        log.info("Token rechazado (%s)", exc.kind)
        raise Unauthorized(str(exc)) from exc

    user = UserService(db).get_by_username(username)
    if user is None:
        raise Unauthorized("User no longer exists")
    return Identity.from_user(user)


def check(rule: Rule, identity: Identity, db: Session, resource_id: Optional[int] = None) -> None:
    """Comprueba rol / propiedad para una identidad ya autenticada."""
    if rule.access == Access.ADMIN:
        if not identity.is_admin:
            raise Forbidden("Administrator role required")
    elif rule.access == Access.OWNER_OR_ADMIN:
        # Primero se carga el recurso: si no existe es 404, no 403
        owner = rule.owner(db, resource_id)
        if not identity.is_admin and owner != identity.username:
            raise Forbidden("You do not have permission to modify this resource")


def authorize(action: str):
    """Dependencia de FastAPI que aplica la regla de `action`."""
    rule = POLICIES[action]

    def dependency(
        request: Request,
        db: Session = Depends(get_db),
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    ) -> Optional[Identity]:
        if rule.access == Access.PUBLIC:
            # En rutas públicas un token malo simplemente se ignora
            if credentials is None:
                return None
            try:
                return resolve_identity(db, credentials)
            except Unauthorized:
                return None

        identity = resolve_identity(db, credentials)

        resource_id = None
        if rule.param:
            raw = request.path_params.get(rule.param)
            try:
                resource_id = int(raw)
            except (TypeError, ValueError):
                raise InvalidInput("Invalid path parameter", {rule.param: "must be an integer"})

        check(rule, identity, db, resource_id)
        log.debug("%s autorizado para %s (%s)", action, identity.username, identity.role)
        return identity

    dependency.__name__ = f"authorize_{action.replace('.', '_')}"
    return dependency
