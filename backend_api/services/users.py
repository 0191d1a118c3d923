# backend_api/services/users.py
import logging
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend_api.errors import Conflict, Forbidden, NotFound
from backend_api.models.user import Role, User
from backend_api.security import hash_password
from backend_api.services.base import Page, PageRequest, paginate

log = logging.getLogger("backend_api.users")

SORTABLE = {
    "id": User.id,
    "username": User.username,
    "email": User.email,
    "firstName": User.first_name,
    "lastName": User.last_name,
    "role": User.role,
    "isActive": User.is_active,
    "createdAt": User.created_at,
    "updatedAt": User.updated_at,
}


class UserService:
    """Altas, consultas y mantenimiento de usuarios."""

    def __init__(self, db: Session):
        self.db = db

    # ---------- consultas ----------

    def list(self, request: PageRequest) -> Page:
        request = request.with_default_sort("id", "asc")
        return paginate(self.db.query(User), request, SORTABLE, User.id)

    def get(self, user_id: int) -> User:
        user = self.db.get(User, user_id)
        if not user:
            raise NotFound("User", user_id)
        return user

    def get_by_username(self, username: str) -> Optional[User]:
        return self.db.query(User).filter(User.username == username).first()

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def exists_by_username(self, username: str) -> bool:
        return self.get_by_username(username) is not None

    def exists_by_email(self, email: str) -> bool:
        return self.get_by_email(email) is not None

    def search(self, name: str, request: PageRequest) -> Page:
        """Busca en nombre, apellidos y username (sin distinguir mayúsculas)."""
        q = self.db.query(User).filter(
            or_(
                User.first_name.icontains(name, autoescape=True),
                User.last_name.icontains(name, autoescape=True),
                User.username.icontains(name, autoescape=True),
            )
        )
        request = request.with_default_sort("id", "asc")
        return paginate(q, request, SORTABLE, User.id)

    def list_active_by_role(self, role: Role) -> List[User]:
        return (
            self.db.query(User)
            .filter(User.role == Role(role).value, User.is_active.is_(True))
            .order_by(User.id)
            .all()
        )

    # ---------- altas / cambios ----------

    def create(self, username: str, email: str, password: str,
               first_name: str = None, last_name: str = None,
               role: Role = Role.USER, is_active: bool = True) -> User:
        if self.exists_by_username(username):
            raise Conflict("Username is already taken")
        if self.exists_by_email(email):
            raise Conflict("Email is already in use")

        user = User(
            username=username,
            email=email,
            password_hash=hash_password(password),
            first_name=first_name,
            last_name=last_name,
            role=Role(role).value,
            is_active=is_active,
        )
        self.db.add(user)
        self._commit()
        self.db.refresh(user)
        log.info("Usuario creado: %s (%s)", user.username, user.role)
        return user

    def update(self, user_id: int, data, actor) -> User:
        """
        Sobrescribe sólo nombre, apellidos, email, rol y estado.
        Rol y estado sólo los puede cambiar un ADMIN.
        """
        user = self.get(user_id)
        changes = data.model_dump(exclude_unset=True)
        # Sólo los nombres se pueden vaciar con null
        changes = {k: v for k, v in changes.items() if v is not None or k in ("first_name", "last_name")}

        if ("role" in changes or "is_active" in changes) and actor.role != Role.ADMIN.value:
            raise Forbidden("Only administrators can change role or active status")

        if "email" in changes and changes["email"] != user.email:
            if self.exists_by_email(changes["email"]):
                raise Conflict("Email is already in use")
            user.email = changes["email"]
        if "first_name" in changes:
            user.first_name = changes["first_name"]
        if "last_name" in changes:
            user.last_name = changes["last_name"]
        if "role" in changes:
            user.role = Role(changes["role"]).value
        if "is_active" in changes:
            user.is_active = changes["is_active"]

        self._commit()
        self.db.refresh(user)
        return user

    def delete(self, user_id: int) -> None:
        user = self.get(user_id)
        self.db.delete(user)
        self.db.commit()
        log.info("Usuario borrado: %s", user_id)

    def activate(self, user_id: int) -> User:
        return self._set_active(user_id, True)

    def deactivate(self, user_id: int) -> User:
        # Los tokens ya emitidos siguen valiendo hasta que caduquen
        return self._set_active(user_id, False)

    def _set_active(self, user_id: int, active: bool) -> User:
        user = self.get(user_id)
        if user.is_active != active:
            user.is_active = active
            self.db.commit()
            self.db.refresh(user)
        return user

    def _commit(self):
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise Conflict("Username or email is already in use") from exc
