# backend_api/services/auth.py
"""Registro e inicio de sesión.

El inicio de sesión devuelve siempre el mismo error genérico
(`InvalidCredentials`) tanto si el usuario no existe como si la contraseña
no coincide o la cuenta está desactivada, para no filtrar qué usernames
existen. El registro no emite token: hace falta un sign-in después.
"""

import logging

from sqlalchemy.orm import Session

from backend_api.errors import InvalidCredentials
from backend_api.models.user import Role, User
from backend_api.security import TokenService, pwd_context, verify_password
from backend_api.services.users import UserService

log = logging.getLogger("backend_api.auth")


class AuthService:

    def __init__(self, db: Session, tokens: TokenService):
        self.db = db
        self.tokens = tokens
        self.users = UserService(db)

    def sign_in(self, username: str, password: str) -> dict:
        user = self.users.get_by_username(username)
        if user is None:
            # Mismo coste que una contraseña incorrecta
            pwd_context.dummy_verify()
            log.info("Sign-in fallido para %r", username)
            raise InvalidCredentials()
        if not verify_password(password, user.password_hash) or not user.is_active:
            log.info("Sign-in fallido para %r", username)
            raise InvalidCredentials()

        token = self.tokens.issue(user.username)
        log.info("Sign-in correcto: %s", user.username)
        return {"token": token, "type": "Bearer", "user": user}

    def sign_up(self, data) -> dict:
        user = self.users.create(
            username=data.username,
            email=data.email,
            password=data.password,
            first_name=data.first_name,
            last_name=data.last_name,
            role=Role.USER,
            is_active=True,
        )
        return {"message": "User registered successfully!", "user": user}

    def current_user(self, identity) -> User:
        return self.users.get(identity.user_id)
