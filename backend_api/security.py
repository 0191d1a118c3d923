# backend_api/security.py
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from passlib.context import CryptContext

from backend_api.config import settings

log = logging.getLogger("backend_api.security")

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


def hash_password(raw: str) -> str:
    return pwd_context.hash(raw)


def verify_password(raw: str, stored: str) -> bool:
    """
    Comparación en tiempo constante (la hace passlib).
    Un hash corrupto en BD cuenta como contraseña incorrecta.
    """
    try:
        return pwd_context.verify(raw, stored)
    except ValueError:
        log.warning("Hash de contraseña no reconocido")
        return False


# ==================== ERRORES DE TOKEN ====================

class TokenError(Exception):
    kind = "invalid"


class InvalidToken(TokenError):
    """Firma incorrecta u otra claim inválida."""
    kind = "invalid"


class TokenExpired(TokenError):
    kind = "expired"


class MalformedToken(TokenError):
    """No se puede decodificar o no trae subject."""
    kind = "malformed"


# ==================== SERVICIO DE TOKENS ====================

class TokenService:
    """
    Emite y valida tokens Bearer firmados (JWT, HMAC).
    Los tokens no se pueden revocar: caducan solos.
    """

    def __init__(self, secret: str, algorithm: str = "HS512", ttl: timedelta = timedelta(hours=24)):
        self.secret = secret
        self.algorithm = algorithm
        self.ttl = ttl

    def issue(self, subject: str, ttl: Optional[timedelta] = None) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": subject,
            "iat": now,
            "exp": now + (ttl if ttl is not None else self.ttl),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def issue_from_identity(self, identity, ttl: Optional[timedelta] = None) -> str:
        return self.issue(identity.username, ttl)

    def parse_subject(self, token: str) -> str:
        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpired("Token has expired") from exc
        except jwt.InvalidSignatureError as exc:
            raise InvalidToken("Token signature does not match") from exc
        except jwt.MissingRequiredClaimError as exc:
            raise MalformedToken(str(exc)) from exc
        except jwt.DecodeError as exc:
            raise MalformedToken("Token could not be decoded") from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidToken(str(exc)) from exc

        subject = claims.get("sub")
        if not subject:
            raise MalformedToken("Token has no subject")
        return subject

    def validate(self, token: str) -> bool:
        try:
            self.parse_subject(token)
        except TokenError as exc:
            log.warning("Token rechazado (%s): %s", exc.kind, exc)
            return False
        return True


token_service = TokenService(
    secret=settings.JWT_SECRET,
    algorithm=settings.JWT_ALGORITHM,
    ttl=timedelta(minutes=settings.JWT_EXPIRATION_MINUTES),
)
