"""
Session token codec.

The session lives entirely in a signed, client-held token. Routes only see
``SessionToken`` objects; how they are serialized and signed is behind the
``TokenCodec`` protocol so the mechanism can be swapped through the
``get_token_codec`` dependency.
"""
import logging
from datetime import datetime, timezone
from typing import Protocol

import jwt
from pydantic import ValidationError as PydanticValidationError

from academy.core.config import ALGORITHM, SECRET_KEY
from academy.core.errors import Unauthorized
from academy.schemas.session import SessionToken

logger = logging.getLogger(__name__)


class TokenCodec(Protocol):
    def encode(self, token: SessionToken) -> str: ...

    def decode(self, raw: str) -> SessionToken: ...

    def verify(self, raw: str) -> bool: ...


class JwtTokenCodec:
    """HS256 JWT carrying the session fields as claims."""

    def __init__(self, secret_key: str = SECRET_KEY, algorithm: str = ALGORITHM):
        self.secret_key = secret_key
        self.algorithm = algorithm

    def encode(self, token: SessionToken) -> str:
        claims = {
            "sub": str(token.id),
            "email": token.email,
            "name": token.name,
            "tz": token.timezone,
            "is_student": token.is_student,
            "is_teacher": token.is_teacher,
            "is_admin": token.is_admin,
            "access_expiry": token.access_expiry.isoformat() if token.access_expiry else None,
            "current_role": token.current_role.value,
            "iat": int(token.issued_at.timestamp()),
            "exp": int(token.expires_at.timestamp()),
        }
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def decode(self, raw: str) -> SessionToken:
        try:
            claims = jwt.decode(
                raw,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require": ["sub", "iat", "exp"]},
            )
        except jwt.ExpiredSignatureError:
            raise Unauthorized("Session expired")
        except jwt.InvalidTokenError as e:
            logger.warning("Rejected session token: %s", e)
            raise Unauthorized()

        try:
            return SessionToken(
                id=int(claims["sub"]),
                email=claims.get("email"),
                name=claims.get("name"),
                timezone=claims.get("tz"),
                is_student=claims.get("is_student", False),
                is_teacher=claims.get("is_teacher", False),
                is_admin=claims.get("is_admin", False),
                access_expiry=claims.get("access_expiry"),
                current_role=claims.get("current_role"),
                issued_at=datetime.fromtimestamp(claims["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
            )
        except (PydanticValidationError, ValueError) as e:
            # signed by us but not a well-formed session
            logger.warning("Malformed session claims: %s", e)
            raise Unauthorized()

    def verify(self, raw: str) -> bool:
        try:
            self.decode(raw)
        except Unauthorized:
            return False
        return True


_default_codec = JwtTokenCodec()


def get_token_codec() -> TokenCodec:
    return _default_codec
