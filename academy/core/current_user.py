from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from academy.core.config import SESSION_COOKIE_NAME
from academy.core.deps import get_db
from academy.core.errors import Unauthorized
from academy.core.identity import IdentityStore
from academy.core.tokens import TokenCodec, get_token_codec
from academy.models.user import User
from academy.schemas.session import SessionToken

# auto_error=False: a missing header falls back to the session cookie
bearer_scheme = HTTPBearer(auto_error=False)


def get_current_session(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    codec: TokenCodec = Depends(get_token_codec),
) -> SessionToken:
    """
    Presence check: resolve the caller's session from the bearer header or
    the session cookie. Never touches the database.
    """
    raw = credentials.credentials if credentials else request.cookies.get(SESSION_COOKIE_NAME)
    if not raw:
        raise Unauthorized()
    return codec.decode(raw)


def get_current_user(
    session: SessionToken = Depends(get_current_session),
    db: Session = Depends(get_db),
) -> User:
    """Load the user row behind the session, for operations that change it."""
    user = IdentityStore(db).find_by_id(session.id)
    if not user:
        # account removed after the token was issued
        raise Unauthorized()
    return user
