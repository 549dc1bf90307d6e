from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from academy.core.audit import record_audit
from academy.core.auth import authenticate, switch_role
from academy.core.config import SESSION_COOKIE_NAME, SESSION_MAX_AGE
from academy.core.current_user import get_current_session, get_current_user
from academy.core.deps import get_db
from academy.core.errors import ValidationError
from academy.core.identity import IdentityStore
from academy.core.security import hash_password, verify_password
from academy.core.tokens import TokenCodec, get_token_codec
from academy.models.user import User
from academy.schemas.auth import (
    LoginRequest,
    PasswordChangeRequest,
    SessionUpdateRequest,
    SwitchRoleRequest,
    SwitchRoleResponse,
)
from academy.schemas.session import SessionRead, SessionToken
from academy.schemas.token import Token

router = APIRouter()


def _issue(response: Response, token: SessionToken, codec: TokenCodec) -> Token:
    raw = codec.encode(token)
    response.set_cookie(
        SESSION_COOKIE_NAME,
        raw,
        max_age=int(SESSION_MAX_AGE.total_seconds()),
        httponly=True,
        samesite="lax",
    )
    return Token(
        access_token=raw,
        current_role=token.current_role,
        roles=token.roles,
        expires_at=token.expires_at,
    )


@router.post(
    "/login",
    response_model=Token,
    responses={
        401: {"description": "Invalid credentials, inactive account, no roles, or expired access"},
    },
)
def login(
    payload: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
    codec: TokenCodec = Depends(get_token_codec),
):
    token = authenticate(IdentityStore(db), payload.email, payload.password)
    return _issue(response, token, codec)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout():
    # stateless sessions: dropping the cookie is all there is to do
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    response.delete_cookie(SESSION_COOKIE_NAME)
    return response


@router.get("/me", response_model=SessionRead)
def me(session: SessionToken = Depends(get_current_session)):
    return SessionRead.from_token(session)


@router.post(
    "/switch-role",
    response_model=SwitchRoleResponse,
    responses={
        400: {"description": "Invalid role"},
        403: {"description": "User does not have the requested role"},
    },
)
def switch_role_endpoint(
    payload: SwitchRoleRequest,
    session: SessionToken = Depends(get_current_session),
):
    """
    Validate a role change without committing it.

    The client follows up with ``PATCH /auth/session`` to get a token that
    carries the new role.
    """
    switched = switch_role(session, payload.role)
    return SwitchRoleResponse(
        success=True,
        role=switched.current_role,
        message=f"Switched to {switched.current_role.value} role",
    )


@router.patch("/session", response_model=Token)
def update_session(
    payload: SessionUpdateRequest,
    response: Response,
    session: SessionToken = Depends(get_current_session),
    codec: TokenCodec = Depends(get_token_codec),
):
    # re-validated here: the client's word is never enough
    switched = switch_role(session, payload.current_role)
    return _issue(response, switched, codec)


@router.post("/password", status_code=status.HTTP_204_NO_CONTENT)
def change_password(
    payload: PasswordChangeRequest,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    if not verify_password(payload.current_password, me.hashed_password):
        raise ValidationError("Current password is incorrect")

    IdentityStore(db).update(me.id, hashed_password=hash_password(payload.new_password))
    record_audit(db, me.id, "CHANGE_PASSWORD", "USER", me.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
