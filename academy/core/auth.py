"""
Login and role switching.

``authenticate`` turns an (email, password) pair into a ``SessionToken`` or
raises one of the login errors, always checked in the same order: unknown
email, inactive account, no roles, wrong password, expired student access.
``switch_role`` changes the persona of an existing session.
"""
import logging
from datetime import datetime

from academy.core.clock import as_utc, utcnow
from academy.core.config import SESSION_MAX_AGE
from academy.core.errors import (
    AccessExpired,
    AccountInactive,
    InvalidCredentials,
    NoPermissionsAssigned,
    RoleNotGranted,
)
from academy.core.identity import IdentityStore
from academy.core.roles import Role, granted_roles, has_role, parse_role, primary_role
from academy.core.security import DUMMY_PASSWORD_HASH, verify_password
from academy.models.user import User
from academy.schemas.session import SessionToken

logger = logging.getLogger(__name__)


def student_access_expired(user, now: datetime | None = None) -> bool:
    if not user.is_student or user.access_expiry is None:
        return False
    now = now or utcnow()
    return as_utc(user.access_expiry) < now


def issue_session(user: User, now: datetime | None = None) -> SessionToken:
    now = now or utcnow()
    return SessionToken(
        id=user.id,
        email=user.email,
        name=user.name,
        timezone=user.timezone,
        is_student=user.is_student,
        is_teacher=user.is_teacher,
        is_admin=user.is_admin,
        access_expiry=as_utc(user.access_expiry),
        current_role=primary_role(user),
        issued_at=now,
        expires_at=now + SESSION_MAX_AGE,
    )


def authenticate(
    store: IdentityStore,
    email: str,
    password: str,
    now: datetime | None = None,
) -> SessionToken:
    now = now or utcnow()

    user = store.find_by_email(email)
    if not user:
        # burn a comparison so unknown emails take as long as bad passwords
        verify_password(password, DUMMY_PASSWORD_HASH)
        logger.warning("Login failed: unknown email")
        raise InvalidCredentials()

    if not user.is_active:
        logger.warning("Login refused for inactive user %s", user.id)
        raise AccountInactive()

    if not granted_roles(user):
        logger.warning("Login refused for user %s: no roles assigned", user.id)
        raise NoPermissionsAssigned()

    if not verify_password(password, user.hashed_password):
        logger.warning("Login failed for user %s: bad password", user.id)
        raise InvalidCredentials()

    # teacher/admin flags never expire
    if student_access_expired(user, now):
        logger.warning("Login refused for user %s: student access expired", user.id)
        raise AccessExpired()

    token = issue_session(user, now)
    logger.info("User %s logged in as %s", user.id, token.current_role.value)
    return token


def switch_role(token: SessionToken, requested_role) -> SessionToken:
    """
    Return ``token`` acting as ``requested_role``.

    Only role possession is validated; activation and access expiry are
    checked at login, not here.
    """
    role: Role = parse_role(requested_role)

    if not has_role(token, role):
        logger.warning("User %s tried to switch to ungranted role %s", token.id, role.value)
        raise RoleNotGranted()

    if role == token.current_role:
        return token

    return SessionToken(**{**token.model_dump(), "current_role": role})
