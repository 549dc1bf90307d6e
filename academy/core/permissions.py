"""
Authorization gate.

Each protected route declares one policy:

* ``RequiresFlag`` passes when any of the listed role flags is set, whatever
  persona the session is currently acting as.
* ``RequiresCurrentRole`` passes only when the session is currently acting as
  one of the listed roles.

Resource checks (``ensure_*``) run after the policy: existence first (404),
then ownership (403), with the admin flag bypassing ownership.
"""
import logging
from dataclasses import dataclass

from fastapi import Depends
from sqlalchemy.orm import Session

from academy.core.current_user import get_current_session
from academy.core.errors import Forbidden, InvalidOperation, NotFound
from academy.core.roles import Role, has_role
from academy.models.academy_class import AcademyClass
from academy.models.class_member import ClassMember
from academy.models.class_teacher import ClassTeacher
from academy.schemas.session import SessionToken

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequiresFlag:
    roles: tuple[Role, ...]

    def __init__(self, *roles: Role):
        object.__setattr__(self, "roles", tuple(roles))

    def allows(self, session: SessionToken) -> bool:
        return any(has_role(session, role) for role in self.roles)


@dataclass(frozen=True)
class RequiresCurrentRole:
    roles: tuple[Role, ...]

    def __init__(self, *roles: Role):
        object.__setattr__(self, "roles", tuple(roles))

    def allows(self, session: SessionToken) -> bool:
        return session.current_role in self.roles


Policy = RequiresFlag | RequiresCurrentRole


def require(policy: Policy):
    """Build a dependency that runs the presence check, then ``policy``."""

    def checker(session: SessionToken = Depends(get_current_session)) -> SessionToken:
        if not policy.allows(session):
            logger.warning(
                "Forbidden: user=%s current_role=%s policy=%s",
                session.id,
                session.current_role.value,
                policy,
            )
            raise Forbidden()
        return session

    return checker


require_admin = require(RequiresFlag(Role.ADMIN))
require_teacher = require(RequiresFlag(Role.TEACHER))
require_teacher_or_admin = require(RequiresFlag(Role.TEACHER, Role.ADMIN))
require_acting_teacher = require(RequiresCurrentRole(Role.TEACHER))
require_acting_student = require(RequiresCurrentRole(Role.STUDENT))


def ensure_class_exists(db: Session, class_id: int) -> AcademyClass:
    academy_class = db.query(AcademyClass).filter(AcademyClass.id == class_id).first()
    if not academy_class:
        raise NotFound("Class not found")
    return academy_class


def is_class_teacher(db: Session, class_id: int, user_id: int) -> bool:
    return (
        db.query(ClassTeacher)
        .filter(ClassTeacher.class_id == class_id, ClassTeacher.teacher_id == user_id)
        .first()
        is not None
    )


def is_class_member(db: Session, class_id: int, user_id: int) -> bool:
    return (
        db.query(ClassMember)
        .filter(ClassMember.class_id == class_id, ClassMember.user_id == user_id)
        .first()
        is not None
    )


def ensure_class_owner(db: Session, class_id: int, session: SessionToken) -> AcademyClass:
    """The class must exist; then the actor must be an admin or assigned to it."""
    academy_class = ensure_class_exists(db, class_id)
    if session.is_admin:
        return academy_class
    if not is_class_teacher(db, class_id, session.id):
        logger.warning("Forbidden: user=%s is not a teacher of class %s", session.id, class_id)
        raise Forbidden()
    return academy_class


def ensure_class_viewer(db: Session, class_id: int, session: SessionToken) -> AcademyClass:
    """Owners plus enrolled members."""
    academy_class = ensure_class_exists(db, class_id)
    if session.is_admin or is_class_teacher(db, class_id, session.id):
        return academy_class
    if not is_class_member(db, class_id, session.id):
        raise Forbidden()
    return academy_class


def ensure_not_self(session: SessionToken, user_id: int, message: str) -> None:
    if session.id == user_id:
        raise InvalidOperation(message)
