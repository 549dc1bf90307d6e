from enum import Enum

from academy.core.errors import InvalidRole


class Role(str, Enum):
    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"


# Highest privilege first
ROLE_PRIORITY = (Role.ADMIN, Role.TEACHER, Role.STUDENT)


def parse_role(value) -> Role:
    try:
        return Role(value)
    except ValueError:
        raise InvalidRole()


def has_role(subject, role: Role) -> bool:
    """
    True when the role flag for ``role`` is set on ``subject``.

    Works for anything carrying ``is_student`` / ``is_teacher`` / ``is_admin``
    (a User row or a SessionToken).
    """
    return bool(getattr(subject, f"is_{Role(role).value}", False))


def granted_roles(subject) -> list[Role]:
    return [role for role in ROLE_PRIORITY if has_role(subject, role)]


def primary_role(subject) -> Role | None:
    roles = granted_roles(subject)
    return roles[0] if roles else None
