"""SQLAlchemy-backed identity store: the only place user rows are written."""
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from academy.core.errors import NotFound, ValidationError
from academy.models.audit_log import AuditLog
from academy.models.class_member import ClassMember
from academy.models.class_teacher import ClassTeacher
from academy.models.user import User

logger = logging.getLogger(__name__)

EMAIL_TAKEN = "User with this email already exists"


class IdentityStore:
    def __init__(self, db: Session):
        self.db = db

    def find_by_email(self, email: str) -> User | None:
        # exact match; collation is left to the database
        return self.db.query(User).filter(User.email == email).first()

    def find_by_id(self, user_id: int) -> User | None:
        return self.db.query(User).filter(User.id == user_id).first()

    def get(self, user_id: int) -> User:
        user = self.find_by_id(user_id)
        if not user:
            raise NotFound("User not found")
        return user

    def _email_taken(self, email: str, exclude_id: int | None = None) -> bool:
        q = self.db.query(User.id).filter(User.email == email)
        if exclude_id is not None:
            q = q.filter(User.id != exclude_id)
        return q.first() is not None

    def create(self, **fields) -> User:
        if self._email_taken(fields["email"]):
            raise ValidationError(EMAIL_TAKEN)

        user = User(**fields)
        self.db.add(user)
        self._commit()
        self.db.refresh(user)
        return user

    def update(self, user_id: int, **fields) -> User:
        user = self.get(user_id)

        if "email" in fields and self._email_taken(fields["email"], exclude_id=user_id):
            raise ValidationError("Email is already taken by another user")

        for key, value in fields.items():
            setattr(user, key, value)
        self._commit()
        self.db.refresh(user)
        return user

    def delete(self, user_id: int) -> None:
        user = self.get(user_id)

        # dependents first (child -> parent)
        self.db.query(ClassMember).filter(ClassMember.user_id == user_id).delete()
        self.db.query(ClassTeacher).filter(ClassTeacher.teacher_id == user_id).delete()
        self.db.query(AuditLog).filter(AuditLog.user_id == user_id).delete()
        self.db.delete(user)
        self._commit()
        logger.info("Deleted user %s", user_id)

    def _commit(self) -> None:
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ValidationError(EMAIL_TAKEN)
