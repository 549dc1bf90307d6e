from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from academy.core.audit import record_audit
from academy.core.deps import get_db
from academy.core.errors import NotFound
from academy.core.identity import IdentityStore
from academy.core.permissions import ensure_not_self, require_acting_teacher, require_teacher
from academy.core.security import generate_password, hash_password
from academy.models.user import User
from academy.schemas.session import SessionToken
from academy.schemas.student import (
    StudentClassRef,
    StudentCreate,
    StudentCreated,
    StudentRead,
    StudentUpdate,
)

router = APIRouter()


def _ensure_student_exists(db: Session, student_id: int) -> User:
    student = (
        db.query(User)
        .filter(User.id == student_id, User.is_student.is_(True))
        .first()
    )
    if not student:
        raise NotFound("Student not found")
    return student


def _student_read(student: User) -> StudentRead:
    return StudentRead(
        id=student.id,
        email=student.email,
        name=student.name,
        timezone=student.timezone,
        is_active=student.is_active,
        access_expiry=student.access_expiry,
        created_at=student.created_at,
        classes=[
            StudentClassRef(id=m.academy_class.id, name=m.academy_class.name)
            for m in student.memberships
        ],
    )


# Listing and creating students is tied to the teacher persona, not the flag.


@router.get("", response_model=list[StudentRead])
def list_students(
    db: Session = Depends(get_db),
    teacher: SessionToken = Depends(require_acting_teacher),
):
    students = (
        db.query(User)
        .filter(User.is_student.is_(True))
        .order_by(User.created_at.desc(), User.id.desc())
        .all()
    )
    return [_student_read(s) for s in students]


@router.post("", response_model=StudentCreated, status_code=status.HTTP_201_CREATED)
def create_student(
    payload: StudentCreate,
    db: Session = Depends(get_db),
    teacher: SessionToken = Depends(require_acting_teacher),
):
    generated = None
    password = payload.password
    if not password:
        password = generated = generate_password()

    # teachers can only ever create student-only accounts
    student = IdentityStore(db).create(
        email=payload.email,
        name=payload.name,
        timezone=payload.timezone,
        access_expiry=payload.access_expiry,
        hashed_password=hash_password(password),
        is_student=True,
        is_teacher=False,
        is_admin=False,
        is_active=True,
    )

    record_audit(
        db,
        teacher.id,
        "CREATE_STUDENT",
        "USER",
        student.id,
        {"created_user": student.email},
    )
    # returned once so the teacher can pass it on
    return StudentCreated(
        **_student_read(student).model_dump(),
        generated_password=generated,
    )


@router.get("/{student_id}", response_model=StudentRead)
def get_student(
    student_id: int,
    db: Session = Depends(get_db),
    teacher: SessionToken = Depends(require_teacher),
):
    return _student_read(_ensure_student_exists(db, student_id))


@router.put("/{student_id}", response_model=StudentRead)
def update_student(
    student_id: int,
    payload: StudentUpdate,
    db: Session = Depends(get_db),
    teacher: SessionToken = Depends(require_teacher),
):
    _ensure_student_exists(db, student_id)

    fields = payload.model_dump(exclude_unset=True, exclude={"password"})
    # required columns ignore an explicit null
    fields = {
        key: value
        for key, value in fields.items()
        if value is not None or key == "access_expiry"
    }
    if payload.password:
        fields["hashed_password"] = hash_password(payload.password)

    student = IdentityStore(db).update(student_id, **fields)
    return _student_read(student)


@router.delete(
    "/{student_id}",
    responses={400: {"description": "Cannot delete your own account"}},
)
def delete_student(
    student_id: int,
    db: Session = Depends(get_db),
    teacher: SessionToken = Depends(require_teacher),
):
    ensure_not_self(teacher, student_id, "Cannot delete your own account")

    student = _ensure_student_exists(db, student_id)
    email = student.email
    IdentityStore(db).delete(student_id)

    record_audit(db, teacher.id, "DELETE_USER", "USER", student_id, {"user_email": email})
    return {"message": "Student deleted successfully"}
