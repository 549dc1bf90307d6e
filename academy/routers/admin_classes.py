from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from academy.core.audit import record_audit
from academy.core.deps import get_db
from academy.core.errors import ValidationError
from academy.core.permissions import ensure_class_exists, require_admin
from academy.core.validation import ensure_date_range
from academy.models.academy_class import AcademyClass
from academy.models.class_teacher import ClassTeacher
from academy.models.program import Program
from academy.models.user import User
from academy.schemas.academy_class import (
    ClassAdminUpdate,
    ClassCreate,
    ClassDetail,
    ClassRead,
    ClassStatusUpdate,
    TeacherAssignment,
    class_detail,
)
from academy.schemas.session import SessionToken

router = APIRouter()


def _verify_teachers(db: Session, assignments: list[TeacherAssignment]) -> None:
    teacher_ids = [a.id for a in assignments]
    if len(set(teacher_ids)) != len(teacher_ids):
        raise ValidationError("A teacher can only be assigned once")

    if sum(1 for a in assignments if a.is_primary) > 1:
        raise ValidationError("Only one primary teacher is allowed")

    verified = (
        db.query(User.id)
        .filter(User.id.in_(teacher_ids), User.is_teacher.is_(True))
        .count()
    )
    if verified != len(teacher_ids):
        raise ValidationError("One or more selected teachers are invalid")


def _verify_program(db: Session, program_id: int | None) -> None:
    if program_id is None:
        return
    if not db.query(Program).filter(Program.id == program_id).first():
        raise ValidationError("Program not found")


@router.get("", response_model=list[ClassDetail])
def list_classes(
    db: Session = Depends(get_db),
    admin: SessionToken = Depends(require_admin),
):
    classes = db.query(AcademyClass).order_by(AcademyClass.start_date.desc()).all()
    return [class_detail(c) for c in classes]


@router.post("", response_model=ClassDetail, status_code=status.HTTP_201_CREATED)
def create_class(
    payload: ClassCreate,
    db: Session = Depends(get_db),
    admin: SessionToken = Depends(require_admin),
):
    ensure_date_range(payload.start_date, payload.end_date)
    _verify_teachers(db, payload.teachers)
    _verify_program(db, payload.program_id)

    academy_class = AcademyClass(**payload.model_dump(exclude={"teachers"}))
    academy_class.teachers = [
        ClassTeacher(teacher_id=t.id, is_primary=t.is_primary) for t in payload.teachers
    ]
    db.add(academy_class)
    db.commit()
    db.refresh(academy_class)

    record_audit(
        db,
        admin.id,
        "CREATE_CLASS",
        "CLASS",
        academy_class.id,
        {"class_name": academy_class.name, "teacher_ids": [t.id for t in payload.teachers]},
    )
    return class_detail(academy_class)


@router.get("/{class_id}", response_model=ClassDetail)
def get_class(
    class_id: int,
    db: Session = Depends(get_db),
    admin: SessionToken = Depends(require_admin),
):
    return class_detail(ensure_class_exists(db, class_id))


@router.put("/{class_id}", response_model=ClassDetail)
def update_class(
    class_id: int,
    payload: ClassAdminUpdate,
    db: Session = Depends(get_db),
    admin: SessionToken = Depends(require_admin),
):
    academy_class = ensure_class_exists(db, class_id)
    ensure_date_range(payload.start_date, payload.end_date)
    _verify_program(db, payload.program_id)

    if payload.teachers is not None:
        if not payload.teachers:
            raise ValidationError("At least one teacher is required")
        _verify_teachers(db, payload.teachers)
        # replace assignments wholesale
        academy_class.teachers.clear()
        db.flush()
        academy_class.teachers.extend(
            ClassTeacher(teacher_id=t.id, is_primary=t.is_primary) for t in payload.teachers
        )

    for key, value in payload.model_dump(exclude={"teachers"}).items():
        setattr(academy_class, key, value)

    db.commit()
    db.refresh(academy_class)

    record_audit(
        db,
        admin.id,
        "UPDATE_CLASS",
        "CLASS",
        academy_class.id,
        {"class_name": academy_class.name},
    )
    return class_detail(academy_class)


@router.delete("/{class_id}")
def delete_class(
    class_id: int,
    db: Session = Depends(get_db),
    admin: SessionToken = Depends(require_admin),
):
    academy_class = ensure_class_exists(db, class_id)
    name = academy_class.name

    # members, teacher assignments and sessions go with it (ORM cascade)
    db.delete(academy_class)
    db.commit()

    record_audit(db, admin.id, "DELETE_CLASS", "CLASS", class_id, {"class_name": name})
    return {"message": "Class deleted successfully"}


@router.put("/{class_id}/status", response_model=ClassRead)
def update_class_status(
    class_id: int,
    payload: ClassStatusUpdate,
    db: Session = Depends(get_db),
    admin: SessionToken = Depends(require_admin),
):
    academy_class = ensure_class_exists(db, class_id)
    academy_class.is_active = payload.is_active
    db.commit()
    db.refresh(academy_class)

    record_audit(
        db,
        admin.id,
        "ACTIVATE_CLASS" if payload.is_active else "DEACTIVATE_CLASS",
        "CLASS",
        class_id,
        {"class_name": academy_class.name},
    )
    return academy_class
