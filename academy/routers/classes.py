from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from academy.core.audit import record_audit
from academy.core.current_user import get_current_session
from academy.core.deps import get_db
from academy.core.errors import NotFound, ValidationError
from academy.core.permissions import (
    ensure_class_owner,
    ensure_class_viewer,
    require_teacher,
    require_teacher_or_admin,
)
from academy.core.validation import ensure_date_range
from academy.models.class_member import ClassMember
from academy.models.training_session import TrainingSession
from academy.models.user import User
from academy.schemas.academy_class import ClassDetail, ClassUpdate, class_detail
from academy.schemas.enrollment import EnrollmentCreate, EnrollmentOut, EnrollmentResult
from academy.schemas.session import SessionToken
from academy.schemas.training_session import TrainingSessionCreate, TrainingSessionRead

router = APIRouter()


@router.get("/{class_id}", response_model=ClassDetail)
def get_class(
    class_id: int,
    db: Session = Depends(get_db),
    session: SessionToken = Depends(require_teacher_or_admin),
):
    return class_detail(ensure_class_owner(db, class_id, session))


@router.put("/{class_id}", response_model=ClassDetail)
def update_class(
    class_id: int,
    payload: ClassUpdate,
    db: Session = Depends(get_db),
    session: SessionToken = Depends(require_teacher_or_admin),
):
    academy_class = ensure_class_owner(db, class_id, session)
    ensure_date_range(payload.start_date, payload.end_date)

    for key, value in payload.model_dump().items():
        setattr(academy_class, key, value)
    db.commit()
    db.refresh(academy_class)

    record_audit(
        db,
        session.id,
        "UPDATE_CLASS",
        "CLASS",
        class_id,
        {"class_name": academy_class.name},
    )
    return class_detail(academy_class)


@router.delete("/{class_id}")
def delete_class(
    class_id: int,
    db: Session = Depends(get_db),
    session: SessionToken = Depends(require_teacher_or_admin),
):
    academy_class = ensure_class_owner(db, class_id, session)
    name = academy_class.name

    db.delete(academy_class)
    db.commit()

    record_audit(db, session.id, "DELETE_CLASS", "CLASS", class_id, {"class_name": name})
    return {"message": "Class deleted successfully"}


# --- enrollments ---


@router.get("/{class_id}/enrollments", response_model=list[EnrollmentOut])
def list_enrollments(
    class_id: int,
    db: Session = Depends(get_db),
    session: SessionToken = Depends(get_current_session),
):
    ensure_class_viewer(db, class_id, session)
    return (
        db.query(ClassMember)
        .filter(ClassMember.class_id == class_id)
        .order_by(ClassMember.joined_at.asc(), ClassMember.id.asc())
        .all()
    )


@router.post(
    "/{class_id}/enrollments",
    response_model=EnrollmentResult,
    status_code=status.HTTP_201_CREATED,
)
def enroll_students(
    class_id: int,
    payload: EnrollmentCreate,
    response: Response,
    db: Session = Depends(get_db),
    session: SessionToken = Depends(require_teacher),
):
    ensure_class_owner(db, class_id, session)

    student_ids = list(dict.fromkeys(payload.student_ids))
    found = (
        db.query(User.id)
        .filter(User.id.in_(student_ids), User.is_student.is_(True))
        .count()
    )
    if found != len(student_ids):
        raise ValidationError("Some students were not found")

    existing = {
        row.user_id
        for row in db.query(ClassMember.user_id).filter(
            ClassMember.class_id == class_id,
            ClassMember.user_id.in_(student_ids),
        )
    }
    new_ids = [sid for sid in student_ids if sid not in existing]

    if not new_ids:
        response.status_code = status.HTTP_200_OK
        return EnrollmentResult(
            message="All students are already enrolled",
            enrolled_count=0,
            already_enrolled_count=len(existing),
        )

    db.add_all(ClassMember(class_id=class_id, user_id=sid) for sid in new_ids)
    db.commit()

    record_audit(
        db,
        session.id,
        "ENROLL_STUDENTS",
        "CLASS",
        class_id,
        {"student_ids": new_ids},
    )
    return EnrollmentResult(
        message=f"Successfully enrolled {len(new_ids)} student(s)",
        enrolled_count=len(new_ids),
        already_enrolled_count=len(existing),
    )


@router.delete("/{class_id}/enrollments/{student_id}")
def unenroll_student(
    class_id: int,
    student_id: int,
    db: Session = Depends(get_db),
    session: SessionToken = Depends(require_teacher),
):
    ensure_class_owner(db, class_id, session)

    member = (
        db.query(ClassMember)
        .filter(ClassMember.class_id == class_id, ClassMember.user_id == student_id)
        .first()
    )
    if not member:
        raise NotFound("Enrollment not found")

    db.delete(member)
    db.commit()

    record_audit(
        db,
        session.id,
        "UNENROLL_STUDENT",
        "CLASS",
        class_id,
        {"student_id": student_id},
    )
    return {"message": "Student removed from class"}


# --- training sessions ---


@router.get("/{class_id}/sessions", response_model=list[TrainingSessionRead])
def list_sessions(
    class_id: int,
    db: Session = Depends(get_db),
    session: SessionToken = Depends(get_current_session),
):
    ensure_class_viewer(db, class_id, session)
    return (
        db.query(TrainingSession)
        .filter(TrainingSession.class_id == class_id)
        .order_by(TrainingSession.date.asc(), TrainingSession.start_time.asc())
        .all()
    )


@router.post(
    "/{class_id}/sessions",
    response_model=TrainingSessionRead,
    status_code=status.HTTP_201_CREATED,
)
def create_session(
    class_id: int,
    payload: TrainingSessionCreate,
    db: Session = Depends(get_db),
    session: SessionToken = Depends(get_current_session),
):
    # assigned teacher or any admin; no separate role policy
    ensure_class_owner(db, class_id, session)

    training_session = TrainingSession(class_id=class_id, **payload.model_dump())
    db.add(training_session)
    db.commit()
    db.refresh(training_session)
    return training_session
