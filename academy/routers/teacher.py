from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session

from academy.core.clock import utcnow
from academy.core.deps import get_db
from academy.core.permissions import require_teacher_or_admin
from academy.models.academy_class import AcademyClass
from academy.models.class_member import ClassMember
from academy.models.class_teacher import ClassTeacher
from academy.models.training_session import TrainingSession
from academy.schemas.academy_class import ClassRead, TeacherClassRow, class_teachers
from academy.schemas.session import SessionToken
from academy.schemas.stats import TeacherStats

router = APIRouter(tags=["teacher"])


@router.get("/teacher/classes", response_model=list[TeacherClassRow])
def my_classes(
    db: Session = Depends(get_db),
    me: SessionToken = Depends(require_teacher_or_admin),
):
    assignments = (
        db.query(ClassTeacher)
        .join(AcademyClass, AcademyClass.id == ClassTeacher.class_id)
        .filter(ClassTeacher.teacher_id == me.id)
        .order_by(AcademyClass.start_date.asc())
        .all()
    )

    rows: list[TeacherClassRow] = []
    for assignment in assignments:
        c = assignment.academy_class
        rows.append(
            TeacherClassRow(
                **ClassRead.model_validate(c).model_dump(),
                is_primary=assignment.is_primary,
                member_count=len(c.members),
                session_count=len(c.sessions),
                teachers=class_teachers(c),
            )
        )
    return rows


@router.get("/teacher/stats", response_model=TeacherStats)
def my_stats(
    db: Session = Depends(get_db),
    me: SessionToken = Depends(require_teacher_or_admin),
):
    class_ids = [
        row.class_id
        for row in db.query(ClassTeacher.class_id).filter(ClassTeacher.teacher_id == me.id)
    ]
    if not class_ids:
        return TeacherStats(
            total_classes=0, active_classes=0, total_students=0, upcoming_sessions=0
        )

    active_classes = (
        db.query(func.count(AcademyClass.id))
        .filter(AcademyClass.id.in_(class_ids), AcademyClass.is_active.is_(True))
        .scalar()
    ) or 0

    # a student in two of my classes counts once
    total_students = (
        db.query(func.count(func.distinct(ClassMember.user_id)))
        .filter(ClassMember.class_id.in_(class_ids))
        .scalar()
    ) or 0

    upcoming_sessions = (
        db.query(func.count(TrainingSession.id))
        .filter(
            TrainingSession.class_id.in_(class_ids),
            TrainingSession.date >= utcnow().date(),
            TrainingSession.status == "PLANNED",
        )
        .scalar()
    ) or 0

    return TeacherStats(
        total_classes=len(class_ids),
        active_classes=active_classes,
        total_students=total_students,
        upcoming_sessions=upcoming_sessions,
    )
