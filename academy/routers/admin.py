from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session

from academy.core.deps import get_db
from academy.core.permissions import require_admin
from academy.models.academy_class import AcademyClass
from academy.models.program import Program
from academy.models.user import User
from academy.schemas.session import SessionToken
from academy.schemas.stats import AdminStats
from academy.schemas.user import UserSummary

router = APIRouter()


def _count_users(db: Session, *criteria) -> int:
    return db.query(func.count(User.id)).filter(*criteria).scalar() or 0


@router.get("/teachers", response_model=list[UserSummary])
def list_teachers(
    db: Session = Depends(get_db),
    admin: SessionToken = Depends(require_admin),
):
    return (
        db.query(User)
        .filter(User.is_teacher.is_(True), User.is_active.is_(True))
        .order_by(User.name.asc())
        .all()
    )


@router.get("/stats", response_model=AdminStats)
def admin_stats(
    db: Session = Depends(get_db),
    admin: SessionToken = Depends(require_admin),
):
    total_classes = db.query(func.count(AcademyClass.id)).scalar() or 0
    active_classes = (
        db.query(func.count(AcademyClass.id))
        .filter(AcademyClass.is_active.is_(True))
        .scalar()
    ) or 0

    return AdminStats(
        total_users=_count_users(db),
        total_students=_count_users(db, User.is_student.is_(True)),
        total_teachers=_count_users(db, User.is_teacher.is_(True)),
        total_admins=_count_users(db, User.is_admin.is_(True)),
        active_users=_count_users(db, User.is_active.is_(True)),
        total_classes=total_classes,
        active_classes=active_classes,
        total_programs=db.query(func.count(Program.id)).scalar() or 0,
    )
