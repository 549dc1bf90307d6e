from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from academy.core.deps import get_db
from academy.core.permissions import require_acting_student
from academy.models.academy_class import AcademyClass
from academy.models.class_member import ClassMember
from academy.schemas.enrollment import MyEnrollment
from academy.schemas.session import SessionToken

router = APIRouter(tags=["student"])


@router.get("/student/enrollments", response_model=list[MyEnrollment])
def my_enrollments(
    db: Session = Depends(get_db),
    me: SessionToken = Depends(require_acting_student),
):
    rows = (
        db.query(ClassMember, AcademyClass)
        .join(AcademyClass, AcademyClass.id == ClassMember.class_id)
        .filter(ClassMember.user_id == me.id)
        .order_by(AcademyClass.start_date.asc())
        .all()
    )
    return [
        MyEnrollment(
            class_id=c.id,
            class_name=c.name,
            start_date=c.start_date,
            end_date=c.end_date,
            timezone=c.timezone,
            is_active=c.is_active,
            joined_at=m.joined_at,
        )
        for m, c in rows
    ]
