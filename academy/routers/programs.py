from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from academy.core.audit import record_audit
from academy.core.deps import get_db
from academy.core.errors import NotFound
from academy.core.permissions import require_admin
from academy.core.validation import ensure_date_range
from academy.models.program import Program
from academy.schemas.program import ProgramCreate, ProgramRead, ProgramUpdate
from academy.schemas.session import SessionToken

# public catalogue
router = APIRouter()

# /admin/programs
admin_router = APIRouter()


def _ensure_program_exists(db: Session, program_id: int) -> Program:
    program = db.query(Program).filter(Program.id == program_id).first()
    if not program:
        raise NotFound("Program not found")
    return program


@router.get("", response_model=list[ProgramRead])
def list_active_programs(db: Session = Depends(get_db)):
    return (
        db.query(Program)
        .filter(Program.is_active.is_(True))
        .order_by(Program.start_date.asc())
        .all()
    )


@admin_router.get("", response_model=list[ProgramRead])
def list_programs(
    db: Session = Depends(get_db),
    admin: SessionToken = Depends(require_admin),
):
    return db.query(Program).order_by(Program.start_date.desc()).all()


@admin_router.post("", response_model=ProgramRead, status_code=status.HTTP_201_CREATED)
def create_program(
    payload: ProgramCreate,
    db: Session = Depends(get_db),
    admin: SessionToken = Depends(require_admin),
):
    ensure_date_range(payload.start_date, payload.end_date)

    program = Program(**payload.model_dump())
    db.add(program)
    db.commit()
    db.refresh(program)

    record_audit(db, admin.id, "CREATE_PROGRAM", "PROGRAM", program.id, {"title": program.title})
    return program


@admin_router.get("/{program_id}", response_model=ProgramRead)
def get_program(
    program_id: int,
    db: Session = Depends(get_db),
    admin: SessionToken = Depends(require_admin),
):
    return _ensure_program_exists(db, program_id)


@admin_router.put("/{program_id}", response_model=ProgramRead)
def update_program(
    program_id: int,
    payload: ProgramUpdate,
    db: Session = Depends(get_db),
    admin: SessionToken = Depends(require_admin),
):
    program = _ensure_program_exists(db, program_id)
    ensure_date_range(payload.start_date, payload.end_date)

    for key, value in payload.model_dump().items():
        setattr(program, key, value)
    db.commit()
    db.refresh(program)

    record_audit(db, admin.id, "UPDATE_PROGRAM", "PROGRAM", program.id, {"title": program.title})
    return program


@admin_router.delete("/{program_id}")
def delete_program(
    program_id: int,
    db: Session = Depends(get_db),
    admin: SessionToken = Depends(require_admin),
):
    program = _ensure_program_exists(db, program_id)
    title = program.title

    # classes keep existing without a program
    for academy_class in program.classes:
        academy_class.program_id = None
    db.delete(program)
    db.commit()

    record_audit(db, admin.id, "DELETE_PROGRAM", "PROGRAM", program_id, {"title": title})
    return {"message": "Program deleted successfully"}
