from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from academy.core.audit import record_audit
from academy.core.deps import get_db
from academy.core.identity import IdentityStore
from academy.core.permissions import ensure_not_self, require_admin
from academy.core.security import hash_password
from academy.models.user import User
from academy.schemas.session import SessionToken
from academy.schemas.user import (
    UserCreate,
    UserRead,
    UserStatusRead,
    UserStatusUpdate,
    UserUpdate,
)

router = APIRouter()


@router.get("", response_model=list[UserRead])
def list_users(
    db: Session = Depends(get_db),
    admin: SessionToken = Depends(require_admin),
):
    return db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserCreate,
    db: Session = Depends(get_db),
    admin: SessionToken = Depends(require_admin),
):
    fields = payload.model_dump(exclude={"password"})
    user = IdentityStore(db).create(**fields, hashed_password=hash_password(payload.password))

    record_audit(
        db,
        admin.id,
        "CREATE_USER",
        "USER",
        user.id,
        {
            "created_user": user.email,
            "roles": {
                "is_student": user.is_student,
                "is_teacher": user.is_teacher,
                "is_admin": user.is_admin,
            },
        },
    )
    return user


@router.get("/{user_id}", response_model=UserRead)
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    admin: SessionToken = Depends(require_admin),
):
    return IdentityStore(db).get(user_id)


@router.put("/{user_id}", response_model=UserRead)
def update_user(
    user_id: int,
    payload: UserUpdate,
    db: Session = Depends(get_db),
    admin: SessionToken = Depends(require_admin),
):
    if payload.is_active is False:
        ensure_not_self(admin, user_id, "Cannot deactivate your own account")

    fields = payload.model_dump()
    if fields["is_active"] is None:
        del fields["is_active"]

    # already-issued sessions keep their old flags until they expire
    user = IdentityStore(db).update(user_id, **fields)
    record_audit(
        db,
        admin.id,
        "UPDATE_USER",
        "USER",
        user.id,
        {"user_email": user.email},
    )
    return user


@router.delete(
    "/{user_id}",
    responses={400: {"description": "Cannot delete your own account"}},
)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    admin: SessionToken = Depends(require_admin),
):
    ensure_not_self(admin, user_id, "Cannot delete your own account")

    store = IdentityStore(db)
    email = store.get(user_id).email
    store.delete(user_id)

    record_audit(db, admin.id, "DELETE_USER", "USER", user_id, {"user_email": email})
    return {"success": True}


@router.put("/{user_id}/status", response_model=UserStatusRead)
def update_user_status(
    user_id: int,
    payload: UserStatusUpdate,
    db: Session = Depends(get_db),
    admin: SessionToken = Depends(require_admin),
):
    store = IdentityStore(db)
    store.get(user_id)

    if not payload.is_active:
        ensure_not_self(admin, user_id, "Cannot deactivate your own account")

    user = store.update(user_id, is_active=payload.is_active)
    record_audit(
        db,
        admin.id,
        "ACTIVATE_USER" if user.is_active else "DEACTIVATE_USER",
        "USER",
        user.id,
        {
            "user_email": user.email,
            "new_status": "active" if user.is_active else "inactive",
        },
    )
    return user
