import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from academy.models.audit_log import AuditLog

logger = logging.getLogger(__name__)


def record_audit(
    db: Session,
    actor_id: int,
    action: str,
    entity_type: str,
    entity_id,
    metadata: dict | None = None,
) -> None:
    """
    Write one audit row after the primary mutation has committed.

    Fire-and-forget: a failed write is logged and rolled back, never raised,
    so it cannot undo the change it describes.
    """
    entry = AuditLog(
        user_id=actor_id,
        action=action,
        entity_type=entity_type,
        entity_id=str(entity_id),
        details=metadata,
    )
    try:
        db.add(entry)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(
            "Audit log write failed: actor=%s action=%s %s=%s",
            actor_id,
            action,
            entity_type,
            entity_id,
        )
