import uuid
from sqlalchemy.orm import Session
from app.models.audit_log import AuditLog
from app.models.user import User


def log_audit(db: Session, actor: User, action: str, entity, details: dict | None = None) -> AuditLog:
    """Stage an audit row for ``entity`` (any mapped model with an ``id``).

    Nothing is committed here; the row lands with the caller's next commit,
    so it is written only if the change it describes is.
    """
    row = AuditLog(
        id=str(uuid.uuid4()),
        actor_user_id=actor.id,
        action=action,
        entity_type=entity.__tablename__,
        entity_id=entity.id,
        details=details or {},
    )
    db.add(row)
    return row


def recent_entries(db: Session, entity_type: str | None = None, entity_id: str | None = None,
                   limit: int = 50, offset: int = 0) -> tuple[int, list[AuditLog]]:
    q = db.query(AuditLog)
    if entity_type:
        q = q.filter(AuditLog.entity_type == entity_type)
    if entity_id:
        q = q.filter(AuditLog.entity_id == entity_id)
    total = q.count()
    rows = q.order_by(AuditLog.created_at.desc()).limit(min(limit, 200)).offset(max(offset, 0)).all()
    return total, rows


def entry_out(row: AuditLog) -> dict:
    return {
        "id": row.id,
        "actor": row.actor_user_id,
        "action": row.action,
        "entityType": row.entity_type,
        "entityId": row.entity_id,
        "details": row.details or {},
        "createdAt": row.created_at.isoformat() if row.created_at else None,
    }
