from typing import Optional, Dict, Any, List
import logging
from sqlalchemy.orm import Session

from medledger.domain.audit.models import AuditLog, AuditEvent


logger = logging.getLogger(__name__)


class AuditLogger:
    """Service for creating audit log entries.

    Entries are added to the caller's session, so they commit together with
    the mutation they describe and vanish with it on rollback.
    """

    @staticmethod
    def emit(
        db: Session,
        event: AuditEvent,
        actor: str,
        subject: Optional[str] = None,
        entity_id: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> AuditLog:
        """Record an audit notification"""
        audit_log = AuditLog(
            event=event,
            actor=actor,
            subject=subject,
            entity_id=entity_id,
            details=details
        )
        db.add(audit_log)
        db.flush()

        logger.info(
            f"Audit event: {event.value} by {actor}"
            + (f" for {subject}" if subject else "")
            + (f" (id={entity_id})" if entity_id is not None else "")
        )
        return audit_log

    @staticmethod
    def trail(
        db: Session,
        event: Optional[AuditEvent] = None,
        actor: Optional[str] = None
    ) -> List[AuditLog]:
        """Audit entries in emission order"""
        query = db.query(AuditLog)
        if event:
            query = query.filter(AuditLog.event == event)
        if actor:
            query = query.filter(AuditLog.actor == actor)
        return query.order_by(AuditLog.id).all()
