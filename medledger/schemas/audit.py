from typing import Optional, Dict, Any
from datetime import datetime
from pydantic import BaseModel, ConfigDict

from medledger.domain.audit.models import AuditEvent


class AuditLogRead(BaseModel):
    id: int
    event: AuditEvent
    actor: str
    subject: Optional[str] = None
    entity_id: Optional[int] = None
    details: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
