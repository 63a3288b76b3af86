"""
ID allocation.

Two independent counters, both starting at 0. Allocation only happens inside
the transaction that stores the new entity, so a rolled back operation never
burns an ID.
"""

import logging
from sqlalchemy.orm import Session

from medledger.domain.sequences.models import IdSequence, APPOINTMENT_SEQUENCE, RECORD_SEQUENCE

logger = logging.getLogger(__name__)


class SequenceService:
    """Issues monotonically increasing, never reused IDs"""

    def __init__(self, db: Session):
        self.db = db

    def _get_or_create(self, name: str) -> IdSequence:
        sequence = self.db.get(IdSequence, name, with_for_update=True)
        if sequence is None:
            sequence = IdSequence(name=name, next_value=0)
            self.db.add(sequence)
            self.db.flush()
        return sequence

    def _allocate(self, name: str) -> int:
        sequence = self._get_or_create(name)
        value = sequence.next_value
        sequence.next_value = value + 1
        self.db.flush()
        logger.debug(f"Allocated {name} id {value}")
        return value

    def next_appointment_id(self) -> int:
        return self._allocate(APPOINTMENT_SEQUENCE)

    def next_record_id(self) -> int:
        return self._allocate(RECORD_SEQUENCE)

    def peek(self, name: str) -> int:
        """Next value a sequence would hand out, without advancing it"""
        sequence = self.db.get(IdSequence, name)
        return sequence.next_value if sequence else 0
