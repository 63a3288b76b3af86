import pytest

from medledger.core.exceptions import DatabaseError
from medledger.domain.sequences.models import APPOINTMENT_SEQUENCE, RECORD_SEQUENCE
from medledger.domain.sequences.service import SequenceService
from medledger.infrastructure.database import Database


@pytest.mark.unit
class TestSequenceService:
    """ID allocation: two independent counters starting at 0."""

    def test_counters_start_at_zero(self, database: Database) -> None:
        with database.session() as db:
            sequences = SequenceService(db)
            assert sequences.peek(APPOINTMENT_SEQUENCE) == 0
            assert sequences.peek(RECORD_SEQUENCE) == 0

    def test_counters_are_independent(self, database: Database) -> None:
        with database.unit_of_work() as db:
            sequences = SequenceService(db)
            assert [sequences.next_appointment_id() for _ in range(3)] == [0, 1, 2]
            assert sequences.next_record_id() == 0
            assert sequences.next_appointment_id() == 3
            assert sequences.next_record_id() == 1

    def test_allocation_persists_across_units_of_work(self, database: Database) -> None:
        with database.unit_of_work() as db:
            SequenceService(db).next_record_id()
        with database.unit_of_work() as db:
            assert SequenceService(db).next_record_id() == 1
        with database.session() as db:
            assert SequenceService(db).peek(RECORD_SEQUENCE) == 2

    def test_rolled_back_allocation_is_not_consumed(self, database: Database) -> None:
        with pytest.raises(RuntimeError):
            with database.unit_of_work() as db:
                assert SequenceService(db).next_appointment_id() == 0
                raise RuntimeError("creation failed later in the operation")

        with database.unit_of_work() as db:
            assert SequenceService(db).next_appointment_id() == 0


@pytest.mark.unit
def test_database_failure_is_wrapped(database: Database) -> None:
    """Constraint violations surface as DatabaseError and roll back"""
    from medledger.domain.identity.models import IdentityRole, Role

    with database.unit_of_work() as db:
        db.add(IdentityRole(identity="0xA", role=Role.DOCTOR))

    with pytest.raises(DatabaseError) as e:
        with database.unit_of_work("duplicate identity") as db:
            db.add(IdentityRole(identity="0xB", role=Role.LAB))
            db.flush()
            db.add(IdentityRole(identity="0xA", role=Role.LAB))
            db.flush()
    assert e.value.details["operation"] == "duplicate identity"

    with database.session() as db:
        assert db.get(IdentityRole, "0xB") is None
