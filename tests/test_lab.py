import pytest

from medledger.core.exceptions import AccessDenied, RecordNotFound, ValidationError
from medledger.domain.audit.models import AuditEvent
from medledger.registry import Registry

from conftest import DEPLOYER, DOCTOR, LAB, PATIENT


@pytest.fixture
def record_id(populated_registry: Registry) -> int:
    """A record written by DOCTOR for PATIENT."""
    return populated_registry.add_medical_record(DOCTOR, PATIENT, "anemia", "iron supplements", "")


@pytest.mark.records
@pytest.mark.integration
def test_lab_attaches_results(populated_registry: Registry, record_id: int):
    """Test a lab overwriting only the results reference"""
    before = populated_registry.medical_record(record_id)

    populated_registry.add_lab_results(LAB, record_id, "hash123")

    after = populated_registry.medical_record(record_id)
    assert after.lab_results_reference == "hash123"
    assert after.model_dump(exclude={"lab_results_reference"}) == before.model_dump(exclude={"lab_results_reference"})
    assert populated_registry.patient_records(PATIENT) == [record_id]
    assert populated_registry.doctor_records(DOCTOR) == [record_id]


@pytest.mark.records
@pytest.mark.integration
def test_lab_results_can_be_overwritten(populated_registry: Registry, record_id: int):
    """Test later results replacing earlier ones"""
    populated_registry.add_lab_results(LAB, record_id, "hash123")
    populated_registry.add_lab_results(LAB, record_id, "hash456")

    assert populated_registry.medical_record(record_id).lab_results_reference == "hash456"


@pytest.mark.records
@pytest.mark.integration
def test_any_lab_may_update_any_record(populated_registry: Registry, record_id: int):
    """Test that labs are not bound to a requesting doctor"""
    populated_registry.register_lab(DEPLOYER, "0xSECONDLAB")
    populated_registry.add_lab_results("0xSECONDLAB", record_id, "hash789")

    assert populated_registry.medical_record(record_id).lab_results_reference == "hash789"


@pytest.mark.records
@pytest.mark.integration
def test_unknown_record(populated_registry: Registry, snapshot):
    """Test updating a record ID that was never allocated"""
    before = snapshot()
    with pytest.raises(RecordNotFound):
        populated_registry.add_lab_results(LAB, 0, "hash123")
    assert snapshot() == before


@pytest.mark.records
@pytest.mark.integration
@pytest.mark.parametrize("caller", [DOCTOR, PATIENT, DEPLOYER, "0xNOBODY"])
def test_only_labs_attach_results(populated_registry: Registry, record_id: int, caller: str):
    """Test that non-lab callers are denied"""
    with pytest.raises(AccessDenied):
        populated_registry.add_lab_results(caller, record_id, "hash123")
    assert populated_registry.medical_record(record_id).lab_results_reference == ""


@pytest.mark.records
@pytest.mark.integration
def test_role_checked_before_existence(populated_registry: Registry):
    """Test that a non-lab caller learns nothing about unknown IDs"""
    with pytest.raises(AccessDenied):
        populated_registry.add_lab_results(DOCTOR, 1234, "hash123")


@pytest.mark.records
@pytest.mark.integration
def test_long_reference_stored_verbatim(populated_registry: Registry, record_id: int):
    """Test that references are free text of any length"""
    reference = "ipfs://" + "h" * 600
    populated_registry.add_lab_results(LAB, record_id, reference)
    assert populated_registry.medical_record(record_id).lab_results_reference == reference


@pytest.mark.records
@pytest.mark.integration
def test_non_string_reference_rejected(populated_registry: Registry, record_id: int):
    """Test that a missing reference leaves the record untouched"""
    with pytest.raises(ValidationError):
        populated_registry.add_lab_results(LAB, record_id, None)
    assert populated_registry.medical_record(record_id).lab_results_reference == ""


@pytest.mark.audit
@pytest.mark.integration
def test_lab_results_audit_event(populated_registry: Registry, record_id: int):
    """Test the audit entry of a lab update"""
    populated_registry.add_lab_results(LAB, record_id, "hash123")

    events = populated_registry.audit_trail(event=AuditEvent.LAB_RESULTS_UPDATED)
    assert len(events) == 1
    assert events[0].actor == LAB
    assert events[0].subject == PATIENT
    assert events[0].entity_id == record_id
    assert events[0].details == {"previous_reference": "", "reference": "hash123"}
