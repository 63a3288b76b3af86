"""
End-to-end registry scenario and concurrent submission.
"""

import pytest
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime

from medledger import Registry, Role
from medledger.core.exceptions import AlreadyConfirmed

from conftest import DEPLOYER


@pytest.mark.integration
def test_end_to_end_scenario(database, clock):
    deployer, doctor, patient, lab = "D", "A", "P", "L"
    t = datetime(2024, 6, 1, 9, 30)

    registry = Registry(deployer, database=database, clock=clock)
    assert registry.role_of(deployer) == Role.ADMIN

    registry.register_doctor(deployer, doctor)
    assert registry.role_of(doctor) == Role.DOCTOR

    registry.register_patient(patient, "Alice", 30, "alice@example.com")
    assert registry.role_of(patient) == Role.PATIENT
    profile = registry.patient_profile(patient)
    assert (profile.name, profile.age) == ("Alice", 30)

    appointment_id = registry.schedule_appointment(patient, doctor, t)
    assert appointment_id == 0
    assert registry.appointment(0).confirmed is False
    assert registry.patient_appointments(patient) == [0]

    registry.confirm_appointment(doctor, 0)
    assert registry.appointment(0).confirmed is True
    with pytest.raises(AlreadyConfirmed):
        registry.confirm_appointment(doctor, 0)
    assert registry.appointment(0).confirmed is True

    record_id = registry.add_medical_record(doctor, patient, "flu", "", "")
    assert record_id == 0
    assert registry.patient_records(patient) == [0]
    assert registry.doctor_records(doctor) == [0]
    before = registry.medical_record(0)

    registry.register_lab(deployer, lab)
    registry.add_lab_results(lab, 0, "hash123")

    after = registry.medical_record(0)
    assert after.lab_results_reference == "hash123"
    assert after.diagnosis == before.diagnosis == "flu"
    assert after.prescription == before.prescription
    assert after.created_at == before.created_at
    assert after.doctor_identity == before.doctor_identity == doctor
    assert after.patient_identity == before.patient_identity == patient


@pytest.mark.integration
def test_concurrent_scheduling_allocates_unique_ids(registry: Registry):
    registry.register_doctor(DEPLOYER, "doc")
    patients = [f"patient-{i}" for i in range(20)]
    for i, patient in enumerate(patients):
        registry.register_patient(patient, f"Patient {i}", 20 + i, "")

    when = datetime(2024, 7, 1, 8, 0)
    with ThreadPoolExecutor(max_workers=8) as pool:
        ids = list(pool.map(
            lambda p: registry.schedule_appointment(p, "doc", when),
            patients
        ))

    assert sorted(ids) == list(range(len(patients)))
    assert registry.next_appointment_id() == len(patients)
    for patient, appointment_id in zip(patients, ids):
        assert registry.patient_appointments(patient) == [appointment_id]
        assert registry.appointment(appointment_id).patient_identity == patient


@pytest.mark.integration
def test_concurrent_confirmation_succeeds_once(registry: Registry):
    registry.register_doctor(DEPLOYER, "doc")
    registry.register_patient("pat", "Pat", 50, "")
    appointment_id = registry.schedule_appointment("pat", "doc", datetime(2024, 7, 2, 8, 0))

    def confirm(_):
        try:
            registry.confirm_appointment("doc", appointment_id)
            return True
        except AlreadyConfirmed:
            return False

    with ThreadPoolExecutor(max_workers=4) as pool:
        outcomes = list(pool.map(confirm, range(10)))

    assert outcomes.count(True) == 1
    assert registry.appointment(appointment_id).confirmed is True
