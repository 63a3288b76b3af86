import pytest
from datetime import datetime, timedelta
from typing import Dict, List

from sqlalchemy import select

from medledger.core.config import Settings
from medledger.infrastructure.database import Base, Database
from medledger.registry import Registry


DEPLOYER = "0xD3PL0YER"
DOCTOR = "0xD0C70R"
OTHER_DOCTOR = "0xD0C70R2"
LAB = "0xLAB"
PATIENT = "0xPA71EN7"
OTHER_PATIENT = "0xPA71EN72"
STRANGER = "0xS7RANGER"


class StepClock:
    """Deterministic clock, one minute per call."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 9, 0)):
        self.current = start

    def __call__(self) -> datetime:
        value = self.current
        self.current += timedelta(minutes=1)
        return value


@pytest.fixture(scope="function")
def test_settings() -> Settings:
    """Settings pointing at a private in-memory database."""
    return Settings(DATABASE_URL="sqlite:///:memory:", DEBUG=False)


@pytest.fixture(scope="function")
def database(test_settings: Settings):
    """Create a fresh database for each test."""
    db = Database(test_settings)
    db.init_db()
    yield db
    db.close()


@pytest.fixture(scope="function")
def clock() -> StepClock:
    return StepClock()


@pytest.fixture(scope="function")
def registry(database: Database, clock: StepClock) -> Registry:
    """Registry deployed by DEPLOYER."""
    return Registry(DEPLOYER, database=database, clock=clock)


@pytest.fixture(scope="function")
def populated_registry(registry: Registry) -> Registry:
    """Registry with two doctors, a lab and two registered patients."""
    registry.register_doctor(DEPLOYER, DOCTOR)
    registry.register_doctor(DEPLOYER, OTHER_DOCTOR)
    registry.register_lab(DEPLOYER, LAB)
    registry.register_patient(PATIENT, "Alice", 30, "alice@example.com")
    registry.register_patient(OTHER_PATIENT, "Bob", 45, "+1234567890")
    return registry


@pytest.fixture(scope="function")
def appointment_time() -> datetime:
    return datetime(2024, 3, 15, 14, 30)


@pytest.fixture(scope="function")
def snapshot(database: Database):
    """Dump every table, to compare state before and after a failed call."""
    def take() -> Dict[str, List[tuple]]:
        state = {}
        with database.engine.connect() as conn:
            for table in Base.metadata.sorted_tables:
                rows = conn.execute(select(table)).all()
                state[table.name] = sorted(tuple(row) for row in rows)
        return state
    return take


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
    config.addinivalue_line(
        "markers", "identity: mark test as identity and role related"
    )
    config.addinivalue_line(
        "markers", "patients: mark test as patient directory related"
    )
    config.addinivalue_line(
        "markers", "appointments: mark test as appointment ledger related"
    )
    config.addinivalue_line(
        "markers", "records: mark test as medical record ledger related"
    )
    config.addinivalue_line(
        "markers", "audit: mark test as audit logging related"
    )
