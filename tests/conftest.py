"""
Shared pytest fixtures for all tests.

Provides an in-memory SQLite database, a seeded clinic directory,
a fixed clock and a FastAPI test client wired to the same session.
"""

import os
from datetime import date, datetime

# Ensure test environment before the app reads its configuration
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.pop("REDIS_URL", None)
os.environ.pop("REDIS_HOST", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import rate_limiter
from app.database import Base, get_db
from app.domain.scheduling.service import SchedulingService
from app.domain.scheduling.time_calculator import ClinicHours
from app.main import app
from app.models import Appointment, AppointmentRequest, Assistant, Dentist, Patient

# Wednesday 2024-06-05, 10:00
FIXED_NOW = datetime(2024, 6, 5, 10, 0)
MONDAY = date(2024, 6, 10)


# ============================================================================
# DATABASE FIXTURES
# ============================================================================


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    yield session
    session.close()


@pytest.fixture
def directory(db):
    """Two dentists, two patients and two assistants with stable ids"""
    db.add_all(
        [
            Dentist(id="dentist-1", full_name="Dr. Alice Moreau", specialization="Endodontics"),
            Dentist(id="dentist-2", full_name="Dr. Bruno Silva", specialization="General"),
            Patient(id="patient-1", full_name="Jane Doe", email="jane@example.com"),
            Patient(id="patient-2", full_name="John Roe", email="john@example.com"),
            Assistant(id="assistant-1", full_name="Carla Assist", created_at=datetime(2024, 1, 1)),
            Assistant(id="assistant-2", full_name="Dev Assist", created_at=datetime(2024, 1, 2)),
        ]
    )
    db.commit()
    return {
        "dentists": ["dentist-1", "dentist-2"],
        "patients": ["patient-1", "patient-2"],
        "assistants": ["assistant-1", "assistant-2"],
    }


# ============================================================================
# FACTORIES
# ============================================================================


@pytest.fixture
def make_appointment(db):
    def _make(**overrides) -> Appointment:
        data = {
            "patient_id": "patient-1",
            "dentist_id": "dentist-1",
            "scheduled_date": MONDAY,
            "scheduled_time": "10:00",
            "duration_minutes": 60,
            "appointment_type": "Root canal",
            "status": "scheduled",
        }
        data.update(overrides)
        appointment = Appointment(**data)
        db.add(appointment)
        db.commit()
        db.refresh(appointment)
        return appointment

    return _make


@pytest.fixture
def make_request(db):
    def _make(**overrides) -> AppointmentRequest:
        data = {
            "patient_id": "patient-1",
            "appointment_type": "Tooth pain",
            "reason_for_visit": "Tooth pain",
            "pain_level": 5,
            "urgency": "routine",
            "preferred_date": MONDAY,
            "preferred_time": "10:00",
            "status": "pending",
            "created_at": FIXED_NOW,
        }
        data.update(overrides)
        request = AppointmentRequest(**data)
        db.add(request)
        db.commit()
        db.refresh(request)
        return request

    return _make


# ============================================================================
# SERVICE FIXTURES
# ============================================================================


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def hours():
    return ClinicHours()


@pytest.fixture
def service(db, directory, clock, hours):
    return SchedulingService(db, hours=hours, clock=clock)


# ============================================================================
# API FIXTURES
# ============================================================================


@pytest.fixture
def client(db, directory, clock, hours):
    from app.domain.scheduling.router import get_scheduling_service

    rate_limiter.memory_cache.clear()
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_scheduling_service] = lambda: SchedulingService(
        db, hours=hours, clock=clock
    )
    yield TestClient(app)
    app.dependency_overrides.clear()
    rate_limiter.memory_cache.clear()
