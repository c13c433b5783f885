"""Pytest configuration and fixtures."""
import itertools

import httpx
import pytest
from mongomock_motor import AsyncMongoMockClient

from database import get_db, init_indexes
from models import Donor
from server import create_app
from services import (
    ContactLedger, DonorDirectory, MatchingEngine, PaginationCursor, RequestQueries
)
from services.locks import KeyedLock

_sequence = itertools.count(1)


@pytest.fixture
async def db():
    client = AsyncMongoMockClient()
    database = client["blood_donation_test"]
    await init_indexes(database)
    return database


@pytest.fixture
def directory(db):
    return DonorDirectory(db)


@pytest.fixture
def engine(db, directory):
    return MatchingEngine(db, directory)


@pytest.fixture
def ledger(db, directory):
    return ContactLedger(db, directory, locks=KeyedLock())


@pytest.fixture
def cursor(db, directory):
    return PaginationCursor(db, directory)


@pytest.fixture
def queries(db, directory):
    return RequestQueries(db, directory)


@pytest.fixture
def make_donor(db):
    """Insert a donor document directly, bypassing registration checks."""
    async def _make(**overrides):
        n = next(_sequence)
        fields = {
            "full_name": f"Donor {n}",
            "email": f"donor{n}@example.com",
            "phone": f"9{n:09d}",
            "age": 30,
            "gender": "Female",
            "blood_group": "O+",
            "district": "Chennai",
        }
        fields.update(overrides)
        donor = Donor(**fields).model_dump(mode="json")
        await db.donors.insert_one(dict(donor))
        return donor
    return _make


@pytest.fixture
def registration():
    """A valid registration payload in wire (camelCase) form."""
    def _payload(**overrides):
        n = next(_sequence)
        payload = {
            "fullName": "Kavya Raman",
            "email": f"kavya{n}@example.com",
            "phone": f"8{n:09d}",
            "age": 28,
            "gender": "Female",
            "bloodGroup": "O+",
            "district": "Chennai",
        }
        payload.update(overrides)
        return payload
    return _payload


@pytest.fixture
def request_payload():
    def _payload(**overrides):
        payload = {
            "patientName": "  arun kumar ",
            "hospitalName": "Government General Hospital",
            "contactNumber": "9876543210",
            "bloodGroup": "O+",
            "unitsRequired": 2,
            "urgency": "high",
            "district": "Chennai",
            "sessionId": "session-1",
        }
        payload.update(overrides)
        return payload
    return _payload


@pytest.fixture
async def client(db):
    app = create_app(use_lifespan=False)
    app.dependency_overrides[get_db] = lambda: db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
        yield http
