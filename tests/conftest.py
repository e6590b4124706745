import mongomock
import pytest
from fastapi.testclient import TestClient

from careerhub.core.auth import create_access_token
from careerhub.models import UserKind
from careerhub.services.mongo_service import ProfileService
from careerhub.services.presence_registry import PresenceRegistry
from careerhub.services.realtime_hub import RealtimeHub


class FakeSocket:
    """Stands in for a starlette WebSocket: records every frame sent."""

    def __init__(self, fail: bool = False):
        self.accepted = False
        self.fail = fail
        self.sent = []

    async def accept(self):
        self.accepted = True

    async def send_json(self, data):
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(data)

    def events(self, name=None):
        return [frame for frame in self.sent if name is None or frame["event"] == name]


@pytest.fixture
def db():
    return mongomock.MongoClient(tz_aware=True)["careerhub_test"]


@pytest.fixture
def registry():
    return PresenceRegistry()


@pytest.fixture
def hub(registry):
    return RealtimeHub(registry)


@pytest.fixture
def profiles(db):
    return ProfileService(db)


@pytest.fixture
def make_student(profiles):
    def _make(name="Asha Rao", email=None):
        return profiles.create(UserKind.student, {
            "fullname": name,
            "email": (email or f"{name.split()[0].lower()}@example.com"),
            "password_hash": "x",
            "status": "fresher",
        })
    return _make


@pytest.fixture
def make_recruiter(profiles):
    def _make(name="Acme Labs", email=None):
        return profiles.create(UserKind.recruiter, {
            "companyname": name,
            "email": (email or f"{name.split()[0].lower()}@corp.example.com"),
            "password_hash": "x",
            "cin_number": "U72900KA2019PTC123456",
            "company_address": "Bangalore",
        })
    return _make


def auth_headers(user_id: str, role: str = "student") -> dict:
    token = create_access_token({"sub": user_id, "role": role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client(monkeypatch, db):
    from careerhub import main as main_module

    monkeypatch.setattr(main_module, "get_mongo_db", lambda: db)
    with TestClient(main_module.app) as test_client:
        yield test_client
