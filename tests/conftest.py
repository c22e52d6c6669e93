from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from aadhaar_auth.core.config import Settings
from aadhaar_auth.core.context import AppContext
from aadhaar_auth.core.exceptions import ConflictError, StoreError
from aadhaar_auth.db.indexes import UNIQUE_USER_FIELDS
from aadhaar_auth.main import create_app
from aadhaar_auth.services.credentials import CredentialService
from aadhaar_auth.services.tokens import TokenService

TEST_SECRET = "test-signing-secret-0123456789abcdef"


class InMemoryUserStore:
    """UserStore stand-in that enforces the same unique fields as the indexes."""

    def __init__(self):
        self.documents = {}

    async def create_user(self, document):
        for field in UNIQUE_USER_FIELDS:
            if any(existing[field] == document[field] for existing in self.documents.values()):
                raise ConflictError(f"Duplicate value for {field}", field=field)

        object_id = ObjectId()
        now = datetime.now(timezone.utc)
        self.documents[object_id] = {"_id": object_id, **document, "created_at": now, "updated_at": now}
        return str(object_id)

    async def find_by_email(self, email):
        for document in self.documents.values():
            if document["email"] == email:
                return dict(document)
        return None

    async def find_by_id(self, user_id):
        if not isinstance(user_id, str) or not ObjectId.is_valid(user_id):
            raise StoreError(f"Malformed user id: {user_id!r}")
        document = self.documents.get(ObjectId(user_id))
        if document is None:
            return None
        return {key: value for key, value in document.items() if key != "password"}

    def by_email(self, email):
        return next((d for d in self.documents.values() if d["email"] == email), None)


def signup_payload(**overrides):
    payload = {
        "name": "Asha Devi",
        "aadhaar_number": "123412341234",
        "mcp_card_number": "MCP-0042",
        "mobile_number": "9876543210",
        "email": "asha@example.com",
        "password": "s3cret-pass",
        "confirm_password": "s3cret-pass",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def settings():
    return Settings(_env_file=None, ENVIRONMENT="development", JWT_SECRET=TEST_SECRET, BCRYPT_ROUNDS=4)


@pytest.fixture
def store():
    return InMemoryUserStore()


@pytest.fixture
def database():
    db = MagicMock()
    db.check_health = AsyncMock(return_value=True)
    return db


@pytest.fixture
def context(settings, store, database):
    return AppContext(
        settings=settings,
        users=store,
        credentials=CredentialService(rounds=4),
        tokens=TokenService(TEST_SECRET),
        database=database,
    )


@pytest.fixture
def app(context):
    return create_app(context=context)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def registered_user(client, store):
    """Signs up the default user and returns (payload, stored document)."""
    payload = signup_payload()
    response = client.post("/signup", json=payload)
    assert response.status_code == 201
    return payload, store.by_email(payload["email"])
