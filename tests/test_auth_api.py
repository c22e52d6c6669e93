from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import jwt
import pytest
from bson import ObjectId

from aadhaar_auth.core.exceptions import StoreError
from aadhaar_auth.services.credentials import verify_password
from aadhaar_auth.services.tokens import issue_token
from conftest import TEST_SECRET, signup_payload


def login(client, email="asha@example.com", password="s3cret-pass"):
    return client.post("/login", json={"email": email, "password": password})


class TestSignup:
    def test_creates_user_with_hashed_password(self, client, store):
        response = client.post("/signup", json=signup_payload())

        assert response.status_code == 201
        assert response.json() == {"message": "User signed up successfully"}

        stored = store.by_email("asha@example.com")
        assert stored is not None
        assert stored["password"] != "s3cret-pass"
        assert verify_password("s3cret-pass", stored["password"])
        assert "confirm_password" not in stored
        assert stored["created_at"] == stored["updated_at"]

    def test_does_not_issue_token(self, client):
        response = client.post("/signup", json=signup_payload())
        assert "token" not in response.json()

    def test_password_mismatch_is_rejected(self, client, store):
        response = client.post("/signup", json=signup_payload(confirm_password="other"))

        assert response.status_code == 400
        assert response.json() == {"message": "Passwords do not match"}
        assert store.documents == {}

    def test_missing_field_is_rejected_before_store(self, client, store):
        payload = signup_payload()
        del payload["aadhaar_number"]

        response = client.post("/signup", json=payload)

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid request body"
        assert store.documents == {}

    def test_empty_name_is_rejected(self, client, store):
        response = client.post("/signup", json=signup_payload(name=""))
        assert response.status_code == 400
        assert store.documents == {}

    @pytest.mark.parametrize("field", ["email", "mobile_number", "aadhaar_number"])
    def test_duplicate_unique_field_is_generic_server_error(self, client, store, registered_user, field):
        others = {
            "email": "other@example.com",
            "mobile_number": "9000000000",
            "aadhaar_number": "999999999999",
        }
        payload, _ = registered_user
        others[field] = payload[field]

        response = client.post("/signup", json=signup_payload(**others))

        assert response.status_code == 500
        assert response.json() == {"message": "Error signing up. Please try again."}
        assert len(store.documents) == 1

    def test_duplicate_mcp_card_number_is_allowed(self, client, store, registered_user):
        response = client.post("/signup", json=signup_payload(
            email="other@example.com", mobile_number="9000000000", aadhaar_number="999999999999",
        ))
        assert response.status_code == 201
        assert len(store.documents) == 2

    def test_store_failure(self, client, store):
        store.create_user = AsyncMock(side_effect=StoreError("connection reset"))

        response = client.post("/signup", json=signup_payload())

        assert response.status_code == 500
        assert response.json() == {"message": "Error signing up. Please try again."}


class TestLogin:
    def test_success_returns_token(self, client, registered_user):
        _, stored = registered_user

        response = login(client)

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Login successful"

        claims = jwt.decode(body["token"], TEST_SECRET, algorithms=["HS256"])
        assert claims["userId"] == str(stored["_id"])
        assert claims["email"] == "asha@example.com"
        assert claims["exp"] - claims["iat"] == 3600

    def test_wrong_password_and_unknown_email_are_indistinguishable(self, client, registered_user):
        wrong_password = login(client, password="wrong")
        unknown_email = login(client, email="nobody@example.com")

        assert wrong_password.status_code == unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json() == {"message": "Invalid credentials"}

    def test_store_failure(self, client, store):
        store.find_by_email = AsyncMock(side_effect=StoreError("timeout"))

        response = login(client)

        assert response.status_code == 500
        assert response.json() == {"message": "Error logging in. Please try again."}

    def test_corrupt_stored_hash_is_invalid_credentials(self, client, registered_user):
        _, stored = registered_user
        stored["password"] = "not-a-bcrypt-hash"

        response = login(client)

        assert response.status_code == 401
        assert response.json() == {"message": "Invalid credentials"}


class TestProfile:
    def test_round_trip_excludes_password(self, client, registered_user):
        payload, stored = registered_user
        token = login(client).json()["token"]

        response = client.get("/profile", headers={"authorization": token})

        assert response.status_code == 200
        body = response.json()
        assert "password" not in body
        assert body["id"] == str(stored["_id"])
        for field in ("name", "aadhaar_number", "mcp_card_number", "mobile_number", "email"):
            assert body[field] == payload[field]
        assert body["created_at"] is not None

    def test_bearer_scheme_is_accepted(self, client, registered_user):
        token = login(client).json()["token"]

        response = client.get("/profile", headers={"authorization": f"Bearer {token}"})

        assert response.status_code == 200
        assert response.json()["email"] == "asha@example.com"

    def test_missing_header_short_circuits(self, client, context):
        context.tokens.verify = MagicMock()

        response = client.get("/profile")

        assert response.status_code == 401
        assert response.json() == {"message": "Access denied"}
        context.tokens.verify.assert_not_called()

    @pytest.mark.parametrize("token", ["garbage", "a.b.c", "Bearer garbage"])
    def test_malformed_token(self, client, token):
        response = client.get("/profile", headers={"authorization": token})
        assert response.status_code == 401
        assert response.json() == {"message": "Invalid token"}

    def test_token_signed_with_other_secret(self, client, registered_user):
        _, stored = registered_user
        token = issue_token(
            {"userId": str(stored["_id"]), "email": stored["email"]},
            "some-other-secret-0123456789abcdef",
        )

        response = client.get("/profile", headers={"authorization": token})

        assert response.status_code == 401
        assert response.json() == {"message": "Invalid token"}

    def test_expired_token(self, client, registered_user):
        _, stored = registered_user
        token = issue_token(
            {"userId": str(stored["_id"]), "email": stored["email"]},
            TEST_SECRET,
            ttl=timedelta(hours=1),
            now=datetime.now(timezone.utc) - timedelta(hours=1, seconds=5),
        )

        response = client.get("/profile", headers={"authorization": token})

        assert response.status_code == 401
        assert response.json() == {"message": "Invalid token"}

    def test_vanished_user_returns_null(self, client):
        token = issue_token({"userId": str(ObjectId()), "email": "gone@example.com"}, TEST_SECRET)

        response = client.get("/profile", headers={"authorization": token})

        assert response.status_code == 200
        assert response.json() is None

    def test_malformed_user_id_claim_is_invalid_token(self, client):
        token = issue_token({"userId": "not-an-objectid", "email": "asha@example.com"}, TEST_SECRET)

        response = client.get("/profile", headers={"authorization": token})

        assert response.status_code == 401
        assert response.json() == {"message": "Invalid token"}

    def test_store_failure_is_invalid_token(self, client, store, registered_user):
        token = login(client).json()["token"]
        store.find_by_id = AsyncMock(side_effect=StoreError("timeout"))

        response = client.get("/profile", headers={"authorization": token})

        assert response.status_code == 401
        assert response.json() == {"message": "Invalid token"}

    def test_incomplete_stored_user_is_invalid_token(self, client, registered_user):
        _, stored = registered_user
        token = login(client).json()["token"]
        del stored["name"]

        response = client.get("/profile", headers={"authorization": token})

        assert response.status_code == 401
        assert response.json() == {"message": "Invalid token"}


class TestHealth:
    def test_live(self, client):
        assert client.get("/live").json() == {"status": "alive"}

    def test_root(self, client):
        body = client.get("/").json()
        assert body["status"] == "running"
        assert body["environment"] == "development"

    def test_health_and_ready_when_database_up(self, client):
        health = client.get("/health")
        assert health.status_code == 200
        assert health.json()["checks"]["database"] == "healthy"
        assert client.get("/ready").json() == {"status": "ready"}

    def test_health_and_ready_when_database_down(self, client, database):
        database.check_health.return_value = False

        health = client.get("/health")
        assert health.status_code == 503
        assert health.json()["status"] == "degraded"

        ready = client.get("/ready")
        assert ready.status_code == 503
        assert ready.json()["reason"] == "database_unavailable"

    def test_process_time_header(self, client):
        assert "X-Process-Time" in client.get("/live").headers
