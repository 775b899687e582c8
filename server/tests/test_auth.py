"""Tests for bearer token identity and the current-user endpoint."""

from datetime import timedelta

import jwt
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.services.auth import create_access_token, create_user, decode_token
from app.services.vote import cast_vote


class TestDecodeToken:
    def test_valid_token(self):
        assert decode_token(create_access_token("a@example.com")) == "a@example.com"

    def test_expired_token(self):
        token = create_access_token("a@example.com", expires_delta=timedelta(seconds=-1))
        assert decode_token(token) is None

    def test_garbage_token(self):
        assert decode_token("not-a-token") is None

    def test_wrong_secret(self):
        token = jwt.encode({"sub": "a@example.com"}, "other-secret", algorithm="HS256")
        assert decode_token(token) is None


class TestMe:
    def test_me(self, client: TestClient, auth_headers: dict, track, db: Session, voter):
        cast_vote(db, voter.email, track.id)

        response = client.get("/api/users/me", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["email"] == "voter@example.com"
        assert data["isAdmin"] is False
        assert data["votedTracks"] == ["T"]
        assert data["remainingVotes"] == 2
        assert data["nextVoteRefresh"] is not None

    def test_me_grants_first_quota(self, client: TestClient, db: Session):
        user = create_user(db, "fresh@example.com")
        assert user.remaining_votes == 0
        token = create_access_token(user.email)

        response = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200
        assert response.json()["remainingVotes"] == get_settings().vote_allowance
        assert response.json()["lastVoteRefresh"] is not None

    def test_me_unauthenticated(self, client: TestClient):
        response = client.get("/api/users/me")
        assert response.status_code == 401

    def test_me_unknown_user(self, client: TestClient):
        token = create_access_token("ghost@example.com")
        response = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401


class TestHealth:
    def test_health(self, client: TestClient):
        assert client.get("/health").json() == {"status": "ok"}
        assert client.get("/api/health").json()["status"] == "ok"

    def test_security_headers(self, client: TestClient):
        response = client.get("/api/health")
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["Cache-Control"] == "no-store, max-age=0"
