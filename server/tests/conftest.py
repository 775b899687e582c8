"""Pytest configuration and fixtures for the voting API tests."""

from collections.abc import Generator
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_db
from app.core.time import utcnow
from app.main import app
from app.models.base import Base
from app.models.track import Track
from app.models.user import User
from app.services.auth import create_access_token

# Use SQLite in-memory for tests (fast, isolated)
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@event.listens_for(engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def other_db(db: Session) -> Generator[Session, None, None]:
    """A second session on the same database, standing in for a concurrent request."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass  # Don't close the session here, let the db fixture handle it

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def make_user(
    db: Session, email: str, remaining_votes: int = 3, is_admin: bool = False
) -> User:
    """Create a user whose quota was refreshed just now, so no refresh is due."""
    user = User(
        email=email,
        is_admin=is_admin,
        remaining_votes=remaining_votes,
        last_vote_refresh=utcnow(),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_track(
    db: Session,
    track_id: str,
    votes: int = 0,
    genre: str | None = "r&b",
    popularity: int = 50,
    released_days_ago: int | None = 5,
) -> Track:
    track = Track(
        id=track_id,
        title=f"Song {track_id}",
        artist=f"Artist {track_id}",
        genre=genre,
        popularity=popularity,
        votes=votes,
        released_at=(
            utcnow() - timedelta(days=released_days_ago)
            if released_days_ago is not None
            else None
        ),
    )
    db.add(track)
    db.commit()
    db.refresh(track)
    return track


@pytest.fixture
def voter(db: Session) -> User:
    """A regular user with three votes left."""
    return make_user(db, "voter@example.com", remaining_votes=3)


@pytest.fixture
def admin_user(db: Session) -> User:
    """An admin with an empty quota."""
    return make_user(db, "admin@example.com", remaining_votes=0, is_admin=True)


@pytest.fixture
def track(db: Session) -> Track:
    """A track that already has ten votes."""
    return make_track(db, "T", votes=10)


@pytest.fixture
def auth_headers(voter: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(voter.email)}"}


@pytest.fixture
def admin_headers(admin_user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(admin_user.email)}"}


@pytest.fixture
def user_factory(db: Session):
    return lambda email, **kwargs: make_user(db, email, **kwargs)


@pytest.fixture
def track_factory(db: Session):
    return lambda track_id, **kwargs: make_track(db, track_id, **kwargs)
