from datetime import UTC, datetime, timedelta

import jwt
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.models.user import User

settings = get_settings()


def create_access_token(email: str, expires_delta: timedelta | None = None) -> str:
    """Mint a bearer token the way the identity provider does (dev CLI and tests)."""
    if expires_delta:
        expire = datetime.now(UTC) + expires_delta
    else:
        expire = datetime.now(UTC) + timedelta(minutes=settings.jwt_expire_minutes)
    to_encode = {"sub": email, "exp": expire}
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> str | None:
    """Return the verified email identity carried by a token, or None."""
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.PyJWTError:
        return None
    email = payload.get("sub")
    if not isinstance(email, str) or not email:
        return None
    return email


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email).first()


def create_user(db: Session, email: str, is_admin: bool = False) -> User:
    user = User(email=email, is_admin=is_admin, remaining_votes=0)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user
