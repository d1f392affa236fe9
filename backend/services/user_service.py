"""User registration, password verification and access tokens."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from sqlalchemy.orm import Session

from config import settings
from models import User
from services.exceptions import AuthenticationError, UserAlreadyExistsError

logger = logging.getLogger(__name__)

# Argon2id with the library's default cost parameters
password_hasher = PasswordHasher()


def hash_password(password: str) -> str:
    """Hash a password into an encoded Argon2id string (``$argon2id$...``)."""
    return password_hasher.hash(password)


def verify_password(password: str, encoded: str) -> bool:
    """Check a password against a value produced by :func:`hash_password`."""
    try:
        return password_hasher.verify(encoded, password)
    except (VerificationError, InvalidHashError):
        return False


class UserService:
    """Account registration and authentication."""

    @staticmethod
    def get_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email.strip().lower()).first()

    @staticmethod
    def get_by_id(db: Session, user_id: str) -> Optional[User]:
        return db.get(User, user_id)

    @staticmethod
    def register(db: Session, email: str, password: str) -> User:
        """Create a user account.

        Raises:
            UserAlreadyExistsError: If the email is already registered.
        """
        email = email.strip().lower()
        if UserService.get_by_email(db, email) is not None:
            raise UserAlreadyExistsError(f"User with email {email} already exists")

        user = User(email=email, password_hash=hash_password(password))
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info("Registered user: %s", user.id)
        return user

    @staticmethod
    def authenticate(db: Session, email: str, password: str) -> User:
        """Return the user matching the credentials.

        Raises:
            AuthenticationError: If the email is unknown or the password is wrong.
        """
        user = UserService.get_by_email(db, email)
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Failed login attempt for %s", email)
            raise AuthenticationError("Invalid email or password")
        return user

    @staticmethod
    def create_access_token(user: User, now: Optional[datetime] = None) -> str:
        """Issue a signed JWT for the user."""
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "sub": user.id,
            "email": user.email,
            "iat": issued_at,
            "exp": issued_at + timedelta(minutes=settings.JWT_EXPIRATION_MINUTES),
        }
        return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)

    @staticmethod
    def decode_access_token(token: str) -> str:
        """Validate a JWT and return the user id it was issued for.

        Raises:
            AuthenticationError: If the token is malformed, badly signed or expired.
        """
        try:
            payload = jwt.decode(
                token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM]
            )
        except jwt.ExpiredSignatureError as exc:
            raise AuthenticationError("Access token has expired") from exc
        except jwt.InvalidTokenError as exc:
            raise AuthenticationError("Invalid access token") from exc

        user_id = payload.get("sub")
        if not user_id:
            raise AuthenticationError("Invalid access token")
        return user_id
