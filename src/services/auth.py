"""Credential store operations for registration, login and identity lookup."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.errors import ConflictError
from src.models.user import User
from src.services.security import PasswordHasher

logger = logging.getLogger(__name__)


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email."""
    return db.query(User).filter(User.email == email).first()


def get_user_by_id(db: Session, user_id: int) -> User | None:
    """Get a user by id."""
    return db.get(User, user_id)


def create_user(db: Session, hasher: PasswordHasher, name: str, email: str, password: str) -> User:
    """Create a new user, storing only the password hash.

    Raises ConflictError if the email is taken, including when a concurrent
    registration wins the race to the unique index.
    """
    if get_user_by_email(db, email):
        raise ConflictError("User already exists", field="email")

    user = User(name=name, email=email, password_hash=hasher.hash(password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError("User already exists", field="email") from e
    db.refresh(user)

    logger.info(f"Registered user {user.id}")
    return user


def authenticate_user(db: Session, hasher: PasswordHasher, email: str, password: str) -> User | None:
    """Authenticate a user by email and password."""
    user = get_user_by_email(db, email)
    if not user:
        hasher.dummy_verify(password)
        return None
    if not hasher.verify(password, user.password_hash):
        return None
    return user
