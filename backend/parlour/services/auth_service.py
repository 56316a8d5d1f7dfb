# Overview: Service-layer operations for auth; encapsulates business logic and database work.

"""
Authentication Service

Passwords are hashed with bcrypt (BCRYPT_ROUNDS, default 12). A successful
login yields a signed token from token_service; there is no server-side
session record.
"""

import bcrypt
from flask import current_app

from ..extensions import db
from ..models import User
from .token_service import AuthError, issue_token


class InvalidCredentials(AuthError):
    def __init__(self, message: str = "invalid credentials"):
        super().__init__(message)


def hash_password(password: str) -> str:
    """Hash password using bcrypt; the salt is embedded in the result."""
    rounds = current_app.config.get("BCRYPT_ROUNDS", 12)
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')  # Store as string in database


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against bcrypt hash.

    Returns False for a mismatch or for a stored value that is not a bcrypt hash.
    """
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        return False


def authenticate(username: str, password: str) -> str:
    """
    Check credentials and issue a token.

    Raises InvalidCredentials for an unknown username or a wrong password;
    both cases produce the same error so usernames cannot be probed.
    """
    user = db.session.query(User).filter_by(username=username).first()
    if user is None or not verify_password(password, user.password_hash):
        raise InvalidCredentials()

    return issue_token(user_id=user.id, username=user.username, role=user.role)


def create_user(username: str, password: str, role: str = "admin") -> User:
    """
    Create a user with a bcrypt password hash.

    Raises ValueError if the username is already taken.
    """
    existing = db.session.query(User).filter_by(username=username).first()
    if existing:
        raise ValueError(f"User '{username}' already exists")

    user = User(username=username, password_hash=hash_password(password), role=role)
    db.session.add(user)
    db.session.commit()
    return user


def ensure_default_admin() -> User | None:
    """
    Seed the default admin account when no users exist.

    Returns the created user, or None if the table already had users.
    """
    if db.session.query(User).count() > 0:
        return None

    return create_user(
        username=current_app.config["DEFAULT_ADMIN_USERNAME"],
        password=current_app.config["DEFAULT_ADMIN_PASSWORD"],
        role="admin",
    )
