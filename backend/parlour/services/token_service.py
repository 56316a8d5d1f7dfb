# Overview: Stateless signed session tokens (JWT) carrying the user's identity.

"""
Session Token Service

Tokens are HS256-signed JWTs with an absolute expiry (TOKEN_TTL_HOURS,
default 8). Nothing is stored server side: verification is signature plus
expiry check, so logging out is a client-side concern.

Claims: {"id", "username", "role", "iat", "exp"}
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from flask import current_app
from jose import jwt, JWTError


class AuthError(Exception):
    """401-level authentication failure."""


class MissingToken(AuthError):
    def __init__(self, message: str = "missing token"):
        super().__init__(message)


class MalformedToken(AuthError):
    def __init__(self, message: str = "malformed token"):
        super().__init__(message)


class InvalidToken(AuthError):
    def __init__(self, message: str = "invalid token"):
        super().__init__(message)


@dataclass(frozen=True)
class Claims:
    id: int
    username: str
    role: str
    expires_at: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "role": self.role,
            "expires_at": self.expires_at.isoformat().replace("+00:00", "Z"),
        }


def _signing_key() -> str:
    return current_app.config["JWT_SECRET"]


def _algorithm() -> str:
    return current_app.config.get("JWT_ALGORITHM", "HS256")


def issue_token(*, user_id: int, username: str, role: str, now: datetime | None = None) -> str:
    """
    Sign a token for the given identity.

    `now` is the issue instant (UTC); the token expires TOKEN_TTL_HOURS later.
    """
    issued_at = now or datetime.now(timezone.utc)
    if issued_at.tzinfo is None:
        issued_at = issued_at.replace(tzinfo=timezone.utc)
    ttl = timedelta(hours=current_app.config.get("TOKEN_TTL_HOURS", 8))

    claims = {
        "id": user_id,
        "username": username,
        "role": role,
        "iat": issued_at,
        "exp": issued_at + ttl,
    }
    return jwt.encode(claims, _signing_key(), algorithm=_algorithm())


def decode_token(token: str) -> Claims:
    """Check signature and expiry. Raises InvalidToken for either failure."""
    try:
        payload = jwt.decode(token, _signing_key(), algorithms=[_algorithm()])
    except JWTError:
        raise InvalidToken()

    try:
        return Claims(
            id=int(payload["id"]),
            username=str(payload["username"]),
            role=str(payload["role"]),
            expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc),
        )
    except (KeyError, TypeError, ValueError):
        raise InvalidToken()


def verify_authorization_header(header: str | None) -> Claims:
    """
    Verify an Authorization header value of the form "Bearer <token>".

    Raises:
        MissingToken: header absent or empty
        MalformedToken: not exactly two space separated parts with a Bearer scheme
        InvalidToken: bad signature or expired
    """
    if not header or not header.strip():
        raise MissingToken()

    parts = header.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        raise MalformedToken()

    return decode_token(parts[1])
