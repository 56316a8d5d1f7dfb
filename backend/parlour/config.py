from __future__ import annotations
import os


def _csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # Token signing key; falls back to SECRET_KEY when not set separately
    JWT_SECRET = os.environ.get("JWT_SECRET", SECRET_KEY)
    JWT_ALGORITHM = os.environ.get("JWT_ALGORITHM", "HS256")
    TOKEN_TTL_HOURS = int(os.environ.get("TOKEN_TTL_HOURS", "8"))

    # SQLite DB stored in backend/instance/parlour.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///parlour.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS", "12"))

    CORS_ORIGINS = _csv(os.environ.get(
        "CORS_ORIGINS",
        "http://localhost:5173,http://127.0.0.1:5173",
    ))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Shop clock offset from UTC in minutes (e.g. 330 for UTC+05:30).
    # Report days (from/to) start at local midnight; stored dates stay UTC.
    REPORT_UTC_OFFSET_MINUTES = int(os.environ.get("REPORT_UTC_OFFSET_MINUTES", "0"))

    # Seeded by `flask system init` when the users table is empty
    DEFAULT_ADMIN_USERNAME = os.environ.get("DEFAULT_ADMIN_USERNAME", "admin")
    DEFAULT_ADMIN_PASSWORD = os.environ.get("DEFAULT_ADMIN_PASSWORD", "admin123")
