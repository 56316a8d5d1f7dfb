# Overview: Row locking and retry helpers for the stock-mutating workflows.

from __future__ import annotations

import time
from typing import Callable, TypeVar

from flask import current_app
from sqlalchemy.exc import OperationalError

from ..extensions import db

T = TypeVar("T")


def lock_for_update(query):
    """
    Apply row-level locking for stock reads that precede a write.

    NOTE: SQLite ignores SELECT ... FOR UPDATE; there the conditional
    UPDATE in the workflow is what prevents oversell.
    """
    return query.with_for_update()


def run_with_retry(func: Callable[[], T], *, attempts: int = 3, backoff_base: float = 0.05) -> T:
    """
    Run one unit of work, rolling back and retrying on lock contention.

    Only OperationalError (deadlock, "database is locked") is retried. Domain
    errors raised by func propagate on the first attempt after a rollback.
    """
    for attempt in range(attempts):
        try:
            return func()
        except OperationalError:
            db.session.rollback()
            if attempt >= attempts - 1:
                raise
            current_app.logger.warning(
                "Lock contention, retrying unit of work (attempt %s of %s)", attempt + 2, attempts
            )
            time.sleep(backoff_base * (2 ** attempt))
        except Exception:
            db.session.rollback()
            raise
    raise RuntimeError("run_with_retry called with attempts < 1")
