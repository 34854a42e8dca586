from __future__ import annotations

import hashlib
import logging
import os
import time

from sqlalchemy import event
from sqlalchemy.engine import Engine

SLOW_QUERY_MS = int(os.getenv("DB_SLOW_QUERY_MS", "200"))

logger = logging.getLogger("obs")


def _fingerprint(parameters) -> str:  # type: ignore[no-untyped-def]
    return hashlib.sha256(repr(parameters).encode()).hexdigest()[:8]


def add_query_logger(engine: Engine, label: str) -> None:
    """Attach slow query logging to ``engine``; ``label`` names the database."""
    target = engine.sync_engine if hasattr(engine, "sync_engine") else engine

    def before_cursor_execute(
        conn, cursor, statement, parameters, context, executemany
    ):  # type: ignore[no-untyped-def]
        context._query_start_time = time.perf_counter()

    def after_cursor_execute(
        conn, cursor, statement, parameters, context, executemany
    ):  # type: ignore[no-untyped-def]
        total_ms = (time.perf_counter() - context._query_start_time) * 1000
        if total_ms <= SLOW_QUERY_MS:
            return
        sql = " ".join(statement.split())
        if len(sql) > 200:
            sql = sql[:197] + "..."
        logger.warning(
            "slow query %dms db=%s sql=%s params=%s",
            int(total_ms),
            label,
            sql,
            _fingerprint(parameters),
        )

    event.listen(target, "before_cursor_execute", before_cursor_execute)
    event.listen(target, "after_cursor_execute", after_cursor_execute)
