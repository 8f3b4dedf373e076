# backend/core/query_logger.py

import logging
import time

from sqlalchemy import event
from sqlalchemy.engine import Engine

from core.config import get_settings

query_logger = logging.getLogger("query_performance")

settings = get_settings()


def setup_query_logging(engine: Engine) -> None:
    """
    Attach slow-query tracing to an SQLAlchemy engine.

    Only active in development or when DEBUG is set. Statements slower than
    ``SLOW_QUERY_THRESHOLD_SECONDS`` are logged at WARNING.
    """
    if not (settings.is_development or settings.DEBUG):
        return

    threshold = settings.SLOW_QUERY_THRESHOLD_SECONDS

    @event.listens_for(engine, "before_cursor_execute")
    def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        conn.info.setdefault("query_start_time", []).append(time.time())

    @event.listens_for(engine, "after_cursor_execute")
    def after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        started = conn.info["query_start_time"].pop(-1)
        total_time = time.time() - started
        if total_time > threshold:
            query_logger.warning(f"SLOW QUERY ({total_time:.3f}s): {statement[:200]}...")
