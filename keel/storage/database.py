"""
SQL database adapter and query profiler
"""
import sqlite3
import threading
import time
from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Dict, List, Optional, Sequence

from ..utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class Profile:
    """Timing of one SQL statement"""
    sql: str
    started_at: float
    finished_at: Optional[float] = None

    @property
    def elapsed(self) -> float:
        if self.finished_at is None:
            return 0.0
        return self.finished_at - self.started_at


class Profiler:
    """Collects SQL statement timings, keeping the most recent max_profiles"""

    def __init__(self, max_profiles: int = 1000):
        self._profiles: Deque[Profile] = deque(maxlen=max_profiles)
        self._active: Optional[Profile] = None

    def start_profile(self, sql: str) -> None:
        self._active = Profile(sql=sql, started_at=time.perf_counter())

    def stop_profile(self) -> None:
        if self._active is None:
            return
        self._active.finished_at = time.perf_counter()
        self._profiles.append(self._active)
        self._active = None

    def get_profiles(self) -> List[Profile]:
        return list(self._profiles)

    def get_last_profile(self) -> Optional[Profile]:
        return self._profiles[-1] if self._profiles else None

    def get_total_elapsed(self) -> float:
        return sum(profile.elapsed for profile in self._profiles)

    def reset(self) -> None:
        self._profiles.clear()
        self._active = None


class SQLiteAdapter:
    """
    Thin sqlite3 connection wrapper

    When an events manager is set, fires "db:before_query" and
    "db:after_query" around every statement with the adapter as source.
    """

    def __init__(self, dbname: str = ":memory:", events_manager=None, timeout: float = 5.0):
        self.dbname = dbname
        self._events_manager = events_manager
        self._connection = sqlite3.connect(dbname, timeout=timeout, check_same_thread=False)
        self._connection.row_factory = sqlite3.Row
        self._lock = threading.Lock()
        self._sql_statement: Optional[str] = None
        logger.debug(f"Connected to sqlite database {dbname}")

    def get_sql_statement(self) -> Optional[str]:
        return self._sql_statement

    def set_events_manager(self, events_manager) -> None:
        self._events_manager = events_manager

    def get_events_manager(self):
        return self._events_manager

    def _fire(self, event: str) -> None:
        if self._events_manager is not None:
            self._events_manager.fire(event, self)

    def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        """Run a statement, returns the affected row count"""
        with self._lock:
            self._sql_statement = sql
            self._fire("db:before_query")
            try:
                cursor = self._connection.execute(sql, params)
                self._connection.commit()
                return cursor.rowcount
            finally:
                self._fire("db:after_query")

    def query(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        """Run a SELECT, returns rows as dicts"""
        with self._lock:
            self._sql_statement = sql
            self._fire("db:before_query")
            try:
                rows = self._connection.execute(sql, params).fetchall()
                return [dict(row) for row in rows]
            finally:
                self._fire("db:after_query")

    def close(self) -> None:
        self._connection.close()


def attach_profiler(events_manager, profiler: Profiler):
    """Feed db events into a profiler"""
    def on_db_event(event, connection, data):
        if event.name == "before_query":
            profiler.start_profile(connection.get_sql_statement())
        elif event.name == "after_query":
            profiler.stop_profile()

    events_manager.attach("db", on_db_event)
    return on_db_event
