"""Pooled SQLite connections for the progress store."""
import logging
import sqlite3
import threading
from contextlib import contextmanager
from queue import Empty, Queue
from typing import Generator, List

logger = logging.getLogger(__name__)


class SQLiteConnectionPool:
    """Thread-safe pool handing out at most ``max_connections`` connections."""

    def __init__(self, database: str, max_connections: int = 5, timeout: float = 5.0):
        if max_connections < 1:
            raise ValueError("max_connections must be at least 1")
        self.database = database
        self.max_connections = max_connections
        self.timeout = timeout
        self._idle: Queue[sqlite3.Connection] = Queue(maxsize=max_connections)
        self._all: List[sqlite3.Connection] = []
        self._lock = threading.Lock()

    def _create_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.database, timeout=self.timeout, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def _acquire(self) -> sqlite3.Connection:
        try:
            return self._idle.get(block=False)
        except Empty:
            pass
        with self._lock:
            if len(self._all) < self.max_connections:
                conn = self._create_connection()
                self._all.append(conn)
                logger.debug("Opened connection to %s (total: %d)", self.database, len(self._all))
                return conn
        return self._idle.get(block=True, timeout=self.timeout)

    @contextmanager
    def get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Borrow a connection; uncommitted work is rolled back on return."""
        connection = self._acquire()
        try:
            yield connection
        finally:
            try:
                connection.rollback()
                self._idle.put(connection)
            except sqlite3.Error as exc:
                logger.error("Discarding broken connection to %s: %s", self.database, exc)
                with self._lock:
                    if connection in self._all:
                        self._all.remove(connection)
                connection.close()

    def close_all(self) -> None:
        """Close every connection the pool has opened."""
        with self._lock:
            while True:
                try:
                    self._idle.get(block=False)
                except Empty:
                    break
            for conn in self._all:
                conn.close()
            self._all.clear()
