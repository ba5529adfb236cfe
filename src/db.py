#!/usr/bin/env python3
"""
Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

# Standard library imports
import logging
import sqlite3
import threading

# Local application imports
import constants as const
from errors import StoreUnavailable


# Get a logger instance
logger = logging.getLogger(__name__)

class Db:
    connection: sqlite3.Connection

    def __init__(self, in_memory: bool = False, path: str | None = None, timeout: float | None = None) -> None:
        """
        Initialize database connection.

        Args:
            in_memory: If True, use an in-memory SQLite database (useful for testing).
                      If False (default), use the persistent database file.
            path: Override the database file (defaults to const.DATABASE_PATH)
            timeout: Seconds to wait on a locked database (defaults to const.DB_TIMEOUT_SECONDS)

        Raises:
            StoreUnavailable: If the database cannot be opened
        """
        self.connection = None  # type: ignore[assignment]
        # One connection shared by the event loop and worker threads
        self._lock = threading.RLock()
        if timeout is None:
            timeout = const.DB_TIMEOUT_SECONDS

        try:
            if in_memory:
                logger.info("init in-memory database")
                self.connection = sqlite3.connect(":memory:", timeout=timeout, check_same_thread=False)
            else:
                db_path = path or const.DATABASE_PATH
                logger.info(f"init database at {db_path}")
                # check_same_thread=False allows connection use across threads (guarded by self._lock)
                self.connection = sqlite3.connect(db_path, timeout=timeout, check_same_thread=False)

                # Write-Ahead Logging lets readers run while a writer is active
                self.connection.execute("PRAGMA journal_mode=WAL")
                logger.info(f"Database configured with WAL mode, {timeout:.0f}s timeout, and multi-thread support")
        except sqlite3.Error as e:
            logger.error(f"Could not open database: {e}")
            raise StoreUnavailable(f"Could not open database: {e}") from e


    def __del__(self) -> None:
        if getattr(self, "connection", None) is not None:
            self.connection.close()


    def create_table(self, query: str) -> None:
        try:
            with self._lock, self.connection:
                self.connection.execute(query)
                logger.debug(f"Table created {query}")
        except Exception as e:
            logger.warning(f"Table create error: {e}")
            raise

    def insert(self, query: str, row: tuple) -> int:
        """
        Execute an INSERT and return the new row id.
        """
        try:
            with self._lock, self.connection:
                cur = self.connection.execute(query, row)
                return int(cur.lastrowid or 0)
        except Exception as e:
            logger.warning(f"Error inserting {row} into database: {e}")
            raise

    def query_parameterized(self, query: str, params: tuple | None = None) -> list[tuple]:
        """
        Execute a SELECT SQL statement with parameters.
        Returns a list of tuples.
        """
        logger.debug(f"Executing parameterized query: {query} with params: {params}")
        try:
            with self._lock, self.connection:
                if params:
                    rows = self.connection.execute(query, params).fetchall()
                else:
                    rows = self.connection.execute(query).fetchall()
                cnt = len(rows)
                logger.debug(f"Query {query} returned {cnt} rows")
                return rows
        except Exception as e:
            logger.warning(f"Query {query} failed with error {e}")
            raise

    def execute(self, query: str, params: tuple | None = None) -> sqlite3.Cursor:
        """
        Execute a non-SELECT SQL statement (e.g., CREATE INDEX).
        Returns the cursor object.
        """
        try:
            with self._lock, self.connection:
                if params:
                    cur = self.connection.execute(query, params)
                else:
                    cur = self.connection.execute(query)
                logger.debug(f"Executed: {query} with params: {params}")
                return cur
        except Exception as e:
            logger.warning(f"Execution failed for {query} with error {e}")
            raise

    def close(self) -> None:
        """Close the connection. Later calls fail with sqlite3.ProgrammingError."""
        if self.connection is not None:
            self.connection.close()
            logger.info("Database connection closed")
