"""
Message store

Owns the schema and every query for raw chat messages and the daily summaries
generated from them. Other components only go through this class.

Timestamps are written as UTC text (YYYY-MM-DD HH:MM:SS). Rows written by
other processes may carry ISO offsets, so day filters go through SQLite's
datetime(), which converts every readable value to that UTC form. Rows whose
created_at SQLite cannot read belong to no day and are skipped.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import json
import logging
import sqlite3
from datetime import date, datetime, timedelta
from typing import Any

import util
from db import Db
from errors import StoreUnavailable, StoreWriteError
from message import Message
from summary import Summary


logger = logging.getLogger(__name__)


class MessageStore:
    """Narrow data access layer for messages and summaries"""

    def __init__(self, db: Db) -> None:
        self.db = db

    def ensure_schema(self) -> None:
        """
        Create the messages and summaries tables if they don't exist.

        Safe to call on every startup.

        Raises:
            StoreUnavailable: If the database cannot be used
        """
        messages_query = """
        CREATE TABLE IF NOT EXISTS messages (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            data TEXT NOT NULL,
            created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
        )
        """
        summaries_query = """
        CREATE TABLE IF NOT EXISTS summaries (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            summary TEXT NOT NULL,
            date DATE NOT NULL,
            created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
        )
        """
        try:
            self.db.create_table(messages_query)
            self.db.create_table(summaries_query)
            self.db.execute(
                "CREATE INDEX IF NOT EXISTS idx_messages_created_at ON messages(created_at)"
            )
            self.db.execute("CREATE INDEX IF NOT EXISTS idx_summaries_date ON summaries(date)")
        except sqlite3.Error as e:
            raise StoreUnavailable(f"Could not create schema: {e}") from e

        logger.info("Message store schema ready")

    @staticmethod
    def _day_bounds(day: date) -> tuple[str, str]:
        start = datetime(day.year, day.month, day.day)
        return util.to_db_timestamp(start), util.to_db_timestamp(start + timedelta(days=1))

    def fetch_messages_for_date(self, day: date) -> list[Message] | None:
        """
        Get all messages whose UTC calendar date is `day`.

        Args:
            day: Calendar date to fetch

        Returns:
            Messages ordered by id, or None when there are no rows for that day

        Raises:
            StoreUnavailable: If the query fails
        """
        start, end = self._day_bounds(day)
        # datetime() folds ISO offsets and julian day numbers into UTC text
        query = """
            SELECT id, data, datetime(created_at) FROM messages
            WHERE datetime(created_at) >= ? AND datetime(created_at) < ?
            ORDER BY id
        """
        try:
            rows = self.db.query_parameterized(query, (start, end))
            unreadable = self.db.query_parameterized(
                "SELECT COUNT(*) FROM messages WHERE datetime(created_at) IS NULL"
            )[0][0]
        except sqlite3.Error as e:
            raise StoreUnavailable(f"Could not fetch messages for {day.isoformat()}: {e}") from e

        if unreadable:
            logger.warning(f"Skipping {unreadable} stored messages with unreadable created_at values")

        if not rows:
            logger.info(f"No messages stored for {day.isoformat()}")
            return None

        logger.info(f"Fetched {len(rows)} messages for {day.isoformat()}")
        return [Message.from_row(row) for row in rows]

    def count_messages_for_date(self, day: date) -> int:
        start, end = self._day_bounds(day)
        try:
            rows = self.db.query_parameterized(
                "SELECT COUNT(*) FROM messages WHERE datetime(created_at) >= ? AND datetime(created_at) < ?",
                (start, end),
            )
        except sqlite3.Error as e:
            raise StoreUnavailable(f"Could not count messages for {day.isoformat()}: {e}") from e
        return int(rows[0][0])

    def insert_message(self, data: Any, created_at: datetime | None = None) -> int:
        """
        Append one raw message.

        Args:
            data: JSON-serializable payload
            created_at: Message time (defaults to now, UTC)

        Returns:
            New message id

        Raises:
            StoreWriteError: If the insert fails
        """
        if created_at is None:
            created_at = util.utc_now()
        try:
            payload = json.dumps(data, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise StoreWriteError(f"Message payload is not JSON serializable: {e}") from e

        try:
            message_id = self.db.insert(
                "INSERT INTO messages (data, created_at) VALUES (?, ?)",
                (payload, util.to_db_timestamp(created_at)),
            )
        except sqlite3.Error as e:
            raise StoreWriteError(f"Error storing message: {e}") from e

        logger.debug(f"Stored message {message_id}")
        return message_id

    def insert_summary(self, text: str, day: date) -> int:
        """
        Append one summary row for `day`. Existing rows for the same day are left alone.

        Returns:
            New summary id

        Raises:
            StoreWriteError: If the insert fails
        """
        try:
            summary_id = self.db.insert(
                "INSERT INTO summaries (summary, date, created_at) VALUES (?, ?, ?)",
                (text, util.to_db_date(day), util.to_db_timestamp(util.utc_now())),
            )
        except sqlite3.Error as e:
            raise StoreWriteError(f"Error occurred while storing summary: {e}") from e

        logger.info(f"Stored summary {summary_id} for {day.isoformat()}")
        return summary_id

    def get_summaries(self, day: date | None = None, limit: int = 20) -> list[Summary]:
        """
        Get stored summaries, newest first.

        Args:
            day: Only summaries for this date (optional)
            limit: Maximum rows to return

        Raises:
            StoreUnavailable: If the query fails
        """
        if day is None:
            query = "SELECT id, summary, date, created_at FROM summaries ORDER BY id DESC LIMIT ?"
            params: tuple = (limit,)
        else:
            query = (
                "SELECT id, summary, date, created_at FROM summaries "
                "WHERE date = ? ORDER BY id DESC LIMIT ?"
            )
            params = (util.to_db_date(day), limit)

        try:
            rows = self.db.query_parameterized(query, params)
        except sqlite3.Error as e:
            raise StoreUnavailable(f"Could not read summaries: {e}") from e
        return [Summary.from_row(row) for row in rows]
