"""
Message model

Represents one raw chat message stored for the daily digest. The payload is
opaque JSON written by the ingestion side; this project only reads it.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import json
from datetime import date, datetime, timezone
from typing import Any

import util


class Message:
    """Single stored chat message"""

    def __init__(self, id: int, data: Any, created_at: datetime):
        """
        Initialize a message

        Args:
            id: Database row id
            data: Decoded JSON payload
            created_at: When the message was stored (aware, UTC)
        """
        self.id = id
        self.data = data
        self.created_at = created_at

    @property
    def day(self) -> date:
        """UTC calendar day this message belongs to"""
        return self.created_at.astimezone(timezone.utc).date()

    @classmethod
    def from_row(cls, row: tuple) -> "Message":
        """
        Create Message from a (id, data, created_at) database row

        Rows whose payload is not valid JSON keep the raw text as payload.
        """
        row_id, raw_data, created_at = row
        try:
            data = json.loads(raw_data)
        except (json.JSONDecodeError, TypeError):
            data = raw_data
        return cls(id=row_id, data=data, created_at=util.from_db_timestamp(created_at))

    def __repr__(self) -> str:
        return f"Message(id={self.id}, created_at={self.created_at.isoformat()})"
