"""
Summary model

A persisted daily digest. Rows are append-only: re-running a day adds another
row for the same date.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

from datetime import date, datetime

import util


class Summary:
    """Stored digest for one calendar day"""

    def __init__(self, id: int, summary: str, date: date, created_at: datetime):
        self.id = id
        self.summary = summary
        self.date = date
        self.created_at = created_at

    @classmethod
    def from_row(cls, row: tuple) -> "Summary":
        """Create Summary from a (id, summary, date, created_at) database row"""
        row_id, text, day, created_at = row
        return cls(
            id=row_id,
            summary=text,
            date=util.parse_date(day),
            created_at=util.from_db_timestamp(created_at),
        )

    @classmethod
    def headers(cls) -> list:
        return ["ID", "Date", "Created", "Summary Preview"]

    def as_row(self, preview_length: int = 60) -> list:
        first_line = self.summary.strip().splitlines()[0] if self.summary.strip() else ""
        preview = first_line[:preview_length] + "..." if len(first_line) > preview_length else first_line
        return [self.id, self.date.isoformat(), util.to_db_timestamp(self.created_at), preview]

    def __repr__(self) -> str:
        return f"Summary(id={self.id}, date={self.date.isoformat()})"
