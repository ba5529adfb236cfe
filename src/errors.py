"""
Digest pipeline errors

Each pipeline stage fails with its own exception class so the trigger can log
which stage went wrong:

    DigestError
    ├── StoreError
    │   ├── StoreUnavailable     connection or query failure
    │   └── StoreWriteError      summary insert failed
    ├── ReportError
    │   ├── NoMessagesError      quiet day, nothing to summarize
    │   ├── SummarizationFailed  LLM backend failure
    │   └── PersistenceFailed    digest generated but not stored
    └── DeliveryError            Discord send failed

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

from datetime import date


class DigestError(Exception):
    """Base class for all pipeline errors"""


class StoreError(DigestError):
    """Base class for message store failures"""


class StoreUnavailable(StoreError):
    """The backing database could not be reached or queried"""


class StoreWriteError(StoreError):
    """A write to the database failed"""


class ReportError(DigestError):
    """Base class for report generation failures"""

    stage = "report"


class NoMessagesError(ReportError):
    """No messages were stored for the target date"""

    stage = "fetch"

    def __init__(self, target_date: date):
        self.target_date = target_date
        super().__init__(f"There were no messages in the database for {target_date.isoformat()}")


class SummarizationFailed(ReportError):
    """The LLM backend failed to produce a digest"""

    stage = "summarize"


class PersistenceFailed(ReportError):
    """
    A digest was generated but could not be stored.

    The digest text is kept on the exception so the caller can log it; it is
    not buffered anywhere else.
    """

    stage = "persist"

    def __init__(self, message: str, digest: str, target_date: date):
        self.digest = digest
        self.target_date = target_date
        super().__init__(message)


class DeliveryError(DigestError):
    """The digest could not be delivered to the destination channel"""

    stage = "deliver"
