"""
Report Generator

Builds the daily digest for "yesterday" (UTC):

    fetch messages -> summarize -> persist summary -> return digest text

Stages run strictly in order and each has its own failure class, so the caller
can tell a quiet day from an LLM outage from a lost write.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import json
import logging
from collections.abc import Callable
from datetime import date, datetime

import util
from errors import NoMessagesError, PersistenceFailed, StoreWriteError, SummarizationFailed
from message import Message
from message_store import MessageStore
from summarizer import Summarizer


logger = logging.getLogger(__name__)


class ReportGenerator:
    """Orchestrates one digest run"""

    def __init__(
        self,
        store: MessageStore,
        summarizer: Summarizer,
        clock: Callable[[], datetime] = util.utc_now,
    ):
        """
        Args:
            store: Message store to read messages from and write summaries to
            summarizer: LLM summarizer
            clock: Returns the current time; replaced in tests
        """
        self.store = store
        self.summarizer = summarizer
        self.clock = clock

    def target_date(self) -> date:
        """The UTC calendar day before now"""
        return util.yesterday_utc(self.clock())

    @staticmethod
    def serialize_messages(messages: list[Message]) -> str:
        """Pretty-printed JSON array of message payloads, in id order"""
        return json.dumps([msg.data for msg in messages], indent=2, ensure_ascii=False)

    def generate_report(self, target_date: date | None = None) -> str:
        """
        Generate and persist the digest for one day.

        Args:
            target_date: Day to summarize (defaults to yesterday, UTC)

        Returns:
            The digest text, only after it has been stored

        Raises:
            NoMessagesError: Nothing was stored for the day
            StoreUnavailable: Messages could not be read
            SummarizationFailed: The LLM call failed; nothing was written
            PersistenceFailed: The digest was generated but not stored
        """
        if target_date is None:
            target_date = self.target_date()

        logger.info(f"Generating report for {target_date.isoformat()}")

        messages = self.store.fetch_messages_for_date(target_date)
        if messages is None:
            raise NoMessagesError(target_date)

        raw_json = self.serialize_messages(messages)

        try:
            digest = self.summarizer.summarize(raw_json)
        except SummarizationFailed:
            raise
        except Exception as e:
            raise SummarizationFailed(
                f"Something went wrong while trying to summarize messages: {e}"
            ) from e

        try:
            self.store.insert_summary(digest, target_date)
        except StoreWriteError as e:
            raise PersistenceFailed(
                f"Error occurred while storing summary: {e}", digest=digest, target_date=target_date
            ) from e

        logger.info(
            f"Report for {target_date.isoformat()} complete: {len(messages)} messages, {len(digest)} chars"
        )
        return digest
