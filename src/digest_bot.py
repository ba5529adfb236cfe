#!/usr/bin/env python3
"""
Channel Digest Bot

Posts a Markdown digest of yesterday's chat messages to a Discord channel on a
cron schedule (default: daily at 00:00 UTC).

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

# Standard library imports
import asyncio
import logging
import sys

# Local application imports
import constants as const
import util
from db import Db
from errors import StoreUnavailable
from message_store import MessageStore
from notifier import DiscordNotifier
from pipeline_trigger import CronScheduler, PipelineTrigger
from report_generator import ReportGenerator
from summarizer import Summarizer


# Initialize root logger for the application
util.setup_logger(name=None, level=None, console=True)
logger = logging.getLogger(__name__)


def read_channel_id(raw: str | None) -> int:
    """
    Parse the CHANNEL_ID setting.

    Raises:
        ValueError: If it is missing or not an integer
    """
    if not raw:
        raise ValueError("'CHANNEL_ID' was not found")
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"Tried to convert CHANNEL_ID env var but the value is not a valid integer: {raw!r}")


async def run_bot(token: str, channel_id: int, cron_expr: str) -> None:
    db = Db()
    store = MessageStore(db)
    store.ensure_schema()

    notifier = DiscordNotifier(token)
    generator = ReportGenerator(store, Summarizer())
    scheduler = CronScheduler()
    trigger = PipelineTrigger(generator, notifier, channel_id, scheduler=scheduler, cron_expr=cron_expr)

    try:
        trigger.register()
        scheduler.start()
        logger.info("Starting the digest scheduler ...")

        # Runs until cancelled (Ctrl+C)
        await asyncio.Event().wait()
    finally:
        scheduler.shutdown()
        await notifier.close()
        db.close()
        logger.info("Exiting...")


def main() -> int:
    if not const.TOKEN:
        logger.error("'DISCORD_TOKEN' was not found")
        return 1

    try:
        channel_id = read_channel_id(const.CHANNEL_ID)
    except ValueError as e:
        logger.error(f"{e}")
        return 1

    try:
        asyncio.run(run_bot(const.TOKEN, channel_id, const.DIGEST_CRON))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    except StoreUnavailable as e:
        logger.error(f"Database unavailable: {e}")
        return 1
    except ValueError as e:
        # Invalid cron expression
        logger.error(f"Invalid configuration: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
