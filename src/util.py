#!/usr/bin/env python3
"""
Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

# Standard library imports
import logging
import os
import re
from datetime import date, datetime, timedelta, timezone
from logging.handlers import RotatingFileHandler

# Local application imports
import constants as const


# Module-level logger
logger = logging.getLogger(__name__)

DB_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
DB_DATE_FORMAT = "%Y-%m-%d"

_THINK_BLOCK = re.compile(r"<think>.*?</think>", re.DOTALL | re.IGNORECASE)
# Reasoning sent without its opening tag, up to the last closing tag
_THINK_PREFIX = re.compile(r"\A.*</think>", re.DOTALL | re.IGNORECASE)


def setup_logger(name: str | None = None, level: str | None = None, console: bool = True, log_file: str | None = None) -> logging.Logger:
    """
    Setup a logger with file and optional console output.

    Args:
        name: Logger name (use __name__ from calling module). If None, configures root logger.
        level: Logging level (DEBUG, INFO, WARNING, ERROR). Defaults to INFO or env LOG_LEVEL.
        console: Whether to also log to console (default True for main apps)
        log_file: Custom log filename (defaults to const.LOG_FILE)

    Returns:
        logging.Logger: Configured logger instance

    Example:
        # For application entry point (digest_bot.py, digest_cli.py):
        util.setup_logger(name=None, level='INFO', console=True)
        logger = logging.getLogger(__name__)

        # For library modules:
        logger = logging.getLogger(__name__)
    """
    # Determine log level from parameter, environment, or default to INFO
    if level is None:
        level = os.environ.get("LOG_LEVEL", "INFO").upper()

    numeric_level = getattr(logging, level, logging.INFO)

    # Get or create logger
    logger = logging.getLogger(name) if name else logging.getLogger()

    # Avoid duplicate handlers if logger already configured
    if logger.handlers:
        return logger

    logger.setLevel(numeric_level)

    detailed_formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_formatter = logging.Formatter(
        "%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        datefmt="%H:%M:%S"
    )

    log_filename = log_file if log_file else const.LOG_FILE

    # File handler with rotation (don't delete on startup)
    file_handler = RotatingFileHandler(
        filename=log_filename,
        maxBytes=const.MAX_LOG_SIZE,
        backupCount=const.BACKUP_COUNT,
        encoding="utf-8"
    )
    file_handler.setFormatter(detailed_formatter)
    file_handler.setLevel(logging.DEBUG)  # Capture everything to file
    logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(console_formatter)
        console_handler.setLevel(numeric_level)
        logger.addHandler(console_handler)

    return logger


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def yesterday_utc(now: datetime | None = None) -> date:
    """
    Calendar day before `now`, in UTC.

    Naive datetimes are taken to already be UTC.
    """
    if now is None:
        now = utc_now()
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return now.date() - timedelta(days=1)


def to_db_timestamp(value: datetime) -> str:
    """Convert a datetime to the UTC text form stored in the database."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.strftime(DB_TIMESTAMP_FORMAT)


def from_db_timestamp(value: str) -> datetime:
    """Parse a stored timestamp back into an aware UTC datetime."""
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_db_date(value: date) -> str:
    return value.strftime(DB_DATE_FORMAT)


def parse_date(date_str: str) -> date:
    """
    Parse a YYYY-MM-DD string.

    Raises:
        ValueError: If the string is not a valid date
    """
    try:
        return datetime.strptime(date_str, DB_DATE_FORMAT).date()
    except ValueError:
        raise ValueError(f"Invalid date format: {date_str} (expected YYYY-MM-DD)")


def strip_think_blocks(text: str) -> str:
    """Remove <think>...</think> reasoning sections emitted by reasoning models."""
    text = _THINK_BLOCK.sub("", text)
    return _THINK_PREFIX.sub("", text).strip()


def smart_split_message(text: str, max_length: int) -> list[str]:
    """
    Intelligently split text into chunks respecting markdown structure and readability.

    Priority order for split points:
    1. Section boundaries (--- or ## headers)
    2. Paragraph boundaries (\n\n)
    3. Sentence boundaries (. \n or .\n)
    4. Line boundaries (\n)
    5. Word boundaries (space)
    6. Character limit (last resort)

    Args:
        text: Text to split
        max_length: Maximum length per chunk

    Returns:
        List of text chunks

    Example:
        chunks = smart_split_message(long_text, 2000)
        for chunk in chunks:
            await channel.send(chunk)
    """
    if len(text) <= max_length:
        return [text]

    chunks = []
    remaining = text

    while remaining:
        if len(remaining) <= max_length:
            chunks.append(remaining)
            break

        chunk = remaining[:max_length]
        split_point = -1

        # Section boundary, but not too early (at least 30% through)
        for separator in ["\n---\n", "\n## ", "\n### ", "\n#### "]:
            idx = chunk.rfind(separator)
            if idx > max_length * 0.3:
                # Keep the header marker with the next chunk
                split_point = idx + 1
                break

        if split_point == -1:
            idx = chunk.rfind("\n\n")
            if idx > max_length * 0.3:
                split_point = idx + 2

        if split_point == -1:
            for pattern in [". \n", ".\n"]:
                idx = chunk.rfind(pattern)
                if idx > max_length * 0.5:
                    split_point = idx + len(pattern)
                    break

        if split_point == -1:
            idx = chunk.rfind("\n")
            if idx > max_length * 0.5:
                split_point = idx + 1

        if split_point == -1:
            idx = chunk.rfind(" ")
            if idx > max_length * 0.7:
                split_point = idx + 1

        # Last resort: split at max_length
        if split_point == -1:
            split_point = max_length

        chunks.append(remaining[:split_point])
        remaining = remaining[split_point:]

    return chunks
