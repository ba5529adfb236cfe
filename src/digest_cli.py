#!/usr/bin/env python3
"""
Channel Digest CLI

Command-line interface built with Click for running the digest by hand and
inspecting what is stored.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.

Usage:
    python src/digest_cli.py --help
    python src/digest_cli.py messages list --date 2024-01-01
    python src/digest_cli.py report run --date 2024-01-01 --deliver
    python src/digest_cli.py summaries list
"""

import logging
import sys

import click

# Local application imports
import constants as const
import util
from cli.messages import messages
from cli.report import report
from cli.summaries import summaries
from db import Db
from errors import StoreUnavailable
from message_store import MessageStore


# Initialize logging for CLI application
util.setup_logger(name=None, level=None, console=False, log_file=const.CMDS_LOG_FILE)
logger = logging.getLogger(__name__)


@click.group()
@click.option("--in-memory", is_flag=True, help="Use in-memory database (for testing)")
@click.option("--database", "database_path", type=click.Path(dir_okay=False), help="SQLite file (default: DATABASE_PATH)")
@click.pass_context
def cli(ctx, in_memory, database_path):
    """
    Channel Digest Command Line Interface

    Generate daily digests on demand and inspect stored messages and summaries.
    """
    ctx.ensure_object(dict)

    try:
        db = Db(in_memory=in_memory, path=database_path)
        store = MessageStore(db)
        store.ensure_schema()
    except StoreUnavailable as e:
        logger.error(f"Database unavailable: {e}")
        raise click.ClickException(f"Database unavailable: {e}")

    ctx.obj["db"] = db
    ctx.obj["store"] = store
    ctx.call_on_close(db.close)

    db_type = "in-memory" if in_memory else f"persistent ({database_path or const.DATABASE_PATH})"
    logger.info(f"Initializing digest CLI with {db_type} database")


# Register command groups
cli.add_command(messages)
cli.add_command(report)
cli.add_command(summaries)


@cli.command()
def version():
    """Show version information"""
    click.echo(f"Channel Digest CLI v{const.VERSION}")
    click.echo(f"Author: {const.AUTHOR}")


if __name__ == "__main__":
    try:
        cli()
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        click.secho(f"\n✗ Fatal error: {e}\n", fg="red", err=True)
        sys.exit(1)
