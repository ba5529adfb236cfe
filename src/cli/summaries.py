"""
Summaries Commands

Commands for reading stored daily digests.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import logging

import click
from tabulate import tabulate

import util
from errors import DigestError
from summary import Summary


logger = logging.getLogger(__name__)


@click.group()
def summaries():
    """Read stored daily digests"""


@summaries.command("list")
@click.option("--date", "day", help="Only digests for this day (YYYY-MM-DD)")
@click.option("--limit", type=int, default=20, show_default=True, help="Number of digests to display")
@click.pass_context
def list_summaries(ctx, day, limit):
    """List stored digests, newest first"""
    store = ctx.obj["store"]

    try:
        target = util.parse_date(day) if day else None
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--date")

    try:
        summary_list = store.get_summaries(day=target, limit=limit)
    except DigestError as e:
        logger.error(f"Error listing summaries: {e}", exc_info=True)
        click.secho(f"\n✗ Error listing summaries: {e}\n", fg="red", err=True)
        ctx.exit(1)

    if not summary_list:
        click.echo()
        click.secho("No summaries found", fg="yellow")
        click.echo()
        return

    click.echo()
    click.echo(tabulate([s.as_row() for s in summary_list], headers=Summary.headers()))
    click.echo()


@summaries.command("show")
@click.option("--date", "day", required=True, help="Day to show (YYYY-MM-DD)")
@click.pass_context
def show_summary(ctx, day):
    """Print the latest digest stored for a day"""
    store = ctx.obj["store"]

    try:
        target = util.parse_date(day)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--date")

    try:
        summary_list = store.get_summaries(day=target, limit=1)
    except DigestError as e:
        logger.error(f"Error reading summary: {e}", exc_info=True)
        click.secho(f"\n✗ Error reading summary: {e}\n", fg="red", err=True)
        ctx.exit(1)

    if not summary_list:
        click.secho(f"No summary stored for {target.isoformat()}", fg="yellow")
        return

    click.echo(summary_list[0].summary)
