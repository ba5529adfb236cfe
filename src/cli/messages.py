"""
Messages Commands

Commands for inspecting the raw messages the digest is built from.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import json
import logging

import click
from tabulate import tabulate

import util
from errors import DigestError


logger = logging.getLogger(__name__)


@click.group()
def messages():
    """Inspect stored chat messages"""


@messages.command("add")
@click.option("--json", "payload", required=True, help="Message payload as a JSON document")
@click.option("--created-at", help="ISO timestamp (default: now, UTC). Naive values are treated as UTC")
@click.pass_context
def add_message(ctx, payload, created_at):
    """Store one message (for backfills and manual testing)"""
    store = ctx.obj["store"]

    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"Not valid JSON: {e}", param_hint="--json")

    when = None
    if created_at:
        try:
            when = util.from_db_timestamp(created_at)
        except ValueError as e:
            raise click.BadParameter(f"{e}", param_hint="--created-at")

    try:
        message_id = store.insert_message(data, created_at=when)
    except DigestError as e:
        logger.error(f"Error adding message: {e}", exc_info=True)
        click.secho(f"\n✗ Error adding message: {e}\n", fg="red", err=True)
        ctx.exit(1)

    click.secho(f"✓ Stored message {message_id}", fg="green")


@messages.command("list")
@click.option("--date", "day", help="Day to show (YYYY-MM-DD, default: yesterday UTC)")
@click.option("--full", is_flag=True, help="Show full payloads (no truncation)")
@click.pass_context
def list_messages(ctx, day, full):
    """List messages stored for one UTC day"""
    store = ctx.obj["store"]

    try:
        target = util.parse_date(day) if day else util.yesterday_utc()
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--date")

    try:
        logger.info(f"Listing messages for {target.isoformat()}")
        message_list = store.fetch_messages_for_date(target)
    except DigestError as e:
        logger.error(f"Error listing messages: {e}", exc_info=True)
        click.secho(f"\n✗ Error listing messages: {e}\n", fg="red", err=True)
        ctx.exit(1)

    if message_list is None:
        click.echo()
        click.secho(f"No messages found for {target.isoformat()}", fg="yellow")
        click.echo()
        return

    rows = []
    for msg in message_list:
        payload = json.dumps(msg.data, ensure_ascii=False)
        if not full and len(payload) > 80:
            payload = payload[:80] + "..."
        rows.append([msg.id, util.to_db_timestamp(msg.created_at), payload])

    click.echo()
    click.echo(f"Showing {len(message_list)} messages for {target.isoformat()}")
    click.echo(tabulate(rows, headers=["ID", "Created (UTC)", "Payload"]))
    click.echo()
