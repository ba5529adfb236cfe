"""
Report Commands

Run the digest pipeline once, outside the schedule.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import asyncio
import logging

import click

import constants as const
import util
from notifier import DiscordNotifier
from pipeline_trigger import PipelineTrigger, RunOutcome, RunStatus
from report_generator import ReportGenerator
from summarizer import Summarizer


logger = logging.getLogger(__name__)


async def _run_once(trigger: PipelineTrigger, notifier: DiscordNotifier | None, target_date) -> RunOutcome:
    try:
        return await trigger.run(target_date)
    finally:
        if notifier is not None:
            await notifier.close()


@click.group()
def report():
    """Generate digests on demand"""


@report.command("run")
@click.option("--date", "day", help="Day to summarize (YYYY-MM-DD, default: yesterday UTC)")
@click.option("--deliver/--no-deliver", default=False, help="Post the digest to the configured Discord channel")
@click.option("--model", help="Override the LiteLLM model string")
@click.pass_context
def run_report(ctx, day, deliver, model):
    """Generate, store and optionally deliver one digest now"""
    store = ctx.obj["store"]

    try:
        target = util.parse_date(day) if day else None
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--date")

    notifier = None
    channel_id = None
    if deliver:
        if not const.TOKEN or not const.CHANNEL_ID:
            raise click.UsageError("--deliver needs DISCORD_TOKEN and CHANNEL_ID to be set")
        try:
            channel_id = int(const.CHANNEL_ID)
        except ValueError:
            raise click.UsageError(f"CHANNEL_ID is not a valid integer: {const.CHANNEL_ID!r}")
        notifier = DiscordNotifier(const.TOKEN)

    generator = ReportGenerator(store, Summarizer(model=model))
    trigger = PipelineTrigger(generator, notifier, channel_id)

    logger.info(f"Manual digest run: date={day or 'yesterday'}, deliver={deliver}")
    outcome = asyncio.run(_run_once(trigger, notifier, target))

    if outcome.ok:
        click.echo()
        click.echo(outcome.digest)
        click.echo()
        verb = "stored and delivered" if outcome.status is RunStatus.DELIVERED else "stored"
        click.secho(f"✓ Digest for {outcome.target_date.isoformat()} {verb}", fg="green")
        return

    if outcome.status is RunStatus.NO_MESSAGES:
        click.secho(f"No messages found for {outcome.target_date.isoformat()}", fg="yellow")
        return

    if outcome.status is RunStatus.DELIVERY_FAILED:
        click.secho(f"\n✗ Digest stored but delivery failed: {outcome.error}\n", fg="red", err=True)
        ctx.exit(1)

    click.secho(f"\n✗ Digest run failed ({outcome.status.value}): {outcome.error}\n", fg="red", err=True)
    ctx.exit(1)
