"""
Discord Notifier

Posts a digest to a Discord channel using the bot token over the REST API.
No gateway connection is opened; the client only logs in for HTTP access.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

# Standard library imports
import asyncio
import logging
from typing import Protocol

# Third-party imports
import aiohttp
import discord

# Local application imports
import constants as const
import util
from errors import DeliveryError


logger = logging.getLogger(__name__)


class Notifier(Protocol):
    async def deliver(self, destination: int, text: str) -> None: ...


class DiscordNotifier:
    """Send-message capability backed by discord.py"""

    def __init__(self, token: str, timeout: float | None = None, client: discord.Client | None = None):
        """
        Args:
            token: Discord bot token
            timeout: Seconds allowed for one delivery (defaults to const.DISCORD_TIMEOUT_SECONDS)
            client: Pre-built client (optional, mainly for tests)
        """
        self.token = token
        self.timeout = timeout if timeout is not None else const.DISCORD_TIMEOUT_SECONDS
        self.client = client or discord.Client(intents=discord.Intents.none())
        self._logged_in = False

    async def _ensure_login(self) -> None:
        if not self._logged_in:
            await self.client.login(self.token)
            self._logged_in = True
            logger.info("Discord client logged in (REST only)")

    async def _resolve_channel(self, channel_id: int):
        channel = self.client.get_channel(channel_id)
        if channel is None:
            channel = await self.client.fetch_channel(channel_id)
        return channel

    async def _send(self, destination: int, chunks: list[str]) -> None:
        await self._ensure_login()
        channel = await self._resolve_channel(destination)
        if not hasattr(channel, "send"):
            raise DeliveryError(f"Channel {destination} does not accept messages")
        for chunk in chunks:
            await channel.send(chunk)

    async def deliver(self, destination: int, text: str) -> None:
        """
        Deliver text to a channel, split to fit Discord's message limit.

        Args:
            destination: Discord channel ID
            text: Markdown text to post

        Raises:
            DeliveryError: If the text is empty or any send fails
        """
        if not text or not text.strip():
            raise DeliveryError("Refusing to send an empty message")

        chunks = util.smart_split_message(text, const.DISCORD_MAX_CHAR_COUNT)
        logger.info(f"Delivering {len(text)} chars to channel {destination} in {len(chunks)} message(s)")

        try:
            await asyncio.wait_for(self._send(destination, chunks), timeout=self.timeout)
        except DeliveryError:
            raise
        except asyncio.TimeoutError as e:
            raise DeliveryError(f"Timed out sending summary message to channel {destination}") from e
        except (discord.DiscordException, aiohttp.ClientError, OSError) as e:
            raise DeliveryError(f"Something went wrong while sending summary message: {e}") from e

        logger.info(f"Digest delivered to channel {destination}")

    async def close(self) -> None:
        if not self.client.is_closed():
            await self.client.close()
            logger.info("Discord client closed")
