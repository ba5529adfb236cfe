"""
Unit tests for the digest bot entry point

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import asyncio
import pytest
import sqlite3
from unittest.mock import AsyncMock, MagicMock, patch

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

import digest_bot
from db import Db
from errors import StoreUnavailable


class TestReadChannelId:

    def test_valid(self):
        assert digest_bot.read_channel_id("1234567890") == 1234567890

    @pytest.mark.parametrize("raw", [None, ""])
    def test_missing(self, raw):
        with pytest.raises(ValueError, match="'CHANNEL_ID' was not found"):
            digest_bot.read_channel_id(raw)

    def test_not_an_integer(self):
        with pytest.raises(ValueError, match="not a valid integer"):
            digest_bot.read_channel_id("general")


class TestMain:
    """Startup checks performed before the scheduler runs"""

    def test_missing_token(self):
        with patch.object(digest_bot.const, "TOKEN", None):
            assert digest_bot.main() == 1

    def test_invalid_channel(self):
        with patch.object(digest_bot.const, "TOKEN", "token"), \
             patch.object(digest_bot.const, "CHANNEL_ID", "general"):
            assert digest_bot.main() == 1

    def test_store_unavailable(self):
        with patch.object(digest_bot.const, "TOKEN", "token"), \
             patch.object(digest_bot.const, "CHANNEL_ID", "42"), \
             patch.object(digest_bot, "run_bot", MagicMock()), \
             patch.object(digest_bot.asyncio, "run", side_effect=StoreUnavailable("disk gone")):
            assert digest_bot.main() == 1

    def test_invalid_cron(self):
        with patch.object(digest_bot.const, "TOKEN", "token"), \
             patch.object(digest_bot.const, "CHANNEL_ID", "42"), \
             patch.object(digest_bot, "run_bot", MagicMock()), \
             patch.object(digest_bot.asyncio, "run", side_effect=ValueError("Wrong number of fields")):
            assert digest_bot.main() == 1

    def test_interrupted(self):
        with patch.object(digest_bot.const, "TOKEN", "token"), \
             patch.object(digest_bot.const, "CHANNEL_ID", "42"), \
             patch.object(digest_bot, "run_bot", MagicMock()) as mock_run_bot, \
             patch.object(digest_bot.asyncio, "run", side_effect=KeyboardInterrupt):
            assert digest_bot.main() == 0

        mock_run_bot.assert_called_once_with("token", 42, digest_bot.const.DIGEST_CRON)


class TestRunBot:
    """run_bot wiring, with Discord and the database replaced"""

    def setup_method(self):
        self.db = Db(in_memory=True)
        self.notifier = MagicMock()
        self.notifier.close = AsyncMock()

    def _patches(self):
        return (
            patch.object(digest_bot, "Db", return_value=self.db),
            patch.object(digest_bot, "DiscordNotifier", return_value=self.notifier),
        )

    def test_runs_until_cancelled_and_cleans_up(self):
        db_patch, notifier_patch = self._patches()

        async def run_briefly():
            with pytest.raises(asyncio.TimeoutError):
                await asyncio.wait_for(digest_bot.run_bot("token", 42, "0 0 * * *"), timeout=0.2)

        with db_patch, notifier_patch:
            asyncio.run(run_briefly())

        self.notifier.close.assert_awaited_once()
        with pytest.raises(sqlite3.ProgrammingError):
            self.db.query_parameterized("SELECT name FROM sqlite_master")

    def test_invalid_cron_cleans_up(self):
        db_patch, notifier_patch = self._patches()

        with db_patch, notifier_patch:
            with pytest.raises(ValueError):
                asyncio.run(digest_bot.run_bot("token", 42, "every day"))

        self.notifier.close.assert_awaited_once()
