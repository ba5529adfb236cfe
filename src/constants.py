#!/usr/bin/env python3
"""
Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import os
import pathlib

from dotenv import load_dotenv


load_dotenv()

# Database
# Use absolute path to ensure all components (bot, CLI) use the same database
PROJECT_ROOT = pathlib.Path(__file__).parent.parent.absolute()
DATABASE_PATH = os.getenv("DATABASE_PATH", str(PROJECT_ROOT / "digest.db"))
DB_TIMEOUT_SECONDS = float(os.getenv("DB_TIMEOUT_SECONDS", "10"))

# Logging
LOG_FILE = "digest.log"
CMDS_LOG_FILE = "cmds.log"
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB
BACKUP_COUNT = 5

# App Version
VERSION = 0.1
AUTHOR = "sangelovich"

# DISCORD
TOKEN = os.getenv("DISCORD_TOKEN")
CHANNEL_ID = os.getenv("CHANNEL_ID")
DISCORD_MAX_CHAR_COUNT = 2000
DISCORD_TIMEOUT_SECONDS = float(os.getenv("DISCORD_TIMEOUT_SECONDS", "30"))

# SCHEDULE
# Standard five-field cron expression, evaluated in UTC
DEFAULT_DIGEST_CRON = "0 0 * * *"
DIGEST_CRON = os.getenv("DIGEST_CRON", DEFAULT_DIGEST_CRON)
DIGEST_JOB_ID = "daily_digest_job"

# LLM Configuration
# Any LiteLLM model string works, e.g. "anthropic/claude-3-5-haiku-20241022" or "ollama/qwen2.5:32b"
LLM_MODEL = os.getenv("LLM_MODEL", "hyperbolic/deepseek-ai/DeepSeek-R1")
LLM_API_KEY = os.getenv("LLM_API_KEY") or os.getenv("HYPERBOLIC_API_KEY")
LLM_TIMEOUT_SECONDS = float(os.getenv("LLM_TIMEOUT_SECONDS", "120"))
LLM_MAX_TOKENS = int(os.getenv("LLM_MAX_TOKENS", "4096"))

# Sentinel the model is told to answer with for an empty day
NOTHING_DISCUSSED = "Nothing was discussed."
