"""
Summarizer - LLM-Powered Daily Digest

Turns one day's worth of chat messages (serialized as JSON) into a Markdown
digest using LiteLLM. Each call is a single stateless request.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

# Standard library imports
import logging
from typing import Any

# Third-party imports
import litellm
from litellm import completion

# Local application imports
import constants as const
import util
from errors import SummarizationFailed


logger = logging.getLogger(__name__)

# Configure LiteLLM
litellm.set_verbose = False  # Set to True for debugging

SYSTEM_PROMPT = f"""Your job is to summarize a list of Discord messages from a single day in JSON format.

The output should be in Markdown and is intended to provide a summary of important events and conversation topics from the day given.

If there are no messages, simply respond '{const.NOTHING_DISCUSSED}'"""


class Summarizer:
    """Single-shot LLM summarizer for a day of messages"""

    def __init__(
        self,
        model: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        max_tokens: int | None = None,
    ):
        """
        Initialize the summarizer.

        Args:
            model: LiteLLM model string (defaults to const.LLM_MODEL)
            api_key: Provider API key (defaults to const.LLM_API_KEY; None lets LiteLLM read the provider's env var)
            timeout: Request timeout in seconds (defaults to const.LLM_TIMEOUT_SECONDS)
            max_tokens: Maximum tokens in response (defaults to const.LLM_MAX_TOKENS)
        """
        self.model = model or const.LLM_MODEL
        self.api_key = api_key if api_key is not None else const.LLM_API_KEY
        self.timeout = timeout if timeout is not None else const.LLM_TIMEOUT_SECONDS
        self.max_tokens = max_tokens if max_tokens is not None else const.LLM_MAX_TOKENS
        logger.info(f"Summarizer initialized: model={self.model}, timeout={self.timeout:.0f}s")

    def summarize(self, raw_messages: str) -> str:
        """
        Summarize a serialized batch of messages.

        Args:
            raw_messages: The day's messages as JSON text

        Returns:
            Markdown digest

        Raises:
            SummarizationFailed: On any backend failure or an empty response
        """
        params: dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": raw_messages},
            ],
            "max_tokens": self.max_tokens,
            "timeout": self.timeout,
            # One attempt per scheduled run
            "num_retries": 0,
        }
        if self.api_key:
            params["api_key"] = self.api_key

        logger.info(f"LLM request: model={self.model}, prompt_chars={len(raw_messages)}")

        try:
            response = completion(**params)
        except Exception as e:
            logger.error(f"LLM request failed: {e}")
            raise SummarizationFailed(
                f"Something went wrong while trying to summarize messages: {e}"
            ) from e

        try:
            content = response.choices[0].message.content
            finish_reason = response.choices[0].finish_reason
        except (AttributeError, IndexError, TypeError) as e:
            raise SummarizationFailed(f"Unexpected LLM response shape: {e}") from e

        logger.info(f"LLM response received: finish_reason={finish_reason}")

        digest = util.strip_think_blocks(content or "")
        if not digest:
            raise SummarizationFailed("LLM returned an empty summary")

        return digest
