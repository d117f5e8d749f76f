"""Generative model client.

The pipeline only needs "text in, text out". `AnthropicGenerator` wraps the
Anthropic Messages API and translates SDK failures into domain errors.
There is no retry loop here: a rate-limited caller is told so and can back
off on its own.
"""

import asyncio
import logging

from anthropic import APIConnectionError, APIStatusError, APITimeoutError, AsyncAnthropic, RateLimitError

from app.config import Settings, get_settings
from app.services.errors import UpstreamFailureError, UpstreamRateLimitError

logger = logging.getLogger(__name__)


class TextGenerator:
    """Interface for anything that turns a prompt into text."""

    async def generate(self, prompt: str) -> str:
        raise NotImplementedError


def _retry_after(error: APIStatusError) -> float | None:
    value = error.response.headers.get("retry-after") if error.response is not None else None
    try:
        return float(value) if value is not None else None
    except ValueError:
        return None


class AnthropicGenerator(TextGenerator):
    """TextGenerator backed by Claude."""

    def __init__(self, settings: Settings | None = None, client: AsyncAnthropic | None = None):
        """Initialize Anthropic client."""
        self.settings = settings or get_settings()
        self.client = client or AsyncAnthropic(api_key=self.settings.anthropic_api_key)

    async def generate(self, prompt: str) -> str:
        """
        Send a single-turn prompt and return the text of the reply.

        Args:
            prompt: Fully rendered prompt

        Returns:
            Reply text

        Raises:
            UpstreamRateLimitError: The API reported quota exhaustion
            UpstreamFailureError: Any other failure, including the hard timeout
        """
        try:
            message = await asyncio.wait_for(
                self.client.messages.create(
                    model=self.settings.llm_model,
                    max_tokens=self.settings.llm_max_tokens,
                    messages=[{"role": "user", "content": prompt}],
                ),
                timeout=self.settings.llm_timeout_seconds,
            )
        except RateLimitError as e:
            logger.warning("Anthropic rate limit hit: %s", str(e))
            raise UpstreamRateLimitError(str(e), retry_after=_retry_after(e)) from e
        except (asyncio.TimeoutError, APITimeoutError) as e:
            logger.exception("Model call timed out after %.1fs", self.settings.llm_timeout_seconds)
            raise UpstreamFailureError("Model call timed out") from e
        except APIStatusError as e:
            if e.status_code == 429:
                raise UpstreamRateLimitError(str(e), retry_after=_retry_after(e)) from e
            logger.exception("Anthropic API error (status %d)", e.status_code)
            raise UpstreamFailureError(str(e), details={"status_code": e.status_code}) from e
        except APIConnectionError as e:
            logger.exception("Could not reach the Anthropic API")
            raise UpstreamFailureError(str(e)) from e

        text_blocks = [block.text for block in message.content if getattr(block, "type", None) == "text"]
        if not text_blocks:
            raise UpstreamFailureError("Model returned no text")
        return "".join(text_blocks)
