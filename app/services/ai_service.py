"""
Generation backend for study artifacts, using Anthropic Claude.
"""
import time
from functools import lru_cache

import anthropic

from app.core.config import settings
from app.core.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_SYSTEM_PROMPT = "You are an educational assistant helping students learn effectively."


def get_anthropic_client() -> anthropic.AsyncAnthropic:
    """Get configured Anthropic client."""
    if not settings.anthropic_api_key:
        logger.error("Anthropic API key not configured")
        raise ValueError("ANTHROPIC_API_KEY not configured")
    return anthropic.AsyncAnthropic(api_key=settings.anthropic_api_key)


class AnthropicGenerator:
    """
    Stateless text generator. One instance serves every request; the SDK
    client is created on the first call.
    """

    def __init__(
        self,
        client: anthropic.AsyncAnthropic | None = None,
        model: str | None = None,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ):
        self._client = client
        self.model = model or settings.claude_model
        self.system_prompt = system_prompt
        self.max_tokens = max_tokens or settings.ai_max_tokens
        self.temperature = settings.ai_temperature if temperature is None else temperature

    @property
    def client(self) -> anthropic.AsyncAnthropic:
        if self._client is None:
            self._client = get_anthropic_client()
        return self._client

    async def generate(self, prompt: str) -> str:
        """
        Generate text for a prompt.

        Args:
            prompt: The user prompt

        Returns:
            Concatenated text of the response

        Raises:
            ValueError: if the API key is missing
            anthropic.APIError: on any backend failure
        """
        start_time = time.time()
        logger.info(f"Starting AI content generation | model={self.model} | max_tokens={self.max_tokens}")
        logger.debug(f"Prompt length: {len(prompt)} chars")

        try:
            message = await self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                system=self.system_prompt,
                messages=[
                    {"role": "user", "content": prompt}
                ],
                temperature=self.temperature,
            )
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(f"AI generation failed | duration={duration_ms:.2f}ms | error={str(e)}")
            raise

        duration_ms = (time.time() - start_time) * 1000
        content = "".join(
            block.text for block in message.content if getattr(block, "type", "text") == "text"
        )

        logger.info(
            f"AI generation completed | duration={duration_ms:.2f}ms | "
            f"input_tokens={message.usage.input_tokens} | output_tokens={message.usage.output_tokens}"
        )
        return content


@lru_cache
def get_text_generator() -> AnthropicGenerator:
    """Process-wide generator instance."""
    return AnthropicGenerator()
