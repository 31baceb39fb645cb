import logging
from typing import Protocol

import openai
from openai import AsyncOpenAI

from app.config import settings
from app.errors import SummarizerError

logger = logging.getLogger("app.summary")


class Summarizer(Protocol):
    async def complete(self, prompt: str) -> str:
        ...


class ChatSummarizer:
    """Single-turn chat completion against an OpenAI-compatible API."""

    def __init__(self, client: AsyncOpenAI | None = None):
        self.client = client or AsyncOpenAI(
            api_key=settings.llm_api_key or "missing-api-key",
            base_url=settings.llm_base_url,
            timeout=settings.llm_timeout_seconds,
            max_retries=settings.llm_max_retries,
        )

    async def complete(self, prompt: str) -> str:
        try:
            completion = await self.client.chat.completions.create(
                model=settings.llm_model,
                messages=[{"role": "user", "content": prompt}],
                temperature=settings.llm_temperature,
                max_tokens=settings.llm_max_tokens,
            )
        except openai.APIStatusError as exc:
            raise SummarizerError(exc.message, status_code=exc.status_code) from exc
        except openai.APIError as exc:
            # connection errors and timeouts carry no status code
            raise SummarizerError(exc.message) from exc

        if not completion.choices:
            return ""
        return completion.choices[0].message.content or ""


def get_summarizer() -> Summarizer:
    return ChatSummarizer()
