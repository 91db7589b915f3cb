"""Summarizer collaborators that compress evicted messages into observations."""

from __future__ import annotations

import json
from typing import Protocol

import anthropic

from convwindow.config.settings import get_settings
from convwindow.utils.json_parse import parse_json
from convwindow.utils.logging import get_logger
from convwindow.window.prompts import BATCH_SUMMARY_PROMPT, BATCH_USER_TEMPLATE
from convwindow.window.types import Message, Observation, ThreadState

logger = get_logger("window.summarizer")


class Summarizer(Protocol):
    """Compresses a batch of messages into observations.

    Implementations may raise or return an empty list; they must not mutate
    ``state`` or ``batch``. Deadlines are enforced by the caller through
    task cancellation.
    """

    async def summarize_batch(self, state: ThreadState, batch: list[Message]) -> list[Observation]:
        ...


class NullSummarizer:
    """Summarizer that never produces observations (offline mode)."""

    async def summarize_batch(self, state: ThreadState, batch: list[Message]) -> list[Observation]:
        return []


def build_transcript(batch: list[Message], max_chars: int) -> str:
    lines = []
    for message in batch:
        content = message.content if isinstance(message.content, str) else json.dumps(message.content)
        lines.append(f"{message.role.value.upper()}: {content}")
    return "\n".join(lines)[:max_chars]


class LLMSummarizer:
    """Anthropic-backed summarizer using the fact-extractor prompt."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        client: anthropic.AsyncAnthropic | None = None,
    ) -> None:
        settings = get_settings()
        self.config = settings.summarizer
        self.api_key = api_key or settings.anthropic_api_key
        self.model = model or self.config.model
        self._client = client
        self._local_client: anthropic.AsyncAnthropic | None = None

    def _client_for(self, state: ThreadState) -> anthropic.AsyncAnthropic:
        if state.metadata.get("llm_local") and self.config.local_base_url:
            if self._local_client is None:
                self._local_client = anthropic.AsyncAnthropic(
                    api_key=self.api_key or "local",
                    base_url=self.config.local_base_url,
                )
            return self._local_client
        if self._client is None:
            self._client = anthropic.AsyncAnthropic(api_key=self.api_key)
        return self._client

    async def summarize_batch(self, state: ThreadState, batch: list[Message]) -> list[Observation]:
        if not batch:
            return []

        transcript = build_transcript(batch, self.config.max_transcript_chars)
        model = state.metadata.get("llm_model") or self.model
        client = self._client_for(state)

        response = await client.messages.create(
            model=model,
            max_tokens=self.config.max_tokens,
            temperature=self.config.temperature,
            system=BATCH_SUMMARY_PROMPT,
            messages=[{"role": "user", "content": BATCH_USER_TEMPLATE.format(transcript=transcript)}],
        )

        text = "".join(block.text for block in response.content if getattr(block, "type", None) == "text")
        data = parse_json(text)
        raw = data.get("observations") if isinstance(data, dict) else None
        if not isinstance(raw, list):
            logger.warning(f"Summarizer returned no observation list for thread {state.thread_id}")
            return []

        observations = [obs for obs in (Observation.from_dict(item) for item in raw) if obs is not None]
        logger.debug(f"Parsed {len(observations)}/{len(raw)} observations for thread {state.thread_id}")
        return observations[: self.config.max_observations]
