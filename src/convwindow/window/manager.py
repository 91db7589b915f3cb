"""Window manager: keeps a thread's live window under its cap."""

from __future__ import annotations

import asyncio
from collections import Counter
from datetime import datetime

from convwindow.config.settings import get_settings
from convwindow.utils.logging import get_logger
from convwindow.window.errors import InvalidStateError
from convwindow.window.prompts import (
    OTHER_SECTION_TITLE,
    PLACEHOLDER_TEXT,
    SECTION_TITLES,
    SUMMARY_HEADER,
)
from convwindow.window.scoring import rank_for_eviction
from convwindow.window.summarizer import LLMSummarizer, Summarizer
from convwindow.window.types import (
    SUMMARY_FLAG,
    Message,
    Observation,
    Role,
    SummaryRecord,
    ThreadState,
    WindowOutcome,
)

logger = get_logger("window.manager")


def render_summary(observations: list[Observation]) -> str:
    """Render observations as a markdown summary grouped by priority."""
    if not observations:
        return PLACEHOLDER_TEXT

    grouped: dict[str, list[str]] = {title: [] for title in SECTION_TITLES.values()}
    grouped[OTHER_SECTION_TITLE] = []
    for obs in observations:
        title = SECTION_TITLES.get(obs.priority, OTHER_SECTION_TITLE)
        grouped[title].append(f"• {obs.content}")

    sections = [f"**{title}:**\n" + "\n".join(lines) for title, lines in grouped.items() if lines]
    return f"{SUMMARY_HEADER}\n\n" + "\n\n".join(sections)


class WindowManager:
    """Bounds ``ThreadState.messages`` to ``max_window`` entries.

    Overflowing entries are handed to a summarizer and replaced by a single
    synthesized summary message at the head of the window. The cap holds
    after every call whatever the summarizer does.
    """

    def __init__(
        self,
        summarizer: Summarizer | None = None,
        max_window: int | None = None,
        minimum_useful_batch: int | None = None,
        summarizer_timeout: float | None = None,
    ) -> None:
        settings = get_settings()
        self.summarizer = summarizer or LLMSummarizer()
        self.max_window = max_window if max_window is not None else settings.window.max_window
        self.minimum_useful_batch = (
            minimum_useful_batch if minimum_useful_batch is not None else settings.window.minimum_useful_batch
        )
        self.summarizer_timeout = (
            summarizer_timeout if summarizer_timeout is not None else settings.summarizer.timeout
        )
        if self.max_window < 1:
            raise ValueError(f"max_window must be >= 1, got {self.max_window}")
        if self.minimum_useful_batch < 1:
            raise ValueError(f"minimum_useful_batch must be >= 1, got {self.minimum_useful_batch}")
        self._running_tasks: dict[str, asyncio.Task] = {}

    @staticmethod
    def _validate(state: ThreadState) -> None:
        if state is None:
            raise InvalidStateError("Thread state is required")
        messages = getattr(state, "messages", None)
        if messages is None or not isinstance(messages, list):
            raise InvalidStateError("Thread state has no message list")
        if not isinstance(getattr(state, "metadata", None), dict):
            raise InvalidStateError("Thread state metadata must be a dict")
        for index, message in enumerate(messages):
            if not isinstance(message, Message):
                raise InvalidStateError(
                    f"Message at index {index} is {type(message).__name__}, expected Message"
                )

    def needs_summarization(self, state: ThreadState) -> bool:
        self._validate(state)
        return len(state.messages) > self.max_window

    def batch_size_for(self, total: int) -> int:
        # +1 leaves room for the summary entry inserted at the head
        return min(max(total - self.max_window + 1, self.minimum_useful_batch), total)

    def select_batch(self, messages: list[Message]) -> list[Message]:
        """Pick the messages to evict, returned in transcript order."""
        ranked = rank_for_eviction(messages)
        chosen = sorted(ranked[: self.batch_size_for(len(messages))])
        return [messages[i] for i in chosen]

    async def _summarize(self, state: ThreadState, batch: list[Message]) -> tuple[list[Observation], str | None]:
        timeout = self.summarizer_timeout if self.summarizer_timeout and self.summarizer_timeout > 0 else None
        try:
            result = await asyncio.wait_for(
                self.summarizer.summarize_batch(state, list(batch)),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"Summarizer timed out after {timeout}s for thread {state.thread_id}")
            return [], f"Summarizer timed out after {timeout}s"
        except Exception as e:
            logger.warning(f"Summarizer failed for thread {state.thread_id}: {e}")
            return [], str(e)

        if not isinstance(result, list):
            logger.warning(f"Summarizer returned {type(result).__name__} for thread {state.thread_id}")
            return [], f"Malformed summarizer response: {type(result).__name__}"

        observations = []
        for item in result:
            # Instances go through the same checks as raw payload entries
            obs = Observation.from_dict(item.to_dict() if isinstance(item, Observation) else item)
            if obs is not None:
                observations.append(obs)
        return observations, None

    def _force_trim(self, window: list[Message]) -> tuple[list[Message], int]:
        """Drop the highest-priority evictions after the head until the cap holds."""
        head, rest = window[0], window[1:]
        overflow = len(window) - self.max_window
        if overflow <= 0:
            return window, 0
        dropped = {id(rest[i]) for i in rank_for_eviction(rest)[:overflow]}
        return [head] + [m for m in rest if id(m) not in dropped], overflow

    async def perform_summarization(self, state: ThreadState) -> WindowOutcome:
        """Enforce the window cap on ``state``, mutating it in place.

        Below the cap this is a no-op. Above it, the oldest entries are
        summarized and replaced by one summary message, and a record is
        appended to ``state.metadata["conversation_summaries"]``.
        """
        self._validate(state)
        before = len(state.messages)
        if before <= self.max_window:
            return WindowOutcome(summarized=False, before=before, after=before)

        batch = self.select_batch(state.messages)
        roles = Counter(m.role.value for m in batch)
        logger.debug(
            f"Thread {state.thread_id}: evicting {len(batch)}/{before} messages "
            f"(max_window={self.max_window}, roles={dict(roles)})"
        )

        observations, error = await self._summarize(state, batch)
        placeholder = not observations
        if placeholder and error is None:
            logger.info(f"No observations for thread {state.thread_id}, inserting placeholder")

        log = state.summary_log()
        cycle = len(log) + 1
        summary = Message(
            role=Role.ASSISTANT,
            content=render_summary(observations),
            metadata={
                SUMMARY_FLAG: True,
                "cycle": cycle,
                "created_at": datetime.now().isoformat(),
            },
        )

        # Identity-based removal; the list may have grown while awaiting
        evicted = {id(m) for m in batch}
        window = [summary] + [m for m in state.messages if id(m) not in evicted]
        window, force_trimmed = self._force_trim(window)
        if force_trimmed:
            logger.info(f"Force-trimmed {force_trimmed} extra messages from thread {state.thread_id}")
        state.messages[:] = window

        record = SummaryRecord(
            thread_id=state.thread_id,
            cycle=cycle,
            observations=observations,
            placeholder=placeholder,
            evicted_count=len(batch),
            evicted_roles=dict(roles),
            force_trimmed=force_trimmed,
            error=error,
        )
        log.append(record.to_dict())

        logger.info(
            f"Summarized thread {state.thread_id}: {before} -> {len(state.messages)} messages, "
            f"{len(observations)} observations"
        )
        return WindowOutcome(
            summarized=True,
            before=before,
            after=len(state.messages),
            batch_size=len(batch),
            force_trimmed=force_trimmed,
            observations=observations,
            placeholder=placeholder,
            error=error,
        )

    @staticmethod
    def _task_key(state: ThreadState) -> str:
        # States without a thread id are told apart by identity
        thread_id = state.metadata.get("thread_id")
        return str(thread_id) if thread_id is not None else f"state-{id(state)}"

    def in_flight(self, key: str | ThreadState) -> bool:
        if isinstance(key, ThreadState):
            key = self._task_key(key)
        task = self._running_tasks.get(key)
        return task is not None and not task.done()

    def schedule(self, state: ThreadState) -> asyncio.Task | None:
        """Run ``perform_summarization`` in the background for this thread.

        Returns None when the window is under the cap or a run for the same
        thread is still in flight. Must be called from a running event loop.
        """
        self._validate(state)
        key = self._task_key(state)
        if self.in_flight(key):
            logger.debug(f"Skipping thread {key}: summarization already in flight")
            return None
        if not self.needs_summarization(state):
            return None

        task = asyncio.create_task(self._run_scheduled(state, key))
        self._running_tasks[key] = task
        logger.debug(f"Queued background summarization for thread {key}")
        return task

    async def _run_scheduled(self, state: ThreadState, key: str) -> WindowOutcome | None:
        try:
            return await self.perform_summarization(state)
        except Exception:
            logger.exception(f"Background summarization failed for thread {state.thread_id}")
            return None
        finally:
            self._running_tasks.pop(key, None)
