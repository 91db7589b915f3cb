"""Data types for conversation windows."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from convwindow.window.errors import InvalidMessageError

SUMMARY_FLAG = "is_conversation_summary"


class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"
    ERROR = "error"


class ObservationPriority:
    CRITICAL = "🔴"
    VALUABLE = "🟡"
    LOW = "⚪"


@dataclass(eq=False)
class Message:
    """One transcript entry.

    Equality is identity: two messages with the same role and content are
    still distinct entries in the window.
    """

    role: Role
    content: Any = ""
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.role, Role):
            try:
                self.role = Role(self.role)
            except ValueError:
                raise InvalidMessageError(f"Unknown message role: {self.role!r}") from None
        if self.metadata is None:
            self.metadata = {}

    @property
    def is_summary(self) -> bool:
        return bool(self.metadata.get(SUMMARY_FLAG))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Message:
        if not isinstance(data, dict):
            raise InvalidMessageError(f"Message must be a mapping, got {type(data).__name__}")
        return cls(
            role=data.get("role"),
            content=data.get("content", ""),
            metadata=dict(data.get("metadata") or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"role": self.role.value, "content": self.content}
        if self.metadata:
            d["metadata"] = self.metadata
        return d


@dataclass
class ThreadState:
    """A conversation thread: the live window plus its metadata bag.

    Recognised metadata keys are ``thread_id``, ``llm_local``, ``llm_model``
    and ``conversation_summaries``; anything else is carried untouched.
    """

    messages: list[Message] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def thread_id(self) -> str:
        return str(self.metadata.get("thread_id", "unknown"))

    def summary_log(self) -> list[dict[str, Any]]:
        if self.metadata.get("conversation_summaries") is None:
            self.metadata["conversation_summaries"] = []
        return self.metadata["conversation_summaries"]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ThreadState:
        return cls(
            messages=[Message.from_dict(m) for m in data.get("messages") or []],
            metadata=dict(data.get("metadata") or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "messages": [m.to_dict() for m in self.messages],
            "metadata": self.metadata,
        }


@dataclass
class Observation:
    priority: str
    content: str

    @classmethod
    def from_dict(cls, data: Any) -> Observation | None:
        """Build from a summarizer payload entry, or None if malformed."""
        if not isinstance(data, dict):
            return None
        priority = data.get("priority")
        content = data.get("content")
        if not isinstance(priority, str) or not isinstance(content, str):
            return None
        priority, content = priority.strip(), content.strip()
        if not priority or not content:
            return None
        return cls(priority=priority, content=content)

    def to_dict(self) -> dict[str, str]:
        return {"priority": self.priority, "content": self.content}


@dataclass
class SummaryRecord:
    """One entry of the durable ``conversation_summaries`` log."""

    thread_id: str
    cycle: int
    observations: list[Observation]
    placeholder: bool
    evicted_count: int
    evicted_roles: dict[str, int] = field(default_factory=dict)
    force_trimmed: int = 0
    error: str | None = None
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "thread_id": self.thread_id,
            "cycle": self.cycle,
            "created_at": self.created_at.isoformat(),
            "observations": [o.to_dict() for o in self.observations],
            "placeholder": self.placeholder,
            "evicted_count": self.evicted_count,
            "evicted_roles": self.evicted_roles,
        }
        if self.force_trimmed:
            d["force_trimmed"] = self.force_trimmed
        if self.error:
            d["error"] = self.error
        return d


@dataclass
class WindowOutcome:
    """What one ``perform_summarization`` call did."""

    summarized: bool
    before: int
    after: int
    batch_size: int = 0
    force_trimmed: int = 0
    observations: list[Observation] = field(default_factory=list)
    placeholder: bool = False
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "summarized": self.summarized,
            "before": self.before,
            "after": self.after,
            "batch_size": self.batch_size,
            "force_trimmed": self.force_trimmed,
            "observations": [o.to_dict() for o in self.observations],
            "placeholder": self.placeholder,
            "error": self.error,
        }
