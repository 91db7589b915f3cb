"""Conversation memory backed by a bounded window."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from convwindow.window.manager import WindowManager
from convwindow.window.types import Message, Role, ThreadState, WindowOutcome


@dataclass
class ConversationMemory:
    """Manages one thread's conversation history for an agent loop."""

    state: ThreadState = field(default_factory=ThreadState)
    manager: WindowManager = field(default_factory=WindowManager)

    def add_system_message(self, content: str) -> Message:
        return self._append(Role.SYSTEM, content)

    def add_user_message(self, content: str) -> Message:
        return self._append(Role.USER, content)

    def add_assistant_message(self, content: Any) -> Message:
        """Add assistant message (text or content blocks)."""
        return self._append(Role.ASSISTANT, content)

    def add_tool_result(self, content: Any, tool_call_id: str | None = None) -> Message:
        metadata = {"tool_call_id": tool_call_id} if tool_call_id else {}
        return self._append(Role.TOOL, content, metadata)

    def add_error(self, content: str) -> Message:
        return self._append(Role.ERROR, content)

    def _append(self, role: Role, content: Any, metadata: dict[str, Any] | None = None) -> Message:
        message = Message(role=role, content=content, metadata=metadata or {})
        self.state.messages.append(message)
        return message

    async def compact(self) -> WindowOutcome:
        """Bring the window back under its cap."""
        return await self.manager.perform_summarization(self.state)

    def get_messages(self) -> list[dict[str, Any]]:
        return [{"role": m.role.value, "content": m.content} for m in self.state.messages]

    @property
    def summaries(self) -> list[dict[str, Any]]:
        return list(self.state.metadata.get("conversation_summaries", []))

    def clear(self) -> None:
        """Drop the live window; the summary log is kept."""
        self.state.messages.clear()
