"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from convwindow.window.types import Message, Role, ThreadState


@pytest.fixture(autouse=True)
def _set_test_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Set up test environment variables."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-test-key")
    monkeypatch.setenv("CONVWINDOW_LOG_LEVEL", "DEBUG")
    # Reset singleton settings
    import convwindow.config.settings as settings_mod
    settings_mod._settings = None


@pytest.fixture
def make_state():
    """Build a thread state: one system message followed by role-cycled entries."""

    def _make(count: int, roles: tuple[Role, ...] = (Role.USER, Role.ASSISTANT), thread_id: str = "thread-test"):
        messages = [Message(role=Role.SYSTEM, content="system prompt")]
        for i in range(count):
            role = roles[i % len(roles)]
            messages.append(Message(role=role, content=f"{role.value} {i}"))
        return ThreadState(
            messages=messages,
            metadata={"thread_id": thread_id, "llm_local": False, "llm_model": "claude-3-haiku"},
        )

    return _make
