"""Conversation window management."""

from convwindow.window.errors import InvalidMessageError, InvalidStateError, WindowError
from convwindow.window.manager import WindowManager
from convwindow.window.memory import ConversationMemory
from convwindow.window.scoring import age_score
from convwindow.window.summarizer import LLMSummarizer, NullSummarizer, Summarizer
from convwindow.window.types import (
    SUMMARY_FLAG,
    Message,
    Observation,
    ObservationPriority,
    Role,
    SummaryRecord,
    ThreadState,
    WindowOutcome,
)

__all__ = [
    "SUMMARY_FLAG",
    "ConversationMemory",
    "InvalidMessageError",
    "InvalidStateError",
    "LLMSummarizer",
    "Message",
    "NullSummarizer",
    "Observation",
    "ObservationPriority",
    "Role",
    "Summarizer",
    "SummaryRecord",
    "ThreadState",
    "WindowError",
    "WindowManager",
    "WindowOutcome",
    "age_score",
]
