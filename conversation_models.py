"""Normalized conversation model and the composite analytics result."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Optional


@dataclass(frozen=True)
class ParsedMessage:
    """A single user or assistant message with non-empty text."""

    id: str
    role: str
    content: str
    timestamp: Optional[datetime] = None
    model: Optional[str] = None
    word_count: int = 0
    # Raw tree links; flattening does not follow them
    parent_id: Optional[str] = None
    children_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class ParsedConversation:
    """A conversation flattened into timestamp-ordered messages.

    Counts are precomputed by the normalizer.  Only user and assistant
    messages are retained, so ``message_count`` always equals
    ``user_message_count + assistant_message_count``.
    """

    id: str
    title: str
    created_at: datetime
    updated_at: datetime
    messages: tuple[ParsedMessage, ...]
    model: str
    message_count: int
    user_message_count: int
    assistant_message_count: int
    word_count: int
    user_word_count: int

    def user_messages(self) -> list[ParsedMessage]:
        return [m for m in self.messages if m.role == "user"]


@dataclass(frozen=True)
class AnalyticsResult:
    """Every derived section for one uploaded export.

    Section values are plain JSON-friendly structures; dates are
    ISO-8601 strings.  Only the top level is frozen: the section dicts
    and lists are ordinary mutable containers shared with the caller.
    Use ``as_dict()`` for a private copy before editing anything.
    """

    overview: dict[str, Any]
    time_patterns: dict[str, Any]
    top_topics: list[dict]
    categories: list[dict]
    model_usage: list[dict]
    personality: dict[str, Any]
    achievements: list[dict]
    word_cloud: list[dict]
    mood_journey: list[dict]
    evolution: list[dict]
    power_metrics: dict[str, Any]
    fun_facts: list[dict]
    predictions: list[str]
    time_machine: dict[str, Any]
    generated_at: str = field(default_factory=lambda: datetime.now().isoformat())

    def as_dict(self) -> dict[str, Any]:
        """Return a deep-copied plain dict, safe to serialize or mutate."""
        return asdict(self)
