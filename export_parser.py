"""Decoding, validation and normalization of OpenAI conversation exports.

Turns the raw ``conversations.json`` list into ``ParsedConversation``
objects consumed by ``analytics.generate_analytics``.
"""

from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime
from functools import cmp_to_key
from pathlib import Path
from typing import Any, Callable

from conversation_models import ParsedConversation, ParsedMessage

logger = logging.getLogger(__name__)

KEPT_ROLES = ("user", "assistant")


class ExportError(Exception):
    """Base class for every reason an export cannot be analyzed."""


class DecodeError(ExportError, ValueError):
    """The input bytes are not valid JSON."""


class ValidationError(ExportError, ValueError):
    """The decoded JSON does not look like a conversation export."""


class EmptyResultError(ExportError):
    """The export is well-formed but holds no usable conversations."""


def decode_export(raw: bytes | str) -> Any:
    """Decode raw export bytes or text into a JSON value.

    Raises:
        DecodeError: If *raw* is not UTF-8 or not valid JSON.
    """
    try:
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8-sig")
        return json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise DecodeError(f"Invalid JSON file: {exc}") from exc


def load_export(path: str | Path) -> Any:
    """Load and decode an export file.

    Raises:
        FileNotFoundError: If the file at *path* does not exist.
        DecodeError: If the file contains invalid JSON.
    """
    return decode_export(Path(path).read_bytes())


def validate_export(data: Any) -> bool:
    """Shallow sniff test for the conversation export shape.

    Only the first element is inspected; malformed later elements are
    filtered out by ``parse_conversations``.

    Args:
        data: Any decoded JSON value.

    Returns:
        True if *data* is a non-empty list whose first element is a dict
        with a "mapping" key and a "create_time" or "title" key.
    """
    if not isinstance(data, list) or not data:
        return False
    sample = data[0]
    return (
        isinstance(sample, dict)
        and "mapping" in sample
        and ("create_time" in sample or "title" in sample)
    )


def _to_datetime(value: Any) -> datetime | None:
    """Convert an epoch-seconds value to a local datetime, or None."""
    if not value:
        return None
    try:
        return datetime.fromtimestamp(float(value))
    except (TypeError, ValueError, OSError, OverflowError):
        return None


def _conversation_time(raw: dict, key: str) -> datetime:
    """Read a conversation-level timestamp, defaulting to the epoch."""
    value = raw.get(key)
    if value == 0:
        return datetime.fromtimestamp(0)
    parsed = _to_datetime(value)
    if parsed is None:
        logger.warning(
            "Conversation %r has no usable %s (%r); using epoch 0.",
            raw.get("title"), key, value,
        )
        return datetime.fromtimestamp(0)
    return parsed


def _conversation_title(raw: dict) -> str:
    title = raw.get("title")
    if isinstance(title, str) and title:
        return title
    return "Untitled"


def _message_text(message: dict) -> str:
    """Join the string content parts of a message, dropping the rest."""
    content = message.get("content")
    if not isinstance(content, dict):
        return ""
    parts = content.get("parts")
    if not isinstance(parts, list):
        return ""
    return "\n".join(p for p in parts if isinstance(p, str)).strip()


def _compare_timestamps(a: ParsedMessage, b: ParsedMessage) -> int:
    # A missing timestamp compares equal to everything.
    if a.timestamp is None or b.timestamp is None:
        return 0
    if a.timestamp < b.timestamp:
        return -1
    if a.timestamp > b.timestamp:
        return 1
    return 0


def _parse_node(node_id: str, node: Any) -> tuple[ParsedMessage, str | None] | None:
    """Build a ParsedMessage from one mapping node.

    Returns:
        A (message, model_slug) pair, or None when the node holds no
        usable user/assistant text.
    """
    if not isinstance(node, dict):
        return None
    message = node.get("message")
    if not isinstance(message, dict):
        return None

    author = message.get("author")
    role = author.get("role") if isinstance(author, dict) else None
    if role not in KEPT_ROLES:
        return None

    text = _message_text(message)
    if not text:
        return None

    metadata = message.get("metadata")
    model_slug = metadata.get("model_slug") if isinstance(metadata, dict) else None
    children = node.get("children")

    parsed = ParsedMessage(
        id=str(message.get("id") or node_id),
        role=role,
        content=text,
        timestamp=_to_datetime(message.get("create_time")),
        model=model_slug or None,
        word_count=len(text.split()),
        parent_id=node.get("parent"),
        children_ids=tuple(children) if isinstance(children, list) else (),
    )
    return parsed, model_slug


def parse_conversation(
    raw: dict,
    id_factory: Callable[[], str] | None = None,
) -> ParsedConversation | None:
    """Flatten one raw conversation into a ParsedConversation.

    Nodes are visited in the mapping's own order; parent/children links
    are not followed, so branched or regenerated threads are merged.
    The conversation model is the last assistant-reported slug seen in
    that order, falling back to ``default_model_slug`` or "unknown".

    Args:
        raw: One conversation dict from the export.
        id_factory: Called for an identifier when the conversation has no
            ``conversation_id``.  Defaults to a random UUID4 string.

    Returns:
        The parsed conversation, or None if the mapping is missing/empty
        or no message survives filtering.
    """
    mapping = raw.get("mapping")
    if not isinstance(mapping, dict) or not mapping:
        return None

    model = raw.get("default_model_slug") or "unknown"
    messages: list[ParsedMessage] = []
    for node_id, node in mapping.items():
        result = _parse_node(node_id, node)
        if result is None:
            continue
        parsed, model_slug = result
        if model_slug and parsed.role == "assistant":
            model = model_slug
        messages.append(parsed)

    if not messages:
        return None

    messages.sort(key=cmp_to_key(_compare_timestamps))

    user_messages = [m for m in messages if m.role == "user"]
    assistant_messages = [m for m in messages if m.role == "assistant"]
    conversation_id = raw.get("conversation_id")
    if not conversation_id:
        conversation_id = (id_factory or _new_id)()

    return ParsedConversation(
        id=str(conversation_id),
        title=_conversation_title(raw),
        created_at=_conversation_time(raw, "create_time"),
        updated_at=_conversation_time(raw, "update_time"),
        messages=tuple(messages),
        model=str(model),
        message_count=len(messages),
        user_message_count=len(user_messages),
        assistant_message_count=len(assistant_messages),
        word_count=sum(m.word_count for m in messages),
        user_word_count=sum(m.word_count for m in user_messages),
    )


def _new_id() -> str:
    return str(uuid.uuid4())


def parse_conversations(
    raw_conversations: list,
    id_factory: Callable[[], str] | None = None,
) -> list[ParsedConversation]:
    """Normalize every raw conversation and sort by creation time.

    Args:
        raw_conversations: The decoded export list.  Non-dict entries and
            conversations without usable messages are skipped.
        id_factory: Identifier generator for conversations that lack a
            ``conversation_id``.

    Returns:
        ParsedConversation objects, ascending by ``created_at``.
    """
    parsed: list[ParsedConversation] = []
    for raw in raw_conversations:
        if not isinstance(raw, dict):
            continue
        conversation = parse_conversation(raw, id_factory=id_factory)
        if conversation is not None:
            parsed.append(conversation)

    skipped = len(raw_conversations) - len(parsed)
    if skipped:
        logger.debug("Skipped %d conversations without usable messages.", skipped)
    if raw_conversations and not parsed:
        logger.warning(
            "Loaded %d conversations but none produced usable messages. "
            "The OpenAI export format may have changed.",
            len(raw_conversations),
        )

    parsed.sort(key=lambda c: c.created_at)
    return parsed
