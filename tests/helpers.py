"""Shared test helpers for chat_wrapped tests.

Regular functions (not fixtures) that can be imported by any test module.
"""

from __future__ import annotations

import re
from datetime import datetime

# Minimal stop words used instead of the NLTK lists
STOP_WORDS = frozenset({"the", "and", "how", "what", "with", "for", "you", "can", "give"})


def fake_tagger(text: str) -> tuple[list[str], list[str]]:
    """Deterministic stand-in for the NLTK tagger: every word is a noun."""
    return [w.lower() for w in re.findall(r"[A-Za-z]+", text)], []


def ts(value: str) -> float:
    """Local epoch seconds for an ISO datetime string."""
    return datetime.fromisoformat(value).timestamp()


def make_node(
    role: str,
    text: str,
    create_time: float | None = None,
    model_slug: str | None = None,
    msg_id: str | None = None,
) -> dict:
    """Build one mapping node holding a single-part message."""
    message: dict = {
        "author": {"role": role},
        "create_time": create_time,
        "content": {"content_type": "text", "parts": [text]},
    }
    if msg_id:
        message["id"] = msg_id
    if model_slug:
        message["metadata"] = {"model_slug": model_slug}
    return {"message": message, "parent": None, "children": []}


def make_conversation(
    title: str,
    created: str,
    turns: list[tuple[str, str]],
    model_slug: str = "gpt-4",
    conversation_id: str | None = None,
) -> dict:
    """Build a conversation dict in the OpenAI export structure.

    Args:
        title: Conversation title.
        created: Local ISO datetime of creation.
        turns: (role, text) pairs, one minute apart from *created*.
        model_slug: Reported on every assistant message.
        conversation_id: Defaults to a slug of the title.

    Returns:
        A dict matching one element of conversations.json.
    """
    start = ts(created)
    mapping: dict[str, dict] = {"root": {"message": None, "parent": None, "children": []}}
    for i, (role, text) in enumerate(turns):
        mapping[f"node-{i}"] = make_node(
            role,
            text,
            create_time=start + i * 60,
            model_slug=model_slug if role == "assistant" else None,
            msg_id=f"msg-{i}",
        )
    return {
        "title": title,
        "create_time": start,
        "update_time": start + len(turns) * 60,
        "mapping": mapping,
        "conversation_id": conversation_id or title.lower().replace(" ", "-"),
    }


def make_sample_export() -> list[dict]:
    """Three conversations over two days with one question and one code block."""
    return [
        make_conversation(
            "Python help",
            "2024-03-04T10:00:00",
            [
                ("user", "How do I sort a list in python?"),
                ("assistant", "Use sorted():\n```python\nsorted(items)\n```"),
            ],
        ),
        make_conversation(
            "Dinner ideas",
            "2024-03-04T15:00:00",
            [
                ("user", "Give me a recipe for pasta tonight"),
                ("assistant", "Try carbonara."),
            ],
        ),
        make_conversation(
            "Trip plan",
            "2024-03-05T09:00:00",
            [
                ("user", "Plan a weekend in Lisbon"),
                ("assistant", "Day one: Belem and Alfama."),
            ],
        ),
    ]
