"""Paths, cache and sampling limits for the Chat Wrapped pipeline."""

from __future__ import annotations

import os
from pathlib import Path

# Export location -- override with CHAT_WRAPPED_EXPORT_PATH env var
EXPORT_PATH = Path(os.environ.get("CHAT_WRAPPED_EXPORT_PATH", "conversations.json"))

# CLI output directory -- override with CHAT_WRAPPED_OUTPUT_DIR env var
OUTPUT_DIR = Path(os.environ.get("CHAT_WRAPPED_OUTPUT_DIR", "chat_wrapped"))

# API cache, data only changes on a new export
CACHE_TTL_SECONDS = int(os.environ.get("CHAT_WRAPPED_CACHE_TTL", "3600"))

# Text sampling limits
MAX_TOPIC_TEXTS = 2000
MAX_WORD_CLOUD_TEXTS = 3000
TOPIC_TEXT_CHARS = 500
CATEGORY_USER_MESSAGES = 5
CATEGORY_MESSAGE_CHARS = 200
EVOLUTION_CHUNKS = 6
EVOLUTION_USER_MESSAGES = 3
EVOLUTION_MESSAGE_CHARS = 100
PREVIEW_CHARS = 150

# Result list sizes
MAX_TOPICS = 12
MAX_EVOLUTION_TOPICS = 5
MAX_WORDS = 80
