"""Shared fixtures for chat_wrapped tests."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from helpers import STOP_WORDS, fake_tagger, make_sample_export


@pytest.fixture()
def sample_export():
    """Three-conversation export as decoded JSON."""
    return make_sample_export()


@pytest.fixture()
def fake_nlp():
    """Swap the NLTK tagger and stop-word lists for deterministic fakes.

    Lets the full pipeline run without NLTK data installed.
    """
    with (
        patch("text_features.nltk_tagger", side_effect=fake_tagger),
        patch("text_features.default_stop_words", return_value=STOP_WORDS),
    ):
        yield


@pytest.fixture()
def mock_payload():
    """Return a minimal payload shaped like AnalyticsResult.as_dict()."""
    return {
        "generated_at": "2024-03-05T12:00:00",
        "overview": {"total_conversations": 3, "total_messages": 6},
        "time_patterns": {"busiest_hour": 9},
        "top_topics": [],
        "categories": [],
        "model_usage": [],
        "personality": {},
        "achievements": [],
        "word_cloud": [],
        "mood_journey": [],
        "evolution": [],
        "power_metrics": {},
        "fun_facts": [],
        "predictions": [],
        "time_machine": {},
    }


@pytest.fixture()
def client(mock_payload):
    """TestClient for app.py with mocked analytics data.

    Patches build_analytics_payload so no conversations.json is needed.
    Resets the module-level cache between tests.
    """
    import app as app_module

    with patch.object(
        app_module, "_cache", {"data": None, "built_at": 0.0}
    ):
        with patch(
            "app.build_analytics_payload", return_value=mock_payload
        ):
            with TestClient(app_module.app) as tc:
                yield tc
