"""Tests for export_parser.py: decoding, validation and normalization."""

from __future__ import annotations

import json
import logging
from datetime import datetime

import pytest

from export_parser import (
    DecodeError,
    EmptyResultError,
    ExportError,
    ValidationError,
    decode_export,
    load_export,
    parse_conversation,
    parse_conversations,
    validate_export,
)
from helpers import make_conversation, make_node, make_sample_export, ts


def _fixed_ids():
    counter = iter(range(1000))
    return lambda: f"generated-{next(counter)}"


# ── Decoding ────────────────────────────────


class TestDecodeExport:
    def test_decodes_bytes(self):
        assert decode_export(b'[{"title": "x"}]') == [{"title": "x"}]

    def test_decodes_text(self):
        assert decode_export('{"a": 1}') == {"a": 1}

    def test_strips_utf8_bom(self):
        assert decode_export(b'\xef\xbb\xbf[]') == []

    def test_invalid_json_raises_decode_error(self):
        with pytest.raises(DecodeError) as exc_info:
            decode_export(b"not json {")
        assert isinstance(exc_info.value.__cause__, json.JSONDecodeError)

    def test_invalid_utf8_raises_decode_error(self):
        with pytest.raises(DecodeError):
            decode_export(b"\xff\xfe\xfa")

    def test_decode_error_is_value_error(self):
        assert issubclass(DecodeError, ValueError)
        assert issubclass(DecodeError, ExportError)


class TestLoadExport:
    def test_reads_file(self, tmp_path):
        path = tmp_path / "conversations.json"
        path.write_text(json.dumps(make_sample_export()), encoding="utf-8")
        assert len(load_export(path)) == 3

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_export(tmp_path / "missing.json")


# ── Validation ──────────────────────────────


class TestValidateExport:
    def test_empty_list_rejected(self):
        assert validate_export([]) is False

    def test_object_rejected(self):
        assert validate_export({"a": 1}) is False

    def test_non_dict_first_element_rejected(self):
        assert validate_export([1, 2, 3]) is False

    def test_mapping_without_time_or_title_rejected(self):
        assert validate_export([{"mapping": {}}]) is False

    def test_missing_mapping_rejected(self):
        assert validate_export([{"title": "x", "create_time": 1}]) is False

    def test_mapping_and_title_accepted(self):
        assert validate_export([{"mapping": {}, "title": "x"}]) is True

    def test_mapping_and_create_time_accepted(self):
        assert validate_export([{"mapping": {}, "create_time": 1700000000}]) is True

    def test_only_first_element_inspected(self):
        assert validate_export([{"mapping": {}, "title": "x"}, "junk"]) is True


# ── Normalization ───────────────────────────


class TestParseConversation:
    def test_basic_fields(self):
        raw = make_conversation(
            "Python help",
            "2024-03-04T10:00:00",
            [("user", "How do I sort?"), ("assistant", "Use sorted().")],
        )
        conv = parse_conversation(raw)
        assert conv.id == "python-help"
        assert conv.title == "Python help"
        assert conv.created_at == datetime(2024, 3, 4, 10, 0)
        assert conv.message_count == 2
        assert conv.user_message_count == 1
        assert conv.assistant_message_count == 1
        assert conv.word_count == 6
        assert conv.user_word_count == 4
        assert conv.model == "gpt-4"

    def test_count_invariant_with_mixed_roles(self):
        raw = make_conversation("Mixed", "2024-01-01T12:00:00", [
            ("system", "You are helpful"),
            ("user", "hello there"),
            ("tool", "search results"),
            ("assistant", "hi"),
            ("user", "bye"),
        ])
        conv = parse_conversation(raw)
        assert conv.message_count == conv.user_message_count + conv.assistant_message_count
        assert conv.message_count == 3
        assert {m.role for m in conv.messages} == {"user", "assistant"}

    def test_empty_and_non_string_parts_dropped(self):
        raw = make_conversation("Parts", "2024-01-01T12:00:00", [("user", "real text")])
        raw["mapping"]["blank"] = make_node("user", "   ", create_time=ts("2024-01-01T12:05:00"))
        image = make_node("user", "", create_time=ts("2024-01-01T12:06:00"))
        image["message"]["content"]["parts"] = [{"asset_pointer": "file-1"}, "caption"]
        raw["mapping"]["image"] = image
        conv = parse_conversation(raw)
        assert [m.content for m in conv.messages] == ["real text", "caption"]

    def test_multiple_parts_joined_with_newline(self):
        raw = make_conversation("Parts", "2024-01-01T12:00:00", [("user", "a")])
        raw["mapping"]["node-0"]["message"]["content"]["parts"] = ["first", "second"]
        conv = parse_conversation(raw)
        assert conv.messages[0].content == "first\nsecond"

    def test_messages_sorted_by_timestamp(self):
        raw = {
            "title": "Out of order",
            "create_time": ts("2024-01-01T12:00:00"),
            "mapping": {
                "b": make_node("assistant", "second", create_time=ts("2024-01-01T12:02:00")),
                "a": make_node("user", "first", create_time=ts("2024-01-01T12:01:00")),
            },
        }
        conv = parse_conversation(raw, id_factory=lambda: "fixed")
        assert [m.content for m in conv.messages] == ["first", "second"]

    def test_message_id_falls_back_to_node_id(self):
        raw = {
            "title": "Ids",
            "create_time": 1,
            "mapping": {"node-x": make_node("user", "hello")},
        }
        conv = parse_conversation(raw, id_factory=lambda: "fixed")
        assert conv.messages[0].id == "node-x"
        assert conv.messages[0].timestamp is None

    def test_assistant_slug_overrides_default(self):
        raw = make_conversation(
            "Models", "2024-01-01T12:00:00",
            [("user", "q"), ("assistant", "a")], model_slug="gpt-4o",
        )
        raw["default_model_slug"] = "gpt-3.5"
        assert parse_conversation(raw).model == "gpt-4o"

    def test_last_assistant_slug_in_mapping_order_wins(self):
        raw = {
            "title": "Switch",
            "create_time": 1,
            "mapping": {
                "a": make_node("assistant", "one", create_time=2, model_slug="gpt-4"),
                "b": make_node("assistant", "two", create_time=1, model_slug="o1-mini"),
            },
        }
        assert parse_conversation(raw, id_factory=lambda: "x").model == "o1-mini"

    def test_user_slug_ignored(self):
        raw = {
            "title": "User slug",
            "default_model_slug": "gpt-3.5",
            "create_time": 1,
            "mapping": {"a": make_node("user", "hi", model_slug="gpt-4")},
        }
        assert parse_conversation(raw, id_factory=lambda: "x").model == "gpt-3.5"

    def test_model_defaults_to_unknown(self):
        raw = make_conversation("No model", "2024-01-01T12:00:00", [("user", "hi")])
        assert parse_conversation(raw).model == "unknown"

    def test_untitled_default(self):
        raw = make_conversation("x", "2024-01-01T12:00:00", [("user", "hi")])
        raw["title"] = None
        assert parse_conversation(raw).title == "Untitled"

    @pytest.mark.parametrize("title", [2024, ["a", "b"], {"text": "x"}, ""])
    def test_non_string_title_becomes_untitled(self, title):
        raw = make_conversation("x", "2024-01-01T12:00:00", [("user", "hi")])
        raw["title"] = title
        assert parse_conversation(raw).title == "Untitled"

    def test_generated_id_when_missing(self):
        raw = make_conversation("x", "2024-01-01T12:00:00", [("user", "hi")])
        del raw["conversation_id"]
        assert parse_conversation(raw, id_factory=lambda: "abc").id == "abc"

    def test_empty_mapping_returns_none(self):
        assert parse_conversation({"title": "x", "mapping": {}}) is None

    def test_no_usable_messages_returns_none(self):
        raw = {"title": "x", "mapping": {"root": {"message": None}}}
        assert parse_conversation(raw) is None

    def test_missing_create_time_falls_back_to_epoch(self, caplog):
        raw = make_conversation("No time", "2024-01-01T12:00:00", [("user", "hi")])
        del raw["create_time"]
        with caplog.at_level(logging.WARNING, logger="export_parser"):
            conv = parse_conversation(raw)
        assert conv.created_at == datetime.fromtimestamp(0)
        assert "epoch 0" in caplog.text


class TestParseConversations:
    def test_sorted_by_creation_time(self):
        raw = list(reversed(make_sample_export()))
        titles = [c.title for c in parse_conversations(raw)]
        assert titles == ["Python help", "Dinner ideas", "Trip plan"]

    def test_skips_non_dict_and_empty(self):
        raw = make_sample_export() + ["junk", {"title": "empty", "mapping": {}}]
        assert len(parse_conversations(raw)) == 3

    def test_deterministic(self):
        raw = make_sample_export()
        for conv in raw:
            del conv["conversation_id"]
        first = parse_conversations(raw, id_factory=_fixed_ids())
        second = parse_conversations(raw, id_factory=_fixed_ids())
        assert first == second

    def test_warns_when_nothing_usable(self, caplog):
        with caplog.at_level(logging.WARNING, logger="export_parser"):
            result = parse_conversations([{"title": "x", "mapping": {}}])
        assert result == []
        assert "none produced usable messages" in caplog.text


class TestErrorHierarchy:
    def test_validation_error_is_export_error(self):
        assert issubclass(ValidationError, ExportError)
        assert issubclass(ValidationError, ValueError)

    def test_empty_result_is_export_error(self):
        assert issubclass(EmptyResultError, ExportError)
