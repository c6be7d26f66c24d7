"""Tests for promptfactory.models."""

import dataclasses

import pytest

from promptfactory.models import (
    CHAT_TRANSCRIPT_DELIMITERS,
    DEFAULT_DELIMITERS,
    HYDRATION_DELIMITERS,
    DelimiterSet,
    Message,
    PromptParser,
    SerializationFormat,
)


class TestMessage:
    def test_to_dict_omits_missing_name(self):
        assert Message("user", "hi").to_dict() == {"role": "user", "content": "hi"}

    def test_to_dict_keeps_empty_name(self):
        assert Message("user", "hi", name="").to_dict() == {"role": "user", "content": "hi", "name": ""}

    def test_from_dict(self):
        msg = Message.from_dict({"role": "user", "content": "hi", "name": "ann"})
        assert msg == Message("user", "hi", name="ann")

    def test_from_dict_ignores_extra_keys(self):
        assert Message.from_dict({"role": "user", "content": "hi", "extra": 1}) == Message("user", "hi")

    def test_from_dict_requires_role_and_content(self):
        with pytest.raises(ValueError, match="role"):
            Message.from_dict({"content": "hi"})

    def test_from_dict_rejects_non_string_name(self):
        with pytest.raises(ValueError, match="name"):
            Message.from_dict({"role": "user", "content": "hi", "name": 3})

    def test_from_dict_rejects_non_mapping(self):
        with pytest.raises(ValueError, match="mapping"):
            Message.from_dict(["user", "hi"])

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            Message("user", "hi").role = "bot"


class TestDelimiterSet:
    def test_defaults(self):
        assert DEFAULT_DELIMITERS.as_tuple() == ("<&&pf-line&&>", "=>>", "$$")

    def test_partial_override(self):
        d = DelimiterSet(role="::")
        assert (d.line, d.role, d.name) == ("<&&pf-line&&>", "::", "$$")

    def test_empty_delimiter_rejected(self):
        with pytest.raises(ValueError, match="line delimiter"):
            DelimiterSet(line="")

    def test_hydration_delimiters_are_brace_free(self):
        for delim in HYDRATION_DELIMITERS.as_tuple():
            assert "{" not in delim and "}" not in delim

    def test_transcript_delimiters(self):
        assert CHAT_TRANSCRIPT_DELIMITERS.line == "\n"
        assert CHAT_TRANSCRIPT_DELIMITERS.role == ": "


class TestEnums:
    def test_serialization_format_values(self):
        assert SerializationFormat("json") is SerializationFormat.JSON
        assert SerializationFormat("custom") is SerializationFormat.CUSTOM

    def test_parser_value(self):
        assert PromptParser("f-string") is PromptParser.F_STRING
