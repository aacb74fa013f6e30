"""Unit tests for the reply shaper."""

from __future__ import annotations

import pytest

from redis_table.domain.services import ReplyShaper, decode_text
from redis_table.domain.value_objects import (
    COUNT_SCHEMA,
    FIELD_VALUE_SCHEMA,
    RESULT_SCHEMA,
    VALUE_SCHEMA,
    ColumnType,
    Command,
    IntegerReply,
    ListReply,
    MapReply,
    NullReply,
    OtherReply,
    ScalarReply,
    SetReply,
)


def _values(result) -> list[tuple]:
    return [row.values for row in result]


@pytest.mark.unit
class TestReplyShaper:
    """Tests for ReplyShaper.shape."""

    @pytest.fixture
    def shaper(self) -> ReplyShaper:
        return ReplyShaper()

    def test_null_reply(self, shaper: ReplyShaper) -> None:
        """A missing key yields one null row in a value column."""
        result = shaper.shape(NullReply())

        assert result.schema == VALUE_SCHEMA
        assert result.schema[0].type is ColumnType.TEXT
        assert _values(result) == [(None,)]

    def test_scalar_bytes_decoded(self, shaper: ReplyShaper) -> None:
        result = shaper.shape(ScalarReply("héllo".encode("utf-8")))

        assert result.schema == VALUE_SCHEMA
        assert _values(result) == [("héllo",)]

    def test_scalar_str(self, shaper: ReplyShaper) -> None:
        assert _values(shaper.shape(ScalarReply("OK"))) == [("OK",)]

    def test_integer_reply(self, shaper: ReplyShaper) -> None:
        result = shaper.shape(IntegerReply(42))

        assert result.schema == COUNT_SCHEMA
        assert result.schema[0].type is ColumnType.INTEGER
        assert _values(result) == [(42,)]

    def test_list_reply_in_order(self, shaper: ReplyShaper) -> None:
        result = shaper.shape(ListReply((b"a", b"b", b"c")))

        assert result.schema == VALUE_SCHEMA
        assert _values(result) == [("a",), ("b",), ("c",)]

    @pytest.mark.parametrize("reply", [ListReply(()), SetReply(())])
    def test_empty_collection(self, shaper: ReplyShaper, reply) -> None:
        result = shaper.shape(reply)

        assert result.schema == VALUE_SCHEMA
        assert _values(result) == [(None,)]

    def test_set_reply(self, shaper: ReplyShaper) -> None:
        result = shaper.shape(SetReply((b"x", b"y")))

        assert sorted(_values(result)) == [("x",), ("y",)]

    def test_empty_map(self, shaper: ReplyShaper) -> None:
        result = shaper.shape(MapReply(()))

        assert result.schema == FIELD_VALUE_SCHEMA
        assert _values(result) == [(None, None)]

    def test_map_reply_keeps_reply_order(self, shaper: ReplyShaper) -> None:
        result = shaper.shape(MapReply(((b"f2", b"v2"), (b"f1", b"v1"))))

        assert result.schema == FIELD_VALUE_SCHEMA
        assert [c.name for c in result.schema] == ["field", "value"]
        assert _values(result) == [("f2", "v2"), ("f1", "v1")]

    def test_other_reply(self, shaper: ReplyShaper) -> None:
        result = shaper.shape(OtherReply(2.5))

        assert result.schema == RESULT_SCHEMA
        assert _values(result) == [("2.5",)]

    def test_raw_values_are_classified(self, shaper: ReplyShaper) -> None:
        assert _values(shaper.shape({b"k": 1})) == [("k", "1")]
        assert _values(shaper.shape(None)) == [(None,)]

    def test_nested_elements_rendered_as_text(self, shaper: ReplyShaper) -> None:
        result = shaper.shape(ListReply(([b"a", 1], 7)))

        assert _values(result) == [("[b'a', 1]",), ("7",)]

    def test_command_kept(self, shaper: ReplyShaper) -> None:
        command = Command("GET", ("k",))

        assert shaper.shape(NullReply(), command).command is command


@pytest.mark.unit
class TestDecodeText:
    """Tests for decode_text."""

    def test_invalid_utf8_replaced(self) -> None:
        assert decode_text(b"\xffok") == "\ufffdok"

    def test_none(self) -> None:
        assert decode_text(None) is None

    def test_other_values(self) -> None:
        assert decode_text(3) == "3"
        assert decode_text(bytearray(b"ab")) == "ab"
