"""Unit tests for ResultMetadata."""

from __future__ import annotations

import pytest

from redis_table.application import ResultMetadata
from redis_table.domain.errors import NotFoundError
from redis_table.domain.value_objects import COUNT_SCHEMA, FIELD_VALUE_SCHEMA, ColumnType


@pytest.mark.unit
class TestResultMetadata:
    """Tests for ResultMetadata."""

    def test_describes_columns(self) -> None:
        meta = ResultMetadata(FIELD_VALUE_SCHEMA)

        assert meta.column_count() == 2
        assert meta.column_name(1) == "field"
        assert meta.column_label(2) == "value"
        assert meta.column_type(2) is ColumnType.TEXT
        assert meta.column_type_name(1) == "VARCHAR"
        assert meta.column_class_name(1) == "str"

    def test_integer_column(self) -> None:
        meta = ResultMetadata(COUNT_SCHEMA)

        assert meta.column_type_name(1) == "BIGINT"
        assert meta.column_class_name(1) == "int"
        assert meta.is_signed(1)

    def test_flags(self) -> None:
        meta = ResultMetadata(FIELD_VALUE_SCHEMA)

        assert meta.is_nullable(1)
        assert meta.is_read_only(2)
        assert not meta.is_signed(1)

    def test_find_column_ignores_case(self) -> None:
        assert ResultMetadata(FIELD_VALUE_SCHEMA).find_column("VALUE") == 2

    def test_find_unknown_column(self) -> None:
        with pytest.raises(NotFoundError, match="Column 'missing' not found"):
            ResultMetadata(FIELD_VALUE_SCHEMA).find_column("missing")

    @pytest.mark.parametrize("position", [0, 3, -1])
    def test_position_out_of_range(self, position: int) -> None:
        with pytest.raises(NotFoundError):
            ResultMetadata(FIELD_VALUE_SCHEMA).column_name(position)
