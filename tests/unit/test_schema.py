"""Unit tests for column types and schemas."""

from __future__ import annotations

from decimal import Decimal

import pytest

from memtable import Column, ColumnNotFoundError, ColumnType, NumberType, Schema, StringType


@pytest.mark.unit
class TestColumnType:
    """Tests for ColumnType value checks."""

    def test_aliases(self) -> None:
        """StringType and NumberType are the enum members."""
        assert StringType is ColumnType.STRING
        assert NumberType is ColumnType.NUMBER

    @pytest.mark.parametrize("value", [0, -3, 2.5, Decimal("1.10")])
    def test_number_accepts_numeric(self, value: object) -> None:
        assert NumberType.accepts(value)

    @pytest.mark.parametrize("value", ["30", None, True, False, [1]])
    def test_number_rejects_non_numeric(self, value: object) -> None:
        assert not NumberType.accepts(value)

    def test_string_accepts_only_str(self) -> None:
        assert StringType.accepts("")
        assert StringType.accepts("Alice")
        assert not StringType.accepts(30)
        assert not StringType.accepts(b"Alice")

    def test_parse(self) -> None:
        """Type names parse case-insensitively."""
        assert ColumnType.parse("string") is StringType
        assert ColumnType.parse("NUMBER") is NumberType
        assert ColumnType.parse(NumberType) is NumberType

    def test_parse_unknown(self) -> None:
        with pytest.raises(ValueError):
            ColumnType.parse("boolean")

    def test_python_type_rejected_with_value_error(self) -> None:
        with pytest.raises(ValueError, match="Unknown column type"):
            Schema({"a": str})  # type: ignore[dict-item]


@pytest.mark.unit
class TestSchema:
    """Tests for Schema construction and access."""

    def test_from_mapping_preserves_order(self) -> None:
        schema = Schema({"name": StringType, "age": NumberType, "city": StringType})

        assert schema.names == ("name", "age", "city")
        assert list(schema.columns.items()) == [
            ("name", StringType),
            ("age", NumberType),
            ("city", StringType),
        ]

    def test_of_keyword_arguments(self) -> None:
        schema = Schema.of(name=StringType, age="number")

        assert schema == Schema({"name": StringType, "age": NumberType})

    def test_from_columns(self) -> None:
        schema = Schema([Column("name", StringType), Column("age", NumberType)])

        assert schema.type_of("age") is NumberType
        assert len(schema) == 2
        assert list(schema) == ["name", "age"]

    def test_duplicate_column_rejected(self) -> None:
        with pytest.raises(ValueError, match="Duplicate"):
            Schema([Column("name", StringType), Column("name", NumberType)])

    def test_empty_column_name_rejected(self) -> None:
        with pytest.raises(ValueError):
            Schema({"": StringType})

    def test_columns_mapping_is_read_only(self) -> None:
        schema = Schema({"name": StringType})

        with pytest.raises(TypeError):
            schema.columns["age"] = NumberType  # type: ignore[index]

    def test_schema_is_immutable(self) -> None:
        schema = Schema({"name": StringType})

        with pytest.raises(AttributeError):
            schema.fields = ()  # type: ignore[misc]

    def test_type_of_unknown_column(self) -> None:
        schema = Schema({"name": StringType})

        with pytest.raises(ColumnNotFoundError) as exc_info:
            schema.type_of("age")
        assert exc_info.value.column == "age"

    def test_contains(self) -> None:
        schema = Schema({"name": StringType})

        assert "name" in schema
        assert "age" not in schema

    def test_equal_schemas_hash_equal(self) -> None:
        a = Schema({"name": StringType, "age": NumberType})
        b = Schema.of(name=StringType, age=NumberType)

        assert a == b
        assert hash(a) == hash(b)
        assert a != Schema.of(age=NumberType, name=StringType)
