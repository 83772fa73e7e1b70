"""Tests for typed field serialization and SQL literals."""

import datetime as dt
from decimal import Decimal

import pytest

from namerec.oino import UNDEFINED
from namerec.oino import ContentType
from namerec.oino import DataField
from namerec.oino import FieldKind
from namerec.oino.core.types import FieldParams
from namerec.oino.dialects import POSTGRESQL
from namerec.oino.dialects import SQLITE


def _field(kind: FieldKind, sql_type: str = '', max_length: int = 0, **flags) -> DataField:  # noqa: ANN003
    return DataField('value', kind, sql_type, SQLITE, max_length=max_length, params=FieldParams(**flags))


class TestSerialize:
    """Test cell to text conversion."""

    def test_canonical_text(self) -> None:
        """Test serialization without a wire format."""
        assert _field(FieldKind.NUMBER).serialize(42) == '42'
        assert _field(FieldKind.NUMBER).serialize(2.5) == '2.5'
        assert _field(FieldKind.BOOLEAN).serialize(True) == 'true'
        assert _field(FieldKind.BOOLEAN).serialize('0') == 'false'
        assert _field(FieldKind.BLOB).serialize(b'\x00\x01') == 'AAE='
        assert _field(FieldKind.DATETIME).serialize(dt.datetime(2024, 1, 31, 12)) == '2024-01-31T12:00:00.000Z'
        assert _field(FieldKind.STRING).serialize(None) is None
        assert _field(FieldKind.STRING).serialize(UNDEFINED) is UNDEFINED

    def test_json(self) -> None:
        """Test that numbers and booleans are unquoted in JSON."""
        assert _field(FieldKind.NUMBER).serialize(42, ContentType.JSON) == '42'
        assert _field(FieldKind.BOOLEAN).serialize(False, ContentType.JSON) == 'false'
        assert _field(FieldKind.STRING).serialize('a"b', ContentType.JSON) == '"a\\"b"'
        assert _field(FieldKind.NUMBER).serialize(None, ContentType.JSON) == 'null'

    def test_csv_escapes_quotes(self) -> None:
        """Test that CSV values are quoted with doubled embedded quotes."""
        field = _field(FieldKind.STRING)
        assert field.serialize('He said "hi", twice', ContentType.CSV) == '"He said ""hi"", twice"'
        assert field.serialize(None, ContentType.CSV) == 'null'
        assert field.serialize('null', ContentType.CSV) == '"null"'

    def test_urlencode(self) -> None:
        """Test URL encoding, with null as empty."""
        field = _field(FieldKind.STRING)
        assert field.serialize('a b&c', ContentType.URLENCODE) == 'a%20b%26c'
        assert field.serialize(None, ContentType.URLENCODE) == ''

    def test_html(self) -> None:
        """Test HTML escaping."""
        assert _field(FieldKind.STRING).serialize('<b>', ContentType.HTML) == '&lt;b&gt;'


class TestDeserialize:
    """Test text to cell conversion."""

    def test_number(self) -> None:
        """Test numbers, empty text and invalid text."""
        field = _field(FieldKind.NUMBER)
        assert field.deserialize('7') == 7
        assert field.deserialize('3.5') == 3.5
        assert field.deserialize('') is None
        assert field.deserialize('abc') is UNDEFINED
        assert field.deserialize('nan') is UNDEFINED

    def test_invalid_values_are_undefined(self) -> None:
        """Test that unparsable text never raises."""
        assert _field(FieldKind.BLOB).deserialize('not base64!') is UNDEFINED
        assert _field(FieldKind.DATETIME).deserialize('someday') is UNDEFINED

    def test_boolean(self) -> None:
        """Test the truthiness rule on text."""
        field = _field(FieldKind.BOOLEAN)
        assert field.deserialize('false') is False
        assert field.deserialize('00') is False
        assert field.deserialize('yes') is True

    def test_csv_tokens(self) -> None:
        """Test CSV null, absent and quoted tokens."""
        field = _field(FieldKind.STRING)
        assert field.deserialize('null', ContentType.CSV) is None
        assert field.deserialize('"null"', ContentType.CSV) == 'null'
        assert field.deserialize('', ContentType.CSV) is UNDEFINED
        assert field.deserialize('"He said ""hi"", twice"', ContentType.CSV) == 'He said "hi", twice'

    def test_json_and_urlencode_tokens(self) -> None:
        """Test JSON and URL encoded tokens."""
        field = _field(FieldKind.STRING)
        assert field.deserialize('"x"', ContentType.JSON) == 'x'
        assert field.deserialize('null', ContentType.JSON) is None
        assert field.deserialize('a%20b', ContentType.URLENCODE) == 'a b'
        assert field.deserialize('', ContentType.URLENCODE) is None

    @pytest.mark.parametrize(
        ('kind', 'cell'),
        [
            (FieldKind.STRING, 'tab\tand "quotes"'),
            (FieldKind.NUMBER, -12),
            (FieldKind.BOOLEAN, True),
            (FieldKind.BLOB, b'\x00\xffdata'),
            (FieldKind.DATETIME, dt.datetime(2024, 2, 29, 23, 59, 59, 123000, tzinfo=dt.timezone.utc)),
        ],
    )
    def test_round_trip(self, kind: FieldKind, cell: object) -> None:
        """Test that deserialize reverses serialize for each kind."""
        field = _field(kind)
        for content_type in (None, ContentType.JSON, ContentType.CSV, ContentType.FORMDATA, ContentType.URLENCODE):
            assert field.deserialize(field.serialize(cell, content_type), content_type) == cell


class TestSqlLiteral:
    """Test SQL literal rendering through the dialect."""

    def test_string_escaping(self) -> None:
        """Test quote doubling for SQLite strings."""
        assert _field(FieldKind.STRING).sql_literal("O'Brien") == "'O''Brien'"

    def test_number(self) -> None:
        """Test numeric literals, including validated text."""
        field = _field(FieldKind.NUMBER)
        assert field.sql_literal(5) == '5'
        assert field.sql_literal(Decimal('12.50')) == '12.50'
        assert field.sql_literal('3') == '3'
        with pytest.raises(ValueError):
            field.sql_literal('1; DROP TABLE orders')

    def test_null_and_undefined(self) -> None:
        """Test NULL rendering and rejection of absent cells."""
        assert _field(FieldKind.STRING).sql_literal(None) == 'NULL'
        with pytest.raises(ValueError):
            _field(FieldKind.STRING).sql_literal(UNDEFINED)

    def test_boolean_follows_truthiness(self) -> None:
        """Test that boolean literals use the truthiness rule."""
        field = _field(FieldKind.BOOLEAN)
        assert field.sql_literal('false') == '0'
        assert field.sql_literal('x') == '1'
        assert field.sql_literal(None) == '0'
        postgres_field = DataField('flag', FieldKind.BOOLEAN, 'boolean', POSTGRESQL)
        assert postgres_field.sql_literal(True) == 'true'

    def test_blob_and_datetime(self) -> None:
        """Test hex and ISO literals."""
        assert _field(FieldKind.BLOB).sql_literal(b'\x01\x02') == "X'0102'"
        assert _field(FieldKind.DATETIME).sql_literal(dt.datetime(2024, 1, 31, 12)) == "'2024-01-31T12:00:00.000Z'"


class TestDescribe:
    """Test debug descriptions."""

    def test_describe(self) -> None:
        """Test flags and length in the description."""
        key = DataField(
            'id',
            FieldKind.NUMBER,
            'INTEGER',
            SQLITE,
            params=FieldParams(is_primary_key=True, is_not_null=True, is_auto_increment=True),
        )
        name = DataField('name', FieldKind.STRING, 'VARCHAR', SQLITE, max_length=20)

        assert key.describe() == 'id: number INTEGER PK NOTNULL AUTOINC'
        assert name.describe() == 'name: string VARCHAR(20)'
        assert name.sql_column() == '"name"'


class TestValueLength:
    """Test the length compared against a column max length."""

    def test_value_length(self) -> None:
        """Test strings, bytes, numbers and missing cells."""
        assert _field(FieldKind.STRING).value_length('abc') == 3
        assert _field(FieldKind.STRING).value_length(12345) == 5
        assert _field(FieldKind.STRING).value_length(1.5) == 3
        assert _field(FieldKind.BLOB).value_length(b'\x00\x01') == 2
        assert _field(FieldKind.DATETIME).value_length(dt.datetime(2024, 1, 31, 12)) == len('2024-01-31T12:00:00.000Z')
        assert _field(FieldKind.STRING).value_length(None) == 0
        assert _field(FieldKind.STRING).value_length(UNDEFINED) == 0
