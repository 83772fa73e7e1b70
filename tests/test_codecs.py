"""Tests for JSON, CSV, form-data and URL-encoded row codecs."""

import datetime as dt
import json

import pytest

from conftest import HASHID_KEY
from conftest import make_api

from namerec.oino import UNDEFINED
from namerec.oino import ContentType
from namerec.oino import MessageLevel
from namerec.oino import OINOResult
from namerec.oino.codecs import read_rows
from namerec.oino.codecs import write_rows

BLOBS_DDL = 'id INTEGER PRIMARY KEY, data BLOB, name TEXT'
ORDER_ROW = [1, 'a', None, True, dt.datetime(2024, 1, 31, 12), 'x']


class TestJson:
    """Test the JSON codec."""

    def test_write(self) -> None:
        """Test one object per line with the id first."""
        text = write_rows(make_api().datamodel, [ORDER_ROW], ContentType.JSON, OINOResult())
        assert text == (
            '[\r\n'
            '{"_OINOID_":"1","id":1,"name":"a","amount":null,"paid":true,'
            '"created":"2024-01-31T12:00:00.000Z","note":"x"}\r\n'
            ']'
        )

    def test_write_hashid(self) -> None:
        """Test that hashed keys are written as strings matching the id."""
        text = write_rows(make_api(hashid_key=HASHID_KEY).datamodel, [ORDER_ROW], ContentType.JSON, OINOResult())
        (item,) = json.loads(text)
        assert isinstance(item['id'], str)
        assert item['id'] == item['_OINOID_']

    def test_read_array(self) -> None:
        """Test arrays, empty strings and unknown properties."""
        result = OINOResult()
        rows = read_rows(
            make_api().datamodel,
            '[{"name": "a", "extra": 1}, {"_OINOID_": "9", "name": "", "paid": false}]',
            ContentType.JSON,
            result,
        )

        assert rows == [
            [UNDEFINED, 'a', UNDEFINED, UNDEFINED, UNDEFINED, UNDEFINED],
            [UNDEFINED, '', UNDEFINED, False, UNDEFINED, UNDEFINED],
        ]
        assert result.filter_messages([MessageLevel.INFO]) == ['OINO INFO (decode): Field extra not found in orders']

    def test_read_object_with_nested_json(self) -> None:
        """Test a single object whose nested value is stored as JSON text."""
        rows = read_rows(make_api().datamodel, '{"id": 3, "note": {"a": [1]}}', ContentType.JSON, OINOResult())
        assert rows == [[3, UNDEFINED, UNDEFINED, UNDEFINED, UNDEFINED, '{"a": [1]}']]

    def test_read_nested_json_for_number(self) -> None:
        """Test that a nested value for a numeric field is dropped with a warning."""
        result = OINOResult()
        rows = read_rows(make_api().datamodel, '{"name": "a", "id": [1]}', ContentType.JSON, result)

        assert rows == [[UNDEFINED, 'a', UNDEFINED, UNDEFINED, UNDEFINED, UNDEFINED]]
        assert result.filter_messages([MessageLevel.WARNING]) == [
            "OINO WARNING (decode): Invalid value for field id: '[1]'"
        ]

    def test_read_invalid(self) -> None:
        """Test malformed JSON and rows without known fields."""
        result = OINOResult()
        assert read_rows(make_api().datamodel, '[{"name": ', ContentType.JSON, result) == []
        assert read_rows(make_api().datamodel, '[{"unknown": 1}]', ContentType.JSON, result) == []
        assert len(result.filter_messages([MessageLevel.WARNING])) == 2
        assert result.success is True


class TestCsv:
    """Test the CSV codec."""

    def test_write(self) -> None:
        """Test header, quoting and null tokens."""
        row = [1, 'He said "hi", twice', None, False, None, None]
        text = write_rows(make_api().datamodel, [row], ContentType.CSV, OINOResult())
        assert text == (
            '"_OINOID_","id","name","amount","paid","created","note"\r\n'
            '"1","1","He said ""hi"", twice",null,"false",null,null\r\n'
        )

    def test_read(self) -> None:
        """Test quoted, null and absent cells."""
        body = 'id,name,note\r\n1,"a, b",null\r\n,plain,\r\n'
        rows = read_rows(make_api().datamodel, body, ContentType.CSV, OINOResult())
        assert rows == [
            [1, 'a, b', UNDEFINED, UNDEFINED, UNDEFINED, None],
            [UNDEFINED, 'plain', UNDEFINED, UNDEFINED, UNDEFINED, UNDEFINED],
        ]

    def test_read_multiline_and_quoted_null(self) -> None:
        """Test a quoted value spanning lines and the quoted null string."""
        body = 'name,note\r\n"line 1\r\nline 2","null"\r\n'
        rows = read_rows(make_api().datamodel, body, ContentType.CSV, OINOResult())
        assert rows == [[UNDEFINED, 'line 1\r\nline 2', UNDEFINED, UNDEFINED, UNDEFINED, 'null']]

    def test_column_count_mismatch(self) -> None:
        """Test that a short line is skipped with a warning."""
        result = OINOResult()
        rows = read_rows(make_api().datamodel, 'id,name\r\n1\r\n2,b\r\n', ContentType.CSV, result)

        assert rows == [[2, 'b', UNDEFINED, UNDEFINED, UNDEFINED, UNDEFINED]]
        assert result.filter_messages([MessageLevel.WARNING]) == [
            'OINO WARNING (decode): CSV line 2 has 1 values, header has 2'
        ]


class TestFormData:
    """Test the multipart form-data codec."""

    def test_round_trip_with_blob(self) -> None:
        """Test that blobs travel as BASE64 file parts."""
        datamodel = make_api(BLOBS_DDL, 'blobs').datamodel
        text = write_rows(datamodel, [[1, b'\x00\x01', 'x y']], ContentType.FORMDATA, OINOResult(), 'XyZ')

        assert text.startswith('--XyZ\r\nContent-Disposition: form-data; name="_OINOID_"\r\n\r\n1\r\n')
        assert 'Content-Transfer-Encoding: BASE64\r\n\r\nAAE=\r\n' in text
        assert text.endswith('--XyZ--\r\n')
        assert read_rows(datamodel, text, ContentType.FORMDATA, OINOResult(), 'XyZ') == [[1, b'\x00\x01', 'x y']]

    def test_write_first_row_only(self) -> None:
        """Test the warning for dropped rows."""
        result = OINOResult()
        rows = [[1, None, 'a'], [2, None, 'b']]
        write_rows(make_api(BLOBS_DDL, 'blobs').datamodel, rows, ContentType.FORMDATA, result)
        assert result.filter_messages([MessageLevel.WARNING]) == [
            'OINO WARNING (write): Form data holds one row, 1 rows not written'
        ]

    def test_read_raw_file_and_empty_part(self) -> None:
        """Test raw file bytes and empty parts as null."""
        body = (
            b'--b\r\n'
            b'Content-Disposition: form-data; name="data"; filename="data.bin"\r\n'
            b'Content-Type: application/octet-stream\r\n\r\n'
            b'\xff\xfe\r\n'
            b'--b\r\n'
            b'Content-Disposition: form-data; name="name"\r\n\r\n'
            b'\r\n'
            b'--b--\r\n'
        )
        rows = read_rows(make_api(BLOBS_DDL, 'blobs').datamodel, body, ContentType.FORMDATA, OINOResult(), 'b')
        assert rows == [[UNDEFINED, b'\xff\xfe', None]]

    def test_missing_boundary(self) -> None:
        """Test a body without the boundary."""
        result = OINOResult()
        assert read_rows(make_api().datamodel, 'name=a', ContentType.FORMDATA, result, 'b') == []
        assert result.messages == ['OINO WARNING (decode): Multipart boundary not found in body']


class TestUrlEncode:
    """Test the URL-encoded codec."""

    def test_write(self) -> None:
        """Test pairs with encoded values and empty nulls."""
        datamodel = make_api(BLOBS_DDL, 'blobs').datamodel
        text = write_rows(datamodel, [[1, None, 'a&b c']], ContentType.URLENCODE, OINOResult())
        assert text == '_OINOID_=1&id=1&data=&name=a%26b%20c'

    def test_write_then_read(self) -> None:
        """Test that a written row reads back with its typed values."""
        datamodel = make_api(BLOBS_DDL, 'blobs').datamodel
        row = [1, b'\x01\xff', 'a&b c=d+e']
        text = write_rows(datamodel, [row], ContentType.URLENCODE, OINOResult())

        result = OINOResult()
        assert read_rows(datamodel, text, ContentType.URLENCODE, result) == [row]
        assert result.messages == []

    def test_read(self) -> None:
        """Test first line decoding, empty values as null and extra lines."""
        result = OINOResult()
        body = 'name=a+b%21&note=&unknown=1\r\nname=ignored'
        rows = read_rows(make_api().datamodel, body, ContentType.URLENCODE, result)

        assert rows == [[UNDEFINED, 'a b!', UNDEFINED, UNDEFINED, UNDEFINED, None]]
        assert result.filter_messages([MessageLevel.WARNING]) == [
            'OINO WARNING (decode): URL-encoded data holds one row, 1 lines ignored'
        ]


class TestDispatch:
    """Test content type dispatch."""

    def test_unsupported_type(self) -> None:
        """Test that HTML has no row codec."""
        with pytest.raises(ValueError):
            read_rows(make_api().datamodel, '', ContentType.HTML, OINOResult())
        with pytest.raises(ValueError):
            write_rows(make_api().datamodel, [], ContentType.HTML, OINOResult())

    def test_bytes_body(self) -> None:
        """Test that byte bodies are decoded as UTF-8."""
        rows = read_rows(make_api().datamodel, '{"name": "ä"}'.encode(), ContentType.JSON, OINOResult())
        assert rows[0][1] == 'ä'
