"""Tests for truthiness, text splitting, datetime helpers and results."""

import datetime as dt
from decimal import Decimal

import pytest

from namerec.oino import UNDEFINED
from namerec.oino import MessageLevel
from namerec.oino import OINOResult
from namerec.oino import is_truthy
from namerec.oino.core.result import strip_message_tag
from namerec.oino.core.utils import find_closing_bracket
from namerec.oino.core.utils import format_iso_datetime
from namerec.oino.core.utils import parse_iso_datetime
from namerec.oino.core.utils import split_top_level


class TestIsTruthy:
    """Test canonical boolean coercion."""

    @pytest.mark.parametrize(
        'value',
        [None, UNDEFINED, False, 0, 0.0, Decimal(0), '', '  ', 'false', 'FALSE', 'False', '0', '000', b'\x00', b''],
    )
    def test_falsy_values(self, value) -> None:  # noqa: ANN001
        """Test values that coerce to False."""
        assert is_truthy(value) is False

    @pytest.mark.parametrize('value', [True, 1, -1, 0.5, 'true', 'yes', '1', '010', 'no', b'\x01'])
    def test_truthy_values(self, value) -> None:  # noqa: ANN001
        """Test values that coerce to True."""
        assert is_truthy(value) is True


class TestSplitTopLevel:
    """Test bracket and quote aware splitting."""

    def test_keeps_bracketed_commas(self) -> None:
        """Test that commas inside brackets do not split."""
        assert split_top_level('a DECIMAL(10,2), b TEXT') == ['a DECIMAL(10,2)', 'b TEXT']

    def test_keeps_quoted_commas(self) -> None:
        """Test that commas inside quotes do not split."""
        assert split_top_level('"a,b", [c,d], e') == ['"a,b"', '[c,d]', 'e']

    def test_drops_empty_parts(self) -> None:
        """Test that empty parts are removed."""
        assert split_top_level(' a ,, b ,') == ['a', 'b']

    def test_find_closing_bracket(self) -> None:
        """Test matching bracket lookup."""
        assert find_closing_bracket('(a(b))c', 0) == 5
        assert find_closing_bracket('(a(b)', 0) == -1


class TestDatetime:
    """Test ISO datetime helpers."""

    def test_format_naive_as_utc(self) -> None:
        """Test that naive datetimes format as UTC with milliseconds."""
        value = dt.datetime(2024, 1, 31, 12, 30, 5, 123456)
        assert format_iso_datetime(value) == '2024-01-31T12:30:05.123Z'

    def test_format_converts_timezone(self) -> None:
        """Test that aware datetimes are converted to UTC."""
        value = dt.datetime(2024, 1, 31, 14, 0, tzinfo=dt.timezone(dt.timedelta(hours=2)))
        assert format_iso_datetime(value) == '2024-01-31T12:00:00.000Z'

    def test_format_date(self) -> None:
        """Test that plain dates keep their date form."""
        assert format_iso_datetime(dt.date(2024, 1, 31)) == '2024-01-31'

    def test_parse(self) -> None:
        """Test parsing with Z suffix, space separator and invalid text."""
        assert parse_iso_datetime('2024-01-31T12:00:00.000Z') == dt.datetime(2024, 1, 31, 12, tzinfo=dt.timezone.utc)
        assert parse_iso_datetime('2024-01-31 12:00:00') == dt.datetime(2024, 1, 31, 12)
        assert parse_iso_datetime('yesterday') is None


class TestResult:
    """Test result status and message handling."""

    def test_set_error_keeps_previous_error(self) -> None:
        """Test that a second error moves the first one to the messages."""
        result = OINOResult()
        result.set_error(400, 'first', 'GET')
        result.set_error(500, 'second')

        assert result.success is False
        assert result.status_code == 500
        assert result.status_message == 'OINO ERROR: second'
        assert result.messages == ['OINO ERROR (GET): first']

    def test_filter_messages_and_headers(self) -> None:
        """Test selecting messages by class and rendering them as headers."""
        result = OINOResult()
        result.add_warning('too long', 'POST')
        result.add_info('unknown field')
        result.add_debug('SQL: SELECT 1;')
        result.add_error('broken')

        assert result.filter_messages([MessageLevel.INFO]) == ['OINO INFO: unknown field']
        assert result.messages_as_headers() == {
            'X-OINO-MESSAGE-1': 'OINO WARNING (POST): too long',
            'X-OINO-MESSAGE-2': 'OINO ERROR: broken',
        }

    def test_strip_message_tag(self) -> None:
        """Test removing tag and operation from a message."""
        assert strip_message_tag('OINO ERROR (select): no such table: x') == 'no such table: x'
        assert strip_message_tag('plain') == 'plain'

    def test_set_ok_keeps_messages(self) -> None:
        """Test resetting status."""
        result = OINOResult().add_warning('w')
        result.set_error(405, 'bad').set_ok()
        assert result.success is True
        assert result.status_message == 'OK'
        assert result.messages == ['OINO WARNING: w']
