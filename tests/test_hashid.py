"""Tests for hashid tokens and OINO-ID composition."""

import base62
import pytest

from conftest import HASHID_KEY

from namerec.oino import Hashid
from namerec.oino import OINOConfigError
from namerec.oino import OINOIdError
from namerec.oino.model.oino_id import compose_id
from namerec.oino.model.oino_id import split_id

OTHER_KEY = 'ffeeddccbbaa99887766554433221100'


class TestHashid:
    """Test primary key obfuscation."""

    def test_token_alphabet(self) -> None:
        """Test that tokens only use base62 characters."""
        hashid = Hashid(HASHID_KEY, 'test orders', random_ids=True)
        for value in ('0', '42', 'a b', '\u00e4' * 40):
            token = hashid.encode(value)
            assert set(token) <= set(base62.CHARSET_DEFAULT)
            assert hashid.decode(token) == value

    def test_static_ids_are_deterministic(self) -> None:
        """Test that the same value and seed give the same token."""
        hashid = Hashid(HASHID_KEY, 'test orders')
        token = hashid.encode('42', 'id 42')

        assert token == Hashid(HASHID_KEY, 'test orders').encode('42', 'id 42')
        assert len(token) >= Hashid.MIN_LENGTH
        assert hashid.decode(token) == '42'

    def test_minimum_length(self) -> None:
        """Test that tokens honour a longer minimum length."""
        hashid = Hashid(HASHID_KEY, 'test orders', min_length=30)
        token = hashid.encode(7)
        assert len(token) >= 30
        assert hashid.decode(token) == '7'

    def test_random_ids(self) -> None:
        """Test that random ids differ per encode but still decode."""
        hashid = Hashid(HASHID_KEY, 'test orders', random_ids=True)
        first = hashid.encode('42')
        second = hashid.encode('42')

        assert first != second
        assert hashid.decode(first) == hashid.decode(second) == '42'

    def test_wrong_context_fails(self) -> None:
        """Test that another key or domain cannot decode a token."""
        token = Hashid(HASHID_KEY, 'test orders').encode('42')

        with pytest.raises(OINOIdError):
            Hashid(OTHER_KEY, 'test orders').decode(token)
        with pytest.raises(OINOIdError):
            Hashid(HASHID_KEY, 'test customers').decode(token)

    def test_malformed_tokens(self) -> None:
        """Test short and non-base62 tokens."""
        hashid = Hashid(HASHID_KEY, 'test orders')
        with pytest.raises(OINOIdError):
            hashid.decode('42')
        with pytest.raises(OINOIdError):
            hashid.decode('abcdefghijkl-mn')

    def test_invalid_configuration(self) -> None:
        """Test key and length validation."""
        with pytest.raises(OINOConfigError):
            Hashid('not hex', 'd')
        with pytest.raises(OINOConfigError):
            Hashid('abcd', 'd')
        with pytest.raises(OINOConfigError):
            Hashid(HASHID_KEY, 'd', min_length=5)


class TestOinoId:
    """Test OINO-ID composition."""

    def test_separator_inside_value(self) -> None:
        """Test that separators inside values are escaped."""
        oino_id = compose_id(['a:b', '1'])
        assert oino_id == 'a%3Ab:1'
        assert split_id(oino_id) == ['a:b', '1']

    def test_custom_separator(self) -> None:
        """Test a separator that URL encoding leaves alone."""
        oino_id = compose_id(['a-b', 'c'], '-')
        assert oino_id == 'a%2Db-c'
        assert split_id(oino_id, '-') == ['a-b', 'c']
