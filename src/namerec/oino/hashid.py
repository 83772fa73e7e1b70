"""Reversible keyed obfuscation of primary key values."""

import hashlib
import hmac
import logging
import secrets

import base62
from cryptography.hazmat.primitives.ciphers import Cipher
from cryptography.hazmat.primitives.ciphers import algorithms
from cryptography.hazmat.primitives.ciphers import modes

from namerec.oino.core.exceptions import OINOConfigError
from namerec.oino.core.exceptions import OINOIdError

logger = logging.getLogger(__name__)

_MIN_CHECK_LENGTH = 4


class Hashid:
    """
    Encrypts primary key values into opaque base62 tokens.

    A token is a seed followed by the AES-CTR ciphertext of the value plus a
    keyed check suffix. The seed determines the counter block, so every
    token is decodable on its own. Seeds are derived from the value and a
    cell seed (static ids) or drawn at random (random ids). The check
    suffix makes decoding under a different key or domain fail instead of
    producing a wrong value.

    Attributes:
        MIN_LENGTH: Smallest allowed minimum token length
        MAX_LENGTH: Largest allowed minimum token length
    """

    MIN_LENGTH = 12
    MAX_LENGTH = 42

    def __init__(
        self,
        key: str,
        domain_id: str,
        min_length: int = MIN_LENGTH,
        random_ids: bool = False,
    ) -> None:
        """
        Initialize hashid codec.

        Args:
            key: AES-128 key as 32 hex characters
            domain_id: Context the tokens belong to (e.g. database and table)
            min_length: Minimum token length
            random_ids: Use a random seed for every encode

        Raises:
            OINOConfigError: If the key or length is invalid
        """
        try:
            key_bytes = bytes.fromhex(key)
        except ValueError as e:
            msg = 'Hashid key must be hexadecimal'
            raise OINOConfigError(msg) from e
        if len(key_bytes) != 16:
            msg = f'Hashid key must be 32 hex characters, got {len(key)}'
            raise OINOConfigError(msg)
        if not self.MIN_LENGTH <= min_length <= self.MAX_LENGTH:
            msg = f'Hashid length must be between {self.MIN_LENGTH} and {self.MAX_LENGTH}, got {min_length}'
            raise OINOConfigError(msg)

        self._key = key_bytes
        self._domain_id = domain_id
        self._min_length = min_length
        self._random_ids = random_ids
        self._seed_length = (min_length + 1) // 2
        self._body_length = min_length - self._seed_length

    @property
    def domain_id(self) -> str:
        """Context the tokens belong to."""
        return self._domain_id

    @property
    def random_ids(self) -> bool:
        """Whether every encode uses a random seed."""
        return self._random_ids

    def _mac(self, *parts: str) -> bytes:
        message = ' '.join((self._domain_id, *parts)).encode('utf-8')
        return hmac.new(self._key, message, hashlib.sha256).digest()

    def _cipher(self, seed: str) -> Cipher:
        counter_block = self._mac('iv', seed)[:16]
        return Cipher(algorithms.AES(self._key), modes.CTR(counter_block))

    def _check(self, seed: str, value: str) -> str:
        return base62.encodebytes(self._mac('check', seed, value))

    def encode(self, value: str | int, cell_seed: str = '') -> str:
        """
        Encode a value into a token.

        Args:
            value: Primary key value
            cell_seed: Extra context for static seeds (e.g. field name and row keys)

        Returns:
            Token of at least the configured length
        """
        text = str(value)
        nonce = secrets.token_bytes(32) if self._random_ids else self._mac('seed', cell_seed, text)
        seed = base62.encodebytes(nonce).rjust(self._seed_length, '0')[: self._seed_length]

        # Padding to body length + 1 bytes keeps the base62 body at least body length long.
        padding = max(self._body_length - len(text.encode('utf-8')), _MIN_CHECK_LENGTH)
        plaintext = f'{text} {self._check(seed, text)[:padding]}'.encode()

        encryptor = self._cipher(seed).encryptor()
        ciphertext = encryptor.update(plaintext) + encryptor.finalize()
        return seed + base62.encodebytes(ciphertext)

    def decode(self, token: str) -> str:
        """
        Decode a token back into its value.

        Args:
            token: Token produced by encode

        Returns:
            Original value as text

        Raises:
            OINOIdError: If the token is malformed or belongs to another key/domain
        """
        if len(token) <= self._seed_length:
            raise OINOIdError(token, f'Hashid token too short: {token}')
        seed, body = token[: self._seed_length], token[self._seed_length :]
        try:
            ciphertext = base62.decodebytes(body)
        except ValueError as e:
            raise OINOIdError(token, f'Hashid token is not base62: {token}') from e
        if any(char not in base62.CHARSET_DEFAULT for char in seed):
            raise OINOIdError(token, f'Hashid token is not base62: {token}')

        decryptor = self._cipher(seed).decryptor()
        plaintext = decryptor.update(ciphertext) + decryptor.finalize()
        try:
            text = plaintext.decode('utf-8')
        except UnicodeDecodeError as e:
            raise OINOIdError(token, f'Hashid token does not match this context: {token}') from e

        value, separator, check = text.rpartition(' ')
        if not separator or not value or len(check) < _MIN_CHECK_LENGTH:
            raise OINOIdError(token, f'Hashid token does not match this context: {token}')
        if not hmac.compare_digest(check, self._check(seed, value)[: len(check)]):
            raise OINOIdError(token, f'Hashid token does not match this context: {token}')
        return value
