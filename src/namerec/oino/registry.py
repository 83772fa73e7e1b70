"""Dialect registry for OINO."""

from collections.abc import Iterable

from namerec.oino.core.config import Dialect
from namerec.oino.core.exceptions import OINOConfigError
from namerec.oino.dialects import BUILTIN_DIALECTS
from namerec.oino.dialects import SqlDialect


class DialectRegistry:
    """
    Registry for dialect adapters.
    Maps dialect tags to the adapter used for quoting, literals and introspection.

    An instance is owned by the factory that builds databases; there is no
    process wide registry.
    """

    def __init__(self, dialects: Iterable[SqlDialect] | None = None) -> None:
        """
        Initialize registry.

        Args:
            dialects: Adapters to register (defaults to the built-in ones)
        """
        self._dialects: dict[Dialect, SqlDialect] = {}
        for adapter in BUILTIN_DIALECTS if dialects is None else dialects:
            self.register(adapter)

    def register(self, adapter: SqlDialect) -> None:
        """
        Register an adapter, replacing any adapter for the same dialect.

        Args:
            adapter: Dialect adapter
        """
        self._dialects[adapter.dialect] = adapter

    def unregister(self, dialect: Dialect) -> None:
        """
        Unregister an adapter.

        Args:
            dialect: Dialect tag
        """
        self._dialects.pop(dialect, None)

    def get(self, dialect: Dialect | str) -> SqlDialect:
        """
        Get adapter for a dialect.

        Args:
            dialect: Dialect tag or its name

        Returns:
            Dialect adapter

        Raises:
            OINOConfigError: If the dialect is not registered
        """
        try:
            key = Dialect(dialect)
        except ValueError as e:
            msg = f'Unknown dialect: {dialect}'
            raise OINOConfigError(msg) from e
        if key not in self._dialects:
            msg = f'Dialect not registered: {key.value}'
            raise OINOConfigError(msg)
        return self._dialects[key]

    def list_dialects(self) -> list[str]:
        """List registered dialect names."""
        return sorted(dialect.value for dialect in self._dialects)
