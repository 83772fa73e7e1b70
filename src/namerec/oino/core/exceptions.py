"""OINO exception hierarchy."""


class OINOError(Exception):
    """Base exception for OINO errors."""

    def __init__(self, message: str, table_name: str | None = None) -> None:
        """
        Initialize OINO exception.

        Args:
            message: Error message
            table_name: Optional table name context
        """
        self.table_name = table_name
        super().__init__(message)


class OINOConfigError(OINOError):
    """Resource could not be constructed from its configuration."""


class OINOIdError(OINOError):
    """OINO-ID or hashid token could not be decoded."""

    def __init__(
        self,
        oino_id: str,
        message: str | None = None,
        table_name: str | None = None,
    ) -> None:
        """
        Initialize id decode error.

        Args:
            oino_id: Offending id or token
            message: Optional custom message
            table_name: Optional table name context
        """
        self.oino_id = oino_id
        msg = message or f'Invalid id: {oino_id}'
        super().__init__(msg, table_name)


class OINOFilterError(OINOError):
    """Query parameter expression (filter, order, limit, select, aggregate) is invalid."""

    def __init__(self, expression: str, message: str | None = None) -> None:
        """
        Initialize filter error.

        Args:
            expression: Offending expression text
            message: Optional custom message
        """
        self.expression = expression
        msg = message or f'Invalid expression: {expression}'
        super().__init__(msg)
