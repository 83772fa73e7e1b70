"""Result sets returned by the database collaborator."""

from abc import ABC
from abc import abstractmethod
from collections.abc import Iterable
from collections.abc import Sequence

from namerec.oino.core.result import MessageLevel
from namerec.oino.core.result import message_level
from namerec.oino.core.result import strip_message_tag


class DataSet(ABC):
    """
    Forward cursor over raw result rows plus the messages of the statement.

    Attributes:
        messages: Tagged messages; error messages mark a failed statement
    """

    def __init__(self, messages: Iterable[str] | None = None) -> None:
        self.messages: list[str] = list(messages or [])

    @abstractmethod
    def is_empty(self) -> bool:
        """Whether the statement returned no rows."""

    @abstractmethod
    def is_eof(self) -> bool:
        """Whether the cursor is past the last row."""

    @abstractmethod
    async def advance(self) -> bool:
        """Move to the next row; returns False when past the last row."""

    @abstractmethod
    def current_row(self) -> list[object]:
        """Raw values of the current row (empty at end)."""

    @abstractmethod
    async def all_rows(self) -> list[list[object]]:
        """Remaining rows; leaves the cursor at end."""

    def has_errors(self) -> bool:
        return any(message_level(message) == MessageLevel.ERROR for message in self.messages)

    def first_error(self) -> str:
        """Text of the first error message (without its tag), or empty string."""
        for message in self.messages:
            if message_level(message) == MessageLevel.ERROR:
                return strip_message_tag(message)
        return ''


class MemoryDataSet(DataSet):
    """Data set holding all rows in memory."""

    def __init__(self, rows: Iterable[Sequence[object]] = (), messages: Iterable[str] | None = None) -> None:
        super().__init__(messages)
        self._rows = [list(row) for row in rows]
        self._position = 0

    def __len__(self) -> int:
        return len(self._rows)

    def is_empty(self) -> bool:
        return not self._rows

    def is_eof(self) -> bool:
        return self._position >= len(self._rows)

    async def advance(self) -> bool:
        if not self.is_eof():
            self._position += 1
        return not self.is_eof()

    def current_row(self) -> list[object]:
        return [] if self.is_eof() else self._rows[self._position]

    async def all_rows(self) -> list[list[object]]:
        rows = self._rows[self._position :]
        self._position = len(self._rows)
        return rows
