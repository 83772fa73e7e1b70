"""Result objects carrying status and tagged messages."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from dataclasses import field
from enum import Enum

logger = logging.getLogger(__name__)

OK_MESSAGE = 'OK'


class MessageLevel(str, Enum):
    """Message classes, identified by a leading tag."""

    ERROR = 'OINO ERROR'
    WARNING = 'OINO WARNING'
    INFO = 'OINO INFO'
    DEBUG = 'OINO DEBUG'


def format_message(level: MessageLevel, message: str, operation: str | None = None) -> str:
    """
    Prefix a message with its tag and optional operation.

    Args:
        level: Message class
        message: Message text
        operation: Optional operation name (e.g. 'POST')

    Returns:
        Tagged message, e.g. 'OINO WARNING (POST): value too long'
    """
    if operation:
        return f'{level.value} ({operation}): {message}'
    return f'{level.value}: {message}'


def message_level(message: str) -> MessageLevel | None:
    """Get the class of a tagged message, or None if untagged."""
    for level in MessageLevel:
        if message.startswith(level.value):
            return level
    return None


@dataclass
class OINOResult:
    """
    Outcome of an operation: success flag, HTTP-like status and messages.

    A result is owned by one request and mutated only while that request is handled.
    """

    success: bool = True
    status_code: int = 200
    status_message: str = OK_MESSAGE
    messages: list[str] = field(default_factory=list)

    def set_ok(self) -> 'OINOResult':
        """Reset status to OK, keeping the messages."""
        self.success = True
        self.status_code = 200
        self.status_message = OK_MESSAGE
        return self

    def set_error(self, status_code: int, message: str, operation: str | None = None) -> 'OINOResult':
        """
        Mark the result failed.

        A previous non-OK status message is moved to the message list so it
        is not lost.

        Args:
            status_code: HTTP status code
            message: Error message
            operation: Optional operation name

        Returns:
            Self
        """
        self.success = False
        self.status_code = status_code
        if self.status_message != OK_MESSAGE:
            self.messages.append(self.status_message)
        self.status_message = format_message(MessageLevel.ERROR, message, operation)
        logger.debug(f'Result error {status_code}: {self.status_message}')
        return self

    def add_warning(self, message: str, operation: str | None = None) -> 'OINOResult':
        """Append a warning message."""
        self.messages.append(format_message(MessageLevel.WARNING, message, operation))
        return self

    def add_info(self, message: str, operation: str | None = None) -> 'OINOResult':
        """Append an info message."""
        self.messages.append(format_message(MessageLevel.INFO, message, operation))
        return self

    def add_debug(self, message: str, operation: str | None = None) -> 'OINOResult':
        """Append a debug message."""
        self.messages.append(format_message(MessageLevel.DEBUG, message, operation))
        return self

    def add_error(self, message: str, operation: str | None = None) -> 'OINOResult':
        """Append an error message without changing the status."""
        self.messages.append(format_message(MessageLevel.ERROR, message, operation))
        return self

    def filter_messages(self, levels: Iterable[MessageLevel]) -> list[str]:
        """
        Select messages of the given classes, in order.

        Args:
            levels: Message classes to keep

        Returns:
            Matching messages
        """
        wanted = set(levels)
        return [message for message in self.messages if message_level(message) in wanted]

    def messages_as_headers(
        self,
        levels: Iterable[MessageLevel] = (MessageLevel.ERROR, MessageLevel.WARNING),
        prefix: str = 'X-OINO-MESSAGE-',
    ) -> dict[str, str]:
        """
        Render selected messages as numbered HTTP headers.

        Args:
            levels: Message classes to expose
            prefix: Header name prefix

        Returns:
            Mapping of header name to message
        """
        selected = self.filter_messages(levels)
        return {f'{prefix}{i}': message.replace('\r', ' ').replace('\n', ' ') for i, message in enumerate(selected, 1)}

    def print_log(self) -> str:
        """Render the result as a single log line."""
        status = 'OK' if self.success else 'FAILED'
        line = f'{status} {self.status_code} {self.status_message}'
        if self.messages:
            line += ' | ' + ' | '.join(self.messages)
        return line


def strip_message_tag(message: str) -> str:
    """Message text without its leading tag and operation."""
    if message_level(message) is None:
        return message
    _, separator, text = message.partition(': ')
    return text if separator else message
