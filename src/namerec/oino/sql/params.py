"""Restricted query parameters: filter, order, limit, select and aggregate."""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field as dataclass_field
from typing import TYPE_CHECKING

from namerec.oino.core.config import OINOConfig
from namerec.oino.core.exceptions import OINOFilterError
from namerec.oino.core.exceptions import OINOIdError
from namerec.oino.core.types import UNDEFINED
from namerec.oino.core.utils import find_closing_bracket
from namerec.oino.core.utils import split_top_level

if TYPE_CHECKING:
    from namerec.oino.model.datamodel import DataModel
    from namerec.oino.model.fields import DataField

COMPARISON_OPERATORS = {
    'lt': '<',
    'le': '<=',
    'eq': '=',
    'ne': '<>',
    'ge': '>=',
    'gt': '>',
    'like': 'LIKE',
}
BOOLEAN_OPERATORS = {'and': 'AND', 'or': 'OR'}
AGGREGATE_FUNCTIONS = ('count', 'sum', 'avg', 'min', 'max')

_OPERATOR_PATTERN = re.compile(r'-([a-z]+)\(', re.IGNORECASE)
_NOT_PREFIX = '-not('
_ORDER_PATTERN = re.compile(r'^(.+?)(?:\s+(asc|desc)|\s*([+-]))?$', re.IGNORECASE)
_LIMIT_PATTERN = re.compile(r'^(\d+)(?:\s*(?:\.|\s+page\s+)\s*(\d+))?$', re.IGNORECASE)
_AGGREGATE_PATTERN = re.compile(r'^(\w+)\((.+)\)$')


def _require_field(datamodel: 'DataModel', name: str, expression: str) -> 'DataField':
    field = datamodel.find_field_by_name(name)
    if field is None:
        raise OINOFilterError(expression, f'Unknown field {name!r} in {expression!r}')
    return field


@dataclass(frozen=True)
class SqlFilter:
    """
    Parsed filter expression.

    Grammar::

        filter := '(' field ')' '-' comparison '(' value ')'
                | '-not(' filter ')'
                | '(' filter ')' '-' ('and' | 'or') '(' filter ')'

    Attributes:
        operator: Comparison, boolean operator or 'not'
        field_name: Field of a comparison
        value: Raw value text of a comparison
        left: Left (or only) operand of a boolean expression
        right: Right operand of a binary boolean expression
    """

    operator: str
    field_name: str = ''
    value: str = ''
    left: 'SqlFilter | None' = None
    right: 'SqlFilter | None' = None

    @classmethod
    def parse(cls, text: str) -> 'SqlFilter':
        """
        Parse a filter expression.

        Raises:
            OINOFilterError: If the expression does not follow the grammar
        """
        text = text.strip()
        if text.lower().startswith(_NOT_PREFIX):
            opening = len(_NOT_PREFIX) - 1
            if find_closing_bracket(text, opening) != len(text) - 1:
                raise OINOFilterError(text, f'Unbalanced brackets in filter: {text}')
            return cls(operator='not', left=cls.parse(text[opening + 1 : -1]))

        if not text.startswith('('):
            raise OINOFilterError(text, f'Filter must start with "(": {text}')
        left_close = find_closing_bracket(text, 0)
        if left_close < 0:
            raise OINOFilterError(text, f'Unbalanced brackets in filter: {text}')
        match = _OPERATOR_PATTERN.match(text, left_close + 1)
        if match is None or not text.endswith(')'):
            raise OINOFilterError(text, f'Missing operator in filter: {text}')

        operator = match.group(1).lower()
        right_open = match.end() - 1
        left_text = text[1:left_close]
        if operator in BOOLEAN_OPERATORS:
            if find_closing_bracket(text, right_open) != len(text) - 1:
                raise OINOFilterError(text, f'Unbalanced brackets in filter: {text}')
            return cls(
                operator=operator,
                left=cls.parse(left_text),
                right=cls.parse(text[right_open + 1 : -1]),
            )
        if operator in COMPARISON_OPERATORS:
            # The value runs to the final bracket and may itself contain brackets.
            return cls(operator=operator, field_name=left_text.strip(), value=text[right_open + 1 : -1])
        raise OINOFilterError(text, f'Unknown filter operator {operator!r}')

    def to_sql(self, datamodel: 'DataModel') -> str:
        """
        Render the filter as a SQL condition.

        Raises:
            OINOFilterError: If a field is unknown or a value is invalid for its field
        """
        if self.operator == 'not':
            return f'(NOT {self.left.to_sql(datamodel)})'  # type: ignore[union-attr]
        if self.operator in BOOLEAN_OPERATORS:
            left = self.left.to_sql(datamodel)  # type: ignore[union-attr]
            right = self.right.to_sql(datamodel)  # type: ignore[union-attr]
            return f'({left} {BOOLEAN_OPERATORS[self.operator]} {right})'

        expression = f'({self.field_name})-{self.operator}({self.value})'
        field = _require_field(datamodel, self.field_name, expression)
        if self.operator == 'like':
            literal = field.dialect.string_literal(self.value)
        else:
            try:
                text = datamodel.decode_key_text(field, self.value)
            except OINOIdError as e:
                raise OINOFilterError(expression, str(e)) from e
            cell = field.deserialize(text)
            if cell is UNDEFINED:
                raise OINOFilterError(expression, f'Invalid value {self.value!r} for field {field.name}')
            literal = field.sql_literal(cell)
        return f'({field.sql_column()} {COMPARISON_OPERATORS[self.operator]} {literal})'


@dataclass(frozen=True)
class SqlOrder:
    """Parsed order expression: comma separated 'field [asc|desc|+|-]'."""

    columns: tuple[tuple[str, bool], ...]

    @classmethod
    def parse(cls, text: str) -> 'SqlOrder':
        """
        Parse an order expression.

        Raises:
            OINOFilterError: If a part is malformed
        """
        columns = []
        for part in split_top_level(text, ','):
            match = _ORDER_PATTERN.match(part)
            if match is None:
                raise OINOFilterError(text, f'Invalid order: {part}')
            direction = (match.group(2) or match.group(3) or '').lower()
            columns.append((match.group(1).strip(), direction in ('desc', '-')))
        if not columns:
            raise OINOFilterError(text, 'Empty order')
        return cls(columns=tuple(columns))

    def to_sql(self, datamodel: 'DataModel') -> str:
        """Render as an ORDER BY list."""
        rendered = []
        for name, descending in self.columns:
            field = _require_field(datamodel, name, name)
            rendered.append(f'{field.sql_column()} {"DESC" if descending else "ASC"}')
        return ', '.join(rendered)


@dataclass(frozen=True)
class SqlLimit:
    """Parsed limit expression: 'N', 'N page P' or 'N.P' (pages start at 1)."""

    limit: int
    page: int = 0

    @classmethod
    def parse(cls, text: str) -> 'SqlLimit':
        """
        Parse a limit expression.

        Raises:
            OINOFilterError: If the expression is malformed
        """
        match = _LIMIT_PATTERN.match(text.strip())
        if match is None:
            raise OINOFilterError(text, f'Invalid limit: {text}')
        return cls(limit=int(match.group(1)), page=int(match.group(2) or 0))

    @property
    def offset(self) -> int:
        """Rows skipped before the requested page."""
        return self.limit * (self.page - 1) if self.page > 1 else 0


@dataclass(frozen=True)
class SqlSelect:
    """Selected columns; primary keys are always selected."""

    columns: frozenset[str] = dataclass_field(default_factory=frozenset)

    @classmethod
    def parse(cls, text: str) -> 'SqlSelect':
        return cls(columns=frozenset(split_top_level(text, ',')))

    def is_selected(self, field: 'DataField') -> bool:
        return field.is_primary_key or field.name in self.columns


@dataclass(frozen=True)
class SqlAggregate:
    """Aggregate functions per field: 'count(a),sum(b)'."""

    functions: Mapping[str, str]

    @classmethod
    def parse(cls, text: str) -> 'SqlAggregate':
        """
        Parse an aggregate expression.

        Raises:
            OINOFilterError: If a part is malformed or uses an unknown function
        """
        functions = {}
        for part in split_top_level(text, ','):
            match = _AGGREGATE_PATTERN.match(part)
            if match is None or match.group(1).lower() not in AGGREGATE_FUNCTIONS:
                raise OINOFilterError(text, f'Invalid aggregate: {part}')
            functions[match.group(2).strip()] = match.group(1).lower()
        if not functions:
            raise OINOFilterError(text, 'Empty aggregate')
        return cls(functions=functions)

    def is_aggregated(self, field: 'DataField') -> bool:
        return field.name in self.functions

    def print_column(self, field: 'DataField') -> str:
        column = field.sql_column()
        return f'{self.functions[field.name].upper()}({column}) AS {column}'

    def print_group_by(self, datamodel: 'DataModel', select: SqlSelect | None = None) -> str:
        """GROUP BY list: selected fields that are not aggregated."""
        for name in self.functions:
            _require_field(datamodel, name, name)
        return ', '.join(
            field.sql_column()
            for field in datamodel.fields
            if not self.is_aggregated(field) and (select is None or select.is_selected(field))
        )


@dataclass(frozen=True)
class SqlParams:
    """Query parameters of one request."""

    filter: SqlFilter | None = None
    order: SqlOrder | None = None
    limit: SqlLimit | None = None
    select: SqlSelect | None = None
    aggregate: SqlAggregate | None = None

    @classmethod
    def from_query(cls, query: Mapping[str, str], config: OINOConfig | None = None) -> 'SqlParams':
        """
        Build parameters from URL query parameters.

        Args:
            query: Query parameter mapping
            config: Parameter names (defaults to OINOConfig())

        Returns:
            Parsed parameters

        Raises:
            OINOFilterError: If an expression is invalid
        """
        config = config or OINOConfig()
        filter_text = query.get(config.filter_param)
        order_text = query.get(config.order_param)
        limit_text = query.get(config.limit_param)
        select_text = query.get(config.select_param)
        aggregate_text = query.get(config.aggregate_param)
        return cls(
            filter=SqlFilter.parse(filter_text) if filter_text else None,
            order=SqlOrder.parse(order_text) if order_text else None,
            limit=SqlLimit.parse(limit_text) if limit_text else None,
            select=SqlSelect.parse(select_text) if select_text else None,
            aggregate=SqlAggregate.parse(aggregate_text) if aggregate_text else None,
        )
