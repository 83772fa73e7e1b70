"""Small recursive-descent parser for CREATE TABLE column clauses."""

import logging
import re
from dataclasses import dataclass
from dataclasses import field
from typing import NamedTuple

from namerec.oino.core.utils import split_top_level

logger = logging.getLogger(__name__)

_TOKEN_PATTERN = re.compile(
    r"""\s*(?:
      (?P<quoted>"(?:[^"]|"")*"|`(?:[^`]|``)*`|\[[^\]]*\])
    | (?P<string>'(?:[^']|'')*')
    | (?P<word>[A-Za-z_][\w$]*)
    | (?P<number>[+-]?\d+(?:\.\d+)?)
    | (?P<punct>[(),])
    | (?P<other>\S)
    )""",
    re.VERBOSE,
)
_CONSTRAINT_STARTS = frozenset({'PRIMARY', 'FOREIGN', 'CONSTRAINT', 'UNIQUE', 'CHECK'})
_TYPE_STOP_WORDS = frozenset({
    'PRIMARY', 'NOT', 'NULL', 'DEFAULT', 'REFERENCES', 'UNIQUE', 'CHECK', 'CONSTRAINT',
    'COLLATE', 'AUTOINCREMENT', 'GENERATED', 'AS',
})
_QUOTE_PAIRS = {'"': '"', '`': '`', '[': ']', "'": "'"}


class DdlToken(NamedTuple):
    """Lexical token of a DDL fragment."""

    kind: str
    text: str

    @property
    def upper(self) -> str:
        return self.text.upper()


@dataclass
class ColumnDefinition:
    """Column as declared in DDL or reported by a catalog, before field mapping."""

    name: str
    sql_type: str
    length: int = 0
    precision: int = 0
    scale: int = 0
    is_primary_key: bool = False
    is_foreign_key: bool = False
    is_not_null: bool = False
    is_auto_increment: bool = False


@dataclass
class TableDefinition:
    """Columns plus key lists declared as table constraints."""

    columns: list[ColumnDefinition] = field(default_factory=list)
    primary_keys: list[str] = field(default_factory=list)
    foreign_keys: list[str] = field(default_factory=list)


def tokenize(fragment: str) -> list[DdlToken]:
    """Split a DDL fragment into tokens."""
    tokens = []
    position = 0
    while position < len(fragment):
        match = _TOKEN_PATTERN.match(fragment, position)
        if match is None or match.end() == position:
            break
        kind = match.lastgroup or 'other'
        tokens.append(DdlToken(kind, match.group(kind)))
        position = match.end()
    return tokens


def unquote_identifier(text: str) -> str:
    """Remove identifier quotes ("x", `x`, [x]) and undouble embedded quotes."""
    if len(text) >= 2 and text[0] in _QUOTE_PAIRS and text[-1] == _QUOTE_PAIRS[text[0]]:
        closing = _QUOTE_PAIRS[text[0]]
        return text[1:-1].replace(closing * 2, closing)
    return text


def extract_column_clause(sql: str) -> str:
    """
    Get the text between the outer brackets of a CREATE TABLE statement.

    Text that does not start with CREATE is returned unchanged, so a bare
    column clause can be passed as well.

    Args:
        sql: CREATE TABLE statement or column clause

    Returns:
        Column clause
    """
    if not sql.lstrip().upper().startswith('CREATE'):
        return sql
    depth = 0
    start = -1
    closing_quote: str | None = None
    for i, char in enumerate(sql):
        if closing_quote:
            if char == closing_quote:
                closing_quote = None
        elif char in _QUOTE_PAIRS:
            closing_quote = _QUOTE_PAIRS[char]
        elif char == '(':
            if depth == 0:
                start = i
            depth += 1
        elif char == ')':
            depth -= 1
            if depth == 0 and start >= 0:
                return sql[start + 1 : i]
    return ''


def _bracketed_names(tokens: list[DdlToken], position: int) -> list[str]:
    """Identifier list of a '(a, b)' group starting at position."""
    names = []
    if position >= len(tokens) or tokens[position].text != '(':
        return names
    for token in tokens[position + 1 :]:
        if token.text == ')':
            break
        if token.kind in ('quoted', 'word'):
            names.append(unquote_identifier(token.text))
    return names


def parse_table_constraint(tokens: list[DdlToken], table: TableDefinition) -> bool:
    """
    Apply a PRIMARY KEY / FOREIGN KEY table constraint.

    Args:
        tokens: Tokens of one clause fragment
        table: Definition receiving the key names

    Returns:
        True if the fragment is a table constraint
    """
    if not tokens or tokens[0].kind != 'word' or tokens[0].upper not in _CONSTRAINT_STARTS:
        return False
    position = 2 if tokens[0].upper == 'CONSTRAINT' else 0
    words = [token.upper for token in tokens[position : position + 2]]
    if words == ['PRIMARY', 'KEY']:
        table.primary_keys.extend(_bracketed_names(tokens, position + 2))
    elif words == ['FOREIGN', 'KEY']:
        table.foreign_keys.extend(_bracketed_names(tokens, position + 2))
    return True


def parse_column(tokens: list[DdlToken]) -> ColumnDefinition | None:
    """
    Match the column grammar: name [type words] ['(' length [',' scale] ')'] constraints...

    Args:
        tokens: Tokens of one clause fragment

    Returns:
        Column definition, or None if the fragment is not a column
    """
    if not tokens or tokens[0].kind not in ('quoted', 'word'):
        return None
    column = ColumnDefinition(name=unquote_identifier(tokens[0].text), sql_type='')

    position = 1
    type_words = []
    while position < len(tokens) and tokens[position].kind == 'word' and tokens[position].upper not in _TYPE_STOP_WORDS:
        type_words.append(tokens[position].text)
        position += 1
    column.sql_type = ' '.join(type_words)

    if position < len(tokens) and tokens[position].text == '(':
        numbers = []
        position += 1
        while position < len(tokens) and tokens[position].text != ')':
            if tokens[position].kind == 'number':
                numbers.append(int(float(tokens[position].text)))
            position += 1
        position += 1
        if numbers:
            column.length = numbers[0]
            column.precision = numbers[0]
        if len(numbers) > 1:
            column.scale = numbers[1]

    words = [token.upper for token in tokens[position:] if token.kind == 'word']
    pairs = set(zip(words, words[1:], strict=False))
    column.is_primary_key = ('PRIMARY', 'KEY') in pairs
    column.is_not_null = ('NOT', 'NULL') in pairs
    column.is_auto_increment = 'AUTOINCREMENT' in words
    column.is_foreign_key = 'REFERENCES' in words
    return column


def parse_column_clause(clause: str) -> TableDefinition:
    """
    Parse a column clause in two stages.

    The clause is first split on top-level commas, then every fragment is
    matched as a table constraint or a column. Key constraints are applied to
    the columns afterwards, since they may follow the column they name.

    Args:
        clause: Text between the brackets of CREATE TABLE

    Returns:
        Table definition with key flags patched onto the columns
    """
    table = TableDefinition()
    for fragment in split_top_level(clause, ','):
        tokens = tokenize(fragment)
        if parse_table_constraint(tokens, table):
            continue
        column = parse_column(tokens)
        if column is None:
            logger.warning(f'Unrecognized column definition skipped: {fragment}')
            continue
        table.columns.append(column)

    for column in table.columns:
        if column.name in table.primary_keys:
            column.is_primary_key = True
        if column.name in table.foreign_keys:
            column.is_foreign_key = True
    return table


def parse_create_table(sql: str) -> TableDefinition:
    """Parse a CREATE TABLE statement (or bare column clause)."""
    return parse_column_clause(extract_column_clause(sql))
