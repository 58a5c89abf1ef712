"""Parser for textual SQL type expressions.

Turns strings such as ``ARRAY<STRUCT<f1 STRING, f2 NUMERIC(10, 2)>>`` into
type values (see `sqlcatalog.core.sqltypes`). Grammar::

    type      := simple | simple '(' params ')' | ARRAY '<' type '>'
               | STRUCT '<' field (',' field)* '>'
    field     := name [':'] type
    params    := token (',' token)*

Keywords and type names are case-insensitive. Parameters (length,
precision, scale) are consumed but not kept: ``NUMERIC(10, 2)`` parses to the
same value as ``NUMERIC``.

Each call builds its own tokenizer output and cursor, so `parse_type` is
safe to call from several threads at once.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Mapping, NoReturn

from sqlcatalog.core.errors import TypeParseError
from sqlcatalog.core.sqltypes import ArrayType, SimpleType, StructField, StructType, Type, TypeKind

# ZetaSQL type names plus the BigQuery aliases.
TYPE_NAMES: Mapping[str, TypeKind] = {
    **{kind.value: kind for kind in TypeKind},
    "INT": TypeKind.INT64,
    "INTEGER": TypeKind.INT64,
    "SMALLINT": TypeKind.INT64,
    "BIGINT": TypeKind.INT64,
    "TINYINT": TypeKind.INT64,
    "BYTEINT": TypeKind.INT64,
    "FLOAT64": TypeKind.DOUBLE,
    "BOOLEAN": TypeKind.BOOL,
    "DECIMAL": TypeKind.NUMERIC,
    "BIGDECIMAL": TypeKind.BIGNUMERIC,
}

# Databricks / Spark SQL names, as reported in Unity Catalog `type_text`.
DATABRICKS_TYPE_NAMES: Mapping[str, TypeKind] = {
    **TYPE_NAMES,
    "INT": TypeKind.INT32,
    "INTEGER": TypeKind.INT32,
    "SMALLINT": TypeKind.INT32,
    "TINYINT": TypeKind.INT32,
    "SHORT": TypeKind.INT32,
    "BYTE": TypeKind.INT32,
    "LONG": TypeKind.INT64,
    "REAL": TypeKind.FLOAT,
    "BINARY": TypeKind.BYTES,
    "TIMESTAMP_NTZ": TypeKind.DATETIME,
    "TIMESTAMP_LTZ": TypeKind.TIMESTAMP,
    "VARIANT": TypeKind.JSON,
    "CHAR": TypeKind.STRING,
    "VARCHAR": TypeKind.STRING,
}


class TokenType(Enum):
    IDENTIFIER = auto()
    QUOTED_IDENTIFIER = auto()
    NUMBER = auto()
    LT = auto()
    GT = auto()
    LPAREN = auto()
    RPAREN = auto()
    COMMA = auto()
    COLON = auto()
    EOF = auto()


@dataclass(frozen=True)
class Token:
    """A lexical token and its offset in the input."""

    type: TokenType
    value: str
    pos: int


_PATTERNS: list[tuple[re.Pattern, TokenType | None]] = [
    (re.compile(r"\s+"), None),
    (re.compile(r"`([^`]+)`"), TokenType.QUOTED_IDENTIFIER),
    (re.compile(r"[A-Za-z_][A-Za-z0-9_]*"), TokenType.IDENTIFIER),
    (re.compile(r"\d+"), TokenType.NUMBER),
    (re.compile(r"<"), TokenType.LT),
    (re.compile(r">"), TokenType.GT),
    (re.compile(r"\("), TokenType.LPAREN),
    (re.compile(r"\)"), TokenType.RPAREN),
    (re.compile(r","), TokenType.COMMA),
    (re.compile(r":"), TokenType.COLON),
]


def tokenize(text: str) -> list[Token]:
    """Split a type expression into tokens, ending with an EOF token."""
    tokens: list[Token] = []
    pos = 0
    while pos < len(text):
        for pattern, token_type in _PATTERNS:
            m = pattern.match(text, pos)
            if not m:
                continue
            if token_type is not None:
                value = m.group(1) if token_type is TokenType.QUOTED_IDENTIFIER else m.group(0)
                tokens.append(Token(token_type, value, pos))
            pos = m.end()
            break
        else:
            raise TypeParseError(
                text, f"unexpected character '{text[pos]}'", token=text[pos], position=pos
            )
    tokens.append(Token(TokenType.EOF, "", len(text)))
    return tokens


@dataclass
class _Frame:
    """An ARRAY or STRUCT whose element or field types are still being read."""

    keyword: str
    fields: list[StructField] = field(default_factory=list)
    field_name: str = ""


class _Parser:
    """
    Shift-reduce parser over the tokens of one type expression.

    Open ARRAY and STRUCT constructors are kept on an explicit stack instead
    of the call stack, so nesting depth is limited by memory only.
    """

    def __init__(self, text: str, type_names: Mapping[str, TypeKind]):
        self._text = text
        self._type_names = type_names
        self._tokens = tokenize(text)
        self._pos = 0

    def parse(self) -> Type:
        if self._peek().type is TokenType.EOF:
            self._fail("empty type expression")
        parsed = self._parse_type()
        token = self._peek()
        if token.type is not TokenType.EOF:
            rest = self._text[token.pos :]
            raise TypeParseError(
                self._text, f"unexpected trailing input '{rest}'", token=rest, position=token.pos
            )
        return parsed

    def _parse_type(self) -> Type:
        stack: list[_Frame] = []
        while True:
            # open constructors until a simple type is reached
            token = self._consume(TokenType.IDENTIFIER, "expected a type name")
            name = token.value.upper()
            if name == "ARRAY":
                self._consume(TokenType.LT, "expected '<' after ARRAY")
                stack.append(_Frame(name))
                continue
            if name == "STRUCT":
                self._consume(TokenType.LT, "expected '<' after STRUCT")
                if self._check(TokenType.GT):
                    self._fail("empty STRUCT field list")
                stack.append(_Frame(name, field_name=self._parse_field_name()))
                continue

            parsed: Type = self._parse_simple(token)

            # close constructors until one expects another field
            while stack:
                frame = stack[-1]
                if frame.keyword == "ARRAY":
                    self._consume(TokenType.GT, "expected '>' to close ARRAY")
                    parsed = ArrayType(parsed)
                    stack.pop()
                    continue
                frame.fields.append(StructField(frame.field_name, parsed))
                if self._match(TokenType.COMMA):
                    frame.field_name = self._parse_field_name()
                    break
                self._consume(TokenType.GT, "expected ',' or '>' in STRUCT field list")
                parsed = StructType(tuple(frame.fields))
                stack.pop()
            else:
                return parsed

    def _parse_simple(self, token: Token) -> SimpleType:
        kind = self._type_names.get(token.value.upper())
        if kind is None:
            raise TypeParseError(
                self._text, f"unknown type '{token.value}'", token=token.value, position=token.pos
            )
        if self._match(TokenType.LPAREN):
            self._parse_params()
        return SimpleType(kind)

    def _parse_field_name(self) -> str:
        if self._check(TokenType.QUOTED_IDENTIFIER):
            name = self._advance().value
        else:
            name = self._consume(TokenType.IDENTIFIER, "expected a STRUCT field name").value
        self._match(TokenType.COLON)
        return name

    def _parse_params(self) -> None:
        # parameters are validated for shape only, their values are dropped
        self._param()
        while self._match(TokenType.COMMA):
            self._param()
        self._consume(TokenType.RPAREN, "expected ',' or ')' in type parameters")

    def _param(self) -> Token:
        if self._check(TokenType.NUMBER) or self._check(TokenType.IDENTIFIER):
            return self._advance()
        return self._fail("expected a type parameter")

    # ─── Cursor helpers ─────────────────────────────────────────────

    def _peek(self) -> Token:
        return self._tokens[self._pos]

    def _check(self, token_type: TokenType) -> bool:
        return self._peek().type is token_type

    def _advance(self) -> Token:
        token = self._tokens[self._pos]
        if token.type is not TokenType.EOF:
            self._pos += 1
        return token

    def _match(self, token_type: TokenType) -> bool:
        if self._check(token_type):
            self._advance()
            return True
        return False

    def _consume(self, token_type: TokenType, message: str) -> Token:
        if self._check(token_type):
            return self._advance()
        return self._fail(message)

    def _fail(self, message: str) -> NoReturn:
        token = self._peek()
        if token.type is TokenType.EOF:
            message = f"{message}, got end of input"
        else:
            message = f"{message}, got '{token.value}'"
        raise TypeParseError(self._text, message, token=token.value, position=token.pos)


def parse_type(text: str, type_names: Mapping[str, TypeKind] | None = None) -> Type:
    """
    Parse a type expression into a type value.

    Args:
        text: The type expression, e.g. ``ARRAY<STRUCT<a INT64>>``.
        type_names: Upper-case type name to kind table. Defaults to
            `TYPE_NAMES`; pass `DATABRICKS_TYPE_NAMES` for Spark-style names.

    Raises:
        TypeParseError: If the text does not follow the type grammar or names
            an unknown type.
    """
    return _Parser(text, TYPE_NAMES if type_names is None else type_names).parse()
