"""Boolean query language used by the filter and highlight boxes.

Grammar, lowest precedence first::

    Expression := OrTerm
    OrTerm     := AndTerm ( "OR" AndTerm )*
    AndTerm    := NotTerm ( ["AND"] NotTerm )*
    NotTerm    := ["NOT" | "-"] Atom
    Atom       := "quoted phrase" | /regex/ | bareword | "(" Expression ")"

Adjacent terms without a connective are AND-ed. Phrases and bare words match as
case-insensitive substrings, regex literals use Python ``re`` syntax as written.
``AND``, ``OR`` and ``NOT`` are keywords in any letter case; quote them to search
for the words themselves.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import StrEnum

from logtint.models import HIGHLIGHT_PRIORITY, Category, MatchRange

logger = logging.getLogger(__name__)


class QueryParseError(ValueError):
    """A query string is malformed. ``position`` is a character offset into the query."""

    def __init__(self, message: str, position: int) -> None:
        super().__init__(f"{message} at position {position}")
        self.message = message
        self.position = position


class RegexCompileError(QueryParseError):
    """A ``/.../`` literal is not a valid regular expression."""


class TokenType(StrEnum):
    """Lexical token kinds."""

    WORD = "word"
    PHRASE = "phrase"
    REGEX = "regex"
    AND = "and"
    OR = "or"
    NOT = "not"
    LPAREN = "lparen"
    RPAREN = "rparen"
    EOF = "eof"


@dataclass(frozen=True, slots=True)
class Token:
    """A lexical token and the offset where it starts in the query."""

    type: TokenType
    value: str
    position: int


_KEYWORDS: dict[str, TokenType] = {
    "AND": TokenType.AND,
    "OR": TokenType.OR,
    "NOT": TokenType.NOT,
}

# Characters that terminate a bare word besides whitespace
_WORD_STOP = frozenset('()"')

_OPERATORS = frozenset({TokenType.AND, TokenType.OR, TokenType.NOT})
_LITERALS = frozenset({TokenType.WORD, TokenType.PHRASE, TokenType.REGEX})
_TERM_START = _LITERALS | {TokenType.LPAREN, TokenType.NOT}
_MAX_NESTING = 100


def _read_delimited(query: str, start: int, delimiter: str, what: str) -> tuple[str, int]:
    """Read a ``"..."`` or ``/.../`` body starting at the opening delimiter.

    Returns (body, offset after the closing delimiter). An escaped delimiter is
    unescaped; any other backslash sequence is kept verbatim so regex escapes
    survive. Inside phrases ``\\\\`` also collapses to a single backslash.
    """
    chars: list[str] = []
    pos = start + 1
    length = len(query)
    while pos < length:
        char = query[pos]
        if char == "\\" and pos + 1 < length:
            escaped = query[pos + 1]
            if escaped == delimiter or (delimiter == '"' and escaped == "\\"):
                chars.append(escaped)
            else:
                chars.append(char + escaped)
            pos += 2
        elif char == delimiter:
            return "".join(chars), pos + 1
        else:
            chars.append(char)
            pos += 1
    msg = f"unterminated {what}"
    raise QueryParseError(msg, start)


def tokenize(query: str) -> list[Token]:
    """Split a query string into tokens, always ending with an EOF token."""
    tokens: list[Token] = []
    pos = 0
    length = len(query)
    while pos < length:
        char = query[pos]
        if char.isspace():
            pos += 1
        elif char == "(":
            tokens.append(Token(TokenType.LPAREN, char, pos))
            pos += 1
        elif char == ")":
            tokens.append(Token(TokenType.RPAREN, char, pos))
            pos += 1
        elif char == '"':
            body, end = _read_delimited(query, pos, '"', "quoted phrase")
            tokens.append(Token(TokenType.PHRASE, body, pos))
            pos = end
        elif char == "/":
            body, end = _read_delimited(query, pos, "/", "regex literal")
            tokens.append(Token(TokenType.REGEX, body, pos))
            pos = end
        elif char == "-" and pos + 1 < length and not query[pos + 1].isspace() and query[pos + 1] != ")":
            tokens.append(Token(TokenType.NOT, char, pos))
            pos += 1
        else:
            end = pos
            while end < length and not query[end].isspace() and query[end] not in _WORD_STOP:
                end += 1
            word = query[pos:end]
            tokens.append(Token(_KEYWORDS.get(word.upper(), TokenType.WORD), word, pos))
            pos = end
    tokens.append(Token(TokenType.EOF, "", length))
    return tokens


class LiteralKind(StrEnum):
    """How a literal was written in the query."""

    WORD = "word"
    PHRASE = "phrase"
    REGEX = "regex"


@dataclass(frozen=True, slots=True)
class Literal:
    """Leaf node. Words and phrases compile to escaped, case-insensitive patterns."""

    text: str
    kind: LiteralKind
    pattern: re.Pattern[str]


@dataclass(frozen=True, slots=True)
class And:
    left: Node
    right: Node


@dataclass(frozen=True, slots=True)
class Or:
    left: Node
    right: Node


@dataclass(frozen=True, slots=True)
class Not:
    inner: Node


@dataclass(frozen=True, slots=True)
class Group:
    inner: Node


Node = Literal | And | Or | Not | Group


def _make_literal(token: Token) -> Literal:
    if not token.value:
        msg = "empty regex literal" if token.type is TokenType.REGEX else "empty quoted phrase"
        raise QueryParseError(msg, token.position)
    if token.type is TokenType.REGEX:
        try:
            pattern = re.compile(token.value)
        except re.error as e:
            msg = f"invalid regex: {e.msg}"
            raise RegexCompileError(msg, token.position) from e
        return Literal(token.value, LiteralKind.REGEX, pattern)
    kind = LiteralKind.PHRASE if token.type is TokenType.PHRASE else LiteralKind.WORD
    return Literal(token.value, kind, re.compile(re.escape(token.value), re.IGNORECASE))


class _Parser:
    """Recursive-descent parser over a token list."""

    def __init__(self, tokens: list[Token]) -> None:
        self._tokens = tokens
        self._index = 0
        self._depth = 0

    def _peek(self) -> Token:
        return self._tokens[self._index]

    def _advance(self) -> Token:
        token = self._tokens[self._index]
        if token.type is not TokenType.EOF:
            self._index += 1
        return token

    def _unexpected(self, token: Token) -> QueryParseError:
        previous = self._tokens[self._index - 1] if self._index else None
        if previous is not None and previous.type in _OPERATORS:
            return QueryParseError(f"missing term after {previous.value!r}", token.position)
        if token.type is TokenType.EOF:
            return QueryParseError("expected a term", token.position)
        if token.type is TokenType.RPAREN:
            return QueryParseError("unbalanced ')'", token.position)
        return QueryParseError(f"unexpected {token.value!r}", token.position)

    def parse(self) -> Node:
        node = self._parse_or()
        token = self._peek()
        if token.type is not TokenType.EOF:
            raise self._unexpected(token)
        return node

    def _parse_or(self) -> Node:
        node = self._parse_and()
        while self._peek().type is TokenType.OR:
            self._advance()
            node = Or(node, self._parse_and())
        return node

    def _parse_and(self) -> Node:
        node = self._parse_not()
        while True:
            token = self._peek()
            if token.type is TokenType.AND:
                self._advance()
            elif token.type not in _TERM_START:
                return node
            node = And(node, self._parse_not())

    def _parse_not(self) -> Node:
        negations = 0
        while self._peek().type is TokenType.NOT:
            self._advance()
            negations += 1
        node = self._parse_atom()
        for _ in range(negations):
            node = Not(node)
        return node

    def _parse_atom(self) -> Node:
        token = self._peek()
        if token.type in _LITERALS:
            self._advance()
            return _make_literal(token)
        if token.type is not TokenType.LPAREN:
            raise self._unexpected(token)
        if self._depth >= _MAX_NESTING:
            msg = "query is nested too deeply"
            raise QueryParseError(msg, token.position)
        self._advance()
        if self._peek().type is TokenType.RPAREN:
            raise QueryParseError("empty group", self._peek().position)
        self._depth += 1
        inner = self._parse_or()
        self._depth -= 1
        if self._peek().type is not TokenType.RPAREN:
            raise QueryParseError("unbalanced '('", token.position)
        self._advance()
        return Group(inner)


def _unwrap(node: Node) -> tuple[Literal | And | Or, bool]:
    """Strip ``Group`` and ``NOT`` wrappers. Returns the core node and whether it is negated."""
    negated = False
    while isinstance(node, Not | Group):
        if isinstance(node, Not):
            negated = not negated
        node = node.inner
    return node, negated


def _operands(node: And | Or) -> list[Node]:
    """Flatten a left-leaning chain of one operator into its operands, in query order."""
    kind = And if isinstance(node, And) else Or
    operands: list[Node] = []
    current: Node = node
    while isinstance(current, kind):
        operands.append(current.right)
        current = current.left
    operands.append(current)
    operands.reverse()
    return operands


def evaluate(node: Node, line: str) -> bool:
    """Decide whether ``line`` satisfies the expression tree."""
    core, negated = _unwrap(node)
    if isinstance(core, And):
        result = all(evaluate(operand, line) for operand in _operands(core))
    elif isinstance(core, Or):
        result = any(evaluate(operand, line) for operand in _operands(core))
    else:
        result = core.pattern.search(line) is not None
    return result != negated


def _collect(node: Node, line: str) -> tuple[bool, list[tuple[int, int]]]:
    """Evaluate bottom-up, returning (result, ranges from live literals).

    A false subtree always carries an empty range list.
    """
    core, negated = _unwrap(node)
    if negated:
        return not evaluate(core, line), []
    if isinstance(core, And):
        spans: list[tuple[int, int]] = []
        for operand in _operands(core):
            ok, operand_spans = _collect(operand, line)
            if not ok:
                return False, []
            spans.extend(operand_spans)
        return True, spans
    if isinstance(core, Or):
        any_ok = False
        spans = []
        for operand in _operands(core):
            ok, operand_spans = _collect(operand, line)
            any_ok = any_ok or ok
            spans.extend(operand_spans)
        return any_ok, spans
    found = [m.span() for m in core.pattern.finditer(line)]
    if not found:
        return False, []
    return True, [(start, end) for start, end in found if start < end]


def _format_literal(node: Literal) -> str:
    if node.kind is LiteralKind.PHRASE:
        return '"' + node.text.replace("\\", "\\\\").replace('"', '\\"') + '"'
    if node.kind is LiteralKind.REGEX:
        return "/" + node.text.replace("/", "\\/") + "/"
    return node.text


def format_node(node: Node) -> str:
    """Render a tree back to query syntax with explicit operators."""
    prefix: list[str] = []
    closing = 0
    while isinstance(node, Not | Group):
        if isinstance(node, Not):
            prefix.append("NOT ")
        else:
            prefix.append("(")
            closing += 1
        node = node.inner
    if isinstance(node, And):
        body = " AND ".join(format_node(operand) for operand in _operands(node))
    elif isinstance(node, Or):
        body = " OR ".join(format_node(operand) for operand in _operands(node))
    else:
        body = _format_literal(node)
    return "".join(prefix) + body + ")" * closing


def _union(spans: list[tuple[int, int]]) -> list[tuple[int, int]]:
    """Merge overlapping or touching ranges into a sorted, disjoint list."""
    merged: list[tuple[int, int]] = []
    for start, end in sorted(spans):
        if merged and start <= merged[-1][1]:
            last_start, last_end = merged[-1]
            merged[-1] = (last_start, max(last_end, end))
        else:
            merged.append((start, end))
    return merged


@dataclass(frozen=True, slots=True)
class FilterExpr:
    """A parsed query. Replaced, never mutated, when the user edits the query."""

    source: str
    root: Node

    def __str__(self) -> str:
        return format_node(self.root)

    def matches(self, line: str) -> bool:
        """Whether the line passes this expression."""
        return evaluate(self.root, line)

    def find_all_matches(self, line: str) -> list[tuple[int, int]]:
        """Character ranges of the literal hits that make the expression true.

        Ranges under a ``NOT`` are never reported, and nothing is reported when
        the expression as a whole is false.
        """
        ok, spans = _collect(self.root, line)
        if not ok:
            return []
        return _union(spans)

    def highlight_ranges(self, line: str) -> list[MatchRange]:
        """The hits of :meth:`find_all_matches` as custom-highlight ranges."""
        return [
            MatchRange(start, end, Category.CUSTOM_FILTER_HIGHLIGHT, HIGHLIGHT_PRIORITY)
            for start, end in self.find_all_matches(line)
        ]


def parse_query(query: str) -> FilterExpr:
    """Parse a query string.

    Raises QueryParseError (or RegexCompileError) with the offending position.
    A blank query is rejected here; use :func:`parse_optional_query` where blank
    means "no filter".
    """
    if not query.strip():
        raise QueryParseError("empty query", 0)
    try:
        root = _Parser(tokenize(query)).parse()
    except RecursionError:
        msg = "query is nested too deeply"
        raise QueryParseError(msg, 0) from None
    logger.debug("Parsed query %r into %r", query, root)
    return FilterExpr(query, root)


def parse_optional_query(query: str) -> FilterExpr | None:
    """Parse a query, treating a blank or whitespace-only string as no query."""
    if not query.strip():
        return None
    return parse_query(query)
