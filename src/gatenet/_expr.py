"""Infix boolean expressions compiled into gates.

Grammar, loosest binding first::

    expr  := xor ("|" xor)*
    xor   := and ("^" and)*
    and   := unary ("&" unary)*
    unary := ("!" | "~")* atom
    atom  := "(" expr ")" | constant | identifier

Constants are ``0``, ``1``, ``true`` and ``false`` (case-insensitive).
Identifiers are ASCII (``[A-Za-z_][A-Za-z0-9_]*``) and name variables;
repeated identifiers share one variable gate. Parentheses nest at most
``MAX_NESTING`` deep.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from ._circuit import Circuit
from ._gate import Gate
from ._kind import GateKind

logger = logging.getLogger(__name__)

_PUNCTUATION = frozenset("!~&^|()")
_WORD = re.compile(r"[A-Za-z0-9_]+")
MAX_NESTING = 100
_CONSTANTS = {"0": False, "1": True, "false": False, "true": True}
_BINARY_LEVELS = (("|", GateKind.OR), ("^", GateKind.XOR), ("&", GateKind.AND))


class ExpressionError(ValueError):
    """Raised when an expression cannot be parsed."""

    def __init__(self, message: str, position: int) -> None:
        self.position = position
        super().__init__(f"{message} at position {position}")


@dataclass(slots=True, frozen=True)
class Token:
    """A lexical token: punctuation, a word, or the end marker."""

    text: str
    position: int

    @property
    def is_end(self) -> bool:
        return self.text == ""


def tokenize(text: str) -> list[Token]:
    """Split an expression into tokens, ending with an end marker.

    Raises:
        ExpressionError: On a character that belongs to no token.

    """
    tokens: list[Token] = []
    i = 0
    while i < len(text):
        char = text[i]
        if char.isspace():
            i += 1
        elif char in _PUNCTUATION:
            tokens.append(Token(char, i))
            i += 1
        elif match := _WORD.match(text, i):
            tokens.append(Token(match.group(), i))
            i = match.end()
        else:
            msg = f"Unexpected character {char!r}"
            raise ExpressionError(msg, i)
    tokens.append(Token("", len(text)))
    return tokens


@dataclass(slots=True)
class _Parser:
    circuit: Circuit
    tokens: list[Token]
    index: int = 0
    depth: int = 0

    def peek(self) -> Token:
        return self.tokens[self.index]

    def advance(self) -> Token:
        token = self.tokens[self.index]
        if not token.is_end:
            self.index += 1
        return token

    def parse_binary(self, level: int = 0) -> Gate:
        if level == len(_BINARY_LEVELS):
            return self.parse_unary()
        symbol, kind = _BINARY_LEVELS[level]
        left = self.parse_binary(level + 1)
        while self.peek().text == symbol:
            self.advance()
            right = self.parse_binary(level + 1)
            left = self.circuit.add_gate(kind, (left, right))
        return left

    def parse_unary(self) -> Gate:
        negations = 0
        while self.peek().text in ("!", "~"):
            self.advance()
            negations += 1
        gate = self.parse_atom()
        for _ in range(negations):
            gate = self.circuit.not_(gate)
        return gate

    def parse_atom(self) -> Gate:
        token = self.advance()
        if token.text == "(":
            if self.depth == MAX_NESTING:
                msg = f"Parentheses nested deeper than {MAX_NESTING}"
                raise ExpressionError(msg, token.position)
            self.depth += 1
            inner = self.parse_binary()
            self.depth -= 1
            closing = self.advance()
            if closing.text != ")":
                msg = "Expected ')'"
                raise ExpressionError(msg, closing.position)
            return inner
        if token.is_end or token.text in _PUNCTUATION:
            msg = "Expected an operand"
            raise ExpressionError(msg, token.position)

        lowered = token.text.lower()
        if lowered in _CONSTANTS:
            return self.circuit.constant(_CONSTANTS[lowered])
        if token.text[0].isdigit():
            msg = f"Invalid identifier '{token.text}'"
            raise ExpressionError(msg, token.position)

        existing = self.circuit.find_variable(token.text)
        if existing is not None:
            return existing
        return self.circuit.variable(token.text)


def parse_expression(text: str, circuit: Circuit | None = None) -> Gate:
    """Build the gates of an infix expression and return its output gate.

    Args:
        text: The expression, e.g. ``"!(A ^ B ^ C)"``.
        circuit: Circuit to build into. Variables it already holds are reused
            by name. A new circuit is created when omitted.

    Returns:
        The gate computing the whole expression.

    Raises:
        ExpressionError: If the text is not a well-formed expression.

    Example:
        >>> q = parse_expression("!(A ^ B ^ C)")
        >>> [gate.name for gate in q.circuit.variables()]
        ['A', 'B', 'C']

    """
    if circuit is None:
        circuit = Circuit()
    parser = _Parser(circuit=circuit, tokens=tokenize(text))
    root = parser.parse_binary()
    trailing = parser.peek()
    if not trailing.is_end:
        msg = f"Unexpected '{trailing.text}'"
        raise ExpressionError(msg, trailing.position)
    logger.debug("Parsed %r into %d gate(s)", text, len(circuit))
    return root
