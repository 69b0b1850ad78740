"""Parser for source-level type expressions.

Grammar::

    type      := wildcard | reference
    wildcard  := '?' [('extends' | 'super') type]
    reference := NAME ['<' type (',' type)* '>'] ('[]' | '...')*

Names are dotted (``java.util.List``) and may contain ``$`` for nested
types (``Outer$Inner``).
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_TOKEN = re.compile(r"\s*(\.\.\.|\[\s*\]|[<>,?]|[A-Za-z_$][\w$]*(?:\.[A-Za-z_$][\w$]*)*)")

WILDCARD = "?"


@dataclass(frozen=True)
class TypeExpression:
    """Parsed, unresolved type expression.

    Attributes:
        name: Name as written, or ``?`` for a wildcard.
        arguments: Generic arguments.
        array_depth: Number of trailing ``[]`` / ``...`` suffixes.
        bound: Bound of a wildcard.
        bound_kind: ``extends`` or ``super`` when ``bound`` is set.
    """

    name: str
    arguments: tuple[TypeExpression, ...] = ()
    array_depth: int = 0
    bound: TypeExpression | None = None
    bound_kind: str | None = None

    @property
    def is_wildcard(self) -> bool:
        return self.name == WILDCARD


def parse_type_expression(text: str) -> TypeExpression:
    """Parse *text* into a TypeExpression.

    Args:
        text: Type expression such as ``Map<String, List<? extends Shape>>``.

    Returns:
        Parsed expression tree.

    Raises:
        ValueError: If the expression is not well formed.

    Example:
        >>> parse_type_expression("List<int[]>").arguments[0].array_depth
        1
    """
    tokens = _tokenize(text)
    parser = _Parser(text, tokens)
    expression = parser.parse_type()
    if parser.position != len(tokens):
        raise ValueError(f"unexpected '{tokens[parser.position]}' in type '{text}'")
    return expression


def _tokenize(text: str) -> list[str]:
    tokens: list[str] = []
    position = 0
    while position < len(text):
        if text[position:].strip() == "":
            break
        match = _TOKEN.match(text, position)
        if not match:
            raise ValueError(f"invalid character in type '{text}' at offset {position}")
        token = match.group(1)
        tokens.append("[]" if token.startswith("[") else token)
        position = match.end()
    if not tokens:
        raise ValueError("empty type expression")
    return tokens


class _Parser:
    def __init__(self, text: str, tokens: list[str]) -> None:
        self.text = text
        self.tokens = tokens
        self.position = 0

    def peek(self) -> str | None:
        return self.tokens[self.position] if self.position < len(self.tokens) else None

    def consume(self) -> str:
        token = self.peek()
        if token is None:
            raise ValueError(f"unexpected end of type '{self.text}'")
        self.position += 1
        return token

    def expect(self, expected: str) -> None:
        token = self.consume()
        if token != expected:
            raise ValueError(f"expected '{expected}' but found '{token}' in type '{self.text}'")

    def parse_type(self) -> TypeExpression:
        if self.peek() == WILDCARD:
            self.consume()
            if self.peek() in ("extends", "super"):
                bound_kind = self.consume()
                return TypeExpression(WILDCARD, bound=self.parse_type(), bound_kind=bound_kind)
            return TypeExpression(WILDCARD)

        name = self.consume()
        if not (name[0].isalpha() or name[0] in "_$"):
            raise ValueError(f"expected a type name but found '{name}' in type '{self.text}'")

        arguments: list[TypeExpression] = []
        if self.peek() == "<":
            self.consume()
            arguments.append(self.parse_type())
            while self.peek() == ",":
                self.consume()
                arguments.append(self.parse_type())
            self.expect(">")

        depth = 0
        while self.peek() in ("[]", "..."):
            self.consume()
            depth += 1
        return TypeExpression(name, tuple(arguments), depth)
