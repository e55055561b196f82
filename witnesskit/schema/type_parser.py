# witnesskit/schema/type_parser.py
"""
Parser for type-expression strings in schema documents.

Grammar:
    type      := function | postfix
    function  := "(" [type ("," type)*] ")" "->" type
    postfix   := primary "?"*
    primary   := name [("<" | "[") type ("," type)* (">" | "]")]
               | "[" type "]"                 -> Array<type>
               | "[" type ":" type "]"        -> Dictionary<key, value>
               | "(" [type ("," type)*] ")"   -> tuple, a single element is grouping

``Void`` and ``()`` both parse to the empty tuple.

Examples:
    >>> str(parse_type("(Self, Self) -> Bool"))
    '(Self, Self) -> Bool'
    >>> parse_type("[String: Self]?")
    OptionalType(wrapped=GenericType(name='Dictionary', ...))
"""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

from witnesskit.core.exceptions import SchemaError
from witnesskit.core.types import (
    VOID,
    FunctionType,
    GenericType,
    OptionalType,
    TupleType,
    TypeExpr,
    TypeIdentifier,
)

_TOKEN = re.compile(r"\s*(?:(->)|([A-Za-z_][A-Za-z0-9_.]*)|([()\[\]<>,:?]))")


def tokenize(text: str) -> List[str]:
    tokens = []
    position = 0
    text = text.rstrip()
    while position < len(text):
        match = _TOKEN.match(text, position)
        if match is None or match.end() == position:
            raise SchemaError(f"unexpected character {text[position:].strip()[:1]!r} in type {text!r}")
        tokens.append(match.group(match.lastindex))
        position = match.end()
    return tokens


class _Parser:
    def __init__(self, text: str):
        self.text = text
        self.tokens = tokenize(text)
        self.index = 0

    # -- token helpers --------------------------------------------------------

    def peek(self) -> Optional[str]:
        if self.index < len(self.tokens):
            return self.tokens[self.index]
        return None

    def take(self) -> str:
        token = self.peek()
        if token is None:
            raise self.error("unexpected end of type")
        self.index += 1
        return token

    def expect(self, token: str) -> None:
        found = self.take()
        if found != token:
            raise self.error(f"expected {token!r}, found {found!r}")

    def accept(self, token: str) -> bool:
        if self.peek() == token:
            self.index += 1
            return True
        return False

    def error(self, message: str) -> SchemaError:
        return SchemaError(f"{message} in type {self.text!r}")

    # -- grammar --------------------------------------------------------------

    def parse(self) -> TypeExpr:
        if not self.tokens:
            raise self.error("empty type")
        result = self.type()
        if self.peek() is not None:
            raise self.error(f"unexpected {self.peek()!r}")
        return result

    def type(self) -> TypeExpr:
        if self.peek() == "(":
            start = self.index
            elements = self.parenthesized()
            if self.accept("->"):
                return FunctionType(elements, self.type())
            self.index = start
        return self.postfix()

    def parenthesized(self) -> Tuple[TypeExpr, ...]:
        self.expect("(")
        return self.list_until(")")

    def list_until(self, closing: str) -> Tuple[TypeExpr, ...]:
        items: List[TypeExpr] = []
        if self.accept(closing):
            return ()
        while True:
            items.append(self.type())
            if self.accept(closing):
                return tuple(items)
            self.expect(",")

    def postfix(self) -> TypeExpr:
        result = self.primary()
        while self.accept("?"):
            result = OptionalType(result)
        return result

    def primary(self) -> TypeExpr:
        token = self.take()

        if token == "(":
            elements = self.list_until(")")
            if len(elements) == 1:
                return elements[0]
            return TupleType(elements)

        if token == "[":
            first = self.type()
            if self.accept(":"):
                value = self.type()
                self.expect("]")
                return GenericType("Dictionary", (first, value))
            self.expect("]")
            return GenericType("Array", (first,))

        if not re.match(r"[A-Za-z_]", token):
            raise self.error(f"unexpected {token!r}")

        if token == "Void":
            return VOID
        if self.peek() in ("<", "["):
            closing = ">" if self.take() == "<" else "]"
            arguments = self.list_until(closing)
            if not arguments:
                raise self.error(f"{token} needs at least one generic argument")
            if token == "Optional" and len(arguments) == 1:
                return OptionalType(arguments[0])
            return GenericType(token, arguments)
        return TypeIdentifier(token)


def parse_type(text: str) -> TypeExpr:
    """
    Parse a type string.

    Raises:
        SchemaError: The string is not a valid type expression
    """
    if not isinstance(text, str):
        raise SchemaError(f"type must be a string, got {type(text).__name__}")
    return _Parser(text).parse()
