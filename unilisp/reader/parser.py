"""
  Lisp Reader

Turns the token stream of an InPort into raw (unexpanded) Lisp values:

    - nil           -> Nil
    - #t / #f       -> True / False
    - "text"        -> str (surrounding quotes stripped, escapes kept)
    - numbers       -> numpy.float32
    - lists         -> Python list
    - quote forms   -> [quote, expr], [quasiquote, expr], [unquote, expr],
                       [unquote-splicing, expr]
    - anything else -> interned Symbol
"""

from __future__ import annotations

from typing import Iterator, Optional

from unilisp import SExpression
from unilisp.errors import LispSyntaxError
from unilisp.reader.port import InPort
from unilisp.types.nil import Nil, EOF
from unilisp.types.number import parse_number
from unilisp.types.symbol import SymbolTable

QUOTE_FORMS: dict[str, str] = {
    "'": "quote",
    "`": "quasiquote",
    ",": "unquote",
    ",@": "unquote-splicing",
}


class Reader:
    def __init__(self, symbols: SymbolTable):
        self.symbols = symbols
        self.quotes = {tok: symbols.intern(name) for tok, name in QUOTE_FORMS.items()}

    def read_expression(self, port: InPort) -> SExpression:
        """Read one expression, or EOF when the stream is exhausted."""
        token = port.next_token()
        if token is None:
            return EOF
        return self.read_token(port, token)

    def read_token(self, port: InPort, token: Optional[str]) -> SExpression:
        if token == "(":
            items: list[SExpression] = []
            while True:
                token = port.next_token()
                if token == ")":
                    return items
                if token is None:
                    raise LispSyntaxError("Unexpected end of input in list")
                items.append(self.read_token(port, token))
        if token == ")":
            raise LispSyntaxError("Unexpected )")
        if token is None:
            raise LispSyntaxError("Unexpected end of input")
        quote = self.quotes.get(token)
        if quote is not None:
            expr = self.read_expression(port)
            if expr is EOF:
                raise LispSyntaxError(f"Unexpected end of input after {token}")
            return [quote, expr]
        return self.atom(token)

    def atom(self, token: str) -> SExpression:
        if token == "nil":
            return Nil
        if token == "#t":
            return True
        if token == "#f":
            return False
        if token[0] == '"':
            return token[1:-1]
        number = parse_number(token)
        if number is not None:
            return number
        return self.symbols.intern(token)

    def read_all(self, port: InPort) -> Iterator[SExpression]:
        while (expr := self.read_expression(port)) is not EOF:
            yield expr
