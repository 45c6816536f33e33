"""Classification of Lisp values into the closed set of variants."""

from __future__ import annotations

from enum import Enum

from unilisp import LispValue
from unilisp.types.nil import NilType, EndOfInputType
from unilisp.types.number import is_number
from unilisp.types.symbol import Symbol
from unilisp.types.procedure import Procedure


class LispType(Enum):
    NIL = "nil"
    EOF = "eof"
    SYMBOL = "symbol"
    NUMBER = "number"
    BOOLEAN = "boolean"
    STRING = "string"
    LIST = "list"
    PROCEDURE = "procedure"
    NATIVE = "native"


def type_of(value: LispValue) -> LispType:
    # bool must be tested before numbers: bool is an int subclass
    if isinstance(value, bool):
        return LispType.BOOLEAN
    if isinstance(value, Symbol):
        return LispType.SYMBOL
    if isinstance(value, list):
        return LispType.LIST
    if isinstance(value, str):
        return LispType.STRING
    if is_number(value):
        return LispType.NUMBER
    if isinstance(value, Procedure):
        return LispType.PROCEDURE
    if isinstance(value, NilType):
        return LispType.NIL
    if isinstance(value, EndOfInputType):
        return LispType.EOF
    return LispType.NATIVE


def is_truish(value: LispValue) -> bool:
    """Lisp truthiness.

    Booleans by value, lists and strings when non-empty, numbers when nonzero,
    procedures and symbols always. Nil, end of input and native handles are
    false.
    """
    t = type_of(value)
    if t is LispType.BOOLEAN:
        return value
    if t in (LispType.LIST, LispType.STRING):
        return len(value) > 0
    if t is LispType.NUMBER:
        return bool(value != 0)
    return t in (LispType.PROCEDURE, LispType.SYMBOL)
