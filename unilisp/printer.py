"""Canonical external text rendering of Lisp values.

`stringify` is the inverse of the reader for every literal type: numbers,
strings, booleans, symbols, nil and lists of those read back to values that
render identically. Procedures and native handles render as placeholders.
"""

from __future__ import annotations

from io import StringIO

from unilisp import LispValue
from unilisp.types.number import format_number
from unilisp.types.value import LispType, type_of


def stringify(value: LispValue) -> str:
    with StringIO() as buffer:
        _write(value, buffer)
        return buffer.getvalue()


def _write(value: LispValue, buffer: StringIO) -> None:
    match type_of(value):
        case LispType.LIST:
            buffer.write("(")
            first = True
            for item in value:
                if not first:
                    buffer.write(" ")
                _write(item, buffer)
                first = False
            buffer.write(")")
        case LispType.BOOLEAN:
            buffer.write("#t" if value else "#f")
        case LispType.NUMBER:
            buffer.write(format_number(value))
        case LispType.STRING:
            buffer.write(f'"{value}"')
        case LispType.SYMBOL:
            buffer.write(value.name)
        case LispType.NIL:
            buffer.write("nil")
        case LispType.EOF:
            buffer.write("eof")
        case LispType.PROCEDURE:
            buffer.write(f"#{value!r}")
        case _:
            obj = getattr(value, "obj", value)
            buffer.write(f"#<native {obj!r}>")
