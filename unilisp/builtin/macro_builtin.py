"""Builtin macro transformers for UniLisp (implemented in Python).
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from unilisp import SExpression
from unilisp.errors import LispSyntaxError
from unilisp.printer import stringify

if TYPE_CHECKING:
    from unilisp.interpreter import Interpreter


def let_macro(interp: Interpreter, args: list[SExpression]) -> SExpression:
    """
    (let ((var1 val1) (var2 val2) ...) body...)
    => ((lambda (var1 var2 ...) body...) val1 val2 ...)
    """
    if len(args) < 2:
        raise LispSyntaxError("Not enough params for let")

    bindings = args[0]
    body = list(args[1:])

    if not isinstance(bindings, list):
        raise LispSyntaxError(f"let bindings must be a list: {stringify(bindings)}")
    if not all(isinstance(b, list) and len(b) == 2 for b in bindings):
        raise LispSyntaxError(f"Wrong let bindings format: {stringify(bindings)}")

    vars_ = [b[0] for b in bindings]
    vals_ = [b[1] for b in bindings]
    return [[interp.symbols.intern("lambda"), vars_, *body], *vals_]


def register(interp: Interpreter) -> None:
    interp.register_macro("let", let_macro)
