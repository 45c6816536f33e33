"""Procedures giving Lisp code explicit access to native functions."""
from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from unilisp import LispValue
from unilisp.errors import LispRuntimeError
from unilisp.types.number import is_number
from unilisp.types.symbol import Symbol

if TYPE_CHECKING:
    from unilisp.interpreter import Interpreter


def _function_name(value: LispValue) -> str:
    if isinstance(value, Symbol):
        return value.name
    if isinstance(value, str):
        return value
    raise LispRuntimeError(f"Native function name must be a string or symbol, got {value!r}")


def get_native_function(interp: Interpreter, args: list[LispValue]) -> LispValue:
    """(# name) returns the native procedure; (# name arg...) calls it.

    When arguments are supplied their count is the arity hint.
    """
    if not args:
        raise LispRuntimeError("# needs a native function name")
    name = _function_name(args[0])
    call_args = args[1:]
    if not call_args:
        return interp.native.get_function(name)
    proc = interp.native.get_function(name, len(call_args))
    return interp.apply(proc, call_args)


def native_function(interp: Interpreter, args: list[LispValue]) -> LispValue:
    """(native-function name [arity])"""
    if not 1 <= len(args) <= 2:
        raise LispRuntimeError("native-function takes a name and an optional arity")
    arity = None
    if len(args) == 2:
        if (
            not is_number(args[1])
            or not np.isfinite(args[1])
            or args[1] < 0
            or float(args[1]) != int(args[1])
        ):
            raise LispRuntimeError(f"Arity must be a non-negative integer, got {args[1]!r}")
        arity = int(args[1])
    return interp.native.get_function(_function_name(args[0]), arity)


def register(interp: Interpreter) -> None:
    interp.register_procedure("#", get_native_function)
    interp.register_procedure("native-function", native_function)
    interp.register_symbol_resolver("native-function-symbol", interp.native.resolve_symbol)
