"""Built-in procedures for the UniLisp global environment.

This module defines core arithmetic, comparison, unary math, type predicates,
list processing, evaluation helpers and registration utilities exposed to Lisp
code. Every primitive takes ``(interp, args)``; `while` takes its operands
unevaluated and also receives the calling environment.
"""
from __future__ import annotations

from functools import reduce
from typing import TYPE_CHECKING, Callable

import numpy as np

from unilisp import LispValue
from unilisp.errors import LispRuntimeError
from unilisp.types.environment import Environment
from unilisp.types.nil import Nil
from unilisp.types.number import is_number, make_number
from unilisp.types.procedure import Procedure
from unilisp.types.value import LispType, type_of, is_truish

if TYPE_CHECKING:
    from unilisp.interpreter import Interpreter


# -------------------------------
# Argument validation
# -------------------------------
def _require_args(args: list[LispValue], min_args: int) -> None:
    if len(args) < min_args:
        raise LispRuntimeError(f"Function needs at least {min_args} arguments")


def _require_numbers(args: list[LispValue], min_args: int) -> None:
    _require_args(args, min_args)
    if not all(is_number(v) for v in args):
        raise LispRuntimeError("Not all arguments are number")


def _require_list(value: LispValue) -> list:
    if not isinstance(value, list):
        raise LispRuntimeError("Non list argument")
    return value


# -------------------------------
# Arithmetic
# -------------------------------
def _fold(op: Callable) -> Callable:
    """Left fold over two or more numbers in single precision."""
    def primitive(interp: Interpreter, args: list[LispValue]) -> LispValue:
        _require_numbers(args, 2)
        with np.errstate(all="ignore"):
            return reduce(op, (make_number(v) for v in args))
    primitive.__name__ = op.__name__
    return primitive


add = _fold(np.add)
sub = _fold(np.subtract)
mul = _fold(np.multiply)
div = _fold(np.divide)


# -------------------------------
# Comparison
# -------------------------------
def _compare(op: Callable) -> Callable:
    def primitive(interp: Interpreter, args: list[LispValue]) -> bool:
        _require_numbers(args, 2)
        return all(bool(op(a, b)) for a, b in zip(args, args[1:]))
    primitive.__name__ = op.__name__
    return primitive


gt = _compare(np.greater)
gte = _compare(np.greater_equal)
lt = _compare(np.less)
lte = _compare(np.less_equal)


def equals(interp: Interpreter, args: list[LispValue]) -> bool:
    """Numeric equality of every argument with the first; also bound as equal?."""
    _require_numbers(args, 2)
    first = make_number(args[0])
    return all(make_number(v) == first for v in args[1:])


def eq(interp: Interpreter, args: list[LispValue]) -> bool:
    """Identity comparison: numbers and booleans by value, symbols by interned
    identity, everything else (lists, strings, procedures) by reference."""
    _require_args(args, 2)
    a, b = args[0], args[1]
    ta = type_of(a)
    if ta is not type_of(b):
        return False
    if ta in (LispType.NUMBER, LispType.BOOLEAN):
        return bool(a == b)
    if ta is LispType.NATIVE:
        return getattr(a, "obj", a) is getattr(b, "obj", b)
    return a is b


# -------------------------------
# Unary math
# -------------------------------
def _unary(fn: Callable) -> Callable:
    def primitive(interp: Interpreter, args: list[LispValue]) -> LispValue:
        _require_numbers(args, 1)
        with np.errstate(all="ignore"):
            return make_number(fn(make_number(args[0])))
    primitive.__name__ = fn.__name__
    return primitive


# -------------------------------
# Type predicates
# -------------------------------
def _predicate(*types: LispType) -> Callable:
    def primitive(interp: Interpreter, args: list[LispValue]) -> bool:
        _require_args(args, 1)
        return type_of(args[0]) in types
    return primitive


def is_null(interp: Interpreter, args: list[LispValue]) -> bool:
    """True for nil and for the empty list."""
    _require_args(args, 1)
    value = args[0]
    return value is Nil or (isinstance(value, list) and not value)


# -------------------------------
# List operations
# -------------------------------
def list_builtin(interp: Interpreter, args: list[LispValue]) -> list:
    return list(args)


def car(interp: Interpreter, args: list[LispValue]) -> LispValue:
    _require_args(args, 1)
    lst = _require_list(args[0])
    if not lst:
        raise LispRuntimeError("Empty list")
    return lst[0]


def cdr(interp: Interpreter, args: list[LispValue]) -> list:
    _require_args(args, 1)
    lst = _require_list(args[0])
    if not lst:
        raise LispRuntimeError("No rest")
    return lst[1:]


def cons(interp: Interpreter, args: list[LispValue]) -> list:
    _require_args(args, 2)
    return [args[0], *_require_list(args[1])]


def append(interp: Interpreter, args: list[LispValue]) -> list:
    _require_args(args, 1)
    if not all(isinstance(v, list) for v in args):
        raise LispRuntimeError("Not all arguments are list")
    result: list = []
    for lst in args:
        result.extend(lst)
    return result


def length(interp: Interpreter, args: list[LispValue]) -> LispValue:
    _require_args(args, 1)
    return make_number(len(_require_list(args[0])))


# -------------------------------
# Evaluation and application
# -------------------------------
def eval_builtin(interp: Interpreter, args: list[LispValue]) -> LispValue:
    """(eval value): expand then evaluate a value (not text) in the global scope."""
    _require_args(args, 1)
    return interp.evaluator.evaluate(interp.expand(args[0]), interp.global_env)


def _require_procedure(value: LispValue) -> Procedure:
    if not isinstance(value, Procedure):
        raise LispRuntimeError(f"Not a procedure: {value!r}")
    return value


def map_builtin(interp: Interpreter, args: list[LispValue]) -> list:
    _require_args(args, 2)
    proc = _require_procedure(args[0])
    return [interp.apply(proc, [item]) for item in _require_list(args[1])]


def apply_builtin(interp: Interpreter, args: list[LispValue]) -> LispValue:
    _require_args(args, 2)
    proc = _require_procedure(args[0])
    return interp.apply(proc, list(_require_list(args[1])))


def while_builtin(interp: Interpreter, args: list[LispValue], env: Environment) -> LispValue:
    """(while test body...): operands arrive unevaluated.

    Returns the value of the last body expression of the last iteration, or nil
    when the body never ran.
    """
    _require_args(args, 2)
    test, body = args[0], args[1:]
    evaluate = interp.evaluator.evaluate
    result: LispValue = Nil
    while is_truish(evaluate(test, env)):
        for statement in body:
            result = evaluate(statement, env)
    return result


# -------------------------------
# Registration
# -------------------------------
def register(interp: Interpreter) -> None:
    procedures: dict[str, Callable] = {
        "+": add,
        "-": sub,
        "*": mul,
        "/": div,
        ">": gt,
        ">=": gte,
        "<": lt,
        "<=": lte,
        "=": equals,
        "sqrt": _unary(np.sqrt),
        "cos": _unary(np.cos),
        "sin": _unary(np.sin),
        "tan": _unary(np.tan),
        "abs": _unary(np.abs),
        "sign": _unary(np.sign),
        "equal?": equals,
        "eq?": eq,
        "number?": _predicate(LispType.NUMBER),
        "list?": _predicate(LispType.LIST),
        "symbol?": _predicate(LispType.SYMBOL),
        "string?": _predicate(LispType.STRING),
        "boolean?": _predicate(LispType.BOOLEAN),
        "null?": is_null,
        "car": car,
        "first": car,
        "cdr": cdr,
        "rest": cdr,
        "list": list_builtin,
        "cons": cons,
        "append": append,
        "concat": append,
        "length": length,
        "eval": eval_builtin,
        "map": map_builtin,
        "apply": apply_builtin,
    }
    for name, fn in procedures.items():
        interp.register_procedure(name, fn)
    interp.register_procedure("while", while_builtin, receives_unevaluated_args=True)
