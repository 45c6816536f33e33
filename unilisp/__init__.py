# Core type aliases for UniLisp's data model.
# Values are plain Python objects wherever Python already has the right type
# (bool, str, list) plus a few slotted classes for the rest (Symbol, Procedure,
# NativeHandle) and numpy.float32 for numbers. There is no Cons type: a Lisp
# list is a Python list.
#
# Naming guidance:
# - SExpression: use in reader/expander code to denote syntactic forms.
# - LispValue:  use in evaluator/runtime code to denote evaluated values.

import logging
from typing import Any, Callable

LispValue = Any
SExpression = LispValue

# Host procedures: (interpreter, args) -> value
PrimitiveFn = Callable[..., LispValue]

logging.getLogger(__name__).addHandler(logging.NullHandler())

from unilisp.errors import LispError, LispSyntaxError, LispRuntimeError  # noqa: E402
from unilisp.types.nil import Nil, EOF  # noqa: E402
from unilisp.printer import stringify  # noqa: E402
from unilisp.interpreter import Interpreter  # noqa: E402

__all__ = [
    "LispValue",
    "SExpression",
    "PrimitiveFn",
    "LispError",
    "LispSyntaxError",
    "LispRuntimeError",
    "Nil",
    "EOF",
    "stringify",
    "Interpreter",
]
