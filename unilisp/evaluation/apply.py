"""Application engine for UniLisp.

Binding of closure parameters and application of procedures to already
evaluated arguments. The evaluator's own tail loop binds through
`bind_arguments` directly; `apply` is the non-tail entry used by `map`,
`apply`, macro invocation and host code.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from unilisp import LispValue, SExpression
from unilisp.errors import LispRuntimeError
from unilisp.printer import stringify
from unilisp.types.environment import Environment
from unilisp.types.nil import Nil
from unilisp.types.procedure import Procedure
from unilisp.types.symbol import Symbol

if TYPE_CHECKING:
    from unilisp.interpreter import Interpreter


def bind_arguments(params: SExpression, args: list[LispValue], outer: Environment) -> Environment:
    """Create the child scope for a closure call.

    A list of symbols binds positionally and must match the argument count; a
    single symbol binds the whole argument list.
    """
    env = Environment(outer)
    if isinstance(params, list):
        if len(params) != len(args):
            raise LispRuntimeError(
                f"Mismatched parameters: {stringify(params)} != {stringify(args)}"
            )
        for param, arg in zip(params, args):
            env.vars[param.name] = arg
    elif isinstance(params, Symbol):
        env.vars[params.name] = list(args)
    else:
        raise LispRuntimeError(f"Illegal parameter spec {stringify(params)}")
    return env


def apply(
    interp: Interpreter,
    proc: LispValue,
    args: list[LispValue],
    env: Environment | None = None,
) -> LispValue:
    """Apply a Procedure to evaluated arguments and return its result.

    `env` is only handed to primitives that take their operands unevaluated; it
    defaults to the global environment.
    """
    if not isinstance(proc, Procedure):
        raise LispRuntimeError(f"Cannot invoke: {stringify(proc)}")
    if proc.is_primitive:
        if proc.receives_unevaluated_args:
            result = proc.func(interp, args, env if env is not None else interp.global_env)
        else:
            result = proc.func(interp, args)
        return Nil if result is None else result
    return interp.evaluator.evaluate(proc.body, bind_arguments(proc.params, args, proc.env))
