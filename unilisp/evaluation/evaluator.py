"""Core evaluator for the UniLisp interpreter.

`Evaluator.evaluate` is a single loop over an (expression, environment) pair.
`if`, `begin` and closure application replace the pair and go round the loop
again instead of recursing, so tail positions run in constant Python stack.
Only operands, tests and non-final `begin` forms recurse.

The evaluator expects forms already normalised by the MacroExpander; when
handed a raw value it still fails with LispRuntimeError on malformed shapes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from unilisp import LispValue, SExpression
from unilisp.errors import LispRuntimeError
from unilisp.evaluation.apply import bind_arguments
from unilisp.printer import stringify
from unilisp.types.environment import Environment
from unilisp.types.nil import Nil
from unilisp.types.procedure import Procedure
from unilisp.types.symbol import Symbol
from unilisp.types.value import is_truish

if TYPE_CHECKING:
    from unilisp.interpreter import Interpreter

_MISSING = object()


def _check_arity(expr: list, count: int) -> None:
    if len(expr) != count:
        raise LispRuntimeError(f"Malformed {expr[0]} form: {stringify(expr)}")


class Evaluator:
    def __init__(self, interp: Interpreter):
        self.interp = interp
        sym = interp.symbols.intern
        self.quote = sym("quote")
        self.if_ = sym("if")
        self.set = sym("set!")
        self.define = sym("define")
        self.lambda_ = sym("lambda")
        self.begin = sym("begin")

    def lookup(self, name: str, env: Environment) -> LispValue:
        """Resolve a variable: lexical chain first, then the symbol resolvers.

        A value found by a resolver is cached in the global environment.
        """
        value = env.try_lookup(name, _MISSING)
        if value is not _MISSING:
            return value
        value = self.interp.resolve_symbol(name)
        if value is None:
            raise LispRuntimeError(f"Cannot resolve symbol {name}")
        self.interp.global_env.define(name, value)
        return value

    def evaluate(self, expr: SExpression, env: Environment) -> LispValue:
        while True:
            if isinstance(expr, Symbol):
                return self.lookup(expr.name, env)

            # constant literal
            if not isinstance(expr, list):
                return expr
            if not expr:
                raise LispRuntimeError("Cannot evaluate an empty list")

            op = expr[0]
            if op is self.quote:
                # (quote exp)
                _check_arity(expr, 2)
                return expr[1]

            if op is self.if_:
                # (if test conseq alt)
                if len(expr) not in (3, 4):
                    raise LispRuntimeError(f"Malformed if form: {stringify(expr)}")
                test = self.evaluate(expr[1], env)
                if is_truish(test):
                    expr = expr[2]
                else:
                    expr = expr[3] if len(expr) == 4 else Nil
                continue

            if op is self.set:
                # (set! var exp)
                _check_arity(expr, 3)
                value = self.evaluate(expr[2], env)
                env.set(self._target_name(expr), value)
                return Nil

            if op is self.define:
                # (define var exp)
                _check_arity(expr, 3)
                value = self.evaluate(expr[2], env)
                env.define(self._target_name(expr), value)
                return Nil

            if op is self.lambda_:
                # (lambda (var*) exp)
                _check_arity(expr, 3)
                return Procedure.closure(expr[1], expr[2], env)

            if op is self.begin:
                # (begin exp+); the last expression is evaluated by the loop
                if len(expr) == 1:
                    return Nil
                for statement in expr[1:-1]:
                    self.evaluate(statement, env)
                expr = expr[-1]
                continue

            # (proc exp*)
            proc = self.evaluate(op, env)
            if not isinstance(proc, Procedure):
                raise LispRuntimeError(f"Cannot invoke: {stringify(proc)}")
            if proc.receives_unevaluated_args:
                args = list(expr[1:])
            else:
                args = [self.evaluate(arg, env) for arg in expr[1:]]

            if proc.is_primitive:
                if proc.receives_unevaluated_args:
                    result = proc.func(self.interp, args, env)
                else:
                    result = proc.func(self.interp, args)
                return Nil if result is None else result

            expr = proc.body
            env = bind_arguments(proc.params, args, proc.env)

    @staticmethod
    def _target_name(expr: list) -> str:
        target = expr[1]
        if not isinstance(target, Symbol):
            raise LispRuntimeError(f"Cannot bind non-symbol {stringify(target)}")
        return target.name
