"""Macro expander.

Rewrites raw S-expressions into the normalised core forms the evaluator
understands: quote, if (always four elements), set!, define, lambda (single
body), begin and plain application. Function-definition sugar, quasiquote
templates and user macros are all eliminated here, before evaluation.

Special forms are recognised by symbol identity against the interpreter's own
interned symbols. `if`, `set!` and `begin` forms are rewritten in place.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from unilisp import SExpression
from unilisp.errors import LispSyntaxError
from unilisp.printer import stringify
from unilisp.types.nil import Nil
from unilisp.types.procedure import Procedure
from unilisp.types.symbol import Symbol

if TYPE_CHECKING:
    from unilisp.interpreter import Interpreter

logger = logging.getLogger(__name__)


def _is_pair(expr: SExpression) -> bool:
    return isinstance(expr, list) and len(expr) > 0


class MacroExpander:
    def __init__(self, interp: Interpreter):
        self.interp = interp
        self.macros = interp.macros
        sym = interp.symbols.intern
        self.quote = sym("quote")
        self.if_ = sym("if")
        self.set = sym("set!")
        self.define = sym("define")
        self.define_macro = sym("define-macro")
        self.lambda_ = sym("lambda")
        self.begin = sym("begin")
        self.quasiquote = sym("quasiquote")
        self.unquote = sym("unquote")
        self.unquote_splicing = sym("unquote-splicing")
        self.append = sym("append")
        self.cons = sym("cons")

    def expand(self, expr: SExpression, top_level: bool = False) -> SExpression:
        if not isinstance(expr, list):
            return expr
        if not expr:
            raise LispSyntaxError("Expression list shouldn't be empty")

        head = expr[0]
        if head is self.quote:
            if len(expr) != 2:
                raise LispSyntaxError(f"Malformed quote {stringify(expr)}")
            return expr

        if head is self.if_:
            if len(expr) == 3:
                expr.append(Nil)
            if len(expr) != 4:
                raise LispSyntaxError(f"Malformed if {stringify(expr)}")
            for i in range(1, 4):
                expr[i] = self.expand(expr[i])
            return expr

        if head is self.set:
            if len(expr) != 3:
                raise LispSyntaxError(f"Malformed set! {stringify(expr)}")
            if not isinstance(expr[1], Symbol):
                raise LispSyntaxError(f"Can set! only a symbol: {stringify(expr)}")
            expr[2] = self.expand(expr[2])
            return expr

        if head is self.define or head is self.define_macro:
            return self._expand_define(expr, top_level)

        if head is self.begin:
            if len(expr) == 1:
                return Nil
            for i in range(1, len(expr)):
                expr[i] = self.expand(expr[i], top_level)
            return expr

        if head is self.lambda_:
            return self._expand_lambda(expr)

        if head is self.quasiquote:
            if len(expr) != 2:
                raise LispSyntaxError(f"Malformed quasiquote {stringify(expr)}")
            return self.expand_quasiquote(expr[1])

        if isinstance(head, Symbol):
            macro = self.macros.get(head.name)
            if macro is not None:
                logger.debug("expanding macro %s", head.name)
                expansion = self.interp.apply(macro, list(expr[1:]))
                return self.expand(expansion, top_level)

        return [self.expand(x) for x in expr]

    def _expand_define(self, expr: list, top_level: bool) -> SExpression:
        """(define name value), (define (name args...) body...) and define-macro."""
        if len(expr) != 3:
            raise LispSyntaxError(f"Malformed define {stringify(expr)}")
        definer, target, body = expr
        if isinstance(target, list):
            # (define (f a b) body) => (define f (lambda (a b) body))
            if not target:
                raise LispSyntaxError(f"Malformed define naming {stringify(target)}")
            name, params = target[0], list(target[1:])
            return self.expand([definer, name, [self.lambda_, params, body]], top_level)

        if not isinstance(target, Symbol):
            raise LispSyntaxError(f"Can define only a symbol: {stringify(expr)}")
        expanded = self.expand(body)
        if definer is not self.define_macro:
            return [self.define, target, expanded]

        if not top_level:
            raise LispSyntaxError(f"define-macro only allowed at top level {stringify(expr)}")
        proc = self.interp.evaluator.evaluate(expanded, self.interp.global_env)
        if not isinstance(proc, Procedure):
            raise LispSyntaxError(f"define-macro doesn't expand to a procedure {stringify(expanded)}")
        self.macros.define_macro(target.name, proc)
        return Nil

    def _expand_lambda(self, expr: list) -> SExpression:
        """(lambda params body...); several body forms become an implicit begin."""
        if len(expr) < 3:
            raise LispSyntaxError(f"Malformed lambda {stringify(expr)}")
        params = expr[1]
        valid = isinstance(params, Symbol) or (
            isinstance(params, list) and all(isinstance(p, Symbol) for p in params)
        )
        if not valid:
            raise LispSyntaxError(f"Illegal lambda arguments list {stringify(params)}")
        body = expr[2] if len(expr) == 3 else [self.begin, *expr[2:]]
        return [self.lambda_, params, self.expand(body)]

    def expand_quasiquote(self, expr: SExpression) -> SExpression:
        """Expand `x => 'x; `,x => x; `(,@x y) => (append x `(y))."""
        if not _is_pair(expr):
            return [self.quote, expr]

        # A tail starting with a bare unquote symbol is itself an unquote form:
        # `(a unquote b) reads as `(a . ,b)
        end = len(expr)
        for i, item in enumerate(expr):
            if item is self.unquote or item is self.unquote_splicing:
                end = i
                break
        result = self._unquoted_tail(expr[end:]) if end < len(expr) else [self.quote, []]

        # right fold over the elements before the tail
        for item in reversed(expr[:end]):
            if _is_pair(item) and item[0] is self.unquote_splicing:
                if len(item) != 2:
                    raise LispSyntaxError(f"Badly formed unquote-splicing {stringify(item)}")
                result = [self.append, item[1], result]
            else:
                result = [self.cons, self.expand_quasiquote(item), result]
        return result

    def _unquoted_tail(self, tail: list) -> SExpression:
        if tail[0] is self.unquote_splicing:
            raise LispSyntaxError(f"Cannot splice expression: {stringify(tail)}")
        if len(tail) != 2:
            raise LispSyntaxError(f"Badly formed unquote {stringify(tail)}")
        return tail[1]
