from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, Iterator, Literal, Optional, TextIO

from unilisp import LispValue, PrimitiveFn, SExpression
from unilisp.builtin.env_builtin import register as register_procedures
from unilisp.builtin.macro_builtin import register as register_macros
from unilisp.builtin.native_builtin import register as register_native
from unilisp.config import get_prelude_path
from unilisp.errors import LispError, LispRuntimeError, LispSyntaxError
from unilisp.evaluation.apply import apply as apply_procedure
from unilisp.evaluation.evaluator import Evaluator
from unilisp.expansion.expander import MacroExpander
from unilisp.native.resolver import NativeResolver
from unilisp.printer import stringify
from unilisp.reader.parser import Reader
from unilisp.reader.port import InPort
from unilisp.types.environment import Environment
from unilisp.types.macro_environment import MacroEnvironment
from unilisp.types.nil import Nil, EOF
from unilisp.types.procedure import Procedure
from unilisp.types.symbol import SymbolTable

logger = logging.getLogger(__name__)

# (interp, symbol_name) -> value, or None when the resolver does not know it
SymbolResolver = Callable[["Interpreter", str], Optional[LispValue]]

Source = str | TextIO | InPort


def _port(source: Source) -> InPort:
    return source if isinstance(source, InPort) else InPort(source)


@contextmanager
def _host_stack_guard(error: type[LispError] = LispRuntimeError) -> Iterator[None]:
    """Report exhaustion of the Python stack as a Lisp error.

    Tail calls run in constant stack, but non-tail recursion, deep operand
    nesting and deeply nested input still consume host frames.
    """
    try:
        yield
    except RecursionError as exc:
        raise error("maximum recursion depth exceeded") from exc


class Interpreter:
    """
    Reads, expands and evaluates UniLisp code.

    Each instance owns its symbol table, global environment, macro table and
    symbol resolvers; instances are independent of each other except for the
    process-wide native function cache. An instance must only be driven from one
    thread at a time. To reset, discard the instance and create a new one.
    """

    def __init__(self, prelude: str | None | Literal['auto'] = 'auto'):
        self.symbols = SymbolTable()
        self.global_env = Environment()
        self.macros = MacroEnvironment()
        self.symbol_resolvers: dict[str, SymbolResolver] = {}
        self.native = NativeResolver()

        self.reader = Reader(self.symbols)
        self.expander = MacroExpander(self)
        self.evaluator = Evaluator(self)

        register_procedures(self)
        register_macros(self)
        register_native(self)

        if prelude is None:
            pass  # explicit: no prelude
        elif prelude == 'auto':
            path = get_prelude_path()
            logger.debug("loading prelude %s", path)
            try:
                with open(path, encoding='utf-8') as stream:
                    self.eval_all(stream)
            except FileNotFoundError:
                # Be permissive: no prelude found -> proceed
                logger.warning("prelude %s not found", path)
        elif prelude:
            self.eval_all(prelude)

    # --- Reading and expansion ---
    def read_expression(self, source: Source) -> SExpression:
        """Read one raw expression; returns EOF at the end of the stream."""
        with _host_stack_guard(LispSyntaxError):
            return self.reader.read_expression(_port(source))

    def expand(self, expr: SExpression, top_level: bool = False) -> SExpression:
        with _host_stack_guard():
            return self.expander.expand(expr, top_level)

    def parse(self, source: Source) -> SExpression:
        """Read exactly one expression and fully macro-expand it."""
        return self.expand(self.read_expression(source), True)

    # --- Evaluation ---
    def eval(self, source: Source | SExpression, env: Environment | None = None) -> LispValue:
        """Evaluate one expression.

        Text, streams and ports are read and expanded first; any other value is
        taken to be an already expanded expression. A Lisp string value is a
        Python ``str`` too, so passing one here evaluates its contents as source
        text; evaluate such values with ``self.evaluator.evaluate`` instead.
        """
        if isinstance(source, (str, InPort)) or hasattr(source, "readline"):
            source = self.parse(source)
        with _host_stack_guard():
            return self.evaluator.evaluate(source, env if env is not None else self.global_env)

    def eval_all(self, source: Source) -> LispValue:
        """Evaluate every top-level form in `source`; returns the last result."""
        port = _port(source)
        result: LispValue = Nil
        for expr in self._forms(port):
            with _host_stack_guard():
                result = self.evaluator.evaluate(expr, self.global_env)
        return result

    def _forms(self, port: InPort) -> Iterator[SExpression]:
        while (expr := self.read_expression(port)) is not EOF:
            yield self.expand(expr, True)

    def apply(self, proc: LispValue, args: list[LispValue]) -> LispValue:
        with _host_stack_guard():
            return apply_procedure(self, proc, args)

    def resolve_symbol(self, name: str) -> LispValue:
        """Ask every registered symbol resolver, in registration order."""
        for resolver in self.symbol_resolvers.values():
            value = resolver(self, name)
            if value is not None:
                return value
        return None

    # --- Customization ---
    def register_procedure(
        self, name: str, func: PrimitiveFn, receives_unevaluated_args: bool = False
    ) -> Procedure:
        """Install a host primitive in the global environment.

        `func` is called as ``func(interp, args)``. With
        `receives_unevaluated_args` the operands are passed unevaluated and the
        call is ``func(interp, args, env)``.
        """
        self.symbols.intern(name)
        proc = Procedure.primitive(func, receives_unevaluated_args, name=name)
        self.global_env.define(name, proc)
        return proc

    def register_macro(self, name: str, func: PrimitiveFn) -> Procedure:
        """Install a host macro transformer called as ``func(interp, operands)``."""
        self.symbols.intern(name)
        proc = Procedure.primitive(func, name=name)
        self.macros.define_macro(name, proc)
        return proc

    def register_symbol_resolver(self, id: str, resolver: SymbolResolver) -> None:
        self.symbol_resolvers[id] = resolver

    def global_entries(self) -> Iterator[tuple[str, LispValue]]:
        return self.global_env.entries()

    # --- Interactive loop ---
    def repl(self, prompt: str | None, inport: Source, outport: TextIO | None = None) -> None:
        """Read-eval-print until end of input.

        Syntax and runtime errors are reported and the loop moves on to the
        next top-level form.
        """
        port = _port(inport)
        while True:
            if prompt and outport is not None:
                outport.write(prompt)
            try:
                expr = self.read_expression(port)
                if expr is EOF:
                    return
                expanded = self.expand(expr, True)
                with _host_stack_guard():
                    value = self.evaluator.evaluate(expanded, self.global_env)
            except (LispSyntaxError, LispRuntimeError) as exc:
                logger.warning("repl: %s: %s", type(exc).__name__, exc)
                if outport is not None:
                    outport.write(f"{type(exc).__name__}: {exc}\n")
                continue
            if outport is not None:
                outport.write(stringify(value) + "\n")
