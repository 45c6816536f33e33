"""Procedure values: closures and host primitives."""

from __future__ import annotations

from io import StringIO

from unilisp import SExpression, PrimitiveFn
from unilisp.types.environment import Environment


class Procedure:
    """A first-class procedure.

    A closure carries a parameter spec (a single Symbol binding every argument
    as a list, or a list of Symbols), a body expression and the environment it
    was created in. A primitive carries a host callable invoked as
    ``func(interp, args)``; when ``receives_unevaluated_args`` is set the
    operands arrive unevaluated and the call becomes ``func(interp, args, env)``.
    """

    __slots__ = ("params", "body", "env", "func", "receives_unevaluated_args", "name")

    def __init__(
        self,
        params: SExpression = None,
        body: SExpression = None,
        env: Environment | None = None,
        func: PrimitiveFn | None = None,
        receives_unevaluated_args: bool = False,
        name: str | None = None,
    ):
        self.params = params
        self.body = body
        self.env = env
        self.func = func
        self.receives_unevaluated_args = receives_unevaluated_args
        self.name = name

    @classmethod
    def closure(cls, params: SExpression, body: SExpression, env: Environment) -> Procedure:
        return cls(params=params, body=body, env=env)

    @classmethod
    def primitive(
        cls, func: PrimitiveFn, receives_unevaluated_args: bool = False, name: str | None = None
    ) -> Procedure:
        return cls(func=func, receives_unevaluated_args=receives_unevaluated_args, name=name)

    @property
    def is_primitive(self) -> bool:
        return self.func is not None

    def __repr__(self) -> str:
        if self.is_primitive:
            return f"<primitive {self.name or getattr(self.func, '__name__', '?')}>"
        with StringIO() as buffer:
            buffer.write("<lambda ")
            if isinstance(self.params, list):
                buffer.write("(")
                buffer.write(" ".join(str(p) for p in self.params))
                buffer.write(")")
            else:
                buffer.write(str(self.params))
            buffer.write(">")
            return buffer.getvalue()
