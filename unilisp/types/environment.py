"""Runtime environment for UniLisp.

An Environment maps symbol names to evaluated Lisp values and links to an
`outer` environment, forming the lexical scope chain. The chain's root is the
interpreter's global environment. Closures hold a plain reference to the
environment they were created in, so a scope lives as long as anything still
points at it.
"""

from __future__ import annotations

from io import StringIO
from typing import Iterator, Optional

from unilisp import LispValue
from unilisp.errors import LispRuntimeError


_MISSING = object()


class Environment:
    """Hierarchical mapping from symbol names to Lisp values."""

    __slots__ = ("vars", "outer")

    def __init__(self, outer: Optional[Environment] = None):
        self.vars: dict[str, LispValue] = {}
        self.outer: Environment | None = outer

    def define(self, name: str, value: LispValue) -> None:
        """Bind `name` in this frame, shadowing any outer binding."""
        self.vars[name] = value

    def find(self, name: str) -> Optional[Environment]:
        """Find the nearest environment in the chain that binds `name`."""
        env: Optional[Environment] = self
        while env is not None:
            if name in env.vars:
                return env
            env = env.outer
        return None

    def try_lookup(self, name: str, default: LispValue = None) -> LispValue:
        env: Optional[Environment] = self
        while env is not None:
            value = env.vars.get(name, _MISSING)
            if value is not _MISSING:
                return value
            env = env.outer
        return default

    def lookup(self, name: str) -> LispValue:
        """Look up `name` through the chain; raises LispRuntimeError if unbound."""
        env = self.find(name)
        if env is None:
            raise LispRuntimeError(f"Cannot find value for {name}")
        return env.vars[name]

    def set(self, name: str, value: LispValue) -> None:
        """Update the nearest existing binding of `name`.

        When no scope in the chain binds `name` the binding is created in this
        frame.
        """
        env = self.find(name)
        if env is None:
            env = self
        env.vars[name] = value

    def entries(self) -> Iterator[tuple[str, LispValue]]:
        return iter(self.vars.items())

    def __contains__(self, name: str) -> bool:
        return self.find(name) is not None

    def _write_vars(self, buffer: StringIO) -> None:
        buffer.write("{")
        first = True
        for k, v in self.vars.items():
            if not first:
                buffer.write(", ")
            buffer.write(f"{k}: {v!r}")
            first = False
        buffer.write("}")

    def __str__(self) -> str:
        with StringIO() as buffer:
            self._write_vars(buffer)
            if self.outer is not None:
                buffer.write(" -> ...")  # indicate parent exists
            return buffer.getvalue()

    def __repr__(self) -> str:
        return f"<Environment {len(self.vars)} bindings{' (nested)' if self.outer else ''}>"
