from __future__ import annotations

import logging
from typing import Iterator

from unilisp import LispValue
from unilisp.types.procedure import Procedure

logger = logging.getLogger(__name__)


class MacroEnvironment:
    """
    Macro table mapping macro names to transformer Procedures.

    Transformers are either Lisp closures registered by `define-macro` or host
    primitives registered through `Interpreter.register_macro`. Both receive the
    unevaluated operand list and return the replacement form.
    """

    def __init__(self):
        self.macros: dict[str, Procedure] = {}

    def define_macro(self, name: str, transformer: Procedure) -> None:
        logger.debug("defining macro %s -> %r", name, transformer)
        self.macros[name] = transformer

    def is_macro(self, name: str) -> bool:
        return name in self.macros

    def get(self, name: str) -> Procedure | None:
        return self.macros.get(name)

    def entries(self) -> Iterator[tuple[str, LispValue]]:
        return iter(self.macros.items())
