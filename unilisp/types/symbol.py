from __future__ import annotations
import sys
from itertools import count


class Symbol:
    """An interned name.

    Symbols are only created through a SymbolTable, so two symbols with the
    same name inside one interpreter are the same object. Equality and hashing
    are identity based; `id` is a small integer unique within the table.
    """
    __slots__ = ("name", "id")

    def __init__(self, name: str, id: int):
        self.name = sys.intern(name)
        self.id = id

    def __repr__(self):
        return f"Symbol({self.name!r})"

    def __str__(self):
        return self.name


class SymbolTable:
    """Per-interpreter interning table mapping names to Symbols."""

    def __init__(self):
        self._symbols: dict[str, Symbol] = {}
        self._ids = count()

    def intern(self, name: str) -> Symbol:
        sym = self._symbols.get(name)
        if sym is None:
            sym = Symbol(name, next(self._ids))
            self._symbols[sym.name] = sym
        return sym

    def __contains__(self, name: str) -> bool:
        return name in self._symbols

    def __len__(self) -> int:
        return len(self._symbols)
