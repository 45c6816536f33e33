from __future__ import annotations


class NilType:
    __slots__ = ()

    def __repr__(self): return "nil"
    def __bool__(self): return False

    def __eq__(self, other):
        return isinstance(other, NilType)

    def __hash__(self):
        return hash(NilType)


class EndOfInputType:
    """Returned by the reader once the input stream is exhausted."""
    __slots__ = ()

    def __repr__(self): return "eof"
    def __bool__(self): return False


Nil = NilType()
EOF = EndOfInputType()
