from __future__ import annotations


class NativeHandle:
    """Opaque reference to a host object returned from a native call."""
    __slots__ = ("obj",)

    def __init__(self, obj):
        self.obj = obj

    def __repr__(self):
        return f"NativeHandle({self.obj!r})"
