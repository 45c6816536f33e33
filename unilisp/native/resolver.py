"""Native interop: resolve host callables by dotted name.

A name such as ``math.sqrt`` or ``os.path.join`` is split at its last dot into
a qualifier and a member. The qualifier is looked up among the loaded Python
modules (``sys.modules`` in load order, minus a deny-list of system, test and
tooling modules); within the first module that exposes a matching member the
member is wrapped as a primitive Procedure. When nothing loaded matches, the
qualifier is imported and scanned once more.

Members must be public, callable, not generic aliases, not deprecated, and not
named like paired Begin/End APIs. On classes only static members qualify.
When an arity hint is given the member's signature must accept exactly that
many positional arguments; without a hint the first candidate wins.

Resolved callables go into a process-wide cache keyed by (name, arity); the
first resolution wins and is never invalidated. Each resolver also keeps the
Procedures it has built, keyed by the full symbol text.
"""

from __future__ import annotations

import importlib
import inspect
import logging
import re
import sys
from types import ModuleType
from typing import TYPE_CHECKING, Any, Callable, Iterator, Optional

from unilisp import LispValue
from unilisp.config import (
    get_native_deny_patterns,
    get_native_marker,
    native_autoimport_enabled,
)
from unilisp.errors import LispRuntimeError
from unilisp.native.marshal import from_native, to_native
from unilisp.types.procedure import Procedure

if TYPE_CHECKING:
    from unilisp.interpreter import Interpreter

logger = logging.getLogger(__name__)

IGNORED_MODULES = (
    r"^_",
    r"^builtins$",
    r"^sys$",
    r"^importlib(\..*)?$",
    r"^(_)?pytest(\..*)?$",
    r"^pluggy(\..*)?$",
    r"^hypothesis(\..*)?$",
    r"^unittest(\..*)?$",
    r"^pip(\..*)?$",
    r"^setuptools(\..*)?$",
    r"^pkg_resources(\..*)?$",
    r"^distutils(\..*)?$",
    r"^unilisp(\..*)?$",
)

# Heuristic filter against paired Begin/End style APIs
IGNORED_MEMBER_FRAGMENTS = ("Begin", "End")

# Process-wide, append-only: (qualified name, arity) -> host callable
_DELEGATE_CACHE: dict[tuple[str, Optional[int]], Callable] = {}


def split_function_name(full_name: str) -> tuple[str, str] | None:
    """Split ``Type.Member`` at the last dot; None when there is no dot."""
    qualifier, sep, member = full_name.rpartition(".")
    if not sep or not qualifier or not member:
        return None
    return qualifier, member


def _deny_list() -> list[re.Pattern]:
    return [re.compile(p) for p in (*IGNORED_MODULES, *get_native_deny_patterns())]


def is_ignored_module(name: str, deny: list[re.Pattern] | None = None) -> bool:
    deny = _deny_list() if deny is None else deny
    return any(p.search(name) for p in deny)


def valid_modules() -> Iterator[ModuleType]:
    deny = _deny_list()
    for name, module in list(sys.modules.items()):
        if module is None or is_ignored_module(name, deny):
            continue
        yield module


def accepts_arity(fn: Callable, arity: int) -> bool:
    try:
        sig = inspect.signature(fn)
    except (TypeError, ValueError):
        return False
    try:
        sig.bind(*range(arity))
    except TypeError:
        return False
    return True


def _walk(module: ModuleType, qualifier: str) -> Any:
    """Resolve `qualifier` inside `module`, or None if it does not live there."""
    name = module.__name__
    if qualifier == name:
        return module
    if not qualifier.startswith(name + "."):
        return None
    obj: Any = module
    for attr in qualifier[len(name) + 1:].split("."):
        obj = getattr(obj, attr, None)
        if obj is None:
            return None
    return obj


def _static_member(container: Any, member: str) -> Any:
    if inspect.isclass(container):
        raw = inspect.getattr_static(container, member, None)
        if not isinstance(raw, (staticmethod, classmethod)):
            return None
        return getattr(container, member)
    return getattr(container, member, None)


def function_from_container(container: Any, member: str, arity: Optional[int]) -> Callable | None:
    if member.startswith("_"):
        return None
    if any(fragment in member for fragment in IGNORED_MEMBER_FRAGMENTS):
        return None
    fn = _static_member(container, member)
    if fn is None or not callable(fn):
        return None
    if getattr(fn, "__origin__", None) is not None:
        return None
    if getattr(fn, "__deprecated__", None):
        return None
    if arity is not None and not accepts_arity(fn, arity):
        return None
    return fn


def function_from_modules(qualifier: str, member: str, arity: Optional[int]) -> Callable | None:
    for module in valid_modules():
        container = _walk(module, qualifier)
        if container is None:
            continue
        fn = function_from_container(container, member, arity)
        if fn is not None:
            logger.debug("resolved %s.%s in module %s", qualifier, member, module.__name__)
            return fn
    return None


def _import_qualifier(qualifier: str) -> bool:
    """Import the longest importable prefix of `qualifier`."""
    parts = qualifier.split(".")
    for end in range(len(parts), 0, -1):
        name = ".".join(parts[:end])
        if is_ignored_module(name):
            return False
        if name in sys.modules:
            return False
        try:
            importlib.import_module(name)
        except ImportError:
            continue
        except Exception as exc:
            raise LispRuntimeError(f"Importing {name} failed: {exc}") from exc
        logger.debug("imported %s while resolving %s", name, qualifier)
        return True
    return False


def find_function(full_name: str, arity: Optional[int] = None) -> Callable | None:
    """Locate a host callable for a dotted name, consulting the shared cache."""
    key = (full_name, arity)
    cached = _DELEGATE_CACHE.get(key)
    if cached is not None:
        return cached
    parts = split_function_name(full_name)
    if parts is None:
        return None
    qualifier, member = parts
    fn = function_from_modules(qualifier, member, arity)
    if fn is None and native_autoimport_enabled() and _import_qualifier(qualifier):
        fn = function_from_modules(qualifier, member, arity)
    if fn is None:
        return None
    return _DELEGATE_CACHE.setdefault(key, fn)


class NativeResolver:
    """Per-interpreter front end to native function resolution.

    Besides reflection over loaded modules, host code can populate an explicit
    table with `register`; explicit entries are consulted first.
    """

    def __init__(self, marker: str | None = None):
        self.marker = marker if marker is not None else get_native_marker()
        self._registered: dict[tuple[str, Optional[int]], Callable] = {}
        self._procedures: dict[str, Procedure] = {}

    def register(self, name: str, fn: Callable, arity: Optional[int] = None) -> None:
        self._registered[(name, arity)] = fn

    def _lookup(self, name: str, arity: Optional[int]) -> Callable | None:
        fn = self._registered.get((name, arity))
        if fn is None and arity is not None:
            fn = self._registered.get((name, None))
        if fn is None:
            fn = find_function(name, arity)
        return fn

    def get_function(self, name: str, arity: Optional[int] = None) -> Procedure:
        """Resolve `name` to a Procedure or raise LispRuntimeError."""
        if split_function_name(name) is None and (name, arity) not in self._registered:
            raise LispRuntimeError(f"Native function name must be Type.Member: {name}")
        fn = self._lookup(name, arity)
        if fn is None:
            raise LispRuntimeError(
                f"Cannot find native function {name}"
                + (f" with {arity} parameters" if arity is not None else "")
            )
        return make_native_procedure(name, fn, arity)

    def resolve_symbol(self, interp: Interpreter, symbol_name: str) -> LispValue:
        """Symbol resolver callback: handles ``#Type.Member`` symbols."""
        cached = self._procedures.get(symbol_name)
        if cached is not None:
            return cached
        if len(symbol_name) <= len(self.marker) or not symbol_name.startswith(self.marker):
            return None
        name = symbol_name[len(self.marker):]
        if split_function_name(name) is None:
            return None
        fn = self._lookup(name, None)
        if fn is None:
            logger.debug("no native function for %s", symbol_name)
            return None
        proc = make_native_procedure(name, fn, None)
        self._procedures[symbol_name] = proc
        return proc


def make_native_procedure(name: str, fn: Callable, arity: Optional[int]) -> Procedure:
    """Wrap a host callable so it marshals arguments and results."""

    def invoke(interp: Interpreter, args: list[LispValue]) -> LispValue:
        if arity is not None and len(args) != arity:
            raise LispRuntimeError(
                f"Native function {name} expects {arity} arguments, got {len(args)}"
            )
        try:
            result = fn(*(to_native(a) for a in args))
        except LispRuntimeError:
            raise
        except Exception as exc:
            raise LispRuntimeError(f"Native function {name} failed: {exc}") from exc
        return from_native(result)

    invoke.__name__ = name
    return Procedure.primitive(invoke, name=name)
