"""Conversion between Lisp values and host (Python) objects for native calls."""

from __future__ import annotations

from typing import Any

import numpy as np

from unilisp import LispValue
from unilisp.types.native_handle import NativeHandle
from unilisp.types.nil import Nil
from unilisp.types.number import make_number
from unilisp.types.procedure import Procedure
from unilisp.types.value import LispType, type_of


def to_native(value: LispValue) -> Any:
    match type_of(value):
        case LispType.BOOLEAN:
            return bool(value)
        case LispType.NUMBER:
            return float(value)
        case LispType.LIST:
            return [to_native(v) for v in value]
        case LispType.NIL | LispType.EOF:
            return None
        case LispType.SYMBOL:
            return value.name
    if isinstance(value, NativeHandle):
        return value.obj
    return value


def from_native(obj: Any) -> LispValue:
    if obj is None:
        return Nil
    if isinstance(obj, (bool, np.bool_)):
        return bool(obj)
    if isinstance(obj, (int, float, np.integer, np.floating)):
        return make_number(obj)
    if isinstance(obj, str):
        return obj
    if isinstance(obj, (list, tuple)):
        return [from_native(v) for v in obj]
    if isinstance(obj, (Procedure, NativeHandle)):
        return obj
    return NativeHandle(obj)
