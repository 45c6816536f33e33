"""Single precision numeric storage.

Every Lisp number is a numpy.float32; integers are a lexical sub-case only.
"""
from __future__ import annotations

import re

import numpy as np

NUMBER_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")

# Beyond this magnitude integral values are rendered in exponent form
_INTEGRAL_LIMIT = 1e16


def make_number(value) -> np.float32:
    return np.float32(value)


def is_number(value) -> bool:
    if isinstance(value, (bool, np.bool_)):
        return False
    return isinstance(value, (float, int, np.floating, np.integer))


def parse_number(token: str) -> np.float32 | None:
    """Parse a float or integer literal, or return None for anything else."""
    if NUMBER_RE.match(token):
        return np.float32(float(token))
    return None


def format_number(value) -> str:
    value = np.float32(value)
    if np.isfinite(value) and float(value).is_integer() and abs(value) < _INTEGRAL_LIMIT:
        return str(int(value))
    return str(value)
