from __future__ import annotations
import os
from pathlib import Path
from typing import List


# Resolve installation dir (unilisp package directory)
_UNILISP_DIR = Path(__file__).resolve().parent

# Defaults
_DEFAULT_PRELUDE = _UNILISP_DIR / 'prelude' / 'core.lisp'
_DEFAULT_NATIVE_MARKER = '#'


def list_from_env(var: str) -> List[str]:
    raw = os.environ.get(var)
    if not raw:
        return []
    return [p.strip() for p in raw.split(os.pathsep) if p.strip()]


def get_prelude_path() -> Path:
    raw = os.environ.get('UNILISP_PRELUDE_PATH')
    return Path(raw) if raw else _DEFAULT_PRELUDE


def get_native_deny_patterns() -> List[str]:
    return list_from_env('UNILISP_NATIVE_DENY')


def get_native_marker() -> str:
    return os.environ.get('UNILISP_NATIVE_MARKER') or _DEFAULT_NATIVE_MARKER


def native_autoimport_enabled() -> bool:
    return os.environ.get('UNILISP_NATIVE_AUTOIMPORT', '1') not in ('0', 'false', 'no')
