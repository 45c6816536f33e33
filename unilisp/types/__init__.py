from unilisp.types.nil import Nil, EOF, NilType, EndOfInputType
from unilisp.types.symbol import Symbol, SymbolTable
from unilisp.types.number import make_number, is_number
from unilisp.types.native_handle import NativeHandle
from unilisp.types.environment import Environment
from unilisp.types.procedure import Procedure
from unilisp.types.value import LispType, type_of, is_truish
from unilisp.types.macro_environment import MacroEnvironment

__all__ = [
    "Nil",
    "EOF",
    "NilType",
    "EndOfInputType",
    "Symbol",
    "SymbolTable",
    "make_number",
    "is_number",
    "NativeHandle",
    "Environment",
    "Procedure",
    "LispType",
    "type_of",
    "is_truish",
    "MacroEnvironment",
]
