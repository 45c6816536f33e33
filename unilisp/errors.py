class LispError(Exception):
    """ Base class for all UniLisp errors"""
    pass

class LispSyntaxError(LispError):
    """ Raised by the reader and the macro expander for malformed input"""

class LispRuntimeError(LispError):
    """ Raised by the evaluator, the core library and native interop"""
