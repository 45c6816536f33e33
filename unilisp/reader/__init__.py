from unilisp.reader.port import InPort
from unilisp.reader.parser import Reader

__all__ = ["InPort", "Reader"]
