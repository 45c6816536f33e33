"""
  Line-buffered tokenizer.

An InPort pulls one line at a time from a text stream and peels tokens off the
front of the current line with a single regular expression. The grammar:

    ,@              one token
    ( ) ' ` ,       one token each
    "..."           a string, backslash escapes kept verbatim
    ; ...           comment up to end of line, skipped
    anything else   maximal run of non-whitespace, non-delimiter characters

End of stream yields None.
"""

from __future__ import annotations

import io
from typing import Iterator, Optional, TextIO
import re

from unilisp.errors import LispSyntaxError

TOKEN_RE = re.compile(
    r"\s*("
    r",@"  # unquote-splicing
    r"|[('`,)]"  # single character delimiters
    r'|"(?:\\.|[^\\"])*"'  # double-quoted strings
    r"|;.*"  # comment to end of line
    r"|[^\s('\"`,;)]*"  # atoms
    r")(.*)",
    re.DOTALL,
)


class InPort:
    """Token source over a line-buffered character stream.

    The port is restartable at the top level: every read continues from the
    current stream position, so successive forms can be read one at a time.
    """

    def __init__(self, stream: TextIO | str):
        if isinstance(stream, str):
            stream = io.StringIO(stream)
        self.stream = stream
        self.line = ""

    def next_token(self) -> Optional[str]:
        while True:
            if not self.line:
                raw = self.stream.readline()
                if not raw:
                    return None
                self.line = raw.rstrip("\r\n")
                if not self.line.strip():
                    self.line = ""
                    continue
            m = TOKEN_RE.match(self.line)
            if m is None or m.group(2) == self.line:
                # drop the malformed line so the next read starts afresh
                line, self.line = self.line, ""
                raise LispSyntaxError(f"Cannot parse line: {line}")
            token, self.line = m.group(1), m.group(2)
            if token and not token.startswith(";"):
                return token

    def __iter__(self) -> Iterator[str]:
        while (token := self.next_token()) is not None:
            yield token
