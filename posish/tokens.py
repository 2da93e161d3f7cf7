"""Tokens produced by the shell lexer and a stream that hands them to the parser."""

from __future__ import annotations

import enum
from collections import deque
from collections.abc import Iterable, Iterator
from dataclasses import dataclass


class TokenType(enum.Enum):
    """Kinds of lexical tokens."""

    EOF = enum.auto()
    WORD = enum.auto()
    KEYWORD = enum.auto()
    OPERATOR = enum.auto()
    IO_NUMBER = enum.auto()
    NEWLINE = enum.auto()
    ERROR = enum.auto()


@dataclass(frozen=True)
class Token:
    """A single token with the line number it starts on."""

    type: TokenType
    value: str | None = None
    lineno: int = 1

    def is_keyword(self, *words: str) -> bool:
        """True if this is a keyword token whose text is one of ``words``."""
        return self.type is TokenType.KEYWORD and self.value in words

    def is_operator(self, *operators: str) -> bool:
        """True if this is an operator token whose text is one of ``operators``."""
        return self.type is TokenType.OPERATOR and self.value in operators


class TokenStream:
    """Supplies tokens one at a time, then EOF for ever.

    ``heredocs`` holds the raw lines that follow the command line; here-document
    bodies are read from them with :meth:`read_until_delimiter`.
    """

    def __init__(self, tokens: Iterable[Token], heredocs: Iterable[str] = ()) -> None:
        self._tokens = iter(tokens)
        self._heredoc_lines = deque(line.removesuffix("\n") for line in heredocs)
        self._last_line = 1

    def next_token(self) -> Token:
        """Return the next token, or an EOF token once the input is used up."""
        token = next(self._tokens, None)
        if token is None:
            return Token(TokenType.EOF, None, self._last_line)
        self._last_line = token.lineno
        return token

    def read_until_delimiter(self, delimiter: str, strip_tabs: bool = False) -> str:
        """Read here-document lines up to the delimiter line.

        Each line kept ends in a newline. With ``strip_tabs`` leading tabs are
        removed from every line, the delimiter line included.
        """
        body: list[str] = []
        while self._heredoc_lines:
            line = self._heredoc_lines.popleft()
            if strip_tabs:
                line = line.lstrip("\t")
            if line == delimiter:
                break
            body.append(line + "\n")
        return "".join(body)

    def __iter__(self) -> Iterator[Token]:
        while (token := self.next_token()).type is not TokenType.EOF:
            yield token