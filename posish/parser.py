"""Parser for shell command lines: lists, pipelines and simple commands."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Mapping
from typing import Optional, Union

from .ast import And, Command, FunctionDef, Node, Or, Pipeline, RedirectionType
from .parser_base import CompoundParser, ShellSyntaxError
from .tokens import Token, TokenStream, TokenType
from .variables import VariableStore, is_valid_name

# Operators that may start a simple command.
_REDIRECT_STARTERS = frozenset({"<", ">", ">>", "<<", "<&", ">&", "<>", ">|"})
# Tokens left over at top level that make the whole input invalid.
_UNEXPECTED_KEYWORDS = frozenset({"then", "else", "fi", "do", "done", "esac", "}"})
_UNEXPECTED_OPERATORS = frozenset({";;", ")"})

_FAST_NAME = re.compile(r"[A-Za-z0-9_]+")
_FAST_SPECIAL = frozenset("$`\\\"'*?[~\n")

Tokenizer = Callable[[str], Iterable[Token]]


def _split_words(text: str) -> list[Token]:
    """Split alias text on whitespace into word tokens."""
    return [Token(TokenType.WORD, word) for word in text.split()]


class Parser(CompoundParser):
    """Full shell parser over a token stream.

    ``aliases`` maps alias names to their replacement text, which is turned
    into tokens with ``tokenize`` (whitespace splitting by default).
    """

    def __init__(
        self,
        source: Union[TokenStream, Iterable[Token]],
        aliases: Optional[Mapping[str, str]] = None,
        tokenize: Optional[Tokenizer] = None,
    ) -> None:
        super().__init__(source)
        self.aliases: Mapping[str, str] = aliases if aliases is not None else {}
        self.tokenize: Tokenizer = tokenize if tokenize is not None else _split_words

    def parse(self) -> Node:
        """Parse the whole input; empty input gives an empty command."""
        node = self.parse_list()
        token = self.peek()
        if (
            token.type is TokenType.KEYWORD and token.value in _UNEXPECTED_KEYWORDS
        ) or (
            token.type is TokenType.OPERATOR and token.value in _UNEXPECTED_OPERATORS
        ):
            raise ShellSyntaxError.unexpected(token)
        return node if node is not None else Command()

    def parse_list(self) -> Optional[Node]:
        """Parse commands joined by ``;``, ``&`` or newlines."""
        return self._parse_list()

    def _parse_and_or(self) -> Optional[Node]:
        return self.parse_and_or()

    def parse_and_or(self) -> Optional[Node]:
        """Parse pipelines joined by ``&&`` and ``||``, left to right."""
        left = self.parse_pipeline()
        if left is None:
            return None
        while True:
            token = self.peek()
            if not token.is_operator("&&", "||"):
                return left
            self.consume()
            self._skip_newlines()
            right = self.parse_pipeline()
            if right is None:
                raise ShellSyntaxError.unexpected(self.peek())
            left = And(left, right) if token.value == "&&" else Or(left, right)

    def parse_pipeline(self) -> Optional[Node]:
        """Parse commands joined by ``|``."""
        left = self.parse_simple_command()
        if left is None:
            return None
        if self.peek().is_operator("|"):
            self.consume()
            right = self.parse_pipeline()
            if right is None:
                raise ShellSyntaxError.unexpected(self.peek())
            return Pipeline(left, right)
        return left

    def _parse_function_keyword(self) -> FunctionDef:
        self.consume()
        name_token = self.peek()
        if name_token.type is not TokenType.WORD:
            raise ShellSyntaxError.unexpected(name_token)
        self.consume()
        if self.peek().is_operator("("):
            self.consume()
            token = self.peek()
            if not token.is_operator(")"):
                raise ShellSyntaxError.unexpected(token)
            self.consume()
        self._skip_newlines()
        return FunctionDef(name_token.value or "", self._function_body())

    def _function_body(self) -> Node:
        body = self.parse_simple_command()
        if body is None:
            raise ShellSyntaxError.unexpected(self.peek())
        return body

    @staticmethod
    def _is_assignment_word(word: str) -> bool:
        eq = word.find("=")
        return eq > 0 and is_valid_name(word[:eq])

    def parse_simple_command(self) -> Optional[Node]:
        """Parse a simple command, a compound command or a function definition."""
        token = self.peek()
        if token.is_operator("(") or token.type is TokenType.KEYWORD:
            return self._parse_compound_command()
        if not (
            token.type in (TokenType.WORD, TokenType.IO_NUMBER)
            or (token.type is TokenType.OPERATOR and token.value in _REDIRECT_STARTERS)
        ):
            return None

        command = Command(lineno=token.lineno)
        seen_name = False

        if token.type is TokenType.WORD and not self._is_assignment_word(token.value or ""):
            if token.value == "function":
                return self._parse_function_keyword()
            name = self.consume().value or ""
            if self.peek().is_operator("("):
                self.consume()
                closing = self.peek()
                if not closing.is_operator(")"):
                    raise ShellSyntaxError.unexpected(closing)
                self.consume()
                self._skip_newlines()
                return FunctionDef(name, self._function_body())

            alias = self.aliases.get(name)
            if alias is not None:
                for alias_token in self.tokenize(alias):
                    if alias_token.type is TokenType.WORD:
                        command.add_arg(alias_token.value or "")
                        seen_name = True
            else:
                command.add_arg(name)
                seen_name = True

        while True:
            token = self.peek()
            if token.type is TokenType.WORD:
                word = self.consume().value or ""
                eq = word.find("=")
                if not seen_name and eq > 0:
                    command.add_assignment(word[:eq], word[eq + 1:])
                else:
                    seen_name = True
                    command.add_arg(word)
            elif token.type in (TokenType.IO_NUMBER, TokenType.OPERATOR):
                if not self.parse_redirection(command):
                    break
            else:
                break

        return None if command.is_empty() else command

    def parse_redirection(self, command: Command) -> bool:
        """Add one redirection to ``command``; False if none starts here."""
        token = self.peek()
        io_number: Optional[int] = None
        if token.type is TokenType.IO_NUMBER:
            io_number = int(self.consume().value or "0")
            token = self.peek()
        if token.type is not TokenType.OPERATOR:
            return False
        try:
            kind = RedirectionType(token.value)
        except ValueError:
            return False
        if io_number is None:
            io_number = kind.default_fd
        self.consume()

        target = self.consume()
        if target.type is not TokenType.WORD:
            raise ShellSyntaxError.unexpected(target)
        delimiter = target.value or ""

        here_doc: Optional[str] = None
        if kind in (RedirectionType.HEREDOC, RedirectionType.HEREDOC_DASH):
            if self.peek().type is TokenType.NEWLINE:
                self.consume()
            here_doc = self.stream.read_until_delimiter(
                delimiter, kind is RedirectionType.HEREDOC_DASH
            )
        command.add_redirection(kind, io_number, delimiter, here_doc)
        return True


def parse(
    source: Union[TokenStream, Iterable[Token]],
    aliases: Optional[Mapping[str, str]] = None,
    tokenize: Optional[Tokenizer] = None,
) -> Node:
    """Parse a token stream into a syntax tree."""
    return Parser(source, aliases, tokenize).parse()


def try_fast_path(line: str, variables: VariableStore) -> bool:
    """Handle trivial lines without the full parser.

    Blank lines, lone comments, ``:`` and plain ``NAME=value`` assignments
    are handled here; returns False when the line needs full parsing.
    """
    cmd = line.lstrip(" \t")
    if not cmd:
        return True
    if cmd[0] in "#\n":
        return "\n" not in cmd
    if ";" in cmd:
        return False

    eq = cmd.find("=")
    if eq > 0 and _FAST_NAME.fullmatch(cmd[:eq]):
        first = cmd[0]
        if not (first == "_" or (first.isascii() and first.isalpha())):
            return False
        value = cmd[eq + 1:]
        if not any(ch in _FAST_SPECIAL for ch in value):
            variables.set(cmd[:eq], value.rstrip(" \t\n"))
            return True

    return cmd[0] == ":" and (len(cmd) == 1 or cmd[1] in " \t\n")