"""Token handling and compound-command grammar shared by the shell parser."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Callable, Optional, Union

from .ast import (
    Case,
    CaseItem,
    Command,
    For,
    Group,
    If,
    ListNode,
    Node,
    Subshell,
    Until,
    While,
)
from .tokens import Token, TokenStream, TokenType

# Keywords that end a command list inside a compound command.
_BLOCK_END = frozenset({"then", "else", "fi", "do", "done", "esac", "}"})
# Keywords that end a compound list (an ``if`` branch may also end at ``elif``).
_COMPOUND_END = _BLOCK_END | {"elif"}


class ShellSyntaxError(Exception):
    """Raised when the token stream does not form a valid command."""

    def __init__(self, message: str, token: Optional[Token] = None) -> None:
        super().__init__(message)
        self.token = token

    @classmethod
    def unexpected(cls, token: Token) -> "ShellSyntaxError":
        """Build the error for a token that cannot appear where it does."""
        if token.type is TokenType.EOF:
            return cls("syntax error: unexpected end of file", token)
        if token.type is TokenType.NEWLINE:
            return cls("syntax error near unexpected token `newline'", token)
        return cls(f"syntax error near unexpected token `{token.value}'", token)


class CompoundParser:
    """Parser for compound commands over a stream of tokens.

    ``source`` is a :class:`TokenStream` or any iterable of tokens. Command
    lists inside compound commands are read with :meth:`_parse_list`, whose
    single commands come from :meth:`_parse_and_or`; a full parser overrides
    the latter to add pipelines, ``&&``/``||`` and redirections.
    """

    def __init__(self, source: Union[TokenStream, Iterable[Token]]) -> None:
        self.stream = source if isinstance(source, TokenStream) else TokenStream(source)
        self._lookahead: Optional[Token] = None

    # Token access

    def peek(self) -> Token:
        """Return the next token without consuming it."""
        if self._lookahead is None:
            self._lookahead = self.stream.next_token()
        return self._lookahead

    def consume(self) -> Token:
        """Return the next token and move past it."""
        token = self.peek()
        self._lookahead = None
        return token

    def _skip_newlines(self) -> None:
        while self.peek().type is TokenType.NEWLINE:
            self.consume()

    def _skip_separator(self) -> None:
        token = self.peek()
        if token.is_operator(";") or token.type is TokenType.NEWLINE:
            self.consume()

    def _expect_keyword(self, word: str) -> Token:
        token = self.peek()
        if not token.is_keyword(word):
            raise ShellSyntaxError.unexpected(token)
        return self.consume()

    @staticmethod
    def _ends_block(token: Token) -> bool:
        return (
            token.type is TokenType.KEYWORD and token.value in _BLOCK_END
        ) or token.is_operator(";;")

    # Compound commands

    def parse_if(self) -> If:
        """Parse ``if ... then ... [elif ...] [else ...] fi``."""
        token = self.consume()
        node = self._parse_if_tail()
        node.lineno = token.lineno
        return node

    def _parse_if_tail(self) -> If:
        condition = self.parse_compound_list("then")
        if condition is None:
            raise ShellSyntaxError.unexpected(self.peek())
        self._expect_keyword("then")
        then_branch = self.parse_compound_list("else")

        token = self.peek()
        else_branch: Optional[Node] = None
        if token.is_keyword("elif"):
            self.consume()
            else_branch = self._parse_if_tail()
            else_branch.lineno = token.lineno
        elif token.is_keyword("else"):
            self.consume()
            else_branch = self.parse_compound_list("fi")
            self._expect_keyword("fi")
        elif token.is_keyword("fi"):
            self.consume()
        else:
            raise ShellSyntaxError.unexpected(token)
        return If(condition, then_branch, else_branch)

    def _parse_loop_parts(self) -> tuple[Node, Optional[Node]]:
        condition = self.parse_compound_list("do")
        if condition is None:
            raise ShellSyntaxError.unexpected(self.peek())
        self._expect_keyword("do")
        body = self.parse_compound_list("done")
        self._expect_keyword("done")
        return condition, body

    def parse_while(self) -> While:
        """Parse ``while ... do ... done``."""
        token = self.consume()
        condition, body = self._parse_loop_parts()
        return While(condition, body, lineno=token.lineno)

    def parse_until(self) -> Until:
        """Parse ``until ... do ... done``."""
        self.consume()
        condition, body = self._parse_loop_parts()
        return Until(condition, body)

    def parse_for(self) -> For:
        """Parse ``for name [in word...] ; do ... done``."""
        token = self.consume()
        name_token = self.peek()
        if name_token.type is not TokenType.WORD:
            raise ShellSyntaxError.unexpected(name_token)
        self.consume()

        words: list[str] = []
        if self.peek().is_keyword("in"):
            self.consume()
            while True:
                item = self.peek()
                if item.type in (TokenType.EOF, TokenType.NEWLINE):
                    break
                if item.is_operator(";") or item.is_keyword("do"):
                    break
                words.append(self.consume().value or "")
            self._skip_separator()

        self._skip_separator()
        self._expect_keyword("do")
        body = self.parse_compound_list("done")
        self._expect_keyword("done")
        return For(name_token.value or "", words or None, body, lineno=token.lineno)

    def parse_case(self) -> Case:
        """Parse ``case word in pattern) commands ;; ... esac``."""
        self.consume()
        word_token = self.peek()
        if word_token.type is not TokenType.WORD:
            raise ShellSyntaxError.unexpected(word_token)
        self.consume()

        self._skip_newlines()
        token = self.consume()
        if not token.is_keyword("in"):
            raise ShellSyntaxError.unexpected(token)

        items: list[CaseItem] = []
        while True:
            self._skip_newlines()
            token = self.peek()
            if token.is_keyword("esac") or token.type is TokenType.EOF:
                break
            if token.is_operator("("):
                self.consume()
                token = self.peek()
            if token.type is not TokenType.WORD:
                break

            patterns: list[str] = []
            while True:
                if token.type is TokenType.WORD:
                    patterns.append(self.consume().value or "")
                token = self.peek()
                if token.is_operator("|"):
                    self.consume()
                    token = self.peek()
                    continue
                break

            if not token.is_operator(")"):
                break
            self.consume()
            self._skip_newlines()
            commands = self._parse_list()
            items.append(CaseItem(patterns, commands))
            if self.peek().is_operator(";;"):
                self.consume()

        token = self.consume()
        if not token.is_keyword("esac"):
            raise ShellSyntaxError.unexpected(token)
        return Case(word_token.value or "", items)

    def parse_group(self) -> Group:
        """Parse ``{ ... }``."""
        self.consume()
        body = self.parse_compound_list("}")
        self._expect_keyword("}")
        return Group(body)

    def _parse_subshell(self) -> Subshell:
        self.consume()
        body = self._parse_list()
        token = self.peek()
        if not token.is_operator(")"):
            raise ShellSyntaxError.unexpected(token)
        self.consume()
        return Subshell(body)

    def _parse_compound_command(self) -> Optional[Node]:
        """Parse a compound command at the current token, or return None."""
        token = self.peek()
        if token.is_operator("("):
            return self._parse_subshell()
        if token.type is not TokenType.KEYWORD:
            return None
        parsers: dict[str, Callable[[], Node]] = {
            "if": self.parse_if,
            "while": self.parse_while,
            "until": self.parse_until,
            "for": self.parse_for,
            "case": self.parse_case,
            "{": self.parse_group,
        }
        parse = parsers.get(token.value or "")
        return parse() if parse else None

    def parse_compound_list(self, terminator: Optional[str]) -> Optional[Node]:
        """Parse commands up to ``terminator`` or any block-ending keyword.

        Returns None if no command was found.
        """
        head: Optional[Node] = None
        while True:
            token = self.peek()
            if token.type is TokenType.KEYWORD and (
                token.value == terminator or token.value in _COMPOUND_END
            ):
                break
            if token.type is TokenType.EOF:
                break
            if token.type is TokenType.NEWLINE:
                self.consume()
                continue
            node = self._parse_list()
            if node is None:
                break
            head = node if head is None else ListNode(head, node, False)
        return head

    # Command lists

    def _parse_list(self) -> Optional[Node]:
        """Parse commands joined by ``;``, ``&`` or newlines."""
        self._skip_newlines()
        if self._ends_block(self.peek()):
            return None

        left = self._parse_and_or()
        if left is None:
            return None

        token = self.peek()
        if token.is_operator(";", "&"):
            is_async = token.value == "&"
            self.consume()
            self._skip_newlines()
            following = self.peek()
            if following.type is TokenType.EOF or self._ends_block(following):
                return ListNode(left, None, is_async)
            return ListNode(left, self._parse_list(), is_async)

        if token.type is TokenType.NEWLINE:
            self.consume()
            if self._ends_block(self.peek()):
                return left
            right = self._parse_list()
            return ListNode(left, right, False) if right is not None else left

        return left

    def _parse_and_or(self) -> Optional[Node]:
        """Parse one command; a full parser adds pipelines and ``&&``/``||``."""
        compound = self._parse_compound_command()
        if compound is not None or self.peek().type is TokenType.KEYWORD:
            return compound
        token = self.peek()
        if token.type is not TokenType.WORD:
            return None
        command = Command(lineno=token.lineno)
        while self.peek().type is TokenType.WORD:
            command.add_arg(self.consume().value or "")
        return command