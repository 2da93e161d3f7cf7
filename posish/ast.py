"""Syntax tree nodes for parsed shell commands."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Optional, Union


class RedirectionType(enum.Enum):
    """Redirection operators, valued by their shell spelling."""

    IN = "<"
    OUT = ">"
    OUT_CLOBBER = ">|"
    APPEND = ">>"
    IN_DUP = "<&"
    OUT_DUP = ">&"
    RDWR = "<>"
    HEREDOC = "<<"
    HEREDOC_DASH = "<<-"

    @property
    def default_fd(self) -> int:
        """The descriptor redirected when no IO number is given."""
        if self in _INPUT_REDIRECTIONS:
            return 0
        return 1


_INPUT_REDIRECTIONS = frozenset(
    {
        RedirectionType.IN,
        RedirectionType.IN_DUP,
        RedirectionType.HEREDOC,
        RedirectionType.HEREDOC_DASH,
        RedirectionType.RDWR,
    }
)


@dataclass
class Redirection:
    kind: RedirectionType
    io_number: int
    target: str
    here_doc: Optional[str] = None


@dataclass
class Assignment:
    name: str
    value: str


@dataclass
class Command:
    """A simple command: assignments, words and redirections."""

    args: list[str] = field(default_factory=list)
    redirections: list[Redirection] = field(default_factory=list)
    assignments: list[Assignment] = field(default_factory=list)
    lineno: int = 0

    def add_arg(self, arg: str) -> None:
        self.args.append(arg)

    def add_redirection(
        self,
        kind: RedirectionType,
        io_number: int,
        target: str,
        here_doc: Optional[str] = None,
    ) -> None:
        self.redirections.append(Redirection(kind, io_number, target, here_doc))

    def add_assignment(self, name: str, value: str) -> None:
        self.assignments.append(Assignment(name, value))

    def is_empty(self) -> bool:
        """True if the command has no words, redirections or assignments."""
        return not (self.args or self.redirections or self.assignments)


@dataclass
class Pipeline:
    left: "Node"
    right: "Node"
    lineno: int = 0


@dataclass
class ListNode:
    """Two commands run in sequence, or the left one in the background."""

    left: "Node"
    right: Optional["Node"] = None
    is_async: bool = False
    lineno: int = 0


@dataclass
class And:
    left: "Node"
    right: "Node"
    lineno: int = 0


@dataclass
class Or:
    left: "Node"
    right: "Node"
    lineno: int = 0


@dataclass
class If:
    condition: "Node"
    then_branch: Optional["Node"] = None
    else_branch: Optional["Node"] = None
    lineno: int = 0


@dataclass
class While:
    condition: "Node"
    body: Optional["Node"] = None
    lineno: int = 0


@dataclass
class Until:
    condition: "Node"
    body: Optional["Node"] = None
    lineno: int = 0


@dataclass
class For:
    """A for loop; ``words`` is None when it iterates over ``"$@"``."""

    var_name: str
    words: Optional[list[str]] = None
    body: Optional["Node"] = None
    lineno: int = 0


@dataclass
class Subshell:
    body: Optional["Node"] = None
    lineno: int = 0


@dataclass
class Group:
    body: Optional["Node"] = None
    lineno: int = 0


@dataclass
class FunctionDef:
    name: str
    body: "Node"
    lineno: int = 0


@dataclass
class CaseItem:
    patterns: list[str] = field(default_factory=list)
    commands: Optional["Node"] = None


@dataclass
class Case:
    word: str
    items: list[CaseItem] = field(default_factory=list)
    lineno: int = 0


Node = Union[
    Command,
    Pipeline,
    ListNode,
    And,
    Or,
    If,
    While,
    Until,
    For,
    Subshell,
    Group,
    FunctionDef,
    Case,
]