"""Shell variables, local scopes and positional parameters."""

from __future__ import annotations

import enum
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Optional

_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

_SPECIAL_DEFAULTS = (
    ("IFS", " \t\n"),
    ("PATH", ""),
    ("PS1", "\\u@\\h:\\w\\$ "),
    ("PS2", "> "),
    ("PS4", "+ "),
    ("OPTIND", "1"),
)


class ReadonlyVariableError(Exception):
    """Raised when a readonly variable is assigned or unset."""

    def __init__(self, name: str) -> None:
        super().__init__(f"{name}: readonly variable")
        self.name = name


def is_valid_name(name: Optional[str]) -> bool:
    """True if ``name`` is a valid shell variable name."""
    return bool(name) and _NAME.fullmatch(name) is not None


class _Flag(enum.Flag):
    NONE = 0
    EXPORT = enum.auto()
    READONLY = enum.auto()
    UNSET = enum.auto()
    FIXED = enum.auto()


@dataclass
class _Var:
    name: str
    value: Optional[str]
    flags: _Flag = _Flag.NONE

    @property
    def is_set(self) -> bool:
        return not (self.flags & _Flag.UNSET)


@dataclass
class _SavedLocal:
    var: _Var
    flags: _Flag
    value: Optional[str]
    is_new: bool


@dataclass
class _Scope:
    locals: list[_SavedLocal] = field(default_factory=list)


class VariableStore:
    """All shell variables, with function scopes and positional parameters.

    ``environ`` supplies the initial exported variables (the process
    environment by default); ``ppid`` the value of ``PPID``.
    """

    def __init__(
        self,
        environ: Optional[Mapping[str, str]] = None,
        ppid: Optional[int] = None,
    ) -> None:
        self._vars: dict[str, _Var] = {}
        self._scopes: list[_Scope] = []
        self._positional: list[str] = []
        self.last_bg_pid: int = -1
        self.shell_name: str = "posish"

        for name, value in _SPECIAL_DEFAULTS:
            self._vars[name] = _Var(name, value, _Flag.FIXED | _Flag.EXPORT)

        if environ is None:
            environ = os.environ
        for name, value in environ.items():
            self.set(name, value)
            self.export(name)

        self.set("PPID", str(os.getppid() if ppid is None else ppid))

    # Plain variables

    def set(self, name: str, value: str) -> None:
        """Assign a value, creating the variable if needed."""
        var = self._vars.get(name)
        if var is None:
            self._vars[name] = _Var(name, value)
            return
        if var.flags & _Flag.READONLY:
            raise ReadonlyVariableError(name)
        var.value = value
        var.flags &= ~_Flag.UNSET

    def get(self, name: str) -> Optional[str]:
        """Return the value of a set variable, or None."""
        var = self._vars.get(name)
        if var is None or not var.is_set:
            return None
        return var.value

    def unset(self, name: str) -> None:
        """Remove a variable; built-in special variables are only marked unset."""
        var = self._vars.get(name)
        if var is None:
            return
        if var.flags & _Flag.READONLY:
            raise ReadonlyVariableError(name)
        if var.flags & _Flag.FIXED:
            var.value = None
            var.flags |= _Flag.UNSET
        else:
            del self._vars[name]

    def export(self, name: str) -> None:
        var = self._vars.get(name)
        if var is not None:
            var.flags |= _Flag.EXPORT

    def set_readonly(self, name: str) -> None:
        var = self._vars.get(name)
        if var is not None:
            var.flags |= _Flag.READONLY

    def is_readonly(self, name: str) -> bool:
        var = self._vars.get(name)
        return var is not None and bool(var.flags & _Flag.READONLY)

    def environ(self) -> dict[str, str]:
        """Exported variables that are set, as a name-to-value mapping."""
        return {
            v.name: v.value or ""
            for v in self._vars.values()
            if v.flags & _Flag.EXPORT and v.is_set
        }

    def all_variables(self) -> dict[str, str]:
        """Every variable that is set."""
        return {v.name: v.value or "" for v in self._vars.values() if v.is_set}

    def readonly_variables(self) -> dict[str, str]:
        """Every readonly variable."""
        return {
            v.name: v.value or ""
            for v in self._vars.values()
            if v.flags & _Flag.READONLY
        }

    # Special variables

    @property
    def ifs(self) -> str:
        value = self.get("IFS")
        return " \t\n" if value is None else value

    @property
    def path(self) -> str:
        return self.get("PATH") or ""

    @property
    def ps1(self) -> str:
        return self.get("PS1") or ""

    @property
    def ps2(self) -> str:
        return self.get("PS2") or ""

    @property
    def ps4(self) -> str:
        return self.get("PS4") or ""

    @property
    def optind(self) -> str:
        return self.get("OPTIND") or "1"

    # Scopes

    def push_scope(self) -> None:
        """Enter a function scope for ``local`` declarations."""
        self._scopes.append(_Scope())

    def pop_scope(self) -> None:
        """Leave the current scope, restoring variables made local in it."""
        if not self._scopes:
            return
        scope = self._scopes.pop()
        for saved in reversed(scope.locals):
            var = saved.var
            if saved.is_new:
                if self._vars.get(var.name) is var and not var.flags & _Flag.READONLY:
                    del self._vars[var.name]
            else:
                var.value = saved.value
                var.flags = saved.flags
                self._vars.setdefault(var.name, var)

    def declare_local(self, name: str, value: Optional[str] = None) -> None:
        """Make ``name`` local to the current scope with the given value."""
        if not self._scopes:
            self.set(name, value or "")
            return
        scope = self._scopes[-1]
        var = self._vars.get(name)
        if var is not None:
            scope.locals.append(_SavedLocal(var, var.flags, var.value, False))
            var.flags &= ~(_Flag.EXPORT | _Flag.READONLY | _Flag.UNSET)
            var.value = value or ""
        else:
            self.set(name, value or "")
            scope.locals.append(_SavedLocal(self._vars[name], _Flag.NONE, None, True))

    # Positional parameters

    def set_positional(self, args) -> None:
        self._positional = list(args)

    def positional(self, index: int) -> Optional[str]:
        """Return ``$index``; ``$0`` is the variable named ``0``."""
        if index == 0:
            return self.get("0")
        if 1 <= index <= len(self._positional):
            return self._positional[index - 1]
        return None

    def positional_count(self) -> int:
        return len(self._positional)

    def all_positional(self) -> list[str]:
        return list(self._positional)

    def shift_positional(self, n: int = 1) -> None:
        """Drop the first ``n`` parameters; raise ValueError if too few."""
        if n <= 0:
            return
        if n > len(self._positional):
            raise ValueError(f"shift count {n} out of range")
        del self._positional[:n]

    def save_positional(self) -> tuple[str, ...]:
        return tuple(self._positional)

    def restore_positional(self, saved) -> None:
        self._positional = list(saved)

    def set_lineno(self, lineno: int) -> None:
        """Update ``LINENO`` unless it has been made readonly."""
        if self.is_readonly("LINENO"):
            return
        self.set("LINENO", str(lineno))