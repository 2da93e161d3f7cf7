"""Signal names and the table of trap commands."""

from __future__ import annotations

import re
import signal
from collections.abc import Callable

MAX_SIGNALS = 64

_SIGNAL_NAMES = (
    "HUP", "INT", "QUIT", "ILL", "TRAP", "ABRT", "BUS", "FPE", "KILL", "USR1",
    "SEGV", "USR2", "PIPE", "ALRM", "TERM", "CHLD", "CONT", "STOP", "TSTP",
    "TTIN", "TTOU", "URG", "XCPU", "XFSZ", "VTALRM", "PROF", "WINCH",
)

_SIGNAL_TABLE: dict[str, int] = {"EXIT": 0}
_SIGNAL_TABLE.update(
    (name, int(getattr(signal, f"SIG{name}")))
    for name in _SIGNAL_NAMES
    if hasattr(signal, f"SIG{name}")
)

_CHECKED_ON_ENTRY = ("HUP", "INT", "QUIT", "TERM", "CHLD", "TSTP", "TTIN",
                     "TTOU", "PIPE", "ALRM", "USR1", "USR2")

_NUMBER = re.compile(r"\s*[+-]?\d+")


def signal_number(name: str | None) -> int | None:
    """Return the number for a signal given by number or name, or None.

    Names are case-insensitive and may carry a ``SIG`` prefix.
    """
    if name is None:
        return None
    if name == "":
        return 0
    if _NUMBER.fullmatch(name):
        return int(name)
    search = name[3:] if name[:3].upper() == "SIG" else name
    return _SIGNAL_TABLE.get(search.upper())


def signal_name(signum: int) -> str | None:
    """Return the short name of a signal number, or None if unknown."""
    for name, number in _SIGNAL_TABLE.items():
        if number == signum:
            return name
    return None


def _quote(command: str) -> str:
    return "'" + command.replace("'", "'\\''") + "'"


class TrapTable:
    """Trap commands per signal and the signals waiting to be handled.

    ``runner`` is called with a trap's command text when its signal is handled.
    With ``install_handlers`` the process's signal dispositions follow the table.
    """

    def __init__(self, runner: Callable[[str], object], install_handlers: bool = True) -> None:
        self._runner = runner
        self._install = install_handlers
        self._commands: dict[int, str] = {}
        self._pending: set[int] = set()
        ignored = set()
        if install_handlers:
            for name in _CHECKED_ON_ENTRY:
                signum = _SIGNAL_TABLE.get(name)
                if signum is not None and signal.getsignal(signum) == signal.SIG_IGN:
                    ignored.add(signum)
        self.ignored_on_entry = frozenset(ignored)

    @staticmethod
    def _check_range(signum: int) -> None:
        if not 0 <= signum < MAX_SIGNALS:
            raise ValueError(f"{signum}: invalid signal specification")

    def _set_disposition(self, signum: int, handler) -> None:
        if not self._install or signum <= 0:
            return
        try:
            signal.signal(signum, handler)
        except (OSError, ValueError, RuntimeError):
            pass

    def _handle(self, signum: int, _frame) -> None:
        self.notify(signum)

    def trap(self, signum: int, command: str | None) -> None:
        """Set the trap command; an empty command makes the signal ignored."""
        self._check_range(signum)
        if command:
            self._commands[signum] = command
            self._set_disposition(signum, self._handle)
        else:
            self._commands.pop(signum, None)
            self._set_disposition(signum, signal.SIG_IGN)

    def reset(self, signum: int) -> None:
        """Drop the trap and restore the default action."""
        self._check_range(signum)
        self._commands.pop(signum, None)
        self._set_disposition(signum, signal.SIG_DFL)

    def ignore(self, signum: int) -> None:
        self.trap(signum, "")

    def get(self, signum: int) -> str | None:
        """Return the trap command for a signal, or None."""
        return self._commands.get(signum)

    def list_traps(self) -> list[str]:
        """Return the traps as ``trap`` commands that can be read back in."""
        lines = []
        for signum in sorted(self._commands):
            name = signal_name(signum)
            if name is not None:
                lines.append(f"trap -- {_quote(self._commands[signum])} {name}")
        return lines

    def notify(self, signum: int) -> None:
        """Record that a signal arrived; its trap runs at the next check."""
        if 0 < signum < MAX_SIGNALS:
            self._pending.add(signum)

    def check_pending(self) -> None:
        """Run the trap commands of all pending signals, lowest number first."""
        if not self._pending:
            return
        for signum in sorted(self._pending):
            self._pending.discard(signum)
            command = self._commands.get(signum)
            if command:
                self._runner(command)

    def trigger_exit(self) -> None:
        """Handle pending signals, then run the EXIT trap if one is set."""
        self.check_pending()
        self._pending.add(0)
        self.check_pending()