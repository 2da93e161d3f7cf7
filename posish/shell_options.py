"""Shell option flags set with ``set``."""

from __future__ import annotations

from dataclasses import dataclass, fields


@dataclass
class ShellOptions:
    """Flags controlling shell behaviour; all start off."""

    trace: bool = False  # -x
    exit_on_error: bool = False  # -e
    no_glob: bool = False  # -f
    no_clobber: bool = False  # -C
    no_unset: bool = False  # -u
    verbose: bool = False  # -v
    no_exec: bool = False  # -n
    all_export: bool = False  # -a
    monitor: bool = False  # -m
    hash_all: bool = False  # -h
    notify: bool = False  # -b
    ignore_eof: bool = False  # -o ignoreeof
    nolog: bool = False  # -o nolog
    vi_mode: bool = False  # -o vi
    ignore_errexit: bool = False  # internal: suppress -e

    def reset(self) -> None:
        """Turn every option off."""
        for option in fields(self):
            setattr(self, option.name, False)