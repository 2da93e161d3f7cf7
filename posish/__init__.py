"""Building blocks for a POSIX shell: syntax tree, token parser, variables, traps and options."""

__version__ = "0.1.0"

__all__ = ["ast", "parser", "parser_base", "shell_options", "signals", "tokens", "variables"]