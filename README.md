# posish

Building blocks for a POSIX shell, as a Python library with no
dependencies:

- a syntax tree for shell commands (`posish.ast`);
- a parser that builds the tree from a stream of tokens (`posish.parser`,
  `posish.parser_base`);
- a variable store with function scopes and positional parameters
  (`posish.variables`);
- a table of signal traps (`posish.signals`);
- the set of shell option flags (`posish.shell_options`).

## Installing

    pip install posish

For the test suite: `pip install "posish[test]"`, then `pytest`.

## Tokens

`posish.tokens` defines `TokenType` (`EOF`, `WORD`, `KEYWORD`, `OPERATOR`,
`IO_NUMBER`, `NEWLINE`, `ERROR`) and the frozen `Token` dataclass with
`type`, `value` and `lineno`. `Token.is_keyword(*words)` and
`Token.is_operator(*operators)` test a token's kind and text.

`TokenStream(tokens, heredocs)` hands out tokens with `next_token()`, and an
`EOF` token for ever once they run out. `heredocs` are the raw lines that
follow the command line; `read_until_delimiter(delimiter, strip_tabs)` reads
them up to the delimiter line and returns the body, each line ending in a
newline. With `strip_tabs` leading tabs are removed, as for `<<-`.

## Parsing

    from posish.parser import parse
    from posish.tokens import Token, TokenStream, TokenType as T

    tokens = [
        Token(T.WORD, "echo"), Token(T.WORD, "hi"),
        Token(T.OPERATOR, "&&"), Token(T.WORD, "true"),
    ]
    tree = parse(TokenStream(tokens))
    # And(left=Command(args=['echo', 'hi'], ...), right=Command(args=['true'], ...))

`parse(source, aliases=None, tokenize=None)` accepts a `TokenStream` or any
iterable of `Token`s and returns a node from `posish.ast`: `Command`,
`Pipeline`, `ListNode` (with `is_async` for `&`), `And`, `Or`, `If`,
`While`, `Until`, `For`, `Case` (of `CaseItem`s), `Subshell`, `Group` or
`FunctionDef`. Empty input gives an empty `Command`.

- Simple commands collect leading `NAME=value` words as `Assignment`s, the
  remaining words as `args`, and redirections as `Redirection`s of a
  `RedirectionType` (`<`, `>`, `>|`, `>>`, `<&`, `>&`, `<>`, `<<`, `<<-`).
  Without an IO number, input redirections use descriptor 0 and output
  redirections descriptor 1. Here-document bodies are read from the stream.
- `name() body` and `function name [()] body` define functions.
- `aliases` maps a command name to replacement text; the text is split into
  tokens by `tokenize` (whitespace splitting when none is given) and its
  words replace the name.

Syntax errors raise `posish.parser_base.ShellSyntaxError`, whose `token`
attribute holds the offending token. `Parser` exposes the grammar rules
(`parse_list`, `parse_and_or`, `parse_pipeline`, `parse_simple_command`,
`parse_redirection`) and, through `CompoundParser`, `parse_if`,
`parse_while`, `parse_until`, `parse_for`, `parse_case`, `parse_group` and
`parse_compound_list`.

`try_fast_path(line, variables)` handles a raw line without tokens or
parsing when it is blank, a lone comment, `:`, or a plain `NAME=value`
assignment with no quoting, expansion or glob characters in the value (the
assignment goes into the given `VariableStore`, trailing blanks trimmed). It
returns `True` if it handled the line and `False` if the line needs the full
parser.

## Variables

`VariableStore(environ=None, ppid=None)` starts with `IFS`, `PATH`, `PS1`,
`PS2`, `PS4` and `OPTIND`, imports and exports every entry of `environ` (the
process environment by default) and sets `PPID`.

- `set`, `get`, `unset`, `export`, `set_readonly`, `is_readonly`. Assigning
  or unsetting a readonly variable raises `ReadonlyVariableError`. Unsetting
  one of the initial special variables only marks it unset.
- `environ()`, `all_variables()` and `readonly_variables()` return
  name-to-value dictionaries.
- Properties `ifs`, `path`, `ps1`, `ps2`, `ps4` and `optind` give the
  current values with their fallbacks.
- `push_scope()`, `declare_local(name, value)` and `pop_scope()` give
  function-local variables; popping a scope restores what the locals
  shadowed and removes those created in it.
- Positional parameters: `set_positional`, `positional(index)` (`$0` is the
  variable named `0`), `positional_count`, `all_positional`,
  `shift_positional(n)` (raises `ValueError` when `n` exceeds the count),
  `save_positional` and `restore_positional`.
- `set_lineno(lineno)` updates `LINENO` unless it is readonly.
- Attributes `last_bg_pid` and `shell_name` hold `$!` and the shell's name.

`is_valid_name(name)` tells whether a string can be a variable name.

## Traps

`signal_number(name)` accepts a number, or a name such as `INT`, `SIGINT`
or `int`, and returns its number (`EXIT` is 0), or `None` if unknown.
`signal_name(signum)` goes the other way.

`TrapTable(runner, install_handlers=True)` keeps a trap command per signal.
`trap(signum, command)` sets one (an empty command ignores the signal),
`reset` removes it, `ignore` ignores the signal and `get` returns the
command. With `install_handlers` the process's signal dispositions follow
the table. `notify(signum)` records an arrived signal; `check_pending()`
runs the pending traps through `runner`, lowest signal first.
`trigger_exit()` handles pending signals and then runs the `EXIT` trap.
`list_traps()` returns the traps as `trap -- '...' NAME` lines that can be
read back in.

## Options

`ShellOptions` holds the flags that `set` controls (`trace`,
`exit_on_error`, `no_glob`, `no_clobber`, `no_unset`, `verbose`, `no_exec`,
`all_export`, `monitor`, `hash_all`, `notify`, `ignore_eof`, `nolog`,
`vi_mode`, `ignore_errexit`), all off at first; `reset()` turns them off
again.

## What it does not do

posish is not a shell you can run: it has no command, no lexer that turns
shell text into tokens, and no executor, builtins, job control or line
editing. Callers supply tokens to the parser and a runner to `TrapTable`,
and decide what to do with the syntax tree.