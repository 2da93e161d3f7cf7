import pytest

from posish.ast import Case, CaseItem, Command, For, Group, If, ListNode, Subshell, Until, While
from posish.parser_base import CompoundParser, ShellSyntaxError
from posish.tokens import Token, TokenStream, TokenType


def W(text):
    return Token(TokenType.WORD, text, 1)


def K(text):
    return Token(TokenType.KEYWORD, text, 1)


def OP(text):
    return Token(TokenType.OPERATOR, text, 1)


NL = Token(TokenType.NEWLINE, "\n", 1)


def cmd(*args):
    return Command(list(args), lineno=1)


def parser(*tokens):
    return CompoundParser(list(tokens))


def test_peek_does_not_consume():
    p = parser(W("a"), W("b"))
    assert p.peek() == W("a")
    assert p.peek() == W("a")
    assert p.consume() == W("a")
    assert p.consume() == W("b")
    assert p.consume().type is TokenType.EOF


def test_accepts_token_stream():
    p = CompoundParser(TokenStream([W("x")]))
    assert p.consume() == W("x")
    assert p.peek().type is TokenType.EOF


def test_if_with_semicolons():
    p = parser(K("if"), W("a"), OP(";"), K("then"), W("b"), OP(";"), K("fi"))
    node = p.parse_if()
    assert node == If(ListNode(cmd("a")), ListNode(cmd("b")), None, lineno=1)
    assert p.peek().type is TokenType.EOF


def test_if_with_newlines():
    p = parser(K("if"), W("a"), NL, K("then"), W("b"), NL, K("fi"))
    node = p.parse_if()
    assert node.condition == cmd("a")
    assert node.then_branch == cmd("b")
    assert node.else_branch is None


def test_if_elif_else():
    p = parser(
        K("if"), W("a"), NL, K("then"), W("b"), NL,
        K("elif"), W("c"), NL, K("then"), W("d"), NL,
        K("else"), W("e"), NL, K("fi"),
    )
    node = p.parse_if()
    inner = node.else_branch
    assert isinstance(inner, If)
    assert inner.condition == cmd("c")
    assert inner.then_branch == cmd("d")
    assert inner.else_branch == cmd("e")
    assert p.peek().type is TokenType.EOF


def test_if_lineno_from_keyword():
    p = CompoundParser([Token(TokenType.KEYWORD, "if", 7), W("a"), NL, K("then"), W("b"), NL, K("fi")])
    assert p.parse_if().lineno == 7


def test_if_without_then_raises():
    p = parser(K("if"), W("a"), NL, K("fi"))
    with pytest.raises(ShellSyntaxError):
        p.parse_if()


def test_if_without_fi_raises():
    p = parser(K("if"), W("a"), NL, K("then"), W("b"), NL)
    with pytest.raises(ShellSyntaxError):
        p.parse_if()


def test_while_loop():
    p = parser(K("while"), W("a"), NL, K("do"), W("b"), NL, K("done"))
    assert p.parse_while() == While(cmd("a"), cmd("b"), lineno=1)


def test_until_loop():
    p = parser(K("until"), W("a"), NL, K("do"), W("b"), NL, K("done"))
    node = p.parse_until()
    assert node == Until(cmd("a"), cmd("b"))


def test_while_missing_done_raises():
    p = parser(K("while"), W("a"), NL, K("do"), W("b"), NL)
    with pytest.raises(ShellSyntaxError):
        p.parse_while()


def test_for_with_words():
    p = parser(K("for"), W("i"), K("in"), W("x"), W("y"), OP(";"), K("do"), W("echo"), OP(";"), K("done"))
    node = p.parse_for()
    assert node == For("i", ["x", "y"], ListNode(cmd("echo")), lineno=1)


def test_for_without_in_iterates_positional():
    p = parser(K("for"), W("i"), NL, K("do"), W("echo"), NL, K("done"))
    node = p.parse_for()
    assert node.var_name == "i"
    assert node.words is None
    assert node.body == cmd("echo")


def test_for_missing_do_raises():
    p = parser(K("for"), W("i"), K("in"), W("x"), OP(";"), W("echo"))
    with pytest.raises(ShellSyntaxError):
        p.parse_for()


def test_for_needs_name():
    p = parser(K("for"), OP(";"))
    with pytest.raises(ShellSyntaxError):
        p.parse_for()


def test_case_statement():
    p = parser(
        K("case"), W("x"), K("in"), NL,
        W("a"), OP("|"), W("b"), OP(")"), W("echo"), OP(";;"),
        OP("("), W("*"), OP(")"), W("y"), OP(";;"), NL,
        K("esac"),
    )
    node = p.parse_case()
    assert node == Case("x", [CaseItem(["a", "b"], cmd("echo")), CaseItem(["*"], cmd("y"))])
    assert p.peek().type is TokenType.EOF


def test_case_missing_in_raises():
    p = parser(K("case"), W("x"), W("a"))
    with pytest.raises(ShellSyntaxError):
        p.parse_case()


def test_case_missing_esac_raises():
    p = parser(K("case"), W("x"), K("in"), W("a"), OP(")"), W("b"), OP(";;"))
    with pytest.raises(ShellSyntaxError):
        p.parse_case()


def test_group():
    p = parser(K("{"), W("a"), OP(";"), K("}"))
    assert p.parse_group() == Group(ListNode(cmd("a")))


def test_group_unterminated_raises():
    p = parser(K("{"), W("a"), OP(";"))
    with pytest.raises(ShellSyntaxError):
        p.parse_group()


def test_compound_list_stops_at_terminator():
    p = parser(W("a"), NL, W("b"), NL, K("done"))
    node = p.parse_compound_list("done")
    assert node == ListNode(cmd("a"), cmd("b"))
    assert p.peek() == K("done")


def test_compound_list_empty_returns_none():
    p = parser(NL, NL, K("fi"))
    assert p.parse_compound_list("fi") is None
    assert p.peek() == K("fi")


def test_compound_list_background_command():
    p = parser(W("a"), OP("&"), W("b"))
    node = p.parse_compound_list(None)
    assert node == ListNode(cmd("a"), cmd("b"), True)


def test_compound_list_with_subshell():
    p = parser(OP("("), W("a"), OP(")"), NL, K("}"))
    node = p.parse_compound_list("}")
    assert node == Subshell(cmd("a"))


def test_nested_compound_commands():
    p = parser(
        K("while"), W("a"), NL, K("do"),
        K("if"), W("b"), NL, K("then"), W("c"), NL, K("fi"), NL,
        K("done"),
    )
    node = p.parse_while()
    assert isinstance(node.body, If)
    assert node.body.then_branch == cmd("c")


def test_syntax_error_keeps_token():
    p = parser(K("if"), W("a"), NL, K("done"))
    with pytest.raises(ShellSyntaxError) as info:
        p.parse_if()
    assert info.value.token == K("done")
    assert "done" in str(info.value)