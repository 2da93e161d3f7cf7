import pytest

from posish.variables import ReadonlyVariableError, VariableStore, is_valid_name


@pytest.fixture
def store():
    return VariableStore({"HOME": "/home/user"}, ppid=42)


def test_special_defaults(store):
    assert store.get("IFS") == " \t\n"
    assert store.get("PS1") == "\\u@\\h:\\w\\$ "
    assert store.get("PS2") == "> "
    assert store.get("PS4") == "+ "
    assert store.get("OPTIND") == "1"
    assert store.ifs == " \t\n"
    assert store.optind == "1"


def test_environment_and_ppid(store):
    assert store.get("HOME") == "/home/user"
    assert store.get("PPID") == "42"
    env = store.environ()
    assert env["HOME"] == "/home/user"
    assert "IFS" in env
    assert "PPID" not in env


def test_set_get_roundtrip(store):
    store.set("FOO", "bar")
    assert store.get("FOO") == "bar"
    store.set("FOO", "a much longer value")
    assert store.get("FOO") == "a much longer value"
    assert store.get("MISSING") is None


def test_unset_dynamic_and_fixed(store):
    store.set("FOO", "bar")
    store.unset("FOO")
    assert store.get("FOO") is None
    assert "FOO" not in store.all_variables()
    store.unset("IFS")
    assert store.get("IFS") is None
    assert store.ifs == " \t\n"
    assert "IFS" not in store.environ()
    store.set("IFS", ":")
    assert store.environ()["IFS"] == ":"


def test_readonly(store):
    store.set("RO", "x")
    store.set_readonly("RO")
    assert store.is_readonly("RO")
    with pytest.raises(ReadonlyVariableError) as info:
        store.set("RO", "y")
    assert info.value.name == "RO"
    with pytest.raises(ReadonlyVariableError):
        store.unset("RO")
    assert store.get("RO") == "x"
    assert store.readonly_variables() == {"RO": "x"}


def test_export_only_existing(store):
    store.set("A", "1")
    store.export("A")
    store.export("NOPE")
    assert store.environ()["A"] == "1"
    assert "NOPE" not in store.all_variables()


def test_local_shadows_and_restores(store):
    store.set("X", "outer")
    store.export("X")
    store.push_scope()
    store.declare_local("X", "inner")
    assert store.get("X") == "inner"
    assert "X" not in store.environ()
    store.pop_scope()
    assert store.get("X") == "outer"
    assert store.environ()["X"] == "outer"


def test_local_new_variable_removed(store):
    store.push_scope()
    store.declare_local("NEW", "v")
    assert store.get("NEW") == "v"
    store.pop_scope()
    assert store.get("NEW") is None


def test_local_declared_twice_restores_original(store):
    store.set("X", "orig")
    store.push_scope()
    store.declare_local("X", "one")
    store.declare_local("X", "two")
    store.pop_scope()
    assert store.get("X") == "orig"


def test_local_without_scope_sets_global(store):
    store.declare_local("G", "v")
    store.pop_scope()
    assert store.get("G") == "v"


def test_local_overrides_readonly_in_scope(store):
    store.set("R", "keep")
    store.set_readonly("R")
    store.push_scope()
    store.declare_local("R", "tmp")
    assert not store.is_readonly("R")
    store.pop_scope()
    assert store.is_readonly("R")
    assert store.get("R") == "keep"


def test_positional(store):
    store.set_positional(["a", "b", "c"])
    assert store.positional_count() == 3
    assert store.positional(1) == "a"
    assert store.positional(3) == "c"
    assert store.positional(4) is None
    store.set("0", "sh")
    assert store.positional(0) == "sh"
    store.shift_positional(2)
    assert store.all_positional() == ["c"]
    store.shift_positional(0)
    assert store.all_positional() == ["c"]
    with pytest.raises(ValueError):
        store.shift_positional(2)
    assert store.all_positional() == ["c"]


def test_save_restore_positional(store):
    store.set_positional(["x", "y"])
    saved = store.save_positional()
    store.set_positional([])
    assert store.positional_count() == 0
    store.restore_positional(saved)
    assert store.all_positional() == ["x", "y"]


def test_set_lineno(store):
    store.set_lineno(7)
    assert store.get("LINENO") == "7"
    store.set_readonly("LINENO")
    store.set_lineno(8)
    assert store.get("LINENO") == "7"


@pytest.mark.parametrize(
    "name, valid",
    [("abc", True), ("_x1", True), ("1abc", False), ("", False),
     ("a-b", False), (None, False), ("A_B", True)],
)
def test_is_valid_name(name, valid):
    assert is_valid_name(name) is valid