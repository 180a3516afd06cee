import pytest

from xvtools.filestat import O_CREATE, O_RDONLY, O_TRUNC, O_WRONLY
from xvtools.shparse import (
    END,
    MAXARGS,
    WORD,
    BackCmd,
    ExecCmd,
    ListCmd,
    PipeCmd,
    RedirCmd,
    ShellSyntaxError,
    Tokenizer,
    parse_command,
)


def test_simple_command():
    assert parse_command("echo hi there\n") == ExecCmd(["echo", "hi", "there"])


def test_empty_line_gives_empty_exec():
    assert parse_command("\n") == ExecCmd([])


def test_pipeline_nests_to_the_right():
    assert parse_command("a | b | c") == PipeCmd(
        ExecCmd(["a"]), PipeCmd(ExecCmd(["b"]), ExecCmd(["c"]))
    )


def test_redirections_wrap_outward():
    assert parse_command("cat < in > out") == RedirCmd(
        RedirCmd(ExecCmd(["cat"]), "in", O_RDONLY, 0),
        "out",
        O_WRONLY | O_CREATE | O_TRUNC,
        1,
    )


def test_append_redirection():
    assert parse_command("echo x >> log") == RedirCmd(
        ExecCmd(["echo", "x"]), "log", O_WRONLY | O_CREATE, 1
    )


def test_redirection_before_words():
    assert parse_command("< in cat") == RedirCmd(ExecCmd(["cat"]), "in", O_RDONLY, 0)


def test_operators_need_no_spaces():
    assert parse_command("a>b") == RedirCmd(
        ExecCmd(["a"]), "b", O_WRONLY | O_CREATE | O_TRUNC, 1
    )


def test_list():
    assert parse_command("a ; b") == ListCmd(ExecCmd(["a"]), ExecCmd(["b"]))


def test_trailing_semicolon():
    assert parse_command("a;") == ListCmd(ExecCmd(["a"]), ExecCmd([]))


def test_background():
    assert parse_command("sleep 5 &") == BackCmd(ExecCmd(["sleep", "5"]))


def test_background_pipeline():
    assert parse_command("a|b&") == BackCmd(PipeCmd(ExecCmd(["a"]), ExecCmd(["b"])))


def test_command_after_background_is_leftover():
    with pytest.raises(ShellSyntaxError) as info:
        parse_command("a & b")
    assert info.value.leftovers == "b"


def test_block_with_redirection():
    assert parse_command("(a; b) > f") == RedirCmd(
        ListCmd(ExecCmd(["a"]), ExecCmd(["b"])), "f", O_WRONLY | O_CREATE | O_TRUNC, 1
    )


def test_missing_close_paren():
    with pytest.raises(ShellSyntaxError, match="missing \\)"):
        parse_command("(a")


@pytest.mark.parametrize("line", ["cat <", "cat < |", "cat > ;"])
def test_missing_redirection_file(line):
    with pytest.raises(ShellSyntaxError, match="missing file for redirection"):
        parse_command(line)


def test_stray_close_paren():
    with pytest.raises(ShellSyntaxError) as info:
        parse_command("echo )")
    assert info.value.leftovers == ")"


def test_open_paren_inside_words():
    with pytest.raises(ShellSyntaxError, match="^syntax$"):
        parse_command("echo (")


def test_argument_limit():
    words = [f"w{i}" for i in range(MAXARGS - 1)]
    assert parse_command(" ".join(words)) == ExecCmd(words)
    with pytest.raises(ShellSyntaxError, match="too many args"):
        parse_command(" ".join(words + ["extra"]))


def test_tokenizer_sequence():
    tokens = Tokenizer("a>>b|c")
    seen = [tokens.next_token() for _ in range(6)]
    assert [t.kind for t in seen] == [WORD, ">>", WORD, "|", WORD, END]
    assert [t.text for t in seen] == ["a", ">>", "b", "|", "c", ""]


def test_tokenizer_peek():
    tokens = Tokenizer("  ;x")
    assert tokens.peek(";")
    assert not tokens.peek("")
    assert tokens.rest == ";x"