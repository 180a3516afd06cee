from xvtools.echo import echo, main


def test_echo_joins_with_spaces():
    assert echo(["hello", "world"]) == "hello world\n"


def test_echo_without_arguments_prints_nothing():
    assert echo([]) == ""


def test_echo_keeps_empty_arguments():
    assert echo(["a", "", "b"]) == "a  b\n"


def test_main_writes_stdout(capsys):
    assert main(["a"]) == 0
    assert capsys.readouterr().out == "a\n"