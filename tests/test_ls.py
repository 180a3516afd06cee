import io
import os

from xvtools.filestat import FileType
from xvtools.ls import DIRSIZ, fmtname, ls, main


def test_fmtname_pads_short_names():
    name = fmtname("dir/ab")
    assert len(name) == DIRSIZ
    assert name.rstrip() == "ab"


def test_fmtname_keeps_long_names():
    long_name = "n" * (DIRSIZ + 3)
    assert fmtname(f"a/{long_name}") == long_name


def test_ls_file(tmp_path):
    path = tmp_path / "f1"
    path.write_bytes(b"hello")
    out = io.StringIO()
    listed = ls(str(path), out)
    ino = os.stat(path).st_ino
    assert out.getvalue() == f"{fmtname(str(path))} {int(FileType.FILE)} {ino} 5\n"
    assert listed[0][1].size == 5


def test_ls_directory(tmp_path):
    (tmp_path / "f1").write_bytes(b"hello")
    (tmp_path / "d").mkdir()
    out = io.StringIO()
    listed = ls(str(tmp_path), out)
    names = [p.rsplit("/", 1)[-1] for p, _ in listed]
    assert names == [".", "..", "d", "f1"]
    lines = out.getvalue().splitlines()
    assert len(lines) == len(listed)
    fields = lines[3].split()
    assert fields[0] == "f1"
    assert fields[1] == str(int(FileType.FILE))
    assert fields[2] == str(os.stat(tmp_path / "f1").st_ino)
    assert fields[3] == "5"
    assert lines[2].split()[1] == str(int(FileType.DIR))


def test_ls_missing(tmp_path, capsys):
    missing = f"{tmp_path}/nope"
    assert ls(missing, io.StringIO()) == []
    assert f"ls: cannot open {missing}" in capsys.readouterr().err


def test_main_lists_each_argument(tmp_path, capsys):
    a = tmp_path / "a"
    b = tmp_path / "b"
    a.write_text("x")
    b.write_text("yy")
    assert main([str(a), str(b)]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert [line.split()[0] for line in lines] == ["a", "b"]
    assert [line.split()[3] for line in lines] == ["1", "2"]