import io

from xvtools.find import PATH_BUFFER, find, fmtname, main


def _tree(root):
    (root / "x").mkdir()
    (root / "x" / "target").write_text("1")
    (root / "y" / "z").mkdir(parents=True)
    (root / "y" / "z" / "target").write_text("2")
    (root / "y" / "other").write_text("3")


def test_fmtname_takes_last_component():
    assert fmtname("a/b/c") == "c"
    assert fmtname("c") == "c"
    assert fmtname("a/") == ""


def test_find_walks_tree(tmp_path):
    _tree(tmp_path)
    out = io.StringIO()
    root = str(tmp_path)
    found = find(root, "target", out)
    assert found == [f"{root}/x/target", f"{root}/y/z/target"]
    assert out.getvalue() == "".join(p + "\n" for p in found)


def test_find_matches_directories_too(tmp_path):
    _tree(tmp_path)
    root = str(tmp_path)
    assert find(root, "z", io.StringIO()) == [f"{root}/y/z"]


def test_find_on_file_checks_its_own_name(tmp_path):
    target = tmp_path / "target"
    target.write_text("x")
    assert find(str(target), "target", io.StringIO()) == [str(target)]
    assert find(str(target), "other", io.StringIO()) == []


def test_find_never_reports_dot_entries(tmp_path):
    _tree(tmp_path)
    assert find(str(tmp_path), "..", io.StringIO()) == []


def test_missing_path(tmp_path, capsys):
    missing = f"{tmp_path}/nope"
    assert find(missing, "abc", io.StringIO()) == []
    assert f"find: cannot open {missing}" in capsys.readouterr().err


def test_path_too_long(tmp_path):
    deep = tmp_path
    while len(str(deep)) <= PATH_BUFFER:
        deep = deep / ("d" * 100)
    deep.mkdir(parents=True)
    (deep / "target").write_text("x")
    out = io.StringIO()
    assert find(str(deep), "target", out) == []
    assert out.getvalue() == "find: path too long\n"


def test_main_requires_two_arguments(capsys):
    assert main(["only"]) == 1
    assert "find requires 3 args" in capsys.readouterr().out


def test_main_prints_matches(tmp_path, capsys):
    _tree(tmp_path)
    assert main([str(tmp_path), "other"]) == 0
    assert capsys.readouterr().out == f"{tmp_path}/y/other\n"