import pytest

from xvtools.filestat import FileType, stat_path


def test_directory(tmp_path):
    info = stat_path(tmp_path)
    assert info.type is FileType.DIR
    assert info.type == 1


def test_regular_file(tmp_path):
    path = tmp_path / "f"
    path.write_bytes(b"abc")
    info = stat_path(path)
    assert info.type is FileType.FILE
    assert info.size == len(b"abc")
    assert info.nlink >= 1


def test_hard_link_shares_inode(tmp_path):
    path = tmp_path / "a"
    path.write_bytes(b"x")
    other = tmp_path / "b"
    other.hardlink_to(path)
    assert stat_path(path).ino == stat_path(other).ino
    assert stat_path(path).nlink == 2


def test_missing_path_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        stat_path(tmp_path / "missing")