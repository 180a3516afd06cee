import os

import pytest

from xvtools.usertests_dirs import (
    BIGDIR_ENTRIES,
    BIGFILE_BLOCKS,
    BIGFILE_SIZE,
    BIGWRITE_START,
    BIGWRITE_STEP,
    CREATEDELETE_CHILDREN,
    CREATEDELETE_FILES,
    FOURFILES_CHILDREN,
    FOURFILES_SIZE,
    FOURFILES_WRITES,
    SHAREDFD_SIZE,
    SHAREDFD_WRITES,
    check_bigdir,
    check_bigfile,
    check_bigwrite,
    check_createdelete,
    check_dirfile,
    check_fourfiles,
    check_rmdot,
    check_sharedfd,
    check_subdir,
)
from xvtools.usertests_files import BUFSZ, CheckFailed


def test_subdir_reads_linked_content_and_cleans_up(tmp_path):
    assert check_subdir(tmp_path) == b"FF"
    assert os.listdir(tmp_path) == []


def test_subdir_fails_when_dd_is_taken(tmp_path):
    (tmp_path / "dd").write_text("ff")
    with pytest.raises(CheckFailed, match="mkdir dd failed"):
        check_subdir(tmp_path)


def test_bigwrite_sizes(tmp_path):
    sizes = check_bigwrite(tmp_path)
    assert sizes[0] == BIGWRITE_START
    assert all(b - a == BIGWRITE_STEP for a, b in zip(sizes, sizes[1:]))
    assert sizes[-1] < BUFSZ <= sizes[-1] + BIGWRITE_STEP
    assert os.listdir(tmp_path) == []


def test_bigfile_total(tmp_path):
    assert check_bigfile(tmp_path) == BIGFILE_BLOCKS * BIGFILE_SIZE
    assert not (tmp_path / "bigfile.dat").exists()


def test_rmdot_refuses_dot_entries(tmp_path):
    assert check_rmdot(tmp_path) == [".", "..", "dots/.", "dots/.."]
    assert not (tmp_path / "dots").exists()


def test_rmdot_fails_when_dots_exists(tmp_path):
    (tmp_path / "dots").write_text("")
    with pytest.raises(CheckFailed, match="mkdir dots failed"):
        check_rmdot(tmp_path)


def test_dirfile_refusals(tmp_path):
    refused = check_dirfile(tmp_path)
    assert "chdir dirfile" in refused
    assert "mkdir dirfile/xx" in refused
    assert refused[-1] == "write ."
    assert os.listdir(tmp_path) == []


def test_fourfiles_lengths(tmp_path):
    totals = check_fourfiles(tmp_path)
    assert sorted(totals) == [f"f{i}" for i in range(FOURFILES_CHILDREN)]
    assert set(totals.values()) == {FOURFILES_WRITES * FOURFILES_SIZE}
    assert os.listdir(tmp_path) == []


def test_createdelete_survivors(tmp_path):
    present = check_createdelete(tmp_path)
    half = CREATEDELETE_FILES // 2
    assert len(present) == CREATEDELETE_CHILDREN * (1 + CREATEDELETE_FILES - half)
    assert "p0" in present
    assert "p1" not in present
    assert os.listdir(tmp_path) == []


def test_sharedfd_counts(tmp_path):
    expected = SHAREDFD_WRITES * SHAREDFD_SIZE
    assert check_sharedfd(tmp_path) == (expected, expected)
    assert not (tmp_path / "sharedfd").exists()


def test_bigdir_names(tmp_path):
    names = check_bigdir(tmp_path)
    assert len(names) == BIGDIR_ENTRIES
    assert len(set(names)) == BIGDIR_ENTRIES
    assert names[0] == "x00"
    assert all("/" not in n for n in names)
    assert os.listdir(tmp_path) == []


def test_bigdir_fails_when_bd_is_directory(tmp_path):
    (tmp_path / "bd").mkdir()
    (tmp_path / "bd" / "keep").write_text("")
    with pytest.raises(CheckFailed, match="bigdir create failed"):
        check_bigdir(tmp_path)