import io

from xvtools.wc import CHUNK_SIZE, Counts, count, main, wc


def test_count_simple_text():
    text = "hello world\n"
    assert count(text) == Counts(lines=1, words=2, chars=len(text))


def test_count_empty():
    assert count("") == Counts(0, 0, 0)


def test_nul_separates_words():
    assert count(b"a\0b").words == 2


def test_all_separators():
    assert count("a b\tc\rd\ve\nf").words == 6


def test_bytes_and_str_agree():
    text = "one two\nthree\n\nfour"
    assert count(text) == count(text.encode())


def test_words_span_chunks():
    data = b"x" * (CHUNK_SIZE * 3) + b" y\n"
    out = io.StringIO()
    counts = wc(io.BytesIO(data), "f", out)
    assert counts == count(data)
    assert counts.words == 2


def test_wc_output_line():
    out = io.StringIO()
    counts = wc(io.BytesIO(b"hello world\n"), "name", out)
    assert out.getvalue() == f"{counts.lines} {counts.words} {counts.chars} name\n"


def test_main_with_file(tmp_path, capsys):
    path = tmp_path / "in.txt"
    path.write_bytes(b"a b\nc\n")
    assert main([str(path)]) == 0
    counts = count(b"a b\nc\n")
    assert capsys.readouterr().out == f"{counts.lines} {counts.words} {counts.chars} {path}\n"


def test_main_missing_file(tmp_path, capsys):
    missing = tmp_path / "nope"
    assert main([str(missing)]) == 1
    assert capsys.readouterr().out == f"wc: cannot open {missing}\n"