import csv
import json

import pytest

import experiments
import huffman as huff


CORPUS = "It was the best of times, it was the worst of times.\nIt was the age of wisdom.\n"
OTHER = "Call me Ishmael. Some years ago, never mind how long precisely!\n"


@pytest.fixture
def corpus_files(tmp_path):
    corpus = tmp_path / "moby.txt"
    corpus.write_text(CORPUS, encoding="utf-8")
    other = tmp_path / "other.txt"
    other.write_text(OTHER, encoding="utf-8")
    average = tmp_path / "frequencies.json"
    average.write_text(json.dumps([
        {"Char": 32, "Freq": 0.17},
        {"Char": 101, "Freq": 0.09},
        {"Char": 116, "Freq": 0.07},
        {"Char": 97, "Freq": 0.06},
        {"Char": 122, "Freq": 0.0005},
    ]), encoding="utf-8")
    return corpus, other, average


def test_percent_diff():
    assert experiments.percent_diff(100, 75) == pytest.approx(25.0)
    assert experiments.percent_diff(0, 10) == 0.0


def test_timed_returns_value_and_ms():
    value, ms = experiments.timed(sum, [1, 2, 3])
    assert value == 6
    assert ms >= 0.0


def test_load_average_frequencies(corpus_files):
    _, _, average = corpus_files
    fq = experiments.load_average_frequencies(average)
    assert fq[" "] == pytest.approx(0.17)
    assert fq["z"] == pytest.approx(0.0005)


def test_run_one_reports_savings():
    row, codes, root = experiments.run_one("huffman", "sample", CORPUS, huff.freq_table(CORPUS))
    assert row.correctness_ok == 1
    assert row.total_symbols == len(CORPUS)
    assert row.huffman_bits == len(huff.huffman_encode(CORPUS, codes))
    assert row.fixed_bits == len(CORPUS) * row.fixed_width
    assert row.huffman_bits < row.fixed_bits
    assert row.saved_pct > 0
    assert root.weight == len(CORPUS)


def test_run_one_with_seeded_table_covers_corpus(corpus_files):
    _, _, average = corpus_files
    fq = huff.freq_table(CORPUS)
    seeded = huff.populate_frequencies(experiments.load_average_frequencies(average), fq)
    row, codes, _ = experiments.run_one("average", "sample", CORPUS, seeded, fq)
    assert row.correctness_ok == 1
    assert row.table_symbols == len(seeded)
    assert row.unique_symbols == len(fq)
    assert "z" in codes


def test_run_one_unknown_symbol_propagates():
    with pytest.raises(huff.UnknownSymbolError):
        experiments.run_one("huffman", "sample", "abc", {"a": 1, "b": 1})


def test_main_writes_outputs(corpus_files, tmp_path, capsys):
    corpus, other, average = corpus_files
    outdir = tmp_path / "results"

    code = experiments.main([
        "--input", str(corpus),
        "--average", str(average),
        "--other", str(other),
        "--outdir", str(outdir),
    ])

    assert code == 0
    for name in ("report.csv", "output.json", "output-tree.txt", "output-avg.json",
                 "output-avg-tree.txt", "bits_comparison.png", "code_lengths_moby.png"):
        assert (outdir / name).exists(), name

    with (outdir / "report.csv").open(encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert [(r["label"], r["corpus"]) for r in rows] == [
        ("huffman", "moby"),
        ("average", "moby"),
        ("huffman", "other"),
        ("average", "other"),
    ]
    assert all(r["correctness_ok"] == "1" for r in rows)

    out = capsys.readouterr().out
    assert "Verification successful" in out
    assert "bits for huffman encoding" in out
    assert "Correctness rate across all runs: 1.000" in out


def test_main_without_plots(corpus_files, tmp_path):
    corpus, _, _ = corpus_files
    outdir = tmp_path / "plain"

    assert experiments.main(["--input", str(corpus), "--outdir", str(outdir), "--no-plots"]) == 0
    assert (outdir / "report.csv").exists()
    assert not list(outdir.glob("*.png"))


def test_main_empty_corpus_raises(tmp_path):
    empty = tmp_path / "empty.txt"
    empty.write_text("", encoding="utf-8")
    with pytest.raises(huff.EmptyInputError):
        experiments.main(["--input", str(empty), "--outdir", str(tmp_path / "o"), "--no-plots"])
