"""
Huffman experiments on text corpora

Builds Huffman codes for a corpus from its own character frequencies and,
optionally, from language-average frequencies, then compares both against
a fixed-length encoding. A second corpus can be encoded with both tables to
see how well they carry over.

Outputs (in --outdir):
  - report.csv                       (one row per code table / corpus pair)
  - output.json, output-tree.txt     (codes and tree for the corpus)
  - output-avg.json, output-avg-tree.txt
  - *.png                            (charts)

How to run:
  python experiments.py --input data/moby.txt
  python experiments.py --input data/moby.txt --average data/frequencies.json --other data/other.txt
  python experiments.py --input data/moby.txt --outdir results --no-plots

Notes:
  The average frequency file is a JSON list of {"Char": <code point>, "Freq": <number>}
"""

from __future__ import annotations

import argparse
import csv
import json
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

import matplotlib.pyplot as plt

import huffman as huff
import tree_output


# Utilities

def now_ns() -> int:
    return time.perf_counter_ns()

def ns_to_ms(ns: int) -> float:
    return ns / 1_000_000.0

def safe_mkdir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)

def timed(fn: Callable, *args) -> Tuple[object, float]:
    t0 = now_ns()
    value = fn(*args)
    t1 = now_ns()
    return value, ns_to_ms(t1 - t0)

def percent_diff(a: float, b: float) -> float:
    """
    How much smaller b is than a, in percent of a
    """
    if a == 0:
        return 0.0
    return (a - b) / a * 100.0

def load_text(path: Path) -> str:
    return Path(path).read_text(encoding="utf-8")

def load_average_frequencies(path: Path) -> Dict[str, float]:
    with Path(path).open(encoding="utf-8") as f:
        records = json.load(f)
    return {chr(r["Char"]): r["Freq"] for r in records}


# Experiment runner

@dataclass
class ReportRow:
    label: str
    corpus: str
    total_symbols: int
    unique_symbols: int
    table_symbols: int

    build_ms: float
    encode_ms: float
    decode_ms: float

    huffman_bits: int
    fixed_width: int
    fixed_bits: int
    saved_pct: float
    correctness_ok: int  # 1 or 0


def run_one(label: str, corpus: str, text: str, frequency_table: dict,
            eval_freqs: Optional[dict] = None) -> Tuple[ReportRow, dict, huff.HuffmanNode]:
    """
    Build codes from frequency_table and measure them on text
    eval_freqs defaults to the frequencies of text
    """
    if eval_freqs is None:
        eval_freqs = huff.freq_table(text)

    (code_map, root), build_ms = timed(huff.build_huffman_codes, frequency_table)
    encoded, encode_ms = timed(huff.huffman_encode, text, code_map)
    decoded, decode_ms = timed(huff.decode_text, encoded, root)

    huffman_bits = huff.huffman_length(eval_freqs, code_map)
    fixed_width = huff.fixed_bit_width(eval_freqs)
    fixed_bits = huff.fixed_length(eval_freqs)

    row = ReportRow(
        label=label,
        corpus=corpus,
        total_symbols=len(text),
        unique_symbols=len(eval_freqs),
        table_symbols=len(code_map),
        build_ms=build_ms,
        encode_ms=encode_ms,
        decode_ms=decode_ms,
        huffman_bits=huffman_bits,
        fixed_width=fixed_width,
        fixed_bits=fixed_bits,
        saved_pct=percent_diff(fixed_bits, huffman_bits),
        correctness_ok=1 if decoded == text else 0,
    )
    return row, code_map, root


def write_csv(path: Path, rows: List[ReportRow]) -> None:
    fields = list(ReportRow.__dataclass_fields__.keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=fields)
        w.writeheader()
        for r in rows:
            w.writerow({k: getattr(r, k) for k in fields})


def print_row(row: ReportRow) -> None:
    status = "Verification successful" if row.correctness_ok else "Verification failed"
    print(f"[{row.label} on {row.corpus}] {status}")
    print(f"  {row.build_ms:.2f}ms to create codes, {row.encode_ms:.2f}ms to encode, {row.decode_ms:.2f}ms to decode")
    print(f"  {row.huffman_bits:,} bits for huffman encoding")
    print(f"  {row.fixed_bits:,} bits for fixed encoding ({row.fixed_width} bit encoding)")
    print(f"  {row.saved_pct:.2f}% space saved")



# Plotting

def plot_bits(rows: List[ReportRow], outdir: Path) -> None:
    if not rows:
        return

    labels = [f"{r.label}\n{r.corpus}" for r in rows]
    x = list(range(len(rows)))
    width = 0.4

    plt.figure()
    plt.bar([i - width / 2 for i in x], [r.huffman_bits for r in rows], width, label="huffman")
    plt.bar([i + width / 2 for i in x], [r.fixed_bits for r in rows], width, label="fixed")
    plt.xticks(x, labels, rotation=20, ha="right")
    plt.ylabel("Encoded Size (bits)")
    plt.title("Huffman vs Fixed-Length Encoding")
    plt.legend()
    plt.tight_layout()
    plt.savefig(outdir / "bits_comparison.png", dpi=200)
    plt.close()


def plot_code_lengths(frequency_table: dict, code_map: dict, outdir: Path, name: str) -> None:
    symbols = [s for s in frequency_table if s in code_map]
    if not symbols:
        return

    plt.figure()
    plt.scatter([frequency_table[s] for s in symbols], [len(code_map[s]) for s in symbols])
    plt.xscale("symlog")
    plt.xlabel("Symbol Frequency")
    plt.ylabel("Code Length (bits)")
    plt.title(f"Code Length vs Frequency ({name})")
    plt.tight_layout()
    plt.savefig(outdir / f"code_lengths_{name}.png", dpi=200)
    plt.close()



# Main

def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Huffman coding experiments on text corpora")
    ap.add_argument("--input", type=str, required=True, help="Corpus to build and verify codes on")
    ap.add_argument("--average", type=str, default=None, help="JSON file of language-average character frequencies")
    ap.add_argument("--other", type=str, default=None, help="Second corpus to encode with both code tables")
    ap.add_argument("--outdir", type=str, default="out", help="Output directory for CSV, JSON, trees and plots")
    ap.add_argument("--no-plots", action="store_true", help="Skip writing charts")

    args = ap.parse_args(argv)

    outdir = Path(args.outdir)
    safe_mkdir(outdir)

    rows: List[ReportRow] = []

    text = load_text(args.input)
    corpus_name = Path(args.input).stem
    fq = huff.freq_table(text)

    row, codes, base = run_one("huffman", corpus_name, text, fq)
    rows.append(row)
    print_row(row)
    json_path, tree_path = tree_output.write_outputs(outdir, codes, base)
    print(f"> Outputted to {json_path} & {tree_path}")
    print(f"> Tree size: {len(codes)}")
    if not args.no_plots:
        plot_code_lengths(fq, codes, outdir, corpus_name)

    # Average frequencies, extended so every corpus character has a code
    average_fq = None
    if args.average:
        average_fq = huff.populate_frequencies(load_average_frequencies(args.average), fq)
        avg_row, avg_codes, avg_base = run_one("average", corpus_name, text, average_fq, fq)
        rows.append(avg_row)
        print_row(avg_row)
        print(f"  Huffman {percent_diff(avg_row.huffman_bits, row.huffman_bits):.2f}% better than average")
        json_path, tree_path = tree_output.write_outputs(outdir, avg_codes, avg_base, "avg")
        print(f"> Outputted to {json_path} & {tree_path}")

    # Carry both tables over to a second corpus
    if args.other:
        other_text = load_text(args.other)
        other_name = Path(args.other).stem
        other_fq = huff.freq_table(other_text)

        own_fq = huff.populate_frequencies(fq, other_fq)
        other_row, _, _ = run_one("huffman", other_name, other_text, own_fq, other_fq)
        rows.append(other_row)
        print_row(other_row)

        if average_fq is not None:
            other_avg_fq = huff.populate_frequencies(average_fq, other_fq)
            other_avg_row, _, _ = run_one("average", other_name, other_text, other_avg_fq, other_fq)
            rows.append(other_avg_row)
            print_row(other_avg_row)
            print(f"  Huffman is {percent_diff(other_avg_row.huffman_bits, other_row.huffman_bits):.2f}% better than average")

    report_csv = outdir / "report.csv"
    write_csv(report_csv, rows)

    if not args.no_plots:
        plot_bits(rows, outdir)

    ok_rate = sum(r.correctness_ok for r in rows) / max(1, len(rows))
    print(f"Wrote {len(rows)} rows to {report_csv}")
    print(f"Correctness rate across all runs: {ok_rate:.3f}")
    if not args.no_plots:
        print("Charts saved in:", outdir.resolve())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
