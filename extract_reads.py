#!/usr/bin/env python3
"""
extract_reads.py

Pull the reads a taxonomic classifier assigned to a set of taxa out of a
FASTA/FASTQ file.

Example:
  ./extract_reads.py 9606 sample.kraken sample.fq.gz > human.fq
  ./extract_reads.py -t taxonomy.tsv -p 1239 sample.kraken sample_#.fq > firmicutes.fq
  ./extract_reads.py @taxids.txt sample.kraken sample.fq > selected.fq
  ./extract_reads.py -v -o 9606 sample.kraken sample.fq > non_human.fa

Exit codes: 0 success (also when nothing matched), 1 unreadable input,
2 invalid option combination.
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional, TextIO

from taxreads.errors import ConfigurationError, FileAccessError
from taxreads.filtering.extract import FilterOptions, extract
from taxreads.taxonomy.closure import load_taxon_closure, parse_taxon_ids


def parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description="Extract reads classified (or not) as the given taxa; records go to stdout."
    )
    p.add_argument("taxids", metavar="TAXIDS",
                   help="Comma-separated taxon IDs, or @FILE with one ID per line. Use 0/U for unclassified.")
    p.add_argument("report", metavar="REPORT", help="Per-read classification output (tab-separated).")
    p.add_argument("reads", metavar="READS", help="FASTQ/FASTA file (gzip ok). In paired mode contains the mate placeholder.")
    p.add_argument("-f", "--fasta-input", action="store_true", help="Reads are FASTA (implies FASTA output).")
    p.add_argument("-o", "--fasta-output", action="store_true", help="Write FASTA instead of FASTQ.")
    p.add_argument("-v", "--invert", action="store_true", help="Write reads that did NOT match the taxa.")
    p.add_argument("-t", "--taxonomy", metavar="FILE", default=None,
                   help="child<TAB>parent table; expands TAXIDS to all descendants.")
    p.add_argument("-p", "--paired", action="store_true",
                   help="Paired-end: READS contains the mate placeholder, replaced by 1 and 2.")
    p.add_argument("--mate-placeholder", default="#", help="Mate placeholder in READS (default: '#').")
    p.add_argument("--output", default=None, help="Write records here instead of stdout.")
    p.add_argument("--verbose", action="store_true", help="Report configuration on stderr.")
    return p.parse_args(argv)


def options_from_args(ns: argparse.Namespace) -> FilterOptions:
    return FilterOptions(
        fasta_input=ns.fasta_input,
        fasta_output=ns.fasta_output,
        invert=ns.invert,
        paired=ns.paired,
        mate_placeholder=ns.mate_placeholder,
    )


def run(ns: argparse.Namespace, out: TextIO, log: TextIO) -> int:
    opts = options_from_args(ns)
    opts.validate(ns.reads)

    seeds = parse_taxon_ids(ns.taxids)
    taxa = load_taxon_closure(seeds, ns.taxonomy, log=log)
    if ns.verbose:
        print(f"[config] {len(seeds)} requested taxa, {len(taxa)} after expansion", file=log)
        print(f"[config] report={ns.report} reads={ns.reads} paired={opts.paired}", file=log)
        print(f"[config] output={'FASTA' if opts.effective_fasta_output else 'FASTQ'} invert={opts.invert}", file=log)

    sink: Optional[TextIO] = None
    try:
        if ns.output:
            try:
                sink = open(ns.output, "wt", encoding="utf-8")
            except OSError as exc:
                raise FileAccessError(f"cannot write {ns.output!r}: {exc.strerror or exc}") from exc
            out = sink
        extract(taxa, ns.report, ns.reads, out, opts, seeds=seeds, log=log)
    finally:
        if sink is not None:
            sink.close()
    return 0


def main(argv: Optional[List[str]] = None, *, out: Optional[TextIO] = None, log: Optional[TextIO] = None) -> int:
    ns = parse_args(sys.argv[1:] if argv is None else argv)
    out = sys.stdout if out is None else out
    log = sys.stderr if log is None else log
    try:
        return run(ns, out, log)
    except ConfigurationError as exc:
        print(f"[error] {exc}", file=log)
        return 2
    except FileAccessError as exc:
        print(f"[error] {exc}", file=log)
        return 1
    except (OSError, EOFError) as exc:
        # raised while reading, e.g. a corrupt or truncated .gz input
        print(f"[error] cannot read input: {exc}", file=log)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
