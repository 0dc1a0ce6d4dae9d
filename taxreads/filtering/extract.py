# taxreads/filtering/extract.py
from __future__ import annotations

import sys
from contextlib import ExitStack
from dataclasses import dataclass
from typing import AbstractSet, Iterable, Iterator, Optional, TextIO

from ..errors import ConfigurationError
from ..formats import kraken as fmt_kraken
from ..sequences.openers import mate_paths, reading
from ..sequences.records import (
    SequenceRecord,
    iter_fasta,
    iter_fastq,
    write_fasta,
    write_fastq,
)
from .verdicts import VerdictTable, build_verdicts, log_summary

__all__ = ["FilterOptions", "filter_reads", "extract"]


@dataclass(slots=True)
class FilterOptions:
    fasta_input: bool = False
    fasta_output: bool = False
    invert: bool = False
    paired: bool = False
    progress_every: int = 100
    mate_placeholder: str = "#"

    @property
    def effective_fasta_output(self) -> bool:
        # FASTA input carries no qualities to write FASTQ from
        return self.fasta_output or self.fasta_input

    def validate(self, reads_path: Optional[str] = None) -> None:
        if self.fasta_input and self.paired:
            raise ConfigurationError("FASTA input cannot be combined with paired mode")
        if self.progress_every < 1:
            raise ConfigurationError("progress_every must be >= 1")
        if self.paired and reads_path is not None:
            mate_paths(reads_path, self.mate_placeholder)

    def records(self, lines: Iterable[str]) -> Iterator[SequenceRecord]:
        return iter_fasta(lines) if self.fasta_input else iter_fastq(lines)


def _write(out: TextIO, rec: SequenceRecord, read_id: str, fasta_output: bool) -> None:
    if not fasta_output:
        write_fastq(out, rec)
    elif rec.is_fastq:
        write_fasta(out, read_id, rec.sequence_lines[:1])
    else:
        write_fasta(out, read_id, rec.sequence_lines)


def filter_reads(
    table: VerdictTable,
    reads: Iterable[SequenceRecord],
    out: TextIO,
    options: FilterOptions,
    *,
    mates: Optional[Iterable[SequenceRecord]] = None,
    log: Optional[TextIO] = None,
) -> int:
    """
    Stream records (and, in paired mode, their mates in lock step) and write
    those whose read ID is in the verdict table, or is not when inverted.
    Returns the number of records written; a pair counts once.
    """
    if options.paired and mates is None:
        raise ConfigurationError("paired mode requires a mate record stream")
    fasta_output = options.effective_fasta_output
    mate_iter = iter(mates) if options.paired else None
    # with invert the number of wanted reads is unknown up front
    stop_at = None if options.invert else table.total_matched

    written = 0
    for rec in reads:
        mate = None
        if mate_iter is not None:
            mate = next(mate_iter, None)
            if mate is None:
                if log is not None:
                    print(f"[warn] mate file ended before read {rec.read_id!r}; stopping", file=log)
                break

        if (rec.read_id in table) == options.invert:
            continue

        _write(out, rec, rec.read_id, fasta_output)
        if mate is not None:
            _write(out, mate, rec.read_id, fasta_output)
        written += 1

        if log is not None and written % options.progress_every == 0:
            log.write(f"\r[progress] {written} reads written")
            log.flush()
        if stop_at is not None and written >= stop_at:
            break

    if log is not None and written >= options.progress_every:
        log.write("\n")
    return written


def extract(
    taxa: AbstractSet[str],
    report_path: str,
    reads_path: str,
    out: TextIO,
    options: FilterOptions,
    *,
    seeds: Optional[AbstractSet[str]] = None,
    log: Optional[TextIO] = None,
) -> int:
    """
    Two passes: classification report -> VerdictTable, then the read file(s)
    -> selected records on `out`. Returns the number of records written.
    The summary lists `seeds` (default: all of `taxa`) plus any taxon that matched.
    """
    log = sys.stderr if log is None else log
    options.validate(reads_path)
    paths = mate_paths(reads_path, options.mate_placeholder) if options.paired else (reads_path,)

    with reading(report_path) as fh:
        table = build_verdicts(fmt_kraken.decode(fh), taxa)
    log_summary(table, taxa if seeds is None else seeds, log)

    if table.total_matched == 0 and not options.invert:
        return 0

    with ExitStack() as stack:
        handles = [stack.enter_context(reading(p)) for p in paths]
        streams = [options.records(h) for h in handles]
        written = filter_reads(
            table,
            streams[0],
            out,
            options,
            mates=streams[1] if options.paired else None,
            log=log,
        )
    print(f"[summary] {written} reads written", file=log)
    return written
