# taxreads/sequences/records.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, TextIO

__all__ = [
    "SequenceRecord",
    "FASTA_MARKER",
    "FASTQ_MARKER",
    "read_id_from_header",
    "strip_pair_suffix",
    "iter_fasta",
    "iter_fastq",
    "write_fasta",
    "write_fastq",
]

FASTA_MARKER = ">"
FASTQ_MARKER = "@"

_PAIR_SUFFIXES = ("/1", "/2", ".1", ".2")


@dataclass
class SequenceRecord:
    """
    One read as framed in the input stream. Lines are kept without their
    line terminators so FASTQ records can be written back verbatim.
      FASTQ: sequence_lines has exactly one line; quality_header/quality set.
      FASTA: sequence_lines holds every body line up to the next header.
    """
    read_id: str
    header: str
    sequence_lines: List[str] = field(default_factory=list)
    quality_header: Optional[str] = None
    quality: Optional[str] = None

    @property
    def is_fastq(self) -> bool:
        return self.quality is not None

    @property
    def sequence(self) -> str:
        return "".join(self.sequence_lines)


def strip_pair_suffix(read_id: str) -> str:
    for sfx in _PAIR_SUFFIXES:
        if read_id.endswith(sfx):
            return read_id[: -len(sfx)]
    return read_id


def read_id_from_header(header: str) -> str:
    """
    '@readA/1 extra' -> 'readA'. The marker (if present) is dropped, the ID is
    cut at the first whitespace, then one mate suffix is removed.
    """
    h = header.rstrip("\r\n")
    if h[:1] in (FASTA_MARKER, FASTQ_MARKER):
        h = h[1:]
    parts = h.split(None, 1)
    token = parts[0] if parts else ""
    return strip_pair_suffix(token)


def _chomp(line: str) -> str:
    return line.rstrip("\r\n")


def iter_fastq(lines: Iterable[str]) -> Iterator[SequenceRecord]:
    """
    Yield 4-line FASTQ records. While looking for a header, lines that do
    not start with '@' are skipped. A truncated trailing record is dropped.
    """
    it = iter(lines)
    for line in it:
        if not line.startswith(FASTQ_MARKER):
            continue
        header = _chomp(line)
        seq = next(it, None)
        plus = next(it, None)
        qual = next(it, None)
        if qual is None:
            return
        yield SequenceRecord(
            read_id=read_id_from_header(header),
            header=header,
            sequence_lines=[_chomp(seq)],
            quality_header=_chomp(plus),
            quality=_chomp(qual),
        )


def iter_fasta(lines: Iterable[str]) -> Iterator[SequenceRecord]:
    """Yield FASTA records; bodies may wrap over several lines."""
    header: Optional[str] = None
    body: List[str] = []
    for line in lines:
        if line.startswith(FASTA_MARKER):
            if header is not None:
                yield SequenceRecord(read_id_from_header(header), header, body)
            header = _chomp(line)
            body = []
        elif header is not None:
            ln = _chomp(line)
            if ln:
                body.append(ln)
        # stray lines before the first header are skipped
    if header is not None:
        yield SequenceRecord(read_id_from_header(header), header, body)


def write_fasta(out: TextIO, read_id: str, sequence_lines: Iterable[str]) -> None:
    out.write(f">{read_id}\n")
    for ln in sequence_lines:
        out.write(ln + "\n")


def write_fastq(out: TextIO, rec: SequenceRecord) -> None:
    out.write(f"{rec.header}\n{rec.sequence_lines[0]}\n{rec.quality_header}\n{rec.quality}\n")
