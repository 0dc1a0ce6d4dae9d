# taxreads/formats/kraken.py
from __future__ import annotations

import io
import os
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, TextIO, Union

from ..sequences.records import strip_pair_suffix

__all__ = ["KrakenRecord", "decode", "UNCLASSIFIED_FLAG"]

UNCLASSIFIED_FLAG = "U"

# =====================================
# Public record structure
# =====================================

@dataclass
class KrakenRecord:
    flag: str                  # "C" classified / "U" unclassified
    read_id: str               # mate suffix stripped
    taxon_id: str              # "" when the line was too short
    length: Optional[str] = None
    hits: Optional[str] = None

    @property
    def is_unclassified(self) -> bool:
        return self.flag == UNCLASSIFIED_FLAG or self.taxon_id == "0"


Source = Union[str, TextIO, Sequence[str]]   # path | text blob | file-like | sequence of lines


def _clslines(source: Source) -> Iterator[str]:
    """
    Yield lines from:
      - path (str, existing file path),
      - text blob (str containing newlines),
      - file-like (TextIO),
      - sequence[str]
    """
    if isinstance(source, str):
        if os.path.exists(source) and os.path.isfile(source):
            with open(source, "r", encoding="utf-8", errors="ignore") as f:
                yield from f
        else:
            yield from io.StringIO(source)
    else:
        yield from source


def _parse_line_to_record(ln: str) -> Optional[KrakenRecord]:
    s = ln.rstrip("\r\n")
    if not s.strip():
        return None
    parts = s.split("\t")
    # short lines are kept: an empty taxon ID never matches a taxon set
    parts += [""] * (3 - len(parts))
    return KrakenRecord(
        flag     = parts[0].strip(),
        read_id  = strip_pair_suffix(parts[1].strip()),
        taxon_id = parts[2].strip(),
        length   = parts[3] if len(parts) > 3 else None,
        hits     = parts[4] if len(parts) > 4 else None,
    )


def decode(source: Source) -> Iterator[KrakenRecord]:
    """
    Decode a Kraken-style per-read classification report:
        flag \\t read_id \\t taxon_id \\t length \\t kmer_hits
    Only the first three columns are interpreted.
    """
    for ln in _clslines(source):
        rec = _parse_line_to_record(ln)
        if rec is not None:
            yield rec
