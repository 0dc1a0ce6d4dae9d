# taxreads/formats/taxonomy.py
from __future__ import annotations

from typing import Iterator, Optional, Tuple

from .kraken import Source, _clslines

__all__ = ["decode"]


def _parse_pair(ln: str) -> Optional[Tuple[str, str]]:
    s = ln.rstrip("\r\n")
    if not s.strip():
        return None
    if "|" in s:
        # nodes.dmp: child \t|\t parent \t|\t rank ...
        parts = [x.strip() for x in s.split("|")]
    else:
        parts = [x.strip() for x in s.split("\t")]
    if len(parts) < 2 or not parts[0] or not parts[1]:
        return None
    return parts[0], parts[1]


def decode(source: Source) -> Iterator[Tuple[str, str]]:
    """Yield (child, parent) taxon ID pairs from a child/parent table."""
    for ln in _clslines(source):
        pair = _parse_pair(ln)
        if pair is not None:
            yield pair
