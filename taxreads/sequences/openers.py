# taxreads/sequences/openers.py
from __future__ import annotations

import gzip
import io
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, TextIO, Tuple, Union

from ..errors import ConfigurationError, FileAccessError

__all__ = ["open_text", "reading", "mate_paths", "GZIP_SUFFIXES"]

GZIP_SUFFIXES = (".gz", ".bgz")
BUFFER_SIZE = 1024 * 1024  # 1MiB buffered reads


def open_text(path: Union[str, Path]) -> TextIO:
    """
    Open a text input for line iteration, decompressing gzip by suffix.
    '-' maps to stdin. Any OSError on open becomes FileAccessError.
    """
    p = str(path)
    if p == "-":
        return sys.stdin
    try:
        if p.endswith(GZIP_SUFFIXES):
            raw = io.BufferedReader(gzip.open(p, "rb"), buffer_size=BUFFER_SIZE)
            return io.TextIOWrapper(raw, encoding="utf-8", errors="replace")
        return open(p, "rt", encoding="utf-8", errors="replace", buffering=BUFFER_SIZE)
    except OSError as exc:
        raise FileAccessError(f"cannot open {p!r}: {exc.strerror or exc}") from exc


@contextmanager
def reading(path: Union[str, Path]) -> Iterator[TextIO]:
    """open_text() as a context manager; stdin is left open on exit."""
    fh = open_text(path)
    try:
        yield fh
    finally:
        if fh is not sys.stdin:
            fh.close()


def mate_paths(path: str, placeholder: str = "#") -> Tuple[str, str]:
    """reads_#.fq -> (reads_1.fq, reads_2.fq)"""
    if not placeholder or placeholder not in path:
        raise ConfigurationError(
            f"paired mode needs the mate placeholder {placeholder!r} in the read path: {path!r}"
        )
    return path.replace(placeholder, "1"), path.replace(placeholder, "2")
