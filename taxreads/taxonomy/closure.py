# taxreads/taxonomy/closure.py
from __future__ import annotations

import re
import sys
from typing import Dict, Iterable, List, Optional, Set, TextIO, Tuple

from ..formats import taxonomy as fmt_taxonomy
from ..sequences.openers import reading

__all__ = [
    "UNCLASSIFIED",
    "build_child_map",
    "resolve",
    "load_taxon_closure",
    "parse_taxon_ids",
]

UNCLASSIFIED = "0"
_UNCLASSIFIED_ALIASES = {"u", "unclassified"}

ChildMap = Dict[str, List[str]]


def build_child_map(pairs: Iterable[Tuple[str, str]]) -> ChildMap:
    """parent -> direct children in first-seen order; self-pairs (the root) are dropped."""
    children: ChildMap = {}
    for child, parent in pairs:
        if child == parent:
            continue
        children.setdefault(parent, []).append(child)
    return children


def resolve(
    seed_ids: Iterable[str],
    child_pairs: Optional[Iterable[Tuple[str, str]]] = None,
    *,
    log: Optional[TextIO] = None,
) -> Set[str]:
    """
    Expand seed taxa to themselves plus every descendant.

    Without child_pairs the seeds are returned unchanged. The walk is an
    explicit worklist with a visited set, so cycles in the table terminate.
    """
    taxa = set(seed_ids)
    if child_pairs is None:
        return taxa

    children = build_child_map(child_pairs)
    seen: Set[str] = set(taxa)
    stack: List[str] = list(taxa)
    while stack:
        parent = stack.pop()
        for kid in children.get(parent, ()):
            if kid in seen:
                continue
            seen.add(kid)
            stack.append(kid)

    if log is not None:
        print(f"[taxonomy] {len(seen) - len(taxa)} descendant taxa found", file=log)
    return seen


def load_taxon_closure(
    seed_ids: Iterable[str],
    table_path: Optional[str] = None,
    *,
    log: Optional[TextIO] = None,
) -> Set[str]:
    """resolve() over a child/parent table file (plain or gzip); FileAccessError if unreadable."""
    log = sys.stderr if log is None else log
    if table_path is None:
        return resolve(seed_ids)
    with reading(table_path) as fh:
        return resolve(seed_ids, fmt_taxonomy.decode(fh), log=log)


def _normalise(token: str) -> str:
    t = token.strip()
    return UNCLASSIFIED if t.lower() in _UNCLASSIFIED_ALIASES else t


def parse_taxon_ids(value: str) -> Set[str]:
    """
    '9606,562' or '9606 562' -> {'9606', '562'}. '@ids.txt' reads one taxon ID
    from the first column of each line of ids.txt.
    'U' / 'unclassified' stand for the unclassified bucket.
    """
    if value.startswith("@"):
        with reading(value[1:]) as fh:
            tokens = [ln.split("\t")[0] for ln in fh]
    else:
        tokens = re.split(r"[,\s]+", value)
    return {_normalise(t) for t in tokens if t.strip()}
