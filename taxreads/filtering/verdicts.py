# taxreads/filtering/verdicts.py
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import AbstractSet, Dict, Iterable, TextIO

from ..formats.kraken import KrakenRecord
from ..taxonomy.closure import UNCLASSIFIED

__all__ = ["VerdictTable", "build_verdicts", "log_summary"]


@dataclass
class VerdictTable:
    """
    read_id -> matched taxon, plus per-taxon match counts.
    Written once by build_verdicts(), read-only afterwards.
    """
    verdicts: Dict[str, str] = field(default_factory=dict)
    counts: Counter = field(default_factory=Counter)

    def record(self, read_id: str, taxon_id: str) -> None:
        previous = self.verdicts.get(read_id)
        if previous is not None:
            # last write wins; keep counts in step with the map
            self.counts[previous] -= 1
        self.verdicts[read_id] = taxon_id
        self.counts[taxon_id] += 1

    def __contains__(self, read_id: str) -> bool:
        return read_id in self.verdicts

    def __len__(self) -> int:
        return len(self.verdicts)

    @property
    def total_matched(self) -> int:
        return sum(self.counts.values())


def build_verdicts(records: Iterable[KrakenRecord], taxa: AbstractSet[str]) -> VerdictTable:
    table = VerdictTable()
    want_unclassified = UNCLASSIFIED in taxa
    for rec in records:
        if rec.taxon_id in taxa:
            table.record(rec.read_id, rec.taxon_id)
        elif want_unclassified and rec.is_unclassified:
            table.record(rec.read_id, UNCLASSIFIED)
    return table


def _taxon_sort_key(taxon_id: str):
    return (0, int(taxon_id), "") if taxon_id.isdigit() else (1, 0, taxon_id)


def log_summary(table: VerdictTable, requested: AbstractSet[str], log: TextIO) -> None:
    """
    One line per requested taxon (zeros included) and per other taxon with
    matches, then the total. Descendants without matches are not listed.
    """
    shown = set(requested) | {t for t, n in table.counts.items() if n > 0}
    for taxon_id in sorted(shown, key=_taxon_sort_key):
        print(f"[summary] taxon {taxon_id}\t{table.counts.get(taxon_id, 0)} reads", file=log)
    print(f"[summary] total\t{table.total_matched} reads matched", file=log)
