# taxreads/__init__.py
from .errors import TaxreadsError, ConfigurationError, FileAccessError
from .sequences.records import SequenceRecord, read_id_from_header
from .taxonomy.closure import resolve, load_taxon_closure, parse_taxon_ids, UNCLASSIFIED

# Convenience re-exports for the two filter phases
from .filtering.verdicts import VerdictTable, build_verdicts
from .filtering.extract import FilterOptions, filter_reads, extract

__version__ = "0.1.0"
