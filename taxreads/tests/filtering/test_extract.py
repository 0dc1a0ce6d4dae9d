import io
import pytest
from taxreads.errors import ConfigurationError, FileAccessError
from taxreads.filtering.extract import FilterOptions, extract, filter_reads
from taxreads.filtering.verdicts import VerdictTable
from taxreads.sequences.records import iter_fasta, iter_fastq


def _fastq(ids, tag=""):
    return "".join(f"@{i}{tag} d\nACGT\n+\nII{i[-1]}I\n" for i in ids)

def _table(ids, taxon="9606"):
    t = VerdictTable()
    for i in ids:
        t.record(i, taxon)
    return t

def _ids(text, marker):
    return [ln[1:].split()[0] for ln in text.splitlines() if ln.startswith(marker)]


def test_readA_readB_scenario(write_text, two_read_report, two_read_fastq):
    rep = write_text("k.out", two_read_report)
    fq = write_text("r.fq", two_read_fastq)
    out, log = io.StringIO(), io.StringIO()
    n = extract({"9606"}, str(rep), str(fq), out, FilterOptions(), log=log)
    assert n == 1
    assert out.getvalue() == "@readA/1 sample=1\nACGTACGT\n+\nIIIIIIII\n"
    assert "[summary] taxon 9606\t1 reads" in log.getvalue()

def test_fastq_roundtrip_all_match():
    ids = [f"r{i}" for i in range(7)]
    text = _fastq(ids)
    out = io.StringIO()
    n = filter_reads(_table(ids), iter_fastq(io.StringIO(text)), out, FilterOptions())
    assert n == 7
    assert out.getvalue() == text

def test_invert_partitions_reads():
    ids = [f"r{i}" for i in range(10)]
    table = _table(ids[::3])
    got = {}
    for inv in (False, True):
        out = io.StringIO()
        filter_reads(table, iter_fastq(io.StringIO(_fastq(ids))), out, FilterOptions(invert=inv))
        got[inv] = set(_ids(out.getvalue(), "@"))
    assert got[False] | got[True] == set(ids)
    assert not got[False] & got[True]

def test_early_termination_leaves_input_unread():
    ids = ["r1", "r2", "r3", "r4"]
    consumed = []
    def records():
        for rec in iter_fastq(io.StringIO(_fastq(ids))):
            consumed.append(rec.read_id)
            yield rec
    out = io.StringIO()
    n = filter_reads(_table(["r1", "r2"]), records(), out, FilterOptions())
    assert n == 2
    assert consumed == ["r1", "r2"]

def test_fastq_to_fasta_output():
    out = io.StringIO()
    filter_reads(_table(["r1"]), iter_fastq(io.StringIO(_fastq(["r1", "r2"], "/1"))), out,
                 FilterOptions(fasta_output=True))
    assert out.getvalue() == ">r1\nACGT\n"

def test_fasta_input_keeps_wrapped_body():
    text = ">s1 x\nAC\nGT\n>s2\nTT\n>s3\nGG\nCC\n"
    out = io.StringIO()
    opts = FilterOptions(fasta_input=True)
    n = filter_reads(_table(["s1", "s3"]), iter_fasta(io.StringIO(text)), out, opts)
    assert n == 2
    assert out.getvalue() == ">s1\nAC\nGT\n>s3\nGG\nCC\n"

def test_paired_lockstep_fastq():
    ids = ["p1", "p2", "p3"]
    m1, m2 = _fastq(ids, "/1"), _fastq(ids, "/2")
    out = io.StringIO()
    opts = FilterOptions(paired=True)
    n = filter_reads(_table(["p2", "p3"]), iter_fastq(io.StringIO(m1)), out, opts,
                     mates=iter_fastq(io.StringIO(m2)))
    assert n == 2
    headers = [ln for ln in out.getvalue().splitlines() if ln.startswith("@")]
    assert headers == ["@p2/1 d", "@p2/2 d", "@p3/1 d", "@p3/2 d"]
    assert sum(h.split()[0].endswith("/1") for h in headers) == sum(h.split()[0].endswith("/2") for h in headers)

def test_paired_fasta_output():
    out = io.StringIO()
    m1 = "@p1/1\nAAAA\n+\nIIII\n"
    m2 = "@p1/2\nCCCC\n+\nIIII\n"
    filter_reads(_table(["p1"]), iter_fastq(io.StringIO(m1)), out,
                 FilterOptions(paired=True, fasta_output=True), mates=iter_fastq(io.StringIO(m2)))
    assert out.getvalue() == ">p1\nAAAA\n>p1\nCCCC\n"

def test_short_mate_stream_stops_with_warning():
    out, log = io.StringIO(), io.StringIO()
    n = filter_reads(_table(["p1", "p2"]), iter_fastq(io.StringIO(_fastq(["p1", "p2"]))), out,
                     FilterOptions(paired=True), mates=iter_fastq(io.StringIO(_fastq(["p1"]))), log=log)
    assert n == 1
    assert "[warn]" in log.getvalue()

def test_progress_line_every_100():
    ids = [f"r{i}" for i in range(250)]
    log = io.StringIO()
    filter_reads(_table(ids), iter_fastq(io.StringIO(_fastq(ids))), io.StringIO(), FilterOptions(), log=log)
    assert log.getvalue() == "\r[progress] 100 reads written\r[progress] 200 reads written\n"

def test_zero_matches_writes_nothing(write_text, two_read_fastq):
    rep = write_text("k.out", "C\treadA\t1\t150\t1:116\n\n")
    fq = write_text("r.fq", two_read_fastq)
    out, log = io.StringIO(), io.StringIO()
    assert extract({"9606", "562"}, str(rep), str(fq), out, FilterOptions(), log=log) == 0
    assert out.getvalue() == ""
    assert "[summary] taxon 562\t0 reads" in log.getvalue()
    assert "[summary] total\t0 reads matched" in log.getvalue()

def test_paired_extract_from_placeholder_paths(write_text):
    write_text("s_1.fq", _fastq(["a", "b"], "/1"))
    write_text("s_2.fq", _fastq(["a", "b"], "/2"))
    rep = write_text("k.out", "C\ta\t5\nC\tb\t9\n")
    out = io.StringIO()
    n = extract({"9"}, str(rep), str(rep.parent / "s_#.fq"), out, FilterOptions(paired=True), log=io.StringIO())
    assert n == 1
    assert _ids(out.getvalue(), "@") == ["b/1", "b/2"]

def test_fasta_with_paired_is_rejected(write_text):
    rep = write_text("k.out", "C\ta\t5\n")
    with pytest.raises(ConfigurationError):
        extract({"5"}, str(rep), "x_#.fa", io.StringIO(), FilterOptions(fasta_input=True, paired=True))

def test_missing_report(tmp_path):
    with pytest.raises(FileAccessError):
        extract({"5"}, str(tmp_path / "none"), "r.fq", io.StringIO(), FilterOptions(), log=io.StringIO())

def test_effective_output_format():
    assert FilterOptions(fasta_input=True).effective_fasta_output
    assert not FilterOptions().effective_fasta_output

def test_summary_with_taxonomy_closure_skips_unmatched_descendants(write_text):
    from taxreads.taxonomy.closure import resolve
    pairs = [(str(c), "1") for c in range(2, 5002)]
    taxa = resolve({"1"}, pairs)
    assert len(taxa) == 5001
    rep = write_text("k.out", "C\treadA\t77\t150\t77:116\n")
    fq = write_text("r.fq", _fastq(["readA", "readB"]))
    out, log = io.StringIO(), io.StringIO()
    n = extract(taxa, str(rep), str(fq), out, FilterOptions(), seeds={"1"}, log=log)
    assert n == 1
    summary = [ln for ln in log.getvalue().splitlines() if ln.startswith("[summary] taxon")]
    assert summary == ["[summary] taxon 1\t0 reads", "[summary] taxon 77\t1 reads"]

def test_validate_checks_mate_placeholder():
    FilterOptions(paired=True).validate("s_#.fq")
    FilterOptions().validate("s.fq")
    with pytest.raises(ConfigurationError):
        FilterOptions(paired=True).validate("s.fq")

def test_missing_placeholder_rejected_before_report_is_read(tmp_path):
    with pytest.raises(ConfigurationError):
        extract({"5"}, str(tmp_path / "none"), "s.fq", io.StringIO(),
                FilterOptions(paired=True), log=io.StringIO())

def test_extract_log_defaults_to_current_stderr(write_text, two_read_report, two_read_fastq, capsys):
    rep = write_text("k.out", two_read_report)
    fq = write_text("r.fq", two_read_fastq)
    extract({"9606"}, str(rep), str(fq), io.StringIO(), FilterOptions())
    assert "[summary] 1 reads written" in capsys.readouterr().err
