from pathlib import Path
import pytest

# Fixture writing small input files under tmp_path, e.g.
#
#   def test_something(write_text):
#       fq = write_text("reads.fq", "@r1\nACGT\n+\nIIII\n")
#
@pytest.fixture
def write_text(tmp_path):
    def _write(name: str, text: str) -> Path:
        p = tmp_path / name
        p.write_text(text)
        return p
    return _write

@pytest.fixture
def two_read_fastq() -> str:
    return (
        "@readA/1 sample=1\nACGTACGT\n+\nIIIIIIII\n"
        "@readB/1\nTTTTGGGG\n+readB\nJJJJJJJJ\n"
    )

@pytest.fixture
def two_read_report() -> str:
    return "C\treadA\t9606\t150\t9606:116\nC\treadB\t562\t150\t562:116\n"
