import os
import sys
from pathlib import Path

import pytest

os.environ.setdefault("MPLBACKEND", "Agg")


def _add_repo_root_to_path() -> None:
    repo_root = Path(__file__).resolve().parent.parent
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))


_add_repo_root_to_path()

from sample_data import FSTS_DUMP, SOLUTION, TERMINALS  # noqa: E402


@pytest.fixture
def run_dir(tmp_path):
    """A results directory holding terminals, fsts, dump and solution files"""
    (tmp_path / "terminals.txt").write_text(TERMINALS)
    (tmp_path / "fsts.txt").write_text("binary fst data\n")
    (tmp_path / "fsts_dump.txt").write_text(FSTS_DUMP)
    (tmp_path / "solution.txt").write_text(SOLUTION, encoding="utf-8")
    return tmp_path
