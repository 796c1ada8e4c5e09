"""Shared fixtures: small occurrence tables, weights files and a fake Frescalo."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Any

import pytest

OCCURRENCES_CSV = """\
taxon,site,start_date,end_date
Vanessa atalanta,SU12,01/01/1955,01/01/1955
Vanessa atalanta,SU12,03/05/1956,03/05/1956
Vanessa atalanta,SU13,01/06/1958,01/01/1961
Vanessa atalanta,SU13,01/01/1970,01/01/1975
Aglais io,SU12,12/07/2005,12/07/2005
Aglais io,SU14,,31/12/1990
Aglais io,SU13,15/08/2010,15/08/2010
Aglais io,SU99,15/08/2010,15/08/2010
"""

WEIGHTS_TXT = """\
SU12 SU12 1.0000
SU12 SU13 0.8123
SU13 SU13 1.0000
SU13 SU12 0.8123
SU14 SU14 1.0000
"""

EPOCHS = [(1600, 1959), (1960, 1999), (2000, 2023)]

# Species codes follow alphabetical order: 1 = Aglais io, 2 = Vanessa atalanta
TREND_CSV = """\
Species,Time,TFactor,St_Dev,X,Xspt,Xest,N>0.00,N>0.98
      1,   1,  0.000,  0.000,   0,   0,   0.0,   2,   0
      1,   3,  1.250,  0.310,   2,   2,   1.9,   2,   1
      2,   1,  1.100,  0.200,   1,   1,   1.0,   2,   1
      2,   2,  0.700,  0.150,   1,   1,   0.9,   2,   0
"""

STATS_CSV = """\
Location,Loc_no,No_spp,Phi_in,Alpha,Wgt_n2,Phi_out,Spnum_in,Spnum_out,Iter
SU12,1,2,0.701,0.27,1.81,0.74,2.1,2.3,4
SU13,2,2,0.699,0.27,1.81,0.74,2.0,2.2,4
"""


@pytest.fixture
def occurrences_csv(tmp_path: Path) -> Path:
    path = tmp_path / "records.csv"
    path.write_text(OCCURRENCES_CSV)
    return path


@pytest.fixture
def weights_file(tmp_path: Path) -> Path:
    path = tmp_path / "weights.txt"
    path.write_text(WEIGHTS_TXT)
    return path


@pytest.fixture
def epochs_csv(tmp_path: Path) -> Path:
    path = tmp_path / "epochs.csv"
    path.write_text("start,end\n" + "".join(f"{s},{e}\n" for s, e in EPOCHS))
    return path


@pytest.fixture
def frescalo_exe(tmp_path: Path) -> Path:
    """A file standing in for the Frescalo binary; subprocess.run is patched."""
    path = tmp_path / "bin" / "frescalo"
    path.parent.mkdir()
    path.write_text("")
    path.chmod(0o755)
    return path


def fake_frescalo_run(command: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
    """Mimic a successful Frescalo run using the paths in the stdin control script."""
    lines = kwargs["input"].splitlines()
    log_path, freq_path, trend_path, stats_path = (Path(p) for p in (lines[0], *lines[4:7]))
    log_path.write_text("Frescalo finished\n")
    freq_path.write_text("Location,Species,Pres,Freq,Freq1,SD_Frq1,Rank,Rank1\n")
    trend_path.write_text(TREND_CSV)
    stats_path.write_text(STATS_CSV)
    return subprocess.CompletedProcess(command, 0, stdout="ok\n", stderr="")


@pytest.fixture
def fake_run() -> Any:
    return fake_frescalo_run
