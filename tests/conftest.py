from pathlib import Path

import pytest

from select_db.config import AccessConfig
from select_db._testing import write_josh_csv, write_names_csv


@pytest.fixture
def datadir(tmp_path) -> Path:
    return tmp_path / 'db'


@pytest.fixture
def config(datadir) -> AccessConfig:
    return AccessConfig(datadir=datadir, row_group_size=1_000)


@pytest.fixture
def josh_csv(tmp_path) -> Path:
    return write_josh_csv(tmp_path / 'josh.csv')


@pytest.fixture
def names_csv(tmp_path) -> Path:
    return write_names_csv(tmp_path / 'bunmd_v2.csv', rows=5_000, seed=7)
