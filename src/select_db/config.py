from __future__ import annotations

from pathlib import Path
from typing import Literal

from select_db._utils import get_root_datadir
from select_db.structs import FrozenStruct


ParquetCompressions = Literal[
    'uncompressed', 'snappy', 'gzip', 'brotli', 'lz4', 'zstd'
]


class AccessConfig(FrozenStruct, frozen=True):
    '''
    Options shared by the inspector, reader and store. Passed explicitly to
    every call, nothing here is process global.

    '''
    # where stores live, None means `get_root_datadir()`
    datadir: Path | None = None

    # source file dialect
    separator: str = ','
    quote_char: str | None = '"'
    # any codec python knows, non utf8 sources get transcoded while parsing
    encoding: str = 'utf8'

    # default amount of raw lines the inspector samples
    sample_lines: int = 5

    # store parquet settings
    compression: ParquetCompressions = 'zstd'
    compression_level: int | None = None
    row_group_size: int = 100_000

    def __post_init__(self) -> None:
        if len(self.separator) != 1:
            raise ValueError(f'separator must be a single char, got {self.separator!r}')

        if self.row_group_size <= 0:
            raise ValueError('row_group_size needs to be > 0')

        if self.sample_lines < 0:
            raise ValueError('sample_lines needs to be >= 0')

    @property
    def root_datadir(self) -> Path:
        return (self.datadir or get_root_datadir()).resolve()

    @staticmethod
    def from_env(**kwargs) -> AccessConfig:
        '''
        Config with `datadir` pinned from `SELECT_DB_DATADIR` (or default).

        '''
        kwargs.setdefault('datadir', get_root_datadir())
        return AccessConfig(**kwargs)


default_config = AccessConfig()
