'''
A store is a single parquet file holding a full, typed copy of a source
file's rows, `<datadir>/<name>.parquet`. Build metadata lives in the parquet
footer under the `select_db` key, so the store is one file and gets replaced
atomically as a whole.

States:
    - absent: no file at `local_path`, queries raise `StoreNotBuiltError`.
    - built: a complete file is present, queries are answered by a lazy
      parquet scan with the predicate pushed down.

Only `StoreBuilder` moves a store into (or re-enters) the built state.

'''
from __future__ import annotations

import logging
from pathlib import Path
import time
from typing import Iterable, Literal

import polars as pl

from select_db._utils import elapsed_str, human_size, path_size
from select_db.config import AccessConfig, default_config
from select_db.errors import StoreNotBuiltError
from select_db.lowlevel.diskops import parquet_kv_metadata, parquet_row_len
from select_db.predicate import Predicate
from select_db.schema import Schema
from select_db.store._meta import StoreMeta as StoreMeta, meta_key
from select_db.store.builder import StoreBuilder


log = logging.getLogger(__name__)


StoreState = Literal['absent', 'built']


def store_name_for(source: str | Path) -> str:
    '''
    Deterministic store name for a source file: its file name minus the last
    suffix, `bunmd_v2.csv` -> `bunmd_v2`.

    '''
    return Path(source).stem


def list_stores(datadir: str | Path) -> tuple[str, ...]:
    '''
    Names of every built store under `datadir`.

    '''
    datadir = Path(datadir)
    if not datadir.is_dir():
        return tuple()

    return tuple(sorted(
        p.stem for p in datadir.glob('*.parquet')
        if p.is_file()
    ))


class Store:
    def __init__(
        self,
        name: str,
        *,
        datadir: str | Path | None = None,
        index_on: Iterable[str] = (),
        config: AccessConfig | None = None,
    ) -> None:
        self.name = name
        self.config = config or default_config
        self.index_on: tuple[str, ...] = tuple(index_on)

        self._datadir = (
            Path(datadir).resolve() if datadir else self.config.root_datadir
        )

        # used when calling .scan with use_cache=True
        self._frame: pl.LazyFrame | None = None

    @staticmethod
    def for_source(source: str | Path, **kwargs) -> Store:
        return Store(store_name_for(source), **kwargs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Store):
            return NotImplemented

        return self.name == other.name and self.local_path == other.local_path

    def __hash__(self) -> int:
        return hash((self.name, self.local_path))

    def __repr__(self) -> str:
        return f'Store({self.name!r}, {self.state}, {self.local_path})'

    @property
    def datadir(self) -> Path:
        return self._datadir

    @property
    def local_path(self) -> Path:
        return self._datadir / f'{self.name}.parquet'

    @property
    def exists(self) -> bool:
        return self.local_path.is_file()

    @property
    def state(self) -> StoreState:
        return 'built' if self.exists else 'absent'

    def _ensure_built(self) -> Path:
        if not self.exists:
            raise StoreNotBuiltError(self.name, self.local_path)

        return self.local_path

    def meta(self) -> StoreMeta:
        raw = parquet_kv_metadata(self._ensure_built(), meta_key)
        if raw is None:
            raise StoreNotBuiltError(self.name, self.local_path)

        return StoreMeta.from_json(raw)

    @property
    def schema(self) -> Schema:
        return Schema.from_polars(pl.read_parquet_schema(self._ensure_built()))

    @property
    def row_count(self) -> int:
        return parquet_row_len(self._ensure_built())

    @property
    def disk_size(self) -> int:
        return path_size(self._ensure_built())

    def is_stale(self, source: str | Path) -> bool:
        '''
        True if absent, or if `source` changed size or mtime since the build.

        '''
        if not self.exists:
            return True

        stat = Path(source).stat()
        meta = self.meta()
        return (
            meta.source_size != stat.st_size
            or meta.source_mtime_ns != stat.st_mtime_ns
        )

    def pretty_str(self) -> str:
        '''Return a human-readable representation of the store.'''
        lines = [
            f'Store: {self.name}',
            f'Path: {self.local_path}',
            f'State: {self.state}',
        ]
        if self.exists:
            meta = self.meta()
            lines += [
                f'Source: {meta.source}',
                f'Rows: {meta.row_count:,}',
                f'Size: {human_size(self.disk_size)}',
                f'Index: {", ".join(meta.index_on) or "none"}',
                f'Built at: {meta.built_at.isoformat()}',
                '',
                self.schema.pretty_str(),
            ]

        return '\n'.join(lines)

    def builder(self) -> StoreBuilder:
        return StoreBuilder(self)

    def build(self, source: str | Path) -> StoreMeta:
        '''
        Full one-shot (re)build from `source`, see `StoreBuilder.build`.

        '''
        meta = self.builder().build(source)
        self._frame = None
        return meta

    def ensure_built(self, source: str | Path, *, regen: bool = False) -> StoreMeta:
        '''
        Build only if absent, stale relative to `source`, or `regen` is set.

        '''
        if regen or self.is_stale(source):
            return self.build(source)

        log.info(f'store {self.name} up to date at {self.local_path}')
        return self.meta()

    def scan(self, *, use_cache: bool = True) -> pl.LazyFrame:
        if use_cache and self._frame is not None and self.exists:
            return self._frame

        frame = pl.scan_parquet(self._ensure_built())

        if use_cache:
            self._frame = frame

        return frame

    def query(self, predicate: Predicate) -> pl.DataFrame:
        '''
        Rows satisfying `predicate`, every column, store schema order.

        The filter runs inside the parquet scan, row groups whose statistics
        rule out every allowed value are never decoded.

        '''
        frame = self.scan()
        dtype = predicate.check(self.schema.as_polars())

        start = time.perf_counter_ns()
        result = frame.filter(predicate.expr(dtype)).collect()

        log.info(
            f'query {predicate} on {self.name} matched {result.height:,} rows, '
            f'took {elapsed_str(time.perf_counter_ns() - start)}'
        )
        return result

