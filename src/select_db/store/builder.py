from __future__ import annotations

from logging import Logger, getLogger
from pathlib import Path
import time
from typing import TYPE_CHECKING

import polars as pl
import pyarrow as pa

from select_db._log import log_elapsed
from select_db._utils import elapsed_str, human_size, utc_now
from select_db.errors import BuildIncompleteError
from select_db.inspector import check_source
from select_db.lowlevel.diskops import write_parquet_atomic
from select_db.reader import read_header, read_table
from select_db.schema import Schema, check_columns
from select_db.store._meta import StoreMeta, meta_key

if TYPE_CHECKING:
    from select_db.store import Store


log = getLogger(__name__)


class StoreBuilder:
    '''
    One-shot, all-or-nothing transform of a source file into a store.

    - Parse the whole source with the reader rules (no projection, no row
      limit, every record arity checked).
    - Optionally sort (stable) by the store's `index_on` columns, clustering
      equal keys into few row groups so their min/max statistics let
      queries skip the rest.
    - Write to a temporal file next to the store and rename it over the
      target.

    A failure at any step leaves the previous store state (absent or an older
    build) untouched.

    '''

    def __init__(self, store: 'Store', *, log: Logger = log):
        self.log = log
        self._store = store
        self._config = store.config

    def _write_args(self) -> dict:
        compression = self._config.compression
        return {
            'compression': 'none' if compression == 'uncompressed' else compression,
            'compression_level': self._config.compression_level,
            'row_group_size': self._config.row_group_size,
            'write_statistics': True,
        }

    def load(self, source: Path) -> pl.DataFrame:
        header = read_header(source, config=self._config)
        index_on = check_columns(self._store.index_on, header)

        frame = read_table(source, config=self._config)
        if index_on:
            frame = frame.sort(list(index_on), maintain_order=True)

        return frame

    def build(self, source: str | Path) -> StoreMeta:
        source = check_source(source)
        store = self._store
        stat = source.stat()

        self.log.info(
            f'building store {store.name} from {source} '
            f'({human_size(stat.st_size)})...'
        )
        start = time.perf_counter_ns()

        # parse errors propagate as is, nothing has touched disk yet
        with log_elapsed(self.log, f'parsed {source.name}'):
            frame = self.load(source)

        meta = StoreMeta(
            name=store.name,
            source=str(source),
            source_size=stat.st_size,
            source_mtime_ns=stat.st_mtime_ns,
            row_count=frame.height,
            schema=Schema.from_polars(frame.schema).encode(),
            index_on=list(store.index_on),
            built_at=utc_now(),
        )

        try:
            with log_elapsed(self.log, f'wrote {store.local_path.name}'):
                write_parquet_atomic(
                    frame,
                    store.local_path,
                    metadata={meta_key: meta.to_json().encode()},
                    **self._write_args(),
                )

        except (OSError, pa.ArrowException) as e:
            raise BuildIncompleteError(
                f'Writing store {store.name} to {store.local_path} failed, '
                'previous store state preserved'
            ) from e

        self.log.info(
            f'store {store.name} built, '
            f'took {elapsed_str(time.perf_counter_ns() - start)}, '
            f'row count: {meta.row_count:,}, size: {store.disk_size:,} bytes'
        )
        return meta
