from contextlib import contextmanager
import logging
import os
from pathlib import Path
from typing import Generator

import polars as pl
import pyarrow as pa
import pyarrow.parquet as pq


log = logging.getLogger(__name__)


def parquet_row_len(path: str | Path) -> int:
    return pq.ParquetFile(path).metadata.num_rows


def parquet_kv_metadata(path: str | Path, key: str) -> bytes | None:
    '''
    Read a single key from a parquet file's key/value metadata, only the
    footer is touched.

    '''
    meta = pq.read_schema(path).metadata or {}
    return meta.get(key.encode())


def tmp_path_for(location: Path) -> Path:
    return location.with_name(f'.{location.name}.{os.getpid()}.tmp')


@contextmanager
def atomic_target(location: Path) -> Generator[Path, None, None]:
    '''
    In order to atomically overwrite an on disk frame, yield a temporal
    location adjacent to target for the caller to write to, then replace the
    target with it. If the body raises the temporal file is removed and the
    target is left untouched.

    '''
    location.parent.mkdir(parents=True, exist_ok=True)
    tmp = tmp_path_for(location)
    try:
        yield tmp
        tmp.replace(location)

    finally:
        tmp.unlink(missing_ok=True)


def write_parquet_atomic(
    frame: pl.DataFrame,
    location: Path,
    *,
    metadata: dict[str, bytes] | None = None,
    **kwargs
) -> None:
    '''
    Write `frame` as parquet over `location` atomically, optionally embedding
    key/value metadata in the file footer.

    '''
    table: pa.Table = frame.to_arrow(compat_level=pl.CompatLevel.oldest())
    if metadata:
        table = table.replace_schema_metadata(
            {**(table.schema.metadata or {}), **metadata}
        )

    with atomic_target(location) as tmp:
        pq.write_table(table, tmp, **kwargs)
        log.debug(f'wrote {frame.height:,} rows to {tmp}, replacing {location}')
