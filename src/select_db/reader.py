'''
Projected bulk reads: parse a whole file (or the first rows of it) into a
`pl.DataFrame`, optionally restricted to a subset of columns.

Parsing is done by the arrow CSV reader, which validates the field count of
every record it tokenizes and only converts the columns that were asked
for. A limited read hands it just the header plus the first `n_rows` lines,
so nothing past the limit is ever parsed.

Records are one line each, a blank line is a record with a single empty
field and therefore malformed in any file with more than one column.

'''
from __future__ import annotations

import csv
from io import BytesIO
from itertools import islice
import logging
from pathlib import Path
from typing import Iterable, Iterator

import polars as pl
import pyarrow as pa
import pyarrow.csv as pa_csv

from select_db._log import log_elapsed
from select_db.config import AccessConfig, default_config
from select_db.dtypes import cast_inferred
from select_db.errors import (
    SchemaMismatchError,
    SelectDBError,
    SourceEncodingError,
)
from select_db.inspector import check_source
from select_db.schema import check_columns


log = logging.getLogger(__name__)


def _open_text(path: Path, config: AccessConfig):
    encoding = config.encoding
    if encoding.replace('-', '').lower() == 'utf8':
        encoding = 'utf-8-sig'

    return open(path, 'r', encoding=encoding, newline='')


def _csv_rows(f, config: AccessConfig) -> Iterator[list[str]]:
    if config.quote_char is None:
        return csv.reader(f, delimiter=config.separator, quoting=csv.QUOTE_NONE)

    return csv.reader(f, delimiter=config.separator, quotechar=config.quote_char)


def read_header(
    path: str | Path,
    *,
    config: AccessConfig = default_config,
) -> tuple[str, ...]:
    path = check_source(path)
    try:
        with _open_text(path, config) as f:
            header = next(_csv_rows(f, config), None)

    except UnicodeDecodeError as e:
        raise SourceEncodingError(path, config.encoding) from e

    if not header:
        raise SelectDBError(f'{path} has no header row')

    return tuple(header)


def locate_mismatch(
    path: str | Path,
    expected: int,
    *,
    config: AccessConfig = default_config,
) -> tuple[int, int] | None:
    '''
    Find the first data record whose field count differs from `expected`,
    return its `(line, field_count)`. Only used to report where a parse
    failed.

    '''
    path = check_source(path)
    try:
        with _open_text(path, config) as f:
            reader = _csv_rows(f, config)
            # header
            next(reader, None)
            for row in reader:
                if len(row) != expected:
                    return reader.line_num, len(row)

    except UnicodeDecodeError as e:
        raise SourceEncodingError(path, config.encoding) from e

    return None


def _prefix(path: Path, n_rows: int) -> BytesIO:
    # header line + `n_rows` records, bytes untouched
    with open(path, 'rb') as f:
        return BytesIO(b''.join(islice(f, n_rows + 1)))


def _parse(
    source: str | BytesIO,
    path: Path,
    header: tuple[str, ...],
    columns: tuple[str, ...],
    config: AccessConfig,
) -> pa.Table:
    invalid: list[pa_csv.InvalidRow] = []

    def on_invalid(row: pa_csv.InvalidRow) -> str:
        invalid.append(row)
        return 'error'

    read_opts = pa_csv.ReadOptions(encoding=config.encoding)
    parse_opts = pa_csv.ParseOptions(
        delimiter=config.separator,
        quote_char=config.quote_char or False,
        newlines_in_values=False,
        ignore_empty_lines=False,
        invalid_row_handler=on_invalid,
    )
    convert_opts = pa_csv.ConvertOptions(
        # every field starts as text, types are inferred afterwards
        column_types={name: pa.string() for name in header},
        include_columns=list(columns),
        null_values=[''],
        strings_can_be_null=True,
    )

    try:
        return pa_csv.read_csv(
            source,
            read_options=read_opts,
            parse_options=parse_opts,
            convert_options=convert_opts,
        )

    except pa.ArrowInvalid as e:
        if invalid:
            # blocks parse in parallel, the first reported row is not
            # necessarily the first in the file
            found = locate_mismatch(path, len(header), config=config)
            if found:
                line, actual = found

            else:
                line, actual = invalid[0].number or 0, invalid[0].actual_columns

            raise SchemaMismatchError(
                path,
                line=line,
                expected=len(header),
                actual=actual,
            ) from e

        if 'utf8' in str(e).lower():
            raise SourceEncodingError(path, config.encoding) from e

        raise SelectDBError(f'Failed to parse {path}: {e}') from e


def read_table(
    path: str | Path,
    *,
    columns: Iterable[str] | None = None,
    n_rows: int | None = None,
    config: AccessConfig | None = None,
) -> pl.DataFrame:
    '''
    Read `path` into memory.

    - `columns`: optional projection, returned in the requested order.
    - `n_rows`: optional limit, only the first `n_rows` data rows are parsed.

    Column types are inferred over the parsed rows (see `select_db.dtypes`).
    Unknown columns raise `UnknownColumnError` before any data is parsed, a
    parsed record with the wrong field count raises `SchemaMismatchError`
    and fails the whole read.

    '''
    config = config or default_config

    if n_rows is not None and n_rows < 0:
        raise ValueError(f'n_rows needs to be >= 0, got {n_rows}')

    path = check_source(path)
    header = read_header(path, config=config)
    cols = header if columns is None else check_columns(columns, header)

    if n_rows == 0:
        return pl.DataFrame(schema={c: pl.String for c in cols})

    source = str(path) if n_rows is None else _prefix(path, n_rows)

    with log_elapsed(log, f'read {len(cols)} cols from {path.name}'):
        table = _parse(source, path, header, cols, config)
        frame = cast_inferred(pl.from_arrow(table))

    return frame


def peek(
    path: str | Path,
    n: int = 5,
    *,
    config: AccessConfig | None = None,
) -> pl.DataFrame:
    '''
    Typed first `n` rows, handy to check dimensions & types before a full
    read.

    '''
    return read_table(path, n_rows=n, config=config)
