'''
Time each access strategy under identical inputs and compare.

The harness adds timing and nothing else: every wrapped operation runs
exactly once, failures propagate as the very same exception with a
`strategy: <label>` note attached.

'''
from __future__ import annotations

import logging
from pathlib import Path
import time
from typing import Any, Callable, Iterable, Mapping, TypeVar

import polars as pl
import psutil

from select_db._utils import elapsed_str, human_size
from select_db.config import AccessConfig, default_config
from select_db.inspector import FileInfo, inspect_file
from select_db.predicate import Predicate
from select_db.reader import read_table
from select_db.store import Store, StoreMeta
from select_db.structs import FrozenStruct


log = logging.getLogger(__name__)


T = TypeVar('T')

Operation = Callable[[], Any]


class BenchmarkResult(FrozenStruct, frozen=True):
    strategy: str
    # wall seconds, monotonic clock
    elapsed: float
    rows: int
    columns: int
    # resident set size after minus before, bytes
    rss_delta: int = 0


def shape_of(value: Any) -> tuple[int, int]:
    '''
    Cardinality of whatever a strategy returned.

    '''
    match value:
        case pl.DataFrame() | StoreMeta():
            return value.shape

        case FileInfo():
            return (len(value.sample), 0)

        case Store():
            return (value.row_count, len(value.schema))

    shape = getattr(value, 'shape', None)
    if isinstance(shape, tuple) and len(shape) == 2:
        return shape

    return (0, 0)


def _rss() -> int:
    return psutil.Process().memory_info().rss


def benchmark_with_result(
    label: str,
    op: Callable[[], T],
) -> tuple[BenchmarkResult, T]:
    rss_before = _rss()
    start = time.perf_counter_ns()
    try:
        value = op()

    except Exception as e:
        e.add_note(f'strategy: {label}')
        raise

    elapsed_ns = time.perf_counter_ns() - start
    rss_delta = _rss() - rss_before

    rows, columns = shape_of(value)
    result = BenchmarkResult(
        strategy=label,
        elapsed=elapsed_ns / 1e9,
        rows=rows,
        columns=columns,
        rss_delta=rss_delta,
    )
    log.info(
        f'{label}: took {elapsed_str(elapsed_ns)}, '
        f'{rows:,} rows x {columns} cols'
    )
    return result, value


def benchmark(label: str, op: Operation) -> BenchmarkResult:
    result, _ = benchmark_with_result(label, op)
    return result


def compare(strategies: Mapping[str, Operation]) -> list[BenchmarkResult]:
    '''
    Benchmark every strategy once, in insertion order.

    '''
    return [benchmark(label, op) for label, op in strategies.items()]


def access_strategies(
    path: str | Path,
    predicate: Predicate,
    *,
    columns: Iterable[str] | None = None,
    n_rows: int | None = None,
    store: Store | None = None,
    config: AccessConfig | None = None,
) -> dict[str, Operation]:
    '''
    The canonical strategy set for one source file & predicate:

        - inspect: size, line count & a raw sample.
        - full_read: every row, every column.
        - limited_read: first `n_rows` rows (skipped if `n_rows` unset).
        - projected_read: every row, only `columns` (skipped if unset).
        - projected_filter: projected (or full) read, then `predicate` in
          memory.
        - store_build: (re)build `store` from `path`.
        - store_query: `predicate` against the built `store`.

    `store` defaults to the one derived from the source file name. Order
    matters: `store_query` comes after `store_build`.

    '''
    path = Path(path)
    config = config or default_config
    store = store or Store.for_source(path, config=config)
    cols = tuple(columns) if columns is not None else None

    def projected_filter() -> pl.DataFrame:
        read_cols = cols
        if read_cols is not None and predicate.column not in read_cols:
            read_cols = (*read_cols, predicate.column)

        return predicate.apply(read_table(path, columns=read_cols, config=config))

    strategies: dict[str, Operation] = {
        'inspect': lambda: inspect_file(path, config.sample_lines),
        'full_read': lambda: read_table(path, config=config),
    }
    if n_rows is not None:
        strategies['limited_read'] = lambda: read_table(
            path, n_rows=n_rows, config=config
        )

    if cols is not None:
        strategies['projected_read'] = lambda: read_table(
            path, columns=cols, config=config
        )

    strategies['projected_filter'] = projected_filter
    strategies['store_build'] = lambda: store.build(path)
    strategies['store_query'] = lambda: store.query(predicate)
    return strategies


def results_frame(results: Iterable[BenchmarkResult]) -> pl.DataFrame:
    return pl.DataFrame(
        [r.to_dict() for r in results],
        schema={
            'strategy': pl.String,
            'elapsed': pl.Float64,
            'rows': pl.Int64,
            'columns': pl.Int64,
            'rss_delta': pl.Int64,
        },
    )


def pretty_results(results: Iterable[BenchmarkResult]) -> str:
    '''Return a human-readable comparison table, fastest first.'''
    results = sorted(results, key=lambda r: r.elapsed)
    if not results:
        return 'No results'

    width = max(len(r.strategy) for r in results)
    fastest = results[0].elapsed or 1e-9
    lines = [
        f'{"strategy":<{width}}  {"elapsed":>12}  {"x":>8}  {"rows":>12}  {"cols":>4}  {"rss":>8}'
    ]
    for r in results:
        lines.append(
            f'{r.strategy:<{width}}  {r.elapsed:>10.4f} s  '
            f'{r.elapsed / fastest:>7.1f}x  {r.rows:>12,}  {r.columns:>4}  '
            f'{human_size(max(r.rss_delta, 0)):>8}'
        )

    return '\n'.join(lines)
