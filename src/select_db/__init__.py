'''
Glossary:
    - Source: A large, static, delimited text file with a header row.
    - Projection: Restricting a read to a named subset of columns.
    - Predicate: Restriction of rows to those whose column value lies in a
      finite allowed set.
    - Store: A persistent parquet copy of a source, built once, queried many
      times without re-scanning the source.
    - Strategy: One way of getting the rows we want (full read, projected
      read + filter, store query...), timed by the benchmark harness.

'''

from .config import AccessConfig as AccessConfig

from .errors import (
    SelectDBError as SelectDBError,
    SourceNotFoundError as SourceNotFoundError,
    SchemaMismatchError as SchemaMismatchError,
    UnknownColumnError as UnknownColumnError,
    StoreNotBuiltError as StoreNotBuiltError,
    BuildIncompleteError as BuildIncompleteError,
    SourceEncodingError as SourceEncodingError,
)

from .inspector import FileInfo as FileInfo, inspect_file as inspect_file

from .predicate import Predicate as Predicate

from .reader import read_table as read_table

from .schema import Column as Column, Schema as Schema

from .store import Store as Store, StoreMeta as StoreMeta

from .bench import BenchmarkResult as BenchmarkResult, benchmark as benchmark
