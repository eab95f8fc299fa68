from __future__ import annotations

from typing import Iterable

import msgspec
import polars as pl

from select_db.dtypes import DTypeTag, InferredType, tag_dtype_map, tag_for
from select_db.errors import UnknownColumnError
from select_db.structs import FrozenStruct


class ColumnMeta(FrozenStruct, frozen=True):
    name: str
    type: DTypeTag


class Column(msgspec.Struct, frozen=True):
    name: str
    type: InferredType

    @staticmethod
    def from_like(c: ColumnLike) -> Column:
        match c:
            case tuple():
                return Column(c[0], c[1])

            case dict() | ColumnMeta():
                if isinstance(c, dict):
                    c = ColumnMeta.convert(c)

                return Column(c.name, tag_dtype_map[c.type])

        return c

    def encode(self) -> ColumnMeta:
        return ColumnMeta(name=self.name, type=tag_for(self.type))


ColumnLike = tuple[str, InferredType] | dict | ColumnMeta | Column


class SchemaMeta(FrozenStruct, frozen=True):
    columns: list[ColumnMeta]


class Schema:
    '''
    Ordered column names & inferred types of a source file or store.

    '''
    def __init__(self, columns: Iterable[ColumnLike]):
        self._columns: tuple[Column, ...] = tuple(
            (Column.from_like(c) for c in columns)
        )

    @staticmethod
    def from_like(s: SchemaLike) -> Schema:
        match s:
            case Schema():
                return s

            case dict() | SchemaMeta():
                if isinstance(s, dict):
                    s = SchemaMeta.convert(s)

                return Schema(s.columns)

        return Schema(s)

    @staticmethod
    def from_polars(schema: pl.Schema | dict) -> Schema:
        return Schema(
            (name, tag_dtype_map[tag_for(dtype)])
            for name, dtype in schema.items()
        )

    def __len__(self) -> int:
        return len(self._columns)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Schema):
            return NotImplemented

        return self._columns == other._columns

    def __hash__(self) -> int:
        return hash(self._columns)

    def __repr__(self) -> str:
        return f'Schema({", ".join(f"{c.name}: {c.type}" for c in self._columns)})'

    @property
    def columns(self) -> tuple[Column, ...]:
        return self._columns

    def as_polars(self) -> pl.Schema:
        return pl.Schema((col.name, col.type) for col in self._columns)

    def pretty_str(self) -> str:
        '''Return a human-readable representation of the schema.'''
        lines = ['Schema:']
        for col in self._columns:
            lines.append(f'  - {col.name}: {col.type}')

        return '\n'.join(lines)

    def encode(self) -> SchemaMeta:
        return SchemaMeta(columns=[col.encode() for col in self._columns])


SchemaLike = Iterable[ColumnLike] | dict | SchemaMeta | Schema


def check_columns(
    requested: Iterable[str],
    available: Iterable[str],
) -> tuple[str, ...]:
    '''
    Validate a column set against available names, returning it with
    duplicates collapsed (first occurrence wins) and order preserved.

    '''
    available = tuple(available)
    known = set(available)

    cols = tuple(dict.fromkeys(requested))
    missing = tuple(c for c in cols if c not in known)
    if missing:
        raise UnknownColumnError(missing, available)

    return cols
