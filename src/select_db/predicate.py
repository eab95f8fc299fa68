from __future__ import annotations

from typing import Any, Iterable

import polars as pl

from select_db.dtypes import coerce_values
from select_db.errors import UnknownColumnError
from select_db.structs import FrozenStruct


class Predicate(FrozenStruct, frozen=True):
    '''
    Restrict rows to those where `column` holds one of `values`.

    The same expression backs the in-memory filter and the store query, so
    both paths agree on which rows match.

    '''
    column: str
    values: tuple[Any, ...]

    @staticmethod
    def isin(column: str, values: Iterable[Any]) -> Predicate:
        return Predicate(column=column, values=tuple(values))

    def expr(self, dtype: pl.DataType | type[pl.DataType]) -> pl.Expr:
        '''
        Membership expression with `values` coerced to the column's `dtype`.

        '''
        allowed = coerce_values(self.values, dtype)
        if allowed.is_empty():
            return pl.lit(False)

        return pl.col(self.column).is_in(allowed.to_list())

    def check(self, schema: pl.Schema) -> pl.DataType:
        '''
        Return the column's dtype, or raise if the column is missing.

        '''
        dtype = schema.get(self.column)
        if dtype is None:
            raise UnknownColumnError(self.column, tuple(schema.names()))

        return dtype

    def apply(self, frame: pl.DataFrame) -> pl.DataFrame:
        '''
        Filter an in-memory frame, every column kept.

        '''
        dtype = self.check(frame.schema)
        return frame.filter(self.expr(dtype))

    def __str__(self) -> str:
        vals = ', '.join(repr(v) for v in self.values)
        return f'{self.column} in ({vals})'
