'''
# Column type inference

Source files are plain text, every field starts life as a string. Rather
than leaning on whatever the CSV parser guesses from a sample, a read infers
each column's type with one fixed policy over *all* the rows it parsed:

    - `Int64` iff every non-null value, once surrounding whitespace is
      stripped, parses as a 64 bit integer.
    - `Float64` otherwise, iff every non-null value parses as a float.
    - `String` in any other case, including columns with no non-null values.

Empty fields are null. The decision is taken per column, never per row, so a
single read can't produce a column with mixed types.

# Type tags

Stores persist their schema as a list of `(name, tag)` pairs, tags are the
short strings in `DTypeTag`.

'''

from __future__ import annotations

from typing import Literal

import polars as pl


InferredType = type[pl.Int64] | type[pl.Float64] | type[pl.String]

# order matters, first type that fits the whole column wins
inference_order: tuple[InferredType, ...] = (pl.Int64, pl.Float64)


def _fits(col: pl.Series, dtype: InferredType) -> bool:
    stripped = col.str.strip_chars()
    casted = stripped.cast(dtype, strict=False)
    return casted.null_count() == stripped.null_count()


def infer_column_type(col: pl.Series) -> InferredType:
    '''
    Apply the inference policy to a single text column.

    '''
    if col.dtype != pl.String:
        raise TypeError(f'Can only infer from String columns, got {col.dtype}')

    if col.null_count() == col.len():
        return pl.String

    for dtype in inference_order:
        if _fits(col, dtype):
            return dtype

    return pl.String


def infer_schema(frame: pl.DataFrame) -> pl.Schema:
    return pl.Schema(
        (name, infer_column_type(frame.get_column(name)))
        for name in frame.columns
    )


def cast_inferred(frame: pl.DataFrame) -> pl.DataFrame:
    '''
    Cast an all-text frame to its inferred schema.

    '''
    schema = infer_schema(frame)
    exprs = []
    for name, dtype in schema.items():
        if dtype == pl.String:
            exprs.append(pl.col(name))

        else:
            exprs.append(pl.col(name).str.strip_chars().cast(dtype))

    return frame.select(exprs)


# data type serialization

DTypeTag = Literal['i64', 'f64', 'string']

dtype_tag_map: dict[InferredType, DTypeTag] = {
    pl.Int64: 'i64',
    pl.Float64: 'f64',
    pl.String: 'string',
}

# inverse of dtype_tag_map
tag_dtype_map: dict[DTypeTag, InferredType] = {
    v: k for (k, v) in dtype_tag_map.items()
}


def tag_for(dtype: pl.DataType | InferredType) -> DTypeTag:
    for cls, tag in dtype_tag_map.items():
        if dtype == cls:
            return tag

    raise TypeError(f'Unsupported column type {dtype}')


def coerce_values(values: tuple, dtype: pl.DataType | InferredType) -> pl.Series:
    '''
    Represent predicate values in a column's type. Values that have no
    representation are dropped, they can never match.

    '''
    raw = pl.Series('values', [str(v) for v in values], dtype=pl.String)
    if dtype == pl.String:
        return raw.unique(maintain_order=True)

    return (
        raw.str.strip_chars()
        .cast(dtype, strict=False)
        .drop_nulls()
        .unique(maintain_order=True)
    )
