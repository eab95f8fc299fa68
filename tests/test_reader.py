import random

import polars as pl
import pytest

from select_db.config import AccessConfig
from select_db.errors import (
    SchemaMismatchError,
    SelectDBError,
    SourceEncodingError,
    SourceNotFoundError,
    UnknownColumnError,
)
from select_db.bench import benchmark
from select_db.reader import locate_mismatch, peek, read_header, read_table
from select_db._testing import names_header, write_csv


def test_full_read(josh_csv):
    df = read_table(josh_csv)

    assert df.columns == ['fname', 'byear', 'death_age']
    assert df.schema == pl.Schema({
        'fname': pl.String,
        'byear': pl.Int64,
        'death_age': pl.Int64,
    })
    assert df.rows() == [
        ('JOSH', 1920, 70),
        ('JOSHUA', 1921, 75),
        ('MARY', 1922, 80),
    ]


def test_row_limit(josh_csv, names_csv):
    assert read_table(josh_csv, n_rows=2).rows() == [
        ('JOSH', 1920, 70),
        ('JOSHUA', 1921, 75),
    ]
    # limit past the end returns every row
    assert read_table(josh_csv, n_rows=10).height == 3

    full = read_table(names_csv)
    for k in (1, 17, 4_999, 5_000):
        limited = read_table(names_csv, n_rows=k)
        assert limited.height == k
        assert limited.rows() == full.head(k).rows()


def test_row_limit_zero_and_negative(josh_csv):
    empty = read_table(josh_csv, n_rows=0, columns=['byear'])
    assert empty.height == 0
    assert empty.columns == ['byear']

    with pytest.raises(ValueError):
        read_table(josh_csv, n_rows=-1)


def test_projection(names_csv):
    full = read_table(names_csv)
    cols = ['death_age', 'fname', 'byear']

    projected = read_table(names_csv, columns=cols)

    assert projected.columns == cols
    assert projected.equals(full.select(cols))

    # duplicates collapse, first occurrence wins
    assert read_table(names_csv, columns=['fname', 'fname']).columns == ['fname']


def test_projection_with_row_limit(names_csv):
    df = read_table(names_csv, columns=['ssn'], n_rows=3)
    assert df.rows() == [(100_000_000,), (100_000_001,), (100_000_002,)]


def test_unknown_column(josh_csv):
    with pytest.raises(UnknownColumnError) as err:
        read_table(josh_csv, columns=['fname', 'fname2'])

    assert err.value.columns == ('fname2',)
    assert 'fname2' in str(err.value)


def test_missing_source(tmp_path):
    with pytest.raises(SourceNotFoundError):
        read_table(tmp_path / 'missing.csv')


def _ragged_csv(tmp_path, bad_row):
    rows = [('JOSH', '1920', '70')] * 10 + [bad_row] + [('MARY', '1922', '80')] * 10
    return write_csv(tmp_path / 'ragged.csv', ('fname', 'byear', 'death_age'), rows)


@pytest.mark.parametrize('bad_row', [
    ('JOSH', '1920'),
    ('JOSH', '1920', '70', 'extra'),
])
def test_malformed_row_fails_whole_read(tmp_path, bad_row):
    path = _ragged_csv(tmp_path, bad_row)

    with pytest.raises(SchemaMismatchError) as err:
        read_table(path)

    assert err.value.line == 12
    assert err.value.expected == 3
    assert err.value.actual == len(bad_row)

    # rows before the malformed one are still readable with a limit
    assert read_table(path, n_rows=10).height == 10


def test_malformed_row_past_limit_is_not_parsed(tmp_path):
    path = _ragged_csv(tmp_path, ('JOSH', '1920', '70', 'extra'))

    with pytest.raises(SchemaMismatchError):
        read_table(path)

    df = read_table(path, n_rows=2)
    assert df.rows() == [('JOSH', 1920, 70), ('JOSH', 1920, 70)]


def test_blank_line_is_malformed(tmp_path):
    path = tmp_path / 'blank.csv'
    path.write_text('fname,byear\nJOSH,1920\n\nMARY,1922\nBOB,1930\n')

    with pytest.raises(SchemaMismatchError) as err:
        read_table(path)

    assert err.value.line == 3
    assert err.value.expected == 2

    with pytest.raises(SchemaMismatchError):
        read_table(path, columns=['byear'])

    assert read_table(path, n_rows=1).rows() == [('JOSH', 1920)]


def test_locate_mismatch(tmp_path, names_csv):
    assert locate_mismatch(names_csv, len(names_header)) is None

    path = _ragged_csv(tmp_path, ('JOSH', '1920'))
    assert locate_mismatch(path, 3) == (12, 2)


def test_invalid_utf8(tmp_path):
    path = tmp_path / 'latin.csv'
    path.write_bytes(b'fname,byear\nJ\xf6SH,1920\nMARY,1922\n')

    with pytest.raises(SourceEncodingError) as err:
        read_table(path)

    assert isinstance(err.value, SelectDBError)
    assert isinstance(err.value, ValueError)

    # bad header bytes fail before any parsing
    bad_header = tmp_path / 'bad_header.csv'
    bad_header.write_bytes(b'fn\xffame,byear\nJOSH,1920\n')
    with pytest.raises(SourceEncodingError):
        read_header(bad_header)

    df = read_table(path, config=AccessConfig(encoding='latin1'))
    assert df.rows() == [('JÖSH', 1920), ('MARY', 1922)]


def test_projection_parses_less(tmp_path):
    header = tuple(f'c{i:02d}' for i in range(30))
    rng = random.Random(3)
    rows = (
        tuple(rng.randrange(1_000_000) for _ in header)
        for _ in range(60_000)
    )
    path = write_csv(tmp_path / 'wide.csv', header, rows)

    def best_of(label, op, runs=3):
        return min(benchmark(label, op).elapsed for _ in range(runs))

    full = best_of('full_read', lambda: read_table(path))
    projected = best_of('projected_read', lambda: read_table(path, columns=['c07']))

    assert projected < full


def test_quoted_fields(tmp_path):
    path = write_csv(
        tmp_path / 'quoted.csv',
        ('fname', 'bpl_string'),
        [('JOSH', 'Albany, New York'), ('MARY', 'Austin, Texas')],
    )
    assert read_header(path) == ('fname', 'bpl_string')
    assert read_table(path)['bpl_string'].to_list() == [
        'Albany, New York', 'Austin, Texas',
    ]


def test_custom_separator(tmp_path):
    path = write_csv(
        tmp_path / 'semi.csv',
        ('fname', 'byear'),
        [('JOSH', 1920), ('MARY', 1922)],
        separator=';',
    )
    df = read_table(path, config=AccessConfig(separator=';'))
    assert df.rows() == [('JOSH', 1920), ('MARY', 1922)]


def test_peek(names_csv):
    head = peek(names_csv)
    assert head.shape == (5, len(names_header))
