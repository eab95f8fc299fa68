import polars as pl
import pytest

from select_db.errors import UnknownColumnError
from select_db.predicate import Predicate


frame = pl.DataFrame({
    'fname': ['JOSH', 'JOSHUA', 'MARY', None],
    'byear': [1920, 1921, 1922, 1923],
})


def test_apply_keeps_every_column():
    out = Predicate.isin('fname', ['JOSH', 'JOSHUA']).apply(frame)
    assert out.columns == ['fname', 'byear']
    assert out.rows() == [('JOSH', 1920), ('JOSHUA', 1921)]


def test_values_follow_column_type():
    out = Predicate.isin('byear', ('1921', 1922)).apply(frame)
    assert out['byear'].to_list() == [1921, 1922]


def test_empty_value_set():
    assert Predicate.isin('fname', ()).apply(frame).height == 0


def test_unknown_column():
    with pytest.raises(UnknownColumnError) as err:
        Predicate.isin('fname2', ('JOSH',)).apply(frame)

    assert err.value.available == ('fname', 'byear')


def test_str():
    assert str(Predicate.isin('fname', ('JOSH',))) == "fname in ('JOSH')"
