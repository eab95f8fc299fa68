import logging

import pytest

from select_db._log import log_elapsed, setup_logging
from select_db._utils import elapsed_str, human_size
from select_db.config import AccessConfig


def test_datadir_from_env(tmp_path, monkeypatch):
    monkeypatch.setenv('SELECT_DB_DATADIR', str(tmp_path / 'env-db'))

    assert AccessConfig().root_datadir == (tmp_path / 'env-db').resolve()
    assert AccessConfig.from_env().datadir == tmp_path / 'env-db'

    pinned = AccessConfig(datadir=tmp_path / 'pinned')
    assert pinned.root_datadir == (tmp_path / 'pinned').resolve()


def test_config_validation():
    with pytest.raises(ValueError):
        AccessConfig(separator=';;')

    with pytest.raises(ValueError):
        AccessConfig(row_group_size=0)


def test_config_to_dict(tmp_path):
    d = AccessConfig(datadir=tmp_path, separator='\t').to_dict()
    assert d['datadir'] == str(tmp_path)
    assert d['separator'] == '\t'
    assert d['encoding'] == 'utf8'
    assert 'check_arity' not in d


def test_human_size():
    assert human_size(512) == '512B'
    assert human_size(1536) == '1.5K'
    assert human_size(3 * 1024 ** 3) == '3.0G'


def test_elapsed_str():
    assert elapsed_str(15_000_000) == '15 ms'
    assert elapsed_str(2_500_000_000) == '2.50 sec'


def test_setup_logging_single_handler():
    root = logging.getLogger()
    saved = (root.handlers[:], root.level)
    try:
        setup_logging('debug')
        setup_logging('info')
        assert len(root.handlers) == 1
        assert root.level == logging.INFO
        assert logging.getLogger('polars').level == logging.WARNING

    finally:
        root.handlers[:] = saved[0]
        root.setLevel(saved[1])


def test_setup_logging_level_from_env(monkeypatch):
    root = logging.getLogger()
    saved = (root.handlers[:], root.level)
    monkeypatch.setenv('SELECT_DB_LOGLEVEL', 'warning')
    try:
        setup_logging()
        assert root.level == logging.WARNING

        # explicit level wins over the env
        setup_logging('debug')
        assert root.level == logging.DEBUG

    finally:
        root.handlers[:] = saved[0]
        root.setLevel(saved[1])


def test_log_elapsed(caplog):
    log = logging.getLogger('select_db.test')

    with caplog.at_level(logging.DEBUG, logger='select_db.test'):
        with log_elapsed(log, 'parsed thing'):
            pass

        with pytest.raises(RuntimeError):
            with log_elapsed(log, 'failed thing'):
                raise RuntimeError('boom')

    messages = [r.getMessage() for r in caplog.records]
    assert len(messages) == 1
    assert messages[0].startswith('parsed thing, took ')
