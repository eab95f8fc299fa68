from contextlib import contextmanager
import logging
import os
import time
from typing import Generator, Iterable

from colorlog import ColoredFormatter

from select_db._utils import elapsed_str


# dependencies whose INFO chatter drowns ours
default_silenced: tuple[str, ...] = ('polars', 'pyarrow', 'fsspec')


class UTCColoredFormatter(ColoredFormatter):
    '''
    Colored records stamped in UTC, ISO8601 with milliseconds and a trailing
    'Z': 2026-10-18T09:15:02.113Z

    '''
    converter = time.gmtime

    def formatTime(self, record, datefmt=None):
        stamp = time.strftime(datefmt or '%Y-%m-%dT%H:%M:%S', self.converter(record.created))
        if datefmt:
            return stamp

        return f'{stamp}.{int(record.msecs):03d}Z'


def setup_logging(
    loglevel: str | None = None,
    silence: Iterable[str] = default_silenced,
) -> None:
    '''
    Install one colored stream handler on the root logger. Level falls back
    to `SELECT_DB_LOGLEVEL`, then `info`. Safe to call more than once.

    '''
    level = (loglevel or os.getenv('SELECT_DB_LOGLEVEL', 'info')).upper()

    for noisy in silence:
        logging.getLogger(noisy).setLevel(logging.WARNING)

    handler = logging.StreamHandler()
    handler.setFormatter(UTCColoredFormatter(
        '%(asctime)s %(log_color)s%(levelname)-7s%(reset)s [%(name)s] %(message)s',
        log_colors={
            'DEBUG': 'cyan',
            'INFO': 'green',
            'WARNING': 'yellow',
            'ERROR': 'red',
            'CRITICAL': 'bold_red',
        },
    ))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)


@contextmanager
def log_elapsed(
    log: logging.Logger,
    what: str,
    level: int = logging.DEBUG,
) -> Generator[None, None, None]:
    '''
    Log `<what>, took <elapsed>` once the body finishes. Nothing is logged if
    the body raises.

    '''
    start = time.perf_counter_ns()
    yield
    log.log(level, f'{what}, took {elapsed_str(time.perf_counter_ns() - start)}')
