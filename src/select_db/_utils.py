'''
Misc internal utilities

'''
import os

from datetime import datetime, timezone
from pathlib import Path


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def path_size(path: str | Path) -> int:
    '''
    Return the byte size at the target path, if its a directory it will return
    the sum of all files under all sub-directories.

    '''
    path = Path(path)
    if path.is_file():
        return path.stat().st_size

    return sum(
        (
            subpath.stat().st_size
            for subpath in path.rglob('*')
            if subpath.is_file()
        )
    )


default_datadir: Path = Path.home() / '.select_db'


def get_root_datadir() -> Path:
    return Path(os.getenv('SELECT_DB_DATADIR', default_datadir))


_size_units = ('B', 'K', 'M', 'G', 'T', 'P')


def human_size(num_bytes: int) -> str:
    '''
    Byte count in the `ls -hl` style: 512B, 1.5K, 3.2G...

    '''
    size = float(num_bytes)
    for unit in _size_units:
        if size < 1024 or unit == _size_units[-1]:
            if unit == 'B':
                return f'{int(size)}B'

            return f'{size:.1f}{unit}'

        size /= 1024

    raise AssertionError('unreachable')


def elapsed_str(elapsed_ns: int) -> str:
    '''
    Render nanoseconds as milliseconds, upgrading to seconds past 1000 ms.

    '''
    # start calc with milliseconds
    elapsed = elapsed_ns // 1_000_000

    # upgrade to seconds
    if elapsed >= 1_000:
        return f'{elapsed / 1_000:,.2f} sec'

    return f'{elapsed:,} ms'
