'''
Cheap looks at a large text file: size, line count and a raw sample, none of
which parse or hold more than a small chunk of the file in memory.

'''
from __future__ import annotations

from itertools import islice
import logging
from pathlib import Path

from select_db._utils import human_size
from select_db.errors import SourceNotFoundError
from select_db.structs import FrozenStruct


log = logging.getLogger(__name__)


# bytes read per iteration when counting lines
chunk_size: int = 1024 * 1024


def check_source(path: str | Path) -> Path:
    path = Path(path)
    if not path.exists():
        raise SourceNotFoundError(path)

    if not path.is_file():
        raise SourceNotFoundError(path, reason='is not a regular file')

    if not _readable(path):
        raise SourceNotFoundError(path, reason='is not readable')

    return path


def _readable(path: Path) -> bool:
    try:
        with open(path, 'rb'):
            return True

    except PermissionError:
        return False


def file_size(path: str | Path) -> int:
    return check_source(path).stat().st_size


def count_lines(path: str | Path) -> int:
    '''
    Count lines like `wc -l` does, plus a final line missing its trailing
    newline.

    '''
    path = check_source(path)

    lines = 0
    last = b'\n'
    with open(path, 'rb') as f:
        while chunk := f.read(chunk_size):
            lines += chunk.count(b'\n')
            last = chunk[-1:]

    if last != b'\n':
        lines += 1

    return lines


def head_lines(
    path: str | Path,
    n: int = 5,
    *,
    encoding: str = 'utf-8',
) -> list[str]:
    '''
    First `n` lines of the file as raw text, line endings stripped.

    '''
    if n < 0:
        raise ValueError(f'n needs to be >= 0, got {n}')

    path = check_source(path)
    with open(path, 'r', encoding=encoding, errors='replace', newline='') as f:
        return [line.rstrip('\r\n') for line in islice(f, n)]


def write_head(
    path: str | Path,
    dest: str | Path,
    n: int = 5,
) -> Path:
    '''
    Copy the first `n` raw lines of `path` into `dest`, bytes untouched.

    '''
    if n < 0:
        raise ValueError(f'n needs to be >= 0, got {n}')

    path = check_source(path)
    dest = Path(dest)
    dest.parent.mkdir(parents=True, exist_ok=True)

    with open(path, 'rb') as src, open(dest, 'wb') as dst:
        for line in islice(src, n):
            dst.write(line)

    log.debug(f'wrote first {n} lines of {path} to {dest}')
    return dest


class FileInfo(FrozenStruct, frozen=True):
    path: Path
    size: int
    line_count: int
    sample: list[str]

    @property
    def data_rows(self) -> int:
        # header line doesn't count
        return max(0, self.line_count - 1)

    def pretty_str(self) -> str:
        lines = [
            f'File: {self.path}',
            f'Size: {human_size(self.size)} ({self.size:,} bytes)',
            f'Lines: {self.line_count:,} ({self.data_rows:,} data rows)',
            f'First {len(self.sample)} lines:',
        ]
        lines.extend(f'  {line}' for line in self.sample)
        return '\n'.join(lines)


def inspect_file(
    path: str | Path,
    sample_lines: int = 5,
    *,
    encoding: str = 'utf-8',
) -> FileInfo:
    path = check_source(path)
    info = FileInfo(
        path=path,
        size=file_size(path),
        line_count=count_lines(path),
        sample=head_lines(path, sample_lines, encoding=encoding),
    )
    log.debug(
        f'inspected {path}: {human_size(info.size)}, {info.line_count:,} lines'
    )
    return info
