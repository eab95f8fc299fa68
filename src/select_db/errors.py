'''
Every failure the access layer reports is one of these, so callers can tell
"no matching rows" apart from "malformed request".

'''
from pathlib import Path


class SelectDBError(Exception): ...


class SourceNotFoundError(SelectDBError, FileNotFoundError):
    def __init__(self, path: str | Path, reason: str = 'does not exist'):
        self.path = Path(path)
        super().__init__(f'Source file {self.path} {reason}')


class SchemaMismatchError(SelectDBError, ValueError):
    '''
    A data row whose field count differs from the header's.

    '''
    def __init__(self, path: str | Path, line: int, expected: int, actual: int):
        self.path = Path(path)
        self.line = line
        self.expected = expected
        self.actual = actual
        super().__init__(
            f'{self.path}:{line}: expected {expected} fields, got {actual}'
        )


class UnknownColumnError(SelectDBError, KeyError):
    def __init__(self, columns: str | tuple[str, ...], available: tuple[str, ...]):
        if isinstance(columns, str):
            columns = (columns,)

        self.columns = columns
        self.available = available
        super().__init__(
            f'Unknown column(s) {", ".join(columns)}, '
            f'available: {", ".join(available)}'
        )

    def __str__(self) -> str:
        # KeyError would repr() the message otherwise
        return str(self.args[0])


class StoreNotBuiltError(SelectDBError):
    def __init__(self, name: str, path: Path):
        self.name = name
        self.path = path
        super().__init__(f'Store {name} not built yet (expected at {path})')


class BuildIncompleteError(SelectDBError): ...


class SourceEncodingError(SelectDBError, ValueError):
    def __init__(self, path: str | Path, encoding: str):
        self.path = Path(path)
        self.encoding = encoding
        super().__init__(f'{self.path} is not valid {encoding} text')
