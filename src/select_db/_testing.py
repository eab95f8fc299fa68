import csv
from pathlib import Path
import random
from typing import Generator, Iterable, Sequence


josh_header: tuple[str, ...] = ('fname', 'byear', 'death_age')

josh_rows: tuple[tuple[str, ...], ...] = (
    ('JOSH', '1920', '70'),
    ('JOSHUA', '1921', '75'),
    ('MARY', '1922', '80'),
)


names_header: tuple[str, ...] = (
    'ssn', 'fname', 'lname', 'byear', 'death_age', 'race_last', 'bpl_string',
    'weight',
)

first_names: tuple[str, ...] = (
    'JOSH', 'JOSHUA', 'MARY', 'MARIA', 'BILL', 'WILLIAM', 'BOB', 'ROBERT',
    'LIZ', 'ELIZABETH', 'JIM', 'JAMES',
)

last_names: tuple[str, ...] = (
    'SMITH', 'JOHNSON', 'WILLIAMS', 'BROWN', 'JONES', 'MILLER', 'DAVIS',
)

birth_places: tuple[str, ...] = (
    'New York', 'California', 'Texas', 'Ohio', 'Illinois', 'Georgia',
)


def write_csv(
    path: Path,
    header: Sequence[str],
    rows: Iterable[Sequence[object]],
    *,
    separator: str = ',',
) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f, delimiter=separator, lineterminator='\n')
        writer.writerow(header)
        writer.writerows(rows)

    return path


def names_stream(
    rows: int = 10_000,
    *,
    seed: int = 0,
) -> Generator[tuple[object, ...], None, None]:
    '''
    Deterministic death-record-like rows matching `names_header`, some
    `race_last` values are missing.

    '''
    rnd = random.Random(seed)
    for i in range(rows):
        byear = rnd.randint(1895, 1940)
        yield (
            100_000_000 + i,
            rnd.choice(first_names),
            rnd.choice(last_names),
            byear,
            rnd.randint(40, 105),
            rnd.choice(('1', '2', '3', '')),
            rnd.choice(birth_places),
            round(rnd.uniform(45.0, 120.0), 2),
        )


def write_names_csv(path: Path, rows: int = 10_000, *, seed: int = 0) -> Path:
    return write_csv(path, names_header, names_stream(rows, seed=seed))


def write_josh_csv(path: Path) -> Path:
    return write_csv(path, josh_header, josh_rows)
