from datetime import datetime

from select_db.schema import SchemaMeta
from select_db.structs import FrozenStruct


# parquet footer key holding `StoreMeta`
meta_key: str = 'select_db'


class StoreMeta(FrozenStruct, frozen=True):
    name: str
    source: str
    source_size: int
    source_mtime_ns: int
    row_count: int
    schema: SchemaMeta
    index_on: list[str]
    built_at: datetime

    @property
    def shape(self) -> tuple[int, int]:
        return (self.row_count, len(self.schema.columns))
