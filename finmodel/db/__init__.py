from .adapter import (
    DbAdapter,
    PostgresAdapter,
    RunResult,
    SQLiteAdapter,
    close_db,
    create_adapter,
    get_db,
)
from .schema import init_schema
from .seed import seed
