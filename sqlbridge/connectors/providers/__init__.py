from .mysql import ADAPTER as MYSQL_ADAPTER
from .postgres import ADAPTER as POSTGRES_ADAPTER
from .sqlite import ADAPTER as SQLITE_ADAPTER

BUILTIN_ADAPTERS = (SQLITE_ADAPTER, POSTGRES_ADAPTER, MYSQL_ADAPTER)

__all__ = ["BUILTIN_ADAPTERS", "MYSQL_ADAPTER", "POSTGRES_ADAPTER", "SQLITE_ADAPTER"]
