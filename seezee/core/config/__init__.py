__all__ = [
    "LoggingSettings",
    "PostgresqlSettings",
    "Secrets",
    "Settings",
    "SQLiteSettings",
    "StorageSettings",
]


from .logging import LoggingSettings
from .secrets import Secrets
from .settings import Settings
from .storage import PostgresqlSettings, SQLiteSettings, StorageSettings
