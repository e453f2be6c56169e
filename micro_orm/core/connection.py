"""Connection configuration and driver loading.

ConnectionConfig is a Pydantic model for type-safe connection config.
load_driver resolves the backend's Driver class lazily so that optional
database libraries are only imported when used.
"""

from __future__ import annotations

import importlib
from typing import Any

from pydantic import BaseModel

from micro_orm.core.enums import DatabaseBackend
from micro_orm.core.exceptions import AdapterError


class ConnectionConfig(BaseModel):
    """Configuration for database connections."""

    driver: str
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str
    extra: dict[str, Any] = {}

    @property
    def backend(self) -> DatabaseBackend:
        try:
            return DatabaseBackend(self.driver.lower())
        except ValueError:
            raise AdapterError(f"Unsupported database driver: {self.driver}") from None

    @property
    def uri(self) -> str:
        """Normalized connection key. The password is never included."""
        scheme = self.driver.lower()
        if self.backend is DatabaseBackend.SQLITE:
            return f"{scheme}:///{self.database}"

        authority = self.host or ""
        if self.port is not None:
            authority += f":{self.port}"
        if self.user:
            authority = f"{self.user}@{authority}"
        return f"{scheme}://{authority}/{self.database}"


# Driver module mapping: backend → (module_path, class_name)
_DRIVER_MAP: dict[DatabaseBackend, tuple[str, str]] = {
    DatabaseBackend.SQLITE: ("micro_orm.adapters.sqlite", "SqliteDriver"),
    DatabaseBackend.POSTGRESQL: ("micro_orm.adapters.postgresql", "PostgresqlDriver"),
    DatabaseBackend.MYSQL: ("micro_orm.adapters.mysql", "MysqlDriver"),
    DatabaseBackend.ORACLE: ("micro_orm.adapters.oracle", "OracleDriver"),
}


def load_driver(config: ConnectionConfig) -> Any:
    """Instantiate the Driver for *config*'s backend."""
    module_path, cls_name = _DRIVER_MAP[config.backend]

    try:
        module = importlib.import_module(module_path)
        return getattr(module, cls_name)(config)
    except (ImportError, AttributeError) as e:
        raise AdapterError(f"Failed to load driver for '{config.driver}': {e}") from e
