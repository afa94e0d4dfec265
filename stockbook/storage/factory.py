"""Build the configured store backend."""

from typing import Optional

from .base_store import BaseStore
from .json_store import JSONFileStore
from .memory_store import MemoryStore
from ..utils.config import AppConfig, get_config
from ..utils.exceptions import ConfigurationError


def create_store(config: Optional[AppConfig] = None) -> BaseStore:
    """Return the store named by ``storage.backend``."""
    config = config or get_config()
    backend = config.storage.backend.lower()

    if backend == "json":
        return JSONFileStore(config.storage.data_dir, indent=config.storage.indent)
    if backend == "memory":
        return MemoryStore()

    raise ConfigurationError(
        f"Unknown storage backend: {config.storage.backend}",
        details={"supported": ["json", "memory"]}
    )
