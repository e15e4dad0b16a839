"""Application layer for GUI bootstrap and lifecycle management."""

from .bootstrap import create_app, AppContext  # noqa: F401
from .config_store import (  # noqa: F401
    AppConfig,
    load_config,
    save_config,
    CONFIG_VERSION,
)

__all__ = [
    "create_app",
    "AppContext",
    "AppConfig",
    "load_config",
    "save_config",
    "CONFIG_VERSION",
]
