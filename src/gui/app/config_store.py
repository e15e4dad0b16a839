"""Application configuration persistence.

Stores lightweight UI state: last used directory, recently opened project
files and the summary dialog size. Project selection (exclusions) is not
stored here; it resets every time the summary closes.

Design principles:
- Pure logic (no Qt import) so it can be unit-tested headless.
- Explicit version field.
- Graceful fallback: corrupt or incompatible files produce defaults instead of raising.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from core import filesystem

__all__ = ["AppConfig", "load_config", "save_config", "CONFIG_VERSION", "MAX_RECENT_FILES"]

CONFIG_VERSION = 1
MAX_RECENT_FILES = 10

DEFAULT_FILENAME = "app_state.json"

_log = logging.getLogger(__name__)


@dataclass(slots=True)
class AppConfig:
    """Serializable application state.

    Attributes
    ----------
    version: Schema version.
    last_data_dir: Directory of the most recently opened project file.
    recent_files: Most recently opened project files, newest first.
    summary_w, summary_h: Last summary dialog size.
    """

    version: int = CONFIG_VERSION
    last_data_dir: Optional[str] = None
    recent_files: List[str] = field(default_factory=list)
    summary_w: Optional[int] = None
    summary_h: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppConfig":
        recent = data.get("recent_files") or []
        return cls(
            version=int(data.get("version", CONFIG_VERSION)),
            last_data_dir=data.get("last_data_dir"),
            recent_files=[str(p) for p in recent if isinstance(p, str)][:MAX_RECENT_FILES],
            summary_w=data.get("summary_w"),
            summary_h=data.get("summary_h"),
        )

    def remember_file(self, path: str | Path) -> None:
        """Move *path* to the front of the recent list and update last_data_dir."""
        p = str(Path(path))
        self.recent_files = [p] + [f for f in self.recent_files if f != p]
        del self.recent_files[MAX_RECENT_FILES:]
        self.last_data_dir = str(Path(p).parent)


def _resolve_path(base_dir: str | Path | None) -> Path:
    base = Path(base_dir) if base_dir else Path.cwd()
    return base / DEFAULT_FILENAME


def load_config(base_dir: str | Path | None = None) -> AppConfig:
    path = _resolve_path(base_dir)
    if not path.exists():
        return AppConfig()
    try:
        cfg = AppConfig.from_dict(json.loads(path.read_text(encoding="utf-8")))
    except (OSError, ValueError, TypeError, AttributeError) as exc:
        _log.warning("Ignoring unreadable config %s: %s", path, exc)
        return AppConfig()
    if cfg.version != CONFIG_VERSION:
        return AppConfig(last_data_dir=cfg.last_data_dir)
    return cfg


def save_config(cfg: AppConfig, base_dir: str | Path | None = None) -> Path:
    """Persist application config; returns the path written."""
    path = _resolve_path(base_dir)
    return filesystem.write_text_atomic(
        path, json.dumps(cfg.to_dict(), indent=2, ensure_ascii=False)
    )
