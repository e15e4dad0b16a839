"""Launcher for the summary window (`python -m gui FILE...` or `main.py gui`)."""

from __future__ import annotations

import logging
import sys
from typing import Sequence

from config import settings
from domain.project_io import load_projects
from gui.app.bootstrap import create_app
from gui.app.config_store import load_config, save_config

_log = logging.getLogger(__name__)


def main(paths: Sequence[str]) -> int:  # pragma: no cover - runtime
    from PyQt6.QtWidgets import QMessageBox  # type: ignore

    from gui.views.summary_dialog import SummaryDialog

    ctx = create_app(headless=False)
    cfg = load_config(settings.DATA_DIR)
    projects, failures = load_projects(paths or cfg.recent_files)
    for path, message in failures:
        QMessageBox.warning(None, "File format error", f"{path}\n\n{message}")
    loaded = {str(p) for p in paths} - {path for path, _ in failures}
    for path in loaded:
        cfg.remember_file(path)
    save_config(cfg, settings.DATA_DIR)
    dlg = SummaryDialog(projects, ctx.shortcuts)
    if cfg.summary_w and cfg.summary_h:
        dlg.resize(cfg.summary_w, cfg.summary_h)
    dlg.show()
    code = ctx.qt_app.exec()
    cfg.summary_w, cfg.summary_h = dlg.width(), dlg.height()
    save_config(cfg, settings.DATA_DIR)
    ctx.shutdown()
    _log.debug("Launcher exiting with %s", code)
    return code


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main(sys.argv[1:]))
