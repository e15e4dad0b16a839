"""Module entrypoint for `python -m gui`.

Delegates to `gui.launcher.main` to open the summary for the given files.
"""

from __future__ import annotations

import sys

from config import settings
from gui.services.logging_service import configure_logging

from . import launcher as _launcher


def main():  # pragma: no cover - runtime delegation
    configure_logging(settings.LOG_LEVEL)
    sys.exit(_launcher.main(sys.argv[1:]))


if __name__ == "__main__":  # pragma: no cover
    main()
