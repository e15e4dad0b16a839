"""Global configuration and constants for the production value tracker."""

from __future__ import annotations

import os
from typing import Final

APP_NAME: Final = "prodtally"
PROJECT_FILE_EXTENSION: Final = ".prod"
DATA_DIR: Final = os.environ.get("PRODTALLY_DATA_DIR", "data")
LOG_LEVEL: Final = os.environ.get("PRODTALLY_LOG_LEVEL", "WARNING")

# Presentation
CURRENCY_SYMBOL: Final = os.environ.get("PRODTALLY_CURRENCY_SYMBOL", "¥")
UNKNOWN_PROJECT_LABEL: Final = "Unknown project"
UNKNOWN_PHASE_LABEL: Final = "Unknown phase"
BASE_ITEM_LABEL: Final = "Base item"
PATH_JOINER: Final = " - "

# Group keys are "<project_id><sep><phase_id>"; ids must never contain it.
GROUP_KEY_SEPARATOR: Final = "_"

EMPTY_SELECTION_MESSAGE: Final = "Select at least one project"
NO_DATA_MESSAGE: Final = "No data"
