"""GUI view layer.

Exports:
 - SummaryDialog
"""

from .summary_dialog import SummaryDialog  # noqa: F401
