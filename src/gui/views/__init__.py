"""GUI view layer (PyQt6 widgets).

Exports:
 - LineupPlannerView
"""

from .lineup_planner_view import LineupPlannerView  # noqa: F401
