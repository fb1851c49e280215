"""Repository layer public exports.

Protocol interfaces the planner view model reads its data through.
"""

from .protocols import RosterSource, TeamListingSource

__all__ = ["RosterSource", "TeamListingSource"]
