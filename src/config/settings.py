"""Global configuration and constants for the lineup planner client."""

from __future__ import annotations

import os
from typing import Final

REMOTE_URL: Final = os.environ.get("LINEUP_PLANNER_REMOTE_URL", "http://localhost:54321")
ANON_KEY: Final = os.environ.get("LINEUP_PLANNER_ANON_KEY", "")
ACCESS_TOKEN: Final = os.environ.get("LINEUP_PLANNER_ACCESS_TOKEN") or None
DEFAULT_TIMEOUT: Final = 15  # seconds
DEFAULT_RETRIES: Final = 3
DEFAULT_BACKOFF_FACTOR: Final = 0.6

# Redirect targets handed to the host when a precondition fails
LOGIN_PATH: Final = "/pages/index.html"
TEAMS_PATH: Final = "/pages/teams.html"
TEAM_ID_PARAM: Final = "team_id"

# Planner
GUEST_TEAM_ID: Final = "guest"
DEFAULT_QUARTER_COUNT: Final = 4
QUARTER_CAPACITY: Final = 5
MATCH_TYPES: Final = {"basket": 4, "minibasket": 6}
DEFAULT_MATCH_TYPE: Final = "basket"
