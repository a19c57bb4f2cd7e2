"""
Persisted account state adapters.
"""

from src.route_profit.adapters.state.json_state_store import (
    DEFAULT_STATE_PATH,
    JsonStateStore,
    migrate_state,
)

__all__ = [
    "DEFAULT_STATE_PATH",
    "JsonStateStore",
    "migrate_state",
]
