"""Replication state of a follower as tracked by the leader."""

from __future__ import annotations

import enum


class StateType(enum.IntEnum):
    """The state of a tracked follower."""

    # The follower's last index is unknown; it is probed with periodic appends.
    PROBE = 0
    # Steady state: the follower eagerly receives log entries.
    REPLICATE = 1
    # The follower needs a snapshot before it can replicate again.
    SNAPSHOT = 2

    def __str__(self) -> str:
        return "State" + self.name.capitalize()