"""Tracking of the active configuration and the progress of its members."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Optional

from .progress import Progress


def _copy_set(ids: Optional[set[int]]) -> Optional[set[int]]:
    return None if ids is None else set(ids)


@dataclass
class TrackerConfig:
    """The configuration tracked by a ProgressTracker.

    ``voters`` holds the incoming and outgoing voter sets of a joint
    configuration; the outgoing set is None unless the configuration is joint.
    Learners never overlap with voters. ``learners_next`` holds voters that
    become learners once the joint configuration is left.
    """

    voters: tuple[set[int], Optional[set[int]]] = field(
        default_factory=lambda: (set(), None)
    )
    auto_leave: bool = False
    learners: Optional[set[int]] = None
    learners_next: Optional[set[int]] = None

    def clone(self) -> TrackerConfig:
        """Return a copy of the voter and learner sets sharing no memory."""
        return TrackerConfig(
            voters=(_copy_set(self.voters[0]), _copy_set(self.voters[1])),
            learners=_copy_set(self.learners),
            learners_next=_copy_set(self.learners_next),
        )


class ProgressTracker:
    """Tracks the active configuration and what is known about its members."""

    def __init__(self, max_inflight: int, max_inflight_bytes: int) -> None:
        self.config = TrackerConfig()
        self.progress: dict[int, Progress] = {}
        self.votes: dict[int, bool] = {}
        self.max_inflight = max_inflight
        self.max_inflight_bytes = max_inflight_bytes

    def is_singleton(self) -> bool:
        """Return True if the only voting member is a single node."""
        incoming, outgoing = self.config.voters
        return len(incoming) == 1 and not outgoing

    def visit(self, func: Callable[[int, Progress], None]) -> None:
        """Call ``func`` for every tracked progress in ascending id order."""
        for node_id in sorted(self.progress):
            func(node_id, self.progress[node_id])

    def voter_nodes(self) -> list[int]:
        """Return the sorted ids of voters in either half of the configuration."""
        incoming, outgoing = self.config.voters
        return sorted(incoming | (outgoing or set()))

    def learner_nodes(self) -> list[int]:
        """Return the sorted ids of learners."""
        return sorted(self.config.learners or ())

    def reset_votes(self) -> None:
        """Prepare for a new round of vote counting."""
        self.votes = {}

    def record_vote(self, node_id: int, granted: bool) -> None:
        """Record a node's vote; only its first vote in a round counts."""
        self.votes.setdefault(node_id, granted)