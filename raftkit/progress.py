"""A follower's replication progress as seen by the leader."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Optional

from .inflights import Inflights
from .state import StateType

_U64 = (1 << 64) - 1


@dataclass
class Progress:
    """Leader-side state machine describing one follower's progress."""

    match: int = 0
    next: int = 0
    state: StateType = StateType.PROBE
    # Index of the snapshot in flight while in StateSnapshot.
    pending_snapshot: int = 0
    # Whether the follower was heard from recently.
    recent_active: bool = False
    # Set when the append flow to the follower is throttled.
    msg_app_flow_paused: bool = False
    inflights: Optional[Inflights] = None
    is_learner: bool = False

    def reset_state(self, state: StateType) -> None:
        """Move into ``state``, clearing pause, pending snapshot and inflights."""
        self.msg_app_flow_paused = False
        self.pending_snapshot = 0
        self.state = state
        if self.inflights is not None:
            self.inflights.reset()

    def become_probe(self) -> None:
        """Move into StateProbe; Next becomes Match+1 or past the pending snapshot."""
        if self.state == StateType.SNAPSHOT:
            pending = self.pending_snapshot
            self.reset_state(StateType.PROBE)
            self.next = max(self.match + 1, pending + 1)
        else:
            self.reset_state(StateType.PROBE)
            self.next = self.match + 1

    def become_replicate(self) -> None:
        """Move into StateReplicate with Next reset to Match+1."""
        self.reset_state(StateType.REPLICATE)
        self.next = self.match + 1

    def become_snapshot(self, snapshot_index: int) -> None:
        """Move into StateSnapshot awaiting the snapshot at ``snapshot_index``."""
        self.reset_state(StateType.SNAPSHOT)
        self.pending_snapshot = snapshot_index

    def update_on_entries_send(self, entries: int, nbytes: int, next_index: int) -> None:
        """Account for ``entries`` consecutive entries sent from ``next_index`` on.

        Raises ValueError when appends cannot be sent in the current state.
        """
        if self.state == StateType.REPLICATE:
            if entries > 0:
                last = next_index + entries - 1
                self.optimistic_update(last)
                self.inflights.add(last, nbytes)
            # An overflowing or already full window turns this message into a probe.
            self.msg_app_flow_paused = self.inflights.full()
        elif self.state == StateType.PROBE:
            if entries > 0:
                self.msg_app_flow_paused = True
        else:
            raise ValueError(f"sending append in unhandled state {self.state}")

    def maybe_update(self, n: int) -> bool:
        """Handle an acknowledgement of index ``n``; return False if it is stale."""
        updated = False
        if self.match < n:
            self.match = n
            updated = True
            self.msg_app_flow_paused = False
        self.next = max(self.next, n + 1)
        return updated

    def optimistic_update(self, n: int) -> None:
        """Mark appends up to and including ``n`` as in flight."""
        self.next = n + 1

    def maybe_decr_to(self, rejected: int, match_hint: int) -> bool:
        """Handle a rejected append; return False if the rejection is stale."""
        if self.state == StateType.REPLICATE:
            if rejected <= self.match:
                return False
            self.next = self.match + 1
            return True

        # Non-replicating followers are probed one entry at a time.
        if (self.next - 1) & _U64 != rejected:
            return False
        self.next = max(min(rejected, (match_hint + 1) & _U64), 1)
        self.msg_app_flow_paused = False
        return True

    def is_paused(self) -> bool:
        """Return whether sending entries to this follower is throttled."""
        if self.state in (StateType.PROBE, StateType.REPLICATE):
            return self.msg_app_flow_paused
        if self.state == StateType.SNAPSHOT:
            return True
        raise ValueError("unexpected state")

    def __str__(self) -> str:
        parts = [f"{self.state} match={self.match} next={self.next}"]
        if self.is_learner:
            parts.append(" learner")
        if self.is_paused():
            parts.append(" paused")
        if self.pending_snapshot > 0:
            parts.append(f" pendingSnap={self.pending_snapshot}")
        if not self.recent_active:
            parts.append(" inactive")
        if self.inflights is not None and self.inflights.count() > 0:
            parts.append(f" inflight={self.inflights.count()}")
            if self.inflights.full():
                parts.append("[full]")
        return "".join(parts)


def format_progress_map(progress: Mapping[int, Progress]) -> str:
    """Render progresses in ascending id order, one per line."""
    return "".join(f"{node_id}: {progress[node_id]}\n" for node_id in sorted(progress))