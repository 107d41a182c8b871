"""Raft leader-side building blocks: follower states, in-flight flow control, progress tracking, data types and debugging descriptions."""

__version__ = "0.1.0"
__all__ = ["inflights", "progress", "state", "tracker", "types", "util"]