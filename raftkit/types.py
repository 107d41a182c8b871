"""Core Raft data types: messages, entries, states and snapshots."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Optional


def _camel(name: str) -> str:
    return "".join(part.capitalize() for part in name.split("_"))


class MessageType(enum.IntEnum):
    """Kinds of Raft messages."""

    MSG_HUP = 0
    MSG_BEAT = 1
    MSG_PROP = 2
    MSG_APP = 3
    MSG_APP_RESP = 4
    MSG_VOTE = 5
    MSG_VOTE_RESP = 6
    MSG_SNAP = 7
    MSG_HEARTBEAT = 8
    MSG_HEARTBEAT_RESP = 9
    MSG_UNREACHABLE = 10
    MSG_SNAP_STATUS = 11
    MSG_CHECK_QUORUM = 12
    MSG_TRANSFER_LEADER = 13
    MSG_TIMEOUT_NOW = 14
    MSG_READ_INDEX = 15
    MSG_READ_INDEX_RESP = 16
    MSG_PRE_VOTE = 17
    MSG_PRE_VOTE_RESP = 18
    MSG_STORAGE_APPEND = 19
    MSG_STORAGE_APPEND_RESP = 20
    MSG_STORAGE_APPLY = 21
    MSG_STORAGE_APPLY_RESP = 22
    MSG_FORGET_LEADER = 23

    def __str__(self) -> str:
        return _camel(self.name)


class EntryType(enum.IntEnum):
    """Kinds of log entries."""

    ENTRY_NORMAL = 0
    ENTRY_CONF_CHANGE = 1
    ENTRY_CONF_CHANGE_V2 = 2

    def __str__(self) -> str:
        return _camel(self.name)


def _varint_size(value: int) -> int:
    size = 1
    while value >= 0x80:
        value >>= 7
        size += 1
    return size


@dataclass
class Entry:
    """A single log entry. ``data`` of None means no payload at all."""

    term: int = 0
    index: int = 0
    type: EntryType = EntryType.ENTRY_NORMAL
    data: Optional[bytes] = None

    def size(self) -> int:
        """Return the size of the entry's protocol buffer encoding."""
        n = 1 + _varint_size(int(self.type))
        n += 1 + _varint_size(self.term)
        n += 1 + _varint_size(self.index)
        if self.data is not None:
            n += 1 + len(self.data) + _varint_size(len(self.data))
        return n


@dataclass
class HardState:
    """Persistent state: current term, vote and commit index."""

    term: int = 0
    vote: int = 0
    commit: int = 0

    def is_empty(self) -> bool:
        return self.term == 0 and self.vote == 0 and self.commit == 0


@dataclass
class ConfState:
    """The membership configuration of a Raft group."""

    voters: list[int] = field(default_factory=list)
    learners: list[int] = field(default_factory=list)
    voters_outgoing: list[int] = field(default_factory=list)
    learners_next: list[int] = field(default_factory=list)
    auto_leave: bool = False


@dataclass
class Snapshot:
    """A state machine snapshot and the log position it covers."""

    data: Optional[bytes] = None
    index: int = 0
    term: int = 0
    conf_state: ConfState = field(default_factory=ConfState)

    def is_empty(self) -> bool:
        return self.index == 0


@dataclass
class Message:
    """A message exchanged between Raft peers or with local threads."""

    type: MessageType = MessageType.MSG_HUP
    to: int = 0
    from_: int = 0
    term: int = 0
    log_term: int = 0
    index: int = 0
    entries: list[Entry] = field(default_factory=list)
    commit: int = 0
    vote: int = 0
    snapshot: Optional[Snapshot] = None
    reject: bool = False
    reject_hint: int = 0
    context: Optional[bytes] = None
    responses: list[Message] = field(default_factory=list)