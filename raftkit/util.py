"""Message classification, debug descriptions and entry size helpers."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import Optional

from .types import ConfState, Entry, HardState, Message, MessageType, Snapshot

EntryFormatter = Callable[[bytes], str]

_NONE = 0
_LOCAL_APPEND_THREAD = (1 << 64) - 1
_LOCAL_APPLY_THREAD = (1 << 64) - 2

_LOCAL_MSGS = frozenset(
    {
        MessageType.MSG_HUP,
        MessageType.MSG_BEAT,
        MessageType.MSG_UNREACHABLE,
        MessageType.MSG_SNAP_STATUS,
        MessageType.MSG_CHECK_QUORUM,
        MessageType.MSG_STORAGE_APPEND,
        MessageType.MSG_STORAGE_APPEND_RESP,
        MessageType.MSG_STORAGE_APPLY,
        MessageType.MSG_STORAGE_APPLY_RESP,
    }
)

_RESPONSE_MSGS = frozenset(
    {
        MessageType.MSG_APP_RESP,
        MessageType.MSG_VOTE_RESP,
        MessageType.MSG_HEARTBEAT_RESP,
        MessageType.MSG_UNREACHABLE,
        MessageType.MSG_READ_INDEX_RESP,
        MessageType.MSG_PRE_VOTE_RESP,
        MessageType.MSG_STORAGE_APPEND_RESP,
        MessageType.MSG_STORAGE_APPLY_RESP,
    }
)

_QUOTE_ESCAPES = {
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
    '"': '\\"',
    "\\": "\\\\",
}


def is_local_msg(msg_type: MessageType) -> bool:
    """Return True for messages that never leave the local node."""
    return msg_type in _LOCAL_MSGS


def is_response_msg(msg_type: MessageType) -> bool:
    """Return True for messages that answer another message."""
    return msg_type in _RESPONSE_MSGS


def vote_resp_msg_type(msg_type: MessageType) -> MessageType:
    """Map a vote or pre-vote request type to its response type."""
    if msg_type == MessageType.MSG_VOTE:
        return MessageType.MSG_VOTE_RESP
    if msg_type == MessageType.MSG_PRE_VOTE:
        return MessageType.MSG_PRE_VOTE_RESP
    raise ValueError(f"not a vote message: {msg_type}")


def _go_list(values: Optional[Sequence[int]]) -> str:
    return "[" + " ".join(str(v) for v in (values or ())) + "]"


def _quote(data: bytes) -> str:
    """Quote bytes as a double-quoted string with escapes for unprintables."""
    out = ['"']
    for ch in data.decode("utf-8", "surrogateescape"):
        cp = ord(ch)
        if 0xDC80 <= cp <= 0xDCFF:
            out.append(f"\\x{cp - 0xDC00:02x}")
        elif ch in _QUOTE_ESCAPES:
            out.append(_QUOTE_ESCAPES[ch])
        elif ch.isprintable():
            out.append(ch)
        elif cp < 0x20 or cp == 0x7F:
            out.append(f"\\x{cp:02x}")
        elif cp < 0x10000:
            out.append(f"\\u{cp:04x}")
        else:
            out.append(f"\\U{cp:08x}")
    out.append('"')
    return "".join(out)


def describe_hard_state(hs: HardState) -> str:
    """Describe a HardState concisely."""
    vote = f" Vote:{hs.vote}" if hs.vote != 0 else ""
    return f"Term:{hs.term}{vote} Commit:{hs.commit}"


def describe_conf_state(state: ConfState) -> str:
    """Describe a ConfState concisely."""
    return (
        f"Voters:{_go_list(state.voters)} "
        f"VotersOutgoing:{_go_list(state.voters_outgoing)} "
        f"Learners:{_go_list(state.learners)} "
        f"LearnersNext:{_go_list(state.learners_next)} "
        f"AutoLeave:{'true' if state.auto_leave else 'false'}"
    )


def describe_snapshot(snap: Snapshot) -> str:
    """Describe a Snapshot's metadata concisely."""
    return (
        f"Index:{snap.index} Term:{snap.term} "
        f"ConfState:{describe_conf_state(snap.conf_state)}"
    )


def _describe_target(node_id: int) -> str:
    if node_id == _NONE:
        return "None"
    if node_id == _LOCAL_APPEND_THREAD:
        return "AppendThread"
    if node_id == _LOCAL_APPLY_THREAD:
        return "ApplyThread"
    return f"{node_id:x}"


def describe_message(m: Message, formatter: Optional[EntryFormatter] = None) -> str:
    """Return a concise human-readable description of a message."""
    parts = [
        f"{_describe_target(m.from_)}->{_describe_target(m.to)} {m.type} "
        f"Term:{m.term} Log:{m.log_term}/{m.index}"
    ]
    if m.reject:
        parts.append(f" Rejected (Hint: {m.reject_hint})")
    if m.commit != 0:
        parts.append(f" Commit:{m.commit}")
    if m.vote != 0:
        parts.append(f" Vote:{m.vote}")
    if m.entries:
        described = ", ".join(describe_entry(e, formatter) for e in m.entries)
        parts.append(f" Entries:[{described}]")
    if m.snapshot is not None and not m.snapshot.is_empty():
        parts.append(f" Snapshot: {describe_snapshot(m.snapshot)}")
    if m.responses:
        described = ", ".join(describe_message(r, formatter) for r in m.responses)
        parts.append(f" Responses:[{described}]")
    return "".join(parts)


def describe_entry(e: Entry, formatter: Optional[EntryFormatter] = None) -> str:
    """Return a concise human-readable description of an entry.

    The payload is rendered with ``formatter``, or quoted when it is None.
    """
    fmt = formatter if formatter is not None else _quote
    formatted = fmt(e.data if e.data is not None else b"")
    if formatted:
        formatted = " " + formatted
    return f"{e.term}/{e.index} {e.type}{formatted}"


def describe_entries(
    entries: Iterable[Entry], formatter: Optional[EntryFormatter] = None
) -> str:
    """Describe each entry on its own newline-terminated line."""
    return "".join(describe_entry(e, formatter) + "\n" for e in entries)


def ents_size(entries: Iterable[Entry]) -> int:
    """Return the total encoded size of the entries."""
    return sum(e.size() for e in entries)


def limit_size(entries: Sequence[Entry], max_size: int) -> list[Entry]:
    """Return the longest prefix whose encoded size stays within ``max_size``.

    A non-empty input always yields at least its first entry, even when that
    entry alone exceeds the limit.
    """
    if not entries:
        return list(entries)
    size = entries[0].size()
    for limit, entry in enumerate(entries[1:], start=1):
        size += entry.size()
        if size > max_size:
            return list(entries[:limit])
    return list(entries)


def payload_size(e: Entry) -> int:
    """Return the size of the entry's payload, independent of index and term."""
    return len(e.data) if e.data is not None else 0


def payloads_size(entries: Iterable[Entry]) -> int:
    """Return the total payload size of the entries."""
    return sum(payload_size(e) for e in entries)