# raftkit

Building blocks for the leader side of a Raft consensus implementation.

- `raftkit.state.StateType`: the replication state of a follower
  (`PROBE`, `REPLICATE`, `SNAPSHOT`), printed as `StateProbe`,
  `StateReplicate` and `StateSnapshot`.
- `raftkit.inflights.Inflights`: a bounded ring of in-flight append
  messages, limited by count and, optionally, by total bytes (a `max_bytes`
  of 0 means no byte limit). Methods: `add`, `free_le`, `full`, `count`,
  `reset`, `clone`.
- `raftkit.progress.Progress`: the leader's view of one follower: `match`
  and `next` indexes, state transitions (`become_probe`, `become_replicate`,
  `become_snapshot`), acknowledgement and rejection handling (`maybe_update`,
  `maybe_decr_to`), send accounting (`update_on_entries_send`) and flow
  pausing (`is_paused`). `format_progress_map` renders a mapping of ids to
  progresses, one line per id in ascending order.
- `raftkit.tracker.ProgressTracker`: holds a `TrackerConfig` (incoming and
  outgoing voter sets, learners, learners-next, auto-leave), the progress of
  every peer and the votes of the current election. Methods: `is_singleton`,
  `visit` (ascending id order), `voter_nodes`, `learner_nodes`,
  `reset_votes`, `record_vote` (only the first vote of a node counts).
- `raftkit.types`: dataclasses `Entry`, `HardState`, `ConfState`,
  `Snapshot` and `Message`, and the enums `MessageType` and `EntryType`.
  `Entry.size()` returns the size of the entry's protocol buffer encoding.
- `raftkit.util`: message classification (`is_local_msg`,
  `is_response_msg`, `vote_resp_msg_type`), entry sizes (`ents_size`,
  `limit_size`, `payload_size`, `payloads_size`) and concise descriptions
  for debugging (`describe_entry`, `describe_entries`, `describe_message`,
  `describe_hard_state`, `describe_conf_state`, `describe_snapshot`).

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from raftkit.inflights import Inflights
from raftkit.progress import Progress, format_progress_map
from raftkit.state import StateType

window = Inflights(size=4, max_bytes=0)
for index in range(1, 5):
    window.add(index, 100)
assert window.full()
window.free_le(2)
assert window.count() == 2

pr = Progress(match=1, next=2, inflights=Inflights(256, 0))
pr.become_replicate()
pr.update_on_entries_send(3, 300, pr.next)
print(pr)                              # StateReplicate match=1 next=5 inactive inflight=1
print(format_progress_map({2: pr}), end="")
assert pr.state is StateType.REPLICATE
```

Describing entries:

```python
from raftkit.types import Entry, EntryType
from raftkit.util import describe_entry, limit_size

entry = Entry(term=1, index=2, type=EntryType.ENTRY_NORMAL, data=b"hello")
print(describe_entry(entry, None))     # 1/2 EntryNormal "hello"
print(describe_entry(entry, lambda data: data.decode().upper()))  # 1/2 EntryNormal HELLO

entries = [Entry(term=4, index=4), Entry(term=5, index=5)]
assert limit_size(entries, 0) == entries[:1]   # the first entry is always kept
```

Misuse, such as adding to a full `Inflights` window, sending appends from an
unhandled progress state or asking for the response type of a message that is
not a vote, raises an exception rather than returning a status.

## What this package does not do

It is a set of parts, not a working Raft node. There is no log, no storage,
no election or replication loop and no network transport. `ProgressTracker`
keeps votes and progress but does not compute the committed index, quorum
activity or an election result, and it does not build a `ConfState` from its
configuration. `describe_entry` renders every entry's payload with the
formatter; it does not decode configuration-change entries.