import pytest

from raftkit.inflights import Inflights
from raftkit.progress import Progress, format_progress_map
from raftkit.state import StateType


def test_progress_string():
    ins = Inflights(1, 0)
    ins.add(123, 1)
    pr = Progress(
        match=1,
        next=2,
        state=StateType.SNAPSHOT,
        pending_snapshot=123,
        recent_active=False,
        msg_app_flow_paused=True,
        is_learner=True,
        inflights=ins,
    )
    expected = "StateSnapshot match=1 next=2 learner paused pendingSnap=123 inactive inflight=1[full]"
    assert str(pr) == expected


@pytest.mark.parametrize(
    ("state", "paused", "want"),
    [
        (StateType.PROBE, False, False),
        (StateType.PROBE, True, True),
        (StateType.REPLICATE, False, False),
        (StateType.REPLICATE, True, True),
        (StateType.SNAPSHOT, False, True),
        (StateType.SNAPSHOT, True, True),
    ],
)
def test_is_paused(state, paused, want):
    p = Progress(state=state, msg_app_flow_paused=paused, inflights=Inflights(256, 0))
    assert p.is_paused() is want


def test_resume():
    p = Progress(next=2, msg_app_flow_paused=True)
    p.maybe_decr_to(1, 1)
    assert p.msg_app_flow_paused is False
    p.msg_app_flow_paused = True
    p.maybe_update(2)
    assert p.msg_app_flow_paused is False


@pytest.mark.parametrize(
    ("progress", "want_next"),
    [
        (Progress(state=StateType.REPLICATE, match=1, next=5, inflights=Inflights(256, 0)), 2),
        (
            Progress(
                state=StateType.SNAPSHOT,
                match=1,
                next=5,
                pending_snapshot=10,
                inflights=Inflights(256, 0),
            ),
            11,
        ),
        (
            Progress(
                state=StateType.SNAPSHOT,
                match=1,
                next=5,
                pending_snapshot=0,
                inflights=Inflights(256, 0),
            ),
            2,
        ),
    ],
)
def test_become_probe(progress, want_next):
    progress.become_probe()
    assert progress.state == StateType.PROBE
    assert progress.match == 1
    assert progress.next == want_next


def test_become_replicate():
    p = Progress(state=StateType.PROBE, match=1, next=5, inflights=Inflights(256, 0))
    p.become_replicate()
    assert p.state == StateType.REPLICATE
    assert p.match == 1
    assert p.next == p.match + 1


def test_become_snapshot():
    p = Progress(state=StateType.PROBE, match=1, next=5, inflights=Inflights(256, 0))
    p.become_snapshot(10)
    assert p.state == StateType.SNAPSHOT
    assert p.match == 1
    assert p.pending_snapshot == 10


def test_reset_state_clears_inflights():
    ins = Inflights(4, 0)
    ins.add(3, 7)
    p = Progress(state=StateType.REPLICATE, msg_app_flow_paused=True, pending_snapshot=4, inflights=ins)
    p.reset_state(StateType.PROBE)
    assert p.state == StateType.PROBE
    assert p.msg_app_flow_paused is False
    assert p.pending_snapshot == 0
    assert ins.count() == 0


@pytest.mark.parametrize(
    ("update", "want_match", "want_next", "want_ok"),
    [
        (2, 3, 5, False),
        (3, 3, 5, False),
        (4, 4, 5, True),
        (5, 5, 6, True),
    ],
)
def test_update(update, want_match, want_next, want_ok):
    p = Progress(match=3, next=5)
    assert p.maybe_update(update) is want_ok
    assert p.match == want_match
    assert p.next == want_next


@pytest.mark.parametrize(
    ("state", "m", "n", "rejected", "last", "want", "want_next"),
    [
        (StateType.REPLICATE, 5, 10, 5, 5, False, 10),
        (StateType.REPLICATE, 5, 10, 4, 4, False, 10),
        (StateType.REPLICATE, 5, 10, 9, 9, True, 6),
        (StateType.PROBE, 0, 0, 0, 0, False, 0),
        (StateType.PROBE, 0, 10, 5, 5, False, 10),
        (StateType.PROBE, 0, 10, 9, 9, True, 9),
        (StateType.PROBE, 0, 2, 1, 1, True, 1),
        (StateType.PROBE, 0, 1, 0, 0, True, 1),
        (StateType.PROBE, 0, 10, 9, 2, True, 3),
        (StateType.PROBE, 0, 10, 9, 0, True, 1),
    ],
)
def test_maybe_decr(state, m, n, rejected, last, want, want_next):
    p = Progress(state=state, match=m, next=n)
    assert p.maybe_decr_to(rejected, last) is want
    assert p.match == m
    assert p.next == want_next


def test_update_on_entries_send_replicate():
    p = Progress(state=StateType.REPLICATE, match=4, next=5, inflights=Inflights(2, 0))
    p.update_on_entries_send(3, 30, 5)
    assert p.next == 8
    assert p.inflights.count() == 1
    assert p.msg_app_flow_paused is False
    p.update_on_entries_send(2, 20, 8)
    assert p.next == 10
    assert p.msg_app_flow_paused is True


def test_update_on_entries_send_probe():
    p = Progress(state=StateType.PROBE, next=5, inflights=Inflights(2, 0))
    p.update_on_entries_send(0, 0, 5)
    assert p.msg_app_flow_paused is False
    p.update_on_entries_send(1, 10, 5)
    assert p.msg_app_flow_paused is True
    assert p.inflights.count() == 0


def test_update_on_entries_send_snapshot_raises():
    p = Progress(state=StateType.SNAPSHOT, inflights=Inflights(2, 0))
    with pytest.raises(ValueError, match="StateSnapshot"):
        p.update_on_entries_send(1, 1, 1)


def test_format_progress_map_sorted():
    prs = {
        3: Progress(match=1, next=2, recent_active=True, inflights=Inflights(4, 0)),
        1: Progress(match=5, next=6, state=StateType.REPLICATE, recent_active=True, inflights=Inflights(4, 0)),
    }
    assert format_progress_map(prs) == (
        "1: StateReplicate match=5 next=6\n"
        "3: StateProbe match=1 next=2\n"
    )