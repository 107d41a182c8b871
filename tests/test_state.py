import pytest

from raftkit.state import StateType


@pytest.mark.parametrize(
    ("state", "expected"),
    [
        (StateType.PROBE, "StateProbe"),
        (StateType.REPLICATE, "StateReplicate"),
        (StateType.SNAPSHOT, "StateSnapshot"),
    ],
)
def test_str(state, expected):
    assert str(state) == expected


def test_values_are_ordered_from_zero():
    looked_up = [StateType(i) for i in range(3)]
    assert looked_up == [StateType.PROBE, StateType.REPLICATE, StateType.SNAPSHOT]


def test_format_uses_str():
    assert f"{StateType(1)}" == "StateReplicate"
    assert format(StateType(2)) == "StateSnapshot"