import pytest

from nsa2dna import NSA


@pytest.fixture
def green_step_nsa():
    # 0 -a-> 1, G_0 = {1}
    return NSA(
        state_count=2,
        start_states={0},
        transitions={"a": {0: {1}}},
        red_sets=[set()],
        green_sets=[{1}],
    )


@pytest.fixture
def two_colors_nsa():
    # Single state looping on a; only the second green set accepts it.
    return NSA(
        state_count=1,
        start_states={0},
        transitions={"a": {0: {0}}},
        red_sets=[set(), set()],
        green_sets=[set(), {0}],
    )


@pytest.fixture
def empty_green_nsa():
    # Single looping state that no green set accepts.
    return NSA(
        state_count=1,
        start_states={0},
        transitions={"a": {0: {0}}},
        red_sets=[set()],
        green_sets=[set()],
    )


@pytest.fixture
def mixed_nsa():
    # 0 -a-> 1, 0 -b-> 0, 1 -b-> 0, G_0 = {1}
    return NSA(
        state_count=2,
        start_states={0},
        transitions={"a": {0: {1}}, "b": {0: {0}, 1: {0}}},
        red_sets=[set()],
        green_sets=[{1}],
    )


def _assert_well_formed(state):
    count = state.node_count
    assert state.parent[0] is None
    assert all(p is not None for p in state.parent[1:count])
    assert all(p is None for p in state.parent[count:])
    assert all(a is not None for a in state.annotation[:count])
    assert all(a is None for a in state.annotation[count:])
    for i in range(1, count):
        assert state.parent[i] < i

    for owner in state.owner:
        if owner is None:
            continue
        assert 0 <= owner < count
        node, steps = owner, 0
        while node != 0:
            node = state.parent[node]
            steps += 1
            assert steps <= count


@pytest.fixture
def assert_well_formed():
    return _assert_well_formed
