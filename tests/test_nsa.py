import pytest

from nsa2dna import NSA, NSAError, UnknownSymbolError


def _nsa(**overrides):
    kwargs = dict(
        state_count=3,
        start_states={0},
        transitions={"a": {0: {1, 2}, 1: {2}}, "b": {2: {0}}},
        red_sets=[{2}, set()],
        green_sets=[{1}, {2}],
    )
    kwargs.update(overrides)
    return NSA(**kwargs)


class TestConstruction:
    def test_sizes(self):
        nsa = _nsa()
        assert nsa.state_count == 3
        assert nsa.annotation_count == 2
        assert nsa.n_prime == 9
        assert nsa.capacity == 27

    def test_alphabet_follows_transition_order(self):
        assert _nsa().alphabet == ("a", "b")

    def test_explicit_alphabet_adds_silent_symbols(self):
        nsa = _nsa(alphabet=["b", "a", "c"])
        assert nsa.alphabet == ("b", "a", "c")
        assert nsa.transition_function({0, 1, 2}, set(), "c") == set()

    def test_start_states_are_a_copy(self):
        nsa = _nsa()
        starts = nsa.start_states
        starts.add(2)
        assert nsa.start_states == {0}

    def test_missing_rows_are_empty(self):
        nsa = _nsa()
        assert nsa.successors(2, "a") == frozenset()
        assert nsa.successors(0, "a") == frozenset({1, 2})

    def test_requires_a_green_set(self):
        with pytest.raises(NSAError):
            _nsa(red_sets=[], green_sets=[])

    def test_requires_paired_sets(self):
        with pytest.raises(NSAError, match="paired"):
            _nsa(red_sets=[set()])

    def test_requires_states(self):
        with pytest.raises(NSAError):
            _nsa(state_count=0)

    def test_rejects_undeclared_states(self):
        with pytest.raises(NSAError):
            _nsa(transitions={"a": {0: {5}}})
        with pytest.raises(NSAError):
            _nsa(green_sets=[{1}, {7}])
        with pytest.raises(NSAError):
            _nsa(start_states={3})

    def test_rejects_symbols_outside_explicit_alphabet(self):
        with pytest.raises(NSAError):
            _nsa(alphabet=["a"])


class TestPrimitives:
    def test_transition_unions_successors(self):
        assert _nsa().transition_function({0, 1}, set(), "a") == {1, 2}

    def test_transition_removes_excluded_red_sets(self):
        nsa = _nsa()
        assert nsa.transition_function({0}, {0}, "a") == {1}
        assert nsa.transition_function({0}, {1}, "a") == {1, 2}

    def test_transition_does_not_mutate_input(self):
        states = {0}
        _nsa().transition_function(states, {0}, "a")
        assert states == {0}

    def test_unknown_symbol_is_fatal(self):
        with pytest.raises(UnknownSymbolError) as info:
            _nsa().transition_function({0}, set(), "z")
        assert info.value.symbol == "z"
        assert "'z'" in str(info.value)

    def test_retain_green_is_in_place(self):
        states = {0, 1, 2}
        _nsa().retain_green(states, 1)
        assert states == {2}
