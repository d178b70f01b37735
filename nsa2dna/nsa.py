"""
nsa.py

Nondeterministic automaton with Streett-style acceptance.

Acceptance is given by paired red (forbidding) and green (accepting) state
sets, both indexed by annotation. The determinization only needs two
primitives from the automaton:

- transition_function(states, excluded, symbol): successors of a state set,
  minus every red set named in `excluded`
- retain_green(states, annotation): keep only states of one green set
"""

from __future__ import annotations

from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Set, Tuple


class NSAError(ValueError):
    pass


class UnknownSymbolError(LookupError):
    def __init__(self, symbol: str, alphabet: Sequence[str]) -> None:
        super().__init__(f"Symbol {symbol!r} is not in the alphabet {list(alphabet)!r}")
        self.symbol = symbol


class NSA:
    """
    Immutable description of the input automaton.

    transitions[symbol][state] is the set of successors of `state` on `symbol`.
    The table is total: states without successors map to an empty set.
    """

    def __init__(
        self,
        state_count: int,
        start_states: Iterable[int],
        transitions: Mapping[str, Mapping[int, Iterable[int]]],
        red_sets: Sequence[Iterable[int]],
        green_sets: Sequence[Iterable[int]],
        alphabet: Optional[Sequence[str]] = None,
    ):
        if state_count < 1:
            raise NSAError("An NSA needs at least one state")
        if not green_sets:
            raise NSAError("An NSA needs at least one green set")
        if len(red_sets) != len(green_sets):
            raise NSAError(
                f"Red and green sets must be paired: got {len(red_sets)} red and {len(green_sets)} green"
            )

        self._state_count = state_count
        self._start_states = self._checked("start states", start_states)
        self._red_sets = tuple(self._checked(f"R_{i}", s) for i, s in enumerate(red_sets))
        self._green_sets = tuple(self._checked(f"G_{i}", s) for i, s in enumerate(green_sets))

        if alphabet is None:
            alphabet = list(transitions.keys())
        self._alphabet: Tuple[str, ...] = tuple(alphabet)
        if len(set(self._alphabet)) != len(self._alphabet):
            raise NSAError(f"Duplicate symbols in alphabet {list(self._alphabet)!r}")

        unknown = [sym for sym in transitions if sym not in self._alphabet]
        if unknown:
            raise NSAError(f"Transitions use symbols outside the alphabet: {unknown!r}")

        self._transitions: Dict[str, Tuple[FrozenSet[int], ...]] = {}
        for sym in self._alphabet:
            row = transitions.get(sym, {})
            table: List[FrozenSet[int]] = [frozenset()] * state_count
            for src, dsts in row.items():
                if not 0 <= src < state_count:
                    raise NSAError(f"Transition on {sym!r} leaves undeclared state {src}")
                table[src] = self._checked(f"successors of {src} on {sym!r}", dsts)
            self._transitions[sym] = tuple(table)

    def _checked(self, what: str, states: Iterable[int]) -> FrozenSet[int]:
        out = frozenset(states)
        bad = sorted(s for s in out if not 0 <= s < self._state_count)
        if bad:
            raise NSAError(f"{what} reference undeclared states {bad}")
        return out

    # -----------------------------
    # Sizes
    # -----------------------------

    @property
    def state_count(self) -> int:
        return self._state_count

    @property
    def annotation_count(self) -> int:
        return len(self._green_sets)

    @property
    def n_prime(self) -> int:
        # Bound on live tree nodes.
        return self._state_count * (self.annotation_count + 1)

    @property
    def capacity(self) -> int:
        # Spawning places children at index + n' and index + 2n' before packing.
        return 3 * self.n_prime

    # -----------------------------
    # Accessors
    # -----------------------------

    @property
    def alphabet(self) -> Tuple[str, ...]:
        return self._alphabet

    @property
    def start_states(self) -> Set[int]:
        return set(self._start_states)

    @property
    def red_sets(self) -> Tuple[FrozenSet[int], ...]:
        return self._red_sets

    @property
    def green_sets(self) -> Tuple[FrozenSet[int], ...]:
        return self._green_sets

    def successors(self, state: int, symbol: str) -> FrozenSet[int]:
        return self._row(symbol)[state]

    # -----------------------------
    # Primitives used by the tree construction
    # -----------------------------

    def transition_function(self, states: Iterable[int], excluded: Iterable[int], symbol: str) -> Set[int]:
        row = self._row(symbol)
        result: Set[int] = set()
        for s in states:
            result |= row[s]
        for annotation in excluded:
            result -= self._red_sets[annotation]
        return result

    def retain_green(self, states: Set[int], annotation: int) -> None:
        states &= self._green_sets[annotation]

    def _row(self, symbol: str) -> Tuple[FrozenSet[int], ...]:
        try:
            return self._transitions[symbol]
        except KeyError:
            raise UnknownSymbolError(symbol, self._alphabet) from None

    def __repr__(self) -> str:
        return (
            f"NSA(states={self._state_count}, start={sorted(self._start_states)}, "
            f"alphabet={list(self._alphabet)}, annotations={self.annotation_count})"
        )
