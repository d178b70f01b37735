"""
dna.py

Reachability search over tree states: builds the deterministic automaton.

Starting from the initial tree, every alphabet symbol is applied to every
discovered tree; results are deduplicated structurally and explored once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Set, Tuple

from .nsa import NSA
from .tree import Transition, TreeState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DNAEdge:
    source: int
    target: int
    symbol: str
    k: Optional[int]

    @property
    def label(self) -> str:
        return f"{self.symbol}[{'' if self.k is None else self.k}]"

    def __str__(self) -> str:
        return f'Q{self.source} -> Q{self.target} [label="{self.label}"]'


@dataclass
class DNA:
    nsa: NSA
    states: List[TreeState]  # states[0] is the initial tree
    edges: List[DNAEdge]

    @property
    def initial(self) -> TreeState:
        return self.states[0]

    def index_of(self, state: TreeState) -> int:
        return self.states.index(state)

    def successor(self, index: int, symbol: str) -> Tuple[int, Optional[int]]:
        for edge in self.edges:
            if edge.source == index and edge.symbol == symbol:
                return edge.target, edge.k
        raise KeyError(f"No edge from Q{index} on {symbol!r}")


class ReachabilityEnumerator:
    def __init__(self, nsa: NSA):
        self.nsa = nsa
        self.initial = TreeState.initial(nsa)
        self._seen: Set[TreeState] = set()
        self._transitions: List[Transition] = []
        self._pending: List[TreeState] = []

    def __len__(self) -> int:
        return len(self._seen)

    def __contains__(self, state: TreeState) -> bool:
        return state in self._seen

    def add(self, state: TreeState) -> bool:
        # True when the state is new; only new states are queued for exploration.
        if state in self._seen:
            return False
        self._seen.add(state)
        self._pending.append(state)
        logger.debug("Tree #%d: %s", len(self._seen) - 1, state.label())
        return True

    def explore(self) -> None:
        self.add(self.initial)
        while self._pending:
            state = self._pending.pop()
            for symbol in self.nsa.alphabet:
                step = state.transition(symbol)
                self._transitions.append(step)
                self.add(step.result)

    def ordered_states(self) -> List[TreeState]:
        # Initial tree first, the rest by label.
        return sorted(self._seen, key=lambda s: (s != self.initial, s.label()))

    def build(self) -> DNA:
        if self.initial not in self._seen:
            self.explore()

        states = self.ordered_states()
        index = {state: i for i, state in enumerate(states)}
        edges = [
            DNAEdge(index[t.source], index[t.result], t.symbol, t.k)
            for t in self._transitions
        ]
        edges.sort(key=str)

        logger.info("DNA has %d states and %d transitions", len(states), len(edges))
        return DNA(nsa=self.nsa, states=states, edges=edges)


def determinize(nsa: NSA) -> DNA:
    enumerator = ReachabilityEnumerator(nsa)
    enumerator.explore()
    return enumerator.build()
