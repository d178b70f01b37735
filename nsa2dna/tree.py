"""
tree.py

Annotated trees: the states of the deterministic automaton.

A TreeState is an immutable snapshot made of three parallel arrays:

- parent[i]      structural parent of slot i (None for the root and unused slots)
- annotation[i]  Colored(c) / TEMPLAR / PHI (None for unused slots)
- owner[q]       slot that owns NSA state q (None when q is not live)

Every transition thaws the arrays into a linked working tree, runs the four
stages (spawn, seniority, uniqueness, packing) on it and freezes the result into
a new TreeState. The source is never touched.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple, Union

from .nsa import NSA


# =============================================================================
# Annotations
# =============================================================================

@dataclass(frozen=True)
class Colored:
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Templar:
    # Speculative node proposing promotion to an unused color.
    def __str__(self) -> str:
        return "+"


@dataclass(frozen=True)
class Phi:
    # Templar that found no color left; never spawns.
    def __str__(self) -> str:
        return "f"


Annotation = Union[Colored, Templar, Phi]

TEMPLAR = Templar()
PHI = Phi()


class CapacityExceededError(RuntimeError):
    def __init__(self, message: str, label: str, symbol: str) -> None:
        super().__init__(f"{message} while reading {symbol!r} from tree {label}")
        self.label = label
        self.symbol = symbol


# =============================================================================
# Working arena
# =============================================================================

@dataclass(eq=False)
class _Node:
    index: int
    annotation: Annotation
    parent: Optional[_Node] = None
    children: List[_Node] = field(default_factory=list)
    states: Set[int] = field(default_factory=set)   # owned by this node or a descendant
    excluded: Set[int] = field(default_factory=set)  # colors forbidden on the path from the root

    def __repr__(self) -> str:
        return f"_Node({self.index}, {self.annotation}, states={sorted(self.states)})"


class _Arena:
    """
    Mutable overlay for one transition.

    Spawn works on a linked tree. Spawned children land at fixed offsets
    (index + n', index + 2n'), so two nodes may claim the same slot; seniority
    writes the tree back into flat arrays in pre-order and the node written
    last keeps the slot. Uniqueness and packing work on those arrays.
    """

    def __init__(self, source: TreeState, symbol: str):
        self.source = source
        self.symbol = symbol
        self.nsa = source.nsa
        self.size = self.nsa.capacity
        self.owner: List[Optional[int]] = list(source.owner)

        nodes: List[Optional[_Node]] = [None] * self.size
        for i, parent in enumerate(source.parent):
            if i != 0 and parent is None:
                continue
            node = _Node(i, source.annotation[i])
            if parent is not None:
                up = nodes[parent]
                up.children.append(node)
                node.parent = up
                node.excluded |= up.excluded
                if isinstance(up.annotation, Templar):
                    # A templar's child may never repeat the templar's parent color.
                    grand = up.parent.annotation
                    if isinstance(grand, Colored):
                        node.excluded.add(grand.value)
            nodes[i] = node
        self.root = nodes[0]

        for state, index in enumerate(self.owner):
            node = None if index is None else nodes[index]
            while node is not None:
                node.states.add(state)
                node = node.parent

        # Flat view, written by fix_seniority.
        self.parent: List[Optional[int]] = [None] * self.size
        self.annotation: List[Optional[Annotation]] = [None] * self.size

    def _live(self, i: int) -> bool:
        return i == 0 or self.parent[i] is not None

    # -----------------------------
    # Color bookkeeping
    # -----------------------------

    def available(self, node: _Node) -> Set[int]:
        return set(range(self.nsa.annotation_count)) - node.excluded

    def next_available(self, node: _Node) -> Optional[int]:
        """
        Color a colored node takes if it goes stale: scan cyclically from the
        color after its own, skipping excluded colors. May wrap back to its own,
        and keeps its own when every color is excluded.
        """
        if not isinstance(node.annotation, Colored):
            return None
        available = self.available(node)
        count = self.nsa.annotation_count
        for i in range(node.annotation.value + 1, 2 * count + 1):
            if i % count in available:
                return i % count
        return node.annotation.value

    # -----------------------------
    # Stage 1: spawn
    # -----------------------------

    def spawn(self, node: Optional[_Node] = None) -> None:
        if node is None:
            node = self.root
        for child in list(node.children):
            self.spawn(child)

        node.states = self.nsa.transition_function(node.states, node.excluded, self.symbol)
        n_prime = self.nsa.n_prime

        if isinstance(node.annotation, Templar):
            above = node.parent.annotation
            parent_color = above.value if isinstance(above, Colored) else None
            available = self.available(node)
            available.discard(parent_color)
            annotation = Colored(min(available)) if available else PHI
            child = self._place(node.index + n_prime, annotation, node)
            if parent_color is not None:
                child.excluded.add(parent_color)

        elif isinstance(node.annotation, Colored):
            if not node.children:
                self._place(node.index + 2 * n_prime, TEMPLAR, node)
            main = self._place(node.index + n_prime, Colored(self.next_available(node)), node)
            self.nsa.retain_green(main.states, node.annotation.value)

    def _place(self, index: int, annotation: Annotation, parent: _Node) -> _Node:
        if index >= self.size:
            raise CapacityExceededError(
                f"Spawn slot {index} is beyond capacity {self.size}",
                self.source.label(), self.symbol)

        node = _Node(index, annotation, parent=parent,
                     states=set(parent.states), excluded=set(parent.excluded))
        parent.children.append(node)
        return node

    # -----------------------------
    # Stage 2: seniority
    # -----------------------------

    def fix_seniority(self) -> List[Optional[int]]:
        # Returns the next available color of every colored slot.
        next_colors: List[Optional[int]] = [None] * self.size
        self._write(self.root, next_colors)

        for state in range(len(self.owner)):
            self.owner[state] = self._senior_owner(state)
        return next_colors

    def _write(self, node: _Node, next_colors: List[Optional[int]]) -> None:
        self.annotation[node.index] = node.annotation
        next_colors[node.index] = self.next_available(node)
        for child in node.children:
            self.parent[child.index] = node.index
            self._write(child, next_colors)

    def _senior_owner(self, state: int) -> Optional[int]:
        node = self.root
        while True:
            children = sorted(
                node.children,
                key=lambda n: (isinstance(n.annotation, Templar), n.index),
            )
            for child in children:
                if state in child.states:
                    node = child
                    break
            else:
                return node.index if state in node.states else None

    # -----------------------------
    # Stage 3: uniqueness (returns k)
    # -----------------------------

    def _emptiness(self, owned: List[bool]) -> List[bool]:
        # Parents always sit at lower indices than their children.
        empty = [True] * self.size
        for i in range(self.size - 1, -1, -1):
            if owned[i]:
                empty[i] = False
            up = self.parent[i]
            if up is not None and not empty[i]:
                empty[up] = False
        return empty

    def _owned(self) -> List[bool]:
        owned = [False] * self.size
        for index in self.owner:
            if index is not None:
                owned[index] = True
        return owned

    def fix_uniqueness(self, next_colors: List[Optional[int]]) -> Optional[int]:
        size = self.size
        unique = self._owned()
        empty = self._emptiness(unique)

        live_templar = [False] * size
        for i in range(1, size):
            if self._live(i) and isinstance(self.annotation[i], Templar) and not empty[i]:
                live_templar[self.parent[i]] = True

        stale = [False] * size
        for i in range(size):
            if isinstance(self.annotation[i], Colored) and not unique[i] and not live_templar[i]:
                stale[i] = True
                self.annotation[i] = Colored(next_colors[i])

        # Children of stale slots die; their descendants collapse onto the stale slot.
        dead = [False] * size
        for i in range(1, size):
            up = self.parent[i]
            if up is None:
                continue
            if dead[up]:
                dead[i] = True
                self.parent[i] = self.parent[up]
            elif stale[up]:
                dead[i] = True

        for state, index in enumerate(self.owner):
            if index is not None and dead[index]:
                self.owner[state] = self.parent[index]

        empty = self._emptiness(self._owned())
        for i in range(1, size):
            if empty[i]:
                self.parent[i] = None
                self.annotation[i] = None

        for i in range(size):
            if empty[i]:
                return 2 * i
            if stale[i] or isinstance(self.annotation[i], Phi):
                return 2 * i + 1
        return None

    # -----------------------------
    # Stage 4: packing
    # -----------------------------

    def pack(self) -> TreeState:
        parent: List[Optional[int]] = [None] * self.size
        annotation: List[Optional[Annotation]] = [None] * self.size
        annotation[0] = self.annotation[0]

        renumber = {0: 0}
        count = 1
        for i in range(1, self.size):
            if self.parent[i] is None:
                continue
            renumber[i] = count
            parent[count] = renumber[self.parent[i]]
            annotation[count] = self.annotation[i]
            count += 1

        owner = [None if index is None else renumber[index] for index in self.owner]
        return TreeState(self.nsa, tuple(parent), tuple(annotation), tuple(owner))


# =============================================================================
# Tree state
# =============================================================================

@dataclass(frozen=True)
class Transition:
    source: TreeState
    symbol: str
    result: TreeState
    k: Optional[int]


@dataclass(frozen=True)
class TreeState:
    """
    Canonical DNA state. Equality and hashing are structural over the three
    arrays; the owning NSA is carried along but not compared.
    """

    nsa: NSA = field(compare=False, repr=False)
    parent: Tuple[Optional[int], ...]
    annotation: Tuple[Optional[Annotation], ...]
    owner: Tuple[Optional[int], ...]

    @classmethod
    def initial(cls, nsa: NSA) -> TreeState:
        # Root alone, owning every start state, colored 0.
        size = nsa.capacity
        annotation: List[Optional[Annotation]] = [None] * size
        annotation[0] = Colored(0)
        starts = nsa.start_states
        owner = tuple(0 if q in starts else None for q in range(nsa.state_count))
        return cls(nsa, (None,) * size, tuple(annotation), owner)

    def transition(self, symbol: str) -> Transition:
        arena = _Arena(self, symbol)
        arena.spawn()
        next_colors = arena.fix_seniority()
        k = arena.fix_uniqueness(next_colors)
        return Transition(self, symbol, arena.pack(), k)

    @property
    def node_count(self) -> int:
        return 1 + sum(1 for p in self.parent if p is not None)

    def owned_by(self, node: int) -> Set[int]:
        return {q for q, o in enumerate(self.owner) if o == node}

    def label(self) -> str:
        # Parent segment covers slots 1..n'-1; the root's own entry is implicit.
        width = max(self.nsa.n_prime, 2)
        tree = " ".join("0" if p is None else str(p) for p in self.parent[1:width])

        states = " ".join("$" if o is None else str(o) for o in self.owner)

        annotations: List[str] = []
        for a in self.annotation:
            if a is None:
                break
            annotations.append(str(a))

        return f"[{tree}],[{states}],[{' '.join(annotations)}]"

    def __str__(self) -> str:
        return self.label()
