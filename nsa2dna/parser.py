r"""
parser.py

Reads an NSA from its Graphviz-like text description.

INPUT FORMAT (one item per line)

    q0 [label="*q0"]              start state
    q1 [label="q1"]               ordinary state
    q2 [label="*q2$"]             start state with an accepting mark
    q3 [label="q3$"]              ordinary state with an accepting mark
    q0 -> q1 [label=a]            transition on symbol a (label may be "quoted")
    R_0 1 2                       red set 0
    G_0 3                         green set 0 (state list may be empty)

The '$' mark is informational only: acceptance comes from the R_i / G_i lines.
Any other line (digraph header, braces, comments) is skipped.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional, Set

from .nsa import NSA

logger = logging.getLogger(__name__)


class NSAParseError(ValueError):
    def __init__(self, message: str, line_no: Optional[int] = None) -> None:
        super().__init__(f"{message} (line {line_no})" if line_no is not None else message)
        self.line_no = line_no


_STATE_RE      = re.compile(r'^\s*q(?P<id>\d+) \[label="(?P<start>\*?)q\d+\$?"\]\s*$')
_TRANSITION_RE = re.compile(r'^\s*q(?P<src>\d+) -> q(?P<dst>\d+) \[label=(?P<label>\S+)\]\s*$')
_SET_RE        = re.compile(r'^\s*(?P<color>\w)_(?P<index>\d+)(?: (?P<states>.*))?$')


def _parse_state_list(text: Optional[str], line_no: int) -> Set[int]:
    out: Set[int] = set()
    for tok in (text or "").split():
        if not tok.isdigit():
            raise NSAParseError(f"Bad state {tok!r} in set", line_no)
        out.add(int(tok))
    return out


def _collect_sets(sets: Dict[int, Set[int]], color: str) -> List[Set[int]]:
    expected = list(range(len(sets)))
    if sorted(sets) != expected:
        raise NSAParseError(f"{color} set indices must be 0..{len(sets) - 1}, got {sorted(sets)}")
    return [sets[i] for i in expected]


def parse_nsa(text: str) -> NSA:
    declared: Set[int] = set()
    start: Set[int] = set()
    transitions: Dict[str, Dict[int, Set[int]]] = {}  # insertion order is the alphabet order
    edges_seen: Dict[int, int] = {}                    # state -> first line using it
    red: Dict[int, Set[int]] = {}
    green: Dict[int, Set[int]] = {}

    for line_no, line in enumerate(text.splitlines(), start=1):
        if (m := _TRANSITION_RE.match(line)) is not None:
            src, dst = int(m.group("src")), int(m.group("dst"))
            symbol = m.group("label")
            if len(symbol) >= 2 and symbol[0] == symbol[-1] == '"':
                symbol = symbol[1:-1]
            transitions.setdefault(symbol, {}).setdefault(src, set()).add(dst)
            edges_seen.setdefault(src, line_no)
            edges_seen.setdefault(dst, line_no)
            continue

        if (m := _SET_RE.match(line)) is not None:
            color = m.group("color")
            index = int(m.group("index"))
            if color == "R":
                target = red
            elif color == "G":
                target = green
            else:
                raise NSAParseError(f"Unknown set color {color!r}, expected R or G", line_no)
            if index in target:
                raise NSAParseError(f"Duplicate set {color}_{index}", line_no)
            target[index] = _parse_state_list(m.group("states"), line_no)
            continue

        if (m := _STATE_RE.match(line)) is not None:
            q = int(m.group("id"))
            if q in declared:
                raise NSAParseError(f"State q{q} declared twice", line_no)
            declared.add(q)
            if m.group("start"):
                start.add(q)
            continue

        if line.strip():
            logger.debug("Skipping line %d: %r", line_no, line)

    if declared != set(range(len(declared))):
        raise NSAParseError(f"States must be numbered q0..q{len(declared) - 1}, got {sorted(declared)}")

    for q, line_no in edges_seen.items():
        if q not in declared:
            raise NSAParseError(f"Transition uses undeclared state q{q}", line_no)

    nsa = NSA(
        state_count=len(declared),
        start_states=start,
        transitions=transitions,
        red_sets=_collect_sets(red, "R"),
        green_sets=_collect_sets(green, "G"),
    )
    logger.info(
        "Parsed NSA: %d states, alphabet %s, %d annotations",
        nsa.state_count, list(nsa.alphabet), nsa.annotation_count,
    )
    return nsa


def load_nsa(path: str) -> NSA:
    with open(path, "r", encoding="utf-8") as f:
        return parse_nsa(f.read())
