"""
serializer.py

Text renderings of a DNA:

- format_dna: the Graphviz-like state/edge listing written by the CLI
- dump_dna_table: a compact table for humans, one row per (state, destination)
"""

from __future__ import annotations

from typing import Dict, List

from .dna import DNA


def format_dna(dna: DNA) -> str:
    lines: List[str] = []
    for i, state in enumerate(dna.states):
        lines.append(f'\t\tQ{i} [label="{state.label()}"]')
    for edge in dna.edges:
        lines.append(f"\t\t\t\t{edge}")
    return "".join(line + "\n" for line in lines)


def write_dna(dna: DNA, path: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write(format_dna(dna))


def _render_table(headers: List[str], rows: List[List[str]]) -> str:
    widths = [max(map(len, column)) for column in zip(headers, *rows)]

    def render(cells: List[str]) -> str:
        return " | ".join(cell.ljust(w) for cell, w in zip(cells, widths)).rstrip()

    rule = "-+-".join("-" * w for w in widths)
    return "\n".join([render(headers), rule] + [render(r) for r in rows])


def dump_dna_table(dna: DNA) -> str:
    # Columns: State | Markers | Tree | Dest | Labels
    by_source: Dict[int, Dict[int, List[str]]] = {}
    for edge in dna.edges:
        by_source.setdefault(edge.source, {}).setdefault(edge.target, []).append(edge.label)

    rows: List[List[str]] = []
    for s, state in enumerate(dna.states):
        mark = "START" if s == 0 else ""
        groups = by_source.get(s, {})
        if not groups:
            rows.append([f"Q{s}", mark, state.label(), "", ""])
            continue

        first_row = True
        for dst in sorted(groups):
            rows.append([
                f"Q{s}" if first_row else "",
                mark if first_row else "",
                state.label() if first_row else "",
                f"Q{dst}",
                ", ".join(groups[dst]),
            ])
            first_row = False

    table = _render_table(["State", "Markers", "Tree", "Dest", "Labels"], rows)
    return f"DNA: {len(dna.states)} states, {len(dna.edges)} transitions\n{table}"
