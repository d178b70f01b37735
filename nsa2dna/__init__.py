from .nsa import NSA, NSAError, UnknownSymbolError
from .tree import Annotation, CapacityExceededError, Colored, PHI, Phi, TEMPLAR, Templar, Transition, TreeState
from .dna import DNA, DNAEdge, ReachabilityEnumerator, determinize
from .parser import NSAParseError, load_nsa, parse_nsa
from .serializer import dump_dna_table, format_dna, write_dna

__all__ = [
    "NSA",
    "NSAError",
    "UnknownSymbolError",
    "Annotation",
    "CapacityExceededError",
    "Colored",
    "Templar",
    "Phi",
    "TEMPLAR",
    "PHI",
    "Transition",
    "TreeState",
    "DNA",
    "DNAEdge",
    "ReachabilityEnumerator",
    "determinize",
    "NSAParseError",
    "load_nsa",
    "parse_nsa",
    "dump_dna_table",
    "format_dna",
    "write_dna",
]
