"""Nondeterministic Buchi automaton over arbitrary hashable states."""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Hashable, Iterable


@dataclass(frozen=True)
class NbaTransition:
    src: Hashable
    label: Any
    dst: Hashable


@dataclass
class NBA:
    """States are kept in insertion order; that order defines ``index_of``."""
    states: list[Hashable]
    transitions: list[NbaTransition]
    start: set[Hashable]
    accept: set[Hashable]
    state_labels: dict[Hashable, Any] = field(default_factory=dict)
    _index: dict[Hashable, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        self._index = {q: i for i, q in enumerate(self.states, start=1)}

    def index_of(self, state: Hashable) -> int:
        """Dense 1-based index of a state."""
        return self._index[state]

    def successors(self, state: Hashable) -> list[tuple[Any, Hashable]]:
        """Outgoing (label, target) pairs, in transition order."""
        return [(t.label, t.dst) for t in self.transitions if t.src == state]

    def is_accepting(self, state: Hashable) -> bool:
        return state in self.accept


def make_nba(states: Iterable[tuple[Hashable, Any]],
             transitions: Iterable[tuple[Hashable, Any, Hashable]],
             start: Iterable[Hashable],
             accept: Iterable[Hashable]) -> NBA:
    """Build an NBA from (state, label) pairs and (src, label, dst) triples.

    States that only occur in transitions, start or accept are added too,
    without a label.
    """
    order: dict[Hashable, None] = {}
    labels: dict[Hashable, Any] = {}
    for q, label in states:
        order.setdefault(q)
        if label is not None:
            labels[q] = label
    edges = [NbaTransition(src, label, dst) for src, label, dst in transitions]
    start, accept = list(start), list(accept)
    for t in edges:
        order.setdefault(t.src)
        order.setdefault(t.dst)
    for q in start + accept:
        order.setdefault(q)
    return NBA(
        states=list(order),
        transitions=edges,
        start=set(start),
        accept=set(accept),
        state_labels=labels,
    )
