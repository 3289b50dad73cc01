"""Dataclasses for the HOA (Hanoi Omega-Automata) document representation."""
from __future__ import annotations
from dataclasses import dataclass, fields
from enum import Enum
from typing import Union


# --- Expression nodes ---

class _Node:
    """Base of label and acceptance expression nodes.

    Equality and hashing walk the tree with an explicit stack, so long
    conjunctions and disjunctions compare without hitting the recursion limit.
    """

    def _children(self) -> list:
        return [getattr(self, f.name) for f in fields(self)]

    def __eq__(self, other):
        if self.__class__ is not other.__class__:
            return NotImplemented
        stack = [(self, other)]
        while stack:
            a, b = stack.pop()
            if isinstance(a, _Node):
                if a.__class__ is not b.__class__:
                    return False
                stack.extend(zip(a._children(), b._children()))
            elif a != b:
                return False
        return True

    def __hash__(self):
        flat = []
        stack = [self]
        while stack:
            node = stack.pop()
            if isinstance(node, _Node):
                flat.append(node.__class__.__name__)
                stack.extend(node._children())
            else:
                flat.append(node)
        return hash(tuple(flat))


# --- Label expressions ---

@dataclass(frozen=True, eq=False)
class LabelBool(_Node):
    value: bool

@dataclass(frozen=True, eq=False)
class ApRef(_Node):
    """Reference to an atomic proposition by its declared index."""
    index: int

@dataclass(frozen=True, eq=False)
class AliasRef(_Node):
    name: str  # without the leading '@'

@dataclass(frozen=True, eq=False)
class LabelNot(_Node):
    operand: LabelExpr

@dataclass(frozen=True, eq=False)
class LabelAnd(_Node):
    left: LabelExpr
    right: LabelExpr

@dataclass(frozen=True, eq=False)
class LabelOr(_Node):
    left: LabelExpr
    right: LabelExpr

LabelExpr = Union[LabelBool, ApRef, AliasRef, LabelNot, LabelAnd, LabelOr]


# --- Acceptance conditions ---
# No negation node: complementation only exists on the Fin/Inf atoms.

@dataclass(frozen=True, eq=False)
class FinCond(_Node):
    index: int

@dataclass(frozen=True, eq=False)
class InfCond(_Node):
    index: int

@dataclass(frozen=True, eq=False)
class CompFinCond(_Node):
    """Fin(!i)"""
    index: int

@dataclass(frozen=True, eq=False)
class CompInfCond(_Node):
    """Inf(!i)"""
    index: int

@dataclass(frozen=True, eq=False)
class AccAnd(_Node):
    left: AccCond
    right: AccCond

@dataclass(frozen=True, eq=False)
class AccOr(_Node):
    left: AccCond
    right: AccCond

@dataclass(frozen=True, eq=False)
class AccBool(_Node):
    value: bool

AccCond = Union[FinCond, InfCond, CompFinCond, CompInfCond, AccAnd, AccOr, AccBool]


# --- Acceptance names (acc-name: descriptors) ---

class MinMax(str, Enum):
    MIN = "min"
    MAX = "max"

class EvenOdd(str, Enum):
    EVEN = "even"
    ODD = "odd"

@dataclass(frozen=True)
class Buchi:
    pass

@dataclass(frozen=True)
class CoBuchi:
    pass

@dataclass(frozen=True)
class GeneralizedBuchi:
    count: int

@dataclass(frozen=True)
class GeneralizedCoBuchi:
    count: int

@dataclass(frozen=True)
class Streett:
    count: int

@dataclass(frozen=True)
class Rabin:
    count: int

@dataclass(frozen=True)
class GeneralizedRabin:
    count: int
    sizes: tuple[int, ...]  # one entry per pair

@dataclass(frozen=True)
class Parity:
    min_max: MinMax
    even_odd: EvenOdd
    count: int

@dataclass(frozen=True)
class AllAccepting:
    pass

@dataclass(frozen=True)
class NoneAccepting:
    pass

AccName = Union[Buchi, CoBuchi, GeneralizedBuchi, GeneralizedCoBuchi, Streett,
                Rabin, GeneralizedRabin, Parity, AllAccepting, NoneAccepting]


# --- Header items ---

@dataclass(frozen=True)
class NumStates:
    count: int

@dataclass(frozen=True)
class AP:
    names: tuple[str, ...]

@dataclass(frozen=True)
class Alias:
    name: str
    expr: LabelExpr

@dataclass(frozen=True)
class Acceptance:
    count: int  # number of acceptance sets Fin/Inf may refer to
    condition: AccCond

@dataclass(frozen=True)
class Start:
    states: tuple[int, ...]  # conjunction of state indices

@dataclass(frozen=True)
class Tool:
    name: str
    version: str | None = None

@dataclass(frozen=True)
class Name:
    text: str

@dataclass(frozen=True)
class Properties:
    names: tuple[str, ...]

@dataclass(frozen=True)
class AcceptanceName:
    descriptor: AccName

HeaderItem = Union[NumStates, AP, Alias, Acceptance, Start, Tool, Name,
                   Properties, AcceptanceName]


# --- Body ---

@dataclass(frozen=True)
class EdgeItem:
    """An edge from the enclosing state to the conjunction of ``targets``."""
    targets: tuple[int, ...]
    label: LabelExpr | None = None
    acc_sig: tuple[int, ...] | None = None

    def __post_init__(self):
        if not self.targets:
            raise ValueError("An edge needs at least one successor state")


@dataclass(frozen=True)
class BodyItem:
    index: int
    label: LabelExpr | None = None
    description: str | None = None
    acc_sig: tuple[int, ...] | None = None
    edges: tuple[EdgeItem, ...] = ()


# --- Top-level document ---

@dataclass(frozen=True)
class HoaDocument:
    header: tuple[HeaderItem, ...] = ()
    body: tuple[BodyItem, ...] = ()

    @property
    def start_states(self) -> list[int]:
        """Union of all Start: items, in declaration order."""
        return [q for item in self.header if isinstance(item, Start)
                for q in item.states]

    @property
    def ap_names(self) -> tuple[str, ...]:
        for item in self.header:
            if isinstance(item, AP):
                return item.names
        return ()

    @property
    def aliases(self) -> dict[str, LabelExpr]:
        return {item.name: item.expr for item in self.header
                if isinstance(item, Alias)}
