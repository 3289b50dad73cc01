"""Conversion between parsed HOA documents and NBAs.

Only Buchi acceptance with a single acceptance set survives the round trip:
``hoa_to_nba`` drops aliases, metadata and generalized acceptance, and
splits every conjunctive edge into one transition per successor.
"""
from __future__ import annotations
import logging
from omegahoa.hoa_model import (
    InfCond, Buchi, NumStates, AP, Acceptance, Start, Tool, AcceptanceName,
    EdgeItem, BodyItem, HoaDocument,
)
from omegahoa.nba import NBA, make_nba

log = logging.getLogger("omegahoa.bridge")

TOOL_NAME = "omegahoa"


def hoa_to_nba(document: HoaDocument) -> NBA:
    """Convert a parsed HOA document to an NBA over integer states.

    A state is accepting iff its record carries an acceptance signature.
    """
    states = [(b.index, b.label) for b in document.body]
    transitions = [
        (b.index, e.label, target)
        for b in document.body
        for e in b.edges
        for target in e.targets
    ]
    accept = [b.index for b in document.body if b.acc_sig is not None]
    nba = make_nba(states, transitions, document.start_states, accept)
    log.debug(f"hoa_to_nba: {len(nba.states)} states, "
              f"{len(nba.transitions)} transitions")
    return nba


def nba_to_hoa(nba: NBA, aps: list[str] | None = None,
               tool: str = TOOL_NAME) -> HoaDocument:
    """Convert an NBA to a HOA document with Buchi acceptance.

    Args:
        nba: the automaton; state i is written as HOA state index_of(i) - 1
        aps: AP names to declare, needed when transition labels refer to APs
        tool: value of the tool: header item
    """
    def node(q) -> int:
        return nba.index_of(q) - 1

    header = [NumStates(len(nba.states))]
    if aps is not None:
        header.append(AP(tuple(aps)))
    header.append(Acceptance(1, InfCond(0)))
    start = sorted(node(q) for q in nba.start)
    if start:
        header.append(Start(tuple(start)))
    header.append(Tool(tool))
    header.append(AcceptanceName(Buchi()))

    body = [
        BodyItem(
            index=node(q),
            acc_sig=(0,) if nba.is_accepting(q) else None,
            edges=tuple(EdgeItem(targets=(node(dst),), label=label)
                        for label, dst in nba.successors(q)),
        )
        for q in sorted(nba.states, key=node)
    ]
    log.debug(f"nba_to_hoa: {len(body)} states, start {start}")
    return HoaDocument(header=tuple(header), body=tuple(body))
