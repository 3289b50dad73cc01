"""Canonical HOA serializer, one renderer per AST variant.

Binary operators are always parenthesised so the output never depends on
operator precedence when it is parsed back.
"""
from __future__ import annotations
import logging
from omegahoa.hoa_model import (
    LabelExpr, LabelBool, ApRef, AliasRef, LabelNot, LabelAnd, LabelOr,
    AccCond, FinCond, InfCond, CompFinCond, CompInfCond, AccAnd, AccOr, AccBool,
    AccName, Buchi, CoBuchi, GeneralizedBuchi, GeneralizedCoBuchi, Streett,
    Rabin, GeneralizedRabin, Parity, AllAccepting, NoneAccepting,
    HeaderItem, NumStates, AP, Alias, Acceptance, Start, Tool, Name,
    Properties, AcceptanceName, EdgeItem, BodyItem, HoaDocument,
)

log = logging.getLogger("omegahoa")


def _quoted(text: str) -> str:
    return f'"{text}"'


def _bool(value: bool) -> str:
    return "t" if value else "f"


def _acc_sig(sig: tuple[int, ...]) -> str:
    return "{" + " ".join(str(i) for i in sig) + "}"


def _conjunction(indices) -> str:
    return "&".join(str(i) for i in indices)


def _render(root, atom, infix: dict, prefix: dict | None = None) -> str:
    """Render an expression tree with an explicit stack.

    ``infix`` and ``prefix`` map node types to operator symbols; any other
    node is handed to ``atom``. Pending output strings and subtrees share the
    stack, so arbitrarily deep trees render without recursion.
    """
    prefix = prefix or {}
    out = []
    stack = [root]
    while stack:
        node = stack.pop()
        if isinstance(node, str):
            out.append(node)
        elif type(node) in infix:
            stack.extend([")", node.right, f" {infix[type(node)]} ", node.left, "("])
        elif type(node) in prefix:
            stack.extend([node.operand, prefix[type(node)]])
        else:
            out.append(atom(node))
    return "".join(out)


def _label_atom(expr) -> str:
    if isinstance(expr, LabelBool):
        return _bool(expr.value)
    elif isinstance(expr, ApRef):
        return str(expr.index)
    elif isinstance(expr, AliasRef):
        return f"@{expr.name}"
    raise TypeError(f"Unknown label expression: {expr!r}")


def label_to_hoa(expr: LabelExpr) -> str:
    return _render(expr, _label_atom, {LabelAnd: "&", LabelOr: "|"},
                   {LabelNot: "!"})


def _acceptance_atom(cond) -> str:
    if isinstance(cond, FinCond):
        return f"Fin({cond.index})"
    elif isinstance(cond, InfCond):
        return f"Inf({cond.index})"
    elif isinstance(cond, CompFinCond):
        return f"Fin(!{cond.index})"
    elif isinstance(cond, CompInfCond):
        return f"Inf(!{cond.index})"
    elif isinstance(cond, AccBool):
        return _bool(cond.value)
    raise TypeError(f"Unknown acceptance condition: {cond!r}")


def acceptance_to_hoa(cond: AccCond) -> str:
    return _render(cond, _acceptance_atom, {AccAnd: "&", AccOr: "|"})


def acc_name_to_hoa(name: AccName) -> str:
    if isinstance(name, Buchi):
        return "Buchi"
    elif isinstance(name, CoBuchi):
        return "co-Buchi"
    elif isinstance(name, GeneralizedBuchi):
        return f"generalized-Buchi {name.count}"
    elif isinstance(name, GeneralizedCoBuchi):
        return f"generalized-co-Buchi {name.count}"
    elif isinstance(name, Streett):
        return f"Streett {name.count}"
    elif isinstance(name, Rabin):
        return f"Rabin {name.count}"
    elif isinstance(name, GeneralizedRabin):
        return " ".join(["generalized-Rabin", str(name.count)]
                        + [str(k) for k in name.sizes])
    elif isinstance(name, Parity):
        return f"parity {name.min_max.value} {name.even_odd.value} {name.count}"
    elif isinstance(name, AllAccepting):
        return "all"
    elif isinstance(name, NoneAccepting):
        return "none"
    raise TypeError(f"Unknown acceptance name: {name!r}")


def header_item_to_hoa(item: HeaderItem) -> str:
    if isinstance(item, NumStates):
        return f"States: {item.count}"
    elif isinstance(item, AP):
        return " ".join([f"AP: {len(item.names)}"]
                        + [_quoted(n) for n in item.names])
    elif isinstance(item, Alias):
        return f"Alias: @{item.name} {label_to_hoa(item.expr)}"
    elif isinstance(item, Acceptance):
        return f"Acceptance: {item.count} {acceptance_to_hoa(item.condition)}"
    elif isinstance(item, Start):
        return f"Start: {_conjunction(item.states)}"
    elif isinstance(item, Tool):
        if item.version is None:
            return f"tool: {_quoted(item.name)}"
        return f"tool: {_quoted(item.name)} {_quoted(item.version)}"
    elif isinstance(item, Name):
        return f"name: {_quoted(item.text)}"
    elif isinstance(item, Properties):
        return "properties: " + " ".join(item.names)
    elif isinstance(item, AcceptanceName):
        return f"acc-name: {acc_name_to_hoa(item.descriptor)}"
    raise TypeError(f"Unknown header item: {item!r}")


def edge_item_to_hoa(edge: EdgeItem) -> str:
    fields = []
    if edge.label is not None:
        fields.append(f"[{label_to_hoa(edge.label)}]")
    fields.append(_conjunction(edge.targets))
    if edge.acc_sig is not None:
        fields.append(_acc_sig(edge.acc_sig))
    return " ".join(fields)


def body_item_to_hoa(item: BodyItem) -> list[str]:
    """Render a state record as its State: line followed by its edge lines."""
    fields = ["State:"]
    if item.label is not None:
        fields.append(f"[{label_to_hoa(item.label)}]")
    fields.append(str(item.index))
    if item.description is not None:
        fields.append(_quoted(item.description))
    if item.acc_sig is not None:
        fields.append(_acc_sig(item.acc_sig))
    return [" ".join(fields)] + [edge_item_to_hoa(e) for e in item.edges]


def to_hoa(document: HoaDocument) -> str:
    """Render a document in the canonical layout, newline terminated."""
    lines = ["HOA: v1"]
    lines.extend(header_item_to_hoa(item) for item in document.header)
    lines.append("--BODY--")
    for item in document.body:
        lines.extend(body_item_to_hoa(item))
    lines.append("--END--")
    return "\n".join(lines) + "\n"


def write_hoa_file(document: HoaDocument, filepath: str):
    """Write a document to a file in the canonical layout."""
    with open(filepath, "w") as f:
        f.write(to_hoa(document))
    log.info(f"Wrote HOA file {filepath} ({len(document.body)} states)")
