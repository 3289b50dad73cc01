"""Generic Boolean expression engine.

A ``BoolExprSyntax`` describes one expression family: the name of the grammar
rule that parses its atomic terms and an operator table. From that it
generates

  * Lark grammar rules implementing precedence climbing, one rule per
    precedence level (infix levels are left recursive, hence left
    associative; prefix levels recurse into themselves), and
  * the reduction callbacks that build the expression tree.

The terms shared by every family are the literals ``t`` and ``f``, a
parenthesised sub-expression, and the family's atom rule.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable

PREFIX = "prefix"
INFIX = "infix"


@dataclass(frozen=True)
class Operator:
    symbol: str              # token text, e.g. "&"
    name: str                # used in callback names: <prefix>_<name>
    fixity: str              # PREFIX or INFIX
    build: Callable[..., Any]


@dataclass(frozen=True)
class BoolExprSyntax:
    prefix: str
    atom: str
    operators: tuple[Operator, ...]  # lowest precedence first
    true: Any
    false: Any

    @property
    def top(self) -> str:
        """Name of the grammar rule for a whole expression."""
        return self._level(0)

    def _level(self, level: int) -> str:
        if level == 0:
            return f"{self.prefix}_expr"
        return f"{self.prefix}_expr{level}"

    def grammar(self) -> str:
        rules = []
        for level, op in enumerate(self.operators):
            this, tighter = self._level(level), self._level(level + 1)
            if op.fixity == INFIX:
                head = f'{this} "{op.symbol}" {tighter}'
            elif op.fixity == PREFIX:
                head = f'"{op.symbol}" {this}'
            else:
                raise ValueError(f"Unknown fixity for '{op.symbol}': {op.fixity}")
            rules.append(
                f"?{this}: {head} -> {self.prefix}_{op.name}\n"
                f"    | {tighter}\n"
            )
        term = self._level(len(self.operators))
        rules.append(
            f'?{term}: "t" -> {self.prefix}_true\n'
            f'    | "f" -> {self.prefix}_false\n'
            f'    | "(" {self.top} ")"\n'
            f"    | {self.atom}\n"
        )
        return "\n".join(rules)

    def callbacks(self) -> dict[str, Callable[[list], Any]]:
        """Map callback name -> function taking the reduced children."""
        table = {
            f"{self.prefix}_true": lambda children: self.true,
            f"{self.prefix}_false": lambda children: self.false,
        }
        for op in self.operators:
            table[f"{self.prefix}_{op.name}"] = _reducer(op)
        return table


def _reducer(op: Operator) -> Callable[[list], Any]:
    def reduce(children):
        return op.build(*children)
    return reduce
