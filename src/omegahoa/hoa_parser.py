"""HOA parser using Lark.

The parser runs LALR with an inline transformer, so reduction callbacks fire
in left-to-right order while the input is being read. Header declarations
extend a ``ParseContext`` (AP count, declared aliases, acceptance-set count)
that every later reference is checked against, and a bad reference aborts
the parse at the point where it is read. The context lives in a ContextVar
set by each ``parse_hoa`` call, so the cached parser can be shared between
threads.
"""
from __future__ import annotations
import logging
import os
import threading
from contextvars import ContextVar
from dataclasses import dataclass, replace
from lark import Lark, Transformer, UnexpectedInput
from omegahoa.boolexpr import BoolExprSyntax, Operator, INFIX, PREFIX
from omegahoa.hoa_model import (
    LabelBool, ApRef, AliasRef, LabelNot, LabelAnd, LabelOr,
    FinCond, InfCond, CompFinCond, CompInfCond, AccAnd, AccOr, AccBool,
    MinMax, EvenOdd, Buchi, CoBuchi, GeneralizedBuchi, GeneralizedCoBuchi,
    Streett, Rabin, GeneralizedRabin, Parity, AllAccepting, NoneAccepting,
    NumStates, AP, Alias, Acceptance, Start, Tool, Name, Properties,
    AcceptanceName, EdgeItem, BodyItem, HoaDocument,
)

log = logging.getLogger("omegahoa")

_GRAMMAR_PATH = os.path.join(os.path.dirname(__file__), "hoa_grammar.lark")


LABEL_SYNTAX = BoolExprSyntax(
    prefix="label",
    atom="label_atom",
    operators=(
        Operator("|", "or", INFIX, LabelOr),
        Operator("&", "and", INFIX, LabelAnd),
        Operator("!", "not", PREFIX, LabelNot),
    ),
    true=LabelBool(True),
    false=LabelBool(False),
)

ACCEPTANCE_SYNTAX = BoolExprSyntax(
    prefix="acceptance",
    atom="acceptance_atom",
    operators=(
        Operator("|", "or", INFIX, AccOr),
        Operator("&", "and", INFIX, AccAnd),
    ),
    true=AccBool(True),
    false=AccBool(False),
)


# ============================================================
# Errors
# ============================================================

class HoaError(Exception):
    """Base class for every HOA parse failure."""
    pass


class HoaSyntaxError(HoaError):
    """The input does not match the HOA grammar."""
    pass


class ReferenceOutOfRange(HoaError):
    def __init__(self, kind: str, index: int, limit: int):
        super().__init__(
            f"Reference out of range: {kind} {index} "
            f"(declared {limit}, valid range [0, {limit}))"
        )
        self.kind = kind
        self.index = index
        self.limit = limit


class UndeclaredAlias(HoaError):
    def __init__(self, name: str):
        super().__init__(f"Reference to undefined alias name '@{name}'")
        self.name = name


class DuplicateAlias(HoaError):
    def __init__(self, name: str):
        super().__init__(f"Duplicate definition of alias '@{name}'")
        self.name = name


# ============================================================
# Parse context
# ============================================================

@dataclass(frozen=True)
class ParseContext:
    """What the header has declared so far."""
    ap_count: int = 0
    aliases: tuple[str, ...] = ()
    acceptance_sets: int = 0

    def with_aps(self, count: int) -> ParseContext:
        return replace(self, ap_count=count)

    def with_alias(self, name: str) -> ParseContext:
        self.check_new_alias(name)
        return replace(self, aliases=self.aliases + (name,))

    def with_acceptance_sets(self, count: int) -> ParseContext:
        return replace(self, acceptance_sets=count)

    def check_new_alias(self, name: str):
        if name in self.aliases:
            raise DuplicateAlias(name)

    def check_alias(self, name: str):
        if name not in self.aliases:
            raise UndeclaredAlias(name)

    def check_ap(self, index: int):
        if not 0 <= index < self.ap_count:
            raise ReferenceOutOfRange("atomic proposition", index, self.ap_count)

    def check_acceptance_set(self, index: int):
        if not 0 <= index < self.acceptance_sets:
            raise ReferenceOutOfRange("acceptance set", index, self.acceptance_sets)


# ============================================================
# Transformer
# ============================================================

def _string(token) -> str:
    return str(token)[1:-1]


class HoaBuilder(Transformer):
    """Builds a HoaDocument while Lark reduces the input.

    Used inline by the LALR parser: terminal callbacks do not run, so rule
    callbacks convert their tokens themselves.
    """

    def __init__(self):
        super().__init__()
        for syntax in (LABEL_SYNTAX, ACCEPTANCE_SYNTAX):
            for name, callback in syntax.callbacks().items():
                setattr(self, name, callback)

    @property
    def context(self) -> ParseContext:
        return _context.get()

    @context.setter
    def context(self, value: ParseContext):
        _context.set(value)

    # ---- Label atoms ----
    def ap_ref(self, args):
        index = int(args[0])
        self.context.check_ap(index)
        return ApRef(index)

    def alias_ref(self, args):
        name = str(args[0])[1:]
        self.context.check_alias(name)
        return AliasRef(name)

    # ---- Acceptance atoms ----
    def _acceptance_index(self, token) -> int:
        index = int(token)
        self.context.check_acceptance_set(index)
        return index

    def fin_set(self, args):
        return FinCond(self._acceptance_index(args[0]))

    def fin_set_complement(self, args):
        return CompFinCond(self._acceptance_index(args[0]))

    def inf_set(self, args):
        return InfCond(self._acceptance_index(args[0]))

    def inf_set_complement(self, args):
        return CompInfCond(self._acceptance_index(args[0]))

    # ---- Acceptance names ----
    def buchi(self, args):
        return Buchi()

    def co_buchi(self, args):
        return CoBuchi()

    def generalized_buchi(self, args):
        return GeneralizedBuchi(int(args[0]))

    def generalized_co_buchi(self, args):
        return GeneralizedCoBuchi(int(args[0]))

    def streett(self, args):
        return Streett(int(args[0]))

    def rabin(self, args):
        return Rabin(int(args[0]))

    def generalized_rabin(self, args):
        count = int(args[0])
        sizes = tuple(int(a) for a in args[1:])
        if len(sizes) != count:
            raise HoaSyntaxError(
                f"generalized-Rabin declares {count} pairs but lists "
                f"{len(sizes)} sizes"
            )
        return GeneralizedRabin(count, sizes)

    def parity(self, args):
        return Parity(MinMax(str(args[0])), EvenOdd(str(args[1])), int(args[2]))

    def acc_all(self, args):
        return AllAccepting()

    def acc_none(self, args):
        return NoneAccepting()

    # ---- Header items ----
    def num_states(self, args):
        return NumStates(int(args[0]))

    def ap_decl(self, args):
        count = int(args[0])
        names = tuple(_string(s) for s in args[1:])
        if len(names) != count:
            raise HoaSyntaxError(
                f"AP declares {count} propositions but lists {len(names)}"
            )
        self.context = self.context.with_aps(count)
        return AP(names)

    def alias_head(self, args):
        name = str(args[0])[1:]
        self.context.check_new_alias(name)
        return name

    def alias_decl(self, args):
        name, expr = args
        self.context = self.context.with_alias(name)
        return Alias(name, expr)

    def acceptance_head(self, args):
        count = int(args[0])
        self.context = self.context.with_acceptance_sets(count)
        return count

    def acceptance_decl(self, args):
        return Acceptance(args[0], args[1])

    def start_decl(self, args):
        return Start(tuple(int(a) for a in args))

    def tool_decl(self, args):
        version = _string(args[1]) if args[1] is not None else None
        return Tool(_string(args[0]), version)

    def name_decl(self, args):
        return Name(_string(args[0]))

    def properties_decl(self, args):
        return Properties(tuple(str(a) for a in args))

    def acc_name_decl(self, args):
        return AcceptanceName(args[0])

    def header(self, args):
        return tuple(args)

    # ---- Body ----
    def target_conj(self, args):
        return tuple(int(a) for a in args)

    def acc_sig(self, args):
        return tuple(int(a) for a in args)

    def edge_item(self, args):
        label, targets, acc_sig = args
        return EdgeItem(targets=targets, label=label, acc_sig=acc_sig)

    def state_head(self, args):
        label, index, description, acc_sig = args
        description = _string(description) if description is not None else None
        return label, int(index), description, acc_sig

    def body_item(self, args):
        label, index, description, acc_sig = args[0]
        return BodyItem(
            index=index,
            label=label,
            description=description,
            acc_sig=acc_sig,
            edges=tuple(args[1:]),
        )

    def body(self, args):
        return tuple(args)

    # ---- Top-level ----
    def start(self, args):
        return HoaDocument(header=args[0], body=args[1])


_context: ContextVar[ParseContext] = ContextVar("hoa_parse_context")

_builder = HoaBuilder()

_parser = None
_parser_lock = threading.Lock()


def _get_parser():
    global _parser
    with _parser_lock:
        if _parser is None:
            _parser = _build_parser()
    return _parser


def _build_parser() -> Lark:
    with open(_GRAMMAR_PATH, "r") as f:
        grammar_text = f.read()
    grammar_text = "\n".join(
        [grammar_text, LABEL_SYNTAX.grammar(), ACCEPTANCE_SYNTAX.grammar()]
    )
    return Lark(
        grammar_text,
        parser="lalr",
        lexer="contextual",
        maybe_placeholders=True,
        transformer=_builder,
    )


def parse_hoa(text: str) -> HoaDocument:
    """Parse a HOA document string.

    Raises a HoaError subclass on the first failure in the input.
    """
    parser = _get_parser()
    token = _context.set(ParseContext())
    try:
        document = parser.parse(text)
    except UnexpectedInput as exc:
        raise HoaSyntaxError(f"Invalid HOA input: {exc}") from exc
    finally:
        _context.reset(token)
    log.debug(f"Parsed HOA document: {len(document.header)} header items, "
              f"{len(document.body)} states")
    return document


def parse_hoa_file(filepath: str) -> HoaDocument:
    """Parse a HOA file and return a HoaDocument."""
    log.info(f"Reading HOA file {filepath}")
    with open(filepath, "r") as f:
        text = f.read()
    return parse_hoa(text)
