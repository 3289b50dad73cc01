"""Tests for the generic Boolean expression engine, independent of HOA."""
import pytest
from lark import Lark, Transformer, UnexpectedInput
from omegahoa.boolexpr import BoolExprSyntax, Operator, INFIX, PREFIX
from omegahoa.hoa_parser import LABEL_SYNTAX, ACCEPTANCE_SYNTAX


def _tuple_syntax(with_not: bool = True) -> BoolExprSyntax:
    ops = [
        Operator("|", "or", INFIX, lambda a, b: ("or", a, b)),
        Operator("&", "and", INFIX, lambda a, b: ("and", a, b)),
    ]
    if with_not:
        ops.append(Operator("!", "not", PREFIX, lambda a: ("not", a)))
    return BoolExprSyntax("x", "x_atom", tuple(ops), True, False)


class _TupleBuilder(Transformer):
    def __init__(self, syntax):
        super().__init__()
        for name, callback in syntax.callbacks().items():
            setattr(self, name, callback)

    def x_atom(self, args):
        return int(args[0])

    def start(self, args):
        return args[0]


def _parse(text: str, with_not: bool = True):
    syntax = _tuple_syntax(with_not)
    grammar = "\n".join([
        "start: x_expr",
        "x_atom: NUM",
        "NUM: /[0-9]+/",
        "%import common.WS",
        "%ignore WS",
        syntax.grammar(),
    ])
    parser = Lark(grammar, parser="lalr", transformer=_TupleBuilder(syntax))
    return parser.parse(text)


class TestGrammarGeneration:
    def test_top_rule(self):
        assert LABEL_SYNTAX.top == "label_expr"
        assert ACCEPTANCE_SYNTAX.top == "acceptance_expr"

    def test_prefix_level_only_with_negation(self):
        assert '"!" label_expr2 -> label_not' in LABEL_SYNTAX.grammar()
        assert '"!"' not in ACCEPTANCE_SYNTAX.grammar()

    def test_infix_levels_left_recursive(self):
        grammar = ACCEPTANCE_SYNTAX.grammar()
        assert '?acceptance_expr: acceptance_expr "|" acceptance_expr1 -> acceptance_or' in grammar
        assert '?acceptance_expr1: acceptance_expr1 "&" acceptance_expr2 -> acceptance_and' in grammar

    def test_terms_use_atom_rule(self):
        grammar = ACCEPTANCE_SYNTAX.grammar()
        assert "| acceptance_atom" in grammar
        assert '"(" acceptance_expr ")"' in grammar

    def test_callback_names(self):
        assert set(LABEL_SYNTAX.callbacks()) == {
            "label_true", "label_false", "label_or", "label_and", "label_not",
        }
        assert set(ACCEPTANCE_SYNTAX.callbacks()) == {
            "acceptance_true", "acceptance_false", "acceptance_or", "acceptance_and",
        }

    def test_unknown_fixity(self):
        syntax = BoolExprSyntax(
            "y", "y_atom", (Operator("^", "xor", "postfix", tuple),), True, False
        )
        with pytest.raises(ValueError):
            syntax.grammar()


class TestStandaloneEngine:
    def test_callbacks_build_tree(self):
        callbacks = _tuple_syntax().callbacks()
        assert callbacks["x_and"]([1, 2]) == ("and", 1, 2)
        assert callbacks["x_not"]([1]) == ("not", 1)
        assert callbacks["x_true"]([]) is True

    def test_precedence(self):
        assert _parse("1 | 2 & 3") == ("or", 1, ("and", 2, 3))
        assert _parse("!1 & 2") == ("and", ("not", 1), 2)

    def test_associativity(self):
        assert _parse("1 & 2 & 3") == ("and", ("and", 1, 2), 3)

    def test_literals_and_parentheses(self):
        assert _parse("(t | 1) & f") == ("and", ("or", True, 1), False)

    def test_without_prefix_operator(self):
        assert _parse("1 | 2", with_not=False) == ("or", 1, 2)
        with pytest.raises(UnexpectedInput):
            _parse("!1", with_not=False)
