from fractions import Fraction

import pytest

from symexpr.common import DivisionByZero, UnsupportedExponent
from symexpr.expressions import (Add, Constant, Div, Mul, Negate, Pow, Variable, const, normalize,
                                 simplify, var)
from symexpr.rational import CanonicalForm


a, b, c, d = var("a"), var("b"), var("c"), var("d")


def test_operators_build_raw_trees() -> None:
    assert (a + b).same(Add([a, b]))
    assert (a - b).same(Add([a, Negate(b)]))
    assert (a * b).same(Mul([a, b]))
    assert (a / b).same(Div(a, b))
    assert (-a).same(Negate(a))
    assert (a**3).same(Pow(a, 3))


def test_nested_sums_and_products_are_flattened() -> None:
    assert (a + b + c).same(Add([a, b, c]))
    assert ((a + b) - (c + d)).same(Add([a, b, Negate(Add([c, d]))]))
    assert (a * (b * c)).same(Mul([a, b, c]))
    assert (a * (b + c)).same(Mul([a, Add([b, c])]))


def test_literals_are_lifted() -> None:
    assert (a + 1).same(Add([a, Constant(1)]))
    assert (2 * a).same(Mul([Constant(2), a]))
    assert (1 - a).same(Add([Constant(1), Negate(a)]))
    assert (Fraction(1, 3) / a).same(Div(Constant(Fraction(1, 3)), a))
    assert const(0.5).value == Fraction(1, 2)
    assert Add([a, 2]).terms[1].same(Constant(2))
    assert (a + "b").same(Add([a, b]))


def test_rejected_literals() -> None:
    with pytest.raises(TypeError):
        a + True
    with pytest.raises(TypeError):
        a + object()
    with pytest.raises(ValueError):
        const(float("inf"))
    with pytest.raises(TypeError):
        Variable("")


def test_division_by_literal_zero_fails_at_construction() -> None:
    with pytest.raises(DivisionByZero):
        a / 0
    with pytest.raises(DivisionByZero):
        a / const(0)
    with pytest.raises(DivisionByZero):
        const(0) ** -1
    # Only literal zero is detected when building the tree.
    undefined = a / (b - b)
    assert isinstance(undefined, Div)


def test_integer_exponents_only() -> None:
    assert (a ** Fraction(4, 2)).exponent == 2
    assert (a ** 2.0).exponent == 2
    with pytest.raises(UnsupportedExponent):
        a ** Fraction(1, 2)
    with pytest.raises(UnsupportedExponent):
        a ** 0.5
    with pytest.raises(UnsupportedExponent):
        a ** b
    with pytest.raises(UnsupportedExponent):
        2 ** a


def test_trees_are_immutable() -> None:
    expr = a + b
    with pytest.raises(AttributeError):
        expr.terms = ()
    assert isinstance(expr.terms, tuple)


def test_structural_identity_is_separate_from_equality() -> None:
    left = (a + b) * c
    right = a * c + b * c
    assert not left.same(right)
    assert left.key() != right.key()
    assert left.key() == ((a + b) * c).key()
    assert {left.key(): 1}[((a + b) * c).key()] == 1
    with pytest.raises(TypeError):
        hash(left)


def test_variables() -> None:
    assert a.variables() == {"a"}
    assert const(1).variables() == set()
    assert (a + b + c).variables() == {"a", "b", "c"}
    assert ((a * b + c) / (d + 1)).variables() == {"a", "b", "c", "d"}


def test_str() -> None:
    assert str(a + b * c) == "a + b*c"
    assert str((a + b) * c) == "(a + b)*c"
    assert str(a - (b + c)) == "a - (b + c)"
    assert str((a + b) / (a - b)) == "(a + b)/(a - b)"
    assert str(a / (b * c)) == "a/(b*c)"
    assert str((-a) ** 2) == "(-a)**2"
    assert str(a * Fraction(1, 2)) == "a*(1/2)"


def test_normalize_constants_and_variables() -> None:
    assert normalize(const(0)) == CanonicalForm.constant(0)
    assert normalize(5) == CanonicalForm.constant(5)
    assert normalize(a) == CanonicalForm.variable("a")
    assert normalize(-a) == -CanonicalForm.variable("a")


def test_normalize_is_associative_and_commutative() -> None:
    assert normalize((a + b) + c) == normalize(a + (b + c))
    assert normalize(Add([Add([a, b]), c])) == normalize(Add([a, Add([b, c])]))
    assert normalize(Mul([Mul([a, b]), c])) == normalize(Mul([a, Mul([b, c])]))
    assert normalize(a * b) == normalize(b * a)
    assert normalize(a + b) == normalize(b + a)


def test_normalize_powers() -> None:
    assert normalize((a + 1) ** 2) == normalize(a * a + 2 * a + 1)
    assert normalize(a ** -2) == normalize(1 / (a * a))
    assert normalize((a / b) ** -1) == normalize(b / a)
    assert normalize((a - a) ** 0) == CanonicalForm.constant(1)


def test_normalize_zero_denominator() -> None:
    with pytest.raises(DivisionByZero):
        normalize(a / (b - b))
    with pytest.raises(DivisionByZero):
        normalize((a - a) ** -1)
    with pytest.raises(DivisionByZero):
        normalize(1 / (a * 0))


def test_simplify_complex_quotient() -> None:
    expr = ((a + b) * c) / ((a - b) * c)
    simplified = expr.simplify()
    assert simplified.same(Div(Add([a, b]), Add([a, Negate(b)])))
    assert str(simplified) == "(a + b)/(a - b)"


def test_simplify_term_order_and_coefficients() -> None:
    simplified = simplify((a - 2 * b) * (a + b) + 3)
    assert str(simplified) == "a**2 - a*b - 2*b**2 + 3"
    assert simplify(b - a).same(Add([Negate(a), b]))
    assert simplify(a / 2).same(Mul([Constant(Fraction(1, 2)), a]))
    assert simplify(a - a).same(Constant(0))
    assert simplify(const(-3)).same(Constant(-3))


def test_simplify_is_idempotent() -> None:
    expr = (a * a - b * b) / (a + b) + c / (2 * c)
    once = simplify(expr)
    assert simplify(once).same(once)
    assert str(once) == "a - b + 1/2"


def test_normalize_does_not_touch_input() -> None:
    expr = (a + b) * (a - b)
    before = expr.key()
    simplify(expr)
    assert expr.key() == before
