from dataclasses import dataclass, fields
from fractions import Fraction
from typing import Iterator, List, Mapping, Optional, Set, Tuple
import logging

from .common import (DivisionByZero, MissingVariable, UnsupportedExponent,
                     integer_exponent, is_number, lift_number, normalize_bindings)
from .equivalence import Verdict, compare
from .polynomials import Monomial, Polynomial, first
from .rational import CanonicalForm

logger = logging.getLogger(__name__)

@dataclass(eq=False, frozen=True)
class Expr:
    """Unnormalized expression tree.

    Nodes are immutable. ``==`` and ``!=`` ask the equivalence oracle, so they
    are *not* structural; use :meth:`same` or :meth:`key` for that. As a
    consequence expressions are unhashable, key caches by ``expr.key()``.
    """
    precedence = 1000

    def __str__(self):
        return self.stringify(default_repr)

    def __post_init__(self):
        return validate(self)

    def __add__(self, other):
        return add(self, other)

    def __radd__(self, other):
        return add(other, self)

    def __sub__(self, other):
        return subtract(self, other)

    def __rsub__(self, other):
        return subtract(other, self)

    def __mul__(self, other):
        return multiply(self, other)

    def __rmul__(self, other):
        return multiply(other, self)

    def __truediv__(self, other):
        return divide(self, other)

    def __rtruediv__(self, other):
        return divide(other, self)

    def __neg__(self):
        return negate(self)

    def __pow__(self, other):
        return power(self, other)

    def __rpow__(self, other):
        raise UnsupportedExponent(self, "symbolic exponents are not supported")

    def __eq__(self, other):
        if not isinstance(other, (Expr, str)) and not is_number(other):
            return NotImplemented
        return compare(self, convert(other)) is Verdict.ALWAYS_EQUAL

    def __ne__(self, other):
        if not isinstance(other, (Expr, str)) and not is_number(other):
            return NotImplemented
        return compare(self, convert(other)) is Verdict.ALWAYS_UNEQUAL

    __hash__ = None

    def apply(self, fn):
        attrs = {}
        for f in fields(self):
            a = getattr(self, f.name)
            attrs[f.name] = fn(a) if isinstance(a, Expr) else a
        return type(self)(**attrs)

    def subexpressions(self) -> Iterator["Expr"]:
        for f in fields(self):
            a = getattr(self, f.name)
            if isinstance(a, Expr):
                yield a

    def key(self):
        """Hashable structural identity of the tree."""
        return (type(self).__name__,) + tuple(
            x.key() if isinstance(x, Expr) else x for x in self._parts())

    def _parts(self):
        return tuple(getattr(self, f.name) for f in fields(self))

    def same(self, other):
        return isinstance(other, Expr) and self.key() == other.key()

    def variables(self) -> Set[str]:
        out = set()
        def visit(expr):
            if isinstance(expr, Variable):
                out.add(expr.name)
            for a in expr.subexpressions():
                visit(a)
        visit(self)
        return out

    def replace(self, values):
        return self.apply(lambda x: x.replace(values))

    def normalize(self) -> CanonicalForm:
        raise NotImplementedError

    def evaluate(self, values: Mapping[str, Fraction]) -> Fraction:
        raise NotImplementedError

    def simplify(self):
        return simplify(self)

    def substitute(self, bindings):
        return substitute(self, bindings)

    def partial_substitute(self, bindings):
        return partial_substitute(self, bindings)

    def equivalent(self, other):
        return equivalent(self, other)

@dataclass(eq=False, frozen=True)
class Constant(Expr):
    value : Fraction

    @property
    def precedence(self):
        if self.value < 0:
            return 15
        elif self.value.denominator != 1:
            return 20
        return 1000

    def stringify(self, s):
        return str(self.value)

    def normalize(self):
        return CanonicalForm.constant(self.value)

    def evaluate(self, values):
        return self.value

    def replace(self, values):
        return self

@dataclass(eq=False, frozen=True)
class Variable(Expr):
    name : str

    def stringify(self, s):
        return self.name

    def normalize(self):
        return CanonicalForm.variable(self.name)

    def evaluate(self, values):
        try:
            return values[self.name]
        except KeyError:
            raise MissingVariable(self.name) from None

    def replace(self, values):
        if self.name in values:
            return Constant(values[self.name])
        return self

@dataclass(eq=False, frozen=True)
class Add(Expr):
    terms : Tuple[Expr, ...]
    precedence = 10

    def subexpressions(self):
        yield from self.terms

    def apply(self, fn):
        return Add([fn(x) for x in self.terms])

    def _parts(self):
        return self.terms

    def stringify(self, s):
        if not self.terms:
            return "0"
        out = [s(self.terms[0], 10)]
        for term in self.terms[1:]:
            if isinstance(term, Negate):
                out.append(" - " + s(term.operand, 10))
            else:
                out.append(" + " + s(term, 10))
        return "".join(out)

    def normalize(self):
        result = CanonicalForm.constant(0)
        for term in self.terms:
            result = result + term.normalize()
        return result

    def evaluate(self, values):
        return sum((term.evaluate(values) for term in self.terms), Fraction(0))

@dataclass(eq=False, frozen=True)
class Mul(Expr):
    factors : Tuple[Expr, ...]
    precedence = 20

    def subexpressions(self):
        yield from self.factors

    def apply(self, fn):
        return Mul([fn(x) for x in self.factors])

    def _parts(self):
        return self.factors

    def stringify(self, s):
        out = [s(factor, 20) for factor in self.factors]
        if not out:
            out.append("1")
        return "*".join(out)

    def normalize(self):
        result = CanonicalForm.constant(1)
        for factor in self.factors:
            result = result * factor.normalize()
        return result

    def evaluate(self, values):
        result = Fraction(1)
        for factor in self.factors:
            result *= factor.evaluate(values)
        return result

@dataclass(eq=False, frozen=True)
class Div(Expr):
    numerator   : Expr
    denominator : Expr
    precedence = 20

    def __post_init__(self):
        super().__post_init__()
        if isinstance(self.denominator, Constant) and self.denominator.value == 0:
            raise DivisionByZero(f"division of {self.numerator} by literal zero")

    def stringify(self, s):
        return f"{s(self.numerator, 19)}/{s(self.denominator, 20)}"

    def normalize(self):
        return self.numerator.normalize() / self.denominator.normalize()

    def evaluate(self, values):
        num = self.numerator.evaluate(values)
        den = self.denominator.evaluate(values)
        if den == 0:
            raise DivisionByZero(f"{self.denominator} evaluates to zero")
        return num / den

@dataclass(eq=False, frozen=True)
class Pow(Expr):
    base     : Expr
    exponent : int
    precedence = 30

    def __post_init__(self):
        super().__post_init__()
        object.__setattr__(self, "exponent", integer_exponent(self.exponent))
        if self.exponent < 0 and isinstance(self.base, Constant) and self.base.value == 0:
            raise DivisionByZero(f"zero raised to {self.exponent}")

    def stringify(self, s):
        return f"{s(self.base, 30)}**{self.exponent}"

    def normalize(self):
        return self.base.normalize() ** self.exponent

    def evaluate(self, values):
        base = self.base.evaluate(values)
        if base == 0 and self.exponent < 0:
            raise DivisionByZero(f"{self.base} evaluates to zero under a negative exponent")
        return base ** self.exponent

@dataclass(eq=False, frozen=True)
class Negate(Expr):
    operand : Expr
    precedence = 15

    def stringify(self, s):
        return "-" + s(self.operand, 15)

    def normalize(self):
        return -self.operand.normalize()

    def evaluate(self, values):
        return -self.operand.evaluate(values)

def validate(obj):
    for f in fields(obj):
        a = getattr(obj, f.name)
        if f.type == Fraction:
            a = lift_number(a)
        elif f.type == Expr:
            a = convert(a)
        elif f.type == Tuple[Expr, ...]:
            a = tuple(convert(x) for x in a)
        elif f.type == str:
            if not isinstance(a, str) or not a:
                raise TypeError(f".{f.name} = {a!r} ? non-empty str")
        object.__setattr__(obj, f.name, a)

def convert(obj):
    if isinstance(obj, Expr):
        return obj
    elif isinstance(obj, str):
        return Variable(obj)
    else:
        return Constant(lift_number(obj))

def var(name):
    return Variable(name)

def const(value):
    return Constant(value)

def summands(expr):
    return expr.terms if isinstance(expr, Add) else (expr,)

def multiplicands(expr):
    return expr.factors if isinstance(expr, Mul) else (expr,)

def add(lhs, rhs):
    return Add(summands(convert(lhs)) + summands(convert(rhs)))

def subtract(lhs, rhs):
    return Add(summands(convert(lhs)) + (negate(rhs),))

def multiply(lhs, rhs):
    return Mul(multiplicands(convert(lhs)) + multiplicands(convert(rhs)))

def divide(lhs, rhs):
    return Div(convert(lhs), convert(rhs))

def negate(term):
    return Negate(convert(term))

def power(base, exponent):
    if isinstance(exponent, Expr):
        raise UnsupportedExponent(exponent, "symbolic exponents are not supported")
    return Pow(convert(base), exponent)

def normalize(expr) -> CanonicalForm:
    expr = convert(expr)
    try:
        return expr.normalize()
    except DivisionByZero:
        logger.debug("normalizing %s: a denominator normalizes to zero", expr)
        raise

def simplify(expr) -> Expr:
    """Canonical display form of ``expr``.

    Terms come out in descending grevlex order. Negative coefficients become
    ``Negate``, coefficient magnitudes other than one a leading ``Constant``.
    """
    return rebuild(normalize(expr))

def rebuild(form: CanonicalForm) -> Expr:
    numerator = polynomial_expr(form.numerator)
    if form.is_polynomial():
        return numerator
    return Div(numerator, polynomial_expr(form.denominator))

def polynomial_expr(poly: Polynomial) -> Expr:
    terms = [term_expr(c, m) for m, c in sorted(poly.terms.items(), key=first, reverse=True)]
    if not terms:
        return Constant(0)
    elif len(terms) == 1:
        return terms[0]
    else:
        return Add(terms)

def term_expr(coeff: Fraction, mono: Monomial) -> Expr:
    factors: List[Expr] = [Variable(x) if e == 1 else Pow(Variable(x), e)
                           for x, e in mono.exps]
    if not factors:
        return Constant(coeff)
    if abs(coeff) != 1:
        factors.insert(0, Constant(abs(coeff)))
    term = factors[0] if len(factors) == 1 else Mul(factors)
    return Negate(term) if coeff < 0 else term

Bindings = Mapping[str, object]

def substitute(expr, bindings: Bindings) -> Fraction:
    """Value of ``expr`` with every variable bound.

    Evaluates the raw tree; no normalization happens, so a zero denominator
    anywhere in the tree is reported even if it would cancel algebraically.
    """
    return convert(expr).evaluate(normalize_bindings(bindings))

def partial_substitute(expr, bindings: Bindings) -> Optional[Expr]:
    """Bind some variables and simplify; ``None`` if that leaves it undefined."""
    expr = convert(expr)
    values = normalize_bindings(bindings)
    try:
        return simplify(expr.replace(values))
    except DivisionByZero as error:
        logger.debug("partial substitution of %s undefined: %s", expr, error)
        return None

def equivalent(p, q) -> Optional[bool]:
    """True if always equal, False if always unequal, None if it depends."""
    verdict = compare(convert(p), convert(q))
    if verdict is Verdict.ALWAYS_EQUAL:
        return True
    elif verdict is Verdict.ALWAYS_UNEQUAL:
        return False
    return None

def default_repr(expr, precedence=0):
    if not isinstance(expr, Expr):
        return str(expr)
    elif precedence < expr.precedence:
        return str(expr)
    else:
        return "(" + str(expr) + ")"
