from dataclasses import dataclass
from fractions import Fraction
from typing import Mapping

from .common import DivisionByZero
from .polynomials import Polynomial, gcd

@dataclass(frozen=True)
class CanonicalForm:
    """Rational function ``numerator / denominator`` in lowest terms.

    The two polynomials share no common factor and the denominator is monic
    (its grevlex-leading coefficient is 1), with the scale folded into the
    numerator. Zero is ``0 / 1``. Under these rules two forms are structurally
    equal exactly when they denote the same rational function, so ``==`` and
    ``hash`` are plain field comparisons.

    Build instances through :meth:`reduce`; the constructor does not check.
    """
    numerator   : Polynomial
    denominator : Polynomial

    @classmethod
    def reduce(cls, numerator, denominator):
        if not denominator:
            raise DivisionByZero("denominator normalizes to zero")
        if not numerator:
            return zero
        g = gcd(numerator, denominator)
        if not g.is_one():
            numerator = numerator.exact_div(g)
            denominator = denominator.exact_div(g)
        lc = denominator.lc()
        return cls(numerator.scale(1 / lc), denominator.scale(1 / lc))

    @classmethod
    def constant(cls, value):
        return cls(Polynomial.constant(value), Polynomial.constant(1))

    @classmethod
    def variable(cls, name):
        return cls(Polynomial.variable(name), Polynomial.constant(1))

    def is_zero(self):
        return not self.numerator

    def is_constant(self):
        return self.numerator.is_constant() and self.denominator.is_constant()

    def is_polynomial(self):
        return self.denominator.is_one()

    def variables(self):
        return self.numerator.variables() | self.denominator.variables()

    def __neg__(self):
        return CanonicalForm(-self.numerator, self.denominator)

    def __add__(self, other):
        if self.denominator == other.denominator:
            return CanonicalForm.reduce(self.numerator + other.numerator, self.denominator)
        return CanonicalForm.reduce(
            self.numerator.mul(other.denominator) + other.numerator.mul(self.denominator),
            self.denominator.mul(other.denominator))

    def __sub__(self, other):
        return self + (-other)

    def __mul__(self, other):
        return CanonicalForm.reduce(
            self.numerator.mul(other.numerator),
            self.denominator.mul(other.denominator))

    def __truediv__(self, other):
        if other.is_zero():
            raise DivisionByZero("division by an expression that normalizes to zero")
        return CanonicalForm.reduce(
            self.numerator.mul(other.denominator),
            self.denominator.mul(other.numerator))

    def __pow__(self, n):
        if n == 0:
            return one
        if n < 0:
            if self.is_zero():
                raise DivisionByZero("negative power of an expression that normalizes to zero")
            return CanonicalForm.reduce(self.denominator ** -n, self.numerator ** -n)
        # Powers of coprime polynomials stay coprime.
        return CanonicalForm(self.numerator ** n, self.denominator ** n)

    def evaluate(self, values: Mapping[str, Fraction]) -> Fraction:
        den = self.denominator.evaluate(values)
        if den == 0:
            raise DivisionByZero()
        return self.numerator.evaluate(values) / den

    def __repr__(self):
        if self.is_polynomial():
            return f"CanonicalForm({self.numerator!r})"
        return f"CanonicalForm(({self.numerator!r}) / ({self.denominator!r}))"

zero = CanonicalForm(Polynomial(), Polynomial.constant(1))
one  = CanonicalForm(Polynomial.constant(1), Polynomial.constant(1))
