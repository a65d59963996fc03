from fractions import Fraction
from functools import total_ordering
from typing import Dict, Mapping, Set

from .common import MissingVariable

first = lambda x: x[0]

def lockstep(xs, ys, default):
    terminal = (None, default)
    x = next(xs, terminal)
    y = next(ys, terminal)
    while x[0] is not None and y[0] is not None:
        if x[0] < y[0]:
            yield x[0], x[1], default
            x = next(xs, terminal)
        elif y[0] < x[0]:
            yield y[0], default, y[1]
            y = next(ys, terminal)
        else:
            yield x[0], x[1], y[1]
            x = next(xs, terminal)
            y = next(ys, terminal)
    while x[0] is not None:
        yield x[0], x[1], default
        x = next(xs, terminal)
    while y[0] is not None:
        yield y[0], default, y[1]
        y = next(ys, terminal)

@total_ordering    # grevlex
class Monomial:
    """Product of variables raised to positive integer powers.

    Stored as a tuple of ``(name, exponent)`` pairs sorted by name; the empty
    tuple is the unit monomial.
    """
    __slots__ = ("exps",)

    def __init__(self, exps=()):
        self.exps = tuple(sorted(exps, key=first))
        assert all(exp > 0 for var, exp in self.exps), self.exps

    @classmethod
    def new(cls, x=None, exp=1):
        if x is None or exp == 0:
            return cls(())
        return cls([(x, exp)])

    def __hash__(self):
        return hash(self.exps)

    def __eq__(self, other):
        return self.exps == other.exps

    @property
    def degree(self):
        return sum(degree for _, degree in self.exps)

    def degree_in(self, x):
        for var, exp in self.exps:
            if var == x:
                return exp
        return 0

    def without(self, x):
        return Monomial((var, exp) for var, exp in self.exps if var != x)

    def common(self, other):
        return lockstep(iter(self.exps), iter(other.exps), 0)

    def __lt__(self, other):
        deg_self = self.degree
        deg_other = other.degree
        if deg_self != deg_other:
            return deg_self < deg_other
        lst = tuple(self.common(other))
        for _, a, b in reversed(lst):
            if a != b:
                return a > b
        return False

    def __mul__(self, other):
        return Monomial((x, ei + ej) for x, ei, ej in self.common(other))

    def __pow__(self, coeff):
        if coeff == 0:
            return Monomial()
        return Monomial((x, e * coeff) for x, e in self.exps)

    def divides(self, other):
        return all(ei <= ej for _, ei, ej in self.common(other))

    def __truediv__(self, other):
        return Monomial((x, ei - ej) for x, ei, ej in self.common(other) if ei != ej)

    def lcm(self, other):
        return Monomial((x, max(ei, ej)) for x, ei, ej in self.common(other))

    def evaluate(self, values):
        result = Fraction(1)
        for var, exp in self.exps:
            try:
                result *= values[var] ** exp
            except KeyError:
                raise MissingVariable(var) from None
        return result

    def pretty(self):
        return "".join(f"*{x}**{e}" if e > 1 else f"*{x}"
                       for x, e in self.exps)

    def __repr__(self):
        exps = ",".join(f"{x}**{e}" for x, e in self.exps)
        return f"Monomial({exps})"

unit = Monomial()

class Polynomial:
    """Sparse multivariate polynomial with rational coefficients.

    ``terms`` maps :class:`Monomial` to a nonzero :class:`Fraction`; the zero
    polynomial is the empty mapping. Instances are treated as immutable.
    """
    __slots__ = ("terms", "_lm_cache")
    def __init__(self, terms=None, prune=True):
        self.terms = {} if prune else terms
        if terms and prune:
            for m, c in terms.items():
                if c != 0:
                    self.terms[m] = Fraction(c)
        self._lm_cache = None

    @classmethod
    def constant(cls, value):
        return cls({unit: value})

    @classmethod
    def variable(cls, name):
        return cls({Monomial.new(name): 1})

    def monic(self):
        lc = self.lc()
        if lc == 1 or lc == 0:
            return self
        return Polynomial({m: c / lc for m, c in self.terms.items()}, False)

    def scale(self, coeff):
        if coeff == 0:
            return Polynomial()
        if coeff == 1:
            return self
        return Polynomial({m: c * coeff for m, c in self.terms.items()}, False)

    def __add__(self, other):
        res = self.terms.copy()
        for m, c in other.terms.items():
            res[m] = res.get(m, Fraction(0)) + c
            if res[m] == 0:
                del res[m]
        return Polynomial(res, False)

    def __sub__(self, other):
        res = self.terms.copy()
        for m, c in other.terms.items():
            res[m] = res.get(m, Fraction(0)) - c
            if res[m] == 0:
                del res[m]
        return Polynomial(res, False)

    def __neg__(self):
        return Polynomial({m: -c for m, c in self.terms.items()}, False)

    def mul_by_monomial(self, coeff, mono):
        if coeff == 0:
            return Polynomial()
        res_terms = {}
        for m, c in self.terms.items():
            res_terms[m * mono] = c * coeff
        return Polynomial(res_terms, False)

    def mul(self, other):
        res_terms = {}
        for m1, c1 in self.terms.items():
            for m2, c2 in other.terms.items():
                mprod = m1 * m2
                res_terms[mprod] = res_terms.get(mprod, Fraction(0)) + c1 * c2
        return Polynomial({m: c for m, c in res_terms.items() if c != 0}, False)

    __mul__ = mul

    def __pow__(self, n):
        assert n >= 0, n
        result = Polynomial.constant(1)
        for _ in range(n):
            result = result.mul(self)
        return result

    def lm(self):
        if self._lm_cache is None and self.terms:
            self._lm_cache = max(self.terms.keys())
        return self._lm_cache

    def lc(self):
        lm = self.lm()
        return self.terms[lm] if lm is not None else Fraction(0)

    def __bool__(self):
        return bool(self.terms)

    def __eq__(self, other):
        if not isinstance(other, Polynomial):
            return NotImplemented
        return self.terms == other.terms

    def __hash__(self):
        return hash(tuple(sorted(self.terms.items())))

    def __repr__(self):
        if not self.terms:
            return "0"
        parts = []
        for m in sorted(self.terms.keys(), reverse=True):
            coeff = self.terms[m]
            parts.append(f"{coeff}{m.pretty()}")
        return " + ".join(parts)

    def is_constant(self):
        return all(m == unit for m in self.terms)

    def is_one(self):
        return self.terms == {unit: 1}

    def variables(self) -> Set[str]:
        return {var for m in self.terms for var, _ in m.exps}

    def degree_in(self, x):
        """Degree as a polynomial in ``x``; -1 for the zero polynomial."""
        return max((m.degree_in(x) for m in self.terms), default=-1)

    def coefficients(self, x) -> Dict[int, "Polynomial"]:
        """View as a univariate polynomial in ``x``: ``{degree: coefficient}``."""
        out: Dict[int, Dict[Monomial, Fraction]] = {}
        for m, c in self.terms.items():
            out.setdefault(m.degree_in(x), {})[m.without(x)] = c
        return {k: Polynomial(t, False) for k, t in out.items()}

    def leading_coefficient(self, x):
        return self.coefficients(x)[self.degree_in(x)]

    def evaluate(self, values: Mapping[str, Fraction]) -> Fraction:
        return sum((c * m.evaluate(values) for m, c in self.terms.items()), Fraction(0))

    def exact_div(self, other):
        """Quotient of an exact division; raises ArithmeticError on a remainder."""
        if not other:
            raise ZeroDivisionError("polynomial division by zero")
        glm = other.lm()
        glc = other.lc()
        quotient = {}
        p = self
        while p:
            mono_p = p.lm()
            if not glm.divides(mono_p):
                raise ArithmeticError(f"{other!r} does not divide {self!r}")
            mono_q = mono_p / glm
            coeff_q = p.lc() / glc
            quotient[mono_q] = coeff_q
            p = p - other.mul_by_monomial(coeff_q, mono_q)
        return Polynomial(quotient, False)

def pseudo_remainder(f, g, x):
    """Remainder of ``f`` by ``g`` as polynomials in ``x``.

    Only multiplies ``f`` by the leading coefficient of ``g`` as often as the
    reduction needs, so the result equals the textbook pseudo-remainder up to a
    factor free of ``x``.
    """
    n = g.degree_in(x)
    assert n >= 0, "pseudo-division by zero"
    lc_g = g.leading_coefficient(x)
    r = f
    while r and (d := r.degree_in(x)) >= n:
        lc_r = r.leading_coefficient(x)
        r = r.mul(lc_g) - lc_r.mul(g).mul_by_monomial(1, Monomial.new(x, d - n))
    return r

def content(f, x):
    """Monic GCD of the coefficients of ``f`` viewed as a polynomial in ``x``."""
    if not f:
        return Polynomial()
    coeffs = sorted(f.coefficients(x).values(), key=len_terms)
    result = coeffs[0].monic()
    for c in coeffs[1:]:
        if result.is_one():
            break
        result = gcd(result, c)
    return result

def primitive_part(f, x):
    if not f:
        return f
    return f.exact_div(content(f, x))

def gcd(f, g):
    """Monic greatest common divisor of two multivariate polynomials.

    Recursive primitive PRS: pick the smallest variable ``x``, split both
    arguments into content (free of ``x``) and primitive part, take the GCD of
    the contents recursively, and run pseudo-remainder sequences on the
    primitive parts, stripping content after every step.
    """
    if not f:
        return g.monic()
    if not g:
        return f.monic()
    if f.is_constant() or g.is_constant():
        return Polynomial.constant(1)
    x = min(f.variables() | g.variables())
    c = gcd(content(f, x), content(g, x))
    a = primitive_part(f, x)
    b = primitive_part(g, x)
    if a.degree_in(x) < b.degree_in(x):
        a, b = b, a
    while b:
        r = pseudo_remainder(a, b, x)
        a, b = b, primitive_part(r, x)
    return c.mul(primitive_part(a, x)).monic()

def len_terms(poly):
    return len(poly.terms)
