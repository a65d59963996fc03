from decimal import Decimal
from fractions import Fraction
import math
import numbers

class SymbolicError(Exception):
    pass

class DivisionByZero(SymbolicError, ZeroDivisionError):
    def __init__(self, message="denominator is zero"):
        super().__init__(message)

class MissingVariable(SymbolicError, LookupError):
    def __init__(self, name):
        super().__init__(f"unknown variable {name!r}")
        self.name = name

class UnsupportedExponent(SymbolicError, ValueError):
    def __init__(self, exponent, reason="only integer exponents are supported"):
        super().__init__(f"{exponent!r}: {reason}")
        self.exponent = exponent

def lift_number(value):
    """Exact rational value of a numeric literal."""
    if isinstance(value, bool):
        raise TypeError(f"not a number: {value!r}")
    elif isinstance(value, Fraction):
        return value
    elif isinstance(value, numbers.Integral):
        return Fraction(int(value))
    elif isinstance(value, numbers.Rational):
        return Fraction(value.numerator, value.denominator)
    elif isinstance(value, (float, Decimal)):
        if not math.isfinite(value):
            raise ValueError(f"not a finite number: {value!r}")
        return Fraction(value)
    else:
        raise TypeError(f"not a number: {value!r} : {type(value).__name__}")

def is_number(value):
    return isinstance(value, (numbers.Rational, float, Decimal)) and not isinstance(value, bool)

def integer_exponent(exponent):
    if isinstance(exponent, bool) or not is_number(exponent):
        raise UnsupportedExponent(exponent)
    if isinstance(exponent, numbers.Integral):
        return int(exponent)
    value = lift_number(exponent)
    if value.denominator != 1:
        raise UnsupportedExponent(exponent)
    return int(value)

def binding_name(key):
    if not isinstance(key, str) or not key:
        raise TypeError(f"binding key must be a variable name, not {key!r}")
    return key

def normalize_bindings(bindings):
    return {binding_name(key): lift_number(value) for key, value in bindings.items()}
