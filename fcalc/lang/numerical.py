"""Decimal arithmetic for fcalc. Numbers never pass through binary floating point: literals become Decimals, and every
operator below returns a Decimal with insignificant trailing zeros stripped (so `2.50` and `2.5` are the same number).

Rounding policy:
- `+ - * %`, factorial and integral powers are exact
- `/` and `//` round to DIV_PLACES fractional digits
- negative powers are inverted and rounded to INVERSE_PLACES fractional digits
- powers round to DIV_PLACES fractional digits
All rounding is half away from zero.
"""

import functools
from decimal import (Context, Decimal, DivisionByZero, InvalidOperation, Overflow, MAX_EMAX, MAX_PREC, MIN_EMIN,
                     ROUND_DOWN, ROUND_HALF_UP)

from fcalc.lang.error import EvalError


DIV_PLACES = 15
INVERSE_PLACES = 10
FRACTIONAL_PREC = 40
GUARD_DIGITS = 5

EXACT = Context(prec=MAX_PREC, Emax=MAX_EMAX, Emin=MIN_EMIN, traps=[InvalidOperation, DivisionByZero, Overflow])


def number(text):
    """Returns the stripped Decimal of a numeric literal."""
    return strip(Decimal(text))


def strip(num):
    """Removes insignificant trailing zeros from num. Zero is always returned unsigned."""
    if num.is_zero():
        return Decimal(0)
    return num.normalize(EXACT)


def render(num):
    """Plain (non-scientific) string of num."""
    return format(num, "f")


def is_integral(num):
    return num == num.to_integral_value(rounding=ROUND_DOWN)


def _round(num, places):
    return strip(num.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP, context=EXACT))


def _check_divisor(right, op):
    if right.is_zero():
        raise EvalError("division by zero in '{}'", op, diagnosis=False)


def _in_range(op):
    """Reports a result that does not fit the decimal contexts (overflow, or too many digits to round) as an
    EvalError naming op.
    """
    def decorator(operation):
        @functools.wraps(operation)
        def wrapper(*args, **kwargs):
            try:
                return operation(*args, **kwargs)
            except (Overflow, InvalidOperation):
                raise EvalError("result of '{}' is out of range", op, diagnosis=False) from None
        return wrapper
    return decorator


@_in_range("+")
def add(left, right):
    return strip(EXACT.add(left, right))


@_in_range("-")
def subtract(left, right):
    return strip(EXACT.subtract(left, right))


@_in_range("*")
def multiply(left, right):
    return strip(EXACT.multiply(left, right))


@_in_range("/")
def divide(left, right, places=DIV_PLACES):
    """True division rounded to places fractional digits."""
    _check_divisor(right, "/")
    if left.is_zero():
        return Decimal(0)

    # enough digits for the integral part of the quotient plus the requested fraction; truncating here keeps the
    # final half-up rounding exact
    digits = max(left.adjusted() - right.adjusted() + 2, 1) + places + GUARD_DIGITS
    quotient = Context(prec=digits, rounding=ROUND_DOWN, Emax=MAX_EMAX, Emin=MIN_EMIN).divide(left, right)
    return _round(quotient, places)


@_in_range("//")
def floor_divide(left, right):
    """Integral part of the quotient (truncated toward zero)."""
    _check_divisor(right, "//")
    return _round(EXACT.divide_int(left, right), DIV_PLACES)


@_in_range("%")
def modulo(left, right):
    """Remainder with the sign of the dividend."""
    _check_divisor(right, "%")
    return strip(EXACT.remainder(left, right))


def negate(operand):
    return strip(EXACT.minus(operand))


def factorial(operand):
    """operand * (operand -/+ 1) * ... stepping toward zero, so negative integers are allowed: (-3)! == -6."""
    if not is_integral(operand):
        raise EvalError("factorial of non-integer '{}'", render(operand), diagnosis=False)

    result = Decimal(1)
    step = Decimal(1) if operand < 0 else Decimal(-1)
    while not operand.is_zero():
        result = EXACT.multiply(result, operand)
        operand = EXACT.add(operand, step)
    return strip(result)


def _integral_power(base, exponent):
    """base ** exponent by repeated squaring, exponent a non-negative int."""
    result = Decimal(1)
    while exponent:
        if exponent & 1:
            result = EXACT.multiply(result, base)
        exponent >>= 1
        if exponent:
            base = EXACT.multiply(base, base)
    return result


@_in_range("^")
def power(base, exponent):
    """base ^ exponent. The integral part of exponent is applied exactly, any fractional remainder through a
    continuous approximation, and the product is rounded to DIV_PLACES fractional digits.
    """
    if not is_integral(exponent) and base < 0:
        raise EvalError("fractional exponent '{}' of negative base '{}'", (render(exponent), render(base)),
                        diagnosis=False)

    if exponent < 0:
        positive = power(base, negate(exponent))
        if positive.is_zero():
            raise EvalError("zero base '{}' raised to negative exponent '{}'", (render(base), render(exponent)),
                            diagnosis=False)
        return divide(Decimal(1), positive, INVERSE_PLACES)

    whole = int(exponent.to_integral_value(rounding=ROUND_DOWN))
    fraction = EXACT.subtract(exponent, Decimal(whole))

    result = _integral_power(base, whole)
    if not fraction.is_zero():
        approximation = Context(prec=FRACTIONAL_PREC, rounding=ROUND_HALF_UP).power(base, fraction)
        result = EXACT.multiply(result, approximation)
    return _round(result, DIV_PLACES)
