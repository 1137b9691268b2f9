"""Pure number-theory and formatting helpers used by the evaluator."""
from fractions import Fraction
import math
from typing import List

from postfix_calculator.common.errors import InvalidArgument, NegativeFactorial
from postfix_calculator.common.logger import logger

PI_SIGN: str = "\N{GREEK SMALL LETTER PI}"
DEFAULT_MAX_DENOMINATOR: int = 1_000_000_000

# prime and factor work on 32-bit integers
INT_MIN: int = -2 ** 31
INT_MAX: int = 2 ** 31 - 1


def gcd(a: int, b: int) -> int:
    """
    Greatest common divisor of two integers, always >= 0.

    gcd(0, 0) is undefined: it is reported and 0 is returned.
    """
    if a == 0 and b == 0:
        logger.warning("gcd(0, 0) is undefined, returning 0")
        return 0
    return math.gcd(a, b)


def lcm(a: int, b: int) -> int:
    """
    Least common multiple of two integers, always >= 0.

    lcm(a, 0) is |a|; lcm(0, 0) is undefined: it is reported and 0 is returned.
    """
    if a == 0 and b == 0:
        logger.warning("lcm(0, 0) is undefined, returning 0")
        return 0
    if a == 0 or b == 0:
        return max(abs(a), abs(b))
    return abs(a * b) // math.gcd(a, b)


def factorial(n: int) -> int:
    """
    n! for n >= 0.

    :raises NegativeFactorial: If n is negative
    """
    if n < 0:
        raise NegativeFactorial(f"factorial of negative number {n}")
    return math.factorial(n)


def permutation(n: int, k: int) -> int:
    """Number of ordered selections of k items out of n; 0 when k is outside [0, n]."""
    if k < 0 or k > n:
        return 0
    return math.perm(n, k)


def combination(n: int, k: int) -> int:
    """Number of unordered selections of k items out of n; 0 when k is outside [0, n]."""
    if k < 0 or k > n:
        return 0
    return math.comb(n, k)


def _check_int_range(n: int, name: str) -> None:
    if not INT_MIN <= n <= INT_MAX:
        raise InvalidArgument(f"{name} needs an integer in [{INT_MIN}, {INT_MAX}], got {n}")


def is_prime(n: int) -> bool:
    """
    Trial-division primality test.

    :raises InvalidArgument: If n is outside the 32-bit integer range
    """
    _check_int_range(n, "prime")
    if n < 2:
        return False
    return all(n % i for i in range(2, math.isqrt(n) + 1))


def prime_factors(n: int) -> str:
    """
    Prime factorization written as a product, e.g. 360 -> "[2^3] * [3^2] * 5".

    Negative numbers get a leading "-1 * " factor; -1, 0 and 1 are returned as is.

    :raises InvalidArgument: If n is outside the 32-bit integer range
    """
    _check_int_range(n, "factor")
    if -1 <= n <= 1:
        return str(n)

    parts: List[str] = ["-1"] if n < 0 else []
    rest = abs(n)
    factor = 2
    # Factors below factor have been divided out, so each hit is prime
    while factor * factor <= rest:
        exponent = 0
        while rest % factor == 0:
            rest //= factor
            exponent += 1
        if exponent > 1:
            parts.append(f"[{factor}^{exponent}]")
        elif exponent == 1:
            parts.append(str(factor))
        factor += 1
    if rest > 1:
        parts.append(str(rest))
    return " * ".join(parts)


def _best_fraction(x: float, max_denominator: int) -> Fraction:
    if not math.isfinite(x):
        raise InvalidArgument(f"cannot write {x} as a fraction")
    return Fraction(x).limit_denominator(max_denominator)


def to_fraction(x: float, max_denominator: int = DEFAULT_MAX_DENOMINATOR) -> str:
    """
    Best rational approximation of x as "p/q", with q <= max_denominator.

    :param float x: Value to approximate
    :param int max_denominator: Largest denominator allowed

    :return: Fraction string, e.g. 0.75 -> "3/4", 2.0 -> "2/1"
    :rtype: str
    :raises InvalidArgument: If x is NaN or infinite
    """
    fraction = _best_fraction(x, max_denominator)
    return f"{fraction.numerator}/{fraction.denominator}"


def pify(x: float, max_denominator: int = DEFAULT_MAX_DENOMINATOR) -> str:
    """
    Write x as a multiple of pi.

    Examples:
        - 1.75 * pi -> "π + (3/4)π"
        - 0.5 * pi -> "(1/2)π"
        - -2 * pi -> "-2π"

    :param float x: Value to rewrite
    :param int max_denominator: Largest denominator of the fractional coefficient

    :return: Expression in terms of π
    :rtype: str
    :raises InvalidArgument: If x is NaN or infinite
    """
    coefficient = _best_fraction(abs(x) / math.pi, max_denominator)
    if coefficient == 0:
        return "0"

    integer_part = math.floor(coefficient)
    fractional_part = coefficient - integer_part
    sign, joiner = ("", " + ") if x > 0 else ("-", " - ")
    whole = "" if integer_part == 1 else str(integer_part)

    if fractional_part == 0:
        return f"{sign}{whole}{PI_SIGN}"
    fractional = f"({fractional_part.numerator}/{fractional_part.denominator}){PI_SIGN}"
    if integer_part == 0:
        return f"{sign}{fractional}"
    return f"{sign}{whole}{PI_SIGN}{joiner}{fractional}"


def arsh(x: float) -> float:
    """Inverse hyperbolic sine, defined everywhere."""
    return math.asinh(x)


def arch(x: float) -> float:
    """Inverse hyperbolic cosine; NaN below 1."""
    if x < 1:
        return math.nan
    return math.acosh(x)


def arth(x: float) -> float:
    """Inverse hyperbolic tangent; +/-inf at +/-1 and NaN outside [-1, 1]."""
    if abs(x) > 1:
        return math.nan
    if abs(x) == 1:
        return math.copysign(math.inf, x)
    return math.atanh(x)
