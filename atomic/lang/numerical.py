"""Fixed-width integers for the Atomic language. Every number in Atomic is a 32-bit signed integer, and arithmetic wraps
around on overflow the way two's complement hardware does.
"""

import re

BITS = 32
INT32_MIN = -(1 << (BITS - 1))
INT32_MAX = (1 << (BITS - 1)) - 1

_INT32_LITERAL = re.compile(r"[+-]?[0-9]+")


def wrap(number):
    """Returns number reduced into the int32 range."""
    return (number - INT32_MIN) % (1 << BITS) + INT32_MIN


def parse_int32(word):
    """Returns int value of word if it is a signed decimal literal that fits in 32 bits, else None."""
    if not _INT32_LITERAL.fullmatch(word):
        return None

    number = int(word)
    if not INT32_MIN <= number <= INT32_MAX:
        return None
    return number


def add(left, right):
    return wrap(left + right)


def subtract(left, right):
    return wrap(left - right)


def multiply(left, right):
    return wrap(left * right)


def divide(left, right):
    """Integer division truncating towards zero. Raises ZeroDivisionError if right is 0."""
    quotient = abs(left) // abs(right)
    if (left < 0) != (right < 0):
        quotient = -quotient
    return wrap(quotient)


def modulus(left, right):
    """Remainder of divide, which takes the sign of left. Raises ZeroDivisionError if right is 0."""
    return wrap(left - right * divide(left, right)) if right != -1 else 0
