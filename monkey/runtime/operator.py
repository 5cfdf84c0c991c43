"""Operator semantics: type-directed dispatch tables for prefix and infix operators.

INFIX_OPERATORS maps (operator, left class, right class) to an implementation, PREFIX_OPERATORS maps (operator, operand
class). Mixed Integer/Float operands are registered with the Float implementation, which promotes the Integer operand.
Characters compare by codepoint. Equality is not table-driven: `==` and `!=` are defined for every pair of objects
(see equals).

Anything missing from the tables evaluates to an Error object; operators never raise.
"""

import math

from monkey.runtime.object import (Array, Builtin, Character, Error, Float, Function, Integer, Null, String,
                                   is_truthy, native_bool, new_array, new_integer)


INFIX_OPERATORS = {}
PREFIX_OPERATORS = {}

INTEGERS = [(Integer, Integer)]
FLOATS = [(Integer, Float), (Float, Integer), (Float, Float)]
STRINGS = [(String, String)]
CHARACTERS = [(Character, Character)]
ARRAYS = [(Array, Array)]


def infix(operator, pairs):
    """Registers the decorated function for operator over each (left class, right class) in pairs."""
    def decorator(func):
        for left, right in pairs:
            INFIX_OPERATORS[(operator, left, right)] = func
        return func
    return decorator


def prefix(operator, classes):
    def decorator(func):
        for cls in classes:
            PREFIX_OPERATORS[(operator, cls)] = func
        return func
    return decorator


def division_by_zero(operator):
    return Error(f"division by zero in '{operator}'")


def truncated_div(left, right):
    """Integer division rounding toward zero."""
    quotient = abs(left) // abs(right)
    return -quotient if (left < 0) != (right < 0) else quotient


# ---------------------------------------------------------------------------------------------------------------------
# integer arithmetic

@infix("+", INTEGERS)
def int_add(left, right):
    return new_integer(left.value + right.value)


@infix("-", INTEGERS)
def int_sub(left, right):
    return new_integer(left.value - right.value)


@infix("*", INTEGERS)
def int_mul(left, right):
    return new_integer(left.value * right.value)


@infix("/", INTEGERS)
def int_div(left, right):
    if right.value == 0:
        return division_by_zero("/")
    return new_integer(truncated_div(left.value, right.value))


@infix("%", INTEGERS)
def int_mod(left, right):
    """Remainder with the sign of the dividend."""
    if right.value == 0:
        return division_by_zero("%")
    return new_integer(left.value - right.value * truncated_div(left.value, right.value))


@infix("**", INTEGERS)
def int_pow(left, right):
    if right.value < 0:
        return float_pow(left, right)
    if abs(left.value) > 1 and right.value >= 64:
        return Error(f"integer overflow: {left.value} ** {right.value} does not fit in 64 bits")
    return new_integer(left.value ** right.value)


# ---------------------------------------------------------------------------------------------------------------------
# float arithmetic, with Integer operands promoted

@infix("+", FLOATS)
def float_add(left, right):
    return Float(float(left.value) + float(right.value))


@infix("-", FLOATS)
def float_sub(left, right):
    return Float(float(left.value) - float(right.value))


@infix("*", FLOATS)
def float_mul(left, right):
    return Float(float(left.value) * float(right.value))


@infix("/", FLOATS)
def float_div(left, right):
    if right.value == 0:
        return division_by_zero("/")
    return Float(float(left.value) / float(right.value))


@infix("%", FLOATS)
def float_mod(left, right):
    if right.value == 0:
        return division_by_zero("%")
    return Float(math.fmod(left.value, right.value))


@infix("**", FLOATS)
def float_pow(left, right):
    try:
        return Float(math.pow(left.value, right.value))
    except ZeroDivisionError:
        return division_by_zero("**")
    except ValueError:
        return Error(f"math domain error: {left.inspect()} ** {right.inspect()}")
    except OverflowError:
        return Error(f"float overflow: {left.inspect()} ** {right.inspect()}")


# ---------------------------------------------------------------------------------------------------------------------
# comparison

@infix("<", INTEGERS + FLOATS + STRINGS + CHARACTERS)
def less_than(left, right):
    return native_bool(left.value < right.value)


@infix(">", INTEGERS + FLOATS + STRINGS + CHARACTERS)
def greater_than(left, right):
    return native_bool(left.value > right.value)


@infix("<=", INTEGERS + FLOATS + STRINGS + CHARACTERS)
def less_equal(left, right):
    return native_bool(left.value <= right.value)


@infix(">=", INTEGERS + FLOATS + STRINGS + CHARACTERS)
def greater_equal(left, right):
    return native_bool(left.value >= right.value)


def equals(left, right):
    """Structural equality for values and arrays, identity for functions. Objects of different kinds are unequal,
    except Integer and Float which compare numerically.
    """
    numbers = (Integer, Float)
    if isinstance(left, numbers) and isinstance(right, numbers):
        return left.value == right.value
    if type(left) is not type(right):
        return False
    if isinstance(left, Array):
        return len(left.elements) == len(right.elements) and all(
            equals(lhs, rhs) for lhs, rhs in zip(left.elements, right.elements))
    if isinstance(left, (Function, Builtin)):
        return left is right
    if isinstance(left, Null):
        return True
    return left.value == right.value


# ---------------------------------------------------------------------------------------------------------------------
# sequences

@infix("+", STRINGS)
def string_concat(left, right):
    return String(left.value + right.value)


@infix("+", ARRAYS)
def array_concat(left, right):
    return new_array(left.elements + right.elements)


# ---------------------------------------------------------------------------------------------------------------------
# prefix

@prefix("-", [Integer])
def int_negate(right):
    return new_integer(-right.value)


@prefix("-", [Float])
def float_negate(right):
    return Float(-right.value)


def logical_not(right):
    return native_bool(not is_truthy(right))


# ---------------------------------------------------------------------------------------------------------------------
# dispatch

def eval_infix(operator, left, right):
    """Applies a binary operator to two evaluated operands."""
    if operator == "==":
        return native_bool(equals(left, right))
    if operator == "!=":
        return native_bool(not equals(left, right))

    func = INFIX_OPERATORS.get((operator, type(left), type(right)))
    if func is not None:
        return func(left, right)
    if type(left) is not type(right):
        return Error(f"type mismatch: {left.type} {operator} {right.type}")
    return Error(f"unknown operator: {left.type} {operator} {right.type}")


def eval_prefix(operator, right):
    """Applies a unary operator to an evaluated operand."""
    if operator == "!":
        return logical_not(right)

    func = PREFIX_OPERATORS.get((operator, type(right)))
    if func is not None:
        return func(right)
    return Error(f"unknown operator: {operator}{right.type}")
