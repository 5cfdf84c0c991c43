"""Built-in functions and constants. BUILTINS is filled once, at import time, and is read-only afterwards: the evaluator
only consults it when a name is not bound anywhere in the environment chain.

Built-ins validate their own arguments and return Error objects instead of raising.
"""

import math
import re

from monkey.runtime.object import (Array, Boolean, Builtin, Character, Error, Float, Integer, Null, String, Object,
                                   NULL, is_truthy, native_bool, new_array, new_integer)


BUILTINS = {}

INTEGER_TEXT = re.compile(r"[+-]?[0-9]+")
FLOAT_TEXT = re.compile(r"[+-]?[0-9]+(\.[0-9]*)?")  # what the lexer reads, plus a sign


def builtin(name, arity=None, types=None):
    """Registers the decorated function under name. arity=None means variadic. types, if given, is a list with one
    class (or tuple of classes) per argument.

    The decorated function is called as func(evaluator, *arguments).
    """

    def decorator(func):
        def checked(evaluator, *arguments):
            if arity is not None and len(arguments) != arity:
                return Error(f"wrong number of arguments to `{name}`: want={arity}, got={len(arguments)}")
            for idx, (argument, expected) in enumerate(zip(arguments, types or [])):
                if not isinstance(argument, expected):
                    return Error(f"argument {idx} to `{name}` not supported, got {argument.type}")
            return func(evaluator, *arguments)

        checked.__name__ = func.__name__
        BUILTINS[name] = Builtin(name, checked)
        return func

    return decorator


def _write(stream, arguments):
    stream.write(" ".join(str(argument) for argument in arguments) + "\n")
    return NULL


@builtin("print")
def builtin_print(evaluator, *arguments):
    return _write(evaluator.stdout, arguments)


@builtin("eprint")
def builtin_eprint(evaluator, *arguments):
    return _write(evaluator.stderr, arguments)


@builtin("exit", 1, [Integer])
def builtin_exit(evaluator, code):
    raise SystemExit(code.value)


@builtin("len", 1, [(String, Array)])
def builtin_len(evaluator, value):
    if isinstance(value, String):
        return Integer(len(value.value))
    return Integer(len(value.elements))


@builtin("append", 2, [Array, Object])
def builtin_append(evaluator, array, value):
    return new_array(array.elements + (value,))


# ---------------------------------------------------------------------------------------------------------------------
# casts

@builtin("bool", 1)
def builtin_bool(evaluator, value):
    if isinstance(value, (Integer, Float)):
        return native_bool(value.value != 0)
    if isinstance(value, String):
        return native_bool(value.value != "")
    if isinstance(value, Array):
        return native_bool(len(value.elements) != 0)
    if isinstance(value, (Boolean, Null, Character)):
        return native_bool(is_truthy(value))
    return Error(f"cannot convert {value.type} to BOOLEAN")


@builtin("int", 1)
def builtin_int(evaluator, value):
    if isinstance(value, Integer):
        return value
    if isinstance(value, Boolean):
        return Integer(int(value.value))
    if isinstance(value, Character):
        return Integer(ord(value.value))
    if isinstance(value, Float):
        if math.isnan(value.value) or math.isinf(value.value):
            return Error(f"cannot convert {value.inspect()} to INTEGER")
        return new_integer(int(value.value))
    if isinstance(value, String):
        text = value.value.strip()
        if not INTEGER_TEXT.fullmatch(text):
            return Error(f"cannot convert {value.inspect()} to INTEGER")
        return new_integer(int(text))
    return Error(f"cannot convert {value.type} to INTEGER")


@builtin("float", 1)
def builtin_float(evaluator, value):
    if isinstance(value, Float):
        return value
    if isinstance(value, (Integer, Boolean)):
        return Float(float(value.value))
    if isinstance(value, String):
        text = value.value.strip()
        if not FLOAT_TEXT.fullmatch(text):
            return Error(f"cannot convert {value.inspect()} to FLOAT")
        return Float(float(text))
    return Error(f"cannot convert {value.type} to FLOAT")


@builtin("str", 1)
def builtin_str(evaluator, value):
    return String(str(value))


@builtin("char", 1, [Integer])
def builtin_char(evaluator, codepoint):
    if not 0 <= codepoint.value <= 0x10FFFF or 0xD800 <= codepoint.value <= 0xDFFF:
        return Error(f"{codepoint.value} is not a valid codepoint")
    return Character(chr(codepoint.value))


# ---------------------------------------------------------------------------------------------------------------------
# constants

BUILTINS["pi"] = Float(math.pi)


def lookup(name):
    """Returns the built-in bound to name, or None."""
    return BUILTINS.get(name)
