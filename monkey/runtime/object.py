"""Object model: the tagged runtime values of the monkey language.

The set of variants is closed. Consumers (the operator tables, the evaluator, the built-ins) dispatch on the concrete
class, never on duck-typed attributes. `inspect()` is the rendering echoed by the shell (strings and characters
quoted), `str()` is the plain rendering used by `print` (strings and characters as-is).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional


INT64_MIN = -2 ** 63
INT64_MAX = 2 ** 63 - 1


class Object(ABC):
    """Superclass of every runtime value."""
    TYPE = "OBJECT"

    @property
    def type(self):
        return self.TYPE

    @abstractmethod
    def inspect(self):
        """Returns the source-like rendering of this value."""

    def __str__(self):
        return self.inspect()


@dataclass(frozen=True)
class Integer(Object):
    TYPE = "INTEGER"
    value: int

    def inspect(self):
        return str(self.value)


@dataclass(frozen=True)
class Float(Object):
    TYPE = "FLOAT"
    value: float

    def inspect(self):
        return repr(self.value)


@dataclass(frozen=True)
class Boolean(Object):
    TYPE = "BOOLEAN"
    value: bool

    def inspect(self):
        return "true" if self.value else "false"


@dataclass(frozen=True)
class String(Object):
    TYPE = "STRING"
    value: str

    def inspect(self):
        return "\"" + self.value.replace("\\", "\\\\").replace("\"", "\\\"") + "\""

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class Character(Object):
    """A single codepoint."""
    TYPE = "CHARACTER"
    value: str

    def inspect(self):
        return "'" + {"\\": "\\\\", "'": "\\'"}.get(self.value, self.value) + "'"

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class Array(Object):
    TYPE = "ARRAY"
    elements: tuple

    def inspect(self):
        return "[" + ", ".join(element.inspect() for element in self.elements) + "]"


@dataclass(frozen=True, eq=False)
class Function(Object):
    """A closure. env is shared with every other closure created in the same scope, never copied."""
    TYPE = "FUNCTION"
    parameters: List[Any]
    body: Any
    env: Any = field(repr=False)

    def inspect(self):
        return f"fn({', '.join(param.value for param in self.parameters)}) {self.body}"


@dataclass(frozen=True, eq=False)
class Builtin(Object):
    """A native function. fn receives the calling Evaluator followed by the evaluated arguments."""
    TYPE = "BUILTIN"
    name: str
    fn: Callable = field(repr=False)

    def inspect(self):
        return f"builtin({self.name})"


class Null(Object):
    TYPE = "NULL"

    def inspect(self):
        return "null"

    def __repr__(self):
        return "Null()"


@dataclass(frozen=True)
class ReturnValue(Object):
    """Wraps the value of an in-flight `return`. Never visible outside a function call or program."""
    TYPE = "RETURN_VALUE"
    value: Object

    def inspect(self):
        return self.value.inspect()


@dataclass(frozen=True)
class Error(Object):
    TYPE = "ERROR"
    message: str
    position: Optional[tuple] = None  # (line, col) of the node that failed

    def inspect(self):
        return f"error: {self.message}"


NULL = Null()
TRUE = Boolean(True)
FALSE = Boolean(False)


def native_bool(value):
    return TRUE if value else FALSE


def new_integer(value):
    """Returns an Integer, or an Error if value does not fit in 64 bits."""
    if not INT64_MIN <= value <= INT64_MAX:
        return Error(f"integer overflow: {value} does not fit in 64 bits")
    return Integer(value)


def new_array(elements):
    return Array(tuple(elements))


def is_error(obj):
    return isinstance(obj, Error)


def is_truthy(obj):
    """Everything but null and false is truthy."""
    if isinstance(obj, Boolean):
        return obj.value
    return not isinstance(obj, Null)
