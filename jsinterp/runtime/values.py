"""Runtime values. Values are immutable: arithmetic and concatenation always produce new values. str(value) is the
display rendering used by the command line and the shell.
"""

import math
from dataclasses import dataclass, field


class Value:
    """Superclass for all runtime values."""
    type_name = "value"

    @property
    def truthy(self):
        """Boolean interpretation of this value in an `if` test."""
        return True


@dataclass(frozen=True)
class Number(Value):
    value: float
    type_name = "number"

    @property
    def truthy(self):
        return not (self.value == 0 or math.isnan(self.value))

    def __str__(self):
        return format_number(self.value)


@dataclass(frozen=True)
class String(Value):
    value: str
    type_name = "string"

    @property
    def truthy(self):
        return self.value != ""

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class Boolean(Value):
    value: bool
    type_name = "boolean"

    @property
    def truthy(self):
        return self.value

    def __str__(self):
        return "true" if self.value else "false"


@dataclass(frozen=True, eq=False)
class Function(Value):
    """A function declaration paired with the Environment it was declared in. Compared by identity."""
    name: str
    params: list
    body: object                                   # nodes.Block
    closure: object = field(repr=False)            # Environment; the closure may hold this Function itself
    type_name = "function"

    def __str__(self):
        return f"[Function: {self.name}]"


class UndefinedType(Value):
    type_name = "undefined"

    @property
    def truthy(self):
        return False

    def __eq__(self, other):
        return isinstance(other, UndefinedType)

    def __hash__(self):
        return hash(UndefinedType)

    def __repr__(self):
        return "Undefined"

    def __str__(self):
        return "undefined"


UNDEFINED = UndefinedType()


def format_number(number):
    """Renders number as JavaScript does: integral values without a fractional part, NaN and the infinities by name."""
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "Infinity" if number > 0 else "-Infinity"
    if number == int(number) and abs(number) < 1e21:
        return str(int(number))

    text = repr(number)
    if "e" not in text:
        return text
    mantissa, exponent = text.split("e")
    exponent = int(exponent)
    if -7 < exponent < 0:  # positional down to 1e-6
        digits = mantissa.lstrip("-").replace(".", "")
        return ("-" if number < 0 else "") + "0." + "0" * (-exponent - 1) + digits
    return f"{mantissa}e{exponent:+d}"


def strict_equals(left, right):
    """`===` semantics. Values of different kinds are never equal; NaN is not equal to itself."""
    if type(left) is not type(right):
        return False
    if isinstance(left, Function):
        return left is right
    if isinstance(left, UndefinedType):
        return True
    return left.value == right.value
