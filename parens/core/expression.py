"""Expression model shared by the reader and the evaluator. An Expression is both a node of the parsed tree and a
runtime value of the language:

```
<expression> ::= <identifier>                    ; unresolved reference, looked up in the scope chain
               | <string> | <integer> | <float>  ; self-evaluating literals
               | <function>                      ; native or regular (user-defined) callable
               | "(" <expression>* ")"           ; list: an application before evaluation, an inert value after
```

All expressions are immutable dataclasses, so equality is structural and evaluation always produces new values.
Integers are signed 32-bit and floats are rounded to 32-bit precision when constructed.
"""

from dataclasses import dataclass, field
from decimal import Decimal
import math
import struct

INT_MIN = -2 ** 31
INT_MAX = 2 ** 31 - 1

ESCAPES = {"\n": "\\n", "\t": "\\t", "\\": "\\\\"}


def to_f32(value):
    """Rounds value to the nearest 32-bit float. Raises OverflowError if value is out of 32-bit range."""
    result = struct.unpack("f", struct.pack("f", value))[0]
    if math.isinf(result) and not math.isinf(value):  # pack may round to inf rather than raise
        raise OverflowError(f"{value} does not fit in a 32-bit float")
    return result


def f32_repr(value):
    """Shortest decimal text that reads back to the same 32-bit float. Always contains a '.' so that it reads back as
    a Float rather than an Integer.
    """
    if math.isinf(value) or math.isnan(value):
        return str(value)

    for precision in range(1, 10):
        text = f"{value:.{precision}g}"
        if to_f32(float(text)) == value:
            break

    text = format(Decimal(text), "f")  # no exponent notation, the tokenizer only reads digits and '.'
    return text if "." in text else text + ".0"


class Expression:
    """Superclass of every node/value in the language."""


@dataclass(frozen=True)
class Identifier(Expression):
    name: str

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class String(Expression):
    """Printed with newlines, tabs and backslashes escaped. There is no escape for '"', so a string containing one
    prints as text that does not read back to the same String.
    """
    text: str

    def __str__(self):
        return '"' + "".join(ESCAPES.get(char, char) for char in self.text) + '"'


@dataclass(frozen=True)
class Integer(Expression):
    value: int

    def __post_init__(self):
        if not INT_MIN <= self.value <= INT_MAX:
            raise OverflowError(f"{self.value} does not fit in a 32-bit integer")

    def __str__(self):
        return str(self.value)


@dataclass(frozen=True)
class Float(Expression):
    value: float

    def __post_init__(self):
        object.__setattr__(self, "value", to_f32(self.value))

    def __str__(self):
        return f32_repr(self.value)


@dataclass(frozen=True)
class List(Expression):
    """Parenthesized form. Items are stored as a tuple whatever sequence is passed in."""
    items: tuple = ()

    def __post_init__(self):
        object.__setattr__(self, "items", tuple(self.items))

    def __len__(self):
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    def __str__(self):
        return "(" + " ".join(str(item) for item in self.items) + ")"


class Function(Expression):
    """Superclass of callable values. Dispatch over the two kinds happens in the evaluator."""


@dataclass(frozen=True, eq=False)
class NativeFunction(Function):
    """Callable implemented in Python. fn receives the tuple of evaluated arguments (and the calling scope first if
    pass_scope) and returns an Expression. Native functions are only equal to themselves.
    """
    name: str
    fn: object = field(repr=False)
    pass_scope: bool = False

    def __str__(self):
        return f"<function {self.name}>"


@dataclass(frozen=True)
class RegularFunction(Function):
    """User-defined function: parameter names, a body, and the scope it was defined in (its closure)."""
    params: tuple
    body: Expression
    scope: object = field(compare=False, repr=False)
    name: str = field(default="fn", compare=False)

    def __post_init__(self):
        object.__setattr__(self, "params", tuple(self.params))

    def __str__(self):
        return f"<function {self.name}>"
