"""Native functions registered in every session's root scope.

```
(+ a b) (- a b) (* a b)   ; 32-bit integer arithmetic
(identity x)              ; x
(str x ...)               ; printed forms of its args concatenated, strings contribute their raw text
(list x ...)              ; its args as an inert list
(def "name" value)        ; binds name in the calling scope, returns value
(fn "x y" "(+ x y)")      ; function of x and y closing over the calling scope
```

The language has no special forms, so def and fn take names and bodies as strings.
"""

from dataclasses import replace
from functools import wraps
import inspect
import operator

from parens.core.expression import Integer, List, NativeFunction, RegularFunction, String
from parens.core.reader import Reader
from parens.core.scope import Scope
from parens.core.tokenizer import Token, Tokenizer
from parens.lang.error import ArityMismatch, IntegerOverflow, ParensError, TypeMismatch

BUILTINS = {}


def builtin(name, pass_scope=False):
    """Registers the decorated function as a NativeFunction called name. The decorated function takes the evaluated
    arguments positionally (after the calling scope if pass_scope); calls with the wrong number of arguments fail with
    ArityMismatch unless it takes *args.
    """

    def decorator(func):
        params = list(inspect.signature(func).parameters.values())
        if pass_scope:
            params = params[1:]
        variadic = any(param.kind == inspect.Parameter.VAR_POSITIONAL for param in params)

        @wraps(func)
        def check_arity(*args):
            call_args = args[-1]
            if not variadic and len(call_args) != len(params):
                raise ArityMismatch(name, len(params), len(call_args))
            return func(*args[:-1], *call_args)

        BUILTINS[name] = NativeFunction(name, check_arity, pass_scope)
        return func

    return decorator


def expect(name, value, expr_type, description):
    """Raises TypeMismatch unless value is an instance of expr_type."""
    if not isinstance(value, expr_type):
        raise TypeMismatch(name, description, value)
    return value


def integer_op(name, op):
    """Two-operand integer arithmetic, failing on non-integer operands and on 32-bit overflow."""

    def integer_fn(a, b):
        expect(name, a, Integer, "integer operands")
        expect(name, b, Integer, "integer operands")
        try:
            return Integer(op(a.value, b.value))
        except OverflowError:
            raise IntegerOverflow(name) from None

    builtin(name)(integer_fn)


integer_op("+", operator.add)
integer_op("-", operator.sub)
integer_op("*", operator.mul)


@builtin("identity")
def identity(value):
    return value


@builtin("str")
def to_str(*values):
    return String("".join(value.text if isinstance(value, String) else str(value) for value in values))


@builtin("list")
def to_list(*values):
    return List(values)


@builtin("def", pass_scope=True)
def define(scope, name, value):
    """Binds name in the innermost (calling) scope. Anonymous functions take name as their display name."""
    expect("def", name, String, "a string name")
    if isinstance(value, RegularFunction) and value.name == "fn":
        value = replace(value, name=name.text)

    scope.bind(name.text, value)
    return value


def parse_params(params):
    """Splits a String of parameter names. Each name must read as a single identifier and appear only once."""
    names = params.text.split()
    for name in names:
        try:
            tokens = list(Tokenizer(name))
        except ParensError:
            tokens = []

        if tokens != [Token.identifier(name)] or names.count(name) > 1:
            raise TypeMismatch("fn", "distinct identifier parameter names", params)
    return names


@builtin("fn", pass_scope=True)
def make_function(scope, params, body):
    """Builds a RegularFunction from whitespace-separated parameter names and the source of exactly one body form."""
    expect("fn", params, String, "a string of parameter names")
    expect("fn", body, String, "a string body")

    reader = Reader(body.text)
    form = reader.read()
    if not reader.at_end():
        raise TypeMismatch("fn", "a body of exactly one form", body)

    return RegularFunction(parse_params(params), form, scope)


def make_root_scope():
    """Returns a fresh root Scope holding every builtin."""
    return Scope(BUILTINS)
