"""Tree-walking evaluator. Literals and functions evaluate to themselves, identifiers are looked up in the scope chain,
and a non-empty list is an application: its head must evaluate to a Function, its remaining items are evaluated left to
right, and the function is called with the results.
"""

from parens.core.expression import Function, Identifier, List, NativeFunction, RegularFunction
from parens.lang.error import ArityMismatch, EmptyList, EvaluationTooDeep, NotAFunction


class Evaluator:
    """Evaluates expressions against a Scope. tracer, if given, is called as tracer(depth, expr, value) after every
    application.
    """
    MAX_DEPTH = 100

    def __init__(self, max_depth=None, tracer=None):
        self.max_depth = Evaluator.MAX_DEPTH if max_depth is None else max_depth
        self.tracer = tracer

    def eval(self, scope, expr, depth=0):
        """Returns the value of expr in scope. Any failure aborts the whole evaluation."""
        if depth > self.max_depth:
            raise EvaluationTooDeep(self.max_depth)

        if isinstance(expr, Identifier):
            return scope.lookup(expr.name)
        elif isinstance(expr, List):
            value = self.eval_list(scope, expr, depth)
            if self.tracer is not None:
                self.tracer(depth, expr, value)
            return value
        return expr

    def eval_list(self, scope, expr, depth):
        if not expr.items:
            raise EmptyList()

        head, *rest = expr.items
        function = self.eval(scope, head, depth + 1)
        if not isinstance(function, Function):
            raise NotAFunction(function)

        args = tuple(self.eval(scope, arg, depth + 1) for arg in rest)
        return self.apply(scope, function, args, depth)

    def apply(self, scope, function, args, depth=0):
        """Calls function with already evaluated args. scope is the calling scope, handed to scope-aware natives."""
        if isinstance(function, NativeFunction):
            if function.pass_scope:
                return function.fn(scope, args)
            return function.fn(args)

        elif isinstance(function, RegularFunction):
            if len(args) != len(function.params):
                raise ArityMismatch(function.name, len(function.params), len(args))

            call_scope = function.scope.child(zip(function.params, args))
            return self.eval(call_scope, function.body, depth + 1)

        raise NotAFunction(function)


def evaluate(scope, expr):
    """Evaluates expr in scope with a default Evaluator."""
    return Evaluator().eval(scope, expr)
