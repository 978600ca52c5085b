"""Error handling for the parens language. Every failure raised by the tokenizer, reader, scope or evaluator is a
ParensError: if another type of error makes it all the way to ErrorHandler, it is assumed to be an internal issue.

The taxonomy is

```
ParensError
 ├── LexicalError     UnexpectedEndOfInput, NotAnEscapableCharacter, InvalidNumberCharacter, UnexpectedCharacter
 ├── ParseError       UnbalancedParenthesis, MalformedNumber, NestingTooDeep
 ├── ScopeError       IdentifierNotFound
 ├── EvalError        NotAFunction, EmptyList, ArityMismatch, TypeMismatch, IntegerOverflow, EvaluationTooDeep
 └── FileNotReadable
```
"""

import sys

from termcolor import colored


class ParensError(Exception):
    """Templates an error message so that it can be displayed plain (str) or highlighted (colored_msg). The positional
    args fill in template; source, start and end locate the offending text for diagnosis.
    """
    template = "{}"

    def __init__(self, *args, source=None, start=0, end=-1, diagnosis=True, internal=False):
        super().__init__(*args)

        self.source = source if source is not None else ""
        self.start = start
        self.end = end if end != -1 else start + 1  # needed for error display

        self.diagnosis = diagnosis
        self.internal = internal

    @property
    def msg(self):
        return self.template.format(*self.args)

    def colored_msg(self):
        """Same as msg, but with every templated arg bolded."""
        return self.template.format(*(colored(str(arg), attrs=["bold"]) for arg in self.args))

    def __str__(self):
        return self.msg


class LexicalError(ParensError):
    """Raised by the tokenizer when raw text does not have a valid lexical shape."""


class UnexpectedEndOfInput(LexicalError):
    template = "unexpected end of input"


class NotAnEscapableCharacter(LexicalError):
    template = "'\\{}' is not an escapable character"

    @property
    def char(self):
        return self.args[0]


class InvalidNumberCharacter(LexicalError):
    template = "invalid character '{}' in number"

    @property
    def char(self):
        return self.args[0]


class UnexpectedCharacter(LexicalError):
    template = "unexpected character '{}'"

    @property
    def char(self):
        return self.args[0]


class ParseError(ParensError):
    """Raised by the reader when tokens do not assemble into a valid form."""


class UnbalancedParenthesis(ParseError):
    template = "unbalanced closing parenthesis"


class MalformedNumber(ParseError):
    template = "'{}' is not a valid 32-bit number"

    @property
    def text(self):
        return self.args[0]


class NestingTooDeep(ParseError):
    template = "lists nested deeper than {} levels"

    @property
    def limit(self):
        return self.args[0]


class ScopeError(ParensError):
    """Raised when a scope chain cannot satisfy a lookup."""


class IdentifierNotFound(ScopeError):
    template = "identifier '{}' not found in scope"

    @property
    def name(self):
        return self.args[0]


class EvalError(ParensError):
    """Raised by the evaluator and by native functions."""


class NotAFunction(EvalError):
    template = "'{}' is not a function"

    @property
    def value(self):
        return self.args[0]


class EmptyList(EvalError):
    template = "cannot evaluate an empty list"


class ArityMismatch(EvalError):
    template = "'{}' expects {} argument(s), got {}"

    @property
    def name(self):
        return self.args[0]

    @property
    def expected(self):
        return self.args[1]

    @property
    def got(self):
        return self.args[2]


class TypeMismatch(EvalError):
    template = "'{}' expects {}, got '{}'"

    @property
    def name(self):
        return self.args[0]

    @property
    def expected(self):
        return self.args[1]

    @property
    def got(self):
        return self.args[2]


class IntegerOverflow(EvalError):
    template = "result of '{}' does not fit in a 32-bit integer"


class EvaluationTooDeep(EvalError):
    template = "evaluation nested deeper than {} levels"

    @property
    def limit(self):
        return self.args[0]


class FileNotReadable(ParensError):
    template = "'{}' could not be opened"


class ErrorHandler:
    """Context manager that will silently suppress Python errors and report parens errors/warnings instead."""
    ERROR = "red"
    WARNING = "magenta"
    STEP = "cyan"

    def __init__(self, fatal=True):
        self.fatal = fatal
        self.traceback = {}

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Registers line in traceback given path. Should be called prior to Session add/run."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Removes line from traceback given path. Should be called after successful Session add/run."""
        self.traceback[path] = (None, None)

    @staticmethod
    def diagnose(error, warning=False):
        """Returns the line of error.source holding the offending span, with the span highlighted and underlined."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        line_start = error.source.rfind("\n", 0, error.start) + 1
        line_end = error.source.find("\n", error.start)
        if line_end == -1:
            line_end = len(error.source)

        line = error.source[line_start:line_end]
        start = error.start - line_start
        end = max(min(error.end, line_end) - line_start, start + 1)

        diagnosis = "  " + line[:start]
        diagnosis += colored(line[start:end], color, attrs=["bold"])
        diagnosis += line[end:] + "\n"

        diagnosis += "  " + " " * start
        diagnosis += colored("^" + "~" * (end - start - 1), color, attrs=["bold"])

        return diagnosis

    def _location(self, error=None):
        """Returns 'file:line: ' for the most recently registered line, or an empty string."""
        for file, (line, line_num) in self.traceback.items():  # assumes dict is insertion-ordered
            if line is not None:
                if error is not None and error.source == line:
                    line_num += line.count("\n", 0, error.start)
                return colored(f"{file}:{line_num}: ", attrs=["bold"])
        return ""

    def warn(self, error):
        """Prints a warning message for error without raising it."""
        error_msg = self._location(error)
        error_msg += colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + error.colored_msg()
        print(error_msg)

        if not error.internal and error.source and error.diagnosis:
            print(ErrorHandler.diagnose(error, warning=True))

    def register_step(self, depth, expr, value):
        """Prints one evaluation step, indented by depth. Used as the evaluator's tracer."""
        print(colored(f"{'  ' * depth}{expr} => {value}", ErrorHandler.STEP, attrs=["dark"]))

    def throw(self, error):
        """Reports error, which must be a ParensError, using self.traceback to locate it. Exits the process if fatal."""
        error_msg = self._location(error)

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.colored_msg()
        print(error_msg)

        if not error.internal and error.source and error.diagnosis:
            print(ErrorHandler.diagnose(error))

        if self.fatal:
            sys.exit(1)
        for path in self.traceback:  # if error occurred, reset traceback (no need if error is fatal)
            self.remove_line(path)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(ParensError("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(ParensError("maximum recursion depth exceeded"))
        elif exc_type is not None and issubclass(exc_type, ParensError):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(ParensError(f"unknown error: '{exc_type.__name__}: {exc_val}'", internal=True))
            do_exit = True

        return not do_exit
