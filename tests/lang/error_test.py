from contextlib import redirect_stdout
import io
import re
import unittest

from parens.core.expression import Integer
from parens.lang.error import (
    ArityMismatch, EmptyList, ErrorHandler, EvalError, IdentifierNotFound, LexicalError, MalformedNumber,
    NotAFunction, NotAnEscapableCharacter, ParensError, ParseError, ScopeError, UnbalancedParenthesis,
    UnexpectedEndOfInput
)

ANSI = re.compile(r"\x1b\[[0-9;]*m")


def plain(text):
    """Strips terminal color codes."""
    return ANSI.sub("", text)


class ParensErrorTestCase(unittest.TestCase):

    def test_messages(self):
        cases = {
            "identifier 'x' not found in scope": IdentifierNotFound("x"),
            "'1' is not a function": NotAFunction(Integer(1)),
            "cannot evaluate an empty list": EmptyList(),
            "'\\q' is not an escapable character": NotAnEscapableCharacter("q"),
            "'add' expects 2 argument(s), got 3": ArityMismatch("add", 2, 3),
            "'1.2.3' is not a valid 32-bit number": MalformedNumber("1.2.3"),
            "anything at all": ParensError("anything at all"),
        }
        for expected, error in cases.items():
            self.assertEqual(expected, str(error), expected)
            self.assertEqual(expected, plain(error.colored_msg()), expected)

    def test_taxonomy(self):
        cases = {
            UnexpectedEndOfInput: LexicalError,
            NotAnEscapableCharacter: LexicalError,
            UnbalancedParenthesis: ParseError,
            MalformedNumber: ParseError,
            IdentifierNotFound: ScopeError,
            NotAFunction: EvalError,
            ArityMismatch: EvalError,
        }
        for error, parent in cases.items():
            self.assertTrue(issubclass(error, parent), error)
            self.assertTrue(issubclass(error, ParensError), error)

    def test_default_span(self):
        error = UnbalancedParenthesis(source="  )", start=2)
        self.assertEqual((2, 3), (error.start, error.end))


class ErrorHandlerTestCase(unittest.TestCase):

    def capture(self, func, *args):
        output = io.StringIO()
        with redirect_stdout(output):
            func(*args)
        return plain(output.getvalue())

    def test_diagnose(self):
        error = IdentifierNotFound("x", source="(+ 1 x)", start=5, end=6)
        self.assertEqual("  (+ 1 x)\n       ^", plain(ErrorHandler.diagnose(error)))

        error = MalformedNumber("1.2.3", source="(+ 1.2.3 4)", start=3, end=8)
        self.assertEqual("  (+ 1.2.3 4)\n     ^~~~~", plain(ErrorHandler.diagnose(error)))

    def test_diagnose_multiline(self):
        error = UnbalancedParenthesis(source="(a\n  )b", start=5, end=6)
        self.assertEqual("    )b\n    ^", plain(ErrorHandler.diagnose(error)))

    def test_throw(self):
        handler = ErrorHandler(fatal=False)
        handler.register_file("<in>")
        handler.register_line("<in>", "(+ 1 x)", 3)

        output = self.capture(handler.throw, IdentifierNotFound("x", source="(+ 1 x)", start=5, end=6))
        self.assertEqual("<in>:3: error: identifier 'x' not found in scope\n  (+ 1 x)\n       ^\n", output)
        self.assertEqual({"<in>": (None, None)}, handler.traceback)

    def test_throw_locates_line_in_chunk(self):
        handler = ErrorHandler(fatal=False)
        handler.register_line("file.lisp", "(a\n  )b", 7)

        output = self.capture(handler.throw, UnbalancedParenthesis(source="(a\n  )b", start=5))
        self.assertTrue(output.startswith("file.lisp:8: error: "), output)

    def test_throw_fatal(self):
        handler = ErrorHandler()
        with self.assertRaises(SystemExit):
            self.capture(handler.throw, EmptyList())

    def test_warn(self):
        output = self.capture(ErrorHandler(fatal=False).warn, ParensError("'x' contains no forms", diagnosis=False))
        self.assertEqual("warning: 'x' contains no forms\n", output)

    def test_register_step(self):
        output = self.capture(ErrorHandler().register_step, 2, "(+ 1 2)", Integer(3))
        self.assertEqual("    (+ 1 2) => 3\n", output)

    def test_context_manager_suppresses_parens_errors(self):
        output = io.StringIO()
        with redirect_stdout(output):
            with ErrorHandler(fatal=False):
                raise IdentifierNotFound("x")
        self.assertIn("error: identifier 'x' not found in scope", plain(output.getvalue()))

    def test_context_manager_reports_internal_errors(self):
        output = io.StringIO()
        with redirect_stdout(output):
            with self.assertRaises(ValueError):
                with ErrorHandler(fatal=False):
                    raise ValueError("boom")
        self.assertIn("[internal] error: unknown error: 'ValueError: boom'", plain(output.getvalue()))

    def test_context_manager_reports_recursion_errors(self):
        output = io.StringIO()
        with redirect_stdout(output):
            with ErrorHandler(fatal=False):
                raise RecursionError()
        self.assertIn("error: maximum recursion depth exceeded", plain(output.getvalue()))


if __name__ == '__main__':
    unittest.main()
