from contextlib import redirect_stdout
import io
import os
import re
import tempfile
import unittest

from parens.main import main

ANSI = re.compile(r"\x1b\[[0-9;]*m")


class MainTestCase(unittest.TestCase):

    def run_file(self, text, *flags):
        output = self.output = io.StringIO()
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, "program.lisp")
            with open(path, "w") as file:
                file.write(text)

            with redirect_stdout(output):
                main([path, *flags])
        return ANSI.sub("", output.getvalue())

    def test_file_results(self):
        output = self.run_file('(def "double" (fn "x" "(+ x x)"))\n(double 21)\n(str "a" 1.5)\n')
        self.assertEqual('<function double>\n42\n"a1.5"\n', output)

    def test_trace_flag(self):
        output = self.run_file("(+ 1 2)\n", "--trace")
        self.assertEqual("(+ 1 2) => 3\n3\n", output)

    def test_max_depth_flag(self):
        with self.assertRaises(SystemExit):
            self.run_file("(((1)))\n", "--max-depth", "2")

    def test_results_before_failing_form_are_printed(self):
        with self.assertRaises(SystemExit):
            self.run_file("(+ 1 2)\n(nope)\n")

        output = ANSI.sub("", self.output.getvalue())
        self.assertTrue(output.startswith("3\n"), output)
        self.assertIn("error: ", output)

    def test_errors_are_fatal(self):
        should_raise = ["(+ 1 x)\n", ")\n", '"unterminated\n', "(1 2)\n"]
        for case in should_raise:
            with self.assertRaises(SystemExit, msg=case) as context:
                self.run_file(case)
            self.assertEqual(1, context.exception.code, case)

    def test_missing_file(self):
        output = io.StringIO()
        with redirect_stdout(output):
            with self.assertRaises(SystemExit):
                main([os.path.join(tempfile.gettempdir(), "does-not-exist.lisp")])
        self.assertIn("error: ", ANSI.sub("", output.getvalue()))


if __name__ == '__main__':
    unittest.main()
