"""Session control for the parens language. A Session is the context every evaluation runs in: it owns the root scope
(builtins are registered once, when the session starts), the evaluator, and the forms waiting to be run, either from a
file or from the interactive shell.
"""

from parens.core.evaluator import Evaluator
from parens.core.reader import Reader
from parens.core.tokenizer import Tokenizer, TokenKind
from parens.lang.builtins import make_root_scope
from parens.lang.error import FileNotReadable, ParensError, UnexpectedEndOfInput


class Session:
    """Governs a parens session, with control over the root scope."""
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, path, cmd_line, max_depth=None, trace=False):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path            # used for error messages
        self.cmd_line = cmd_line    # whether or not in command-line mode
        self.max_depth = max_depth  # nesting limit for both reading and evaluating

        self.scope = make_root_scope()
        self.evaluator = Evaluator(max_depth, tracer=error_handler.register_step if trace else None)

        self.to_exec = []  # list of (line num, code, form) to evaluate
        self.results = []

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            chunks = []
            try:
                with open(path, "r") as file:
                    chunks = Session.split_chunks(file)
            except OSError:
                raise FileNotReadable(path, diagnosis=False) from None

            if not chunks:
                self.error_handler.warn(ParensError(f"'{path}' contains no forms", diagnosis=False))
            for code, line_num in chunks:
                self.add(code, line_num)

        elif not cmd_line:
            raise ParensError("'<in>' is a reserved filename")

    @staticmethod
    def split_chunks(lines):
        """Groups lines into chunks of complete forms. Returns a list of (code, first line num)."""
        chunks = []
        pending, first_line = "", None

        for line_num, line in enumerate(lines, start=1):
            code, incomplete = Session.preprocess_line(line.rstrip("\n"), pending)
            if first_line is None:
                first_line = line_num

            if incomplete:
                pending = code
                continue

            if code.strip():
                chunks.append((code, first_line))
            pending, first_line = "", None

        if pending:
            chunks.append((pending, first_line))  # incomplete: raises when added
        return chunks

    @staticmethod
    def preprocess_line(line, previous=""):
        """Joins line to previous, the pending text of an incomplete form (if any). Returns the joined text and
        whether or not it is still incomplete, i.e. needs a line continuation.
        """
        code = f"{previous}\n{line}" if previous else line
        return code, Session.is_incomplete(code)

    @staticmethod
    def is_incomplete(code):
        """Whether or not code has unclosed lists or an unterminated string. Other lexical errors are left for add to
        report.
        """
        depth = 0
        try:
            for token in Tokenizer(code):
                if token.kind is TokenKind.LEFT_PAREN:
                    depth += 1
                elif token.kind is TokenKind.RIGHT_PAREN:
                    depth -= 1
                    if depth < 0:  # unbalanced, no later line can close it
                        return False
        except UnexpectedEndOfInput:
            return True
        except ParensError:
            return False
        return depth > 0

    def add(self, code, line_num):
        """Reads every form in code and queues them. Evaluation is delayed until run is called."""
        self.error_handler.register_line(self.path, code, line_num)  # in case error is raised

        forms = list(Reader(code, self.max_depth).read_all())
        self.to_exec.extend((line_num, code, form) for form in forms)

        self.error_handler.remove_line(self.path)  # error was not raised
        return forms

    def run(self):
        """Evaluates queued forms in order, appending their values to self.results. A form is dequeued before it is
        evaluated, so a failing form is never run twice.
        """
        while self.to_exec:
            line_num, code, form = self.to_exec.pop(0)
            self.error_handler.register_line(self.path, code, line_num)

            self.results.append(self.evaluator.eval(self.scope, form))

            self.error_handler.remove_line(self.path)

    def pop(self):
        """Removes and returns the most recent result."""
        return self.results.pop()
