"""Handles interactive/command-line mode for the parens interpreter. Uses cmd as backend."""

import cmd


class Shell(cmd.Cmd):
    """Parens interpreter shell."""
    intro = "Parens interpreter :: Python backend\nType '?' or 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self._first_line = 0  # line num where the pending form started
        self.line_num = 0

    def default(self, line):
        """Reads and evaluates arbitrary parens code."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            if not self._tmp_line:
                self._first_line = self.line_num

            code, incomplete = self.sess.preprocess_line(line, self._tmp_line)

            if incomplete:
                self._tmp_line = code
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt
            self.sess.to_exec.clear()  # drop anything left over from a failed line
            self.sess.results.clear()

            self.sess.add(code, self._first_line)
            try:
                self.sess.run()
            finally:  # forms before a failing one still show their values
                for result in self.sess.results:
                    print(result)
                self.sess.results.clear()

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the parens interpreter!\n\n"
              "Every line is read as one or more forms: literals (1, 2.5, \"text\") evaluate to \n"
              "themselves, identifiers are looked up, and (f a b) calls f with a and b.\n\n"
              "Builtins: + - * identity str list def fn\n\n"
              "Try it out by typing '(def \"add\" (fn \"x y\" \"(+ x y)\"))'. This will bind a \n"
              "function of x and y to 'add'. Next, try typing '(add 1 2)', giving 3 as the result.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        if self._tmp_line:
            return self.default("")
        return False

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
