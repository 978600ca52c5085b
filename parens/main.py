"""Runs the parens interpreter on a file, or in command-line mode. Also uses the error handling context manager. Called
from the parens executable script.
"""

import argparse

from parens.lang.error import ErrorHandler
from parens.lang.session import Session
from parens.lang.shell import Shell


def main(argv=None):
    """Runs parens interpreter. Called from parens executable script."""
    with ErrorHandler() as error_handler:
        parser = argparse.ArgumentParser(prog="parens")
        parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
        parser.add_argument("--max-depth", help="maximum nesting depth when reading and evaluating", type=int)
        parser.add_argument("--trace", help="print every evaluated list with its value", action="store_true")
        args = parser.parse_args(argv)

        if args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False, max_depth=args.max_depth, trace=args.trace)
            try:
                sess.run()
            finally:  # forms before a failing one still show their values
                for result in sess.results:
                    print(result)

        else:
            sess = Session(error_handler, Session.SH_FILE, cmd_line=True, max_depth=args.max_depth, trace=args.trace)
            Shell(sess).cmdloop()


if __name__ == "__main__":
    main()
