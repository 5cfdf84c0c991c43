"""Runs .monkey files, source strings or the interactive shell, inside the error handling context manager. Called
from the monkey console script.

Python version must be >=3.7, because error handling requires that dicts are insertion-ordered.
"""

import argparse
import os
import sys

from monkey.lang.error import ErrorHandler
from monkey.lang.session import Session
from monkey.lang.shell import Shell


RECURSION_LIMIT = 10000  # evaluation recurses once per nested call or expression


def main(argv=None):
    """Runs monkey interpreter. Called from monkey console script."""
    assert sys.version_info >= (3, 7), "monkey cannot be run with python < 3.7"

    with ErrorHandler() as error_handler:
        parser = argparse.ArgumentParser(prog="monkey", description="Monkey language interpreter")
        parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
        parser.add_argument("-e", "--eval", metavar="SOURCE", help="evaluate SOURCE instead of a file")
        parser.add_argument("--no-color", action="store_true", help="disable colored diagnostics")
        parser.add_argument("--tokens", action="store_true", help="print the token stream of every input")
        parser.add_argument("--ast", action="store_true", help="print the syntax tree of every input")
        args = parser.parse_args(argv)

        if args.no_color:
            os.environ["NO_COLOR"] = "1"  # honored by termcolor>=2.1
            os.environ["ANSI_COLORS_DISABLED"] = "1"  # honored by older termcolor releases

        sys.setrecursionlimit(max(sys.getrecursionlimit(), RECURSION_LIMIT))
        dumps = {"dump_tokens": args.tokens, "dump_ast": args.ast}

        if args.eval is not None or args.file is not None:
            if args.eval is not None:
                sess = Session(error_handler, Session.EVAL_FILE, cmd_line=False, source=args.eval, **dumps)
            else:
                sess = Session(error_handler, args.file, cmd_line=False, **dumps)
            sess.run()

            for result in sess.results:
                print(result)

        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True, **dumps)).cmdloop()


if __name__ == "__main__":
    main()
