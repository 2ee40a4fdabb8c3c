"""Runs Cobalt scripts, or starts command-line mode if no script is given. Uses the error handling context manager.
Installed as the cobalt console script.
"""

import argparse
import sys

from cobalt.lang.error import ErrorHandler
from cobalt.lang.session import Session
from cobalt.lang.shell import Shell

EX_DATAERR = 65   # lexical or parse fault
EX_SOFTWARE = 70  # runtime fault


def build_parser():
    parser = argparse.ArgumentParser(prog="cobalt", description="Cobalt language interpreter")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("--tokens", action="store_true", help="print the tokens of file instead of running it")
    parser.add_argument("--ast", action="store_true", help="print the syntax tree of file instead of running it")
    return parser


def main(argv=None):
    """Runs cobalt interpreter. Returns the process exit status."""
    args = build_parser().parse_args(argv)

    if args.file is None:
        with ErrorHandler() as error_handler:
            Shell(Session(error_handler)).cmdloop()
        return 0

    error_handler = ErrorHandler(args.file)
    with error_handler:
        sess = Session(error_handler, args.file)

        if args.tokens or args.ast:
            source = Session.read(args.file)
            if args.tokens:
                for token in sess.tokens(source):
                    print(token)
            if args.ast:
                for stmt in sess.syntax_tree(source):
                    print(stmt.display())
        else:
            sess.run_file()

    if error_handler.had_error:
        return EX_DATAERR
    if error_handler.had_runtime_error:
        return EX_SOFTWARE
    return 0


if __name__ == "__main__":
    sys.exit(main())
