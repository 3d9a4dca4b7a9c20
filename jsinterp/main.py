"""Command-line driver for jsinterp: runs a file, a source string, or the interactive shell. All errors are reported by
the ErrorHandler context manager. Called from the jsinterp console script.
"""

import argparse
import sys

from jsinterp.lang.error import ErrorHandler
from jsinterp.lang.session import Session
from jsinterp.lang.shell import Shell
from jsinterp.syntax.parser import parse_source


def build_parser():
    parser = argparse.ArgumentParser(prog="jsinterp",
                                     description="Tree-walking interpreter for a small JavaScript subset.")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("-e", "--eval", metavar="SOURCE", help="run SOURCE instead of a file")
    parser.add_argument("--ast", action="store_true", help="print the syntax tree instead of evaluating")
    parser.add_argument("--no-color", action="store_true", help="disable colored diagnostics")
    return parser


def main(argv=None):
    """Runs jsinterp. Returns the process exit status."""
    args = build_parser().parse_args(argv)

    with ErrorHandler(color=False if args.no_color else None) as error_handler:
        if args.eval is not None:
            path, source = Session.EVAL_FILE, args.eval
        elif args.file is not None:
            path = args.file
            source = None
        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True)).cmdloop()
            return 0

        if args.ast:
            if source is None:
                source = Session.read_source(path)
            error_handler.register_source(path, source)
            print(parse_source(source).display())
            return 0

        if source is None:
            sess = Session.from_file(error_handler, path)
        else:
            sess = Session(error_handler, path)
            sess.run(source)

        print(sess.pop())

    return 0


if __name__ == "__main__":
    sys.exit(main())
