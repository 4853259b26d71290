"""Runs the fcalc interpreter on a source file, or in command-line mode. Also uses error handling context manager.
Called from the fcalc console script.
"""

import argparse
import sys

from fcalc.lang.error import ErrorHandler
from fcalc.lang.session import Session
from fcalc.lang.shell import Shell


def main(argv=None):
    """Runs fcalc interpreter. Called from fcalc console script."""
    parser = argparse.ArgumentParser(prog="fcalc", description="Curried functional calculator.")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("--no-prelude", action="store_true", help="start without the prelude definitions")
    parser.add_argument("--recursion-limit", type=int, metavar="N",
                        help="maximum Python recursion depth available to reductions")
    args = parser.parse_args(argv)

    if args.recursion_limit is not None:
        sys.setrecursionlimit(args.recursion_limit)
    prelude = None if args.no_prelude else Session.PRELUDE

    with ErrorHandler() as error_handler:
        if args.file is not None:
            sess = Session(error_handler, prelude)
            sess.run_file(args.file)

            for term in sess.results:
                print(term)

        else:
            error_handler.fatal = False
            Shell(Session(error_handler, prelude)).cmdloop()


if __name__ == "__main__":
    main()
