"""Error reporting for fcalc.

Language errors come in two kinds. Lexical and syntax errors (LexicalError, ParseError) reject a whole input line;
semantic errors (EvalError) abort the current evaluation. Neither touches the session's bindings. ErrorHandler is the
only place they are printed; any other exception that reaches it is reported as an internal issue and re-raised.
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """An fcalc error or warning. msg is a template whose '{}' slots are filled with exprs (bolded when printed).
    exprs[0] should be the offending source text: start and end index into it for the caret diagnosis.
    """

    def __init__(self, msg, exprs=(), start=0, end=-1, diagnosis=True, internal=False):
        if isinstance(exprs, str):
            exprs = [exprs]
        exprs = [str(expr) for expr in exprs] or [""]

        super().__init__(msg.format(*exprs))
        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))
        self.expr = exprs[0]

        self.start = start
        self.end = len(self.expr) if end == -1 else end
        self.diagnosis = diagnosis
        self.internal = internal


class ParseError(GenericException):
    """A token appeared where the grammar forbids it."""


class LexicalError(ParseError):
    """A character matched none of the token patterns."""


class EvalError(GenericException):
    """Semantic failure while reducing a term (bad exponent, division by zero, exhausted recursion, ...)."""


class ErrorHandler:
    """Context manager that prints the fcalc errors raised inside it. When fatal (file mode), the first error ends the
    process; otherwise the error is swallowed so that the shell carries on.
    """
    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, fatal=True):
        self.fatal = fatal
        self.traceback = {}  # dict of file: (line being run, line number), or (None, None) between lines

    def register_file(self, path):
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Marks line of path as being run. Call before Session.run."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Call after Session.run returns normally."""
        self.register_file(path)

    def running(self):
        """(file, line, line number) for every file with a line being run, in registration order."""
        return [(file, line, line_num) for file, (line, line_num) in self.traceback.items() if line]

    @staticmethod
    def diagnose(error, warning=False):
        """Two lines: error.expr with the offending span highlighted, and a caret underneath it."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR
        end = max(error.end, error.start + 1)

        before, culprit, after = error.expr[:error.start], error.expr[error.start:end], error.expr[end:]
        caret = "^" + "~" * (len(culprit) - 1)

        return (f"  {before}{colored(culprit, color, attrs=['bold'])}{after}\n"
                f"  {' ' * len(before)}{colored(caret, color, attrs=['bold'])}")

    def report(self, error, label, color, header=""):
        print(header + colored(f"{label}: ", color, attrs=["bold"]) + error.msg)
        if error.diagnosis and error.expr and not error.internal:
            print(ErrorHandler.diagnose(error, warning=color == ErrorHandler.WARNING))

    def warn(self, *args, **kwargs):
        """Prints a warning built from args as for GenericException, located at the first line being run."""
        warning = GenericException(*args, **kwargs)

        header = ""
        for file, line, line_num in self.running()[:1]:
            col = max(line.find(warning.expr), 0) + warning.start
            header = colored(f"{file}:{line_num}:{col}: ", attrs=["bold"])

        self.report(warning, "warning", ErrorHandler.WARNING, header)

    def throw(self, error):
        """Prints error (a GenericException) below the lines being run. Exits if fatal, else forgets those lines."""
        running = self.running()
        header = "".join(f"  File '{file}', line {line_num}:\n    {line}\n" for file, line, line_num in running)
        if len(running) > 1:
            header = "Traceback:\n" + header
        if error.internal:
            header += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        self.report(error, "error", ErrorHandler.ERROR, header)

        if self.fatal:
            sys.exit(1)
        for file in self.traceback:
            self.register_file(file)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None or issubclass(exc_type, SystemExit):
            return False

        if issubclass(exc_type, GenericException):
            self.throw(exc_val)
        elif issubclass(exc_type, KeyboardInterrupt):
            self.throw(GenericException("keyboard interrupt"))
        elif issubclass(exc_type, RecursionError):
            self.throw(EvalError("normal form might exist, but maximum recursion depth exceeded"))
        else:
            self.throw(GenericException("unknown error: '{}: {}'", (exc_type.__name__, exc_val), internal=True))
            return False
        return True
