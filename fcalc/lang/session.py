"""Session control for fcalc. A Session owns one namespace of global bindings, seeds it with the prelude, and is the
only way statements are parsed and evaluated against it, either line by line from the shell or from a source file.

Sessions share nothing, so independent sessions (or tests) never see each other's bindings. A Session is not
thread-safe: callers sharing one across threads must serialize every call.
"""

import os

from fcalc.lang.error import ErrorHandler, EvalError, GenericException
from fcalc.lang.namespace import Namespace
from fcalc.pure.lexical import Lexer, TokenKind
from fcalc.pure.parser import parse
from fcalc.pure.reducer import Reducer
from fcalc.pure.term import Assign


class Session:
    """Governs an fcalc session, with control over its global bindings."""
    SH_FILE = "<in>"  # command-line interpreter filename
    PRELUDE = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "common", "prelude.fc")

    def __init__(self, error_handler=None, prelude=PRELUDE):
        if error_handler is None:
            error_handler = ErrorHandler(fatal=False)
        self.error_handler = error_handler

        self.prelude = prelude          # path to the prelude, or None for an empty session
        self.namespace = Namespace()
        self.reducer = Reducer(self.namespace)
        self.results = []               # results of executed (non-assignment) statements

        self.init()

    def init(self):
        """Seeds the namespace with the prelude."""
        if self.prelude is not None:
            self.run_file(self.prelude)

    @staticmethod
    def lex(src):
        """Tokens of src, without the trailing EOF."""
        return [token for token in Lexer(src).tokens() if token.kind is not TokenKind.EOF]

    @staticmethod
    def parse(src):
        return parse(src)

    def evaluate(self, term):
        """Reduces term (a Term or source string) to normal form. A runaway recursion is reported as an EvalError;
        either way the namespace is left as it was before the failing statement.
        """
        if isinstance(term, str):
            term = self.parse(term)

        try:
            return self.reducer.reduce(term)
        except RecursionError:
            msg = "'{}' has no normal form within the maximum recursion depth"
            raise EvalError(msg, str(term), diagnosis=False) from None

    def bind_global(self, name, term):
        self.namespace.bind(name, term)

    def lookup_global(self, name):
        return self.namespace.lookup(name)

    def remove_global(self, name):
        """Drops name. Returns whether it was bound."""
        return self.namespace.remove(name)

    def clear_globals(self):
        """Drops every binding and re-seeds the prelude."""
        self.namespace.clear()
        self.init()

    def bindings(self):
        return self.namespace.items()

    def run(self, line):
        """Evaluates one statement. Assignments that bind nothing raise a warning; results of other statements are
        kept in self.results. Returns the result.
        """
        term = self.parse(line)
        result = self.evaluate(term)

        if isinstance(term, Assign):
            if result is term:
                msg = "'{}' was not bound: its value did not reduce to a number or function"
                self.error_handler.warn(msg, term.name, diagnosis=False)
        else:
            self.results.append(result)
        return result

    def run_file(self, path):
        """Runs every statement of the file at path. Will raise any errors that are encountered."""
        self.error_handler.register_file(path)

        for line, line_num in self.read(path):
            self.error_handler.register_line(path, line, line_num)
            self.run(line)
            self.error_handler.remove_line(path)

    def pop(self):
        """Removes and returns the newest result."""
        return self.results.pop()

    @staticmethod
    def preprocess_line(line):
        """Strips comments and trailing whitespace from line. Returns the line and whether it continues on the next
        one (more '(' than ')').
        """
        if ";;" in line:
            line = line[:line.index(";;")]  # get rid of comments

        line = line.rstrip()
        return line, line.count("(") > line.count(")")

    @staticmethod
    def read(path):
        """Returns a list of (statement, line number) for the file at path. Statements spanning several lines are
        joined and numbered by their first line.
        """
        try:
            with open(path, "r") as file:
                lines = file.readlines()
        except OSError:
            raise GenericException("'{}' could not be opened", path, diagnosis=False)

        statements = []
        pending, first = "", 0
        for line_num, line in enumerate(lines, 1):
            if not pending:
                first = line_num
            line, add_to_prev = Session.preprocess_line(f"{pending} {line.strip()}" if pending else line)

            if add_to_prev:
                pending = line
            else:
                pending = ""
                if line.strip():
                    statements.append((line.strip(), first))

        if pending.strip():
            statements.append((pending.strip(), first))  # unbalanced at end of file: the parser reports it
        return statements
