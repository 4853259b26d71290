import io
import unittest
from contextlib import redirect_stdout

from fcalc.lang.error import ErrorHandler, EvalError, GenericException, LexicalError, ParseError


class ErrorTestCase(unittest.TestCase):

    def test_message(self):
        error = ParseError("'{}' has unexpected '{}' before '{}'", ("1 + )", ")", "<eof>"), start=4)
        self.assertEqual("'1 + )' has unexpected ')' before '<eof>'", str(error))
        self.assertEqual("1 + )", error.expr)
        self.assertEqual((4, 5), (error.start, error.end))

        error = EvalError("'{}' is not a valid divisor", "0")
        self.assertEqual("'0' is not a valid divisor", str(error))
        self.assertEqual(1, error.end)

    def test_hierarchy(self):
        self.assertTrue(issubclass(LexicalError, ParseError))
        for cls in [ParseError, LexicalError, EvalError]:
            self.assertTrue(issubclass(cls, GenericException))

    def test_diagnose(self):
        error = GenericException("'{}' contains illegal character '{}'", ("1 + ?", "?"), start=4, end=5)
        diagnosis = ErrorHandler.diagnose(error)
        self.assertIn("1 + ", diagnosis)
        self.assertIn("^", diagnosis)
        self.assertEqual(2, len(diagnosis.splitlines()))

    def test_non_fatal(self):
        handler = ErrorHandler(fatal=False)
        handler.register_file("<in>")
        handler.register_line("<in>", "1 / 0", 1)

        out = io.StringIO()
        with redirect_stdout(out):
            with handler:
                raise EvalError("'{}' is not a valid divisor", "0", diagnosis=False)
        self.assertIn("error", out.getvalue())
        self.assertIn("is not a valid divisor", out.getvalue())
        self.assertEqual({"<in>": (None, None)}, handler.traceback)

    def test_fatal(self):
        with redirect_stdout(io.StringIO()):
            with self.assertRaises(SystemExit):
                with ErrorHandler(fatal=True):
                    raise ParseError("'{}' is bad", "x")

    def test_recursion(self):
        out = io.StringIO()
        with redirect_stdout(out):
            with ErrorHandler(fatal=False):
                raise RecursionError("maximum recursion depth exceeded")
        self.assertIn("maximum recursion depth exceeded", out.getvalue())

    def test_internal(self):
        with redirect_stdout(io.StringIO()) as out:
            with self.assertRaises(ZeroDivisionError):
                with ErrorHandler(fatal=False):
                    raise ZeroDivisionError("oops")
        self.assertIn("[internal]", out.getvalue())

        with redirect_stdout(io.StringIO()) as out:
            with self.assertRaises(ValueError):
                with ErrorHandler(fatal=False):
                    raise ValueError("bad {x}")
        self.assertIn("ValueError", out.getvalue())
        self.assertIn("bad {x}", out.getvalue())

    def test_running(self):
        handler = ErrorHandler(fatal=False)
        handler.register_file("prelude.fc")
        handler.register_file("<in>")
        self.assertEqual([], handler.running())

        handler.register_line("<in>", "1 + 1", 2)
        self.assertEqual([("<in>", "1 + 1", 2)], handler.running())
        handler.remove_line("<in>")
        self.assertEqual([], handler.running())

    def test_warn(self):
        handler = ErrorHandler(fatal=False)
        handler.register_file("<in>")
        handler.register_line("<in>", "let z = q", 3)

        out = io.StringIO()
        with redirect_stdout(out):
            handler.warn("'{}' was not bound", "z", diagnosis=False)
        self.assertIn("<in>:3:4", out.getvalue())
        self.assertIn("warning", out.getvalue())


if __name__ == '__main__':
    unittest.main()
