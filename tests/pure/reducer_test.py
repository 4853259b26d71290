import unittest

from fcalc.lang.error import EvalError
from fcalc.lang.namespace import Namespace
from fcalc.pure.parser import parse
from fcalc.pure.reducer import Reducer
from fcalc.pure.term import Application, Assign, Fact, FuncDef, Id, Mult, Negation, Num, ParamList, Plus


def local(name):
    return Id(name, is_global=False)


class ReducerTestCase(unittest.TestCase):

    def setUp(self):
        self.namespace = Namespace()
        self.reducer = Reducer(self.namespace)

    def reduce(self, src):
        return self.reducer.reduce(parse(src))

    def test_arithmetic(self):
        cases = {
            "2 + 3 * 4": "14",
            "2 ^ 10": "1024",
            "7 // 2": "3",
            "7 % 2": "1",
            "5!": "120",
            "1 / 4": "0.25",
            "-(2 + 3)": "-5",
            "4 ^ -1": "0.25",
            "(1 + 2)! - 6": "0",
        }
        for case, expected in cases.items():
            self.assertEqual(Num(expected), self.reduce(case), case)

    def test_semantic_errors(self):
        should_raise = ["(-8) ^ 0.5", "1 / 0", "1 // 0", "1 % 0", "2.5!", "0 ^ -1"]
        for case in should_raise:
            self.assertRaises(EvalError, self.reduce, case)

    def test_free_identifiers_are_stuck(self):
        cases = {
            "unknownName + 1": Plus(Id("unknownName"), Num(1)),
            "-y": Negation(Id("y")),
            "y!": Fact(Id("y")),
            "g(1 + 1)": Application(Id("g"), ParamList(Num(2))),
            "(2 * 3) * y": Mult(Num(6), Id("y")),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, self.reduce(case), case)

    def test_identities(self):
        # 0 * x never looks at x, not even when x would fail
        self.assertEqual(Num(0), self.reduce("0 * (1 / 0)"))
        self.assertEqual(Num(0), self.reduce("(1 - 1) * y"))
        # 1 * x is just x, even when x is stuck
        self.assertEqual(Id("y"), self.reduce("1 * y"))
        self.assertEqual(parse("f(a) => a"), self.reduce("1 * (f(a) => a)"))
        # x + 0 and 0 + x drop the zero once both sides are known
        self.assertEqual(Id("y"), self.reduce("y + 0"))
        self.assertEqual(Id("y"), self.reduce("0 + y"))
        self.assertRaises(EvalError, self.reduce, "(1 / 0) + 0")
        # only the left operand short-circuits
        self.assertRaises(EvalError, self.reduce, "(1 / 0) * 0")
        # no identity for subtraction
        self.assertEqual(parse("y - 0"), self.reduce("y - 0"))

    def test_assign(self):
        self.assertEqual(Num(5), self.reduce("let x = 2 + 3"))
        self.assertEqual(Num(5), self.namespace.lookup("x"))
        self.assertEqual(Num(6), self.reduce("x + 1"))

        # function definitions are bound as written
        func = parse("f(a) => a + x")
        self.assertEqual(func, self.reduce("let g = f(a) => a + x"))
        self.assertEqual(func, self.namespace.lookup("g"))

        # values that do not reduce to a number or function bind nothing
        term = parse("let z = w + 1")
        self.assertIs(term, self.reducer.reduce(term))
        self.assertIsNone(self.namespace.lookup("z"))

        # rebinding shadows
        self.reduce("let x = 10")
        self.assertEqual(Num(11), self.reduce("x + 1"))
        self.assertEqual([Num(5), Num(10)], self.namespace.history("x"))

    def test_globals_resolve_at_application(self):
        self.reduce("let g = f(a) => a + k")
        self.assertEqual(Plus(Num(1), Id("k")), self.reduce("g(1)"))
        self.reduce("let k = 10")
        self.assertEqual(Num(11), self.reduce("g(1)"))

    def test_returned_function_keeps_global_values(self):
        self.reduce("let a = 1")
        self.reduce("let g = f(x) => f(y) => a + x + y")
        self.reduce("let h = g(1)")
        self.assertEqual(parse("f(y) => (1 + 1) + y"), self.namespace.lookup("h"))

        self.reduce("let a = 100")
        self.assertEqual(Num(3), self.reduce("h(1)"))
        self.assertEqual(Num(102), self.reduce("g(1)(1)"))

        # partial application copies the body too
        self.reduce("let p = f(x, y) => a * x + y")
        self.reduce("let q = p(2)")
        self.reduce("let a = 5")
        self.assertEqual(Num(201), self.reduce("q(1)"))

        # unbound globals stay in the copy and resolve later
        self.reduce("let r = f(x) => f(y) => x + later")
        self.reduce("let s = r(1)")
        self.reduce("let later = 7")
        self.assertEqual(Num(8), self.reduce("s(0)"))

    def test_currying(self):
        self.reduce("let add = f(x) => f(y) => x + y")
        self.assertEqual(Num(7), self.reduce("add(3)(4)"))
        self.assertEqual(Num(7), self.reduce("add(3, 4)"))

        partial = self.reduce("add(3)")
        self.assertEqual(FuncDef(ParamList(local("y")), Plus(Num(3), local("y"))), partial)

        self.reduce("let add3 = add(3)")
        self.assertEqual(Num(10), self.reduce("add3(7)"))

    def test_multiple_parameters(self):
        self.reduce("let sub = f(x, y) => x - y")
        self.assertEqual(Num(-1), self.reduce("sub(3, 4)"))
        self.assertEqual(FuncDef(ParamList(local("y")), Plus(Num(3), local("y"))),
                         self.reduce("(f(x, y) => x + y)(3)"))
        self.assertEqual(Num(-1), self.reduce("sub(3)(4)"))
        self.assertEqual(self.namespace.lookup("sub"), self.reduce("sub()"))

    def test_extra_arguments(self):
        self.reduce("let id = f(x) => x")
        self.reduce("let double = f(n) => n * 2")
        self.assertEqual(Num(10), self.reduce("id(double, 5)"))
        self.assertEqual(Application(Num(1), ParamList(Num(2))), self.reduce("id(1, 2)"))

    def test_shadowing(self):
        self.reduce("let k = f(x) => f(x) => x")
        self.assertEqual(Num(2), self.reduce("k(1)(2)"))
        self.assertEqual(FuncDef(ParamList(local("x")), local("x")), self.reduce("k(1)"))

    def test_no_capture(self):
        # the argument's own parameters are not confused with the function's
        self.reduce("let K = f(x) => f(y) => x")
        self.assertEqual(parse("f(y) => y"), self.reduce("K(f(y) => y)(5)"))
        self.assertEqual(Num(3), self.reduce("K(f(y) => y)(5)(3)"))

    def test_higher_order(self):
        self.reduce("let twice = f(g) => f(x) => g(g(x))")
        self.reduce("let inc = f(n) => n + 1")
        self.assertEqual(Num(7), self.reduce("twice(inc)(5)"))
        self.assertEqual(Num(9), self.reduce("twice(twice)(inc)(5)"))

    def test_under_applied_stays_stuck(self):
        self.assertEqual(Application(Id("h"), ParamList(parse("f(x) => x"))), self.reduce("h(f(x) => x)"))
        self.assertEqual(parse("f(x) => x + undefined"), self.reduce("f(x) => x + undefined"))

    def test_recursion(self):
        # 0 * x short-circuits, which is enough to stop a recursive definition
        self.reduce("let down = f(n) => n * down(n - 1)")
        self.assertEqual(Num(0), self.reduce("down(3)"))
        self.reduce("let omega = f(x) => x(x)")
        self.assertRaises(RecursionError, self.reduce, "omega(omega)")

    def test_idempotent(self):
        self.reduce("let add = f(x) => f(y) => x + y")
        cases = ["2 + 3 * 4", "add(3)", "add", "unknownName + 1", "g(add(1))", "f(x) => x", "1 * y", "-(y!)",
                 "let q = 4", "let r = t"]
        for case in cases:
            once = self.reduce(case)
            self.assertEqual(once, self.reducer.reduce(once), case)

    def test_unknown_term(self):
        self.assertRaises(TypeError, self.reducer.reduce, object())

    def test_assign_result_is_not_rebound(self):
        self.assertIsInstance(self.reduce("let r = t"), Assign)


if __name__ == '__main__':
    unittest.main()
