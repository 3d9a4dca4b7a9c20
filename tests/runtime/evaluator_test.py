import math
import sys
import unittest

from jsinterp.lang.error import JSRangeError, JSReferenceError, JSSyntaxError, JSTypeError
from jsinterp.runtime.environment import Environment
from jsinterp.runtime.evaluator import Evaluator, divide
from jsinterp.runtime.values import Boolean, Function, Number, String, UNDEFINED
from jsinterp.syntax.parser import parse_source


def run(source, env=None):
    return Evaluator().evaluate(parse_source(source), env if env is not None else Environment.root())


class ArithmeticTestCase(unittest.TestCase):

    def test_arithmetic(self):
        cases = {
            "1+(3+5)*3*(3+10)": 313,
            "100+200*3+5+(3+5*3+6)": 729,
            "1 + 2 * 3": 7,
            "(1 + 2) * 3": 9,
            "10 - 4 - 3": 3,
            "100 / 10 / 2": 5,
            "2 * 3 / 4": 1.5,
            "-3 + 5": 2,
            "-(3 + 5)": -8,
            "--4": 4,
            "0.5 + 0.25": 0.75,
        }
        for case, expected in cases.items():
            self.assertEqual(Number(expected), run(case), case)

    def test_division_by_zero(self):
        self.assertEqual(Number(math.inf), run("1 / 0"))
        self.assertEqual(Number(-math.inf), run("-1 / 0"))
        self.assertEqual(Number(-math.inf), run("1 / -0"))
        self.assertTrue(math.isnan(run("0 / 0").value))

    def test_divide(self):
        self.assertEqual(2.5, divide(5.0, 2.0))
        self.assertEqual(math.inf, divide(3.0, 0.0))
        self.assertEqual(-math.inf, divide(3.0, -0.0))
        self.assertEqual(-math.inf, divide(-3.0, 0.0))
        self.assertTrue(math.isnan(divide(math.nan, 0.0)))

    def test_string_concatenation(self):
        cases = {
            "'Hello' + ' ' + 'World'": "Hello World",
            "let x = \"Hello World\"; x": "Hello World",
            "'' + ''": "",
        }
        for case, expected in cases.items():
            self.assertEqual(String(expected), run(case), case)

    def test_no_coercion(self):
        should_raise = [
            "1 + 'a'",
            "'a' + 1",
            "'a' - 'b'",
            "'a' * 2",
            "-'a'",
            "1 + undefined",
            "true + 1",
            "1 < 'a'",
            "function f() {} f + 1",
        ]
        for case in should_raise:
            self.assertRaises(JSTypeError, run, case)

    def test_comparisons(self):
        cases = {
            "1 < 2": True,
            "2 <= 2": True,
            "3 > 4": False,
            "4 >= 5": False,
            "'a' < 'b'": True,
            "1 == 1": True,
            "1 === 1": True,
            "1 != 2": True,
            "1 !== 1": False,
            "1 == '1'": False,
            "'x' === 'x'": True,
            "undefined == undefined": True,
            "true == true": True,
            "0 / 0 == 0 / 0": False,
            "function f() {} f === f": True,
        }
        for case, expected in cases.items():
            self.assertEqual(Boolean(expected), run(case), case)

    def test_both_operands_evaluated_left_to_right(self):
        source = "let log = ''; function a() { log = log + 'a'; return 1; } " \
                 "function b() { log = log + 'b'; return 2; } a() + b(); a() == b(); log"
        self.assertEqual(String("abab"), run(source))


class StatementTestCase(unittest.TestCase):

    def test_variables(self):
        cases = {
            "let x = 10; let b = 30 + 1; b = b + 5; x + b": 46,
            "let x = 1; let b = 6; x + b;": 7,
            "let x = 1; let x = 2; x": 2,
            "let a = 1; let b = a = 5; a + b": 10,
        }
        for case, expected in cases.items():
            self.assertEqual(Number(expected), run(case), case)

    def test_let_without_initializer(self):
        self.assertIs(UNDEFINED, run("let x; x"))

    def test_program_result(self):
        cases = {
            "": UNDEFINED,
            "let x = 1;": UNDEFINED,
            "function f() {}": UNDEFINED,
            "1; let x = 2;": Number(1),
            "1; { 2; }": Number(2),
            "undefined": UNDEFINED,
            "function f() { 99; } 1; let y = f();": Number(1),
            "function f() { 99; return 0; } 1; if (f()) {}": Number(1),
            "function f() { 99; return 5; } 1; f() + 1": Number(6),
            "function f() { 99; } 1; { let y = f(); }": Number(1),
            "function f(g) { 99; return g; } f(f(2));": Number(2),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, run(case), case)

    def test_block_scoping(self):
        cases = {
            "let x = 1; { let x = 2; } x": 1,
            "let x = 1; { x = 2; } x": 2,
            "let x = 1; { let x = 2; { x = 3; } } x": 1,
            "let x = 1; { let y = x + 1; x = y; } x": 2,
        }
        for case, expected in cases.items():
            self.assertEqual(Number(expected), run(case), case)

    def test_block_declarations_do_not_leak(self):
        self.assertRaises(JSReferenceError, run, "{ let y = 1; } y")

    def test_reference_errors(self):
        should_raise = ["x", "x = 1", "let a = b;", "{ y = 2 }", "f()"]
        for case in should_raise:
            self.assertRaises(JSReferenceError, run, case)

    def test_reference_error_position(self):
        with self.assertRaises(JSReferenceError) as ctx:
            run("let a = 1;\na + missing")
        self.assertEqual("missing", ctx.exception.name)
        self.assertEqual(15, ctx.exception.start)

    def test_if(self):
        cases = {
            "let r = 0; if (1 < 2) r = 1; else r = 2; r": 1,
            "let r = 0; if (1 > 2) r = 1; else r = 2; r": 2,
            "let r = 0; if (0) { r = 1 } r": 0,
            "let r = 0; if ('') { r = 1 } r": 0,
            "let r = 0; if (undefined) { r = 1 } r": 0,
            "let r = 0; if (0 / 0) { r = 1 } r": 0,
            "let r = 0; if ('a') { r = 1 } r": 1,
            "let r = 0; if (-1) { r = 1 } r": 1,
            "let r = 0; function f() {} if (f) { r = 1 } r": 1,
            "let r = 0; if (false) r = 1; else if (true) r = 2; else r = 3; r": 2,
        }
        for case, expected in cases.items():
            self.assertEqual(Number(expected), run(case), case)

    def test_errors_halt_execution(self):
        env = Environment.root()
        self.assertRaises(JSReferenceError, run, "let a = 1; missing; let b = 2;", env)
        self.assertEqual(Number(1), env.lookup("a"))
        self.assertNotIn("b", env)


class FunctionTestCase(unittest.TestCase):

    def test_call(self):
        cases = {
            "function x(a) { return a + 1; } x(1)": 2,
            "function add(a, b) { return a + b; } add(2, 3)": 5,
            "function f() { return 7 } f()": 7,
            "function f() { return 1; return 2; } f()": 1,
            "function f(a) { if (a > 0) { return 1; } return 2; } f(5) * 10 + f(-5)": 12,
        }
        for case, expected in cases.items():
            self.assertEqual(Number(expected), run(case), case)

    def test_call_without_return(self):
        cases = ["function f() {} f()", "function f() { return; } f()", "function f() { 1 + 1; } f()"]
        for case in cases:
            self.assertIs(UNDEFINED, run(case), case)

    def test_argument_count(self):
        self.assertIs(UNDEFINED, run("function f(a, b) { return b; } f(1)"))
        self.assertEqual(Number(1), run("function f(a) { return a; } f(1, 2, 3)"))

    def test_extra_arguments_are_evaluated(self):
        source = "let n = 0; function f() {} f(n = 1, n = n + 1); n"
        self.assertEqual(Number(2), run(source))

    def test_recursion(self):
        source = """
        function factorial(n) {
            if (n <= 1) { return 1; }
            return n * factorial(n - 1);
        }
        factorial(5)
        """
        self.assertEqual(Number(120), run(source))

    def test_lexical_scoping(self):
        source = """
        let x = 'global';
        function show() { return x; }
        function caller() { let x = 'local'; return show(); }
        caller()
        """
        self.assertEqual(String("global"), run(source))

    def test_closure(self):
        source = """
        function counter() {
            let count = 0;
            function next() { count = count + 1; return count; }
            return next;
        }
        let a = counter();
        let b = counter();
        a(); a(); b();
        a()
        """
        self.assertEqual(Number(3), run(source))

    def test_higher_order(self):
        source = "function one() { return 1; } function apply(f) { return f(); } apply(one) + apply(one)"
        self.assertEqual(Number(2), run(source))

    def test_parameters_do_not_leak(self):
        self.assertRaises(JSReferenceError, run, "function f(a) { return a; } f(1); a")

    def test_call_mutates_outer_binding(self):
        self.assertEqual(Number(5), run("let x = 1; function set() { x = 5; } set(); x"))

    def test_function_value(self):
        value = run("function f(a, b) { return a; } f")
        self.assertIsInstance(value, Function)
        self.assertEqual(["a", "b"], value.params)
        self.assertEqual("[Function: f]", str(value))

    def test_not_callable(self):
        should_raise = ["let x = 1; x()", "'s'()", "undefined()", "function f() { return 1; } f()()"]
        for case in should_raise:
            self.assertRaises(JSTypeError, run, case)

    def test_return_outside_function(self):
        should_raise = ["return 1;", "return;", "{ return 2; }", "if (true) return 3;"]
        for case in should_raise:
            self.assertRaises(JSSyntaxError, run, case)

    def test_runaway_recursion(self):
        self.assertRaises(JSRangeError, run, "function f() { return f(); } f()")

    def test_deep_recursion(self):
        source = """
        function sum(n) {
            if (n == 0) { return 0; }
            return n + sum(n - 1);
        }
        sum(1000)
        """
        self.assertEqual(Number(500500), run(source))

    def test_recursion_limit_restored(self):
        limit = sys.getrecursionlimit()
        run("function f() { return f(); } 1")
        self.assertRaises(JSRangeError, run, "function f() { return f(); } f()")
        self.assertEqual(limit, sys.getrecursionlimit())


if __name__ == '__main__':
    unittest.main()
