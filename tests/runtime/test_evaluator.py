import io
import unittest

from monkey.runtime.environment import Environment
from monkey.runtime.evaluator import Evaluator
from monkey.runtime.object import (Array, Boolean, Builtin, Character, Error, FALSE, Float, Function, Integer, NULL,
                                   String, TRUE, new_array)
from monkey.syntax import ast
from monkey.syntax.parser import parse


class EvaluatorTestCase(unittest.TestCase):

    def setUp(self):
        self.stdout = io.StringIO()
        self.warnings = []
        self.evaluator = Evaluator(self.stdout, io.StringIO(), warn=lambda *args: self.warnings.append(args))

    def run_source(self, source, env=None):
        program, errors = parse(source)
        self.assertEqual([], [str(error) for error in errors], source)
        return self.evaluator.eval(program, env if env is not None else Environment())

    def check(self, cases):
        for case, expected in cases.items():
            self.assertEqual(expected, self.run_source(case), case)

    def test_integer_expressions(self):
        self.check({
            "5": Integer(5),
            "-10": Integer(-10),
            "2 + 3 * 4": Integer(14),
            "(2 + 3) * 4": Integer(20),
            "1 - 2 - 3": Integer(-4),
            "2 ** 3 ** 2": Integer(512),
            "50 / 2 * 2 + 10": Integer(60),
            "-7 / 2": Integer(-3),
            "-7 % 3": Integer(-1),
            "3 * (3 * 3) + 10": Integer(37),
            "9223372036854775807": Integer(9223372036854775807),
            "-9223372036854775807 - 1": Integer(-9223372036854775808),
        })

    def test_float_expressions(self):
        self.check({
            "2.5": Float(2.5),
            "1 + 2.5": Float(3.5),
            "1 / 4.0": Float(0.25),
            "2 ** -2": Float(0.25),
            "-1.5 * 2": Float(-3.0),
        })

    def test_boolean_expressions(self):
        cases = {
            "true": TRUE,
            "false": FALSE,
            "1 < 2": TRUE,
            "1 > 2": FALSE,
            "1 <= 1": TRUE,
            "2 >= 3": FALSE,
            "1 == 1": TRUE,
            "1 != 1": FALSE,
            "1 == 1.0": TRUE,
            "true == true": TRUE,
            "true != false": TRUE,
            "(1 < 2) == true": TRUE,
            "\"a\" == \"a\"": TRUE,
            "\"a\" < \"b\"": TRUE,
            "[1, [2]] == [1, [2]]": TRUE,
            "[1] == [2]": FALSE,
            "null == null": TRUE,
            "1 == true": FALSE,
            "!true": FALSE,
            "!!true": TRUE,
            "!5": FALSE,
            "!null": TRUE,
            "!0": FALSE,
        }
        for case, expected in cases.items():
            self.assertIs(expected, self.run_source(case), case)

    def test_logical_operators(self):
        cases = {
            "true && true": TRUE,
            "true && false": FALSE,
            "false || true": TRUE,
            "null || false": FALSE,
            "1 && \"x\"": TRUE,
            "false && undefined": FALSE,
            "true || undefined": TRUE,
            "false || 1 / 0 == 0 && true": None,
        }
        for case, expected in cases.items():
            result = self.run_source(case)
            if expected is None:
                self.assertIsInstance(result, Error, case)
            else:
                self.assertIs(expected, result, case)

    def test_if_else(self):
        self.check({
            "if (true) { 10 }": Integer(10),
            "if (false) { 10 }": NULL,
            "if (1) { 10 }": Integer(10),
            "if (0) { 10 }": Integer(10),
            "if (null) { 10 } else { 20 }": Integer(20),
            "if (1 < 2) { 10 } else { 20 }": Integer(10),
            "if (1 > 2) { 10 } else { 20 }": Integer(20),
            "if (true) { }": NULL,
        })

    def test_if_shares_scope(self):
        self.assertEqual(Integer(5), self.run_source("if (true) { let x = 5; }; x"))

    def test_return(self):
        self.check({
            "return 10;": Integer(10),
            "return 10; 9;": Integer(10),
            "return 2 * 5; 9;": Integer(10),
            "9; return 2 * 5; 9;": Integer(10),
            "return;": NULL,
            "if (10 > 1) { if (10 > 1) { return 10; } return 1; }": Integer(10),
            "let f = fn(x) { return x; x + 10; }; f(10);": Integer(10),
            "let f = fn(x) { let result = x + 10; return result; return 10; }; f(10);": Integer(20),
            "let f = fn() { if (true) { return 1; } 2 }; f() + 1": Integer(2),
            "let f = fn() { return; }; f()": NULL,
        })

    def test_let(self):
        self.check({
            "let a = 5; a;": Integer(5),
            "let a = 5 * 5; a;": Integer(25),
            "let a = 5; let b = a; b;": Integer(5),
            "let a = 5; let b = a; let c = a + b + 5; c;": Integer(15),
            "let a = 1; let a = a + 1; a": Integer(2),
            "let a = 1;": NULL,
        })

    def test_shadowing_builtin_warns(self):
        self.assertEqual(Integer(3), self.run_source("let len = fn(x) { 3 }; len([1])"))
        self.assertEqual(1, len(self.warnings))
        self.assertEqual(("'len' shadows a built-in", (1, 1)), self.warnings[0])

    def test_functions(self):
        result = self.run_source("fn(x) { x + 2; };")
        self.assertIsInstance(result, Function)
        self.assertEqual(["x"], [param.value for param in result.parameters])
        self.assertEqual("fn(x) { (x + 2) }", result.inspect())

        self.check({
            "let identity = fn(x) { x; }; identity(5);": Integer(5),
            "let double = fn(x) { x * 2; }; double(5);": Integer(10),
            "let add = fn(x, y) { x + y; }; add(5, 5);": Integer(10),
            "let add = fn(x, y) { x + y; }; add(5 + 5, add(5, 5));": Integer(20),
            "fn(x) { x; }(5)": Integer(5),
            "fn() { }()": NULL,
            "let twice = fn(f, x) { f(f(x)) }; twice(fn(x) { x * 3 }, 2)": Integer(18),
        })

    def test_recursion(self):
        factorial = "let factorial = fn(n) { if (n == 0) { 1 } else { n * factorial(n - 1) } };"
        self.check({
            factorial + "factorial(5)": Integer(120),
            factorial + "factorial(0)": Integer(1),
            factorial + "factorial(20)": Integer(2432902008176640000),
        })
        self.assertIsInstance(self.run_source(factorial + "factorial(21)"), Error)

        fibonacci = "let fib = fn(n) { if (n < 2) { n } else { fib(n - 1) + fib(n - 2) } }; fib(15)"
        self.assertEqual(Integer(610), self.run_source(fibonacci))

    def test_closures(self):
        self.check({
            "let newAdder = fn(x) { fn(y) { x + y } }; let addTwo = newAdder(2); addTwo(3);": Integer(5),
            "let x = 1; let f = fn() { let x = 2; x }; f() + x": Integer(3),
            "let make = fn() { let secret = 42; fn() { secret } }; make()()": Integer(42),
        })

    def test_closures_share_environment(self):
        env = Environment()
        self.run_source("let n = 1; let get = fn() { n };", env)
        results = []
        for __ in range(3):
            results.append(self.run_source("get()", env))
            self.run_source("let n = n + 1;", env)
        self.assertEqual([Integer(1), Integer(2), Integer(3)], results)

    def test_strings(self):
        self.check({
            "\"Hello World!\"": String("Hello World!"),
            "\"Hello\" + \" \" + \"World!\"": String("Hello World!"),
            "\"a\\tb\"": String("a\tb"),
            "\"héllo\"[1]": Character("é"),
            "\"日本語\"[2]": Character("語"),
            "\"abc\"[3]": NULL,
            "\"abc\"[-1]": NULL,
            "len(\"日本語\")": Integer(3),
        })

    def test_characters(self):
        self.check({
            "'a'": Character("a"),
            "'\\n'": Character("\n"),
            "'a' < 'b'": TRUE,
            "\"abc\"[0] == 'a'": TRUE,
            "\"abc\"[0] == \"a\"": FALSE,
            "char(97) == 'a'": TRUE,
            "int('a')": Integer(97),
            "str('a') + \"b\"": String("ab"),
            "['x', 'y'][1]": Character("y"),
        })
        self.assertEqual(Error("type mismatch: CHARACTER + STRING", (1, 5)), self.run_source("'a' + \"b\""))

        self.run_source("print('c', \"abc\"[1])")
        self.assertEqual("c b\n", self.stdout.getvalue())
        self.assertEqual("'\\''", Character("'").inspect())
        self.assertEqual("'\\\\'", Character("\\").inspect())

    def test_arrays(self):
        self.check({
            "[1, 2 * 2, 3 + 3]": new_array([Integer(1), Integer(4), Integer(6)]),
            "[]": Array(()),
            "[1, 2, 3][0]": Integer(1),
            "[1, 2, 3][1 + 1]": Integer(3),
            "let i = 0; [1][i];": Integer(1),
            "let myArray = [1, 2, 3]; myArray[0] + myArray[1] + myArray[2];": Integer(6),
            "[1, 2][5]": NULL,
            "[1, 2, 3][-1]": NULL,
            "[[1, 2], [3]][0][1]": Integer(2),
            "let a = [1]; let b = a + [2]; a": new_array([Integer(1)]),
            "let a = [1]; let b = a + [2]; b": new_array([Integer(1), Integer(2)]),
            "let a = [1]; let b = append(a, 2); a": new_array([Integer(1)]),
        })

    def test_builtins(self):
        self.check({
            "len(\"\")": Integer(0),
            "len([1, 2, 3])": Integer(3),
            "str(1) + str(2.5)": String("12.5"),
            "int(\"12\") + 1": Integer(13),
            "float(1)": Float(1.0),
            "bool(0)": FALSE,
            "char(97)": String("a"),
            "pi > 3.14": TRUE,
            "print(\"x\", 1)": NULL,
        })
        self.assertEqual("x 1\n", self.stdout.getvalue())
        self.assertIsInstance(self.run_source("len"), Builtin)

    def test_errors(self):
        cases = {
            "5 + true;": "type mismatch: INTEGER + BOOLEAN",
            "5 + true; 5;": "type mismatch: INTEGER + BOOLEAN",
            "true + 1": "type mismatch: BOOLEAN + INTEGER",
            "-true": "unknown operator: -BOOLEAN",
            "true + false;": "unknown operator: BOOLEAN + BOOLEAN",
            "5; true + false; 5": "unknown operator: BOOLEAN + BOOLEAN",
            "if (10 > 1) { true + false; }": "unknown operator: BOOLEAN + BOOLEAN",
            "if (10 > 1) { if (10 > 1) { return true + false; } return 1; }": "unknown operator: BOOLEAN + BOOLEAN",
            "\"Hello\" - \"World\"": "unknown operator: STRING - STRING",
            "foobar": "identifier not found: foobar",
            "let f = fn() { y }; f()": "identifier not found: y",
            "1 / 0": "division by zero in '/'",
            "5(1)": "not a function: INTEGER",
            "\"f\"()": "not a function: STRING",
            "fn(x) { x }()": "wrong number of arguments: want=1, got=0",
            "fn() { 1 }(1, 2)": "wrong number of arguments: want=0, got=2",
            "1[0]": "index operator not supported: INTEGER",
            "[1][true]": "index must be an INTEGER, got BOOLEAN",
            "len(1)": "argument 0 to `len` not supported, got INTEGER",
            "[1, 2 + true, foobar]": "type mismatch: INTEGER + BOOLEAN",
            "let x = -true; 1": "unknown operator: -BOOLEAN",
            "fn(x) { x }(undefined)": "identifier not found: undefined",
        }
        for case, msg in cases.items():
            result = self.run_source(case)
            self.assertIsInstance(result, Error, case)
            self.assertEqual(msg, result.message, case)

        result = self.run_source("9223372036854775807 + 1")
        self.assertTrue(result.message.startswith("integer overflow"), result.message)

    def test_error_positions(self):
        cases = {
            "let x = 1;\nx + true": (2, 3),
            "foobar": (1, 1),
            "  [1][true]": (1, 6),
            "len(1, 2)": (1, 4),
            "1 +\n\n  -true": (3, 3),
        }
        for case, position in cases.items():
            self.assertEqual(position, self.run_source(case).position, case)

    def test_unknown_node(self):
        self.assertRaises(TypeError, self.evaluator.eval, ast.Statement(), Environment())

    def test_program_result(self):
        self.assertIs(NULL, self.run_source(""))
        self.assertIsInstance(self.run_source("true"), Boolean)


if __name__ == '__main__':
    unittest.main()
