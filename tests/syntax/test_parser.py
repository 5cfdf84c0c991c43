import unittest

from monkey.syntax import ast
from monkey.syntax.parser import Parser, parse


def parse_ok(test, source):
    program, errors = parse(source)
    test.assertEqual([], [str(error) for error in errors], source)
    return program


def expression(test, source):
    program = parse_ok(test, source)
    test.assertEqual(1, len(program.statements), source)
    test.assertIsInstance(program.statements[0], ast.ExpressionStatement, source)
    return program.statements[0].expression


class ParserTestCase(unittest.TestCase):

    def test_let_statements(self):
        cases = {
            "let x = 5;": ("x", ast.IntegerLiteral(5)),
            "let y = true": ("y", ast.BooleanLiteral(True)),
            "let foobar = y;": ("foobar", ast.Identifier("y")),
        }
        for case, (name, value) in cases.items():
            program = parse_ok(self, case)
            self.assertEqual([ast.LetStatement(ast.Identifier(name), value)], program.statements, case)

    def test_return_statements(self):
        cases = {
            "return 5;": ast.ReturnStatement(ast.IntegerLiteral(5)),
            "return x": ast.ReturnStatement(ast.Identifier("x")),
            "return;": ast.ReturnStatement(None),
            "return": ast.ReturnStatement(None),
        }
        for case, expected in cases.items():
            self.assertEqual([expected], parse_ok(self, case).statements, case)

        body = expression(self, "fn() { return }").body
        self.assertEqual([ast.ReturnStatement(None)], body.statements)

    def test_literals(self):
        cases = {
            "foobar": ast.Identifier("foobar"),
            "5": ast.IntegerLiteral(5),
            "2.5": ast.FloatLiteral(2.5),
            "1.": ast.FloatLiteral(1.0),
            "\"hi there\"": ast.StringLiteral("hi there"),
            "'c'": ast.CharacterLiteral("c"),
            "'\\t'": ast.CharacterLiteral("\t"),
            "true": ast.BooleanLiteral(True),
            "false": ast.BooleanLiteral(False),
            "null": ast.NullLiteral(),
            "9223372036854775807": ast.IntegerLiteral(9223372036854775807),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, expression(self, case), case)

    def test_operator_precedence(self):
        cases = {
            "-a * b": "((-a) * b)",
            "!-a": "(!(-a))",
            "a + b + c": "((a + b) + c)",
            "a - b - c": "((a - b) - c)",
            "a * b / c": "((a * b) / c)",
            "a + b * c": "(a + (b * c))",
            "a + b % c": "(a + (b % c))",
            "a + b * c + d / e - f": "(((a + (b * c)) + (d / e)) - f)",
            "5 > 4 == 3 < 4": "((5 > 4) == (3 < 4))",
            "5 < 4 != 3 > 4": "((5 < 4) != (3 > 4))",
            "a <= b == b >= a": "((a <= b) == (b >= a))",
            "3 + 4 * 5 == 3 * 1 + 4 * 5": "((3 + (4 * 5)) == ((3 * 1) + (4 * 5)))",
            "2 ** 3 ** 2": "(2 ** (3 ** 2))",
            "2 * 3 ** 2": "(2 * (3 ** 2))",
            "a || b && c": "(a || (b && c))",
            "a && b || c && d": "((a && b) || (c && d))",
            "a == b && c != d": "((a == b) && (c != d))",
            "!true == false": "((!true) == false)",
            "1 + (2 + 3) + 4": "((1 + (2 + 3)) + 4)",
            "(5 + 5) * 2": "((5 + 5) * 2)",
            "-(5 + 5)": "(-(5 + 5))",
            "a + add(b * c) + d": "((a + add((b * c))) + d)",
            "add(a, b, 1, 2 * 3, 4 + 5, add(6, 7 * 8))": "add(a, b, 1, (2 * 3), (4 + 5), add(6, (7 * 8)))",
            "a * [1, 2, 3, 4][b * c] * d": "((a * ([1, 2, 3, 4][(b * c)])) * d)",
            "add(a * b[2], b[1], 2 * [1, 2][1])": "add((a * (b[2])), (b[1]), (2 * ([1, 2][1])))",
            "f(x)(y)": "f(x)(y)",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, str(parse_ok(self, case)), case)

    def test_if_expression(self):
        node = expression(self, "if (x < y) { x }")
        self.assertEqual(ast.InfixExpression(ast.Identifier("x"), "<", ast.Identifier("y")), node.condition)
        self.assertEqual(ast.BlockStatement([ast.ExpressionStatement(ast.Identifier("x"))]), node.consequence)
        self.assertIsNone(node.alternative)

        node = expression(self, "if (x) { x } else { y; }")
        self.assertEqual(ast.BlockStatement([ast.ExpressionStatement(ast.Identifier("y"))]), node.alternative)

        node = expression(self, "if (x) {}")
        self.assertEqual([], node.consequence.statements)

    def test_function_literal(self):
        cases = {
            "fn() {};": [],
            "fn(x) {};": ["x"],
            "fn(x, y, z) {};": ["x", "y", "z"],
            "fn(x, y,) {};": ["x", "y"],
        }
        for case, expected in cases.items():
            node = expression(self, case)
            self.assertIsInstance(node, ast.FunctionLiteral, case)
            self.assertEqual(expected, [param.value for param in node.parameters], case)

        node = expression(self, "fn(x, y) { x + y; }")
        self.assertEqual("fn(x, y) { (x + y) }", str(node))

    def test_call_and_index(self):
        node = expression(self, "add(1, 2 * 3, 4 + 5,)")
        self.assertIsInstance(node, ast.CallExpression)
        self.assertEqual(ast.Identifier("add"), node.function)
        self.assertEqual(3, len(node.arguments))

        node = expression(self, "myArray[1 + 1]")
        self.assertEqual(ast.IndexExpression(ast.Identifier("myArray"),
                                             ast.InfixExpression(ast.IntegerLiteral(1), "+", ast.IntegerLiteral(1))),
                         node)

    def test_array_literal(self):
        cases = {
            "[]": 0,
            "[1]": 1,
            "[1, 2 * 2, 3 + 3]": 3,
            "[1, 2,]": 2,
        }
        for case, length in cases.items():
            node = expression(self, case)
            self.assertIsInstance(node, ast.ArrayLiteral, case)
            self.assertEqual(length, len(node.elements), case)

    def test_empty_statements(self):
        program = parse_ok(self, ";;let x = 1;;; x;")
        self.assertEqual(2, len(program.statements))
        self.assertEqual([], parse_ok(self, "").statements)
        self.assertEqual([], parse_ok(self, "// only a comment").statements)

    def test_round_trip(self):
        cases = [
            "let x = 1 + 2 * 3;",
            "-a * b ** c ** d",
            "let f = fn(a, b) { let c = a + b; return c * 2; }; f(1, 2)",
            "if (a && !b || c) { \"yes\\n\" } else { [1, 2.5, \"q\\\"uote\"][0] }",
            "fn() { return }()",
            "let big = 100000000000000000000.0; big % 0.5",
            "a[b[c]](d)(e)[f]",
            "null == null != true",
            "'a' < '\\'' == ('\\\\' != '\"')",
            "0.0000000001 + 1",
        ]
        for case in cases:
            program = parse_ok(self, case)
            self.assertEqual(program, parse_ok(self, str(program)), case)

    def test_positions(self):
        node = expression(self, "1 +\n  x")
        self.assertEqual((1, 3), node.position)
        self.assertEqual((2, 3), node.right.position)

    def test_errors(self):
        cases = {
            "let = 5;": "expected 'IDENT', got '='",
            "let x 5;": "expected '=', got '5'",
            "let x = ;": "no prefix parse rule for ';'",
            "1 +": "unexpected end of input",
            "(1 + 2": "expected ')', got end of input",
            "if (x) { 1": "expected '}', got end of input",
            "if x { 1 }": "expected '(', got 'x'",
            "fn(1) {}": "expected parameter name, got '1'",
            "fn(x) x": "expected '{', got 'x'",
            "a[]": "empty index expression",
            "[1, 2": "expected ']', got end of input",
            "x += 1": "assignment operator '+=' is not supported",
            "x %= 2": "assignment operator '%=' is not supported",
            "loop { }": "'loop' is a reserved keyword",
            "break;": "'break' is a reserved keyword",
            "\"abc": "unterminated string literal",
            "'ab'": "character literal can contain only one character",
            "''": "unexpected end of a character literal",
            "'a": "unexpected end of a character literal",
            "1 @ 2": "illegal token '@'",
            "1.2.3": "illegal token '1.2.3'",
            "9223372036854775808": "integer literal '9223372036854775808' out of 64-bit range",
        }
        for case, msg in cases.items():
            __, errors = parse(case)
            self.assertTrue(errors, case)
            self.assertEqual(msg, errors[0].msg, case)

    def test_error_recovery(self):
        program, errors = parse("let = 1; let y 2; let z = 3;")
        self.assertEqual(["1:5: expected 'IDENT', got '='", "1:16: expected '=', got '2'"],
                         [str(error) for error in errors])
        self.assertEqual([ast.LetStatement(ast.Identifier("z"), ast.IntegerLiteral(3))], program.statements)

        parser = Parser("let x = 1;\nx +* 2;\ny")
        parser.parse_program()
        self.assertEqual(1, len(parser.errors))
        self.assertEqual((2, 4), parser.errors[0].position)

    def test_error_recovery_in_blocks(self):
        cases = {
            "fn() { 1 +* 2; 3 }; 4": ["1:11: no prefix parse rule for '*'"],
            "if (x) { let = 1; 2 } else { 3 }; 4": ["1:14: expected 'IDENT', got '='"],
            "fn() { if (y) { 1 +* 2; 3 } }; 4": ["1:20: no prefix parse rule for '*'"],
            "fn() { 1 +* 2 }(3); 4": ["1:11: no prefix parse rule for '*'"],
        }
        for case, expected in cases.items():
            program, errors = parse(case)
            self.assertEqual(expected, [str(error) for error in errors], case)
            self.assertEqual(ast.IntegerLiteral(4), program.statements[-1].expression, case)

    def test_float_rendering(self):
        cases = {
            2.5: "2.5",
            1e-10: "0.0000000001",
            1.5e-7: "0.00000015",
            1e20: "100000000000000000000.0",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, str(ast.FloatLiteral(case)))


if __name__ == '__main__':
    unittest.main()
