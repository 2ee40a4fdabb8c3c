import unittest

from cobalt.lang.error import CobaltRuntimeError, ErrorHandler
from cobalt.lang.environment import Environment
from cobalt.lang.evaluator import Evaluator, interpret
from cobalt.lang.lexical import Token, TokenType, scan_tokens
from cobalt.lang.parser import Parser, parse
from cobalt.lang.syntax import Binary, Block, Literal, Print, Var
from cobalt.lang.values import stringify


def run(source):
    """Runs source, returning printed lines and the error handler."""
    error_handler = ErrorHandler(echo=False)
    statements = parse(scan_tokens(source, error_handler), error_handler)
    assert not error_handler.diagnostics, error_handler.messages

    output = []
    Evaluator(error_handler, output.append).interpret(statements)
    return output, error_handler


def evaluate(source):
    error_handler = ErrorHandler(echo=False)
    expr = Parser(scan_tokens(source, error_handler), error_handler).parse_expression()
    assert expr is not None, error_handler.messages
    return Evaluator(error_handler, print).evaluate(expr)


def plus():
    return Token(TokenType.PLUS, "+", None, 1)


class ExpressionTestCase(unittest.TestCase):

    def test_literals(self):
        cases = {"1.0": "1", "1.5": "1.5", "nil": "nil", "true": "true", "\"s\"": "s", "0x1A": "26", "(2)": "2"}
        for case, expected in cases.items():
            self.assertEqual(expected, stringify(evaluate(case)), case)

    def test_arithmetic(self):
        cases = {
            "1 + 2 * 3": 7.0,
            "(1 + 2) * 3": 9.0,
            "10 - 4 - 3": 3.0,
            "8 / 4 / 2": 1.0,
            "7 / 2": 3.5,
            "-(3)": -3.0,
            "--3": 3.0,
            "0b101 + 0o17 + 0x1A": 46.0,
        }
        for case, expected in cases.items():
            self.assertEqual(expected, evaluate(case), case)

    def test_logical_not(self):
        cases = {"!true": False, "!false": True, "!nil": True, "!0": False, "!\"\"": False, "!!nil": False}
        for case, expected in cases.items():
            self.assertIs(expected, evaluate(case), case)

    def test_equality(self):
        cases = {
            "nil == nil": True,
            "nil == 0": False,
            "0 == nil": False,
            "nil != false": True,
            "1 == 1.0": True,
            "1 != 2": True,
            "\"1\" == 1": False,
            "1 != \"1\"": True,
            "nil == \"a\"": False,
        }
        for case, expected in cases.items():
            self.assertIs(expected, evaluate(case), case)

        should_raise = ["\"a\" == \"a\"", "\"a\" != \"b\"", "true == true", "true != false", "true == 1",
                        "1 == false"]
        for case in should_raise:
            with self.assertRaises(CobaltRuntimeError, msg=case) as context:
                evaluate(case)
            self.assertEqual("Operands must be numbers or a number and a string.", context.exception.msg)

    def test_comparison(self):
        cases = {
            "1 < 2": True,
            "2 <= 2": True,
            "3 > 4": False,
            "4 >= 4.5": False,
            "10 > \"9\"": False,  # mixed: "10" < "9" as text
            "\"abc\" > 1": True,
            "1 <= \"1\"": True,
        }
        for case, expected in cases.items():
            self.assertIs(expected, evaluate(case), case)

        should_raise = ["true < 1", "nil > 1", "\"a\" < \"b\"", "1 < false"]
        for case in should_raise:
            self.assertRaises(CobaltRuntimeError, evaluate, case)

    def test_addition(self):
        cases = {
            "1 + 2": 3.0,
            "\"a\" + \"b\"": "ab",
            "\"a\" + 1": "a1",
            "1 + \"a\"": "1a",
            "\"x\" + 1.5": "x1.5",
            "\"\" + 0x10": "16",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, evaluate(case), case)

        should_raise = ["\"a\" + nil", "nil + \"a\"", "nil + 1", "true + 1", "\"a\" + false"]
        for case in should_raise:
            self.assertRaises(CobaltRuntimeError, evaluate, case)

    def test_multiplication(self):
        cases = {
            "2 * 3": 6.0,
            "\"ab\" * 3": "ababab",
            "3 * \"ab\"": "ababab",
            "\"ab\" * 0": "",
            "0 * \"ab\"": "",
            "\"ab\" * 2.7": "abab",
            "\"\" * 4": "",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, evaluate(case), case)

        for text in ["a", "xyz", "hello world"]:
            for count in range(5):
                expected = text * count
                self.assertEqual(expected, evaluate(f"\"{text}\" * {count}"))
                self.assertEqual(expected, evaluate(f"{count} * \"{text}\""))

        should_raise = ["\"a\" * \"b\"", "\"a\" * -1", "-2 * \"a\"", "nil * 2", "true * 2", "\"a\" * nil"]
        for case in should_raise:
            self.assertRaises(CobaltRuntimeError, evaluate, case)

    def test_repetition_too_large(self):
        for case in ["\"a\" * 1000000000000", "1000000000000 * \"a\"", "\"abcd\" * 0x10000000"]:
            with self.assertRaises(CobaltRuntimeError, msg=case) as context:
                evaluate(case)
            self.assertEqual("Repetition result too large.", context.exception.msg)

        self.assertEqual("", evaluate("\"\" * 1000000000000"))

    def test_numeric_only(self):
        should_raise = {
            "-\"a\"": "Operand must be a number.",
            "-nil": "Operand must be a number.",
            "-true": "Operand must be a number.",
            "\"a\" - 1": "Operands must be numbers.",
            "1 - nil": "Operands must be numbers.",
            "\"4\" / 2": "Operands must be numbers.",
        }
        for case, msg in should_raise.items():
            with self.assertRaises(CobaltRuntimeError) as context:
                evaluate(case)
            self.assertEqual(msg, context.exception.msg, case)

    def test_division_by_zero(self):
        should_raise = ["1 / 0", "0 / 0", "1 / -0", "1 / (2 - 2)"]
        for case in should_raise:
            with self.assertRaises(CobaltRuntimeError) as context:
                evaluate(case)
            self.assertEqual("Division by zero.", context.exception.msg, case)
            self.assertEqual(TokenType.SLASH, context.exception.token.type, case)

    def test_fault_token(self):
        with self.assertRaises(CobaltRuntimeError) as context:
            evaluate("1 +\n\n true")
        self.assertEqual(TokenType.PLUS, context.exception.token.type)
        self.assertEqual(1, context.exception.line)

    def test_unknown_node(self):
        evaluator = Evaluator(ErrorHandler(echo=False))
        self.assertRaises(Exception, evaluator.evaluate, object())
        self.assertRaises(Exception, evaluator.execute, object())

    def test_built_tree(self):
        expr = Binary(Literal("n="), plus(), Literal(3.0))
        self.assertEqual("n=3", Evaluator(ErrorHandler(echo=False)).evaluate(expr))


class StatementTestCase(unittest.TestCase):

    def test_print(self):
        output, error_handler = run("print 1; print \"two\"; print nil; print 1 == 1; print 2.50;")
        self.assertEqual(["1", "two", "nil", "true", "2.5"], output)
        self.assertEqual([], error_handler.diagnostics)

    def test_variables(self):
        output, __ = run("var a = 1; var b = a + 1; print b; a = b = 5; print a; print b; print a = 7;")
        self.assertEqual(["2", "5", "5", "7"], output)

    def test_redeclare(self):
        output, __ = run("var a = 1; var a = \"one\"; print a;")
        self.assertEqual(["one"], output)

    def test_shadowing(self):
        output, __ = run("var x = 0; { var x = 1; print x; } print x;")
        self.assertEqual(["1", "0"], output)

    def test_assign_outer(self):
        output, __ = run("var x = 0; { x = 1; { x = x + 1; } } print x;")
        self.assertEqual(["2"], output)

    def test_nested_scopes(self):
        source = """
        var a = "global a";
        var b = "global b";
        {
            var a = "outer a";
            {
                var a = "inner a";
                print a;
                print b;
            }
            print a;
        }
        print a;
        """
        output, __ = run(source)
        self.assertEqual(["inner a", "global b", "outer a", "global a"], output)

    def test_block_scope_ends(self):
        output, error_handler = run("{ var inner = 1; } print 0; print inner; print 2;")
        self.assertEqual(["0"], output)
        self.assertEqual(["Undefined variable 'inner'."], error_handler.messages)

    def test_nullable(self):
        output, error_handler = run("var a? = nil; print a; a = 1; print a; a = nil; print a?; var b?; print b;")
        self.assertEqual(["nil", "1", "nil", "nil"], output)
        self.assertEqual([], error_handler.diagnostics)

    def test_non_nullable(self):
        should_fault = [
            "var x;",
            "var x = nil;",
            "var n? = nil; var x = n;",
            "var n? = nil; var x = 1; x = n;",
            "var n? = nil; var x = 1; x = (nil);",
            "var x = 1; { var y? = nil; x = y; }",
        ]
        for case in should_fault:
            output, error_handler = run(case + " print \"unreachable\";")
            self.assertEqual([], output, case)
            self.assertEqual(["Assignment of nil to non-nullable type."], error_handler.messages, case)
            self.assertTrue(error_handler.had_runtime_error, case)

    def test_undefined(self):
        cases = {"print y;": "Undefined variable 'y'.", "y = 1;": "Undefined variable 'y'."}
        for case, msg in cases.items():
            __, error_handler = run(case)
            self.assertEqual([msg], error_handler.messages, case)

    def test_assignment_never_defines(self):
        evaluator = Evaluator(ErrorHandler(echo=False), [].append)
        error_handler = evaluator.error_handler
        evaluator.interpret(parse(scan_tokens("z = 1;", error_handler), error_handler))
        self.assertIsNone(evaluator.environment.resolve(Environment.ROOT, "z"))

    def test_fault_stops_run(self):
        output, error_handler = run("print 1; print 1 / 0; print 3;")
        self.assertEqual(["1"], output)
        self.assertEqual(["Division by zero."], error_handler.messages)
        self.assertEqual(1, error_handler.diagnostics[0].line)

    def test_fault_restores_frames(self):
        error_handler = ErrorHandler(echo=False)
        output = []
        evaluator = Evaluator(error_handler, output.append)

        source = "var x = \"root\"; { var x = 1; { var x = 2; print -\"bad\"; } }"
        self.assertFalse(evaluator.interpret(parse(scan_tokens(source, error_handler), error_handler)))
        self.assertEqual(Environment.ROOT, evaluator.frame)
        self.assertEqual(1, len(evaluator.environment))

        # the next run starts in the root frame again
        self.assertTrue(evaluator.interpret(parse(scan_tokens("print x;", error_handler), error_handler)))
        self.assertEqual(["root"], output)

    def test_expression_statement(self):
        output, error_handler = run("1 + 2; \"discarded\";")
        self.assertEqual([], output)
        self.assertEqual([], error_handler.diagnostics)

    def test_built_statements(self):
        name = Token(TokenType.IDENTIFIER, "x", None, 1)
        statements = [Var(name, False, Literal(4.0)), Block((Print(Literal("in block")),))]
        output = []
        self.assertTrue(interpret(statements, ErrorHandler(echo=False), output.append))
        self.assertEqual(["in block"], output)


if __name__ == '__main__':
    unittest.main()
