import io
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout

from atomic.lang.error import ErrorHandler, GenericException
from atomic.lang.session import Session


def run_source(source, debug=False):
    """Runs source in a fresh Session. Returns (session, stdout lines, stderr text)."""
    out, err = io.StringIO(), io.StringIO()
    with redirect_stdout(out), redirect_stderr(err):
        sess = Session(ErrorHandler(fatal=False), source=source, debug=debug)
        sess.run()
    return sess, out.getvalue().splitlines(), err.getvalue()


class SessionTestCase(unittest.TestCase):

    def test_end_to_end(self):
        sess, out, err = run_source("let x = 5\nadd x 3\nprint \"done\"")
        self.assertEqual(["Variable x set to 5", "5 + 3 = 8", "done"], out)
        self.assertEqual({"x": 5}, sess.environment)
        self.assertEqual("", err)

    def test_let_then_variable(self):
        sess, out, __ = run_source("let a = 7 let b = -2 multiply a b let a = 1 subtract a b")
        self.assertEqual(["Variable a set to 7", "Variable b set to -2", "7 * -2 = -14", "Variable a set to 1",
                          "1 - -2 = 3"], out)
        self.assertEqual({"a": 1, "b": -2}, sess.environment)

    def test_literal_arithmetic(self):
        cases = {
            "add 2 3": "2 + 3 = 5",
            "subtract 2 3": "2 - 3 = -1",
            "multiply 65536 65536": "65536 * 65536 = 0",
            "divide 7 -2": "7 / -2 = -3",
            "divide -2147483648 -1": "-2147483648 / -1 = -2147483648",
            "mod 7 -2": "7 % -2 = 1",
            "add 2147483647 2147483647": "2147483647 + 2147483647 = -2",
        }
        for case, expected in cases.items():
            __, out, __ = run_source(case)
            self.assertEqual([expected], out, case)

    def test_division_by_zero(self):
        sess, out, err = run_source("divide 10 0")
        self.assertEqual([], out)
        self.assertEqual(1, err.count("Division by zero"))
        self.assertEqual(["Division by zero"], [error.msg for error in sess.diagnostics])
        self.assertEqual(GenericException.RUNTIME, sess.diagnostics[0].label)

    def test_execution_continues_after_runtime_error(self):
        sess, out, err = run_source("mod 4 0\ndivide 4 nothing\nadd 1 1")
        self.assertEqual(["1 + 1 = 2"], out)
        self.assertEqual(["Modulus by zero", "Division by zero"], [error.msg for error in sess.diagnostics])
        self.assertEqual([1, 2], [error.line_num for error in sess.diagnostics])

    def test_undefined_variable(self):
        sess, out, err = run_source("add ghost 1")
        self.assertEqual(["0 + 1 = 1"], out)
        self.assertEqual("", err)
        self.assertNotIn("ghost", sess.environment)

    def test_multiword_string(self):
        __, out, __ = run_source("print \"hello world\"")
        self.assertEqual(["hello world"], out)

    def test_single_word_string_runs_on(self):
        sess, out, err = run_source("print \"a\"\nprint \"b\"\nadd 1 2")
        self.assertEqual(["a\" print \"b", "1 + 2 = 3"], out)
        self.assertEqual(2, len(sess.program))
        self.assertEqual("", err)

    def test_malformed_let(self):
        sess, out, err = run_source("let y\nprint \"still here\"\nadd 1 2")
        self.assertEqual(["still here", "1 + 2 = 3"], out)
        self.assertEqual(0, len(sess.environment))
        self.assertTrue(sess.diagnostics)
        self.assertTrue(all(error.label == GenericException.SYNTAX for error in sess.diagnostics))
        self.assertIn("invalid variable assignment syntax", err)

    def test_debug_dumps(self):
        __, out, __ = run_source("let x = 5 add x 3", debug=True)
        self.assertEqual(["Tokens: [Let, Identifier(\"x\"), Number(5), Add, Identifier(\"x\"), Number(3)]",
                          "AST: [Let(\"x\", 5), Add(Variable(\"x\"), Number(3))]",
                          "Variable x set to 5",
                          "5 + 3 = 8"], out)

    def test_read_file(self):
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, "script.atomic")
            with open(path, "w") as file:
                file.write("let n = 3\nmultiply n n\n")

            sess = Session(ErrorHandler(fatal=False), path, debug=False)
            self.assertEqual(path, sess.error_handler.path)

            out = io.StringIO()
            with redirect_stdout(out):
                sess.run()
            self.assertEqual(["Variable n set to 3", "3 * 3 = 9"], out.getvalue().splitlines())

    def test_unreadable_file(self):
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, "missing.atomic")
            self.assertRaises(GenericException, Session, ErrorHandler(fatal=False), path)


if __name__ == '__main__':
    unittest.main()
