"""Session control for the Cobalt language. Runs source text through the lexer, parser and evaluator, either from a
file or one line at a time in command-line mode.
"""

from cobalt.lang.environment import Environment
from cobalt.lang.error import CobaltError
from cobalt.lang.evaluator import Evaluator
from cobalt.lang.lexical import scan_tokens
from cobalt.lang.parser import Parser


class Session:
    """Governs a Cobalt session. Variables declared at top level survive between runs."""
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, path=SH_FILE, output=print):
        self.error_handler = error_handler
        self.path = path  # used for error messages

        self.evaluator = Evaluator(error_handler, output)

    @property
    def declared(self):
        """name: nullable for every variable live in the global scope. A fresh dict, so parsing never changes it."""
        environment = self.evaluator.environment
        return {name: environment.is_nullable(Environment.ROOT, name)
                for name in environment.frames[Environment.ROOT].bindings}

    def run(self, source):
        """Runs source. Nothing is evaluated if a lexical or parse fault is reported. Returns whether it ran cleanly."""
        statements = self.parse(source)
        if statements is None:
            return False
        return self.evaluator.interpret(statements)

    def run_file(self, path=None):
        """Reads and runs the file at path (self.path by default)."""
        return self.run(Session.read(path or self.path))

    @staticmethod
    def read(path):
        """Contents of the file at path."""
        try:
            with open(path, "r") as file:
                return file.read()
        except OSError:
            raise CobaltError(f"'{path}' could not be opened")

    def parse(self, source):
        """Statements in source, or None if any lexical or parse fault was reported."""
        errors_before = len(self.error_handler.diagnostics)

        tokens = scan_tokens(source, self.error_handler)
        statements = Parser(tokens, self.error_handler, self.declared).parse()

        if len(self.error_handler.diagnostics) > errors_before:
            return None
        return statements

    def tokens(self, source):
        """Tokens of source, faulty or not. Used by --tokens."""
        return scan_tokens(source, self.error_handler)

    def syntax_tree(self, source):
        """Statements of source that parsed cleanly. Used by --ast."""
        return Parser(scan_tokens(source, self.error_handler), self.error_handler, self.declared).parse()

    def evaluate(self, source):
        """Value of the single expression in source (no trailing ";"). Raises CobaltRuntimeError on a fault, and
        CobaltError if source does not parse.
        """
        errors_before = len(self.error_handler.diagnostics)

        tokens = scan_tokens(source, self.error_handler)
        expr = Parser(tokens, self.error_handler, self.declared).parse_expression()

        if expr is None or len(self.error_handler.diagnostics) > errors_before:
            raise CobaltError(f"'{source}' is not a valid expression")
        return self.evaluator.evaluate(expr)
