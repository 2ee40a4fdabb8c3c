"""Error handling for the Cobalt language. Only CobaltErrors should be encountered while a script runs: if another type
of error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Lexical and parse faults are reported and recovered from, so a single pass can surface several of them. Runtime faults
are reported by the evaluator and stop the statements that remain in that run.
"""

from dataclasses import dataclass

from termcolor import colored

from cobalt.lang.lexical import TokenType


class CobaltError(Exception):
    """Base class for every error the Cobalt pipeline raises on purpose."""

    def __init__(self, msg, line=None, internal=False):
        super().__init__(msg)
        self.msg = msg
        self.line = line
        self.internal = internal


class ParseError(CobaltError):
    """Unwinds the parser to its next statement boundary. Always reported before it is raised."""


class CobaltRuntimeError(CobaltError):
    """Fault detected while evaluating. token is the offending token and supplies the line."""

    def __init__(self, token, msg):
        super().__init__(msg, token.line)
        self.token = token


@dataclass(frozen=True)
class Diagnostic:
    """A single reported fault. kind is one of ErrorHandler.KINDS."""
    kind: str
    line: int
    where: str
    message: str

    def __str__(self):
        return f"[line {self.line}] {self.kind} error{self.where}: {self.message}"


class ErrorHandler:
    """Diagnostics sink threaded through the lexer, parser and evaluator. Every reported fault is kept in diagnostics;
    if echo, it is also printed as it arrives. Also a context manager that turns stray Python errors into Cobalt errors.
    """
    ERROR = "red"
    INTERNAL = "magenta"
    KINDS = ("lexical", "parse", "runtime", "session", "internal")

    def __init__(self, path="<in>", echo=True):
        self.path = path  # used for error messages
        self.echo = echo

        self.diagnostics = []
        self.had_error = False
        self.had_runtime_error = False

    def reset(self):
        """Clears error flags. Called between lines in command-line mode; diagnostics are kept."""
        self.had_error = False
        self.had_runtime_error = False

    def error(self, line, msg):
        """Reports a lexical fault at line."""
        self._report(Diagnostic("lexical", line, "", msg))
        self.had_error = True

    def error_at(self, token, msg):
        """Reports a parse fault at token."""
        where = " at end" if token.type is TokenType.EOF else f" at '{token.lexeme}'"
        self._report(Diagnostic("parse", token.line, where, msg))
        self.had_error = True

    def runtime_error(self, error):
        """Reports a CobaltRuntimeError."""
        self._report(Diagnostic("runtime", error.line, "", error.msg))
        self.had_runtime_error = True

    def throw(self, error):
        """Reports a CobaltError that was raised outside of the lexer, parser or evaluator (ex: unreadable file)."""
        kind = "internal" if error.internal else "session"
        self._report(Diagnostic(kind, error.line or 0, "", error.msg))
        self.had_error = True

    def _report(self, diagnostic):
        self.diagnostics.append(diagnostic)
        if self.echo:
            print(self.format(diagnostic))

    def format(self, diagnostic):
        """Returns diagnostic as 'path:line: error: message', colored."""
        error_msg = colored(f"{self.path}:{diagnostic.line}: ", attrs=["bold"])

        if diagnostic.kind == "internal":
            error_msg += colored("[internal] ", ErrorHandler.INTERNAL, attrs=["bold"])
        label = "runtime error" if diagnostic.kind == "runtime" else "error"
        error_msg += colored(f"{label}{diagnostic.where}: ", ErrorHandler.ERROR, attrs=["bold"])

        return error_msg + diagnostic.message

    @property
    def messages(self):
        """Messages of every diagnostic reported so far, in order."""
        return [diagnostic.message for diagnostic in self.diagnostics]

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None or exc_type is SystemExit:
            return False

        if exc_type is KeyboardInterrupt:
            self.throw(CobaltError("keyboard interrupt"))
        elif exc_type is RecursionError:
            self.throw(CobaltError("maximum nesting depth exceeded"))
        elif issubclass(exc_type, CobaltRuntimeError):
            self.runtime_error(exc_val)
        elif issubclass(exc_type, CobaltError):
            self.throw(exc_val)
        else:
            self.throw(CobaltError(f"unknown error: '{exc_type.__name__}: {exc_val}'", internal=True))
            return False

        return True
