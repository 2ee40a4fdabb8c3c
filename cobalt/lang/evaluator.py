"""Tree-walking evaluator for the Cobalt language.

Statements are executed in order against a chain of scope frames (see environment.py). A CobaltRuntimeError stops the
statements left in the current interpret call and is reported to the error handler; statements that already ran keep
their effects.
"""

import math

from cobalt.lang import values
from cobalt.lang.environment import NIL_TO_NON_NULLABLE, Environment
from cobalt.lang.error import CobaltError, CobaltRuntimeError
from cobalt.lang.lexical import TokenType
from cobalt.lang.syntax import Assign, Binary, Block, Expression, Grouping, Literal, Print, Unary, Var, Variable

COMPARISONS = {
    TokenType.GREATER: lambda left, right: left > right,
    TokenType.GREATER_EQUAL: lambda left, right: left >= right,
    TokenType.LESS: lambda left, right: left < right,
    TokenType.LESS_EQUAL: lambda left, right: left <= right,
}


class Evaluator:
    """Runs statements. output receives one rendered line per executed print statement."""

    def __init__(self, error_handler, output=print):
        self.error_handler = error_handler
        self.output = output

        self.environment = Environment()
        self.frame = Environment.ROOT  # index of the innermost live frame

    def interpret(self, statements):
        """Executes statements in order. Returns False if a runtime fault stopped them, True otherwise."""
        try:
            for stmt in statements:
                self.execute(stmt)
        except CobaltRuntimeError as error:
            self.error_handler.runtime_error(error)
            return False
        return True

    # ------------------------------------------------------------------------
    # statements
    # ------------------------------------------------------------------------

    def execute(self, stmt):
        if isinstance(stmt, Expression):
            self.evaluate(stmt.expression)

        elif isinstance(stmt, Print):
            self.output(values.stringify(self.evaluate(stmt.expression)))

        elif isinstance(stmt, Var):
            value = None if stmt.initializer is None else self.evaluate(stmt.initializer)
            if value is None and not stmt.nullable:
                raise CobaltRuntimeError(stmt.name, NIL_TO_NON_NULLABLE)
            self.environment.define(self.frame, stmt.name.lexeme, value, stmt.nullable)

        elif isinstance(stmt, Block):
            self.execute_block(stmt.statements, self.environment.push(self.frame))

        else:
            raise CobaltError(f"unknown statement '{type(stmt).__name__}'", internal=True)

    def execute_block(self, statements, frame):
        """Executes statements in frame, then restores the previous frame whether or not they faulted."""
        previous = self.frame
        try:
            self.frame = frame
            for stmt in statements:
                self.execute(stmt)
        finally:
            self.frame = previous
            self.environment.release(frame)

    # ------------------------------------------------------------------------
    # expressions
    # ------------------------------------------------------------------------

    def evaluate(self, expr):
        """Returns the value of expr. Raises CobaltRuntimeError on a fault."""
        if isinstance(expr, Literal):
            return expr.value

        if isinstance(expr, Grouping):
            return self.evaluate(expr.expression)

        if isinstance(expr, Variable):
            return self.environment.get(self.frame, expr.name)

        if isinstance(expr, Assign):
            value = self.evaluate(expr.value)
            self.environment.assign(self.frame, expr.name, value)
            return value

        if isinstance(expr, Unary):
            return self.unary(expr.operator, self.evaluate(expr.right))

        if isinstance(expr, Binary):
            left = self.evaluate(expr.left)
            right = self.evaluate(expr.right)
            return self.binary(expr.operator, left, right)

        raise CobaltError(f"unknown expression '{type(expr).__name__}'", internal=True)

    @staticmethod
    def unary(operator, right):
        if operator.type is TokenType.BANG:
            return not values.is_truthy(right)

        # TokenType.MINUS
        if not values.is_number(right):
            raise CobaltRuntimeError(operator, "Operand must be a number.")
        return -right

    def binary(self, operator, left, right):
        op = operator.type

        if op is TokenType.EQUAL_EQUAL:
            return self.equal(operator, left, right)
        if op is TokenType.BANG_EQUAL:
            return not self.equal(operator, left, right)
        if op in COMPARISONS:
            return self.compare(operator, left, right)
        if op is TokenType.PLUS:
            return self.add(operator, left, right)
        if op is TokenType.STAR:
            return self.multiply(operator, left, right)

        # TokenType.MINUS, TokenType.SLASH
        if not (values.is_number(left) and values.is_number(right)):
            raise CobaltRuntimeError(operator, "Operands must be numbers.")
        if op is TokenType.MINUS:
            return left - right
        if right == 0:
            raise CobaltRuntimeError(operator, "Division by zero.")
        return left / right

    @staticmethod
    def check_comparable(operator, left, right):
        """Comparison operands are two numbers or a number and a string."""
        if values.is_number(left) and values.is_number(right):
            return
        if (values.is_number(left) and values.is_string(right)) or \
                (values.is_string(left) and values.is_number(right)):
            return
        raise CobaltRuntimeError(operator, "Operands must be numbers or a number and a string.")

    @staticmethod
    def equal(operator, left, right):
        """nil equals only nil; otherwise the operands must be comparable. A number never equals a string."""
        if left is None or right is None:
            return values.is_equal(left, right)

        Evaluator.check_comparable(operator, left, right)
        return values.is_equal(left, right)

    @staticmethod
    def compare(operator, left, right):
        """Numbers compare numerically; a number against a string compares its rendering as text."""
        Evaluator.check_comparable(operator, left, right)

        if values.is_number(left) and values.is_number(right):
            return COMPARISONS[operator.type](left, right)
        return COMPARISONS[operator.type](values.as_text(left), values.as_text(right))

    @staticmethod
    def add(operator, left, right):
        if values.is_number(left) and values.is_number(right):
            return left + right

        # string + string, string + number and number + string all concatenate
        if (values.is_string(left) or values.is_number(left)) and \
                (values.is_string(right) or values.is_number(right)):
            return values.as_text(left) + values.as_text(right)

        raise CobaltRuntimeError(operator, "Operands must be two numbers, two strings or a string and a number.")

    @staticmethod
    def multiply(operator, left, right):
        if values.is_number(left) and values.is_number(right):
            return left * right

        if values.is_string(left) and values.is_number(right):
            text, count = left, right
        elif values.is_number(left) and values.is_string(right):
            text, count = right, left
        else:
            raise CobaltRuntimeError(operator, "Operands must be numbers or a string and a number.")

        if count < 0 or not math.isfinite(count):
            raise CobaltRuntimeError(operator, "Repetition count must be non-negative.")
        if len(text) * math.floor(count) > values.MAX_REPEAT_LENGTH:
            raise CobaltRuntimeError(operator, "Repetition result too large.")
        return values.repeat(text, count)


def interpret(statements, error_handler, output=print):
    """Runs statements in a fresh evaluator. Returns False if a runtime fault stopped them."""
    return Evaluator(error_handler, output).interpret(statements)
