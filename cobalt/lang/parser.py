"""Recursive descent parser for the Cobalt language.

Grammar, lowest to highest precedence:

```
<declaration> ::= <var_decl> | <statement>
<var_decl>    ::= "var" IDENTIFIER "?"? ( "=" <expression> )? ";"
<statement>   ::= "print" <expression> ";" | <block> | <expression> ";"
<block>       ::= "{" <declaration>* "}"
<expression>  ::= <assignment>
<assignment>  ::= <equality> ( "=" <assignment> )?            ; right-associative
<equality>    ::= <comparison> ( ( "!=" | "==" ) <comparison> )*
<comparison>  ::= <term> ( ( ">" | ">=" | "<" | "<=" ) <term> )*
<term>        ::= <factor> ( ( "+" | "-" ) <factor> )*
<factor>      ::= <unary> ( ( "*" | "/" ) <unary> )*
<unary>       ::= ( "!" | "-" ) <unary> | <primary>
<primary>     ::= NUMBER | STRING | "true" | "false" | "nil"
                | IDENTIFIER "?"? | "(" <expression> ")"
```

A malformed statement is reported and skipped up to the next statement boundary, so one pass reports every fault.
"""

from cobalt.lang.error import ParseError
from cobalt.lang.lexical import TokenType
from cobalt.lang.syntax import Assign, Binary, Block, Expression, Grouping, Literal, Print, Unary, Var, Variable

# tokens that begin a statement; synchronize stops in front of them
STATEMENT_STARTS = (
    TokenType.CLASS,
    TokenType.FUNC,
    TokenType.VAR,
    TokenType.FOR,
    TokenType.IF,
    TokenType.WHILE,
    TokenType.PRINT,
    TokenType.RETURN,
)


class Parser:
    """Turns a token list into a list of statements. Faults go to error_handler.

    declared maps names to whether they were declared nullable. It seeds the outermost scope and is updated in place,
    so a session can remember its declarations from one run to the next.
    """

    def __init__(self, tokens, error_handler, declared=None):
        self.tokens = tokens
        self.error_handler = error_handler
        self.current = 0

        self.scopes = [declared if declared is not None else {}]  # innermost last

    def parse(self):
        """Returns every statement that parsed cleanly."""
        statements = []
        while not self.is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)
        return statements

    def parse_expression(self):
        """Parses a single expression, without a trailing ";". Returns None if it is malformed."""
        try:
            expr = self.expression()
            self.consume(TokenType.EOF, "Expect end of expression.")
            return expr
        except ParseError:
            return None

    # ------------------------------------------------------------------------
    # statements
    # ------------------------------------------------------------------------

    def declaration(self):
        try:
            if self.match(TokenType.VAR):
                return self.var_declaration()
            return self.statement()
        except ParseError:
            self.synchronize()
            return None

    def var_declaration(self):
        name = self.consume(TokenType.IDENTIFIER, "Expect variable name.")
        nullable = self.match(TokenType.NULLABLE)

        initializer = None
        if self.match(TokenType.EQUAL):
            initializer = self.expression()

        self.consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        self.scopes[-1][name.lexeme] = nullable
        return Var(name, nullable, initializer)

    def statement(self):
        if self.match(TokenType.PRINT):
            return self.print_statement()
        if self.match(TokenType.LEFT_BRACE):
            return Block(tuple(self.block()))
        return self.expression_statement()

    def print_statement(self):
        value = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after value.")
        return Print(value)

    def expression_statement(self):
        expr = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return Expression(expr)

    def block(self):
        statements = []
        self.scopes.append({})
        try:
            while not self.check(TokenType.RIGHT_BRACE) and not self.is_at_end():
                stmt = self.declaration()
                if stmt is not None:
                    statements.append(stmt)
        finally:
            self.scopes.pop()

        self.consume(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    # ------------------------------------------------------------------------
    # expressions
    # ------------------------------------------------------------------------

    def expression(self):
        return self.assignment()

    def assignment(self):
        expr = self.equality()

        if self.match(TokenType.EQUAL):
            equals = self.previous()
            value = self.assignment()

            if isinstance(expr, Variable):
                if isinstance(value, Literal) and value.value is None and self.is_non_nullable(expr.name.lexeme):
                    self.error(equals, f"Cannot assign nil to non-nullable variable '{expr.name.lexeme}'.")
                return Assign(expr.name, value)

            # reported but not raised: the parser is not confused, only the program is wrong
            self.error(equals, "Invalid assignment target.")

        return expr

    def equality(self):
        return self.binary(self.comparison, TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)

    def comparison(self):
        return self.binary(
            self.term, TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.LESS, TokenType.LESS_EQUAL
        )

    def term(self):
        return self.binary(self.factor, TokenType.MINUS, TokenType.PLUS)

    def factor(self):
        return self.binary(self.unary, TokenType.SLASH, TokenType.STAR)

    def binary(self, operand, *operators):
        """Left-associative binary level: operand ( operator operand )* ."""
        expr = operand()
        while self.match(*operators):
            operator = self.previous()
            right = operand()
            expr = Binary(expr, operator, right)
        return expr

    def unary(self):
        if self.match(TokenType.BANG, TokenType.MINUS):
            operator = self.previous()
            return Unary(operator, self.unary())
        return self.primary()

    def primary(self):
        if self.match(TokenType.FALSE):
            return Literal(False)
        if self.match(TokenType.TRUE):
            return Literal(True)
        if self.match(TokenType.NIL):
            return Literal(None)

        if self.match(TokenType.NUMBER, TokenType.STRING):
            return Literal(self.previous().literal)

        if self.match(TokenType.IDENTIFIER):
            name = self.previous()
            return Variable(name, self.match(TokenType.NULLABLE))

        if self.match(TokenType.LEFT_PAREN):
            expr = self.expression()
            self.consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expr)

        raise self.error(self.peek(), "Expect expression.")

    # ------------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------------

    def is_non_nullable(self, name):
        """Whether the innermost declaration of name seen so far was non-nullable. Unknown names are left to runtime."""
        for scope in reversed(self.scopes):
            if name in scope:
                return not scope[name]
        return False

    def match(self, *types):
        """Consumes the current token if it has any of types."""
        for token_type in types:
            if self.check(token_type):
                self.advance()
                return True
        return False

    def consume(self, token_type, msg):
        if self.check(token_type):
            return self.advance()
        raise self.error(self.peek(), msg)

    def check(self, token_type):
        if self.is_at_end():
            return token_type is TokenType.EOF
        return self.peek().type is token_type

    def advance(self):
        if not self.is_at_end():
            self.current += 1
        return self.previous()

    def is_at_end(self):
        return self.peek().type is TokenType.EOF

    def peek(self):
        return self.tokens[self.current]

    def previous(self):
        return self.tokens[self.current - 1]

    def error(self, token, msg):
        """Reports msg at token and returns a ParseError for the caller to raise (or not)."""
        self.error_handler.error_at(token, msg)
        return ParseError(msg, token.line)

    def synchronize(self):
        """Discards tokens until just after a ";" or just before a token that starts a statement."""
        self.advance()

        while not self.is_at_end():
            if self.previous().type is TokenType.SEMICOLON:
                return
            if self.peek().type in STATEMENT_STARTS:
                return
            self.advance()


def parse(tokens, error_handler, declared=None):
    """Returns the statements in tokens. Faults go to error_handler."""
    return Parser(tokens, error_handler, declared).parse()
