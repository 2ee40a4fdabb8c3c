"""Lexical analysis for the Cobalt language: turns a source string into a list of Tokens.

Lexical grammar, roughly:

```
<number>     ::= "0x" <hex>+ | "0b" <bin>+ | "0o" <oct>+     ; integer in the given radix
               | <digit>+ ( "." <digit>+ )?                   ; decimal, always stored as a float
<string>     ::= '"' <char>* '"'                              ; may span lines, no escape sequences
<identifier> ::= [A-Za-z_] [A-Za-z0-9_]*                      ; reclassified if found in KEYWORDS
<comment>    ::= "#" <char>*                                  ; runs to end of line
```

The lexer never stops on bad input: faults are handed to the error handler and scanning carries on.
"""

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    # single-character tokens
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    LEFT_BRACE = auto()
    RIGHT_BRACE = auto()
    COMMA = auto()
    DOT = auto()
    SEMICOLON = auto()
    MINUS = auto()
    PLUS = auto()
    SLASH = auto()
    STAR = auto()
    NULLABLE = auto()

    # one or two character tokens
    BANG = auto()
    BANG_EQUAL = auto()
    EQUAL = auto()
    EQUAL_EQUAL = auto()
    GREATER = auto()
    GREATER_EQUAL = auto()
    LESS = auto()
    LESS_EQUAL = auto()

    # literals
    IDENTIFIER = auto()
    STRING = auto()
    NUMBER = auto()

    # keywords
    AND = auto()
    CLASS = auto()
    ELSE = auto()
    FALSE = auto()
    FOR = auto()
    FUNC = auto()
    IF = auto()
    NIL = auto()
    OR = auto()
    PRINT = auto()
    RETURN = auto()
    SUPER = auto()
    THIS = auto()
    TRUE = auto()
    VAR = auto()
    WHILE = auto()

    EOF = auto()


KEYWORDS = {
    "and": TokenType.AND,
    "class": TokenType.CLASS,
    "else": TokenType.ELSE,
    "false": TokenType.FALSE,
    "for": TokenType.FOR,
    "func": TokenType.FUNC,
    "if": TokenType.IF,
    "nil": TokenType.NIL,
    "or": TokenType.OR,
    "print": TokenType.PRINT,
    "return": TokenType.RETURN,
    "super": TokenType.SUPER,
    "this": TokenType.THIS,
    "true": TokenType.TRUE,
    "var": TokenType.VAR,
    "while": TokenType.WHILE,
}

SINGLE_CHARS = {
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
    ";": TokenType.SEMICOLON,
    "-": TokenType.MINUS,
    "+": TokenType.PLUS,
    "/": TokenType.SLASH,
    "*": TokenType.STAR,
    "?": TokenType.NULLABLE,
}

# char: (type if followed by "=", type otherwise)
DOUBLE_CHARS = {
    "!": (TokenType.BANG_EQUAL, TokenType.BANG),
    "=": (TokenType.EQUAL_EQUAL, TokenType.EQUAL),
    "<": (TokenType.LESS_EQUAL, TokenType.LESS),
    ">": (TokenType.GREATER_EQUAL, TokenType.GREATER),
}

# prefix char: (radix, digits allowed, name used in error messages)
RADIXES = {
    "x": (16, "0123456789abcdefABCDEF", "hexadecimal"),
    "b": (2, "01", "binary"),
    "o": (8, "01234567", "octal"),
}


@dataclass(frozen=True)
class Token:
    """Smallest lexical unit. literal is the parsed value of NUMBER (float) and STRING (str) tokens, else None."""
    type: TokenType
    lexeme: str
    literal: object = None
    line: int = 1

    def __str__(self):
        if self.literal is not None:
            return f"{self.type.name} {self.lexeme} {self.literal}"
        return f"{self.type.name} {self.lexeme}"


class Lexer:
    """Single forward cursor over source. start marks the first char of the lexeme being scanned."""

    def __init__(self, source, error_handler):
        self.source = source
        self.error_handler = error_handler

        self.tokens = []
        self.start = 0
        self.current = 0
        self.line = 1

    def scan_tokens(self):
        """Scans the whole source and returns the tokens found, always terminated by a single EOF token."""
        while not self.is_at_end():
            self.start = self.current
            self.scan_token()

        self.tokens.append(Token(TokenType.EOF, "", None, self.line))
        return self.tokens

    def scan_token(self):
        char = self.advance()

        if char in SINGLE_CHARS:
            self.add_token(SINGLE_CHARS[char])
        elif char in DOUBLE_CHARS:
            with_equal, without = DOUBLE_CHARS[char]
            self.add_token(with_equal if self.match("=") else without)
        elif char == "#":
            while self.peek() != "\n" and not self.is_at_end():
                self.advance()
        elif char in " \r\t":
            pass
        elif char == "\n":
            self.line += 1
        elif char == "\"":
            self.string()
        elif self.is_digit(char):
            if char == "0" and self.peek() in RADIXES:
                self.radix_number()
            else:
                self.number()
        elif self.is_alpha(char):
            self.identifier()
        else:
            self.error_handler.error(self.line, f"Unexpected character '{char}'.")

    def string(self):
        while self.peek() != "\"" and not self.is_at_end():
            if self.peek() == "\n":
                self.line += 1
            self.advance()

        if self.is_at_end():
            self.error_handler.error(self.line, "Unterminated string.")
            return

        self.advance()  # closing "
        self.add_token(TokenType.STRING, self.source[self.start + 1:self.current - 1])

    def number(self):
        while self.is_digit(self.peek()):
            self.advance()

        # a "." only belongs to the number if a digit follows it
        if self.peek() == "." and self.is_digit(self.peek_next()):
            self.advance()
            while self.is_digit(self.peek()):
                self.advance()

        self.add_token(TokenType.NUMBER, float(self.source[self.start:self.current]))

    def radix_number(self):
        """Integer literal with a 0x/0b/0o prefix. The value is stored as a float like every other number."""
        prefix = self.advance()
        radix, digits, name = RADIXES[prefix]

        while self.peek() and self.peek() in digits:
            self.advance()

        text = self.source[self.start + 2:self.current]
        if not text:
            self.error_handler.error(self.line, f"Expected {name} digits after '0{prefix}'.")
            return

        self.add_token(TokenType.NUMBER, float(int(text, radix)))

    def identifier(self):
        while self.is_alpha(self.peek()) or self.is_digit(self.peek()):
            self.advance()

        text = self.source[self.start:self.current]
        self.add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))

    @staticmethod
    def is_digit(char):
        return "0" <= char <= "9"

    @staticmethod
    def is_alpha(char):
        """[A-Za-z_]. str.isalpha would also accept non-ASCII letters."""
        return char == "_" or ("a" <= char <= "z") or ("A" <= char <= "Z")

    def is_at_end(self):
        return self.current >= len(self.source)

    def advance(self):
        char = self.source[self.current]
        self.current += 1
        return char

    def match(self, expected):
        """Consumes the current char only if it is expected."""
        if self.is_at_end() or self.source[self.current] != expected:
            return False
        self.current += 1
        return True

    def peek(self):
        """Current char without consuming it, "" at end of input."""
        if self.is_at_end():
            return ""
        return self.source[self.current]

    def peek_next(self):
        if self.current + 1 >= len(self.source):
            return ""
        return self.source[self.current + 1]

    def add_token(self, token_type, literal=None):
        self.tokens.append(Token(token_type, self.source[self.start:self.current], literal, self.line))


def scan_tokens(source, error_handler):
    """Returns the tokens of source. Faults go to error_handler."""
    return Lexer(source, error_handler).scan_tokens()
