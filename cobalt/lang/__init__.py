"""Lexer, parser and evaluator of the Cobalt language, plus the session and shell that drive them."""
