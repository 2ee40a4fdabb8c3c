"""Cobalt language interpreter.

Basic program flow:
    1. Lexer: turns source text into tokens, reporting (not stopping at) characters it cannot use
        - See cobalt/lang/lexical.py
    2. Parser: recursive descent over the tokens, producing a list of statements
        - For the grammar, see cobalt/lang/parser.py
        - Faulty statements are reported and skipped, and a script with any fault is not run
    3. Evaluator: walks the statements, keeping variables in a chain of scope frames
        - See cobalt/lang/evaluator.py and cobalt/lang/environment.py

"""
