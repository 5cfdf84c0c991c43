"""Monkey interpreter.

For reference:
- "Monkey": a small C-like language with integers, floats, strings, booleans, null, arrays, first-class functions and
  closures

Basic program flow:
    1. Lexer: turns source text into tokens (monkey/syntax/lexical.py, token kinds in monkey/syntax/token.py)
    2. Parser: a Pratt parser builds the AST (monkey/syntax/parser.py, nodes in monkey/syntax/ast.py)
        - Syntax errors are collected rather than raised, so one run reports all of them
    3. Evaluation: the AST is walked directly against a chain of environments (monkey/runtime/evaluator.py)
        - Runtime failures are Error values, not Python exceptions
    4. Front end: monkey/lang turns both kinds of failure into colored diagnostics, and runs files or the shell

"""

__version__ = "0.1.0"
