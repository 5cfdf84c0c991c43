"""Lexing and parsing: source text to AST."""
