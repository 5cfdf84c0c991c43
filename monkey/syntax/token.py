"""Token model for the monkey language: the alphabet produced by the lexer. Tokens carry no logic."""

from dataclasses import dataclass
from typing import Optional


class TokenKind:
    """Token kinds. Operators and delimiters use their own text as kind, so error messages can quote them as-is."""
    ILLEGAL = "ILLEGAL"
    EOF = "EOF"

    IDENT = "IDENT"
    INT = "INT"
    FLOAT = "FLOAT"
    STRING = "STRING"
    CHAR = "CHAR"

    ASSIGN = "="
    PLUS = "+"
    MINUS = "-"
    ASTERISK = "*"
    SLASH = "/"
    PERCENT = "%"
    POWER = "**"
    BANG = "!"

    EQ = "=="
    NOT_EQ = "!="
    LT = "<"
    GT = ">"
    LT_EQ = "<="
    GT_EQ = ">="

    AND = "&&"
    OR = "||"

    PLUS_ASSIGN = "+="
    MINUS_ASSIGN = "-="
    ASTERISK_ASSIGN = "*="
    SLASH_ASSIGN = "/="
    PERCENT_ASSIGN = "%="

    COMMA = ","
    SEMICOLON = ";"
    COLON = ":"
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    RBRACKET = "]"

    LET = "let"
    FUNCTION = "fn"
    IF = "if"
    ELSE = "else"
    RETURN = "return"
    TRUE = "true"
    FALSE = "false"
    NULL = "null"
    LOOP = "loop"
    CONTINUE = "continue"
    BREAK = "break"


KEYWORDS = {
    "let": TokenKind.LET,
    "fn": TokenKind.FUNCTION,
    "if": TokenKind.IF,
    "else": TokenKind.ELSE,
    "return": TokenKind.RETURN,
    "true": TokenKind.TRUE,
    "false": TokenKind.FALSE,
    "null": TokenKind.NULL,
    "loop": TokenKind.LOOP,
    "continue": TokenKind.CONTINUE,
    "break": TokenKind.BREAK,
}

RESERVED = (TokenKind.LOOP, TokenKind.CONTINUE, TokenKind.BREAK)

COMPOUND_ASSIGNMENTS = (TokenKind.PLUS_ASSIGN, TokenKind.MINUS_ASSIGN, TokenKind.ASTERISK_ASSIGN,
                        TokenKind.SLASH_ASSIGN, TokenKind.PERCENT_ASSIGN)

# longest match first: every two-character operator is tried before its one-character prefix
OPERATORS = sorted([
    TokenKind.ASSIGN, TokenKind.PLUS, TokenKind.MINUS, TokenKind.ASTERISK, TokenKind.SLASH, TokenKind.PERCENT,
    TokenKind.POWER, TokenKind.BANG, TokenKind.EQ, TokenKind.NOT_EQ, TokenKind.LT, TokenKind.GT, TokenKind.LT_EQ,
    TokenKind.GT_EQ, TokenKind.AND, TokenKind.OR, *COMPOUND_ASSIGNMENTS,
    TokenKind.COMMA, TokenKind.SEMICOLON, TokenKind.COLON, TokenKind.LPAREN, TokenKind.RPAREN, TokenKind.LBRACE,
    TokenKind.RBRACE, TokenKind.LBRACKET, TokenKind.RBRACKET,
], key=len, reverse=True)


def lookup_ident(literal):
    """Returns the keyword kind for literal, or IDENT."""
    return KEYWORDS.get(literal, TokenKind.IDENT)


@dataclass(frozen=True)
class Token:
    kind: str
    literal: str
    line: int = 0
    col: int = 0
    error: Optional[str] = None  # why the lexer gave up, for ILLEGAL tokens it can explain

    @property
    def position(self):
        return self.line, self.col

    def __str__(self):
        if self.kind in (TokenKind.IDENT, TokenKind.INT, TokenKind.FLOAT, TokenKind.ILLEGAL):
            return f"{self.kind}({self.literal})"
        if self.kind in (TokenKind.STRING, TokenKind.CHAR):
            return f"{self.kind}({self.literal!r})"
        return self.kind
