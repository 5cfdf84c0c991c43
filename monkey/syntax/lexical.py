"""Lexical analysis for the monkey language. Turns source text into a lazy stream of Tokens.

Lexical grammar, loosely:

```
<ident>   ::= [A-Za-z_] [A-Za-z0-9_]*        ; keywords are identifiers found in token.KEYWORDS
<int>     ::= [0-9]+
<float>   ::= [0-9]+ "." [0-9]*               ; exactly one "."; "1.2.3" is illegal
<string>  ::= '"' (<char> | "\" <char>)* '"'  ; \n \t \r \0 \\ \" \' are decoded
<charlit> ::= "'" (<char> | "\" <char>) "'"  ; exactly one codepoint, same escapes
<comment> ::= "//" <char>*                    ; runs to end of line
```

The lexer never raises: anything it cannot make sense of becomes an ILLEGAL token, and it is up to the parser to
reject it.
"""

from monkey.syntax.token import OPERATORS, Token, TokenKind, lookup_ident


ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "0": "\0", "\\": "\\", "\"": "\"", "'": "'"}

UNTERMINATED_STRING = "unterminated string literal"
UNTERMINATED_CHAR = "unexpected end of a character literal"
LONG_CHAR = "character literal can contain only one character"


def is_letter(char):
    return char is not None and (char == "_" or ("a" <= char <= "z") or ("A" <= char <= "Z"))


def is_digit(char):
    return char is not None and "0" <= char <= "9"


class Lexer:
    """Single-pass lexer with a read cursor and one character of lookahead. Not resumable: to lex the same text again,
    build a new Lexer.
    """

    def __init__(self, source):
        self.source = source
        self.position = 0  # index of self.char
        self.line = 1
        self.col = 1
        self.done = False

    @property
    def char(self):
        return self.source[self.position] if self.position < len(self.source) else None

    def peek_char(self):
        return self.source[self.position + 1] if self.position + 1 < len(self.source) else None

    def read_char(self):
        if self.char == "\n":
            self.line += 1
            self.col = 1
        else:
            self.col += 1
        self.position += 1

    def skip_whitespace(self):
        """Skips whitespace and // comments."""
        while self.char is not None:
            if self.char.isspace():
                self.read_char()
            elif self.char == "/" and self.peek_char() == "/":
                while self.char is not None and self.char != "\n":
                    self.read_char()
            else:
                break

    def next_token(self):
        """Returns the next Token. Once EOF has been returned, keeps returning EOF."""
        self.skip_whitespace()
        line, col = self.line, self.col

        if self.char is None:
            self.done = True
            return Token(TokenKind.EOF, "", line, col)

        if is_letter(self.char):
            literal = self._read_while(lambda char: is_letter(char) or is_digit(char))
            return Token(lookup_ident(literal), literal, line, col)

        if is_digit(self.char):
            literal = self._read_while(lambda char: is_digit(char) or char == ".")
            dots = literal.count(".")
            kind = TokenKind.INT if dots == 0 else TokenKind.FLOAT if dots == 1 else TokenKind.ILLEGAL
            return Token(kind, literal, line, col)

        if self.char == "\"":
            return self._read_string(line, col)

        if self.char == "'":
            return self._read_character(line, col)

        for operator in OPERATORS:
            if self.source.startswith(operator, self.position):
                for __ in operator:
                    self.read_char()
                return Token(operator, operator, line, col)

        illegal = self.char
        self.read_char()
        return Token(TokenKind.ILLEGAL, illegal, line, col)

    def _read_while(self, predicate):
        start = self.position
        while self.char is not None and predicate(self.char):
            self.read_char()
        return self.source[start:self.position]

    def _read_string(self, line, col):
        """Reads a string literal, cursor on the opening quote. An unterminated string becomes an ILLEGAL token holding
        everything read so far (opening quote included), so the parser can point at it.
        """
        self.read_char()
        chars = []
        while True:
            if self.char is None:
                return Token(TokenKind.ILLEGAL, "\"" + "".join(chars), line, col, UNTERMINATED_STRING)
            if self.char == "\"":
                self.read_char()
                return Token(TokenKind.STRING, "".join(chars), line, col)
            if self.char == "\\":
                self.read_char()
                if self.char is None:
                    return Token(TokenKind.ILLEGAL, "\"" + "".join(chars), line, col, UNTERMINATED_STRING)
                chars.append(ESCAPES.get(self.char, self.char))
            else:
                chars.append(self.char)
            self.read_char()

    def _read_character(self, line, col):
        """Reads a character literal, cursor on the opening quote. A malformed literal becomes an ILLEGAL token holding
        its source text. One holding several characters is skipped up to its closing quote on the same line.
        """
        start = self.position
        self.read_char()
        if self.char is None or self.char in "'\n":
            if self.char == "'":
                self.read_char()
            return Token(TokenKind.ILLEGAL, self.source[start:self.position], line, col, UNTERMINATED_CHAR)

        if self.char == "\\":
            self.read_char()
            if self.char is None:
                return Token(TokenKind.ILLEGAL, self.source[start:self.position], line, col, UNTERMINATED_CHAR)
            value = ESCAPES.get(self.char, self.char)
        else:
            value = self.char
        self.read_char()

        if self.char is None or self.char == "\n":
            return Token(TokenKind.ILLEGAL, self.source[start:self.position], line, col, UNTERMINATED_CHAR)
        if self.char != "'":
            while self.char is not None and self.char not in "'\n":
                self.read_char()
            if self.char == "'":
                self.read_char()
            return Token(TokenKind.ILLEGAL, self.source[start:self.position], line, col, LONG_CHAR)

        self.read_char()
        return Token(TokenKind.CHAR, value, line, col)

    def __iter__(self):
        """Yields tokens lazily, EOF included as the last one."""
        while not self.done:
            yield self.next_token()


def tokenize(source):
    """Returns the full token list of source, ending with EOF."""
    return list(Lexer(source))
