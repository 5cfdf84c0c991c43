"""Pratt (top-down operator precedence) parser for the monkey language.

Every token kind that can start an expression has a prefix rule, and every token kind that can continue one has an
infix rule plus a binding precedence. parse_expression parses a prefix rule, then keeps folding infix rules into the
left operand while the next token binds tighter than the precedence it was called with.

Errors do not raise: they are collected in Parser.errors (with line:col positions), the offending statement is
dropped, and parsing resumes after the next ";". A Program produced with a non-empty error list must not be evaluated.
"""

from enum import IntEnum

from monkey.syntax import ast
from monkey.syntax.lexical import Lexer
from monkey.syntax.token import COMPOUND_ASSIGNMENTS, RESERVED, TokenKind


INT64_MAX = 2 ** 63 - 1


class Precedence(IntEnum):
    LOWEST = 1
    ASSIGN = 2       # += -= *= /= %=, reserved
    OR = 3           # ||
    AND = 4          # &&
    EQUALS = 5       # == !=
    LESSGREATER = 6  # < > <= >=
    SUM = 7          # + -
    PRODUCT = 8      # * / %
    POWER = 9        # **
    PREFIX = 10      # -x !x
    CALL = 11        # f(x) a[x]


PRECEDENCES = {
    **{kind: Precedence.ASSIGN for kind in COMPOUND_ASSIGNMENTS},
    TokenKind.OR: Precedence.OR,
    TokenKind.AND: Precedence.AND,
    TokenKind.EQ: Precedence.EQUALS,
    TokenKind.NOT_EQ: Precedence.EQUALS,
    TokenKind.LT: Precedence.LESSGREATER,
    TokenKind.GT: Precedence.LESSGREATER,
    TokenKind.LT_EQ: Precedence.LESSGREATER,
    TokenKind.GT_EQ: Precedence.LESSGREATER,
    TokenKind.PLUS: Precedence.SUM,
    TokenKind.MINUS: Precedence.SUM,
    TokenKind.ASTERISK: Precedence.PRODUCT,
    TokenKind.SLASH: Precedence.PRODUCT,
    TokenKind.PERCENT: Precedence.PRODUCT,
    TokenKind.POWER: Precedence.POWER,
    TokenKind.LPAREN: Precedence.CALL,
    TokenKind.LBRACKET: Precedence.CALL,
}

RIGHT_ASSOCIATIVE = {TokenKind.POWER}


class ParseError(Exception):
    """A syntax error at token. Raised internally to abandon the current statement and collected in Parser.errors; it
    never escapes Parser.
    """

    def __init__(self, token, msg):
        super().__init__(msg)
        self.token = token
        self.msg = msg

    @property
    def position(self):
        return self.token.position

    def __str__(self):
        return f"{self.token.line}:{self.token.col}: {self.msg}"


class Parser:
    """Parses the token stream of a Lexer into an ast.Program."""

    def __init__(self, lexer):
        if isinstance(lexer, str):
            lexer = Lexer(lexer)
        self.lexer = lexer
        self.errors = []
        self.block_depth = 0  # blocks entered and not yet closed

        self.cur_token = None
        self.peek_token = None
        self.next_token()
        self.next_token()

        self.prefix_rules = {
            TokenKind.IDENT: self.parse_identifier,
            TokenKind.INT: self.parse_integer_literal,
            TokenKind.FLOAT: self.parse_float_literal,
            TokenKind.STRING: self.parse_string_literal,
            TokenKind.CHAR: self.parse_character_literal,
            TokenKind.TRUE: self.parse_boolean_literal,
            TokenKind.FALSE: self.parse_boolean_literal,
            TokenKind.NULL: self.parse_null_literal,
            TokenKind.MINUS: self.parse_prefix_expression,
            TokenKind.BANG: self.parse_prefix_expression,
            TokenKind.LPAREN: self.parse_grouped_expression,
            TokenKind.IF: self.parse_if_expression,
            TokenKind.FUNCTION: self.parse_function_literal,
            TokenKind.LBRACKET: self.parse_array_literal,
        }

        self.infix_rules = {kind: self.parse_infix_expression for kind in PRECEDENCES}
        self.infix_rules.update({kind: self.parse_compound_assignment for kind in COMPOUND_ASSIGNMENTS})
        self.infix_rules[TokenKind.LPAREN] = self.parse_call_expression
        self.infix_rules[TokenKind.LBRACKET] = self.parse_index_expression

    # -----------------------------------------------------------------------------------------------------------------
    # token cursor

    def next_token(self):
        self.cur_token = self.peek_token
        self.peek_token = self.lexer.next_token()

    def cur_token_is(self, kind):
        return self.cur_token.kind == kind

    def peek_token_is(self, kind):
        return self.peek_token.kind == kind

    def peek_precedence(self):
        return PRECEDENCES.get(self.peek_token.kind, Precedence.LOWEST)

    def cur_precedence(self):
        return PRECEDENCES.get(self.cur_token.kind, Precedence.LOWEST)

    def error(self, token, msg):
        """Records an error at token and abandons the current statement."""
        error = ParseError(token, msg)
        self.errors.append(error)
        raise error

    def expect_peek(self, kind):
        """Advances if the next token is kind, otherwise records an error."""
        if not self.peek_token_is(kind):
            self.error(self.peek_token, f"expected '{kind}', got {describe(self.peek_token)}")
        self.next_token()

    def synchronize(self):
        """Skips tokens up to the end of the broken statement: a ";" outside any block, or the "}" closing the
        outermost block the error happened in (unless an "else" follows it).
        """
        depth = self.block_depth
        self.block_depth = 0
        while not self.cur_token_is(TokenKind.EOF):
            if self.cur_token_is(TokenKind.LBRACE):
                depth += 1
            elif self.cur_token_is(TokenKind.RBRACE) and depth > 0:
                depth -= 1
                if depth == 0 and not self.peek_token_is(TokenKind.ELSE):
                    return
            elif self.cur_token_is(TokenKind.SEMICOLON) and depth == 0:
                return
            self.next_token()

    # -----------------------------------------------------------------------------------------------------------------
    # statements

    def parse_program(self):
        statements = []
        while not self.cur_token_is(TokenKind.EOF):
            if not self.cur_token_is(TokenKind.SEMICOLON):
                try:
                    statements.append(self.parse_statement())
                except ParseError:
                    self.synchronize()
                    if self.cur_token_is(TokenKind.EOF):
                        break
            self.next_token()
        return ast.Program(statements)

    def parse_statement(self):
        if self.cur_token_is(TokenKind.LET):
            return self.parse_let_statement()
        if self.cur_token_is(TokenKind.RETURN):
            return self.parse_return_statement()
        return self.parse_expression_statement()

    def parse_let_statement(self):
        token = self.cur_token
        self.expect_peek(TokenKind.IDENT)
        name = ast.Identifier(self.cur_token.literal, self.cur_token)
        self.expect_peek(TokenKind.ASSIGN)
        self.next_token()

        value = self.parse_expression(Precedence.LOWEST)
        if self.peek_token_is(TokenKind.SEMICOLON):
            self.next_token()
        return ast.LetStatement(name, value, token)

    def parse_return_statement(self):
        token = self.cur_token
        if self.peek_token.kind in (TokenKind.SEMICOLON, TokenKind.RBRACE, TokenKind.EOF):
            if self.peek_token_is(TokenKind.SEMICOLON):
                self.next_token()
            return ast.ReturnStatement(None, token)

        self.next_token()
        value = self.parse_expression(Precedence.LOWEST)
        if self.peek_token_is(TokenKind.SEMICOLON):
            self.next_token()
        return ast.ReturnStatement(value, token)

    def parse_expression_statement(self):
        token = self.cur_token
        expression = self.parse_expression(Precedence.LOWEST)
        if self.peek_token_is(TokenKind.SEMICOLON):
            self.next_token()
        return ast.ExpressionStatement(expression, token)

    def parse_block_statement(self):
        """Parses { <statement>* }, cur_token on "{". Leaves cur_token on "}"."""
        token = self.cur_token
        statements = []
        self.block_depth += 1
        self.next_token()

        while not self.cur_token_is(TokenKind.RBRACE):
            if self.cur_token_is(TokenKind.EOF):
                self.error(self.cur_token, "expected '}', got end of input")
            if not self.cur_token_is(TokenKind.SEMICOLON):
                statements.append(self.parse_statement())
            self.next_token()
        self.block_depth -= 1
        return ast.BlockStatement(statements, token)

    # -----------------------------------------------------------------------------------------------------------------
    # expressions

    def parse_expression(self, precedence):
        prefix = self.prefix_rules.get(self.cur_token.kind)
        if prefix is None:
            self.no_prefix_rule()
        left = prefix()

        while not self.peek_token_is(TokenKind.SEMICOLON) and precedence < self.peek_precedence():
            infix = self.infix_rules.get(self.peek_token.kind)
            if infix is None:
                return left
            self.next_token()
            left = infix(left)
        return left

    def no_prefix_rule(self):
        token = self.cur_token
        if token.kind == TokenKind.ILLEGAL:
            if token.error is not None:
                self.error(token, token.error)
            self.error(token, f"illegal token '{token.literal}'")
        if token.kind in RESERVED:
            self.error(token, f"'{token.kind}' is a reserved keyword")
        if token.kind == TokenKind.EOF:
            self.error(token, "unexpected end of input")
        self.error(token, f"no prefix parse rule for {describe(token)}")

    def parse_identifier(self):
        return ast.Identifier(self.cur_token.literal, self.cur_token)

    def parse_integer_literal(self):
        value = int(self.cur_token.literal)
        if value > INT64_MAX:
            self.error(self.cur_token, f"integer literal '{self.cur_token.literal}' out of 64-bit range")
        return ast.IntegerLiteral(value, self.cur_token)

    def parse_float_literal(self):
        return ast.FloatLiteral(float(self.cur_token.literal), self.cur_token)

    def parse_string_literal(self):
        return ast.StringLiteral(self.cur_token.literal, self.cur_token)

    def parse_character_literal(self):
        return ast.CharacterLiteral(self.cur_token.literal, self.cur_token)

    def parse_boolean_literal(self):
        return ast.BooleanLiteral(self.cur_token_is(TokenKind.TRUE), self.cur_token)

    def parse_null_literal(self):
        return ast.NullLiteral(self.cur_token)

    def parse_prefix_expression(self):
        token = self.cur_token
        self.next_token()
        return ast.PrefixExpression(token.kind, self.parse_expression(Precedence.PREFIX), token)

    def parse_infix_expression(self, left):
        token = self.cur_token
        precedence = self.cur_precedence()
        if token.kind in RIGHT_ASSOCIATIVE:
            precedence -= 1  # lets an operator of the same precedence bind to the right first
        self.next_token()
        return ast.InfixExpression(left, token.kind, self.parse_expression(precedence), token)

    def parse_compound_assignment(self, left):
        self.error(self.cur_token, f"assignment operator '{self.cur_token.kind}' is not supported")

    def parse_grouped_expression(self):
        self.next_token()
        expression = self.parse_expression(Precedence.LOWEST)
        self.expect_peek(TokenKind.RPAREN)
        return expression

    def parse_if_expression(self):
        token = self.cur_token
        self.expect_peek(TokenKind.LPAREN)
        self.next_token()
        condition = self.parse_expression(Precedence.LOWEST)
        self.expect_peek(TokenKind.RPAREN)
        self.expect_peek(TokenKind.LBRACE)
        consequence = self.parse_block_statement()

        alternative = None
        if self.peek_token_is(TokenKind.ELSE):
            self.next_token()
            self.expect_peek(TokenKind.LBRACE)
            alternative = self.parse_block_statement()

        return ast.IfExpression(condition, consequence, alternative, token)

    def parse_function_literal(self):
        token = self.cur_token
        self.expect_peek(TokenKind.LPAREN)
        parameters = self.parse_list(TokenKind.RPAREN, self.parse_parameter)
        self.expect_peek(TokenKind.LBRACE)
        return ast.FunctionLiteral(parameters, self.parse_block_statement(), token)

    def parse_parameter(self):
        if not self.cur_token_is(TokenKind.IDENT):
            self.error(self.cur_token, f"expected parameter name, got {describe(self.cur_token)}")
        return self.parse_identifier()

    def parse_call_expression(self, function):
        token = self.cur_token
        arguments = self.parse_list(TokenKind.RPAREN, lambda: self.parse_expression(Precedence.LOWEST))
        return ast.CallExpression(function, arguments, token)

    def parse_array_literal(self):
        token = self.cur_token
        elements = self.parse_list(TokenKind.RBRACKET, lambda: self.parse_expression(Precedence.LOWEST))
        return ast.ArrayLiteral(elements, token)

    def parse_index_expression(self, left):
        token = self.cur_token
        if self.peek_token_is(TokenKind.RBRACKET):
            self.error(self.peek_token, "empty index expression")
        self.next_token()
        index = self.parse_expression(Precedence.LOWEST)
        self.expect_peek(TokenKind.RBRACKET)
        return ast.IndexExpression(left, index, token)

    def parse_list(self, end, parse_item):
        """Parses a comma-separated list up to end, cur_token on the opening delimiter. A trailing comma is allowed.
        Leaves cur_token on end.
        """
        items = []
        if self.peek_token_is(end):
            self.next_token()
            return items

        self.next_token()
        items.append(parse_item())
        while self.peek_token_is(TokenKind.COMMA):
            self.next_token()
            if self.peek_token_is(end):
                break
            self.next_token()
            items.append(parse_item())

        self.expect_peek(end)
        return items


def describe(token):
    if token.kind == TokenKind.EOF:
        return "end of input"
    return f"'{token.literal}'"


def parse(source):
    """Parses source, returning (program, errors)."""
    parser = Parser(Lexer(source))
    program = parser.parse_program()
    return program, parser.errors
